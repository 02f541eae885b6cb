from __future__ import annotations

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    # Run the metrics, blur and exposure engines on worker threads.
    parallel_engines: bool = _env_flag("IMGQA_PARALLEL_ENGINES", "1")
    fetch_timeout: float = float(os.getenv("IMGQA_FETCH_TIMEOUT", "15"))
    # Decoded images above this pixel count are downscaled before analysis.
    max_pixels: int = int(os.getenv("IMGQA_MAX_PIXELS", "4000000"))
    log_level: str = os.getenv("IMGQA_LOG_LEVEL", "INFO").upper()


settings = Settings()
