from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from .buffer import PixelBuffer
from .filters import laplacian, neighbourhood_spread

log = logging.getLogger(__name__)


@dataclass
class Metrics:
    sharpness: float
    contrast: float
    brightness: float
    saturation: float
    noise: float


def _saturation(rgb: np.ndarray) -> float:
    channel_max = rgb.max(axis=2)
    channel_min = rgb.min(axis=2)
    sat = np.zeros_like(channel_max)
    nonzero = channel_max > 0
    sat[nonzero] = (channel_max[nonzero] - channel_min[nonzero]) / channel_max[nonzero]
    return float(np.mean(sat))


def compute_metrics(buffer: PixelBuffer) -> Metrics:
    pixel_count = buffer.pixel_count
    rgb = buffer.rgb()
    luma = buffer.luminance()

    mean_luma = float(np.mean(luma))
    std_luma = float(np.sqrt(np.mean((luma - mean_luma) ** 2)))

    # Both sums are normalized by the full pixel count and saturate quickly on
    # real photos; the raw sums carry the signal.
    sharpness_sum = float(np.sum(np.abs(laplacian(luma))))
    noise_sum = float(np.sum(neighbourhood_spread(luma)))

    metrics = Metrics(
        sharpness=min(sharpness_sum / pixel_count, 1.0),
        contrast=min(std_luma / 255.0, 1.0),
        brightness=min(mean_luma / 255.0, 1.0),
        saturation=_saturation(rgb),
        noise=min(noise_sum / pixel_count, 1.0),
    )
    log.debug(
        "metrics %dx%d: sharpness=%.3f contrast=%.3f brightness=%.3f saturation=%.3f noise=%.3f",
        buffer.width,
        buffer.height,
        metrics.sharpness,
        metrics.contrast,
        metrics.brightness,
        metrics.saturation,
        metrics.noise,
    )
    return metrics
