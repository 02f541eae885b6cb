from __future__ import annotations

import numbers
from dataclasses import dataclass

import numpy as np

from .errors import MalformedBuffer

CHANNELS = 4


@dataclass(frozen=True)
class PixelBuffer:
    """Decoded RGBA image, row-major, top to bottom."""

    width: int
    height: int
    pixels: bytes

    def __post_init__(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise MalformedBuffer("buffer dimensions must be integers")
            object.__setattr__(self, name, int(value))
        if self.width <= 0 or self.height <= 0:
            raise MalformedBuffer(f"non-positive dimensions {self.width}x{self.height}")
        if not isinstance(self.pixels, bytes):
            object.__setattr__(self, "pixels", bytes(self.pixels))
        expected = self.width * self.height * CHANNELS
        if len(self.pixels) != expected:
            raise MalformedBuffer(
                f"expected {expected} bytes for {self.width}x{self.height} RGBA, got {len(self.pixels)}"
            )

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """Build a buffer from an HxWx3 (RGB) or HxWx4 (RGBA) uint8 array."""
        arr = np.asarray(array)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise MalformedBuffer(f"expected HxWx3 or HxWx4 array, got shape {arr.shape}")
        if arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr.astype(np.uint8), alpha], axis=2)
        height, width = arr.shape[:2]
        return cls(width=int(width), height=int(height), pixels=arr.astype(np.uint8).tobytes())

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def rgba(self) -> np.ndarray:
        # Read-only view; np.frombuffer over bytes cannot be written to.
        return np.frombuffer(self.pixels, dtype=np.uint8).reshape(self.height, self.width, CHANNELS)

    def rgb(self) -> np.ndarray:
        return self.rgba()[:, :, :3].astype(np.float64)

    def luminance(self) -> np.ndarray:
        rgb = self.rgb()
        # ITU-R BT.601 luma, same weights in every engine
        return 0.299 * rgb[:, :, 0] + 0.587 * rgb[:, :, 1] + 0.114 * rgb[:, :, 2]
