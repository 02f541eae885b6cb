from __future__ import annotations

from typing import Tuple

import numpy as np
from PIL import Image

from imgqa.buffer import PixelBuffer
from imgqa.decode import buffer_from_image

RGB = Tuple[int, int, int]


def solid(width: int, height: int, color: RGB = (128, 128, 128)) -> PixelBuffer:
    return buffer_from_image(Image.new("RGB", (width, height), color=color))


def checkerboard_image(width: int, height: int, cell: int = 8, light: RGB = (230, 230, 230), dark: RGB = (25, 25, 25)) -> Image.Image:
    image = Image.new("RGB", (width, height), color=dark)
    px = image.load()
    for y in range(height):
        for x in range(width):
            if (x // cell + y // cell) % 2 == 0:
                px[x, y] = light
    return image


def checkerboard(width: int, height: int, cell: int = 8) -> PixelBuffer:
    return buffer_from_image(checkerboard_image(width, height, cell))


def split(width: int, height: int, left: RGB, right: RGB) -> PixelBuffer:
    arr = np.zeros((height, width, 3), dtype=np.uint8)
    arr[:, : width // 2] = left
    arr[:, width // 2 :] = right
    return PixelBuffer.from_array(arr)


def spike(width: int, height: int, background: int, peak: int, at: Tuple[int, int]) -> PixelBuffer:
    arr = np.full((height, width, 3), background, dtype=np.uint8)
    x, y = at
    arr[y, x] = peak
    return PixelBuffer.from_array(arr)


def noise(width: int, height: int, seed: int = 7) -> PixelBuffer:
    rng = np.random.default_rng(seed)
    return PixelBuffer.from_array(rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8))
