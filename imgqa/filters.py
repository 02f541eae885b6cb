"""3x3 operators over the interior of a luminance plane."""
from __future__ import annotations

import numpy as np


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def has_interior(luma: np.ndarray) -> bool:
    return luma.shape[0] >= 3 and luma.shape[1] >= 3


def _shifted(luma: np.ndarray, dy: int, dx: int) -> np.ndarray:
    height, width = luma.shape
    return luma[1 + dy : height - 1 + dy, 1 + dx : width - 1 + dx]


def laplacian(luma: np.ndarray) -> np.ndarray:
    """Response of the [0,-1,0; -1,4,-1; 0,-1,0] kernel."""
    if not has_interior(luma):
        return np.zeros((0, 0), dtype=np.float64)
    return (
        4.0 * _shifted(luma, 0, 0)
        - _shifted(luma, -1, 0)
        - _shifted(luma, 1, 0)
        - _shifted(luma, 0, -1)
        - _shifted(luma, 0, 1)
    )


def sobel_magnitude(luma: np.ndarray) -> np.ndarray:
    if not has_interior(luma):
        return np.zeros((0, 0), dtype=np.float64)
    tl, tc, tr = _shifted(luma, -1, -1), _shifted(luma, -1, 0), _shifted(luma, -1, 1)
    ml, mr = _shifted(luma, 0, -1), _shifted(luma, 0, 1)
    bl, bc, br = _shifted(luma, 1, -1), _shifted(luma, 1, 0), _shifted(luma, 1, 1)
    gx = (tr + 2.0 * mr + br) - (tl + 2.0 * ml + bl)
    gy = (bl + 2.0 * bc + br) - (tl + 2.0 * tc + tr)
    return np.sqrt(gx * gx + gy * gy)


def forward_gradient(luma: np.ndarray) -> np.ndarray:
    """Magnitude of the right/down forward differences at each interior pixel."""
    if not has_interior(luma):
        return np.zeros((0, 0), dtype=np.float64)
    center = _shifted(luma, 0, 0)
    grad_x = np.abs(_shifted(luma, 0, 1) - center)
    grad_y = np.abs(_shifted(luma, 1, 0) - center)
    return np.sqrt(grad_x * grad_x + grad_y * grad_y)


def directional_difference(luma: np.ndarray, dx: int, dy: int) -> float:
    """Mean |L(x+dx, y+dy) - L(x, y)| over interior pixels."""
    if not has_interior(luma):
        return 0.0
    diff = np.abs(_shifted(luma, dy, dx) - _shifted(luma, 0, 0))
    return float(np.mean(diff))


def neighbourhood_spread(luma: np.ndarray) -> np.ndarray:
    """Mean squared deviation of the 3x3 neighbourhood from its centre sample."""
    if not has_interior(luma):
        return np.zeros((0, 0), dtype=np.float64)
    center = _shifted(luma, 0, 0)
    total = np.zeros_like(center)
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            delta = _shifted(luma, dy, dx) - center
            total += delta * delta
    return total / 9.0
