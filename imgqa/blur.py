from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Literal

import numpy as np

from .buffer import PixelBuffer
from .filters import clamp, directional_difference, forward_gradient, has_interior, laplacian, sobel_magnitude

log = logging.getLogger(__name__)

BlurType = Literal["motion", "focus", "gaussian", "none"]
RegionType = Literal["motion", "focus", "gaussian"]

LAPLACIAN_NORM = 1000.0
SOBEL_NORM = 100.0
HIGH_FREQ_THRESHOLD = 10.0

SHARP_SCORE = 0.7
FOCUS_SCORE = 0.3
MOTION_RATIO = 1.5

BLOCK_SIZE = 32
BLOCK_BLUR_VARIANCE = 500.0
BLOCK_FOCUS_VARIANCE = 200.0


@dataclass(frozen=True)
class BlurRegion:
    x: int
    y: int
    width: int
    height: int
    blur_score: float
    type: RegionType


@dataclass
class BlurAnalysis:
    overall_blur_score: float
    blur_type: BlurType
    blur_regions: List[BlurRegion] = field(default_factory=list)
    confidence: float = 0.8


def laplacian_variance(luma: np.ndarray) -> float:
    response = np.abs(laplacian(luma))
    if response.size == 0:
        return 0.0
    return float(np.var(response))


def sobel_mean(luma: np.ndarray) -> float:
    magnitude = sobel_magnitude(luma)
    if magnitude.size == 0:
        return 0.0
    return float(np.mean(magnitude))


def high_frequency_ratio(luma: np.ndarray) -> float:
    gradient = forward_gradient(luma)
    total = float(np.sum(gradient))
    if total <= 0:
        return 0.0
    return float(np.sum(gradient[gradient > HIGH_FREQ_THRESHOLD])) / total


def combine_blur_scores(laplacian_var: float, sobel: float, energy_ratio: float) -> float:
    norm_laplacian = clamp(laplacian_var / LAPLACIAN_NORM, 0.0, 1.0)
    norm_sobel = clamp(sobel / SOBEL_NORM, 0.0, 1.0)
    norm_energy = clamp(energy_ratio, 0.0, 1.0)
    return 0.4 * norm_laplacian + 0.4 * norm_sobel + 0.2 * norm_energy


def classify_blur_type(luma: np.ndarray, overall_score: float) -> BlurType:
    if overall_score > SHARP_SCORE:
        return "none"

    horizontal = directional_difference(luma, 1, 0)
    vertical = directional_difference(luma, 0, 1)
    diagonal = directional_difference(luma, 1, 1)
    strongest = max(horizontal, vertical, diagonal)
    average = (horizontal + vertical + diagonal) / 3.0

    if strongest > average * MOTION_RATIO:
        return "motion"
    if overall_score < FOCUS_SCORE:
        return "focus"
    return "gaussian"


def detect_blur_regions(luma: np.ndarray, block_size: int = BLOCK_SIZE) -> List[BlurRegion]:
    """Scan full blocks in raster order; partial trailing blocks are skipped."""
    height, width = luma.shape
    regions: List[BlurRegion] = []
    for y in range(0, height - block_size + 1, block_size):
        for x in range(0, width - block_size + 1, block_size):
            variance = laplacian_variance(luma[y : y + block_size, x : x + block_size])
            if variance < BLOCK_BLUR_VARIANCE:
                regions.append(
                    BlurRegion(
                        x=x,
                        y=y,
                        width=block_size,
                        height=block_size,
                        blur_score=1.0 - min(variance / LAPLACIAN_NORM, 1.0),
                        type="focus" if variance < BLOCK_FOCUS_VARIANCE else "motion",
                    )
                )
    return regions


def blur_confidence(overall_score: float, regions: List[BlurRegion]) -> float:
    confidence = 0.8
    if regions:
        mean_region = sum(region.blur_score for region in regions) / len(regions)
        confidence *= 1.0 - abs(overall_score - mean_region)
    if overall_score < 0.2 or overall_score > 0.8:
        confidence += 0.1
    return clamp(confidence, 0.3, 0.95)


def analyze_blur(buffer: PixelBuffer) -> BlurAnalysis:
    luma = buffer.luminance()

    if not has_interior(luma):
        log.debug("blur: %dx%d has no interior pixels, reporting sharp", buffer.width, buffer.height)
        return BlurAnalysis(
            overall_blur_score=1.0,
            blur_type="none",
            blur_regions=[],
            confidence=blur_confidence(1.0, []),
        )

    lap_var = laplacian_variance(luma)
    sobel = sobel_mean(luma)
    energy = high_frequency_ratio(luma)
    overall = combine_blur_scores(lap_var, sobel, energy)

    blur_type = classify_blur_type(luma, overall)
    regions = detect_blur_regions(luma)
    confidence = blur_confidence(overall, regions)

    log.debug(
        "blur: laplacian_var=%.1f sobel=%.2f energy=%.3f overall=%.3f type=%s regions=%d",
        lap_var,
        sobel,
        energy,
        overall,
        blur_type,
        len(regions),
    )
    return BlurAnalysis(
        overall_blur_score=overall,
        blur_type=blur_type,
        blur_regions=regions,
        confidence=confidence,
    )
