"""
Histogram-based contrast, brightness and exposure analysis.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Literal

import numpy as np

from .buffer import PixelBuffer

log = logging.getLogger(__name__)

ExposureLevel = Literal["underexposed", "optimal", "overexposed"]

HISTOGRAM_BINS = 256
LOCAL_WINDOW = 5

SHADOW_CLIP_MAX = 10
HIGHLIGHT_CLIP_MIN = 245
CLIP_TOLERANCE = 0.02
CLIP_RECOVERY = 0.05

UNDEREXPOSED_BELOW = 0.3
OVEREXPOSED_ABOVE = 0.7

ADJUST_INCREASE = "Increase exposure by +0.5 to +1.5 stops"
ADJUST_DECREASE = "Decrease exposure by -0.5 to -1.5 stops"
ADJUST_LIFT_SHADOWS = "Lift shadows to recover detail"
ADJUST_LOWER_HIGHLIGHTS = "Lower highlights to recover detail"
ADJUST_NONE = "No adjustment needed"


@dataclass
class HistogramData:
    red: List[int]
    green: List[int]
    blue: List[int]
    luminance: List[int]
    bins: int = HISTOGRAM_BINS


@dataclass
class ContrastMetrics:
    global_contrast: float
    local_contrast: float
    michelson_contrast: float
    rms_contrast: float
    contrast_ratio: float


@dataclass
class BrightnessDistribution:
    shadows: float
    midtones: float
    highlights: float


@dataclass
class BrightnessMetrics:
    average_brightness: float
    median_brightness: float
    brightness_distribution: BrightnessDistribution
    exposure_level: ExposureLevel


@dataclass
class ExposureAnalysis:
    clipped_shadows: float
    clipped_highlights: float
    optimal_exposure: bool
    recommended_adjustment: str


@dataclass
class ContrastBrightnessAnalysis:
    contrast: ContrastMetrics
    brightness: BrightnessMetrics
    histogram: HistogramData
    dynamic_range: float
    exposure_analysis: ExposureAnalysis


def compute_histograms(buffer: PixelBuffer) -> HistogramData:
    rgba = buffer.rgba()
    luma = buffer.luminance()
    # Round half up so a luma of x.5 lands in the upper bin.
    luma_bins = np.clip(np.floor(luma + 0.5), 0, HISTOGRAM_BINS - 1).astype(np.int64)

    def counts(values: np.ndarray) -> List[int]:
        return np.bincount(values.ravel(), minlength=HISTOGRAM_BINS).astype(int).tolist()

    return HistogramData(
        red=counts(rgba[:, :, 0]),
        green=counts(rgba[:, :, 1]),
        blue=counts(rgba[:, :, 2]),
        luminance=counts(luma_bins),
    )


def _first_nonzero(counts: np.ndarray) -> int:
    nonzero = np.flatnonzero(counts)
    return int(nonzero[0]) if nonzero.size else 0


def _last_nonzero(counts: np.ndarray) -> int:
    nonzero = np.flatnonzero(counts)
    return int(nonzero[-1]) if nonzero.size else HISTOGRAM_BINS - 1


def _percentile_bin(counts: np.ndarray, fraction: float) -> int:
    """First bin whose cumulative count reaches ``fraction`` of the total."""
    cumulative = np.cumsum(counts)
    target = cumulative[-1] * fraction
    return int(np.searchsorted(cumulative, target, side="left"))


def _histogram_std(counts: np.ndarray) -> float:
    total = counts.sum()
    levels = np.arange(HISTOGRAM_BINS, dtype=np.float64)
    mean = float(np.dot(levels, counts)) / total
    variance = float(np.dot(counts, (levels - mean) ** 2)) / total
    return float(np.sqrt(variance))


def local_contrast(luma: np.ndarray, window: int = LOCAL_WINDOW) -> float:
    """Mean (max-min)/(max+min) over (2*window+1)^2 patches centred every ``window`` pixels."""
    height, width = luma.shape
    total = 0.0
    count = 0
    for y in range(window, height - window, window):
        for x in range(window, width - window, window):
            patch = luma[y - window : y + window + 1, x - window : x + window + 1]
            hi = float(patch.max())
            lo = float(patch.min())
            if hi + lo > 0:
                total += (hi - lo) / (hi + lo)
                count += 1
    return total / count if count else 0.0


def compute_contrast_metrics(luma: np.ndarray, histogram: HistogramData) -> ContrastMetrics:
    counts = np.asarray(histogram.luminance, dtype=np.float64)

    global_contrast = _histogram_std(counts) / 255.0
    # Same population standard deviation as the global figure.
    rms_contrast = _histogram_std(counts) / 255.0

    lum_max = _last_nonzero(counts)
    lum_min = _first_nonzero(counts)
    if lum_max + lum_min > 0:
        michelson = (lum_max - lum_min) / (lum_max + lum_min)
    else:
        michelson = 0.0

    p10 = _percentile_bin(counts, 0.1)
    p90 = _percentile_bin(counts, 0.9)
    contrast_ratio = p90 / p10 if p10 > 0 else 1.0

    return ContrastMetrics(
        global_contrast=global_contrast,
        local_contrast=local_contrast(luma),
        michelson_contrast=michelson,
        rms_contrast=rms_contrast,
        contrast_ratio=contrast_ratio,
    )


def exposure_level_for(average_brightness: float) -> ExposureLevel:
    if average_brightness < UNDEREXPOSED_BELOW:
        return "underexposed"
    if average_brightness > OVEREXPOSED_ABOVE:
        return "overexposed"
    return "optimal"


def compute_brightness_metrics(histogram: HistogramData) -> BrightnessMetrics:
    counts = np.asarray(histogram.luminance, dtype=np.float64)
    total = counts.sum()
    levels = np.arange(HISTOGRAM_BINS, dtype=np.float64)

    average = float(np.dot(levels, counts)) / total / 255.0
    median = _percentile_bin(counts, 0.5) / 255.0

    distribution = BrightnessDistribution(
        shadows=float(counts[:86].sum() / total),
        midtones=float(counts[86:171].sum() / total),
        highlights=float(counts[171:].sum() / total),
    )
    return BrightnessMetrics(
        average_brightness=average,
        median_brightness=median,
        brightness_distribution=distribution,
        exposure_level=exposure_level_for(average),
    )


def dynamic_range(histogram: HistogramData) -> float:
    counts = np.asarray(histogram.luminance)
    return (_last_nonzero(counts) - _first_nonzero(counts)) / 255.0


def analyze_exposure(histogram: HistogramData, brightness: BrightnessMetrics) -> ExposureAnalysis:
    counts = np.asarray(histogram.luminance, dtype=np.float64)
    total = counts.sum()

    clipped_shadows = float(counts[: SHADOW_CLIP_MAX + 1].sum() / total)
    clipped_highlights = float(counts[HIGHLIGHT_CLIP_MIN:].sum() / total)
    optimal = clipped_shadows < CLIP_TOLERANCE and clipped_highlights < CLIP_TOLERANCE

    if brightness.exposure_level == "underexposed":
        adjustment = ADJUST_INCREASE
    elif brightness.exposure_level == "overexposed":
        adjustment = ADJUST_DECREASE
    elif clipped_shadows > CLIP_RECOVERY:
        adjustment = ADJUST_LIFT_SHADOWS
    elif clipped_highlights > CLIP_RECOVERY:
        adjustment = ADJUST_LOWER_HIGHLIGHTS
    else:
        adjustment = ADJUST_NONE

    return ExposureAnalysis(
        clipped_shadows=clipped_shadows,
        clipped_highlights=clipped_highlights,
        optimal_exposure=optimal,
        recommended_adjustment=adjustment,
    )


def analyze_contrast_brightness(buffer: PixelBuffer) -> ContrastBrightnessAnalysis:
    luma = buffer.luminance()
    histogram = compute_histograms(buffer)
    contrast = compute_contrast_metrics(luma, histogram)
    brightness = compute_brightness_metrics(histogram)
    exposure = analyze_exposure(histogram, brightness)

    result = ContrastBrightnessAnalysis(
        contrast=contrast,
        brightness=brightness,
        histogram=histogram,
        dynamic_range=dynamic_range(histogram),
        exposure_analysis=exposure,
    )
    log.debug(
        "exposure: global=%.3f local=%.3f avg=%.3f level=%s clipped=%.3f/%.3f",
        contrast.global_contrast,
        contrast.local_contrast,
        brightness.average_brightness,
        brightness.exposure_level,
        exposure.clipped_shadows,
        exposure.clipped_highlights,
    )
    return result
