"""Heuristic quality classifier over hand-tuned feature weights."""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Tuple

import numpy as np

from .blur import BlurAnalysis
from .buffer import PixelBuffer
from .exposure import ContrastBrightnessAnalysis
from .filters import clamp, forward_gradient
from .metrics import Metrics

log = logging.getLogger(__name__)

QualityClass = Literal["excellent", "good", "fair", "poor", "very_poor"]
Priority = Literal["high", "medium", "low"]
Category = Literal["exposure", "sharpness", "color", "composition", "noise"]

PRIORITY_RANK: Dict[str, int] = {"high": 3, "medium": 2, "low": 1}

# (weight, bias) per basic metric
TECHNICAL_WEIGHTS: Dict[str, Tuple[float, float]] = {
    "sharpness": (0.25, 0.1),
    "contrast": (0.2, 0.05),
    "brightness": (0.15, 0.0),
    "saturation": (0.15, 0.0),
    "noise": (0.15, 0.0),
}
SHARP_BONUS = 0.1
EXPOSURE_BONUS = 0.1

EDGE_THRESHOLD = 50.0
HUE_SAMPLE_STRIDE = 10
HUE_GROUP_DEGREES = 30

# Nominal ranges of the unmeasured composition estimators.
AESTHETIC_PLACEHOLDER_RANGE = (0.2, 0.5)
COMPOSITION_PLACEHOLDER_RANGE = (0.25, 0.75)

SUGGEST_SHARPNESS = "Apply unsharp mask or increase camera stability to improve sharpness"
SUGGEST_COLOR = "Adjust color balance or consider selective color corrections for better harmony"
SUGGEST_NOISE = "Apply noise reduction or use lower ISO settings in future captures"
SUGGEST_COMPOSITION = "Consider cropping to improve composition using rule of thirds or leading lines"


@dataclass
class ImageFeatures:
    aesthetic_score: float
    technical_score: float
    composition_score: float
    color_harmony: float
    visual_complexity: float
    professional_grade: bool


@dataclass
class QualityRecommendation:
    category: Category
    priority: Priority
    suggestion: str
    expected_improvement: float


@dataclass
class TechnicalAssessment:
    suitable_for_print: bool
    web_optimized: bool
    professional_use: bool
    archival_quality: bool
    recommended_uses: List[str] = field(default_factory=list)


@dataclass
class AIClassificationResult:
    quality_class: QualityClass
    confidence: float
    features: ImageFeatures
    recommendations: List[QualityRecommendation]
    technical_assessment: TechnicalAssessment


def _placeholder(value_range: Tuple[float, float], rng: Optional[np.random.Generator]) -> float:
    lo, hi = value_range
    if rng is None:
        return (lo + hi) / 2.0
    return float(rng.uniform(lo, hi))


def technical_score(
    metrics: Metrics,
    blur: Optional[BlurAnalysis] = None,
    exposure: Optional[ContrastBrightnessAnalysis] = None,
) -> float:
    inputs = {
        "sharpness": metrics.sharpness,
        "contrast": metrics.contrast,
        # peaks at mid-grey
        "brightness": 1.0 - abs(metrics.brightness - 0.5) * 2.0,
        "saturation": metrics.saturation,
        "noise": 1.0 - metrics.noise,
    }
    score = 0.0
    for name, value in inputs.items():
        weight, bias = TECHNICAL_WEIGHTS[name]
        score += value * weight + bias

    if blur is not None and blur.overall_blur_score > 0.7:
        score += SHARP_BONUS
    if exposure is not None and exposure.exposure_analysis.optimal_exposure:
        score += EXPOSURE_BONUS
    return clamp(score, 0.0, 1.0)


def aesthetic_score(rng: Optional[np.random.Generator] = None) -> float:
    rule_of_thirds = _placeholder(AESTHETIC_PLACEHOLDER_RANGE, rng)
    color_distribution = _placeholder(AESTHETIC_PLACEHOLDER_RANGE, rng)
    edge_distribution = _placeholder(AESTHETIC_PLACEHOLDER_RANGE, rng)
    balance = _placeholder(AESTHETIC_PLACEHOLDER_RANGE, rng)
    score = 0.5 + rule_of_thirds * 0.3 + color_distribution * 0.2 + edge_distribution * 0.2 + balance * 0.3
    return clamp(score, 0.0, 1.0)


def composition_score(rng: Optional[np.random.Generator] = None) -> float:
    symmetry = _placeholder(COMPOSITION_PLACEHOLDER_RANGE, rng)
    leading_lines = _placeholder(COMPOSITION_PLACEHOLDER_RANGE, rng)
    depth = _placeholder(COMPOSITION_PLACEHOLDER_RANGE, rng)
    return (symmetry + leading_lines + depth) / 3.0


def hue_groups(buffer: PixelBuffer, stride: int = HUE_SAMPLE_STRIDE) -> np.ndarray:
    """HSL hue bucket (0-11) of every ``stride``-th pixel in raster order."""
    rgb = buffer.rgb().reshape(-1, 3)[::stride] / 255.0
    r, g, b = rgb[:, 0], rgb[:, 1], rgb[:, 2]
    hi = rgb.max(axis=1)
    lo = rgb.min(axis=1)
    delta = hi - lo
    chromatic = delta > 0
    safe = np.where(chromatic, delta, 1.0)

    hue = np.where(
        hi == r,
        (g - b) / safe + np.where(g < b, 6.0, 0.0),
        np.where(hi == g, (b - r) / safe + 2.0, (r - g) / safe + 4.0),
    )
    hue = np.where(chromatic, hue, 0.0) / 6.0
    return np.floor(hue * 360.0 / HUE_GROUP_DEGREES).astype(int)


def color_harmony(buffer: PixelBuffer) -> float:
    groups = Counter(hue_groups(buffer).tolist())
    dominant = groups.most_common(3)

    score = 0.5
    if len(dominant) >= 2:
        diff = abs(dominant[0][0] - dominant[1][0])
        if diff == 6:
            score += 0.3  # complementary
        elif diff <= 2:
            score += 0.2  # analogous
        elif diff == 4:
            score += 0.25  # triadic
    return clamp(score, 0.0, 1.0)


def edge_density(buffer: PixelBuffer) -> float:
    gradient = forward_gradient(buffer.luminance())
    edges = int(np.count_nonzero(gradient > EDGE_THRESHOLD))
    return min(edges / buffer.pixel_count, 1.0)


def visual_complexity(buffer: PixelBuffer, rng: Optional[np.random.Generator] = None) -> float:
    texture_density = _placeholder(COMPOSITION_PLACEHOLDER_RANGE, rng)
    return (edge_density(buffer) + texture_density) / 2.0


def extract_features(
    buffer: PixelBuffer,
    metrics: Metrics,
    blur: Optional[BlurAnalysis] = None,
    exposure: Optional[ContrastBrightnessAnalysis] = None,
    rng: Optional[np.random.Generator] = None,
) -> ImageFeatures:
    aesthetic = aesthetic_score(rng)
    technical = technical_score(metrics, blur, exposure)
    return ImageFeatures(
        aesthetic_score=aesthetic,
        technical_score=technical,
        composition_score=composition_score(rng),
        color_harmony=color_harmony(buffer),
        visual_complexity=visual_complexity(buffer, rng),
        professional_grade=technical > 0.8 and aesthetic > 0.7,
    )


def overall_score(features: ImageFeatures) -> float:
    return features.technical_score * 0.4 + features.aesthetic_score * 0.3 + features.composition_score * 0.3


def predict_quality_class(features: ImageFeatures) -> QualityClass:
    score = overall_score(features)
    if score >= 0.9 and features.professional_grade:
        return "excellent"
    if score >= 0.75:
        return "good"
    if score >= 0.5:
        return "fair"
    if score >= 0.25:
        return "poor"
    return "very_poor"


def classification_confidence(features: ImageFeatures) -> float:
    score = overall_score(features)
    confidence = 0.8
    if score > 0.8 or score < 0.3:
        confidence += 0.1
    if 0.45 < score < 0.55:
        confidence -= 0.2
    return clamp(confidence, 0.3, 0.95)


def generate_recommendations(
    features: ImageFeatures,
    metrics: Metrics,
    exposure: Optional[ContrastBrightnessAnalysis] = None,
) -> List[QualityRecommendation]:
    recs: List[QualityRecommendation] = []

    if metrics.sharpness < 0.6:
        recs.append(
            QualityRecommendation(
                category="sharpness",
                priority="high" if metrics.sharpness < 0.3 else "medium",
                suggestion=SUGGEST_SHARPNESS,
                expected_improvement=0.2,
            )
        )

    if exposure is not None and not exposure.exposure_analysis.optimal_exposure:
        clipping = exposure.exposure_analysis
        heavy = clipping.clipped_shadows > 0.1 or clipping.clipped_highlights > 0.1
        recs.append(
            QualityRecommendation(
                category="exposure",
                priority="high" if heavy else "medium",
                suggestion=clipping.recommended_adjustment,
                expected_improvement=0.15,
            )
        )

    if features.color_harmony < 0.5:
        recs.append(
            QualityRecommendation(
                category="color",
                priority="medium",
                suggestion=SUGGEST_COLOR,
                expected_improvement=0.1,
            )
        )

    if metrics.noise > 0.4:
        recs.append(
            QualityRecommendation(
                category="noise",
                priority="high" if metrics.noise > 0.7 else "medium",
                suggestion=SUGGEST_NOISE,
                expected_improvement=0.15,
            )
        )

    if features.composition_score < 0.5:
        recs.append(
            QualityRecommendation(
                category="composition",
                priority="low",
                suggestion=SUGGEST_COMPOSITION,
                expected_improvement=0.1,
            )
        )

    # sorted() is stable, so equal priorities keep insertion order.
    return sorted(recs, key=lambda rec: PRIORITY_RANK[rec.priority], reverse=True)


def assess_technical_quality(features: ImageFeatures, metrics: Metrics) -> TechnicalAssessment:
    technical = features.technical_score
    suitable_for_print = technical > 0.7 and metrics.sharpness > 0.6
    web_optimized = technical > 0.5
    professional_use = features.professional_grade and technical > 0.8
    archival_quality = technical > 0.85 and metrics.noise < 0.2

    uses: List[str] = []
    if archival_quality:
        uses.extend(["Archival storage", "Fine art printing"])
    if professional_use:
        uses.extend(["Professional photography", "Commercial use"])
    if suitable_for_print:
        uses.extend(["High-quality printing", "Large format display"])
    if web_optimized:
        uses.extend(["Web display", "Social media"])
    if not uses:
        uses.extend(["Thumbnail use", "Low-resolution display"])

    return TechnicalAssessment(
        suitable_for_print=suitable_for_print,
        web_optimized=web_optimized,
        professional_use=professional_use,
        archival_quality=archival_quality,
        recommended_uses=uses,
    )


def classify(
    buffer: PixelBuffer,
    metrics: Metrics,
    blur: Optional[BlurAnalysis] = None,
    exposure: Optional[ContrastBrightnessAnalysis] = None,
    rng: Optional[np.random.Generator] = None,
) -> AIClassificationResult:
    features = extract_features(buffer, metrics, blur, exposure, rng)
    result = AIClassificationResult(
        quality_class=predict_quality_class(features),
        confidence=classification_confidence(features),
        features=features,
        recommendations=generate_recommendations(features, metrics, exposure),
        technical_assessment=assess_technical_quality(features, metrics),
    )
    log.debug(
        "classifier: technical=%.3f aesthetic=%.3f composition=%.3f class=%s",
        features.technical_score,
        features.aesthetic_score,
        features.composition_score,
        result.quality_class,
    )
    return result
