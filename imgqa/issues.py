from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional

from .blur import BlurAnalysis
from .exposure import ContrastBrightnessAnalysis
from .features import AIClassificationResult
from .filters import clamp
from .metrics import Metrics

IssueType = Literal["blur", "contrast", "brightness", "noise", "compression"]
Severity = Literal["low", "medium", "high"]
OverallQuality = Literal["Good", "Fair", "Poor"]

CLASS_TO_QUALITY = {
    "excellent": "Good",
    "good": "Good",
    "fair": "Fair",
    "poor": "Poor",
    "very_poor": "Poor",
}


@dataclass
class QualityIssue:
    type: IssueType
    severity: Severity
    score: float
    description: str


def _severity_below(value: float, high: float, medium: float) -> Severity:
    if value < high:
        return "high"
    if value < medium:
        return "medium"
    return "low"


def _blur_issue(blur: BlurAnalysis) -> Optional[QualityIssue]:
    score = blur.overall_blur_score
    if score >= 0.5:
        return None
    return QualityIssue(
        type="blur",
        severity=_severity_below(score, 0.2, 0.35),
        score=1.0 - score,
        description=f"{blur.blur_type.capitalize()} blur detected with {len(blur.blur_regions)} affected regions",
    )


def _contrast_issue(metrics: Metrics, exposure: Optional[ContrastBrightnessAnalysis]) -> Optional[QualityIssue]:
    if exposure is not None:
        contrast = exposure.contrast
        value = (contrast.global_contrast + contrast.local_contrast) / 2.0
        description = (
            f"Low contrast detected (Global: {round(contrast.global_contrast * 100)}%, "
            f"Local: {round(contrast.local_contrast * 100)}%)"
        )
    else:
        value = metrics.contrast
        description = "Image has low contrast and may appear flat"
    if value >= 0.3:
        return None
    return QualityIssue(
        type="contrast",
        severity=_severity_below(value, 0.1, 0.2),
        score=1.0 - value,
        description=description,
    )


def _brightness_issue(metrics: Metrics, exposure: Optional[ContrastBrightnessAnalysis]) -> Optional[QualityIssue]:
    if exposure is not None:
        level = exposure.brightness.exposure_level
        if level == "optimal":
            return None
        clipping = exposure.exposure_analysis
        average = exposure.brightness.average_brightness
        clipped = clipping.clipped_shadows + clipping.clipped_highlights
        return QualityIssue(
            type="brightness",
            severity="high" if clipping.clipped_shadows > 0.1 or clipping.clipped_highlights > 0.1 else "medium",
            score=1.0 - average * 2.0 if level == "underexposed" else (average - 0.5) * 2.0,
            description=f"{level.capitalize()} image with {round(clipped * 100)}% clipped pixels",
        )

    brightness = metrics.brightness
    if 0.2 <= brightness <= 0.8:
        return None
    under = brightness < 0.2
    if brightness < 0.1 or brightness > 0.9:
        severity: Severity = "high"
    elif brightness < 0.15 or brightness > 0.85:
        severity = "medium"
    else:
        severity = "low"
    return QualityIssue(
        type="brightness",
        severity=severity,
        score=1.0 - brightness * 5.0 if under else (brightness - 0.8) * 5.0,
        description="Image appears underexposed" if under else "Image appears overexposed",
    )


def _noise_issue(metrics: Metrics) -> Optional[QualityIssue]:
    noise = metrics.noise
    if noise <= 0.4:
        return None
    if noise > 0.7:
        severity: Severity = "high"
    elif noise > 0.55:
        severity = "medium"
    else:
        severity = "low"
    return QualityIssue(
        type="noise",
        severity=severity,
        score=noise,
        description="Image contains visible noise or grain",
    )


def detect_issues(
    metrics: Metrics,
    blur: Optional[BlurAnalysis] = None,
    exposure: Optional[ContrastBrightnessAnalysis] = None,
) -> List[QualityIssue]:
    candidates = [
        _blur_issue(blur) if blur is not None else None,
        _contrast_issue(metrics, exposure),
        _brightness_issue(metrics, exposure),
        _noise_issue(metrics),
    ]
    return [issue for issue in candidates if issue is not None]


def determine_overall_quality(
    metrics: Metrics,
    issues: List[QualityIssue],
    classification: Optional[AIClassificationResult] = None,
) -> OverallQuality:
    if classification is not None:
        return CLASS_TO_QUALITY[classification.quality_class]  # type: ignore[return-value]

    high = sum(1 for issue in issues if issue.severity == "high")
    medium = sum(1 for issue in issues if issue.severity == "medium")
    if high > 0 or medium > 2:
        return "Poor"
    if medium > 0 or len(issues) > 2:
        return "Fair"
    return "Good"


def calculate_confidence(
    metrics: Metrics,
    issues: List[QualityIssue],
    classification: Optional[AIClassificationResult] = None,
) -> float:
    confidence = 0.8
    if classification is not None:
        confidence = (confidence + classification.confidence) / 2.0

    if metrics.brightness < 0.1 or metrics.brightness > 0.9:
        confidence -= 0.1
    if metrics.contrast < 0.1:
        confidence -= 0.1
    if metrics.sharpness < 0.05:
        confidence -= 0.1
    if len(issues) > 3:
        confidence -= 0.05
    return clamp(confidence, 0.3, 0.95)
