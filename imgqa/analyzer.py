from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
from PIL import Image

from .blur import BlurAnalysis, analyze_blur
from .buffer import PixelBuffer
from .config import settings
from .decode import buffer_from_image
from .exposure import ContrastBrightnessAnalysis, analyze_contrast_brightness
from .features import AIClassificationResult, classify
from .issues import OverallQuality, QualityIssue, calculate_confidence, detect_issues, determine_overall_quality
from .metrics import Metrics, compute_metrics

log = logging.getLogger(__name__)


@dataclass
class AnalysisReport:
    metrics: Metrics
    blur_analysis: BlurAnalysis
    contrast_brightness_analysis: ContrastBrightnessAnalysis
    ai_classification: AIClassificationResult
    issues: List[QualityIssue]
    overall_quality: OverallQuality
    confidence: float


def analyze(
    buffer: PixelBuffer,
    *,
    parallel: Optional[bool] = None,
    rng: Optional[np.random.Generator] = None,
) -> AnalysisReport:
    """
    Run the full pipeline over one decoded RGBA buffer.

    The metrics, blur and exposure engines only read the buffer, so they may
    run concurrently. ``rng`` feeds the placeholder composition estimators of
    the classifier; leave it unset for deterministic output.
    """
    if parallel is None:
        parallel = settings.parallel_engines

    if parallel:
        with ThreadPoolExecutor(max_workers=3, thread_name_prefix="imgqa") as pool:
            metrics_future = pool.submit(compute_metrics, buffer)
            blur_future = pool.submit(analyze_blur, buffer)
            exposure_future = pool.submit(analyze_contrast_brightness, buffer)
            metrics = metrics_future.result()
            blur = blur_future.result()
            exposure = exposure_future.result()
    else:
        metrics = compute_metrics(buffer)
        blur = analyze_blur(buffer)
        exposure = analyze_contrast_brightness(buffer)

    classification = classify(buffer, metrics, blur, exposure, rng=rng)
    issues = detect_issues(metrics, blur, exposure)
    overall = determine_overall_quality(metrics, issues, classification)
    confidence = calculate_confidence(metrics, issues, classification)

    log.info(
        "analyzed %dx%d image: quality=%s confidence=%.2f issues=%s",
        buffer.width,
        buffer.height,
        overall,
        confidence,
        [issue.type for issue in issues],
    )
    return AnalysisReport(
        metrics=metrics,
        blur_analysis=blur,
        contrast_brightness_analysis=exposure,
        ai_classification=classification,
        issues=issues,
        overall_quality=overall,
        confidence=confidence,
    )


def analyze_image(image: Image.Image, **kwargs) -> AnalysisReport:
    return analyze(buffer_from_image(image), **kwargs)
