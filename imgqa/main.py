from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException

from .analyzer import AnalysisReport, analyze
from .buffer import PixelBuffer
from .config import settings
from .decode import decode_base64_image, fetch_url_image
from .errors import DecodeFailure, MalformedBuffer
from .models import (
    AnalyzeRequest,
    AnalyzeResponse,
    BlurAnalysisOut,
    BlurRegionOut,
    BrightnessDistributionOut,
    BrightnessMetricsOut,
    ClassificationOut,
    ContrastBrightnessOut,
    ContrastMetricsOut,
    ExposureAnalysisOut,
    HistogramOut,
    ImageFeaturesOut,
    MetricsOut,
    QualityIssueOut,
    RecommendationOut,
    TechnicalAssessmentOut,
)

logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
log = logging.getLogger(__name__)

SERVICE_VERSION = "0.1.0"

app = FastAPI(title="imgqa", version=SERVICE_VERSION)


def _load_buffer(request: AnalyzeRequest) -> PixelBuffer:
    if request.imageBase64:
        return decode_base64_image(request.imageBase64, mime_type=request.mimeType)
    if request.imageUrl:
        return fetch_url_image(request.imageUrl, mime_type=request.mimeType)
    raise HTTPException(status_code=400, detail="missing_image_payload")


def _build_response(report: AnalysisReport) -> AnalyzeResponse:
    m = report.metrics
    blur = report.blur_analysis
    cba = report.contrast_brightness_analysis
    ai = report.ai_classification
    feats = ai.features
    tech = ai.technical_assessment
    dist = cba.brightness.brightness_distribution

    return AnalyzeResponse(
        overallQuality=report.overall_quality,
        confidence=report.confidence,
        issues=[
            QualityIssueOut(type=i.type, severity=i.severity, score=i.score, description=i.description)
            for i in report.issues
        ],
        metrics=MetricsOut(
            sharpness=m.sharpness,
            contrast=m.contrast,
            brightness=m.brightness,
            saturation=m.saturation,
            noise=m.noise,
        ),
        blurAnalysis=BlurAnalysisOut(
            overallBlurScore=blur.overall_blur_score,
            blurType=blur.blur_type,
            blurRegions=[
                BlurRegionOut(x=r.x, y=r.y, width=r.width, height=r.height, blurScore=r.blur_score, type=r.type)
                for r in blur.blur_regions
            ],
            confidence=blur.confidence,
        ),
        contrastBrightnessAnalysis=ContrastBrightnessOut(
            contrast=ContrastMetricsOut(
                globalContrast=cba.contrast.global_contrast,
                localContrast=cba.contrast.local_contrast,
                michelsonContrast=cba.contrast.michelson_contrast,
                rmsContrast=cba.contrast.rms_contrast,
                contrastRatio=cba.contrast.contrast_ratio,
            ),
            brightness=BrightnessMetricsOut(
                averageBrightness=cba.brightness.average_brightness,
                medianBrightness=cba.brightness.median_brightness,
                brightnessDistribution=BrightnessDistributionOut(
                    shadows=dist.shadows,
                    midtones=dist.midtones,
                    highlights=dist.highlights,
                ),
                exposureLevel=cba.brightness.exposure_level,
            ),
            histogram=HistogramOut(
                red=cba.histogram.red,
                green=cba.histogram.green,
                blue=cba.histogram.blue,
                luminance=cba.histogram.luminance,
                bins=cba.histogram.bins,
            ),
            dynamicRange=cba.dynamic_range,
            exposureAnalysis=ExposureAnalysisOut(
                clippedShadows=cba.exposure_analysis.clipped_shadows,
                clippedHighlights=cba.exposure_analysis.clipped_highlights,
                optimalExposure=cba.exposure_analysis.optimal_exposure,
                recommendedAdjustment=cba.exposure_analysis.recommended_adjustment,
            ),
        ),
        aiClassification=ClassificationOut(
            qualityClass=ai.quality_class,
            confidence=ai.confidence,
            features=ImageFeaturesOut(
                aestheticScore=feats.aesthetic_score,
                technicalScore=feats.technical_score,
                compositionScore=feats.composition_score,
                colorHarmony=feats.color_harmony,
                visualComplexity=feats.visual_complexity,
                professionalGrade=feats.professional_grade,
            ),
            recommendations=[
                RecommendationOut(
                    category=r.category,
                    priority=r.priority,
                    suggestion=r.suggestion,
                    expectedImprovement=r.expected_improvement,
                )
                for r in ai.recommendations
            ],
            technicalAssessment=TechnicalAssessmentOut(
                suitableForPrint=tech.suitable_for_print,
                webOptimized=tech.web_optimized,
                professionalUse=tech.professional_use,
                archivalQuality=tech.archival_quality,
                recommendedUses=list(tech.recommended_uses),
            ),
        ),
    )


@app.get("/healthz")
def healthz() -> dict:
    return {
        "ok": True,
        "service": "imgqa",
        "version": SERVICE_VERSION,
    }


@app.post("/analyze", response_model=AnalyzeResponse)
def analyze_endpoint(request: AnalyzeRequest) -> AnalyzeResponse:
    try:
        buffer = _load_buffer(request)
    except (DecodeFailure, MalformedBuffer) as exc:
        log.warning("rejecting image payload: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    report = analyze(buffer)
    return _build_response(report)
