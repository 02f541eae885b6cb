from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class AnalyzeRequest(BaseModel):
    imageUrl: Optional[str] = None
    imageBase64: Optional[str] = None
    mimeType: Optional[str] = None


class MetricsOut(BaseModel):
    sharpness: float
    contrast: float
    brightness: float
    saturation: float
    noise: float


class BlurRegionOut(BaseModel):
    x: int
    y: int
    width: int
    height: int
    blurScore: float
    type: Literal["motion", "focus", "gaussian"]


class BlurAnalysisOut(BaseModel):
    overallBlurScore: float
    blurType: Literal["motion", "focus", "gaussian", "none"]
    blurRegions: List[BlurRegionOut] = Field(default_factory=list)
    confidence: float


class ContrastMetricsOut(BaseModel):
    globalContrast: float
    localContrast: float
    michelsonContrast: float
    rmsContrast: float
    contrastRatio: float


class BrightnessDistributionOut(BaseModel):
    shadows: float
    midtones: float
    highlights: float


class BrightnessMetricsOut(BaseModel):
    averageBrightness: float
    medianBrightness: float
    brightnessDistribution: BrightnessDistributionOut
    exposureLevel: Literal["underexposed", "optimal", "overexposed"]


class HistogramOut(BaseModel):
    red: List[int]
    green: List[int]
    blue: List[int]
    luminance: List[int]
    bins: int


class ExposureAnalysisOut(BaseModel):
    clippedShadows: float
    clippedHighlights: float
    optimalExposure: bool
    recommendedAdjustment: str


class ContrastBrightnessOut(BaseModel):
    contrast: ContrastMetricsOut
    brightness: BrightnessMetricsOut
    histogram: HistogramOut
    dynamicRange: float
    exposureAnalysis: ExposureAnalysisOut


class ImageFeaturesOut(BaseModel):
    aestheticScore: float
    technicalScore: float
    compositionScore: float
    colorHarmony: float
    visualComplexity: float
    professionalGrade: bool


class RecommendationOut(BaseModel):
    category: Literal["exposure", "sharpness", "color", "composition", "noise"]
    priority: Literal["high", "medium", "low"]
    suggestion: str
    expectedImprovement: float


class TechnicalAssessmentOut(BaseModel):
    suitableForPrint: bool
    webOptimized: bool
    professionalUse: bool
    archivalQuality: bool
    recommendedUses: List[str] = Field(default_factory=list)


class ClassificationOut(BaseModel):
    qualityClass: Literal["excellent", "good", "fair", "poor", "very_poor"]
    confidence: float
    features: ImageFeaturesOut
    recommendations: List[RecommendationOut] = Field(default_factory=list)
    technicalAssessment: TechnicalAssessmentOut


class QualityIssueOut(BaseModel):
    type: Literal["blur", "contrast", "brightness", "noise", "compression"]
    severity: Literal["low", "medium", "high"]
    score: float
    description: str


class AnalyzeResponse(BaseModel):
    overallQuality: Literal["Good", "Fair", "Poor"]
    confidence: float
    issues: List[QualityIssueOut] = Field(default_factory=list)
    metrics: MetricsOut
    blurAnalysis: BlurAnalysisOut
    contrastBrightnessAnalysis: ContrastBrightnessOut
    aiClassification: ClassificationOut
