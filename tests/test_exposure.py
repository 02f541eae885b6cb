import numpy as np
import pytest

from imgqa.buffer import PixelBuffer
from imgqa.exposure import (
    ADJUST_DECREASE,
    ADJUST_INCREASE,
    ADJUST_LIFT_SHADOWS,
    ADJUST_LOWER_HIGHLIGHTS,
    ADJUST_NONE,
    analyze_contrast_brightness,
    compute_histograms,
)

from _images import noise, solid, split


def test_histograms_count_every_pixel() -> None:
    buffer = noise(37, 23)
    histogram = compute_histograms(buffer)

    assert histogram.bins == 256
    for channel in (histogram.red, histogram.green, histogram.blue, histogram.luminance):
        assert len(channel) == 256
        assert sum(channel) == 37 * 23


def test_uniform_mid_gray() -> None:
    analysis = analyze_contrast_brightness(solid(64, 64, (128, 128, 128)))

    assert analysis.histogram.luminance[128] == 4096
    assert analysis.contrast.global_contrast == 0.0
    assert analysis.contrast.rms_contrast == analysis.contrast.global_contrast
    assert analysis.contrast.local_contrast == 0.0
    assert analysis.contrast.michelson_contrast == 0.0
    assert analysis.contrast.contrast_ratio == 1.0
    assert analysis.brightness.average_brightness == pytest.approx(128 / 255)
    assert analysis.brightness.median_brightness == pytest.approx(128 / 255)
    assert analysis.brightness.brightness_distribution.midtones == 1.0
    assert analysis.brightness.exposure_level == "optimal"
    assert analysis.dynamic_range == 0.0
    assert analysis.exposure_analysis.optimal_exposure is True
    assert analysis.exposure_analysis.recommended_adjustment == ADJUST_NONE


def test_black_and_white_halves_report_clipping_not_exposure_shift() -> None:
    analysis = analyze_contrast_brightness(split(64, 64, (0, 0, 0), (255, 255, 255)))
    exposure = analysis.exposure_analysis

    assert analysis.contrast.michelson_contrast == pytest.approx(1.0)
    assert analysis.contrast.global_contrast == pytest.approx(0.5)
    # Only windows straddling the edge have contrast; pure black ones are skipped.
    assert analysis.contrast.local_contrast == pytest.approx(1 / 3)
    assert analysis.contrast.contrast_ratio == 1.0
    assert analysis.dynamic_range == pytest.approx(1.0)
    assert exposure.clipped_shadows == pytest.approx(0.5)
    assert exposure.clipped_highlights == pytest.approx(0.5)
    assert analysis.brightness.exposure_level == "optimal"
    assert exposure.optimal_exposure is False
    assert exposure.recommended_adjustment == ADJUST_LIFT_SHADOWS
    dist = analysis.brightness.brightness_distribution
    assert (dist.shadows, dist.midtones, dist.highlights) == (0.5, 0.0, 0.5)


def test_two_tone_percentile_ratio_and_michelson() -> None:
    analysis = analyze_contrast_brightness(split(40, 40, (50, 50, 50), (200, 200, 200)))

    assert analysis.contrast.contrast_ratio == pytest.approx(4.0)
    assert analysis.contrast.michelson_contrast == pytest.approx(150 / 250)
    assert analysis.brightness.median_brightness == pytest.approx(50 / 255)


def test_dark_image_is_underexposed() -> None:
    analysis = analyze_contrast_brightness(solid(20, 20, (20, 20, 20)))

    assert analysis.brightness.exposure_level == "underexposed"
    assert analysis.exposure_analysis.clipped_shadows == 0.0
    assert analysis.exposure_analysis.recommended_adjustment == ADJUST_INCREASE


def test_bright_image_is_overexposed() -> None:
    analysis = analyze_contrast_brightness(solid(20, 20, (240, 240, 240)))

    assert analysis.brightness.exposure_level == "overexposed"
    assert analysis.exposure_analysis.recommended_adjustment == ADJUST_DECREASE


def test_highlight_clipping_without_exposure_shift() -> None:
    # 10% blown highlights on a mid-gray base keeps the mean optimal.
    arr = np.full((20, 20, 3), 100, dtype=np.uint8)
    arr[:2] = 255
    analysis = analyze_contrast_brightness(PixelBuffer.from_array(arr))

    assert analysis.brightness.exposure_level == "optimal"
    assert analysis.exposure_analysis.clipped_shadows == 0.0
    assert analysis.exposure_analysis.clipped_highlights == pytest.approx(0.1)
    assert analysis.exposure_analysis.recommended_adjustment == ADJUST_LOWER_HIGHLIGHTS


def test_small_image_has_no_local_windows() -> None:
    analysis = analyze_contrast_brightness(split(10, 10, (0, 0, 0), (255, 255, 255)))
    assert analysis.contrast.local_contrast == 0.0
