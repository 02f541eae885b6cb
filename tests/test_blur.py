import numpy as np
import pytest
from PIL import Image, ImageFilter

from imgqa.blur import (
    BlurRegion,
    analyze_blur,
    blur_confidence,
    classify_blur_type,
    combine_blur_scores,
    detect_blur_regions,
    laplacian_variance,
)
from imgqa.decode import buffer_from_image

from _images import checkerboard, checkerboard_image, solid


def test_uniform_image_is_focus_blur_with_every_block_flagged() -> None:
    analysis = analyze_blur(solid(64, 64))

    assert analysis.overall_blur_score == pytest.approx(0.0, abs=1e-9)
    assert analysis.blur_type == "focus"
    assert [(r.x, r.y) for r in analysis.blur_regions] == [(0, 0), (32, 0), (0, 32), (32, 32)]
    assert all(r.type == "focus" and r.blur_score == 1.0 for r in analysis.blur_regions)
    assert all(r.width == 32 and r.height == 32 for r in analysis.blur_regions)


def test_partial_blocks_are_dropped() -> None:
    analysis = analyze_blur(solid(95, 40))
    assert [(r.x, r.y) for r in analysis.blur_regions] == [(0, 0), (32, 0)]


def test_image_smaller_than_a_block_has_no_regions() -> None:
    analysis = analyze_blur(solid(31, 31))
    assert analysis.blur_regions == []


def test_sharp_checkerboard_reports_no_blur() -> None:
    analysis = analyze_blur(checkerboard(64, 64))

    assert analysis.overall_blur_score == pytest.approx(1.0)
    assert analysis.blur_type == "none"
    assert analysis.blur_regions == []
    assert analysis.confidence == pytest.approx(0.9)


def test_regions_only_cover_flat_half() -> None:
    image = Image.new("RGB", (64, 64), color=(128, 128, 128))
    image.paste(checkerboard_image(32, 64), (0, 0))
    analysis = analyze_blur(buffer_from_image(image))

    assert [(r.x, r.y) for r in analysis.blur_regions] == [(32, 0), (32, 32)]


def test_blurring_does_not_remove_regions_or_raise_score() -> None:
    sharp_image = checkerboard_image(96, 96)
    soft_image = sharp_image.filter(ImageFilter.GaussianBlur(radius=3))

    sharp = analyze_blur(buffer_from_image(sharp_image))
    soft = analyze_blur(buffer_from_image(soft_image))

    assert soft.overall_blur_score <= sharp.overall_blur_score + 1e-9
    assert len(soft.blur_regions) >= len(sharp.blur_regions)


def test_degenerate_geometry_falls_back_to_sharp() -> None:
    analysis = analyze_blur(solid(2, 50))

    assert analysis.overall_blur_score == 1.0
    assert analysis.blur_type == "none"
    assert analysis.blur_regions == []
    assert 0.3 <= analysis.confidence <= 0.95


def test_combine_weights_and_clamps() -> None:
    assert combine_blur_scores(5000.0, 500.0, 1.0) == pytest.approx(1.0)
    assert combine_blur_scores(500.0, 50.0, 0.5) == pytest.approx(0.4 * 0.5 + 0.4 * 0.5 + 0.2 * 0.5)
    assert combine_blur_scores(0.0, 0.0, 0.0) == 0.0


def test_blur_type_thresholds() -> None:
    luma = np.random.default_rng(3).uniform(0, 255, size=(40, 40))

    assert classify_blur_type(luma, 0.8) == "none"
    assert classify_blur_type(luma, 0.5) == "gaussian"
    assert classify_blur_type(luma, 0.2) == "focus"


def test_dominant_direction_is_motion() -> None:
    luma = np.zeros((3, 3))
    luma[2, 2] = 100.0  # only the diagonal neighbour of the single interior pixel differs

    assert classify_blur_type(luma, 0.5) == "motion"


def test_block_scores_and_types() -> None:
    rng = np.random.default_rng(11)
    luma = np.full((32, 64), 120.0)
    luma[:, 32:] += rng.normal(0, 40, size=(32, 32))

    regions = detect_blur_regions(luma)

    assert regions == [BlurRegion(x=0, y=0, width=32, height=32, blur_score=1.0, type="focus")]


def test_block_with_moderate_variance_is_motion() -> None:
    height = 120.0
    luma = np.zeros((32, 32))
    luma[16, 16] = height  # |laplacian| is 4h at the spike, h at its four neighbours

    regions = detect_blur_regions(luma)

    variance = 20 * height**2 / 900 - (8 * height / 900) ** 2
    assert 200 <= variance < 500
    assert laplacian_variance(luma) == pytest.approx(variance)
    assert len(regions) == 1
    region = regions[0]
    assert (region.x, region.y, region.width, region.height) == (0, 0, 32, 32)
    assert region.type == "motion"
    assert region.blur_score == pytest.approx(1 - variance / 1000)


def test_confidence_rules() -> None:
    assert blur_confidence(0.5, []) == pytest.approx(0.8)
    assert blur_confidence(0.9, []) == pytest.approx(0.9)

    regions = [BlurRegion(0, 0, 32, 32, 1.0, "focus")]
    # 0.8 * (1 - |0.0 - 1.0|) + 0.1 clamps up to the floor.
    assert blur_confidence(0.0, regions) == pytest.approx(0.3)
    assert blur_confidence(0.5, regions) == pytest.approx(0.4)
