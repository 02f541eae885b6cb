import pytest

from imgqa.metrics import compute_metrics

from _images import checkerboard, noise, solid, spike


def test_uniform_image_has_no_sharpness_contrast_or_noise() -> None:
    metrics = compute_metrics(solid(64, 64, (128, 128, 128)))

    assert metrics.sharpness == pytest.approx(0.0, abs=1e-9)
    assert metrics.contrast == pytest.approx(0.0, abs=1e-9)
    assert metrics.noise == pytest.approx(0.0, abs=1e-9)
    assert metrics.saturation == 0.0
    assert metrics.brightness == pytest.approx(128 / 255, rel=1e-9)


def test_single_spike_sharpness_and_noise_use_full_pixel_count() -> None:
    metrics = compute_metrics(spike(64, 64, background=100, peak=110, at=(32, 32)))

    # |Laplacian| is 4*10 at the spike and 10 at each of its four neighbours.
    assert metrics.sharpness == pytest.approx(80 / 4096, rel=1e-6)
    # Spike sees eight deviations of 10; each of its eight neighbours sees one.
    assert metrics.noise == pytest.approx((800 / 9 + 8 * 100 / 9) / 4096, rel=1e-6)


def test_sharpness_grows_with_laplacian_response() -> None:
    soft = compute_metrics(spike(64, 64, background=100, peak=110, at=(20, 20)))
    hard = compute_metrics(spike(64, 64, background=100, peak=120, at=(20, 20)))

    assert hard.sharpness > soft.sharpness


def test_border_pixels_do_not_contribute_to_sharpness() -> None:
    metrics = compute_metrics(spike(16, 16, background=50, peak=250, at=(0, 0)))

    # (0, 0) is not a 4-neighbour of any interior pixel.
    assert metrics.sharpness == pytest.approx(0.0, abs=1e-9)


def test_saturation_of_pure_red_is_one() -> None:
    metrics = compute_metrics(solid(8, 8, (255, 0, 0)))
    assert metrics.saturation == pytest.approx(1.0)


def test_black_pixels_count_as_unsaturated() -> None:
    metrics = compute_metrics(solid(8, 8, (0, 0, 0)))
    assert metrics.saturation == 0.0
    assert metrics.brightness == 0.0


def test_checkerboard_contrast_is_half_the_tone_gap() -> None:
    metrics = compute_metrics(checkerboard(64, 64))

    assert metrics.contrast == pytest.approx((230 - 25) / 2 / 255, rel=1e-6)
    assert metrics.sharpness == 1.0
    assert metrics.noise == 1.0


def test_metrics_stay_in_unit_range_for_noise() -> None:
    metrics = compute_metrics(noise(48, 40))
    for value in (metrics.sharpness, metrics.contrast, metrics.brightness, metrics.saturation, metrics.noise):
        assert 0.0 <= value <= 1.0


def test_tiny_image_has_no_interior() -> None:
    metrics = compute_metrics(solid(2, 2, (90, 10, 200)))
    assert metrics.sharpness == 0.0
    assert metrics.noise == 0.0
