from __future__ import annotations

import numpy as np
import pytest

from paintcraft.src.color_engine.colorspace import (
    ColorValidationError,
    hex_to_rgb,
    hsv_to_rgb,
    lab_distance,
    rgb_array_to_lab,
    rgb_to_hex,
    rgb_to_hsv,
    rgb_to_lab,
    round_half_up,
)

SAMPLE_COLORS = [
    (0, 0, 0),
    (255, 255, 255),
    (18, 52, 86),
    (173, 0, 54),
    (0, 169, 95),
    (251, 206, 40),
    (127, 16, 132),
    (200, 200, 201),
]
HSV_SAMPLE_COLORS = [
    (0, 0, 0),
    (255, 255, 255),
    (18, 52, 86),
    (127, 16, 132),
    (200, 200, 201),
    (255, 107, 107),
]


@pytest.mark.parametrize("rgb", SAMPLE_COLORS)
def test_hex_round_trip(rgb):
    assert hex_to_rgb(rgb_to_hex(rgb)) == rgb


def test_hex_parsing_is_case_insensitive_and_hash_optional():
    assert hex_to_rgb("ff6b6b") == (255, 107, 107)
    assert hex_to_rgb("#FF6B6B") == (255, 107, 107)
    assert rgb_to_hex(hex_to_rgb("#ad0036")) == "#AD0036"


@pytest.mark.parametrize("value", ["#12345", "zzzzzz", "#GGGGGG", "", "#1234567"])
def test_malformed_hex_raises(value):
    with pytest.raises(ColorValidationError):
        hex_to_rgb(value)


def test_validation_error_is_a_value_error():
    with pytest.raises(ValueError):
        hex_to_rgb("not-a-color")


def test_rgb_to_hex_rounds_and_clamps():
    assert rgb_to_hex((300, -5, 12.5)) == "#FF000D"
    assert rgb_to_hex((0, 20, 0)) == "#001400"


def test_rgb_to_hsv_primaries():
    assert rgb_to_hsv((255, 0, 0)) == (0, 100, 100)
    assert rgb_to_hsv((0, 255, 0)) == (120, 100, 100)
    assert rgb_to_hsv((0, 0, 255)) == (240, 100, 100)
    assert rgb_to_hsv((128, 128, 128)) == (0, 0, 50)
    assert rgb_to_hsv((0, 0, 0)) == (0, 0, 0)


def test_rgb_to_hsv_wraps_negative_hue():
    h, s, v = rgb_to_hsv((255, 0, 128))
    assert h == 330
    assert 0 <= h < 360


@pytest.mark.parametrize("rgb", HSV_SAMPLE_COLORS)
def test_hsv_round_trip_within_rounding_tolerance(rgb):
    back = hsv_to_rgb(rgb_to_hsv(rgb))
    assert all(abs(a - b) <= 2 for a, b in zip(back, rgb))


def test_hsv_round_trip_error_is_bounded_across_the_cube():
    # Integer hue and percentage rounding can move a channel by up to 3.
    levels = range(0, 256, 15)
    worst = 0
    for r in levels:
        for g in levels:
            for b in levels:
                back = hsv_to_rgb(rgb_to_hsv((r, g, b)))
                worst = max(worst, *(abs(x - y) for x, y in zip(back, (r, g, b))))

    assert worst <= 3


def test_hsv_round_trip_can_exceed_two_for_saturated_colors():
    assert rgb_to_hsv((0, 155, 200)) == (194, 100, 78)
    assert hsv_to_rgb((194, 100, 78)) == (0, 152, 199)


def test_lab_reference_points():
    white = rgb_to_lab((255, 255, 255))
    black = rgb_to_lab((0, 0, 0))

    assert white[0] == pytest.approx(100.0, abs=0.05)
    assert white[1] == pytest.approx(0.0, abs=0.05)
    assert white[2] == pytest.approx(0.0, abs=0.05)
    assert black == pytest.approx((0.0, 0.0, 0.0), abs=1e-6)


def test_lab_array_matches_scalar_conversion():
    rows = np.asarray(SAMPLE_COLORS, dtype=np.float64)
    batched = rgb_array_to_lab(rows)

    assert batched.shape == (len(SAMPLE_COLORS), 3)
    for row, rgb in zip(batched, SAMPLE_COLORS):
        assert tuple(row) == pytest.approx(rgb_to_lab(rgb))


def test_lab_distance_is_euclidean():
    assert lab_distance((50.0, 10.0, -10.0), (50.0, 10.0, -10.0)) == 0.0
    assert lab_distance((0.0, 0.0, 0.0), (3.0, 4.0, 0.0)) == pytest.approx(5.0)

    red = rgb_to_lab((255, 0, 0))
    blue = rgb_to_lab((0, 0, 255))
    assert lab_distance(red, blue) > 150.0


def test_lab_distance_broadcasts_over_rows():
    rows = np.array([[0.0, 0.0, 0.0], [3.0, 4.0, 0.0]])
    distances = lab_distance(rows, np.zeros(3))
    assert distances.tolist() == pytest.approx([0.0, 5.0])


def test_round_half_up_matches_javascript_rounding():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(-0.5) == 0
    assert round_half_up(1.25, 1) == pytest.approx(1.3)
