import numpy as np
import pytest

from mandelbrot_raster.rendering.coloring import ColorRGB, colorize, escape_count_to_color, normalize


def test_inside_points_normalize_to_zero():
    assert normalize(50, 50) == 0.0
    assert normalize(0, 0) == 0.0


def test_zero_count_normalizes_to_zero():
    assert normalize(0, 50) == 0.0


@pytest.mark.parametrize("k", [1, 7, 25, 49])
def test_escaped_points_normalize_to_fraction(k):
    assert normalize(k, 50) == k / 50


def test_color_channels_are_equal():
    color = escape_count_to_color(13, 40)
    assert color.r == color.g == color.b == 13 / 40


def test_inside_color_is_black():
    assert escape_count_to_color(40, 40).to_uint8_tuple() == (0, 0, 0)


def test_quantization_rounds_to_nearest_level():
    assert escape_count_to_color(1, 3).to_uint8_tuple() == (85, 85, 85)
    assert escape_count_to_color(1, 2).to_uint8_tuple() == (128, 128, 128)
    assert escape_count_to_color(99, 100).to_uint8_tuple() == (252, 252, 252)


def test_gray_level_increases_with_count_until_budget():
    max_iter = 300
    levels = [escape_count_to_color(k, max_iter).to_uint8_tuple()[0] for k in range(max_iter)]
    assert levels == sorted(levels)
    assert escape_count_to_color(max_iter, max_iter).to_uint8_tuple()[0] == 0


def test_colorize_matches_scalar_mapping():
    max_iter = 100
    counts = np.arange(max_iter + 1, dtype=np.int32).reshape(1, -1)

    pixels = colorize(counts, max_iter)

    assert pixels.shape == (1, max_iter + 1, 3)
    assert pixels.dtype == np.uint8
    for k in range(max_iter + 1):
        assert tuple(pixels[0, k]) == escape_count_to_color(k, max_iter).to_uint8_tuple()


def test_color_components_are_validated():
    with pytest.raises(ValueError):
        ColorRGB(1.2, 0.0, 0.0)
