import numpy as np
import pytest

from sudokuvision.grayscale import contrast_curve, pixel_to_grayscale, to_grayscale


def test_curve_endpoints():
    assert contrast_curve(0, 10) == 0
    assert contrast_curve(255, 10) == 255


@pytest.mark.parametrize("value", [128, 150, 200, 254])
def test_curve_is_symmetric(value):
    assert contrast_curve(value, 10) + contrast_curve(255 - value, 10) == 255


def test_curve_is_monotonic():
    values = [contrast_curve(v, 10) for v in range(256)]
    assert all(a <= b for a, b in zip(values, values[1:]))


def test_black_pixel_stays_black():
    assert pixel_to_grayscale(0, 0, 0) == 0


def test_image_matches_pixel_conversion():
    rng = np.random.default_rng(3)
    image = rng.integers(0, 256, size=(5, 4, 3), dtype=np.uint8)
    gray = to_grayscale(image)
    for (row, col), pixel in np.ndenumerate(image[..., 0]):
        r, g, b = (int(c) for c in image[row, col])
        assert gray[row, col, 0] == pixel_to_grayscale(r, g, b)


def test_channels_are_equal():
    rng = np.random.default_rng(4)
    gray = to_grayscale(rng.integers(0, 256, size=(3, 3, 3), dtype=np.uint8))
    assert np.array_equal(gray[..., 0], gray[..., 1])
    assert np.array_equal(gray[..., 1], gray[..., 2])