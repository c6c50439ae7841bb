"""Grayscale conversion with a strong contrast curve."""

from __future__ import annotations

import numpy as np

CONTRAST_EXPONENT = 10
_HALF = 255 // 2


def contrast_curve(value: int, exponent: float) -> int:
    """Push a channel value away from mid-grey along a power curve."""
    if value <= _HALF:
        return int(_HALF * (2.0 * value / 255) ** exponent)
    return 255 - contrast_curve(255 - value, exponent)


_CURVE = np.array(
    [contrast_curve(value, CONTRAST_EXPONENT) for value in range(256)],
    dtype=np.uint8,
)


def pixel_to_grayscale(red: int, green: int, blue: int) -> int:
    """Return the contrasted grey level of one RGB pixel."""
    average = min(int(0.3 * red + 0.59 * green + 0.11 * blue), 255)
    return contrast_curve(average, CONTRAST_EXPONENT)


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Return a contrasted grey copy of an RGB image (three equal channels)."""
    data = np.asarray(image, dtype=np.float64)
    average = 0.3 * data[..., 0] + 0.59 * data[..., 1] + 0.11 * data[..., 2]
    levels = np.clip(average.astype(np.int64), 0, 255)
    gray = _CURVE[levels]
    return np.stack([gray, gray, gray], axis=-1)