"""Sobel gradients and the Canny edge detector."""

from __future__ import annotations

import numpy as np

from .imaging import pack_rgb

SOBEL_X = np.array([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]])
SOBEL_Y = np.array([[1, 2, 1], [0, 0, 0], [-1, -2, -1]])
HIGH_RATIO = 0.4
LOW_RATIO = 0.32


def _red(image: np.ndarray) -> np.ndarray:
    data = np.asarray(image, dtype=np.float64)
    return data if data.ndim == 2 else data[..., 0]


def convolution(image: np.ndarray, kernel) -> np.ndarray:
    """Convolve the red channel with a 3x3 kernel, clamping at the borders."""
    weights = np.asarray(kernel, dtype=np.float64).reshape(3, 3)
    red = _red(image)
    height, width = red.shape
    padded = np.pad(red, 1, mode="edge")
    total = np.zeros_like(red)
    for k in range(3):
        for l in range(3):
            total += padded[k : k + height, l : l + width] * weights[k, l]
    return total.astype(np.int64)


def gradients(image: np.ndarray) -> np.ndarray:
    """Return the Sobel gradient magnitude scaled to 0..255."""
    gx = convolution(image, SOBEL_X).astype(np.float64)
    gy = convolution(image, SOBEL_Y).astype(np.float64)
    magnitude = np.sqrt(gx * gx + gy * gy)
    peak = magnitude.max(initial=0.0)
    if peak == 0:
        return np.zeros_like(magnitude)
    return np.clip(magnitude / peak * 255, 0, 255)


def gradient_direction(gx: np.ndarray, gy: np.ndarray) -> np.ndarray:
    """Return the gradient angle in radians for each pixel."""
    return np.arctan2(np.asarray(gy, dtype=np.float64), np.asarray(gx, dtype=np.float64))


def sobel(image: np.ndarray) -> np.ndarray:
    """Return a grey image of the gradient magnitude."""
    level = gradients(image).astype(np.uint8)
    return np.stack([level, level, level], axis=-1)


def non_max_suppression(image: np.ndarray, theta: np.ndarray) -> np.ndarray:
    """Keep pixels that are maximal along their gradient direction.

    Values are compared and returned as packed ``0xRRGGBB`` pixels; the
    one-pixel border is zero.
    """
    packed = pack_rgb(image).astype(np.int64)
    height, width = packed.shape
    result = np.zeros((height, width), dtype=np.float64)
    if height < 3 or width < 3:
        return result

    degrees = np.asarray(theta, dtype=np.float64) * 180.0 / np.pi
    degrees = np.where(degrees < 0, degrees + 180, degrees)[1:-1, 1:-1]

    def shifted(di: int, dj: int) -> np.ndarray:
        return packed[1 + di : height - 1 + di, 1 + dj : width - 1 + dj]

    center = shifted(0, 0)
    q = np.full_like(center, 255)
    r = np.full_like(center, 255)
    directions = [
        (((degrees >= 0) & (degrees < 22.5)) | ((degrees >= 157.5) & (degrees <= 180)),
         (0, 1), (0, -1)),
        ((degrees >= 22.5) & (degrees < 67.5), (1, -1), (-1, 1)),
        ((degrees >= 67.5) & (degrees < 112.5), (1, 0), (-1, 0)),
        ((degrees >= 112.5) & (degrees < 157.5), (-1, -1), (1, 1)),
    ]
    assigned = np.zeros(center.shape, dtype=bool)
    for mask, q_offset, r_offset in directions:
        mask = mask & ~assigned
        q = np.where(mask, shifted(*q_offset), q)
        r = np.where(mask, shifted(*r_offset), r)
        assigned |= mask

    keep = (center >= q) & (center >= r)
    result[1:-1, 1:-1] = np.where(keep, center, 0)
    return result


def double_threshold(
    image: np.ndarray, low_ratio: float, high_ratio: float
) -> np.ndarray:
    """Label pixels 2 (strong), 1 (weak) or 0 (background)."""
    packed = pack_rgb(image).astype(np.float64)
    peak = packed.max(initial=0.0)
    high = peak * high_ratio
    low = low_ratio * high
    return np.select([packed > high, packed < low], [2, 0], default=1).astype(np.uint8)


def hysteresis(image: np.ndarray) -> np.ndarray:
    """Blank the weak edge pixels inside the border; other pixels are kept."""
    result = np.array(image, dtype=np.uint8, copy=True)
    labels = double_threshold(result, LOW_RATIO, HIGH_RATIO)
    weak = np.zeros(labels.shape, dtype=bool)
    weak[1:-1, 1:-1] = labels[1:-1, 1:-1] == 1
    result[weak] = 0
    return result


def canny(image: np.ndarray) -> np.ndarray:
    """Run the full edge detector on an image and return a grey edge map."""
    gx = convolution(image, SOBEL_X)
    gy = convolution(image, SOBEL_Y)
    theta = gradient_direction(gx, gy)
    suppressed = non_max_suppression(sobel(image), theta)
    level = (suppressed.astype(np.int64) & 0xFF).astype(np.uint8)
    return hysteresis(np.stack([level, level, level], axis=-1))