"""Image rotation, both direct and by three shears, and angle parsing."""

from __future__ import annotations

import math

import numpy as np


def _round(values: np.ndarray) -> np.ndarray:
    """Round half away from zero."""
    return np.where(values >= 0, np.floor(values + 0.5), np.ceil(values - 0.5)).astype(
        np.int64
    )


def _grid(image: np.ndarray) -> tuple[np.ndarray, np.ndarray, int, int]:
    height, width = image.shape[:2]
    xs, ys = np.meshgrid(np.arange(width), np.arange(height), indexing="ij")
    return xs.ravel(), ys.ravel(), width, height


def _scatter(image, xs, ys, new_x, new_y, width, height) -> np.ndarray:
    result = np.zeros_like(image)
    inside = (new_x >= 0) & (new_x < width) & (new_y >= 0) & (new_y < height)
    result[new_y[inside], new_x[inside]] = image[ys[inside], xs[inside]]
    return result


def rotate(image: np.ndarray, angle: float) -> np.ndarray:
    """Rotate by ``angle`` degrees around the centre, mapping each source pixel."""
    image = np.asarray(image)
    xs, ys, width, height = _grid(image)
    center_x, center_y = width // 2, height // 2
    radians = angle * (math.pi / 180)
    cos_angle, sin_angle = math.cos(radians), math.sin(radians)
    x_off = (xs - center_x).astype(np.float64)
    y_off = (ys - center_y).astype(np.float64)
    new_x = _round(x_off * cos_angle + y_off * sin_angle + center_x)
    new_y = _round(y_off * cos_angle - x_off * sin_angle + center_y)
    return _scatter(image, xs, ys, new_x, new_y, width, height)


def rotate_shearing(image: np.ndarray, angle: float) -> np.ndarray:
    """Rotate by ``angle`` degrees using three successive shears."""
    image = np.asarray(image)
    xs, ys, width, height = _grid(image)
    center_x, center_y = width // 2, height // 2
    radians = angle * (math.pi / 180)
    sin_angle = math.sin(radians)
    tan_angle = math.tan(radians / 2)
    x_off = xs - center_x
    y_off = ys - center_y
    new_x = _round(x_off - y_off * tan_angle)
    new_y = _round(new_x * sin_angle + y_off)
    new_x = _round(new_x - new_y * tan_angle)
    return _scatter(
        image, xs, ys, new_x + center_x, new_y + center_y, width, height
    )


def parse_angle(text: str) -> float:
    """Parse an angle in degrees, folding it into the range 0..360.

    A leading ``-`` makes the angle count backwards from 360; other
    non-digit characters are ignored. Raises ``ValueError`` when the text
    does not start with ``-`` or a digit.
    """
    if not text or (text[0] != "-" and not text[0].isdigit()):
        raise ValueError(f"invalid angle: {text!r}")
    negative = text[0] == "-"
    angle = 0.0
    for char in text[1:] if negative else text:
        if "0" <= char <= "9":
            angle = angle * 10.0 + (ord(char) - ord("0"))
    if negative:
        angle = 360 - angle
        while angle < 0:
            angle += 360
    else:
        while angle > 360:
            angle -= 360
    return angle