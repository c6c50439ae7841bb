"""Finding the tilt of the grid with a Hough transform, and the detection steps."""

from __future__ import annotations

import math
from pathlib import Path

import numpy as np

from .blob import blob_crop
from .image_process import Operation, image_process
from .imaging import PathType, load_image, pack_rgb, save_image
from .rotation import parse_angle, rotate_shearing

ANGLES = 360
PEAK_PERCENT = 80
_GREEN = (0, 255, 0)
_CHUNK = 4096


def _accumulator_height(width: int, height: int) -> int:
    return int(2 * math.sqrt(width * width + height * height))


def _lit(image: np.ndarray) -> np.ndarray:
    data = np.asarray(image)
    packed = pack_rgb(data) if data.ndim == 3 else data
    return packed != 0


def _is_steep(angle: int) -> bool:
    """Angles whose lines are drawn by stepping along x."""
    return 45 < angle <= 135 or 225 < angle <= 315


def _peaks(accumulator: np.ndarray) -> list[tuple[int, int]]:
    """Cells holding at least 80 % of the maximum, in row-major order."""
    acc = np.asarray(accumulator)
    peak = int(acc.max(initial=0))
    divisor = (PEAK_PERCENT * peak) // 100
    if divisor == 0:
        raise ValueError("the accumulator has no clear peak")
    return [(int(row), int(col)) for row, col in np.argwhere(acc >= divisor)]


def hough_transform(image: np.ndarray) -> np.ndarray:
    """Vote every non-zero pixel into a ``(2 * diagonal, 360)`` accumulator.

    Row ``rho + rows // 2`` and column ``t`` count the pixels lying on the
    line ``x cos t + y sin t = rho`` (angles in degrees, rho truncated).
    """
    data = np.asarray(image)
    height, width = data.shape[:2]
    rows = _accumulator_height(width, height)
    accumulator = np.zeros((rows, ANGLES), dtype=np.int64)
    ys, xs = np.nonzero(_lit(data))
    radians = np.arange(ANGLES) * math.pi / 180
    cos_t, sin_t = np.cos(radians), np.sin(radians)
    columns = np.arange(ANGLES)
    for start in range(0, len(xs), _CHUNK):
        x = xs[start : start + _CHUNK, None].astype(np.float64)
        y = ys[start : start + _CHUNK, None].astype(np.float64)
        rho = np.trunc(x * cos_t + y * sin_t).astype(np.int64)
        np.add.at(
            accumulator,
            (rho + rows // 2, np.broadcast_to(columns, rho.shape)),
            1,
        )
    return accumulator


def draw_hough_lines(image: np.ndarray, accumulator: np.ndarray) -> np.ndarray:
    """Return a copy of an RGB image with the strongest lines drawn in green.

    Raises ``ValueError`` when the accumulator has no clear peak.
    """
    result = np.array(image, dtype=np.uint8, copy=True)
    height, width = result.shape[:2]
    half = np.asarray(accumulator).shape[0] // 2
    for row, col in _peaks(accumulator):
        rad = col * math.pi / 180
        offset = row - half
        if _is_steep(col):
            xs = np.arange(width)
            ys = np.trunc((offset - xs * math.cos(rad)) / math.sin(rad))
            keep = (ys > 0) & (ys < height)
            result[ys[keep].astype(np.int64), xs[keep]] = _GREEN
        else:
            ys = np.arange(height)
            xs = np.trunc((offset - ys * math.sin(rad)) / math.cos(rad))
            keep = (xs > 0) & (xs < width)
            result[ys[keep], xs[keep].astype(np.int64)] = _GREEN
    return result


def _partial_sort(values: list[int]) -> list[int]:
    """The exchange pass used to order the angles before taking the middle."""
    data = list(values)
    for i in range(len(data)):
        for j in range(i, len(data) - 1):
            if data[j] > data[j + 1]:
                data[j], data[j + 1] = data[j + 1], data[j]
    return data


def dominant_angle(image: np.ndarray, accumulator: np.ndarray) -> int:
    """Return the rotation, in degrees, that straightens the grid.

    Raises ``ValueError`` when the accumulator does not fit the image or
    has no clear peak.
    """
    acc = np.asarray(accumulator)
    height, width = np.asarray(image).shape[:2]
    expected = (_accumulator_height(width, height), ANGLES)
    if acc.shape != expected:
        raise ValueError(f"accumulator shape {acc.shape} does not fit image, expected {expected}")

    x_angles: list[int] = []
    y_angles: list[int] = []
    for _, col in _peaks(acc):
        (x_angles if _is_steep(col) else y_angles).append(col)

    middle = len(y_angles) // 2
    if len(x_angles) > len(y_angles):
        return 90 - _partial_sort(x_angles)[middle]
    return -_partial_sort(y_angles)[middle]


def detection(
    path: PathType,
    operation: str,
    angle: str = "0",
    output_dir: PathType = ".",
) -> Path:
    """Run one detection step on an image file; return the last file written.

    Steps are ``--rotation``, ``--hough``, ``--blob`` and ``--all``; any
    other raises ``ValueError``.
    """
    out = Path(output_dir)
    source = load_image(path)

    if operation == "--rotation":
        image_process(path, Operation.CANNY, "0", out)
        target = out / "rota.bmp"
        save_image(rotate_shearing(source, parse_angle(angle)), target)
        return target

    if operation == "--hough":
        edges = load_image(image_process(path, Operation.CANNY, "0", out))
        return _straighten(edges, source, out)

    if operation == "--blob":
        edges = load_image(image_process(path, Operation.CANNY, "0", out))
        target = out / "Blob.bmp"
        save_image(blob_crop(edges), target)
        return target

    if operation == "--all":
        edges = load_image(image_process(path, Operation.ALL, "0", out))
        _straighten(edges, load_image(path), out)
        canny_edges = load_image(image_process(path, Operation.CANNY, "0", out))
        target = out / "Blob.bmp"
        save_image(blob_crop(canny_edges), target)
        return target

    raise ValueError(f"unknown detection step: {operation!r}")


def _straighten(edges: np.ndarray, source: np.ndarray, out: Path) -> Path:
    accumulator = hough_transform(edges)
    lines = draw_hough_lines(edges, accumulator)
    save_image(lines, out / "Hough.bmp")
    angle = dominant_angle(lines, accumulator)
    target = out / "Rotation.bmp"
    save_image(rotate_shearing(source, angle), target)
    return target