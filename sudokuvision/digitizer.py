"""Reducing a digit picture to a 16 x 16 grid of dark and light cells."""

from __future__ import annotations

from typing import Iterator, NamedTuple, TextIO

import numpy as np

from .imaging import PathType, load_image

GRID = 16
_LIGHT = 128


class _Layout(NamedTuple):
    base_x: int
    base_y: int
    width: int
    height: int
    step_x: int
    step_y: int


def _trunc_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return -quotient if value < 0 else quotient


def dark_bounds(image: np.ndarray) -> tuple[int, int, int, int]:
    """Return ``(base_x, base_y, max_x, max_y)`` around the dark pixels.

    A pixel is dark when all three channels are below 128. Without dark
    pixels the result is ``(width, height, 0, 0)``.
    """
    data = np.asarray(image)
    height, width = data.shape[:2]
    mask = np.all(data[..., :3] < _LIGHT, axis=-1)
    if not mask.any():
        return width, height, 0, 0
    ys, xs = np.nonzero(mask)
    return int(xs.min()), int(ys.min()), int(xs.max()), int(ys.max())


def _widen(base: int, top: int) -> tuple[int, int]:
    """Grow the span by steps of two, alternating sides, to a multiple of 16."""
    grow_top = False
    while (top - base) % GRID:
        if grow_top:
            top += 2
        else:
            base -= 2
        grow_top = not grow_top
    return base, top


def _layout(image: np.ndarray, span_parity: bool) -> _Layout:
    base_x, base_y, max_x, max_y = dark_bounds(image)
    if (max_x - base_x if span_parity else max_x) % 2:
        max_x += 1
    if (max_y - base_y if span_parity else max_y) % 2:
        max_y += 1
    base_x, max_x = _widen(base_x, max_x)
    base_y, max_y = _widen(base_y, max_y)
    width = max_x - base_x
    height = max_y - base_y
    return _Layout(
        base_x, base_y, width, height, _trunc_div(width, GRID), _trunc_div(height, GRID)
    )


def _cells(layout: _Layout) -> Iterator[tuple[int, int, int, int]]:
    for row in range(GRID):
        for col in range(GRID):
            yield row, col, layout.base_y + row * layout.step_y, layout.base_x + col * layout.step_x


def _flat_pixels(image: np.ndarray) -> np.ndarray:
    data = np.asarray(image)
    return data.reshape(-1, data.shape[-1])[:, :3]


def is_dark_cell(
    pixels: np.ndarray, start: int, stride: int, limit: int, width: int, height: int
) -> bool:
    """Tell whether most sampled pixels of a cell are not light.

    Samples are taken at flat indices ``start + p + stride * q`` for
    ``p < height`` and ``q < width``; indices outside ``0..limit`` are
    skipped. A pixel is light when all three channels are at least 128.
    """
    flat = _flat_pixels(pixels)
    if width <= 0 or height <= 0:
        return False
    rows = np.arange(height)[:, None]
    cols = np.arange(width)[None, :]
    indices = (start + rows + stride * cols).ravel()
    bound = min(limit, len(flat))
    indices = indices[(indices >= 0) & (indices < bound)]
    light = int(np.all(flat[indices] >= _LIGHT, axis=1).sum())
    dark = indices.size - light
    return dark > light


def digitize(image: np.ndarray) -> np.ndarray:
    """Return the 256 cell values (1 dark, 0 light) row by row."""
    data = np.asarray(image)
    layout = _layout(data, span_parity=True)
    flat = _flat_pixels(data)
    limit = layout.width * layout.height
    cells = np.zeros(GRID * GRID, dtype=np.uint8)
    for row, col, i, j in _cells(layout):
        cells[row * GRID + col] = is_dark_cell(
            flat, i * layout.width + j, layout.width, limit, layout.step_x, layout.step_y
        )
    return cells


def count_dark_cells(image: np.ndarray) -> int:
    """Return how many of the 256 cells are dark."""
    return int(digitize(image).sum())


def write_bitmap(image: np.ndarray, stream: TextIO) -> None:
    """Write the cells as 16 lines of ``0``/``1`` followed by a NUL.

    Cells whose origin falls outside the image are written as ``0``.
    """
    data = np.asarray(image)
    image_height, image_width = data.shape[:2]
    layout = _layout(data, span_parity=False)
    flat = _flat_pixels(data)
    limit = layout.width * layout.height
    line: list[str] = []
    for _, col, i, j in _cells(layout):
        if j < 0 or i < 0 or j > image_width or i > image_height:
            line.append("0")
        else:
            dark = is_dark_cell(
                flat, i * layout.width + j, layout.width, limit, layout.step_x, layout.step_y
            )
            line.append("1" if dark else "0")
        if col == GRID - 1:
            stream.write("".join(line) + "\n")
            line = []
    stream.write("\0")


def transform(path: PathType) -> np.ndarray:
    """Load an image file and return its 256 cell values."""
    return digitize(load_image(path))