"""Locating the sudoku grid as the largest dense blob of edge pixels."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable

import numpy as np

from .imaging import pack_rgb

MERGE_TOLERANCE = 2
_RED = (255, 0, 0)


@dataclass
class Blob:
    """An axis-aligned bounding box around a group of pixels."""

    xmin: int
    ymin: int
    xmax: int
    ymax: int

    @classmethod
    def at(cls, x: int, y: int) -> "Blob":
        """Return a blob covering the single point ``(x, y)``."""
        return cls(x, y, x, y)

    def update(self, x: int, y: int) -> None:
        """Grow the box so that it contains ``(x, y)``."""
        self.xmax = max(self.xmax, x)
        self.ymax = max(self.ymax, y)
        self.xmin = min(self.xmin, x)
        self.ymin = min(self.ymin, y)

    def absorb(self, other: "Blob") -> None:
        """Grow the box so that it contains ``other``."""
        self.xmax = max(self.xmax, other.xmax)
        self.ymax = max(self.ymax, other.ymax)
        self.xmin = min(self.xmin, other.xmin)
        self.ymin = min(self.ymin, other.ymin)

    def in_reach(self, tolerance: int, x: int, y: int) -> bool:
        """Tell whether ``(x, y)`` lies within ``tolerance`` of the box."""
        return (
            self.xmin - tolerance <= x <= self.xmax + tolerance
            and self.ymin - tolerance <= y <= self.ymax + tolerance
        )

    def size(self) -> int:
        """Return the area of the box."""
        return (self.xmax - self.xmin) * (self.ymax - self.ymin)


def _packed(pixels: np.ndarray) -> np.ndarray:
    data = np.asarray(pixels)
    if data.ndim == 3:
        data = pack_rgb(data)
    return data.astype(np.int64)


def _density_map(data: np.ndarray, zone: int) -> np.ndarray:
    """Sum of pixel values in a ``zone``-sized window around every pixel."""
    height, width = data.shape
    integral = np.zeros((height + 1, width + 1), dtype=np.int64)
    integral[1:, 1:] = data.cumsum(axis=0).cumsum(axis=1)
    half = zone // 2
    ys = np.arange(height)
    xs = np.arange(width)
    r0 = np.clip(ys - half, 0, height)[:, None]
    r1 = np.clip(ys - half + zone, 0, height)[:, None]
    c0 = np.clip(xs - half, 0, width)[None, :]
    c1 = np.clip(xs - half + zone, 0, width)[None, :]
    return integral[r1, c1] - integral[r0, c1] - integral[r1, c0] + integral[r0, c0]


def count(pixels: np.ndarray, x: int, y: int, zone: int) -> int:
    """Sum the packed pixel values in a ``zone`` x ``zone`` window at ``(x, y)``."""
    data = _packed(pixels)
    height, width = data.shape
    top = y - zone // 2
    left = x - zone // 2
    rows = slice(max(top, 0), max(min(top + zone, height), 0))
    cols = slice(max(left, 0), max(min(left + zone, width), 0))
    return int(data[rows, cols].sum())


def max_density(pixels: np.ndarray, zone: int) -> int:
    """Return the largest window sum found around a non-zero pixel."""
    data = _packed(pixels)
    density = _density_map(data, zone)
    return int(density[data != 0].max(initial=0))


def intervals_touch(max1: int, min1: int, max2: int, min2: int, tolerance: int) -> bool:
    """Tell whether two intervals overlap or lie within ``tolerance`` of each other."""
    if max2 < min1:
        return min1 - max2 <= tolerance
    if min2 > max1:
        return min2 - max1 <= tolerance
    return True


def generate_blobs(image: np.ndarray) -> list[Blob]:
    """Group the densest non-zero pixels of an image into blobs.

    Pixels are visited row by row; each joins the first blob within reach
    or starts a new one.
    """
    data = _packed(image)
    height, width = data.shape
    zone = max(width, height) * 15 // 100
    density = _density_map(data, zone)
    lit = data != 0
    peak = int(density[lit].max(initial=0))
    threshold = peak * 98 // 100
    tolerance = zone // 10

    blobs: list[Blob] = []
    ys, xs = np.nonzero(lit & (density > threshold))
    for y, x in zip(ys.tolist(), xs.tolist()):
        for blob in blobs:
            if blob.in_reach(tolerance, x, y):
                blob.update(x, y)
                break
        else:
            blobs.append(Blob.at(x, y))
    return blobs


def _touching(first: Blob, second: Blob) -> bool:
    return intervals_touch(
        first.xmax, first.xmin, second.xmax, second.xmin, MERGE_TOLERANCE
    ) and intervals_touch(
        first.ymax, first.ymin, second.ymax, second.ymin, MERGE_TOLERANCE
    )


def merge_blobs(blobs: Iterable[Blob]) -> Blob:
    """Merge touching blobs repeatedly and return the largest result.

    The given blobs are left unchanged. Raises ``ValueError`` when there
    are none.
    """
    work = [replace(blob) for blob in blobs]
    if not work:
        raise ValueError("no blob to merge")

    merged = True
    while merged:
        merged = False
        for i in range(len(work)):
            if merged:
                break
            for j in range(len(work) - 1, -1, -1):
                if j == i:
                    continue
                if _touching(work[i], work[j]):
                    work[i].absorb(work[j])
                    del work[j]
                    merged = True
                    if j < i:
                        break

    return replace(max(work, key=Blob.size))


def draw_blobs(image: np.ndarray, blobs: Iterable[Blob]) -> np.ndarray:
    """Return a copy of an RGB image with every blob filled in red."""
    result = np.array(image, dtype=np.uint8, copy=True)
    for blob in blobs:
        result[blob.ymin : blob.ymax, blob.xmin : blob.xmax] = _RED
    return result


def crop(image: np.ndarray, blob: Blob) -> np.ndarray:
    """Return the part of the image inside the blob's box."""
    data = np.asarray(image)
    return np.array(data[blob.ymin : blob.ymax, blob.xmin : blob.xmax], copy=True)


def blob_crop(image: np.ndarray) -> np.ndarray:
    """Crop an edge image to its largest merged blob."""
    return crop(image, merge_blobs(generate_blobs(image)))