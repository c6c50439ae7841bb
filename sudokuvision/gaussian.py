"""5x5 Gaussian blur with clamped borders."""

from __future__ import annotations

import numpy as np

GAUSSIAN_KERNEL = (
    np.array(
        [
            [1, 4, 6, 4, 1],
            [4, 16, 24, 16, 4],
            [6, 24, 36, 24, 6],
            [4, 16, 24, 16, 4],
            [1, 4, 6, 4, 1],
        ],
        dtype=np.float64,
    )
    / 256.0
)


def gaussian_blur(image: np.ndarray) -> np.ndarray:
    """Return a blurred copy of an RGB image; borders repeat the edge pixels."""
    data = np.asarray(image, dtype=np.float64)
    height, width = data.shape[:2]
    padded = np.pad(data, ((2, 2), (2, 2), (0, 0)), mode="edge")
    total = np.zeros_like(data)
    for k, row in enumerate(GAUSSIAN_KERNEL):
        for l, weight in enumerate(row):
            total += padded[k : k + height, l : l + width] * weight
    return (total.astype(np.int64) % 256).astype(np.uint8)