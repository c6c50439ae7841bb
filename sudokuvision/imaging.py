"""Loading, saving and packing of RGB images held as numpy arrays."""

from __future__ import annotations

from os import PathLike
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

PathType = Union[str, "PathLike[str]", Path]


def load_image(path: PathType) -> np.ndarray:
    """Load an image file as an ``(height, width, 3)`` uint8 RGB array.

    Raises ``OSError`` when the file is missing or is not an image.
    """
    with Image.open(path) as picture:
        return np.array(picture.convert("RGB"), dtype=np.uint8)


def save_image(image: np.ndarray, path: PathType) -> None:
    """Write an RGB (or single-channel) uint8 array to ``path``.

    The file format is chosen from the file extension.
    """
    data = np.ascontiguousarray(np.asarray(image, dtype=np.uint8))
    if data.ndim not in (2, 3):
        raise ValueError(f"expected a 2-D or 3-D image array, got {data.ndim}-D")
    Image.fromarray(data).save(path)


def pack_rgb(image: np.ndarray) -> np.ndarray:
    """Pack an RGB array into ``0x00RRGGBB`` uint32 pixel values."""
    data = np.asarray(image, dtype=np.uint32)
    return (data[..., 0] << 16) | (data[..., 1] << 8) | data[..., 2]


def unpack_rgb(packed: np.ndarray) -> np.ndarray:
    """Split ``0x00RRGGBB`` pixel values back into an RGB uint8 array."""
    data = np.asarray(packed, dtype=np.uint32)
    channels = [(data >> shift) & 0xFF for shift in (16, 8, 0)]
    return np.stack(channels, axis=-1).astype(np.uint8)