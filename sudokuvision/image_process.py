"""Named image-processing steps that read one file and write another."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Union

import numpy as np

from .canny import SOBEL_X, SOBEL_Y, canny, convolution, sobel
from .gaussian import gaussian_blur
from .grayscale import to_grayscale
from .imaging import PathType, load_image, save_image
from .rotation import parse_angle, rotate_shearing


class Operation(Enum):
    """A processing step, identified by its command-line flag."""

    GRAYSCALE = "--grayscale"
    GAUSSIAN = "--gaussian"
    SOBEL = "--sobel"
    CANNY = "--canny"
    ALL = "--all"
    ROTATION = "--rotation"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str) and not value.startswith("--"):
            return cls.__members__.get(value.upper())
        return None

    @property
    def output_name(self) -> str:
        """File name the step's result is saved under."""
        return _OUTPUT_NAMES[self]


_OUTPUT_NAMES = {
    Operation.GRAYSCALE: "Grayscale.bmp",
    Operation.GAUSSIAN: "Gaussian.bmp",
    Operation.SOBEL: "Sobel.bmp",
    Operation.CANNY: "Canny.bmp",
    Operation.ALL: "ImageProcessing.bmp",
    Operation.ROTATION: "Rotation.bmp",
}


def apply_operation(
    image: np.ndarray, operation: Union[Operation, str], angle: str = "0"
) -> np.ndarray:
    """Apply one step to an RGB image and return the result.

    Raises ``ValueError`` for an unknown operation or an invalid angle.
    """
    step = Operation(operation)
    if step is Operation.GRAYSCALE:
        return to_grayscale(image)
    if step is Operation.GAUSSIAN:
        return gaussian_blur(image)
    if step is Operation.SOBEL:
        convolution(image, SOBEL_X)
        convolution(image, SOBEL_Y)
        return sobel(image)
    if step is Operation.CANNY:
        return canny(image)
    if step is Operation.ALL:
        return canny(gaussian_blur(to_grayscale(image)))
    return rotate_shearing(image, parse_angle(angle))


def image_process(
    filename: PathType,
    operation: Union[Operation, str],
    angle: str = "0",
    output_dir: PathType = ".",
) -> Path:
    """Load ``filename``, apply the step and save it; return the written path."""
    step = Operation(operation)
    result = apply_operation(load_image(filename), step, angle)
    target = Path(output_dir) / step.output_name
    save_image(result, target)
    return target