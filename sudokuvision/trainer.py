"""Command line for training the digit network and querying it."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO

import numpy as np

from .digitizer import transform
from .imaging import PathType
from .network import DIGIT_CLASSES, Network

HELP = "Usage:\n./main valid_data_path\n./main learn"
NOT_TRAINED = "Must train before"
WEIGHTS_FILE = "digits.txt"
TRAINING_DIR = "training_data"
TRAINING_ITERATIONS = 3001
LEARN_RATE = 0.5
REPORT_EVERY = 100
_DIGITS_PER_VALUE = 6


@dataclass(frozen=True)
class TrainingReport:
    """Progress of one reported training step."""

    iteration: int
    digit: int
    result: int
    percentage: float


def _encode(value: float) -> str:
    """Six truncated decimal digits of a value below ten; larger values give none."""
    if not math.isfinite(value):
        raise ValueError(f"cannot write a non-finite value: {value}")
    sign = "-" if value < 0 else ""
    value = abs(value)
    if int(value) // 10:
        return sign
    digits = []
    for _ in range(_DIGITS_PER_VALUE):
        digits.append(str(int(value) % 10))
        value *= 10
    return sign + "".join(digits)


def _encode_line(values: np.ndarray) -> str:
    return "".join(_encode(float(value)) + " " for value in values.ravel()) + "\n"


def write_weights(network: Network, stream: TextIO) -> None:
    """Write one line per weight matrix, one per layer of biases, then a NUL."""
    for weights in network.weights:
        stream.write(_encode_line(weights))
    for layer in network.layers[1:]:
        stream.write(_encode_line(layer.biases))
    stream.write("\0")


def pick_training_file(
    data_dir: PathType, digit: int, rng: Optional[np.random.Generator] = None
) -> Path:
    """Pick a random non-hidden file from the folder of ``digit`` (1 to 9).

    Raises ``FileNotFoundError`` when the folder is missing and
    ``ValueError`` for a bad digit or an empty folder.
    """
    if not 1 <= digit <= DIGIT_CLASSES:
        raise ValueError(f"digit must lie between 1 and {DIGIT_CLASSES}, got {digit}")
    rng = np.random.default_rng() if rng is None else rng
    folder = Path(data_dir) / str(digit)
    files = sorted(
        entry
        for entry in folder.iterdir()
        if not entry.name.startswith(".") and entry.is_file()
    )
    if not files:
        raise ValueError(f"no training file in {folder}")
    return files[int(rng.integers(len(files)))]


def train(
    network: Network,
    data_dir: PathType = TRAINING_DIR,
    iterations: int = TRAINING_ITERATIONS,
    rng: Optional[np.random.Generator] = None,
) -> list[TrainingReport]:
    """Train on randomly drawn digit pictures.

    Returns a report for every hundredth step, starting with the first.
    """
    rng = np.random.default_rng() if rng is None else rng
    reports: list[TrainingReport] = []
    for iteration in range(iterations):
        num = int(rng.integers(DIGIT_CLASSES))
        expected = np.zeros(network.sizes[-1])
        expected[num] = 1.0
        inputs = transform(pick_training_file(data_dir, num + 1, rng))
        outputs = network.learn(inputs, expected, LEARN_RATE)[:DIGIT_CLASSES]
        if iteration % REPORT_EVERY == 0:
            best = int(np.argmax(outputs))
            reports.append(
                TrainingReport(iteration, num + 1, best + 1, float(outputs[best]))
            )
    return reports


def main(argv: Optional[list[str]] = None) -> int:
    """Classify a digit picture, or train with ``learn``; returns the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print(HELP, file=sys.stderr)
        return 1

    network = Network()
    weights_path = Path(WEIGHTS_FILE)
    trained = weights_path.is_file()
    if trained:
        with open(weights_path, encoding="ascii", errors="replace") as stream:
            network.load_weights(stream)

    try:
        if not args[0].startswith("l"):
            if not trained:
                print(NOT_TRAINED, file=sys.stderr)
                return 1
            outputs = network.compute(transform(args[0]))[:DIGIT_CLASSES]
            best = int(np.argmax(outputs))
            print(f"Result: {best + 1}\nPercentage: {outputs[best]:f}")
        else:
            reports = train(
                network, TRAINING_DIR, TRAINING_ITERATIONS, np.random.default_rng()
            )
            for report in reports:
                print(f"\nInput: {report.digit}")
                print(f"Result = {report.result}\nPercentage = {report.percentage:f}")
            with open(weights_path, "w", encoding="ascii") as stream:
                write_weights(network, stream)
    except (OSError, ValueError) as error:
        print(error, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())