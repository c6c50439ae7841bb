"""Command line for the first network: XOR and digit training and queries."""

from __future__ import annotations

import math
import sys
from pathlib import Path
from typing import Optional, TextIO

import numpy as np

from .imaging import PathType
from .legacy_network import LEGACY_DIGIT_SIZES, XOR_SIZES, LegacyNetwork

HELP = (
    "Usage:\n--x valid_neuron_path num num\n--x valid_neuron_path learn\n"
    "--d valid_neuron_path valid_data_path\n"
    "--d valid_neuron_path valid_data_path learn"
)
XOR_EXPECTED = np.array([[0.0], [1.0], [1.0], [0.0]])
TRAINING_ITERATIONS = 1_000_000_000
XOR_LEARN_RATE = 0.4
DIGIT_LEARN_RATE = 0.01
DIGIT_INPUTS = 9
INPUT_SIZE = 256
DIGIT_CLASSES = 9
_DIGITS_PER_VALUE = 6
_EOF_VALUE = -1 - ord("0")


class _UsageError(Exception):
    """The command line does not match any usage."""


class _Reader:
    """Character reader that yields NUL once the text runs out."""

    def __init__(self, text: str) -> None:
        self._chars = iter(text)

    def next(self) -> str:
        return next(self._chars, "\0")


def xor_inputs() -> np.ndarray:
    """Return the four XOR input pairs."""
    return np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]])


def _read_line(reader: _Reader, c: str, value: float, target: np.ndarray):
    index = 0
    while c not in "\0\n" and index < target.size:
        while c not in " \n\0":
            value = 10 * value + (ord(c) - ord("0"))
            c = reader.next()
        if c == " ":
            c = reader.next()
        target[index] = value
        index += 1
    if value != 0 and index < target.size:
        target[index] = value
    if c == "\n":
        c = reader.next()
    return c, value, index


def read_legacy(network: LegacyNetwork, stream: TextIO) -> None:
    """Read weights and biases in the first network's text format.

    Digits accumulate into one running value across the whole text, each
    cell taking the value reached so far.
    """
    reader = _Reader(stream.read())
    c = reader.next()
    value = 0.0
    index = 0
    for weights in network.weights:
        if c == "\0":
            break
        c, value, index = _read_line(reader, c, value, weights.reshape(-1))
    if c == "\n":
        c = reader.next()
    layers = network.layers
    depth = 1
    while c != "\0" and depth < len(layers):
        c, value, index = _read_line(reader, c, value, layers[depth].biases)
        depth += 1
    if depth < len(layers) and index < layers[depth].size:
        layers[depth].biases[index] = value


def _digit(value: float) -> str:
    whole = int(value)
    remainder = abs(whole) % 10
    return chr(ord("0") + (-remainder if whole < 0 else remainder))


def _encode(value: float) -> str:
    if value == 0:
        return "0"
    if not math.isfinite(value):
        raise ValueError(f"cannot write a non-finite value: {value}")
    chars: list[str] = []
    for _ in range(_DIGITS_PER_VALUE):
        chars.append(_digit(value))
        value *= 10
        chars.append(_digit(value))
    return "".join(chars)


def _encode_line(values: np.ndarray) -> str:
    return "".join(_encode(float(value)) + " " for value in values.ravel()) + "\n"


def write_legacy(network: LegacyNetwork, stream: TextIO) -> None:
    """Write weights, then biases, one line per matrix or layer, then a NUL."""
    for weights in network.weights:
        stream.write(_encode_line(weights))
    for layer in network.layers[1:]:
        stream.write(_encode_line(layer.biases))
    stream.write("\0")


def load_training_inputs(path: PathType, count: int) -> tuple[np.ndarray, np.ndarray]:
    """Read ``count`` inputs of 256 characters, one per line.

    Each character gives ``ord(char) - ord('0')``; characters past the end
    of the file read as -49. Input ``i`` is expected to be digit ``i % 9 + 1``.
    Returns the inputs and the one-hot expected outputs.
    """
    with open(path, encoding="latin-1") as handle:
        chars = iter(handle.read())
    inputs = np.zeros((count, INPUT_SIZE))
    expected = np.zeros((count, DIGIT_CLASSES))
    for i in range(count):
        for j in range(INPUT_SIZE):
            char = next(chars, None)
            inputs[i, j] = _EOF_VALUE if char is None else ord(char) - ord("0")
        for char in chars:
            if char in "\n\0":
                break
        expected[i, i % DIGIT_CLASSES] = 1.0
    return inputs, expected


def learn_batch(
    network: LegacyNetwork,
    inputs,
    expected,
    learn_rate: float,
    rng: Optional[np.random.Generator] = None,
) -> list[tuple[int, int, float]]:
    """Train on as many randomly drawn inputs as there are inputs.

    Returns, for every step, the 1-based input drawn, the recognised class
    and the strength of that class's output.
    """
    rng = np.random.default_rng() if rng is None else rng
    samples = np.asarray(inputs, dtype=np.float64)
    targets = np.asarray(expected, dtype=np.float64)
    if len(samples) == 0 or len(samples) != len(targets):
        raise ValueError("inputs and expected outputs must be non-empty and match")
    choices = min(DIGIT_CLASSES, len(samples))
    results = []
    for _ in range(len(samples)):
        num = int(rng.integers(choices))
        outputs = network.train_step(samples[num], targets[num], learn_rate)[:DIGIT_CLASSES]
        best = int(np.argmax(outputs))
        results.append((num + 1, best + 1, float(outputs[best])))
    return results


def _train(network, inputs, expected, learn_rate, rng, iterations=TRAINING_ITERATIONS):
    for _ in range(iterations):
        print("-" * 48)
        for num, best, strength in learn_batch(network, inputs, expected, learn_rate, rng):
            print(f"\ninput = {num}")
            print(f"result = {best}\npercentage = {strength:f}")
        print()


def _run(args: list[str]) -> int:
    if len(args) not in (3, 4) or args[0][:1] not in ("x", "d"):
        raise _UsageError
    mode = args[0][0]
    network = LegacyNetwork(XOR_SIZES if mode == "x" else LEGACY_DIGIT_SIZES)
    weights_path = Path(args[1])
    if weights_path.is_file():
        with open(weights_path, encoding="latin-1") as stream:
            read_legacy(network, stream)

    if mode == "x" and len(args) == 4:
        first, second = args[2][:1], args[3][:1]
        if first not in ("0", "1") or second != "0":
            raise _UsageError
        outputs = network.compute([int(first), int(second)])
        best = 1 if outputs.size > 1 and outputs[1] > outputs[0] else 0
        print(f"{first} xor {second} = {best}\nPercentage: {outputs[best]:f}")
    elif mode == "d" and len(args) == 3:
        data_path = Path(args[2])
        if not data_path.is_file():
            raise _UsageError
        inputs, _ = load_training_inputs(data_path, 1)
        outputs = network.compute(inputs[0])
        best = int(np.argmax(outputs))
        print(f"Result: {best + 1}\nPercentage: {outputs[best]:f}")
    elif mode == "x":
        _train(network, xor_inputs(), XOR_EXPECTED, XOR_LEARN_RATE, np.random.default_rng())
        for weights in network.weights:
            print("".join(f"{value:f} " for value in weights.ravel()))
        with open(weights_path, "w", encoding="latin-1") as stream:
            write_legacy(network, stream)
    else:
        inputs, expected = load_training_inputs(args[2], DIGIT_INPUTS)
        _train(network, inputs, expected, DIGIT_LEARN_RATE, np.random.default_rng())
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Run the command; returns the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        return _run(args)
    except _UsageError:
        print(HELP, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())