"""A small fully connected network that recognises the digits 1 to 9."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import pairwise
from typing import Iterator, Optional, Sequence, TextIO

import numpy as np

DEFAULT_SIZES = (256, 16, 16, 9)
WEIGHT_DIVISOR = 10000.0
SHUFFLE_SCALE = 0.06
DIGIT_CLASSES = 9


def sigmoid(z):
    """Return the logistic function of ``z`` (scalar or array)."""
    return 1.0 / (1.0 + np.exp(-np.asarray(z, dtype=np.float64)))


def sigmoid_derivative(z):
    """Return the derivative of the logistic function at ``z``."""
    value = sigmoid(z)
    return value * (1.0 - value)


def cost(outputs: Sequence[float], expected: Sequence[float], index: int) -> float:
    """Return the squared error of one output neuron."""
    error = float(expected[index]) - float(outputs[index])
    return error * error


@dataclass
class Layer:
    """One layer of neurons with their biases."""

    depth: int
    input_size: int
    neurons: np.ndarray
    biases: np.ndarray

    @property
    def size(self) -> int:
        """Number of neurons in the layer."""
        return len(self.neurons)


class _CharReader:
    """Character-at-a-time reader that yields NUL once the text runs out."""

    def __init__(self, text: str) -> None:
        self._chars: Iterator[str] = iter(text)

    def next(self) -> str:
        return next(self._chars, "\0")


def _read_values(reader: _CharReader, c: str, target: np.ndarray) -> str:
    """Fill ``target`` from one line of fixed-point numbers; return the next char."""
    index = 0
    while c not in "\0\n" and index < target.size:
        negative = c == "-"
        if negative:
            c = reader.next()
        value = 0.0
        while c not in " \n\0":
            value = value * 10 + (ord(c) - ord("0"))
            c = reader.next()
        if c == " ":
            c = reader.next()
        target[index] = -value / WEIGHT_DIVISOR if negative else value / WEIGHT_DIVISOR
        index += 1
    if c == "\n":
        c = reader.next()
    return c


class Network:
    """A network of an input layer, two hidden layers and an output layer."""

    def __init__(
        self,
        sizes: Sequence[int] = DEFAULT_SIZES,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        if len(sizes) != 4:
            raise ValueError(f"expected four layer sizes, got {len(sizes)}")
        if any(int(size) <= 0 for size in sizes):
            raise ValueError("layer sizes must be positive")
        rng = np.random.default_rng() if rng is None else rng
        self.sizes = tuple(int(size) for size in sizes)
        self.layers = [
            Layer(
                depth=depth,
                input_size=self.sizes[depth - 1] if depth else 0,
                neurons=np.zeros(size),
                biases=np.zeros(size),
            )
            for depth, size in enumerate(self.sizes)
        ]
        self.weights = [
            2.0 * (rng.random((outputs, inputs)) - 0.5)
            for inputs, outputs in pairwise(self.sizes)
        ]

    def _set_inputs(self, inputs) -> np.ndarray:
        values = np.asarray(inputs, dtype=np.float64).ravel()
        if values.size != self.sizes[0]:
            raise ValueError(
                f"expected {self.sizes[0]} inputs, got {values.size}"
            )
        self.layers[0].neurons = values.copy()
        return self.layers[0].neurons

    def compute(self, inputs) -> np.ndarray:
        """Run the inputs forward and return a copy of the output neurons.

        Each neuron is ``sigmoid(weighted sum - bias)``.
        """
        current = self._set_inputs(inputs)
        for weights, layer in zip(self.weights, self.layers[1:]):
            layer.neurons[:] = sigmoid(weights @ current - layer.biases)
            current = layer.neurons
        return self.layers[-1].neurons.copy()

    def learn(self, inputs, expected, learn_rate: float) -> np.ndarray:
        """Do one step of back-propagation towards ``expected``.

        The training pass adds the biases to the weighted sums. Weights are
        updated from the output backwards, and each hidden error is taken
        through the freshly updated weights. Returns the outputs of the
        forward pass made before the update.
        """
        target = np.asarray(expected, dtype=np.float64).ravel()
        if target.size != self.sizes[-1]:
            raise ValueError(
                f"expected {self.sizes[-1]} target values, got {target.size}"
            )
        activations = [self._set_inputs(inputs)]
        weighted: list[np.ndarray] = []
        for weights, layer in zip(self.weights, self.layers[1:]):
            z = weights @ activations[-1] + layer.biases
            layer.neurons[:] = sigmoid(z)
            weighted.append(z)
            activations.append(layer.neurons)
        outputs = self.layers[-1].neurons.copy()

        values = 2.0 * (target - outputs) * sigmoid_derivative(weighted[-1])
        for depth in range(len(self.weights) - 1, -1, -1):
            self.weights[depth] += np.outer(values, activations[depth]) * learn_rate
            self.layers[depth + 1].biases += values * learn_rate
            if depth:
                values = (self.weights[depth].T @ values) * sigmoid_derivative(
                    weighted[depth - 1]
                )
        return outputs

    def classify(self, inputs) -> int:
        """Return the recognised digit, 1 to 9, for the given inputs."""
        outputs = self.compute(inputs)[:DIGIT_CLASSES]
        return int(np.argmax(outputs)) + 1

    def load_weights(self, stream: TextIO) -> None:
        """Read weights and biases from a text stream.

        The text holds one line per weight matrix, then one line per
        non-input layer of biases; each value is a signed integer that is
        divided by 10000. A NUL or the end of the text stops reading.
        """
        reader = _CharReader(stream.read())
        c = reader.next()
        for weights in self.weights:
            if c == "\0":
                break
            c = _read_values(reader, c, weights.reshape(-1))
        if c == "\n":
            c = reader.next()
        for layer in self.layers[1:]:
            if c == "\0":
                break
            c = _read_values(reader, c, layer.biases)

    def shuffle(self, rng: Optional[np.random.Generator] = None) -> None:
        """Reset weights to small random values and biases to zero."""
        rng = np.random.default_rng() if rng is None else rng
        for weights, layer in zip(self.weights, self.layers[1:]):
            weights[:] = SHUFFLE_SCALE * (rng.random(weights.shape) - 0.5)
            layer.biases[:] = 0.0