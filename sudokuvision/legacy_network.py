"""The first digit network: a larger layout with small starting weights."""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from .network import SHUFFLE_SCALE, Network

LEGACY_DIGIT_SIZES = (256, 128, 64, 9)
XOR_SIZES = (2, 4, 4, 1)


def init_weight(
    inputs: int, outputs: int, rng: Optional[np.random.Generator] = None
) -> np.ndarray:
    """Return an ``(outputs, inputs)`` matrix of weights in ``[-0.03, 0.03)``."""
    if inputs <= 0 or outputs <= 0:
        raise ValueError("matrix dimensions must be positive")
    rng = np.random.default_rng() if rng is None else rng
    return SHUFFLE_SCALE * (rng.random((outputs, inputs)) - 0.5)


class LegacyNetwork(Network):
    """A four-layer network whose weights start close to zero.

    Biases start at zero. The forward pass subtracts the biases while the
    training pass adds them, as in :class:`Network`.
    """

    def __init__(
        self,
        sizes: Sequence[int] = LEGACY_DIGIT_SIZES,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        rng = np.random.default_rng() if rng is None else rng
        super().__init__(sizes, rng)
        self.weights = [
            init_weight(inputs, outputs, rng)
            for inputs, outputs in zip(self.sizes, self.sizes[1:])
        ]

    def compute(self, inputs) -> np.ndarray:
        """Run the inputs forward and return a copy of the output neurons."""
        return super().compute(inputs)

    def train_step(self, inputs, expected, learn_rate: float) -> np.ndarray:
        """Do one back-propagation step; return the outputs before the update."""
        return self.learn(inputs, expected, learn_rate)

    def classify(self, inputs) -> int:
        """Return the 1-based index of the strongest output neuron."""
        outputs = self.compute(inputs)
        return int(np.argmax(outputs)) + 1

    def shuffle(self, rng: Optional[np.random.Generator] = None) -> None:
        """Reset weights to small random values and biases to zero."""
        rng = np.random.default_rng() if rng is None else rng
        for weights, layer in zip(self.weights, self.layers[1:]):
            rows, cols = weights.shape
            weights[:] = init_weight(cols, rows, rng)
            layer.biases[:] = 0.0