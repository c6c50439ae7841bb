import io

import numpy as np
import pytest

from sudokuvision.network import (
    DEFAULT_SIZES,
    Network,
    cost,
    sigmoid,
    sigmoid_derivative,
)


def _network(sizes=(4, 3, 3, 2), seed=1):
    return Network(sizes, rng=np.random.default_rng(seed))


def test_sigmoid_is_symmetric():
    for z in (-3.0, -0.5, 0.0, 1.25, 7.0):
        assert sigmoid(z) + sigmoid(-z) == pytest.approx(1.0)


def test_sigmoid_is_increasing_and_bounded():
    values = sigmoid(np.linspace(-10, 10, 50))
    assert np.all(np.diff(values) > 0)
    assert np.all((values > 0) & (values < 1))


def test_sigmoid_derivative_matches_sigmoid():
    for z in (-2.0, 0.0, 3.5):
        s = sigmoid(z)
        assert sigmoid_derivative(z) == pytest.approx(s * (1 - s))


def test_cost_is_squared_error():
    assert cost([0.25, 1.0], [1.0, 1.0], 0) == pytest.approx((1.0 - 0.25) ** 2)
    assert cost([0.25, 1.0], [1.0, 1.0], 1) == 0.0


def test_default_shapes():
    net = Network(rng=np.random.default_rng(0))
    assert net.sizes == DEFAULT_SIZES
    assert [w.shape for w in net.weights] == [(16, 256), (16, 16), (9, 16)]
    assert [layer.input_size for layer in net.layers] == [0, 256, 16, 16]
    assert [layer.depth for layer in net.layers] == [0, 1, 2, 3]


def test_initial_weights_in_range_and_biases_zero():
    net = _network()
    for weights in net.weights:
        assert np.all(np.abs(weights) <= 1.0)
    for layer in net.layers:
        assert not layer.biases.any()


def test_wrong_layer_count_rejected():
    with pytest.raises(ValueError):
        Network((4, 3, 2))


def test_compute_subtracts_bias():
    net = _network()
    for weights in net.weights:
        weights[:] = 0.0
    net.layers[3].biases[:] = [1.5, -2.0]
    outputs = net.compute([1, 0, 1, 0])
    np.testing.assert_allclose(outputs, sigmoid(np.array([-1.5, 2.0])))


def test_compute_rejects_wrong_input_size():
    net = _network()
    with pytest.raises(ValueError):
        net.compute([1, 2, 3])


def test_classify_picks_largest_output():
    net = Network(rng=np.random.default_rng(3))
    net.weights[2][:] = 0.0
    net.layers[3].biases[:] = 0.0
    net.layers[3].biases[4] = -5.0
    assert net.classify(np.zeros(256)) == 5


def test_learn_reduces_cost():
    net = _network(seed=7)
    inputs = [1.0, 0.0, 1.0, 1.0]
    target = [1.0, 0.0]
    first = net.learn(inputs, target, 0.5)
    for _ in range(300):
        last = net.learn(inputs, target, 0.5)
    before = cost(first, target, 0) + cost(first, target, 1)
    after = cost(last, target, 0) + cost(last, target, 1)
    assert after < before


def test_learn_rejects_wrong_target_size():
    net = _network()
    with pytest.raises(ValueError):
        net.learn([0, 0, 0, 0], [1, 0, 0], 0.1)


def test_load_weights_reads_fixed_point_values():
    net = _network(sizes=(2, 2, 2, 2))
    raw_weights = [[10000, -20000, 5000, 0], [1, 2, 3, 4], [-1, -2, -3, -4]]
    raw_biases = [[30000, -30000], [7, 8], [-9, 12345]]
    lines = [" ".join(str(v) for v in row) + " " for row in raw_weights + raw_biases]
    net.load_weights(io.StringIO("\n".join(lines) + "\n\0"))
    for weights, row in zip(net.weights, raw_weights):
        np.testing.assert_allclose(weights.ravel(), np.array(row) / 10000)
    for layer, row in zip(net.layers[1:], raw_biases):
        np.testing.assert_allclose(layer.biases, np.array(row) / 10000)


def test_load_weights_stops_at_end_of_text():
    net = _network(sizes=(2, 2, 2, 2))
    before = [w.copy() for w in net.weights[1:]]
    net.load_weights(io.StringIO("10000 10000 10000 10000 "))
    np.testing.assert_allclose(net.weights[0].ravel(), np.ones(4))
    for weights, old in zip(net.weights[1:], before):
        np.testing.assert_array_equal(weights, old)


def test_shuffle_resets_to_small_weights():
    net = _network()
    net.layers[2].biases[:] = 3.0
    net.shuffle(np.random.default_rng(5))
    for weights in net.weights:
        assert np.all(np.abs(weights) <= 0.03)
    for layer in net.layers[1:]:
        assert not layer.biases.any()