import io

import numpy as np
import pytest

from sudokuvision.legacy import (
    XOR_EXPECTED,
    learn_batch,
    load_training_inputs,
    main,
    read_legacy,
    write_legacy,
    xor_inputs,
)
from sudokuvision.legacy_network import XOR_SIZES, LegacyNetwork


def _xor_network(seed=0):
    return LegacyNetwork(XOR_SIZES, rng=np.random.default_rng(seed))


def _zero(network):
    for weights in network.weights:
        weights[:] = 0.0
    for layer in network.layers[1:]:
        layer.biases[:] = 0.0


def test_xor_inputs():
    assert xor_inputs().tolist() == [[0, 0], [0, 1], [1, 0], [1, 1]]


def test_read_legacy_accumulates_values():
    network = _xor_network()
    before = [w.copy() for w in network.weights]
    read_legacy(network, io.StringIO("1 2\n"))
    assert network.weights[0].ravel()[:3].tolist() == [1.0, 12.0, 12.0]
    assert np.array_equal(network.weights[0].ravel()[3:], before[0].ravel()[3:])
    assert np.array_equal(network.weights[1], before[1])
    assert network.layers[1].biases[2] == network.weights[0].ravel()[1]


def test_write_zero_network():
    network = _xor_network()
    _zero(network)
    out = io.StringIO()
    write_legacy(network, out)
    expected = (
        "0 " * 8 + "\n" + "0 " * 16 + "\n" + "0 " * 4 + "\n"
        + "0 " * 4 + "\n" + "0 " * 4 + "\n" + "0 " * 1 + "\n" + "\0"
    )
    assert out.getvalue() == expected


def test_write_nonzero_tokens_have_twelve_digits():
    network = _xor_network()
    _zero(network)
    network.weights[0][0, 0] = 0.5
    network.layers[3].biases[0] = 0.25
    out = io.StringIO()
    write_legacy(network, out)
    lines = out.getvalue().rstrip("\0").split("\n")
    assert len(lines[0].split()[0]) == 12
    assert len(lines[5].split()[0]) == 12
    assert lines[1].split() == ["0"] * 16


def test_load_training_inputs(tmp_path):
    rows = ["01" * 128, "1" * 256]
    path = tmp_path / "data.txt"
    path.write_text("".join(row + "7\n" for row in rows))
    inputs, expected = load_training_inputs(path, 2)
    assert inputs.shape == (2, 256)
    assert inputs[0].tolist() == [float(c) for c in rows[0]]
    assert inputs[1].tolist() == [1.0] * 256
    assert expected[0].argmax() == 0 and expected[1].argmax() == 1
    assert expected.sum() == 2


def test_learn_batch_trains():
    network = _xor_network()
    before = [w.copy() for w in network.weights]
    results = learn_batch(network, xor_inputs(), XOR_EXPECTED, 0.4, np.random.default_rng(1))
    assert len(results) == 4
    for num, best, strength in results:
        assert 1 <= num <= 4
        assert best == 1
        assert 0.0 < strength < 1.0
    assert any(not np.array_equal(a, b) for a, b in zip(before, network.weights))


def test_learn_batch_rejects_mismatch():
    with pytest.raises(ValueError):
        learn_batch(_xor_network(), xor_inputs(), XOR_EXPECTED[:2], 0.4)


def test_main_bad_arguments(capsys):
    assert main(["q", "weights", "data"]) == 1
    assert "Usage" in capsys.readouterr().err


def test_main_xor_second_operand_must_be_zero(tmp_path, capsys):
    assert main(["x", str(tmp_path / "w.txt"), "0", "1"]) == 1
    assert "Usage" in capsys.readouterr().err


def test_main_xor_query(tmp_path, capsys):
    assert main(["x", str(tmp_path / "w.txt"), "1", "0"]) == 0
    assert capsys.readouterr().out.startswith("1 xor 0 = 0\n")


def test_main_digit_query(tmp_path, capsys):
    data = tmp_path / "data.txt"
    data.write_text("01" * 128 + "3\n")
    assert main(["d", str(tmp_path / "w.txt"), str(data)]) == 0
    out = capsys.readouterr().out
    first = out.splitlines()[0]
    assert first.startswith("Result: ")
    assert 1 <= int(first.split()[1]) <= 9


def test_main_digit_query_missing_data(tmp_path, capsys):
    assert main(["d", str(tmp_path / "w.txt"), str(tmp_path / "absent")]) == 1
    assert "Usage" in capsys.readouterr().err