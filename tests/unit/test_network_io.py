from dataclasses import dataclass
from typing import ClassVar

import numpy as np
import pytest

from neuralnetlib.core.activations import Sigmoid, Tanh
from neuralnetlib.core.algebra import Matrix, Vector
from neuralnetlib.core.initialization import NormalizedInitialization
from neuralnetlib.core.network import NeuralNetwork
from neuralnetlib.io import network_io
from neuralnetlib.io.network_io import (
    NetworkLoadError,
    NetworkRecord,
    NetworkSaveError,
    format_network,
    load_network,
    parse_network,
    save_network,
)

LEGACY_FILE = """SIGMOID_ACTIVATION_FUNCTION
3
0.5 -1.25 
2.0E-3 
1.0 2.0 
3.0 4.0 

-5.0 6.0E-4 

"""


def _network(activation=None):
    init = NormalizedInitialization(rng=np.random.default_rng(9))
    return NeuralNetwork.from_sizes([3, 4, 2], activation, init)


@pytest.mark.parametrize("activation", [Sigmoid(), Tanh()])
def test_save_then_load_round_trips(tmp_path, activation):
    net = _network(activation)
    path = save_network(tmp_path / "net.dat", net)
    loaded = load_network(path)
    assert loaded.weights == net.weights
    assert loaded.biases == net.biases
    assert type(loaded.activation) is type(activation)
    assert loaded.layer_sizes == [3, 4, 2]


def test_saved_file_layout(tmp_path):
    net = NeuralNetwork([Matrix([[1.0, 2.0]])], [Vector([0.5])])
    text = (save_network(tmp_path / "tiny.dat", net)).read_text()
    assert text == "#version 1\nSIGMOID_ACTIVATION_FUNCTION\n2\n0.5\n1.0 2.0\n\n"


def test_loads_legacy_file_without_trailing_blank_line(tmp_path):
    path = tmp_path / "legacy.dat"
    path.write_text(LEGACY_FILE.rstrip("\n"))
    net = load_network(path)
    assert net.layer_sizes == [2, 2, 1]
    assert net.weights[1] == Matrix([[-5.0, 6.0e-4]])


def test_parse_legacy_layout():
    record = parse_network(LEGACY_FILE)
    assert record.version == 1
    assert record.activation == "sigmoid"
    assert record.layer_count == 3
    assert record.biases == [Vector([0.5, -1.25]), Vector([2.0e-3])]
    assert record.weights == [Matrix([[1.0, 2.0], [3.0, 4.0]]), Matrix([[-5.0, 6.0e-4]])]


def test_missing_marker_defaults_to_sigmoid():
    text = "2\n0.0\n1.0\n"
    record = parse_network(text)
    assert record.activation == "sigmoid"
    assert isinstance(record.to_network().activation, Sigmoid)


def test_format_and_parse_are_inverse():
    record = NetworkRecord.from_network(_network())
    assert parse_network(format_network(record)) == record


@pytest.mark.parametrize(
    "text",
    [
        "",
        "SIGMOID_ACTIVATION_FUNCTION\nthree\n",
        "#version 2\n2\n0.0\n1.0\n",
        "#version one\n2\n0.0\n1.0\n",
        "2\n0.0\n1.0 abc\n",
        "3\n0.0\n",
        "2\n0.0\n1.0\n\n2.0\n",
        "2\n0.0\n1.0 2.0\n3.0\n",
        "1\n",
    ],
)
def test_malformed_text_raises_load_error(text):
    with pytest.raises(NetworkLoadError):
        parse_network(text)


def test_malformed_number_chains_the_cause(tmp_path):
    path = tmp_path / "bad.dat"
    path.write_text("2\n0.0\nnot-a-number\n")
    with pytest.raises(NetworkLoadError) as info:
        load_network(path)
    assert isinstance(info.value.__cause__, ValueError)


def test_inconsistent_shapes_raise_load_error(tmp_path):
    path = tmp_path / "shapes.dat"
    # bias has two entries but the weight matrix only one row
    path.write_text("2\n0.0 1.0\n1.0 2.0\n")
    with pytest.raises(NetworkLoadError):
        load_network(path)


def test_missing_file_raises_load_error(tmp_path):
    with pytest.raises(NetworkLoadError) as info:
        load_network(tmp_path / "missing.dat")
    assert isinstance(info.value.__cause__, OSError)


def test_save_failure_is_reported(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    with pytest.raises(NetworkSaveError) as info:
        save_network(blocker / "net.dat", _network())
    assert isinstance(info.value.__cause__, OSError)


def test_save_overwrites_existing_file(tmp_path):
    path = tmp_path / "net.dat"
    path.write_text("stale")
    save_network(path, _network())
    assert load_network(path).layer_sizes == [3, 4, 2]
    assert [p.name for p in tmp_path.iterdir()] == ["net.dat"]


@dataclass(frozen=True)
class _Relu:
    name: ClassVar[str] = "relu"

    def apply(self, x):
        return x.map(lambda z: np.maximum(z, 0.0))

    def apply_derivative(self, x):
        return x.map(lambda z: (z > 0).astype(float))


def test_activation_without_marker_raises_save_error(tmp_path):
    net = NeuralNetwork([Matrix([[1.0]])], [Vector([0.0])], _Relu())
    with pytest.raises(NetworkSaveError) as info:
        save_network(tmp_path / "net.dat", net)
    assert isinstance(info.value.__cause__, ValueError)
    assert list(tmp_path.iterdir()) == []


def test_interrupted_save_leaves_no_temporary_file(tmp_path, monkeypatch):
    def fail_replace(src, dst):
        raise RuntimeError("interrupted")

    monkeypatch.setattr(network_io.os, "replace", fail_replace)
    with pytest.raises(RuntimeError, match="interrupted"):
        save_network(tmp_path / "net.dat", _network())
    assert list(tmp_path.iterdir()) == []
