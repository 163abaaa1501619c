import math

import numpy as np
import pytest

from neuralnetlib.core.activations import Sigmoid, Tanh
from neuralnetlib.core.algebra import Matrix, Vector
from neuralnetlib.core.costs import CrossEntropyCost, QuadraticCost
from neuralnetlib.core.initialization import DefaultInitialization
from neuralnetlib.core.network import NeuralNetwork


def _network(sizes, seed=0, activation=None):
    init = DefaultInitialization(rng=np.random.default_rng(seed))
    return NeuralNetwork.from_sizes(sizes, activation, init)


def _batch(rng, rows, cols):
    return Matrix(rng.uniform(0.0, 1.0, size=(rows, cols)))


def test_from_sizes_builds_expected_shapes():
    net = _network([4, 5, 3, 2])
    assert net.layer_sizes == [4, 5, 3, 2]
    assert net.size == 4
    assert [W.shape for W in net.weights] == [(5, 4), (3, 5), (2, 3)]
    assert [len(b) for b in net.biases] == [5, 3, 2]
    assert net.parameter_count() == 5 * 4 + 5 + 3 * 5 + 3 + 2 * 3 + 2
    assert isinstance(net.activation, Sigmoid)


def test_constructor_validates_layer_wiring():
    with pytest.raises(ValueError):
        NeuralNetwork([Matrix(np.ones((3, 2)))], [Vector([0.0, 0.0])])
    with pytest.raises(ValueError):
        NeuralNetwork(
            [Matrix(np.ones((3, 2))), Matrix(np.ones((1, 2)))],
            [Vector(np.zeros(3)), Vector(np.zeros(1))],
        )
    with pytest.raises(ValueError):
        NeuralNetwork([], [])


def test_single_sigmoid_layer_matches_hand_computation():
    net = NeuralNetwork([Matrix([[0.5, -0.25], [1.0, 2.0]])], [Vector([0.1, -1.0])])
    out = net.predict(Vector([1.0, 0.0]))
    expected = [1.0 / (1.0 + math.exp(-0.6)), 1.0 / (1.0 + math.exp(0.0))]
    assert np.allclose(out.to_numpy(), expected)


def test_feedforward_is_deterministic():
    net = _network([3, 4, 2], seed=1)
    inputs = _batch(np.random.default_rng(2), 3, 5)
    first = net.feedforward(inputs)
    second = net.feedforward(inputs)
    assert first == second
    assert first.shape == (2, 5)


def test_forward_trace_records_every_layer():
    net = _network([2, 3, 1])
    inputs = _batch(np.random.default_rng(0), 2, 4)
    output, trace = net.forward(inputs)
    assert trace.activations[0] == inputs
    assert trace.output == output
    assert [z.shape for z in trace.pre_activations] == [(3, 4), (1, 4)]
    assert trace.activations[1] == Sigmoid().apply(trace.pre_activations[0])


def test_forward_traces_are_independent():
    net = _network([2, 3, 1])
    rng = np.random.default_rng(4)
    a, b = _batch(rng, 2, 3), _batch(rng, 2, 3)
    targets = Matrix(rng.uniform(size=(1, 3)))
    _, trace_a = net.forward(a)
    net.forward(b)
    assert net.backward(trace_a, targets, QuadraticCost()) == net.backpropagate(
        a, targets, QuadraticCost()
    )


def test_backpropagate_returns_one_gradient_per_layer():
    net = _network([3, 4, 2])
    rng = np.random.default_rng(3)
    grads = net.backpropagate(_batch(rng, 3, 6), _batch(rng, 2, 6), QuadraticCost())
    assert [g.shape for g in grads.weights] == [W.shape for W in net.weights]
    assert [len(g) for g in grads.biases] == [len(b) for b in net.biases]


def test_gradients_are_summed_over_the_batch():
    net = _network([2, 3, 1])
    rng = np.random.default_rng(7)
    x = _batch(rng, 2, 3)
    y = _batch(rng, 1, 3)
    cost = QuadraticCost()
    batch_grads = net.backpropagate(x, y, cost)
    singles = [
        net.backpropagate(Matrix.from_columns([xc]), Matrix.from_columns([yc]), cost)
        for xc, yc in zip(x.columns(), y.columns())
    ]
    for layer in range(2):
        summed = sum(g.weights[layer].to_numpy() for g in singles)
        assert np.allclose(batch_grads.weights[layer].to_numpy(), summed)
        summed_b = sum(g.biases[layer].to_numpy() for g in singles)
        assert np.allclose(batch_grads.biases[layer].to_numpy(), summed_b)


def _with_weight(net, layer, i, j, delta):
    weights = net.weights
    data = weights[layer].to_numpy()
    data[i, j] += delta
    weights[layer] = Matrix(data)
    return NeuralNetwork(weights, net.biases, net.activation)


def _with_bias(net, layer, i, delta):
    biases = net.biases
    data = biases[layer].to_numpy()
    data[i] += delta
    biases[layer] = Vector(data)
    return NeuralNetwork(net.weights, biases, net.activation)


@pytest.mark.parametrize("cost", [QuadraticCost(), CrossEntropyCost()])
def test_gradients_match_central_differences(cost):
    net = _network([2, 3, 1], seed=11)
    inputs = [Vector([0.2, 0.9]), Vector([0.7, 0.1]), Vector([1.0, 1.0])]
    targets = [Vector([1.0]), Vector([0.0]), Vector([0.0])]
    n = len(inputs)
    grads = net.backpropagate(
        Matrix.from_columns(inputs), Matrix.from_columns(targets), cost
    )

    def summed_cost(candidate):
        return n * cost.total(candidate, inputs, targets)

    eps = 1e-5
    for layer, W in enumerate(net.weights):
        for i in range(W.rows):
            for j in range(W.cols):
                plus = summed_cost(_with_weight(net, layer, i, j, eps))
                minus = summed_cost(_with_weight(net, layer, i, j, -eps))
                numeric = (plus - minus) / (2 * eps)
                analytic = grads.weights[layer].to_numpy()[i, j]
                assert analytic == pytest.approx(numeric, abs=1e-4)
        for i in range(W.rows):
            plus = summed_cost(_with_bias(net, layer, i, eps))
            minus = summed_cost(_with_bias(net, layer, i, -eps))
            numeric = (plus - minus) / (2 * eps)
            assert grads.biases[layer][i] == pytest.approx(numeric, abs=1e-4)


def test_tanh_network_gradient_check_with_quadratic_cost():
    net = _network([2, 2, 1], seed=12, activation=Tanh())
    inputs = [Vector([0.3, -0.4])]
    targets = [Vector([0.5])]
    grads = net.backpropagate(Matrix.from_columns(inputs), Matrix.from_columns(targets), QuadraticCost())
    eps = 1e-5
    plus = QuadraticCost().total(_with_weight(net, 0, 1, 0, eps), inputs, targets)
    minus = QuadraticCost().total(_with_weight(net, 0, 1, 0, -eps), inputs, targets)
    assert grads.weights[0].to_numpy()[1, 0] == pytest.approx((plus - minus) / (2 * eps), abs=1e-6)


def test_parameter_setters_keep_shapes():
    net = _network([2, 3, 1])
    with pytest.raises(ValueError):
        net.weights = [Matrix(np.ones((3, 2)))]
    new_biases = [Vector(np.zeros(3)), Vector(np.zeros(1))]
    net.biases = new_biases
    assert net.biases == new_biases
