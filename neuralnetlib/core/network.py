"""Strictly layered feed-forward neural network."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .activations import Activation, Sigmoid
from .algebra import Matrix, Vector
from .costs import Cost
from .initialization import NormalizedInitialization, WeightInitialization, validate_sizes
from .types import ForwardTrace, Gradients


def _check_layers(weights: Sequence[Matrix], biases: Sequence[Vector]) -> None:
    if not weights:
        raise ValueError("A network needs at least one weight matrix")
    if len(weights) != len(biases):
        raise ValueError(f"Got {len(weights)} weight matrices but {len(biases)} bias vectors")
    for idx, (W, b) in enumerate(zip(weights, biases)):
        if W.rows != len(b):
            raise ValueError(f"Layer {idx}: weights {W.shape} do not match bias length {len(b)}")
        if idx > 0 and W.cols != weights[idx - 1].rows:
            raise ValueError(
                f"Layer {idx}: weights {W.shape} do not follow {weights[idx - 1].shape}"
            )


class NeuralNetwork:
    """Layers of weights and biases sharing one activation function.

    ``weights[i]`` maps layer ``i`` onto layer ``i + 1`` and therefore has shape
    ``sizes[i + 1] x sizes[i]``; ``biases[i]`` has length ``sizes[i + 1]``.
    Batches are matrices whose columns are independent samples.

    The network keeps no per-call state: :meth:`forward` hands back a
    :class:`ForwardTrace` that :meth:`backward` consumes, so inference can run
    from several callers at once. Training a single instance concurrently is
    not supported.
    """

    def __init__(
        self,
        weights: Sequence[Matrix],
        biases: Sequence[Vector],
        activation: Activation | None = None,
    ) -> None:
        _check_layers(weights, biases)
        self._weights: List[Matrix] = list(weights)
        self._biases: List[Vector] = list(biases)
        self.activation: Activation = activation if activation is not None else Sigmoid()

    @classmethod
    def from_sizes(
        cls,
        sizes: Sequence[int],
        activation: Activation | None = None,
        initialization: WeightInitialization | None = None,
    ) -> "NeuralNetwork":
        """Create a freshly initialised network for the given layer sizes."""

        dims = validate_sizes(sizes)
        init = initialization if initialization is not None else NormalizedInitialization()
        return cls(init.init_weights(dims), init.init_biases(dims), activation)

    # ------------------------------------------------------------------
    # Parameters

    @property
    def weights(self) -> List[Matrix]:
        return list(self._weights)

    @weights.setter
    def weights(self, weights: Sequence[Matrix]) -> None:
        self._set_parameters(weights, self._biases)

    @property
    def biases(self) -> List[Vector]:
        return list(self._biases)

    @biases.setter
    def biases(self, biases: Sequence[Vector]) -> None:
        self._set_parameters(self._weights, biases)

    def _set_parameters(self, weights: Sequence[Matrix], biases: Sequence[Vector]) -> None:
        if [W.shape for W in weights] != [W.shape for W in self._weights]:
            raise ValueError("Replacement weights must keep the layer shapes")
        if [len(b) for b in biases] != [len(b) for b in self._biases]:
            raise ValueError("Replacement biases must keep the layer shapes")
        self._weights = list(weights)
        self._biases = list(biases)

    def update(self, weights: Sequence[Matrix], biases: Sequence[Vector]) -> None:
        """Replace weights and biases in one step."""

        self._set_parameters(weights, biases)

    @property
    def layer_sizes(self) -> List[int]:
        return [self._weights[0].cols] + [W.rows for W in self._weights]

    @property
    def size(self) -> int:
        """Number of activation layers, input layer included."""

        return len(self._weights) + 1

    def parameter_count(self) -> int:
        return sum(W.rows * W.cols + len(b) for W, b in zip(self._weights, self._biases))

    # ------------------------------------------------------------------
    # Forward pass

    def forward(self, inputs: Matrix) -> Tuple[Matrix, ForwardTrace]:
        """Feed ``inputs`` through every layer and record the intermediate values."""

        activations = [inputs]
        pre_activations: List[Matrix] = []
        for W, b in zip(self._weights, self._biases):
            z = (W @ activations[-1]).add_vec(b)
            pre_activations.append(z)
            activations.append(self.activation.apply(z))
        return activations[-1], ForwardTrace(pre_activations=pre_activations, activations=activations)

    def feedforward(self, inputs: Matrix) -> Matrix:
        output, _ = self.forward(inputs)
        return output

    def predict(self, x: Vector) -> Vector:
        """Return the output vector for a single sample."""

        return self.feedforward(Matrix.from_columns([x])).columns()[0]

    # ------------------------------------------------------------------
    # Backward pass

    def backward(self, trace: ForwardTrace, targets: Matrix, cost: Cost) -> Gradients:
        """Compute gradients for the batch recorded in ``trace``.

        Gradients are summed over the samples of the batch; averaging is left to
        the caller.
        """

        last = len(self._weights) - 1
        error = cost.error(trace.output, targets, trace.pre_activations[last], self.activation)
        weight_grads: List[Matrix] = [None] * (last + 1)  # type: ignore[list-item]
        bias_grads: List[Vector] = [None] * (last + 1)  # type: ignore[list-item]
        for i in range(last, -1, -1):
            weight_grads[i] = error @ trace.activations[i].T
            bias_grads[i] = error.sum_cols()
            if i > 0:
                error = (self._weights[i].T @ error).hadamard(
                    self.activation.apply_derivative(trace.pre_activations[i - 1])
                )
        return Gradients(weights=weight_grads, biases=bias_grads)

    def backpropagate(self, inputs: Matrix, targets: Matrix, cost: Cost) -> Gradients:
        """Run a forward pass on ``inputs`` and backpropagate the cost gradient."""

        _, trace = self.forward(inputs)
        return self.backward(trace, targets, cost)

    def __repr__(self) -> str:
        return f"NeuralNetwork(sizes={self.layer_sizes}, activation={self.activation.name!r})"


__all__ = ["NeuralNetwork"]
