"""Cost functions used to measure and train a network."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Protocol, Sequence, Union

import numpy as np

from .activations import Activation
from .algebra import Matrix, Vector

if TYPE_CHECKING:  # pragma: no cover
    from .network import NeuralNetwork


class Cost(Protocol):
    """Protocol implemented by cost strategies."""

    name: str

    def total(
        self,
        network: "NeuralNetwork",
        inputs: Sequence[Vector],
        targets: Sequence[Vector],
    ) -> float:
        """Return the mean cost of ``network`` over the given samples."""

    def error(
        self,
        output: Matrix,
        target: Matrix,
        pre_activation: Matrix,
        activation: Activation,
    ) -> Matrix:
        """Return the output-layer error, one column per sample."""


def _outputs(network: "NeuralNetwork", inputs: Sequence[Vector]) -> Matrix:
    return network.feedforward(Matrix.from_columns(inputs))


@dataclass(frozen=True)
class QuadraticCost:
    """``C = 1/(2n) * sum ||y - a||^2``."""

    name: ClassVar[str] = "quadratic"

    def total(
        self,
        network: "NeuralNetwork",
        inputs: Sequence[Vector],
        targets: Sequence[Vector],
    ) -> float:
        diff = Matrix.from_columns(targets) - _outputs(network, inputs)
        squared = sum(col.length() ** 2 for col in diff.columns())
        return squared / (2.0 * len(inputs))

    def error(
        self,
        output: Matrix,
        target: Matrix,
        pre_activation: Matrix,
        activation: Activation,
    ) -> Matrix:
        return (output - target).hadamard(activation.apply_derivative(pre_activation))


@dataclass(frozen=True)
class CrossEntropyCost:
    """``C = -1/n * sum [y ln a + (1 - y) ln(1 - a)]``.

    The output error is ``a - y``: the ``f'(z)`` factor cancels only for
    sigmoid output units, so ``error`` ignores ``activation`` altogether.
    Pairing this cost with any other output activation yields gradients of the
    sigmoid case rather than the true ones.
    """

    name: ClassVar[str] = "cross_entropy"
    assumes_sigmoid_output: ClassVar[bool] = True

    def total(
        self,
        network: "NeuralNetwork",
        inputs: Sequence[Vector],
        targets: Sequence[Vector],
    ) -> float:
        a = _outputs(network, inputs).to_numpy()
        y = Matrix.from_columns(targets).to_numpy()
        with np.errstate(divide="ignore", invalid="ignore"):
            terms = np.nan_to_num(y * np.log(a) + (1.0 - y) * np.log(1.0 - a))
        return float(-np.sum(terms) / len(inputs))

    def error(
        self,
        output: Matrix,
        target: Matrix,
        pre_activation: Matrix,
        activation: Activation,
    ) -> Matrix:
        return output - target


COSTS = {"quadratic": QuadraticCost, "cross_entropy": CrossEntropyCost}


def get_cost(name: str) -> Union[QuadraticCost, CrossEntropyCost]:
    try:
        return COSTS[name]()
    except KeyError as exc:
        available = ", ".join(sorted(COSTS))
        raise KeyError(f"Unknown cost {name!r}. Available costs: {available}") from exc


__all__ = ["COSTS", "Cost", "CrossEntropyCost", "QuadraticCost", "get_cost"]
