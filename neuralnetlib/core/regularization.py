"""Weight regularisation applied during the gradient-descent update."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Protocol, Union

import numpy as np

from .algebra import Matrix


class Regularization(Protocol):
    """Protocol implemented by regularisation strategies.

    Only weight matrices are regularised; biases bypass this step.
    """

    name: str

    def calculate(self, weights: Matrix, learning_rate: float, lmbda: float, n: int) -> Matrix:
        """Return ``weights`` adjusted for a training set of ``n`` samples."""


@dataclass(frozen=True)
class L1Regularization:
    """Shift every weight towards zero by ``lmbda * lr / n``.

    Negative weights are increased, weights at or above zero decreased.
    """

    name: ClassVar[str] = "l1"

    def calculate(self, weights: Matrix, learning_rate: float, lmbda: float, n: int) -> Matrix:
        factor = (learning_rate * lmbda) / n
        return weights.map(lambda w: np.where(w < 0, w + factor, w - factor))


@dataclass(frozen=True)
class L2Regularization:
    """Weight decay: scale every weight by ``1 - lmbda * lr / n``."""

    name: ClassVar[str] = "l2"

    def calculate(self, weights: Matrix, learning_rate: float, lmbda: float, n: int) -> Matrix:
        return weights.scale(1.0 - (lmbda * learning_rate) / n)


REGULARIZATIONS = {"l1": L1Regularization, "l2": L2Regularization}


def get_regularization(name: str) -> Union[L1Regularization, L2Regularization]:
    try:
        return REGULARIZATIONS[name]()
    except KeyError as exc:
        available = ", ".join(sorted(REGULARIZATIONS))
        raise KeyError(
            f"Unknown regularization {name!r}. Available regularizations: {available}"
        ) from exc


__all__ = [
    "L1Regularization",
    "L2Regularization",
    "REGULARIZATIONS",
    "Regularization",
    "get_regularization",
]
