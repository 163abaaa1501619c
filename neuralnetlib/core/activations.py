"""Activation functions applied elementwise to every neuron."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Protocol, TypeVar, Union

import numpy as np

from .algebra import Matrix, Vector
from .types import Array

Tensor = TypeVar("Tensor", Vector, Matrix)


class Activation(Protocol):
    """Protocol implemented by activation strategies.

    Both methods accept a :class:`Vector` or a :class:`Matrix` and return the
    same kind. ``apply_derivative`` expects the *pre-activation* values.
    """

    name: str

    def apply(self, x: Tensor) -> Tensor:
        """Return ``f(x)`` elementwise."""

    def apply_derivative(self, x: Tensor) -> Tensor:
        """Return ``f'(x)`` elementwise."""


def sigmoid(z: Array) -> Array:
    """Return the logistic sigmoid ``1 / (1 + e^-z)``."""

    return 1.0 / (1.0 + np.exp(-z))


def sigmoid_prime(z: Array) -> Array:
    s = sigmoid(z)
    return s * (1.0 - s)


def tanh(z: Array) -> Array:
    return np.tanh(z)


def tanh_prime(z: Array) -> Array:
    return 1.0 - np.tanh(z) ** 2


@dataclass(frozen=True)
class Sigmoid:
    """Logistic activation. The derivative is taken from pre-activations."""

    name: ClassVar[str] = "sigmoid"

    def apply(self, x: Tensor) -> Tensor:
        with np.errstate(over="ignore"):
            return x.map(sigmoid)

    def apply_derivative(self, x: Tensor) -> Tensor:
        with np.errstate(over="ignore"):
            return x.map(sigmoid_prime)


@dataclass(frozen=True)
class Tanh:
    """Hyperbolic tangent activation."""

    name: ClassVar[str] = "tanh"

    def apply(self, x: Tensor) -> Tensor:
        return x.map(tanh)

    def apply_derivative(self, x: Tensor) -> Tensor:
        return x.map(tanh_prime)


ACTIVATIONS = {"sigmoid": Sigmoid, "tanh": Tanh}


def get_activation(name: str) -> Union[Sigmoid, Tanh]:
    try:
        return ACTIVATIONS[name]()
    except KeyError as exc:
        available = ", ".join(sorted(ACTIVATIONS))
        raise KeyError(f"Unknown activation {name!r}. Available activations: {available}") from exc


__all__ = [
    "ACTIVATIONS",
    "Activation",
    "Sigmoid",
    "Tanh",
    "get_activation",
    "sigmoid",
    "sigmoid_prime",
    "tanh",
    "tanh_prime",
]
