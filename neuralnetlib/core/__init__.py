"""Core numerical primitives for neuralnetlib."""

from . import activations, algebra, costs, initialization, network, regularization, types

__all__ = [
    "activations",
    "algebra",
    "costs",
    "initialization",
    "network",
    "regularization",
    "types",
]
