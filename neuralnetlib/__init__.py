"""neuralnetlib public API."""

from .core import activations, costs, initialization, regularization, types  # noqa: F401
from .core.algebra import Matrix, Vector
from .core.network import NeuralNetwork
from .io.network_io import NetworkLoadError, NetworkSaveError, load_network, save_network
from .training.pipelines import load_preset, presets, run_pipeline
from .training.trainer import Trainer

__all__ = [
    "Matrix",
    "NetworkLoadError",
    "NetworkSaveError",
    "NeuralNetwork",
    "Trainer",
    "Vector",
    "activations",
    "costs",
    "initialization",
    "load_network",
    "load_preset",
    "presets",
    "regularization",
    "run_pipeline",
    "save_network",
    "types",
]
