"""Core typing contracts for neuralnetlib."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

import numpy as np

from .algebra import Matrix, Vector

Array = np.ndarray


@dataclass(frozen=True)
class Batch:
    """A single mini-batch; every column of ``inputs`` is one sample."""

    inputs: Matrix
    targets: Matrix

    def __len__(self) -> int:
        return self.inputs.cols


@dataclass(frozen=True)
class ForwardTrace:
    """Intermediate values captured during one forward pass.

    ``activations[0]`` is the input batch and ``activations[-1]`` the network
    output. ``pre_activations[i]`` is the weighted input of layer ``i + 1``.
    """

    pre_activations: List[Matrix]
    activations: List[Matrix]

    @property
    def output(self) -> Matrix:
        return self.activations[-1]


@dataclass(frozen=True)
class Gradients:
    """Per-layer cost gradients, summed over the batch."""

    weights: List[Matrix]
    biases: List[Vector]


@dataclass(frozen=True)
class EpochResult:
    """Outcome of one training epoch."""

    epoch: int
    batches: int
    metrics: dict


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`neuralnetlib.training.pipelines.run_pipeline`."""

    epochs: int
    metrics_path: str
    summary_path: str
    config_path: str
    model_path: str = ""
