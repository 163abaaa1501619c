"""Mini-batch stochastic gradient descent for :class:`NeuralNetwork`."""

from __future__ import annotations

import logging
from typing import List, Mapping, Sequence

import numpy as np

from ..core.algebra import Vector
from ..core.costs import Cost
from ..core.network import NeuralNetwork
from ..core.regularization import Regularization
from ..core.types import Batch, EpochResult
from ..data.utils import iter_batches, shuffle_in_unison
from .metrics import DEFAULT_METRICS, compute_metrics

logger = logging.getLogger(__name__)


class Trainer:
    """Train a network with SGD, an explicit cost and weight regularisation.

    The trainer shares ``network`` with the caller: every update is visible to
    anyone else holding the instance. Hyperparameters are given per
    :meth:`train` call.
    """

    def __init__(
        self,
        network: NeuralNetwork,
        cost: Cost,
        regularization: Regularization,
        train_inputs: Sequence[Vector],
        train_targets: Sequence[Vector],
        test_inputs: Sequence[Vector] | None = None,
        test_targets: Sequence[Vector] | None = None,
        *,
        rng: np.random.Generator | None = None,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        if len(train_inputs) != len(train_targets):
            raise ValueError(
                f"Got {len(train_inputs)} training inputs but {len(train_targets)} targets"
            )
        if len(test_inputs or []) != len(test_targets or []):
            raise ValueError("Test inputs and targets must have the same length")
        self.network = network
        self.cost = cost
        self.regularization = regularization
        self.train_inputs: List[Vector] = list(train_inputs)
        self.train_targets: List[Vector] = list(train_targets)
        self.test_inputs: List[Vector] = list(test_inputs or [])
        self.test_targets: List[Vector] = list(test_targets or [])
        self.rng = rng if rng is not None else np.random.default_rng()
        self.callbacks = list(callbacks or [])

    def train(
        self,
        epochs: int,
        learning_rate: float,
        lmbda: float = 0.0,
        batch_size: int = 10,
        verbose: bool = False,
    ) -> List[EpochResult]:
        """Run ``epochs`` passes of shuffled mini-batch gradient descent.

        When ``verbose`` is set and a test set exists, the network is evaluated
        after every epoch; the metrics are logged and passed to the callbacks.
        """

        if epochs < 0:
            raise ValueError(f"epochs must be non-negative, got {epochs}")
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        n = len(self.train_inputs)
        history: List[EpochResult] = []
        for epoch in range(1, epochs + 1):
            shuffle_in_unison(self.train_inputs, self.train_targets, self.rng)
            batches = 0
            for batch in iter_batches(self.train_inputs, self.train_targets, batch_size):
                self._update(batch, learning_rate, lmbda, n)
                batches += 1

            metrics: Mapping[str, float] = {}
            if verbose and self.test_inputs:
                metrics = self.evaluate(self.test_inputs, self.test_targets)
                logger.info(
                    "Epoch %d: %d / %d correct, cost %.6f",
                    epoch,
                    int(metrics["correct"]),
                    len(self.test_inputs),
                    metrics["cost"],
                )
            elif verbose:
                logger.info("Epoch %d complete", epoch)
            self._emit_epoch(epoch, metrics)
            history.append(EpochResult(epoch=epoch, batches=batches, metrics=dict(metrics)))
        return history

    def evaluate(
        self, inputs: Sequence[Vector], targets: Sequence[Vector]
    ) -> Mapping[str, float]:
        """Return cost, accuracy and number of correct predictions."""

        return compute_metrics(DEFAULT_METRICS, self.network, self.cost, inputs, targets)

    # ------------------------------------------------------------------
    # Internal helpers

    def _update(self, batch: Batch, learning_rate: float, lmbda: float, n: int) -> None:
        grads = self.network.backpropagate(batch.inputs, batch.targets, self.cost)
        step = learning_rate / len(batch)
        weights = [
            self.regularization.calculate(W, learning_rate, lmbda, n) - dW.scale(step)
            for W, dW in zip(self.network.weights, grads.weights)
        ]
        biases = [b - db.scale(step) for b, db in zip(self.network.biases, grads.biases)]
        self.network.update(weights, biases)

    def _emit_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)


__all__ = ["Trainer"]
