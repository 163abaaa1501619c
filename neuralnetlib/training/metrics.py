"""Evaluation metrics reported by the trainer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Sequence

import numpy as np

from ..core.algebra import Matrix, Vector
from ..core.costs import Cost
from ..core.network import NeuralNetwork


@dataclass(frozen=True)
class MetricResult:
    name: str
    value: float


def _predicted_classes(values: np.ndarray) -> np.ndarray:
    # values: outputs x samples
    if values.shape[0] == 1:
        return (values[0] >= 0.5).astype(int)
    return np.argmax(values, axis=0)


def count_correct(outputs: Matrix, targets: Matrix) -> int:
    """Count samples whose predicted class matches the target class."""

    predicted = _predicted_classes(outputs.to_numpy())
    expected = _predicted_classes(targets.to_numpy())
    return int(np.sum(predicted == expected))


def compute_metric(
    name: str,
    network: NeuralNetwork,
    cost: Cost,
    inputs: Sequence[Vector],
    targets: Sequence[Vector],
) -> MetricResult:
    key = name.lower()
    if key == "cost":
        value = float(cost.total(network, inputs, targets))
    elif key in {"accuracy", "correct"}:
        outputs = network.feedforward(Matrix.from_columns(inputs))
        correct = count_correct(outputs, Matrix.from_columns(targets))
        value = float(correct) if key == "correct" else correct / len(inputs)
    else:
        raise KeyError(f"Unknown metric: {name}")
    return MetricResult(name=key, value=value)


def compute_metrics(
    names: Iterable[str],
    network: NeuralNetwork,
    cost: Cost,
    inputs: Sequence[Vector],
    targets: Sequence[Vector],
) -> Mapping[str, float]:
    results: Dict[str, float] = {}
    for name in names:
        metric = compute_metric(name, network, cost, inputs, targets)
        results[metric.name] = metric.value
    return results


DEFAULT_METRICS = ("cost", "accuracy", "correct")


__all__ = ["DEFAULT_METRICS", "MetricResult", "compute_metrics", "count_correct"]
