"""Helpers for handling training and test samples."""

from __future__ import annotations

from typing import Iterator, List, MutableSequence, Sequence, TypeVar

import numpy as np

from ..core.algebra import Matrix, Vector
from ..core.types import Batch

T = TypeVar("T")
U = TypeVar("U")


def shuffle_in_unison(
    inputs: MutableSequence[T],
    targets: MutableSequence[U],
    rng: np.random.Generator | None = None,
) -> None:
    """Shuffle two parallel sequences in place with one shared permutation."""

    if len(inputs) != len(targets):
        raise ValueError(f"Cannot shuffle {len(inputs)} inputs with {len(targets)} targets")
    rng = rng if rng is not None else np.random.default_rng()
    order = rng.permutation(len(inputs))
    inputs[:] = [inputs[i] for i in order]
    targets[:] = [targets[i] for i in order]


def subdivide(vectors: Sequence[Vector], size: int) -> List[Matrix]:
    """Split ``vectors`` into matrices of ``size`` columns; the last may be narrower."""

    if size <= 0:
        raise ValueError(f"Batch size must be positive, got {size}")
    return [
        Matrix.from_columns(vectors[start : start + size])
        for start in range(0, len(vectors), size)
    ]


def iter_batches(
    inputs: Sequence[Vector], targets: Sequence[Vector], size: int
) -> Iterator[Batch]:
    """Yield consecutive mini-batches pairing inputs with their targets."""

    if len(inputs) != len(targets):
        raise ValueError(f"Got {len(inputs)} inputs but {len(targets)} targets")
    for x, y in zip(subdivide(inputs, size), subdivide(targets, size)):
        yield Batch(inputs=x, targets=y)


def one_hot(labels: Sequence[int], num_classes: int) -> List[Vector]:
    eye = np.eye(num_classes, dtype=np.float64)
    return [Vector(eye[int(label)]) for label in labels]


def to_vectors(rows: np.ndarray) -> List[Vector]:
    """Turn a ``samples x features`` array into one vector per sample."""

    data = np.asarray(rows, dtype=np.float64)
    if data.ndim == 1:
        data = data.reshape(-1, 1)
    return [Vector(row) for row in data.reshape(data.shape[0], -1)]


def deterministic_split(
    n_samples: int, *, test_split: float = 0.2, seed: int = 0
) -> tuple[np.ndarray, np.ndarray]:
    """Return train and test indices for the requested split ratio."""

    if not 0 <= test_split < 1:
        raise ValueError("test_split must be in [0, 1)")
    rng = np.random.default_rng(seed)
    indices = np.arange(n_samples)
    rng.shuffle(indices)
    n_test = int(round(n_samples * test_split))
    return np.sort(indices[n_test:]), np.sort(indices[:n_test])


__all__ = [
    "deterministic_split",
    "iter_batches",
    "one_hot",
    "shuffle_in_unison",
    "subdivide",
    "to_vectors",
]
