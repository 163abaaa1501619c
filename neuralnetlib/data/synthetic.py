"""In-memory datasets for demos, presets and tests."""

from __future__ import annotations

from pathlib import Path

import numpy as np

from .registry import DatasetSpec, register_dataset
from .utils import deterministic_split, one_hot, to_vectors

_XOR_INPUTS = np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]])
_XOR_TARGETS = np.array([[0.0], [1.0], [1.0], [0.0]])


def _xor_factory(repeat: int = 1, with_test: bool = True, **_: object) -> DatasetSpec:
    if repeat < 1:
        raise ValueError("repeat must be at least 1")
    x = np.tile(_XOR_INPUTS, (repeat, 1))
    y = np.tile(_XOR_TARGETS, (repeat, 1))
    return DatasetSpec(
        name="xor",
        train_inputs=to_vectors(x),
        train_targets=to_vectors(y),
        test_inputs=to_vectors(_XOR_INPUTS) if with_test else [],
        test_targets=to_vectors(_XOR_TARGETS) if with_test else [],
        provenance={"type": "xor", "repeat": repeat, "with_test": with_test},
    )


def make_blobs(
    n_samples: int, n_classes: int, n_features: int, spread: float, seed: int
) -> tuple[np.ndarray, np.ndarray]:
    """Draw Gaussian clusters around random centres; returns samples and labels."""

    rng = np.random.default_rng(seed)
    centres = rng.uniform(-1.0, 1.0, size=(n_classes, n_features))
    labels = rng.integers(0, n_classes, size=n_samples)
    x = centres[labels] + spread * rng.standard_normal((n_samples, n_features))
    return x, labels


def _blobs_factory(
    n_samples: int = 300,
    n_classes: int = 3,
    n_features: int = 2,
    spread: float = 0.15,
    test_split: float = 0.2,
    seed: int = 0,
    **_: object,
) -> DatasetSpec:
    x, labels = make_blobs(n_samples, n_classes, n_features, spread, seed)
    train_idx, test_idx = deterministic_split(n_samples, test_split=test_split, seed=seed)
    return DatasetSpec(
        name="blobs",
        train_inputs=to_vectors(x[train_idx]),
        train_targets=one_hot(labels[train_idx], n_classes),
        test_inputs=to_vectors(x[test_idx]),
        test_targets=one_hot(labels[test_idx], n_classes),
        provenance={
            "type": "blobs",
            "n_samples": n_samples,
            "n_classes": n_classes,
            "n_features": n_features,
            "spread": spread,
            "test_split": test_split,
            "seed": seed,
        },
    )


def _npz_factory(path: str | Path | None = None, **_: object) -> DatasetSpec:
    """Load ``x_train``/``y_train`` (and optional ``x_test``/``y_test``) arrays."""

    if path is None:
        raise ValueError("The npz dataset requires a `path` option")
    path = Path(path)
    with np.load(path) as archive:
        x_train, y_train = archive["x_train"], archive["y_train"]
        x_test = archive["x_test"] if "x_test" in archive.files else np.zeros((0, 1))
        y_test = archive["y_test"] if "y_test" in archive.files else np.zeros((0, 1))
    return DatasetSpec(
        name="npz",
        train_inputs=to_vectors(x_train),
        train_targets=to_vectors(y_train),
        test_inputs=to_vectors(x_test) if len(x_test) else [],
        test_targets=to_vectors(y_test) if len(y_test) else [],
        provenance={"type": "npz", "path": str(path)},
    )


register_dataset("xor", _xor_factory)
register_dataset("blobs", _blobs_factory)
register_dataset("npz", _npz_factory)
