"""Dataset registry and sample helpers."""

# Ensure built-in datasets register themselves when the package is imported.
from . import synthetic as _synthetic  # noqa: F401
from .registry import DatasetSpec, available_datasets, get_dataset, register_dataset
from .utils import iter_batches, shuffle_in_unison, subdivide

__all__ = [
    "DatasetSpec",
    "available_datasets",
    "get_dataset",
    "iter_batches",
    "register_dataset",
    "shuffle_in_unison",
    "subdivide",
]
