"""Dataset registry and metadata contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, MutableMapping

from ..core.algebra import Vector


@dataclass(frozen=True)
class DatasetSpec:
    """Parallel input/target sequences for training and, optionally, testing.

    Attributes
    ----------
    name:
        Identifier the dataset was registered under.
    train_inputs, train_targets:
        Equal-length sequences of sample and target vectors.
    test_inputs, test_targets:
        Held-out samples used for per-epoch evaluation. Both are empty when the
        dataset has no test split.
    provenance:
        Free-form metadata describing how the samples were produced, written to
        the run configuration for reproducibility.
    """

    name: str
    train_inputs: List[Vector]
    train_targets: List[Vector]
    test_inputs: List[Vector] = field(default_factory=list)
    test_targets: List[Vector] = field(default_factory=list)
    provenance: Dict[str, Any] = field(default_factory=dict)

    @property
    def d_in(self) -> int:
        return len(self.train_inputs[0])

    @property
    def d_out(self) -> int:
        return len(self.train_targets[0])

    @property
    def splits(self) -> Dict[str, int]:
        return {"train": len(self.train_inputs), "test": len(self.test_inputs)}


DatasetFactory = Callable[..., DatasetSpec]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(
    name: str | None = None,
    factory: DatasetFactory | None = None,
) -> Callable[[DatasetFactory], DatasetFactory] | DatasetFactory:
    """Register a dataset factory.

    ``register_dataset`` can be used both as a decorator::

        @register_dataset("xor")
        def make_xor(**kwargs):
            ...

    or directly::

        register_dataset("xor", make_xor)
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[str(name or func.__name__)] = func
        return func

    if factory is not None:
        return _decorator(factory)
    if name is None:
        raise TypeError("register_dataset requires a name when used without a decorator")
    return _decorator


def get_dataset(dataset: str, /, **options: Any) -> DatasetSpec:
    """Build the :class:`DatasetSpec` registered as ``dataset``."""

    if dataset not in _REGISTRY:
        available = ", ".join(available_datasets())
        raise KeyError(f"Unknown dataset {dataset!r}. Available datasets: {available}")
    spec = _REGISTRY[dataset](**options)
    _validate_spec(spec)
    return spec


def available_datasets() -> Iterable[str]:
    """Return the sorted list of available dataset identifiers."""

    return sorted(_REGISTRY)


def _validate_spec(spec: DatasetSpec) -> None:
    if not spec.train_inputs:
        raise ValueError(f"Dataset {spec.name!r} has no training samples")
    if len(spec.train_inputs) != len(spec.train_targets):
        raise ValueError(f"Dataset {spec.name!r} has mismatched training inputs and targets")
    if len(spec.test_inputs) != len(spec.test_targets):
        raise ValueError(f"Dataset {spec.name!r} has mismatched test inputs and targets")


__all__ = [
    "DatasetSpec",
    "available_datasets",
    "get_dataset",
    "register_dataset",
]
