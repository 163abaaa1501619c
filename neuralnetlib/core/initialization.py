"""Weight and bias initialisation strategies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Protocol, Sequence, Union

import numpy as np

from .algebra import Matrix, Vector


class WeightInitialization(Protocol):
    """Protocol implemented by initialisation strategies."""

    name: str

    def init_weights(self, sizes: Sequence[int]) -> List[Matrix]:
        """Return one ``sizes[i + 1] x sizes[i]`` matrix per layer."""

    def init_biases(self, sizes: Sequence[int]) -> List[Vector]:
        """Return one vector of length ``sizes[i + 1]`` per layer."""


def validate_sizes(sizes: Sequence[int]) -> List[int]:
    dims = [int(s) for s in sizes]
    if len(dims) < 2:
        raise ValueError("A network needs at least an input and an output layer")
    if any(s <= 0 for s in dims):
        raise ValueError(f"Layer sizes must be positive, got {dims}")
    return dims


@dataclass
class DefaultInitialization:
    """Standard-normal weights and biases without any scaling."""

    rng: np.random.Generator = field(default_factory=np.random.default_rng, repr=False)
    name: str = field(default="default", init=False)

    def _weight_scale(self, fan_in: int) -> float:
        return 1.0

    def init_weights(self, sizes: Sequence[int]) -> List[Matrix]:
        dims = validate_sizes(sizes)
        weights: List[Matrix] = []
        for fan_in, fan_out in zip(dims[:-1], dims[1:]):
            samples = self.rng.standard_normal((fan_out, fan_in))
            weights.append(Matrix(samples * self._weight_scale(fan_in)))
        return weights

    def init_biases(self, sizes: Sequence[int]) -> List[Vector]:
        dims = validate_sizes(sizes)
        return [Vector(self.rng.standard_normal(fan_out)) for fan_out in dims[1:]]


@dataclass
class NormalizedInitialization(DefaultInitialization):
    """Weights divided by ``sqrt(fan_in)`` so early layers saturate less.

    Biases keep their unscaled standard-normal samples.
    """

    name: str = field(default="normalized", init=False)

    def _weight_scale(self, fan_in: int) -> float:
        return 1.0 / np.sqrt(fan_in)


INITIALIZATIONS = {"default": DefaultInitialization, "normalized": NormalizedInitialization}


def get_initialization(
    name: str, rng: np.random.Generator | None = None
) -> Union[DefaultInitialization, NormalizedInitialization]:
    try:
        cls = INITIALIZATIONS[name]
    except KeyError as exc:
        available = ", ".join(sorted(INITIALIZATIONS))
        raise KeyError(
            f"Unknown initialization {name!r}. Available initializations: {available}"
        ) from exc
    return cls() if rng is None else cls(rng=rng)


__all__ = [
    "DefaultInitialization",
    "INITIALIZATIONS",
    "NormalizedInitialization",
    "WeightInitialization",
    "get_initialization",
    "validate_sizes",
]
