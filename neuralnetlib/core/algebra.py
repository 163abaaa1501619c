"""Immutable dense vectors and matrices.

Both containers wrap a read-only ``float64`` NumPy array. Every operation
returns a freshly allocated object and shape violations raise ``ValueError``
straight away instead of relying on NumPy broadcasting.
"""

from __future__ import annotations

from numbers import Real
from typing import Callable, Iterable, Iterator, List, Sequence, Tuple

import numpy as np

Array = np.ndarray
ElementwiseFn = Callable[[Array], Array]


def _frozen(values, ndim: int, kind: str) -> Array:
    data = np.array(values, dtype=np.float64)
    if data.ndim != ndim:
        raise ValueError(f"{kind} expects {ndim}-d data, got shape {data.shape}")
    data.setflags(write=False)
    return data


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ValueError(message)


class Vector:
    """Ordered sequence of real numbers with value semantics."""

    __slots__ = ("_data",)

    def __init__(self, values: Iterable[float] | Array) -> None:
        if not isinstance(values, np.ndarray):
            values = list(values)
        self._data = _frozen(values, 1, "Vector")

    # ------------------------------------------------------------------
    # Container protocol

    def __len__(self) -> int:
        return int(self._data.shape[0])

    def __iter__(self) -> Iterator[float]:
        return iter(self._data.tolist())

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def to_numpy(self) -> Array:
        return self._data.copy()

    # ------------------------------------------------------------------
    # Arithmetic

    def _check_same(self, other: "Vector", op: str) -> None:
        _require(
            len(self) == len(other),
            f"cannot {op} vectors of length {len(self)} and {len(other)}",
        )

    def __add__(self, other: "Vector") -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_same(other, "add")
        return Vector(self._data + other._data)

    def __sub__(self, other: "Vector") -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_same(other, "subtract")
        return Vector(self._data - other._data)

    def __mul__(self, scalar: float) -> "Vector":
        if not isinstance(scalar, Real):
            return NotImplemented
        return self.scale(scalar)

    __rmul__ = __mul__

    def scale(self, scalar: float) -> "Vector":
        return Vector(float(scalar) * self._data)

    def hadamard(self, other: "Vector") -> "Vector":
        self._check_same(other, "multiply elementwise")
        return Vector(self._data * other._data)

    def dot(self, other: "Vector") -> float:
        self._check_same(other, "dot")
        return float(np.dot(self._data, other._data))

    def length(self) -> float:
        """Euclidean norm."""

        return float(np.linalg.norm(self._data))

    def argmax(self) -> int:
        return int(np.argmax(self._data))

    def map(self, fn: ElementwiseFn) -> "Vector":
        return Vector(fn(self._data))

    # ------------------------------------------------------------------
    # Value semantics

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return len(self) == len(other) and bool(np.array_equal(self._data, other._data))

    def __hash__(self) -> int:
        return hash(("Vector", tuple(self._data.tolist())))

    def __repr__(self) -> str:
        return f"Vector({self._data.tolist()!r})"


class Matrix:
    """``n x m`` real matrix; the first index is the row, the second the column."""

    __slots__ = ("_data",)

    def __init__(self, values: Sequence[Sequence[float]] | Array) -> None:
        self._data = _frozen(values, 2, "Matrix")

    @classmethod
    def from_columns(cls, columns: Sequence[Vector]) -> "Matrix":
        """Stack vectors side by side, one vector per column."""

        _require(len(columns) > 0, "at least one column is required")
        n = len(columns[0])
        for col in columns:
            _require(len(col) == n, f"column lengths differ: {n} and {len(col)}")
        return cls(np.column_stack([col._data for col in columns]))

    # ------------------------------------------------------------------
    # Shape

    @property
    def shape(self) -> Tuple[int, int]:
        return int(self._data.shape[0]), int(self._data.shape[1])

    @property
    def rows(self) -> int:
        return self.shape[0]

    @property
    def cols(self) -> int:
        return self.shape[1]

    def to_numpy(self) -> Array:
        return self._data.copy()

    def columns(self) -> List[Vector]:
        """Decompose the matrix into its column vectors."""

        return [Vector(self._data[:, j]) for j in range(self.cols)]

    # ------------------------------------------------------------------
    # Arithmetic

    def _check_same(self, other: "Matrix", op: str) -> None:
        _require(
            self.shape == other.shape,
            f"cannot {op} matrices of shape {self.shape} and {other.shape}",
        )

    def transpose(self) -> "Matrix":
        return Matrix(self._data.T)

    @property
    def T(self) -> "Matrix":
        return self.transpose()

    def add_vec(self, b: Vector) -> "Matrix":
        """Add ``b`` to every column."""

        _require(
            len(b) == self.rows,
            f"cannot broadcast vector of length {len(b)} over {self.rows} rows",
        )
        return Matrix(self._data + b._data[:, np.newaxis])

    def __add__(self, other: "Matrix") -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        self._check_same(other, "add")
        return Matrix(self._data + other._data)

    def __sub__(self, other: "Matrix") -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        self._check_same(other, "subtract")
        return Matrix(self._data - other._data)

    def mul_mat(self, other: "Matrix") -> "Matrix":
        """Matrix product; ``(n x k) @ (k x m)`` gives ``n x m``."""

        _require(
            self.cols == other.rows,
            f"inner dimensions differ: {self.shape} @ {other.shape}",
        )
        return Matrix(np.matmul(self._data, other._data))

    def mul_vec(self, b: Vector) -> Vector:
        _require(
            self.cols == len(b),
            f"cannot multiply {self.shape} matrix by vector of length {len(b)}",
        )
        return Vector(self._data @ b._data)

    def __matmul__(self, other):
        if isinstance(other, Matrix):
            return self.mul_mat(other)
        if isinstance(other, Vector):
            return self.mul_vec(other)
        return NotImplemented

    def hadamard(self, other: "Matrix") -> "Matrix":
        self._check_same(other, "multiply elementwise")
        return Matrix(self._data * other._data)

    def scale(self, scalar: float) -> "Matrix":
        return Matrix(float(scalar) * self._data)

    def __mul__(self, scalar: float) -> "Matrix":
        if not isinstance(scalar, Real):
            return NotImplemented
        return self.scale(scalar)

    __rmul__ = __mul__

    def sum_cols(self) -> Vector:
        """Sum all columns into a single vector of length ``rows``."""

        return Vector(self._data.sum(axis=1))

    def map(self, fn: ElementwiseFn) -> "Matrix":
        return Matrix(fn(self._data))

    # ------------------------------------------------------------------
    # Value semantics

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    def __hash__(self) -> int:
        return hash(("Matrix", self.shape, tuple(self._data.ravel().tolist())))

    def __repr__(self) -> str:
        return f"Matrix({self._data.tolist()!r})"


__all__ = ["Matrix", "Vector"]
