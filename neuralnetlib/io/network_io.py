"""Saving and loading networks in the line-oriented text format.

Layout::

    #version 1                      (optional, assumed 1 when absent)
    SIGMOID_ACTIVATION_FUNCTION     (optional activation marker)
    <layer count L>
    <L - 1 lines, one bias vector each>
    <L - 1 blank-line separated blocks, one weight matrix row per line>

The last weight block may end without a blank line.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from ..core.activations import Activation, Sigmoid, Tanh
from ..core.algebra import Matrix, Vector
from ..core.network import NeuralNetwork

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1
_VERSION_PREFIX = "#version"

_MARKERS = {
    "SIGMOID_ACTIVATION_FUNCTION": Sigmoid,
    "TANH_ACTIVATION_FUNCTION": Tanh,
}
_MARKER_BY_NAME = {cls.name: marker for marker, cls in _MARKERS.items()}


class NetworkIOError(Exception):
    """Base class for persistence failures."""


class NetworkLoadError(NetworkIOError):
    """Raised when a network file cannot be read or parsed."""


class NetworkSaveError(NetworkIOError):
    """Raised when a network file cannot be written."""


@dataclass(frozen=True)
class NetworkRecord:
    """Named fields of a serialised network."""

    version: int
    activation: str
    layer_count: int
    biases: List[Vector]
    weights: List[Matrix]

    @classmethod
    def from_network(cls, network: NeuralNetwork) -> "NetworkRecord":
        return cls(
            version=FORMAT_VERSION,
            activation=network.activation.name,
            layer_count=network.size,
            biases=network.biases,
            weights=network.weights,
        )

    def to_network(self) -> NeuralNetwork:
        activation: Activation = _MARKERS[_MARKER_BY_NAME[self.activation]]()
        return NeuralNetwork(self.weights, self.biases, activation)


# ----------------------------------------------------------------------
# Writing


def _format_row(values) -> str:
    return " ".join(repr(float(v)) for v in values)


def format_network(record: NetworkRecord) -> str:
    """Render ``record`` in the text format."""

    if record.activation not in _MARKER_BY_NAME:
        raise ValueError(f"No file marker for activation {record.activation!r}")
    lines = [
        f"{_VERSION_PREFIX} {record.version}",
        _MARKER_BY_NAME[record.activation],
        str(record.layer_count),
    ]
    lines.extend(_format_row(b) for b in record.biases)
    for W in record.weights:
        lines.extend(_format_row(row) for row in W.to_numpy())
        lines.append("")
    return "\n".join(lines) + "\n"


def save_network(path: str | Path, network: NeuralNetwork) -> Path:
    """Write ``network`` to ``path`` atomically.

    Raises :class:`NetworkSaveError` if the file cannot be written.
    """

    path = Path(path)
    tmp_name = None
    replaced = False
    try:
        text = format_network(NetworkRecord.from_network(network))
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", delete=False
        ) as handle:
            tmp_name = handle.name
            handle.write(text)
        os.replace(tmp_name, path)
        replaced = True
    except (OSError, ValueError) as exc:
        raise NetworkSaveError(f"Could not save network to {path}: {exc}") from exc
    finally:
        if not replaced and tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
    logger.debug("Saved network %r to %s", network, path)
    return path


# ----------------------------------------------------------------------
# Reading


def _parse_row(line: str, lineno: int) -> List[float]:
    try:
        return [float(token) for token in line.split()]
    except ValueError as exc:
        raise NetworkLoadError(f"line {lineno}: malformed number in {line.strip()!r}") from exc


def _split_blocks(lines: Sequence[str], start: int) -> List[List[int]]:
    """Group the line numbers of non-blank lines into blank-separated blocks."""

    blocks: List[List[int]] = []
    current: List[int] = []
    for idx in range(start, len(lines)):
        if lines[idx].strip():
            current.append(idx)
        elif current:
            blocks.append(current)
            current = []
    if current:
        blocks.append(current)
    return blocks


def parse_network(text: str) -> NetworkRecord:
    """Parse the text format into a :class:`NetworkRecord`.

    Raises :class:`NetworkLoadError` for every structural or numeric problem.
    """

    lines = text.splitlines()
    pos = 0
    version = FORMAT_VERSION
    if pos < len(lines) and lines[pos].strip().startswith(_VERSION_PREFIX):
        raw = lines[pos].strip()[len(_VERSION_PREFIX):].strip()
        try:
            version = int(raw)
        except ValueError as exc:
            raise NetworkLoadError(f"Malformed version line {lines[pos]!r}") from exc
        if version != FORMAT_VERSION:
            raise NetworkLoadError(f"Unsupported format version {version}")
        pos += 1

    activation = Sigmoid.name
    if pos < len(lines) and lines[pos].strip() in _MARKERS:
        activation = _MARKERS[lines[pos].strip()].name
        pos += 1

    if pos >= len(lines):
        raise NetworkLoadError("Missing layer count")
    try:
        layer_count = int(lines[pos].strip())
    except ValueError as exc:
        raise NetworkLoadError(f"line {pos + 1}: invalid layer count {lines[pos]!r}") from exc
    if layer_count < 2:
        raise NetworkLoadError(f"A network needs at least two layers, got {layer_count}")
    pos += 1

    n_layers = layer_count - 1
    if pos + n_layers > len(lines):
        raise NetworkLoadError(f"Expected {n_layers} bias lines")
    biases = [Vector(_parse_row(lines[pos + i], pos + i + 1)) for i in range(n_layers)]
    pos += n_layers

    blocks = _split_blocks(lines, pos)
    if len(blocks) != n_layers:
        raise NetworkLoadError(f"Expected {n_layers} weight blocks, found {len(blocks)}")
    weights: List[Matrix] = []
    for block in blocks:
        rows = [_parse_row(lines[idx], idx + 1) for idx in block]
        if len({len(row) for row in rows}) != 1:
            raise NetworkLoadError(f"Ragged weight block starting at line {block[0] + 1}")
        weights.append(Matrix(rows))

    return NetworkRecord(
        version=version,
        activation=activation,
        layer_count=layer_count,
        biases=biases,
        weights=weights,
    )


def load_network(path: str | Path) -> NeuralNetwork:
    """Load a network saved with :func:`save_network` (or the legacy layout)."""

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise NetworkLoadError(f"Could not read network file {path}: {exc}") from exc
    record = parse_network(text)
    try:
        network = record.to_network()
    except ValueError as exc:
        raise NetworkLoadError(f"Inconsistent layer shapes in {path}: {exc}") from exc
    logger.debug("Loaded network %r from %s", network, path)
    return network


__all__ = [
    "FORMAT_VERSION",
    "NetworkIOError",
    "NetworkLoadError",
    "NetworkRecord",
    "NetworkSaveError",
    "format_network",
    "load_network",
    "parse_network",
    "save_network",
]
