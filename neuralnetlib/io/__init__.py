"""Model persistence helpers."""

from .network_io import (
    NetworkIOError,
    NetworkLoadError,
    NetworkSaveError,
    load_network,
    save_network,
)

__all__ = [
    "NetworkIOError",
    "NetworkLoadError",
    "NetworkSaveError",
    "load_network",
    "save_network",
]
