"""Training loops, evaluation metrics and pipelines."""

from .trainer import Trainer

__all__ = ["Trainer"]
