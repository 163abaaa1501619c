"""Headless-safe plotting adapter for training curves."""

from __future__ import annotations

from pathlib import Path
from typing import List, Mapping, Tuple


class PlotAdapter:
    """Collect per-epoch cost values and optionally plot them with matplotlib."""

    def __init__(self, run_dir: str | Path, enable_plots: bool = False):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self._history: List[Tuple[int, float]] = []
        if self.enable_plots:
            self.run_dir.mkdir(parents=True, exist_ok=True)

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        if not self.enable_plots or "cost" not in metrics:
            return
        self._history.append((epoch, float(metrics["cost"])))

    def close(self) -> Path | None:
        if not self.enable_plots or not self._history:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # imported lazily for headless safety

        epochs, costs = zip(*self._history)
        fig, ax = plt.subplots()
        ax.plot(epochs, costs, marker="o")
        ax.set_xlabel("Epoch")
        ax.set_ylabel("Cost")
        ax.set_title("Test cost per epoch")
        plot_path = self.run_dir / "cost.png"
        fig.savefig(plot_path)
        plt.close(fig)
        return plot_path

    __call__ = on_epoch
