"""Config-driven training runs and built-in presets."""

from __future__ import annotations

import json
import time
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Mapping, Sequence

import numpy as np

from ..core.activations import get_activation
from ..core.costs import get_cost
from ..core.initialization import get_initialization
from ..core.network import NeuralNetwork
from ..core.regularization import get_regularization
from ..core.types import RunResult
from ..data import get_dataset
from ..io.network_io import save_network
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from ..reporting.summary import write_summary
from .trainer import Trainer

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor-quadratic": {
        "data": {"name": "xor", "options": {"repeat": 25}},
        "model": {"hidden": [4], "activation": "sigmoid", "initialization": "normalized"},
        "train": {
            "epochs": 300,
            "batch_size": 4,
            "lr": 3.0,
            "lmbda": 0.0,
            "cost": "quadratic",
            "regularization": "l2",
            "seed": 0,
            "verbose": True,
            "run_dir": "runs/xor-quadratic",
            "enable_plots": False,
            "save_model": "network.dat",
        },
    },
    "xor-cross-entropy": {
        "data": {"name": "xor", "options": {"repeat": 25}},
        "model": {"hidden": [4], "activation": "sigmoid", "initialization": "normalized"},
        "train": {
            "epochs": 150,
            "batch_size": 4,
            "lr": 0.5,
            "lmbda": 0.0,
            "cost": "cross_entropy",
            "regularization": "l2",
            "seed": 0,
            "verbose": True,
            "run_dir": "runs/xor-cross-entropy",
            "enable_plots": False,
            "save_model": "network.dat",
        },
    },
    "blobs-l2": {
        "data": {
            "name": "blobs",
            "options": {"n_samples": 300, "n_classes": 3, "n_features": 2, "seed": 0},
        },
        "model": {"hidden": [16], "activation": "sigmoid", "initialization": "normalized"},
        "train": {
            "epochs": 30,
            "batch_size": 10,
            "lr": 0.5,
            "lmbda": 1.0,
            "cost": "cross_entropy",
            "regularization": "l2",
            "seed": 1,
            "verbose": True,
            "run_dir": "runs/blobs-l2",
            "enable_plots": False,
            "save_model": "network.dat",
        },
    },
}


def presets() -> Mapping[str, Mapping[str, object]]:
    return {name: deepcopy(cfg) for name, cfg in _PRESETS.items()}


def load_preset(name: str) -> Mapping[str, object]:
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        available = ", ".join(sorted(_PRESETS))
        raise KeyError(f"Unknown preset {name!r}. Available presets: {available}") from exc


def read_config(path: str | Path) -> Mapping[str, object]:
    """Read a JSON or YAML configuration file into a mapping."""

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in {".yaml", ".yml", ".json"}:
        raise ValueError(f"Unsupported config file type: {path.suffix}")
    text = path.read_text()
    if suffix in {".yaml", ".yml"}:
        import yaml

        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text or "{}")
    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return data


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    """Build dataset, network and trainer from ``config`` and train."""

    data_cfg = dict(config["data"])
    model_cfg = dict(config.get("model", {}))
    train_cfg = dict(config.get("train", {}))

    dataset = get_dataset(str(data_cfg["name"]), **dict(data_cfg.get("options", {})))
    seed = int(train_cfg.get("seed", 0))
    init_rng = np.random.default_rng(seed)
    shuffle_rng = np.random.default_rng(seed + 1)

    sizes = _build_sizes(model_cfg, dataset.d_in, dataset.d_out)
    activation = get_activation(str(model_cfg.get("activation", "sigmoid")))
    initialization = get_initialization(
        str(model_cfg.get("initialization", "normalized")), rng=init_rng
    )
    network = NeuralNetwork.from_sizes(sizes, activation, initialization)
    cost = get_cost(str(train_cfg.get("cost", "quadratic")))
    regularization = get_regularization(str(train_cfg.get("regularization", "l2")))

    run_dir = _resolve_run_dir(train_cfg, dataset.name)
    run_dir.mkdir(parents=True, exist_ok=True)
    jsonl = JsonlSink(run_dir / "metrics.jsonl", split="test", seed=seed)
    csv_sink = CsvSink(run_dir / "metrics.csv", split="test")
    plots = PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))

    epochs = int(train_cfg.get("epochs", 1))
    _print_startup_summary(
        dataset_name=dataset.name,
        splits=dataset.splits,
        sizes=sizes,
        activation=activation.name,
        cost=cost.name,
        regularization=regularization.name,
        param_count=network.parameter_count(),
        epochs=epochs,
    )

    trainer = Trainer(
        network,
        cost,
        regularization,
        dataset.train_inputs,
        dataset.train_targets,
        dataset.test_inputs,
        dataset.test_targets,
        rng=shuffle_rng,
        callbacks=[jsonl, csv_sink, plots],
    )
    trainer.train(
        epochs,
        learning_rate=float(train_cfg.get("lr", 0.1)),
        lmbda=float(train_cfg.get("lmbda", 0.0)),
        batch_size=int(train_cfg.get("batch_size", 10)),
        verbose=bool(train_cfg.get("verbose", True)),
    )
    plots.close()

    model_path = ""
    if train_cfg.get("save_model"):
        model_path = str(save_network(run_dir / str(train_cfg["save_model"]), network))

    config_path = run_dir / "config.json"
    resolved = json.loads(json.dumps(config))
    resolved.setdefault("model", {})["sizes"] = sizes
    resolved["dataset"] = dataset.provenance
    config_path.write_text(json.dumps(resolved, indent=2))
    summary_path = write_summary(jsonl.path, run_dir / "summary.json")

    return RunResult(
        epochs=epochs,
        metrics_path=str(jsonl.path),
        summary_path=summary_path,
        config_path=str(config_path),
        model_path=model_path,
    )


def _build_sizes(model_cfg: Mapping[str, object], d_in: int, d_out: int) -> List[int]:
    if "sizes" in model_cfg:
        sizes = [int(s) for s in model_cfg["sizes"]]  # type: ignore[union-attr]
        if sizes[0] != d_in or sizes[-1] != d_out:
            raise ValueError(
                f"Configured sizes {sizes} do not match dataset dimensions {d_in} -> {d_out}"
            )
        return sizes
    hidden = [int(h) for h in model_cfg.get("hidden", [])]  # type: ignore[union-attr]
    return [d_in, *hidden, d_out]


def _resolve_run_dir(train_cfg: Mapping[str, object], dataset: str) -> Path:
    if "run_dir" in train_cfg:
        return Path(str(train_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / dataset


def _print_startup_summary(
    *,
    dataset_name: str,
    splits: Mapping[str, int],
    sizes: Sequence[int],
    activation: str,
    cost: str,
    regularization: str,
    param_count: int,
    epochs: int,
) -> None:
    print("=== neuralnetlib run ===")
    print(f"Dataset        : {dataset_name} ({splits['train']} train / {splits['test']} test)")
    print(f"Layer sizes    : {list(sizes)}")
    print(f"Activation     : {activation}")
    print(f"Cost           : {cost}")
    print(f"Regularization : {regularization}")
    print(f"Parameters     : {param_count}")
    print(f"Epochs         : {epochs}")
    print("========================")


__all__ = ["load_preset", "presets", "read_config", "run_pipeline"]
