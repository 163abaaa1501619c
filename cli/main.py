"""Command line entry point for training neuralnetlib networks."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Iterable

from neuralnetlib.core.types import RunResult
from neuralnetlib.training import pipelines


def _format_result(result: RunResult) -> str:
    payload = {
        "epochs": result.epochs,
        "metrics": result.metrics_path,
        "summary": result.summary_path,
        "config": result.config_path,
    }
    if result.model_path:
        payload["model"] = result.model_path
    return json.dumps(payload, sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="xor-quadratic",
        help="Preset configuration to execute",
    )
    parser.add_argument("--config", type=Path, help="Optional JSON/YAML config override")
    parser.add_argument("--epochs", type=int, help="Override the number of epochs")
    parser.add_argument("--lr", type=float, help="Override the learning rate")
    parser.add_argument("--lmbda", type=float, help="Override the regularization strength")
    parser.add_argument("--batch-size", type=int, help="Override the mini-batch size")
    parser.add_argument("--seed", type=int, help="Seed used for initialization and shuffling")
    parser.add_argument("--run-dir", type=Path, help="Directory receiving run artifacts")
    parser.add_argument(
        "--save-model", help="File name (inside the run directory) for the trained network"
    )
    parser.add_argument(
        "--enable-plots", action="store_true", help="Plot the test cost per epoch"
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge(dict(base[key]), value)
        else:
            base[key] = value
    return base


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    config = json.loads(json.dumps(pipelines.load_preset(args.preset)))

    if args.config:
        override = json.loads(json.dumps(pipelines.read_config(args.config)))
        if {"data", "model", "train"} <= set(override.keys()):
            config = override
        else:
            config = _merge(config, override)

    train_cfg = config.setdefault("train", {})
    overrides = {
        "epochs": args.epochs,
        "lr": args.lr,
        "lmbda": args.lmbda,
        "batch_size": args.batch_size,
        "seed": args.seed,
        "save_model": args.save_model,
    }
    train_cfg.update({key: value for key, value in overrides.items() if value is not None})
    if args.run_dir is not None:
        train_cfg["run_dir"] = str(args.run_dir)
    if args.enable_plots:
        train_cfg["enable_plots"] = True

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    print(_format_result(pipelines.run_pipeline(config)))


if __name__ == "__main__":
    main()
