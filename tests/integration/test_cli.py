import json
from pathlib import Path

import pytest

from cli.main import main


def test_cli_preset_run(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    main(["--preset", "xor-quadratic", "--epochs", "2"])
    run_dir = Path("runs/xor-quadratic")
    assert (run_dir / "metrics.jsonl").exists()
    assert (run_dir / "network.dat").exists()
    payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert payload["epochs"] == 2
    assert payload["model"].endswith("network.dat")


def test_cli_lists_presets(capsys):
    with pytest.raises(SystemExit) as info:
        main(["--list-presets"])
    assert info.value.code == 0
    assert "xor-quadratic" in capsys.readouterr().out


def test_cli_yaml_override_and_dump(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    override = tmp_path / "override.yaml"
    override.write_text("model:\n  hidden: [2]\ntrain:\n  epochs: 1\n")
    main(
        [
            "--config",
            str(override),
            "--run-dir",
            "out",
            "--seed",
            "4",
            "--dump-config",
            "dumped/config.json",
        ]
    )
    resolved = json.loads(Path("out/config.json").read_text())
    assert resolved["model"]["sizes"] == [2, 2, 1]
    assert resolved["train"]["seed"] == 4
    dumped = json.loads(Path("dumped/config.json").read_text())
    assert dumped["train"]["epochs"] == 1
    assert dumped["model"]["activation"] == "sigmoid"
