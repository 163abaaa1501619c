import json

from neuralnetlib.reporting import CsvSink, JsonlSink, write_summary


def test_summary_statistics(tmp_path):
    sink = JsonlSink(tmp_path / "metrics.jsonl", seed=3)
    sink.on_epoch(1, {"cost": 0.5, "accuracy": 0.25})
    sink.on_epoch(2, {"cost": 0.25, "accuracy": 0.75})
    out = write_summary(sink.path, tmp_path / "summary.json")

    summary = json.loads(open(out).read())
    assert summary["version"] == 1
    assert summary["epochs"] == 2
    assert summary["metrics"]["cost"] == {
        "first": 0.5,
        "last": 0.25,
        "max": 0.5,
        "mean": 0.375,
        "min": 0.25,
    }
    assert "seed" not in summary["metrics"]


def test_summary_of_missing_metrics_is_empty(tmp_path):
    out = write_summary(tmp_path / "absent.jsonl", tmp_path / "summary.json")
    assert json.loads(open(out).read()) == {"epochs": 0, "metrics": {}, "version": 1}


def test_csv_sink_writes_header_once(tmp_path):
    sink = CsvSink(tmp_path / "metrics.csv")
    sink.on_epoch(1, {"cost": 1.0})
    sink.on_epoch(2, {"cost": 0.5})
    lines = (tmp_path / "metrics.csv").read_text().splitlines()
    assert lines == ["cost,epoch,split", "1.0,1,test", "0.5,2,test"]
