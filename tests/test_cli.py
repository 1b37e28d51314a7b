import csv
import json
from pathlib import Path

import yaml
from typer.testing import CliRunner

from lorenzlab.cli.app import app
from lorenzlab.io.formats import read_json


def test_simulate_writes_outputs(tmp_path):
    runner = CliRunner()
    fig_path = Path(tmp_path) / "lorenz.png"
    hist_path = Path(tmp_path) / "hist.png"
    summary_path = Path(tmp_path) / "summary.json"

    result = runner.invoke(
        app,
        [
            "simulate",
            "--n",
            "4",
            "--max-time",
            "1.0",
            "--density",
            "100",
            "--seed",
            "3",
            "--azim",
            "45",
            "--out",
            str(fig_path),
            "--hist-out",
            str(hist_path),
            "--summary-out",
            str(summary_path),
        ],
    )
    assert result.exit_code == 0, result.output
    assert fig_path.exists()
    assert hist_path.exists()

    summary = read_json(summary_path)
    assert summary["params"]["rho"] == 28.0
    assert summary["time_grid"]["samples"] == 100
    assert summary["initial_conditions"]["seed"] == 3
    assert len(summary["means"]) == 4


def test_simulate_with_config(tmp_path):
    runner = CliRunner()
    cfg_path = Path(tmp_path) / "run.yaml"
    cfg_path.write_text(
        yaml.safe_dump({"simulation": {"n": 2, "max_time": 0.5, "density": 100}, "params": {"rho": 14}}),
        encoding="utf-8",
    )
    summary_path = Path(tmp_path) / "summary.json"

    result = runner.invoke(
        app,
        [
            "simulate",
            "--config",
            str(cfg_path),
            "--n",
            "3",
            "--out",
            str(Path(tmp_path) / "fig.png"),
            "--summary-out",
            str(summary_path),
        ],
    )
    assert result.exit_code == 0, result.output
    summary = json.loads(summary_path.read_text())
    assert summary["params"]["rho"] == 14.0
    assert summary["time_grid"]["samples"] == 50
    assert len(summary["means"]) == 3


def test_simulate_rejects_invalid_parameters(tmp_path):
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["simulate", "--n", "0", "--out", str(Path(tmp_path) / "fig.png")],
    )
    assert result.exit_code == 1
    assert not (Path(tmp_path) / "fig.png").exists()

    result = runner.invoke(
        app,
        ["simulate", "--max-time", "0", "--out", str(Path(tmp_path) / "fig.png")],
    )
    assert result.exit_code == 1


def test_summary_is_deterministic():
    runner = CliRunner()
    args = ["summary", "--n", "2", "--max-time", "0.5", "--density", "50", "--seed", "11"]
    res1 = runner.invoke(app, args)
    res2 = runner.invoke(app, args)

    assert res1.exit_code == 0, res1.output
    assert res1.output.strip() == res2.output.strip()
    payload = json.loads(res1.output)
    assert len(payload["means"]) == 2
    assert payload["initial_conditions"]["seed"] == 11


def test_sweep_command(tmp_path):
    runner = CliRunner()
    cfg = {
        "simulation": {"n": 2, "max_time": 0.5, "density": 50},
        "matrix": {"rho": [10, 28], "seed": [0]},
        "output": {"include_timestamp_utc": False},
    }
    cfg_path = Path(tmp_path) / "sweep.yaml"
    cfg_path.write_text(yaml.safe_dump(cfg), encoding="utf-8")
    csv_out = Path(tmp_path) / "out.csv"
    json_out = Path(tmp_path) / "out.json"

    res = runner.invoke(
        app,
        ["sweep", "--config", str(cfg_path), "--out", str(csv_out), "--out-json", str(json_out), "--json"],
    )
    assert res.exit_code == 0, res.output
    with csv_out.open() as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 2
    assert len(json.loads(json_out.read_text())) == 2
    assert '"variants": 2' in res.output


def test_sweep_bad_config(tmp_path):
    runner = CliRunner()
    cfg_path = Path(tmp_path) / "sweep.yaml"
    cfg_path.write_text("simulation: {}\n", encoding="utf-8")
    res = runner.invoke(app, ["sweep", "--config", str(cfg_path), "--out", str(Path(tmp_path) / "out.csv")])
    assert res.exit_code == 1


def test_strategies_lists_registry():
    res = CliRunner().invoke(app, ["strategies"])
    assert res.exit_code == 0, res.output
    assert "uniform" in res.output
    assert "perturbed" in res.output


def test_selftest_passes():
    res = CliRunner().invoke(app, ["selftest"])
    assert res.exit_code == 0, res.output
    assert "passed" in res.output


def test_summary_rejects_negative_seed():
    res = CliRunner().invoke(app, ["summary", "--n", "2", "--max-time", "0.5", "--seed", "-1"])
    assert res.exit_code == 1
    assert not isinstance(res.exception, ValueError)
    assert "non-negative" in res.output


def test_sweep_rejects_negative_seed(tmp_path):
    cfg_path = Path(tmp_path) / "sweep.yaml"
    cfg_path.write_text(yaml.safe_dump({"simulation": {"seed": -1}, "matrix": {"rho": [28]}}), encoding="utf-8")
    res = CliRunner().invoke(app, ["sweep", "--config", str(cfg_path), "--out", str(Path(tmp_path) / "out.csv")])
    assert res.exit_code == 1
    assert not (Path(tmp_path) / "out.csv").exists()


def test_simulate_builds_time_grid_once(tmp_path, monkeypatch):
    from lorenzlab.cli import app as app_module

    calls = []
    original = app_module.TimeGrid.from_density

    def counting_from_density(max_time, density):
        calls.append((max_time, density))
        return original(max_time, density)

    monkeypatch.setattr(app_module.TimeGrid, "from_density", counting_from_density)
    res = CliRunner().invoke(
        app,
        ["simulate", "--n", "2", "--max-time", "0.5", "--density", "50", "--out", str(Path(tmp_path) / "fig.png")],
    )
    assert res.exit_code == 0, res.output
    assert calls == [(0.5, 50.0)]
