from pathlib import Path

import pytest
import yaml

from lorenzlab.io.config import ConfigError, parse_run_config, parse_sweep_config


def _write(tmp_path, name, data):
    path = Path(tmp_path) / name
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


def test_run_config_defaults(tmp_path):
    cfg = parse_run_config(_write(tmp_path, "run.yaml", {"simulation": {}}))
    assert cfg.simulation.n == 10
    assert cfg.simulation.max_time == 4.0
    assert cfg.params.rho == 28.0
    assert cfg.view.elev == 30.0


def test_run_config_values(tmp_path):
    data = {
        "simulation": {"n": 3, "max_time": 2, "seed": 9, "strategy": "perturbed"},
        "params": {"sigma": 12.0, "beta": 2, "rho": 14.5},
        "view": {"elev": 15, "azim": 90, "colormap": "plasma"},
    }
    cfg = parse_run_config(_write(tmp_path, "run.yaml", data))
    assert cfg.simulation.n == 3
    assert cfg.simulation.max_time == 2.0
    assert cfg.simulation.strategy == "perturbed"
    assert cfg.params.beta == 2.0
    assert cfg.view.azim == 90.0
    assert cfg.view.colormap == "plasma"


def test_run_config_missing_section(tmp_path):
    with pytest.raises(ConfigError):
        parse_run_config(_write(tmp_path, "run.yaml", {"params": {"rho": 28}}))


@pytest.mark.parametrize(
    "simulation",
    [
        {"n": 0},
        {"n": "ten"},
        {"max_time": -1},
        {"low": 5, "high": -5},
        {"strategy": "spiral"},
        {"method": "Euler"},
    ],
)
def test_run_config_rejects_bad_simulation(tmp_path, simulation):
    with pytest.raises(ConfigError):
        parse_run_config(_write(tmp_path, "run.yaml", {"simulation": simulation}))


def test_run_config_rejects_non_mapping(tmp_path):
    path = Path(tmp_path) / "run.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        parse_run_config(path)


def test_run_config_rejects_bad_view(tmp_path):
    data = {"simulation": {}, "view": {"elev": "high"}}
    with pytest.raises(ConfigError):
        parse_run_config(_write(tmp_path, "run.yaml", data))


def test_sweep_config(tmp_path):
    data = {
        "simulation": {"n": 2, "max_time": 1.0, "density": 50},
        "matrix": {"rho": [14, 28], "seed": [0, 1]},
        "output": {"include_timestamp_utc": False},
    }
    cfg = parse_sweep_config(_write(tmp_path, "sweep.yaml", data))
    assert cfg.matrix.rho == [14.0, 28.0]
    assert cfg.matrix.sigma == [10.0]
    assert cfg.matrix.seed == [0, 1]
    assert cfg.output.include_timestamp_utc is False
    assert cfg.output.include_initial_conditions is False


def test_sweep_config_missing_matrix(tmp_path):
    with pytest.raises(ConfigError):
        parse_sweep_config(_write(tmp_path, "sweep.yaml", {"simulation": {}}))


def test_sweep_config_rejects_empty_list(tmp_path):
    data = {"simulation": {}, "matrix": {"rho": []}}
    with pytest.raises(ConfigError):
        parse_sweep_config(_write(tmp_path, "sweep.yaml", data))


def test_run_config_rejects_negative_seed(tmp_path):
    with pytest.raises(ConfigError):
        parse_run_config(_write(tmp_path, "run.yaml", {"simulation": {"seed": -1}}))


def test_sweep_config_rejects_negative_matrix_seed(tmp_path):
    data = {"simulation": {}, "matrix": {"seed": [0, -1]}}
    with pytest.raises(ConfigError):
        parse_sweep_config(_write(tmp_path, "sweep.yaml", data))


@pytest.mark.parametrize("key", ["include_timestamp_utc", "include_initial_conditions"])
def test_sweep_config_rejects_non_bool_output_flag(tmp_path, key):
    data = {"simulation": {}, "matrix": {"rho": [28]}, "output": {key: "no"}}
    with pytest.raises(ConfigError):
        parse_sweep_config(_write(tmp_path, "sweep.yaml", data))
