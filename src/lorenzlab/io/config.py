from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Sequence, Tuple

import yaml

from lorenzlab.core import constants
from lorenzlab.core.model import SystemParameters, ViewParameters
from lorenzlab.core.seed.base import list_strategies
from lorenzlab.core.seed import strategies  # noqa: F401 (registers strategies)


# -------------------------
# Config structures
# -------------------------


@dataclass(frozen=True)
class SimulationConfig:
    n: int = constants.DEFAULT_N_TRAJECTORIES
    max_time: float = constants.DEFAULT_MAX_TIME
    density: float = constants.DEFAULT_DENSITY
    seed: int = constants.DEFAULT_SEED
    strategy: str = constants.IC_STRATEGY
    low: float = constants.IC_LOW
    high: float = constants.IC_HIGH
    method: str = constants.SOLVER_METHOD


@dataclass(frozen=True)
class RunConfig:
    simulation: SimulationConfig
    params: SystemParameters
    view: ViewParameters


@dataclass(frozen=True)
class MatrixConfig:
    sigma: Sequence[float]
    beta: Sequence[float]
    rho: Sequence[float]
    seed: Sequence[int]


@dataclass(frozen=True)
class OutputConfig:
    include_timestamp_utc: bool
    include_initial_conditions: bool


@dataclass(frozen=True)
class SweepConfig:
    simulation: SimulationConfig
    matrix: MatrixConfig
    output: OutputConfig


# -------------------------
# Config parsing/validation
# -------------------------


class ConfigError(Exception):
    """Raised when a run or sweep config is invalid."""


def _require(mapping: Dict[str, Any], key: str, expected_type: Tuple[type, ...]):
    if key not in mapping:
        raise ConfigError(f"Missing required key '{key}'")
    val = mapping[key]
    if not isinstance(val, expected_type):
        raise ConfigError(f"Key '{key}' must be of type {expected_type}, got {type(val)}")
    return val


def _optional(mapping: Dict[str, Any], key: str, expected_type: Tuple[type, ...], default):
    if key not in mapping or mapping[key] is None:
        return default
    return _require(mapping, key, expected_type)


def _section(data: Dict[str, Any], key: str, required: bool = False) -> Dict[str, Any]:
    if required:
        return _require(data, key, (dict,))
    return _optional(data, key, (dict,), {})


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(Path(path).read_text(encoding=constants.ENCODING))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to read YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError("Top-level YAML must be a mapping.")
    return data


_NUMBER = (int, float)


def _parse_simulation(section: Dict[str, Any]) -> SimulationConfig:
    cfg = SimulationConfig(
        n=int(_optional(section, "n", (int,), constants.DEFAULT_N_TRAJECTORIES)),
        max_time=float(_optional(section, "max_time", _NUMBER, constants.DEFAULT_MAX_TIME)),
        density=float(_optional(section, "density", _NUMBER, constants.DEFAULT_DENSITY)),
        seed=int(_optional(section, "seed", (int,), constants.DEFAULT_SEED)),
        strategy=str(_optional(section, "strategy", (str,), constants.IC_STRATEGY)),
        low=float(_optional(section, "low", _NUMBER, constants.IC_LOW)),
        high=float(_optional(section, "high", _NUMBER, constants.IC_HIGH)),
        method=str(_optional(section, "method", (str,), constants.SOLVER_METHOD)),
    )
    if cfg.n <= 0:
        raise ConfigError("simulation.n must be > 0")
    if cfg.seed < 0:
        raise ConfigError("simulation.seed must be >= 0")
    if cfg.max_time <= 0:
        raise ConfigError("simulation.max_time must be > 0")
    if cfg.density <= 0:
        raise ConfigError("simulation.density must be > 0")
    if cfg.low >= cfg.high:
        raise ConfigError("simulation.low must be smaller than simulation.high")
    if cfg.strategy not in list_strategies():
        raise ConfigError(f"Unknown strategy '{cfg.strategy}'. Available: {list_strategies()}")
    if cfg.method not in constants.SOLVER_METHODS:
        raise ConfigError(f"Unknown solver method '{cfg.method}'. Available: {list(constants.SOLVER_METHODS)}")
    return cfg


def _parse_params(section: Dict[str, Any]) -> SystemParameters:
    return SystemParameters(
        sigma=float(_optional(section, "sigma", _NUMBER, constants.LORENZ_SIGMA)),
        beta=float(_optional(section, "beta", _NUMBER, constants.LORENZ_BETA)),
        rho=float(_optional(section, "rho", _NUMBER, constants.LORENZ_RHO)),
    )


def _parse_view(section: Dict[str, Any]) -> ViewParameters:
    return ViewParameters(
        elev=float(_optional(section, "elev", _NUMBER, constants.VIEW_ELEV)),
        azim=float(_optional(section, "azim", _NUMBER, constants.VIEW_AZIM)),
        colormap=str(_optional(section, "colormap", (str,), constants.COLORMAP)),
    )


def parse_run_config(path: Path) -> RunConfig:
    data = _load_yaml(path)
    simulation = _parse_simulation(_section(data, "simulation", required=True))
    try:
        params = _parse_params(_section(data, "params"))
        view = _parse_view(_section(data, "view"))
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc
    return RunConfig(simulation=simulation, params=params, view=view)


def _number_list(section: Dict[str, Any], key: str, default: float) -> list[float]:
    values = _optional(section, key, (list, tuple), [default])
    if not values:
        raise ConfigError(f"matrix.{key} must not be empty")
    if not all(isinstance(v, _NUMBER) and not isinstance(v, bool) for v in values):
        raise ConfigError(f"matrix.{key} must contain only numbers")
    return [float(v) for v in values]


def parse_sweep_config(path: Path) -> SweepConfig:
    data = _load_yaml(path)
    simulation = _parse_simulation(_section(data, "simulation", required=True))
    matrix = _section(data, "matrix", required=True)
    output = _section(data, "output")

    seeds = _optional(matrix, "seed", (list, tuple), [simulation.seed])
    if not seeds or not all(isinstance(s, int) and not isinstance(s, bool) and s >= 0 for s in seeds):
        raise ConfigError("matrix.seed must be a non-empty list of non-negative integers")

    matrix_cfg = MatrixConfig(
        sigma=_number_list(matrix, "sigma", constants.LORENZ_SIGMA),
        beta=_number_list(matrix, "beta", constants.LORENZ_BETA),
        rho=_number_list(matrix, "rho", constants.LORENZ_RHO),
        seed=[int(s) for s in seeds],
    )
    output_cfg = OutputConfig(
        include_timestamp_utc=_optional(output, "include_timestamp_utc", (bool,), True),
        include_initial_conditions=_optional(output, "include_initial_conditions", (bool,), False),
    )
    return SweepConfig(simulation=simulation, matrix=matrix_cfg, output=output_cfg)
