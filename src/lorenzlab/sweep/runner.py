from __future__ import annotations

import csv
import hashlib
import itertools
import json
import time
from concurrent.futures import ProcessPoolExecutor
from datetime import datetime, timezone
from functools import partial
from pathlib import Path
from typing import Any, Dict, List

import numpy as np

from lorenzlab.core import constants
from lorenzlab.core.model import SystemParameters, TrajectorySet
from lorenzlab.io.config import MatrixConfig, OutputConfig, SimulationConfig, SweepConfig
from lorenzlab.orchestrator.pipeline import solve_lorenz
from lorenzlab.render.figures import summarize
from lorenzlab.utils.logging import get_logger

logger = get_logger(__name__)


def states_fingerprint(trajectories: TrajectorySet) -> str:
    """SHA-256 over the stacked states (row-major)."""
    return hashlib.sha256(trajectories.as_array().tobytes(order="C")).hexdigest()


def _measure_time(func):
    start = time.perf_counter()
    result = func()
    end = time.perf_counter()
    return result, end - start


def _variant_product(matrix: MatrixConfig) -> List[Dict[str, Any]]:
    combos = []
    for sigma, beta, rho, seed in itertools.product(matrix.sigma, matrix.beta, matrix.rho, matrix.seed):
        combos.append(
            {
                "sigma": float(sigma),
                "beta": float(beta),
                "rho": float(rho),
                "seed": int(seed),
            }
        )
    return combos


def _run_single_variant(
    simulation: SimulationConfig,
    output: OutputConfig,
    variant: Dict[str, Any],
) -> Dict[str, Any]:
    params = SystemParameters(sigma=variant["sigma"], beta=variant["beta"], rho=variant["rho"])
    trajectories, t_simulate = _measure_time(
        lambda: solve_lorenz(
            simulation.n,
            simulation.max_time,
            params,
            variant["seed"],
            density=simulation.density,
            strategy=simulation.strategy,
            low=simulation.low,
            high=simulation.high,
            method=simulation.method,
        )
    )
    means = np.asarray(summarize(trajectories))
    final_states = trajectories.as_array()[:, -1, :]

    record: Dict[str, Any] = {
        "sigma": params.sigma,
        "beta": params.beta,
        "rho": params.rho,
        "seed": variant["seed"],
        "n": simulation.n,
        "max_time": simulation.max_time,
        "samples": len(trajectories.time_grid),
        "strategy": simulation.strategy,
        "method": simulation.method,
        "t_simulate_s": t_simulate,
        "mean_x": float(means[:, 0].mean()),
        "mean_y": float(means[:, 1].mean()),
        "mean_z": float(means[:, 2].mean()),
        "std_mean_x": float(means[:, 0].std()),
        "std_mean_y": float(means[:, 1].std()),
        "final_spread": float(np.linalg.norm(final_states.std(axis=0))),
        "states_sha256": states_fingerprint(trajectories),
        "initial_conditions": None,
    }
    if output.include_initial_conditions:
        record["initial_conditions"] = json.dumps([list(ic) for ic in trajectories.initial_conditions])
    if output.include_timestamp_utc:
        record["timestamp_utc"] = datetime.now(timezone.utc).isoformat()
    logger.debug(
        "Variant sigma=%s beta=%s rho=%s seed=%d done in %.4fs",
        params.sigma,
        params.beta,
        params.rho,
        variant["seed"],
        t_simulate,
    )
    return record


def run_sweep(config: SweepConfig, jobs: int = 1) -> List[Dict[str, Any]]:
    variants = _variant_product(config.matrix)
    runner = partial(_run_single_variant, config.simulation, config.output)
    logger.info("Running %d sweep variants with jobs=%d", len(variants), jobs)

    if jobs and jobs > 1:
        with ProcessPoolExecutor(max_workers=jobs) as ex:
            results = list(ex.map(runner, variants))
    else:
        results = [runner(variant) for variant in variants]

    # Sort deterministically
    def sort_key(rec: Dict[str, Any]):
        return (rec["sigma"], rec["beta"], rec["rho"], rec["seed"])

    return sorted(results, key=sort_key)


# -------------------------
# Output helpers
# -------------------------


CSV_FIELDS = [
    "timestamp_utc",
    "sigma",
    "beta",
    "rho",
    "seed",
    "n",
    "max_time",
    "samples",
    "strategy",
    "method",
    "t_simulate_s",
    "mean_x",
    "mean_y",
    "mean_z",
    "std_mean_x",
    "std_mean_y",
    "final_spread",
    "states_sha256",
    "initial_conditions",
]


def write_csv(path: Path, records: List[Dict[str, Any]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding=constants.ENCODING) as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for rec in records:
            writer.writerow(rec)


def write_json_output(path: Path, records: List[Dict[str, Any]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding=constants.ENCODING) as f:
        json.dump(records, f, indent=2)
