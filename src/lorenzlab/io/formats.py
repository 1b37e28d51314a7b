from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Sequence

from lorenzlab.core import constants
from lorenzlab.core.model import TrajectorySet


def summary_payload(
    trajectories: TrajectorySet,
    means: Sequence[Sequence[float]],
    seed: int | None = None,
    strategy: str | None = None,
) -> Dict[str, Any]:
    """JSON-friendly description of a run and its per-trajectory means."""
    return {
        "version": constants.VERSION,
        "system": "lorenz",
        "params": trajectories.params.as_dict(),
        "time_grid": {
            "max_time": trajectories.time_grid.max_time,
            "samples": trajectories.time_grid.samples,
        },
        "initial_conditions": {
            "seed": seed,
            "strategy": strategy,
            "values": [list(ic) for ic in trajectories.initial_conditions],
        },
        "means": [
            {"x": float(m[0]), "y": float(m[1]), "z": float(m[2])} for m in means
        ],
    }


def read_json(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding=constants.ENCODING) as f:
        return json.load(f)


def write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding=constants.ENCODING) as f:
        json.dump(payload, f, indent=2)
