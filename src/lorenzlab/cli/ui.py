from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

import typer

from lorenzlab.core.model import SystemParameters, TimeGrid, ViewParameters


def _timestamp_utc() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _abs_path(path: Path | None) -> str:
    if path is None:
        return "n/a"
    return str(Path(path).resolve())


def print_run_header(
    command: str,
    *,
    params: SystemParameters,
    time_grid: TimeGrid | None = None,
    n: int | None = None,
    seed: int | None = None,
    strategy: str | None = None,
    method: str | None = None,
    view: ViewParameters | None = None,
) -> None:
    typer.echo(f"[run] command={command} ts_utc={_timestamp_utc()}")
    typer.echo(f"[lorenz] sigma={params.sigma} beta={params.beta:.6g} rho={params.rho}")
    if time_grid is not None:
        typer.echo(f"[grid] max_time={time_grid.max_time} samples={time_grid.samples}")
    if n is not None or seed is not None or strategy is not None:
        n_text = n if n is not None else "n/a"
        seed_text = seed if seed is not None else "n/a"
        typer.echo(f"[init] n={n_text} seed={seed_text} strategy={strategy or 'n/a'}")
    if method is not None:
        typer.echo(f"[solver] method={method}")
    if view is not None:
        typer.echo(f"[view] elev={view.elev} azim={view.azim} colormap={view.colormap}")


def print_means(means: Sequence[Sequence[float]], limit: int = 10) -> None:
    for idx, (mx, my, mz) in enumerate(means[:limit]):
        typer.echo(f"[mean] #{idx} x={mx:.4f} y={my:.4f} z={mz:.4f}")
    if len(means) > limit:
        typer.echo(f"[mean] ... {len(means) - limit} more")


def print_io_write(path: Path) -> None:
    typer.echo(f"[io] Writing output: {_abs_path(path)}")


def print_error(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED)


def print_done(summary: str) -> None:
    typer.echo(f"[done] {summary}")
