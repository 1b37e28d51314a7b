from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import numpy as np
import typer

from lorenzlab.core import constants
from lorenzlab.core.errors import NumericalError, ValidationError
from lorenzlab.core.model import SystemParameters, TimeGrid, ViewParameters
from lorenzlab.core.seed.base import STRATEGY_REGISTRY, list_strategies
from lorenzlab.core.system.lorenz import LorenzSystem
from lorenzlab.io.config import ConfigError, RunConfig, SimulationConfig, parse_run_config, parse_sweep_config
from lorenzlab.io.formats import summary_payload, write_json
from lorenzlab.orchestrator.pipeline import generate_initial_conditions, simulate
from lorenzlab.render.figures import render, render_mean_histograms, save_figure, summarize
from lorenzlab.sweep.runner import run_sweep, write_csv, write_json_output
from lorenzlab.utils.logging import configure_cli_logging

from lorenzlab.cli import ui

app = typer.Typer(help="Integrate and plot the Lorenz system")


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress (INFO)"),
    debug: bool = typer.Option(False, "--debug", help="Log solver and render details (DEBUG)"),
):
    configure_cli_logging(verbose, debug, command=ctx.invoked_subcommand)


def _pick(value, fallback):
    return fallback if value is None else value


def _resolve_run(
    config: Optional[Path],
    n: Optional[int],
    max_time: Optional[float],
    density: Optional[float],
    seed: Optional[int],
    strategy: Optional[str],
    method: Optional[str],
    sigma: Optional[float],
    beta: Optional[float],
    rho: Optional[float],
    elev: Optional[float],
    azim: Optional[float],
) -> RunConfig:
    """Merge command-line options over a YAML run config (or the defaults)."""
    if config is not None:
        base = parse_run_config(config)
    else:
        base = RunConfig(simulation=SimulationConfig(), params=SystemParameters(), view=ViewParameters())
    sim = base.simulation
    simulation = SimulationConfig(
        n=_pick(n, sim.n),
        max_time=_pick(max_time, sim.max_time),
        density=_pick(density, sim.density),
        seed=_pick(seed, sim.seed),
        strategy=_pick(strategy, sim.strategy),
        low=sim.low,
        high=sim.high,
        method=_pick(method, sim.method),
    )
    params = SystemParameters(
        sigma=_pick(sigma, base.params.sigma),
        beta=_pick(beta, base.params.beta),
        rho=_pick(rho, base.params.rho),
    )
    view = ViewParameters(
        elev=_pick(elev, base.view.elev),
        azim=_pick(azim, base.view.azim),
        colormap=base.view.colormap,
    )
    return RunConfig(simulation=simulation, params=params, view=view)


def _grid(cfg: RunConfig) -> TimeGrid:
    return TimeGrid.from_density(cfg.simulation.max_time, cfg.simulation.density)


def _run(cfg: RunConfig, time_grid: TimeGrid):
    sim = cfg.simulation
    initial_conditions = generate_initial_conditions(sim.n, sim.seed, strategy=sim.strategy, low=sim.low, high=sim.high)
    trajectories = simulate(cfg.params, initial_conditions, time_grid, method=sim.method)
    return trajectories, summarize(trajectories)


@app.command("simulate")
def simulate_cmd(
    out: Path = typer.Option(Path("lorenz.png"), "--out", "-o", help="3-D trajectory figure path"),
    hist_out: Optional[Path] = typer.Option(None, "--hist-out", help="Histogram figure of trajectory means"),
    summary_out: Optional[Path] = typer.Option(None, "--summary-out", help="JSON summary path"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", exists=True, readable=True, help="YAML run config"),
    n: Optional[int] = typer.Option(None, "--n", "-n", help="Number of trajectories"),
    max_time: Optional[float] = typer.Option(None, "--max-time", "-t", help="Integration horizon"),
    density: Optional[float] = typer.Option(None, "--density", help="Samples per unit of time"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Seed for initial conditions"),
    strategy: Optional[str] = typer.Option(None, "--strategy", help="Initial-condition strategy"),
    method: Optional[str] = typer.Option(None, "--method", help="solve_ivp method"),
    sigma: Optional[float] = typer.Option(None, "--sigma", help="Lorenz sigma"),
    beta: Optional[float] = typer.Option(None, "--beta", help="Lorenz beta"),
    rho: Optional[float] = typer.Option(None, "--rho", help="Lorenz rho"),
    elev: Optional[float] = typer.Option(None, "--elev", help="Camera elevation (degrees)"),
    azim: Optional[float] = typer.Option(None, "--azim", help="Camera azimuth (degrees)"),
):
    """Integrate N trajectories and save the 3-D figure."""
    try:
        cfg = _resolve_run(config, n, max_time, density, seed, strategy, method, sigma, beta, rho, elev, azim)
        time_grid = _grid(cfg)
        ui.print_run_header(
            "simulate",
            params=cfg.params,
            time_grid=time_grid,
            n=cfg.simulation.n,
            seed=cfg.simulation.seed,
            strategy=cfg.simulation.strategy,
            method=cfg.simulation.method,
            view=cfg.view,
        )
        trajectories, means = _run(cfg, time_grid)
        rendered = render(trajectories, cfg.view)
    except (ConfigError, ValidationError, NumericalError) as exc:
        ui.print_error(str(exc))
        raise typer.Exit(code=1) from exc

    ui.print_io_write(out)
    save_figure(rendered.figure, out)
    if hist_out:
        ui.print_io_write(hist_out)
        save_figure(render_mean_histograms(means), hist_out)
    if summary_out:
        ui.print_io_write(summary_out)
        write_json(
            summary_out,
            summary_payload(trajectories, means, seed=cfg.simulation.seed, strategy=cfg.simulation.strategy),
        )
    ui.print_means(means)
    ui.print_done(f"{len(trajectories)} trajectories → {out}")


@app.command()
def summary(
    n: int = typer.Option(constants.DEFAULT_N_TRAJECTORIES, "--n", "-n", help="Number of trajectories"),
    max_time: float = typer.Option(constants.DEFAULT_MAX_TIME, "--max-time", "-t", help="Integration horizon"),
    density: float = typer.Option(constants.DEFAULT_DENSITY, "--density", help="Samples per unit of time"),
    seed: int = typer.Option(constants.DEFAULT_SEED, "--seed", "-s", help="Seed for initial conditions"),
    strategy: str = typer.Option(constants.IC_STRATEGY, "--strategy", help="Initial-condition strategy"),
    sigma: float = typer.Option(constants.LORENZ_SIGMA, "--sigma", help="Lorenz sigma"),
    beta: float = typer.Option(constants.LORENZ_BETA, "--beta", help="Lorenz beta"),
    rho: float = typer.Option(constants.LORENZ_RHO, "--rho", help="Lorenz rho"),
):
    """Print per-trajectory mean positions as JSON."""
    try:
        cfg = _resolve_run(None, n, max_time, density, seed, strategy, None, sigma, beta, rho, None, None)
        trajectories, means = _run(cfg, _grid(cfg))
    except (ValidationError, NumericalError) as exc:
        ui.print_error(str(exc))
        raise typer.Exit(code=1) from exc
    typer.echo(json.dumps(summary_payload(trajectories, means, seed=seed, strategy=strategy)))


@app.command()
def sweep(
    config: Path = typer.Option(..., "--config", "-c", exists=True, readable=True, help="YAML sweep config"),
    out: Path = typer.Option(..., "--out", "-o", help="CSV output path"),
    out_json: Optional[Path] = typer.Option(None, "--out-json", help="Optional JSON output path"),
    jobs: int = typer.Option(1, "--jobs", "-j", help="Parallel jobs (variants), default 1"),
    json_summary: bool = typer.Option(False, "--json", help="Print summary JSON to stdout"),
):
    """
    Run the simulator over a parameter matrix and export CSV/JSON.
    """
    try:
        cfg = parse_sweep_config(config)
    except ConfigError as exc:
        ui.print_error(f"Config error: {exc}")
        raise typer.Exit(code=1)

    try:
        records = run_sweep(cfg, jobs=jobs)
    except (ValidationError, NumericalError) as exc:
        ui.print_error(f"Sweep failed: {exc}")
        raise typer.Exit(code=1)

    write_csv(out, records)
    if out_json:
        write_json_output(out_json, records)

    typer.secho(f"Sweep complete. CSV → {out}", fg=typer.colors.GREEN)
    if out_json:
        typer.secho(f"JSON → {out_json}", fg=typer.colors.GREEN)

    if json_summary:
        summary_data = {
            "variants": len(records),
            "csv": str(out),
            "json": str(out_json) if out_json else None,
        }
        typer.echo(json.dumps(summary_data))


@app.command()
def strategies():
    """List registered initial-condition strategies."""
    for name in list_strategies():
        typer.echo(f"{name}: {STRATEGY_REGISTRY[name].description}")


@app.command()
def selftest():
    """
    Integrate (1, 1, 1) for 0.01 time units and compare with one Euler step.
    """
    params = SystemParameters()
    ic = (1.0, 1.0, 1.0)
    grid = TimeGrid(max_time=0.01, samples=2)
    trajectories = simulate(params, [ic], grid)
    states = trajectories[0].states
    euler = LorenzSystem(params).euler_step(ic, grid.max_time)

    if np.array_equal(states[0], ic) and np.allclose(states[1], euler, atol=0.05):
        typer.secho("Selftest passed (short-time integration).", fg=typer.colors.GREEN)
    else:
        typer.secho(f"Selftest FAILED: got {states[1]}, expected ≈ {euler}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
