from __future__ import annotations

from typing import Iterable, List, Sequence

import numpy as np
from scipy.integrate import solve_ivp

from lorenzlab.core.constants import (
    DEFAULT_DENSITY,
    IC_HIGH,
    IC_LOW,
    IC_STRATEGY,
    SOLVER_ATOL,
    SOLVER_METHOD,
    SOLVER_METHODS,
    SOLVER_RTOL,
)
from lorenzlab.core.errors import NumericalError, ValidationError
from lorenzlab.core.model import (
    InitialCondition,
    SystemParameters,
    TimeGrid,
    Trajectory,
    TrajectorySet,
    as_initial_condition,
)
from lorenzlab.core.seed.base import get_strategy
from lorenzlab.core.seed import strategies  # noqa: F401 (registers strategies)
from lorenzlab.core.system.lorenz import LorenzSystem
from lorenzlab.utils.logging import get_logger

logger = get_logger(__name__)


def generate_initial_conditions(
    n: int,
    seed: int,
    strategy: str = IC_STRATEGY,
    low: float = IC_LOW,
    high: float = IC_HIGH,
) -> List[InitialCondition]:
    """Draw ``n`` initial conditions from a seeded generator."""
    if isinstance(n, bool) or int(n) != n or n <= 0:
        raise ValidationError(f"Number of trajectories must be a positive integer, got {n!r}")
    if seed is None:
        raise ValidationError("A seed is required to generate initial conditions.")
    if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)) or seed < 0:
        raise ValidationError(f"Seed must be a non-negative integer, got {seed!r}")
    if not float(low) < float(high):
        raise ValidationError(f"Initial-condition range must satisfy low < high, got [{low}, {high}]")
    sampler = get_strategy(strategy)
    rng = np.random.default_rng(seed)
    logger.debug("Generating %d initial conditions strategy=%s seed=%s range=[%s, %s]", n, strategy, seed, low, high)
    points = sampler.generate(rng, int(n), float(low), float(high))
    return [as_initial_condition(p) for p in points]


def integrate(
    system: LorenzSystem,
    initial_condition: Sequence[float],
    time_grid: TimeGrid,
    method: str = SOLVER_METHOD,
    rtol: float = SOLVER_RTOL,
    atol: float = SOLVER_ATOL,
    index: int | None = None,
) -> Trajectory:
    """Integrate a single initial condition over the time grid."""
    y0 = as_initial_condition(initial_condition)
    solution = solve_ivp(
        system.derivative,
        (0.0, time_grid.max_time),
        np.asarray(y0, dtype=np.float64),
        method=method,
        t_eval=time_grid.times,
        rtol=rtol,
        atol=atol,
    )
    if not solution.success:
        raise NumericalError(str(solution.message), y0, index=index)
    states = solution.y.T
    if states.shape[0] != len(time_grid):
        raise NumericalError(
            f"solver returned {states.shape[0]} samples, expected {len(time_grid)}", y0, index=index
        )
    if not np.all(np.isfinite(states)):
        raise NumericalError("solution contains non-finite values", y0, index=index)
    return Trajectory(initial_condition=y0, states=states)


def _validate_solver(method: str, rtol: float, atol: float) -> None:
    if method not in SOLVER_METHODS:
        raise ValidationError(f"Unknown solver method '{method}'. Available: {list(SOLVER_METHODS)}")
    if rtol <= 0 or atol <= 0:
        raise ValidationError(f"Solver tolerances must be > 0, got rtol={rtol} atol={atol}")


def simulate(
    params: SystemParameters,
    initial_conditions: Iterable[Sequence[float]],
    time_grid: TimeGrid,
    *,
    method: str = SOLVER_METHOD,
    rtol: float = SOLVER_RTOL,
    atol: float = SOLVER_ATOL,
) -> TrajectorySet:
    """
    Integrate the Lorenz system from every initial condition.

    Trajectories are independent of each other and returned in input order.
    Same inputs reproduce the same TrajectorySet.
    """
    conditions = [as_initial_condition(ic) for ic in initial_conditions]
    if not conditions:
        raise ValidationError("At least one initial condition is required.")
    _validate_solver(method, rtol, atol)

    system = LorenzSystem(params)
    logger.debug(
        "Simulating %s n=%d max_time=%s samples=%d method=%s",
        system,
        len(conditions),
        time_grid.max_time,
        time_grid.samples,
        method,
    )
    trajectories = []
    for idx, ic in enumerate(conditions):
        trajectories.append(
            integrate(system, ic, time_grid, method=method, rtol=rtol, atol=atol, index=idx)
        )
    logger.info("Integrated %d trajectories over t in [0, %s]", len(trajectories), time_grid.max_time)
    return TrajectorySet(params=params, time_grid=time_grid, trajectories=tuple(trajectories))


def solve_lorenz(
    n: int,
    max_time: float,
    params: SystemParameters,
    seed: int,
    *,
    density: float = DEFAULT_DENSITY,
    strategy: str = IC_STRATEGY,
    low: float = IC_LOW,
    high: float = IC_HIGH,
    method: str = SOLVER_METHOD,
) -> TrajectorySet:
    """Seeded initial conditions plus simulation, from one explicit parameter tuple."""
    time_grid = TimeGrid.from_density(max_time, density)
    initial_conditions = generate_initial_conditions(n, seed, strategy=strategy, low=low, high=high)
    return simulate(params, initial_conditions, time_grid, method=method)
