from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator, Sequence, Tuple

import numpy as np

from lorenzlab.core import constants
from lorenzlab.core.errors import ValidationError

InitialCondition = Tuple[float, float, float]


def _require_finite(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be finite, got {value}")
    return value


def as_initial_condition(value: Sequence[float]) -> InitialCondition:
    """Coerce a 3-sequence of numbers into an InitialCondition."""
    try:
        items = [float(v) for v in value]
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Initial condition must be three numbers, got {value!r}") from exc
    if len(items) != 3:
        raise ValidationError(f"Initial condition must have exactly 3 components, got {len(items)}")
    x0, y0, z0 = (_require_finite(name, v) for name, v in zip(("x0", "y0", "z0"), items))
    return x0, y0, z0


@dataclass(frozen=True)
class SystemParameters:
    """Lorenz coefficients, fixed for the duration of one run."""

    sigma: float = constants.LORENZ_SIGMA
    beta: float = constants.LORENZ_BETA
    rho: float = constants.LORENZ_RHO

    def __post_init__(self):
        for name in ("sigma", "beta", "rho"):
            object.__setattr__(self, name, _require_finite(name, getattr(self, name)))

    def as_dict(self) -> dict:
        return {"sigma": self.sigma, "beta": self.beta, "rho": self.rho}


@dataclass(frozen=True)
class TimeGrid:
    """Uniform sample times on [0, max_time] (both ends included)."""

    max_time: float
    samples: int

    def __post_init__(self):
        max_time = float(self.max_time)
        if not math.isfinite(max_time) or max_time <= 0:
            raise ValidationError(f"max_time must be > 0, got {self.max_time}")
        try:
            samples = int(self.samples)
        except (TypeError, ValueError, OverflowError) as exc:
            raise ValidationError(f"samples must be an integer, got {self.samples!r}") from exc
        if isinstance(self.samples, bool) or samples != self.samples:
            raise ValidationError(f"samples must be an integer, got {self.samples!r}")
        if samples <= 0:
            raise ValidationError(f"samples must be > 0, got {self.samples}")
        object.__setattr__(self, "max_time", max_time)
        object.__setattr__(self, "samples", samples)

    @classmethod
    def from_density(cls, max_time: float, density: float = constants.DEFAULT_DENSITY) -> "TimeGrid":
        """Grid with ``int(density * max_time)`` samples."""
        if not math.isfinite(density) or density <= 0:
            raise ValidationError(f"density must be > 0, got {density}")
        if not math.isfinite(max_time) or max_time <= 0:
            raise ValidationError(f"max_time must be > 0, got {max_time}")
        return cls(max_time=max_time, samples=int(density * max_time))

    @property
    def times(self) -> np.ndarray:
        return np.linspace(0.0, self.max_time, self.samples)

    def __len__(self) -> int:
        return self.samples


@dataclass(frozen=True)
class Trajectory:
    """States sampled on a TimeGrid, starting from one initial condition."""

    initial_condition: InitialCondition
    states: np.ndarray = field(repr=False)

    def __post_init__(self):
        states = np.array(self.states, dtype=np.float64)
        if states.ndim != 2 or states.shape[1] != 3:
            raise ValidationError(f"states must have shape (n, 3), got {states.shape}")
        states.setflags(write=False)
        object.__setattr__(self, "initial_condition", as_initial_condition(self.initial_condition))
        object.__setattr__(self, "states", states)

    def __len__(self) -> int:
        return self.states.shape[0]

    @property
    def x(self) -> np.ndarray:
        return self.states[:, 0]

    @property
    def y(self) -> np.ndarray:
        return self.states[:, 1]

    @property
    def z(self) -> np.ndarray:
        return self.states[:, 2]


@dataclass(frozen=True)
class TrajectorySet:
    """Trajectories sharing one set of parameters and one time grid."""

    params: SystemParameters
    time_grid: TimeGrid
    trajectories: Tuple[Trajectory, ...]

    def __post_init__(self):
        trajectories = tuple(self.trajectories)
        for idx, traj in enumerate(trajectories):
            if len(traj) != len(self.time_grid):
                raise ValidationError(
                    f"Trajectory {idx} has {len(traj)} states, time grid has {len(self.time_grid)}"
                )
        object.__setattr__(self, "trajectories", trajectories)

    def __len__(self) -> int:
        return len(self.trajectories)

    def __iter__(self) -> Iterator[Trajectory]:
        return iter(self.trajectories)

    def __getitem__(self, idx: int) -> Trajectory:
        return self.trajectories[idx]

    @property
    def initial_conditions(self) -> list[InitialCondition]:
        return [t.initial_condition for t in self.trajectories]

    def as_array(self) -> np.ndarray:
        """Stack states into an array of shape (N, samples, 3)."""
        if not self.trajectories:
            return np.empty((0, len(self.time_grid), 3))
        return np.stack([t.states for t in self.trajectories])


@dataclass(frozen=True)
class ViewParameters:
    """Camera orientation and fixed axis box for the 3-D plot."""

    elev: float = constants.VIEW_ELEV
    azim: float = constants.VIEW_AZIM
    xlim: Tuple[float, float] = constants.XLIM
    ylim: Tuple[float, float] = constants.YLIM
    zlim: Tuple[float, float] = constants.ZLIM
    colormap: str = constants.COLORMAP

    def __post_init__(self):
        object.__setattr__(self, "elev", _require_finite("elev", self.elev))
        object.__setattr__(self, "azim", _require_finite("azim", self.azim))
        for name in ("xlim", "ylim", "zlim"):
            lo, hi = getattr(self, name)
            if not float(lo) < float(hi):
                raise ValidationError(f"{name} must be increasing, got {(lo, hi)}")
            object.__setattr__(self, name, (float(lo), float(hi)))
