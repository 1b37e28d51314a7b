from __future__ import annotations

import numpy as np

from lorenzlab.core.constants import PERTURB_SCALE

from .base import register_strategy


def uniform_cube(rng: np.random.Generator, n: int, low: float, high: float) -> np.ndarray:
    """Each coordinate drawn uniformly from [low, high)."""
    return low + (high - low) * rng.random((n, 3))


def perturbed_point(rng: np.random.Generator, n: int, low: float, high: float) -> np.ndarray:
    """
    A tight Gaussian cloud around one point drawn from the cube.

    Nearby starts separate quickly on the attractor, which makes the
    sensitivity to initial conditions visible.
    """
    center = uniform_cube(rng, 1, low, high)[0]
    spread = PERTURB_SCALE * (high - low)
    return center + spread * rng.standard_normal((n, 3))


# Registry
register_strategy("uniform", uniform_cube, "uniform in the [low, high]^3 cube")
register_strategy("perturbed", perturbed_point, "Gaussian cloud around a random point")
