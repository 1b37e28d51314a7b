from __future__ import annotations

import numpy as np

from lorenzlab.core.model import SystemParameters

from .base import DynamicalSystem


class LorenzSystem(DynamicalSystem):
    """The Lorenz vector field for fixed sigma, beta and rho."""

    name = "lorenz"

    def __init__(self, params: SystemParameters):
        self.params = params
        self.sigma = params.sigma
        self.rho = params.rho
        self.beta = params.beta

    def derivative(self, t: float, state: np.ndarray) -> np.ndarray:
        x, y, z = state
        dx = self.sigma * (y - x)
        dy = x * (self.rho - z) - y
        dz = x * y - self.beta * z
        return np.array([dx, dy, dz], dtype=np.float64)

    def __repr__(self) -> str:
        return f"LorenzSystem(sigma={self.sigma}, beta={self.beta}, rho={self.rho})"
