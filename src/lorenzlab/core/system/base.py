from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np


class DynamicalSystem(ABC):
    """Base class for autonomous three-variable ODE systems."""

    name: str = "system"

    @abstractmethod
    def derivative(self, t: float, state: np.ndarray) -> np.ndarray:
        """Return d(state)/dt in the ``(t, y)`` signature used by solve_ivp."""
        ...

    def euler_step(self, state, dt: float) -> np.ndarray:
        """Advance one explicit Euler step and return the new state."""
        state = np.asarray(state, dtype=np.float64)
        return state + self.derivative(0.0, state) * float(dt)
