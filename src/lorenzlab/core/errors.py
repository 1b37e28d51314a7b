from __future__ import annotations

from typing import Optional, Sequence


class ValidationError(ValueError):
    """Raised when simulation or rendering inputs are out of range."""


class NumericalError(RuntimeError):
    """Raised when the ODE solver fails for one initial condition."""

    def __init__(
        self,
        message: str,
        initial_condition: Sequence[float],
        index: Optional[int] = None,
    ):
        self.message = message
        self.initial_condition = tuple(float(v) for v in initial_condition)
        self.index = index
        where = f" (trajectory {index})" if index is not None else ""
        super().__init__(
            f"Integration failed for initial condition {self.initial_condition}{where}: {message}"
        )
