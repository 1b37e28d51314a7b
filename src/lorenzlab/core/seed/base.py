from __future__ import annotations

from typing import Callable, Dict, List

import numpy as np

from lorenzlab.core.errors import ValidationError

SamplerFunc = Callable[[np.random.Generator, int, float, float], np.ndarray]


class InitialConditionStrategy:
    """Callable initial-condition generator wrapper."""

    def __init__(self, name: str, func: SamplerFunc, description: str = ""):
        self.name = name
        self.func = func
        self.description = description

    def generate(self, rng: np.random.Generator, n: int, low: float, high: float) -> np.ndarray:
        points = np.asarray(self.func(rng, n, low, high), dtype=np.float64)
        if points.shape != (n, 3):
            raise ValidationError(
                f"Strategy '{self.name}' returned shape {points.shape}, expected {(n, 3)}"
            )
        return points


STRATEGY_REGISTRY: Dict[str, InitialConditionStrategy] = {}


def register_strategy(name: str, func: SamplerFunc, description: str = ""):
    STRATEGY_REGISTRY[name] = InitialConditionStrategy(name=name, func=func, description=description)


def get_strategy(name: str) -> InitialConditionStrategy:
    if name not in STRATEGY_REGISTRY:
        raise ValidationError(f"Unknown initial-condition strategy '{name}'. Available: {list_strategies()}")
    return STRATEGY_REGISTRY[name]


def list_strategies() -> List[str]:
    return sorted(STRATEGY_REGISTRY.keys())
