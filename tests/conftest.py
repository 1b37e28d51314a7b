import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pytest  # noqa: E402

from lorenzlab.core.model import SystemParameters, TimeGrid  # noqa: E402
from lorenzlab.orchestrator.pipeline import simulate  # noqa: E402


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")


@pytest.fixture
def small_set():
    params = SystemParameters()
    grid = TimeGrid(max_time=0.5, samples=50)
    initial_conditions = [(1.0, 1.0, 1.0), (-5.0, 3.0, 20.0), (8.0, -2.0, 12.0)]
    return simulate(params, initial_conditions, grid)
