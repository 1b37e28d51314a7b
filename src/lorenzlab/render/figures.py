from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib import colormaps
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from lorenzlab.core.constants import COLORMAP, HIST_BINS, LINE_WIDTH
from lorenzlab.core.errors import ValidationError
from lorenzlab.core.model import TrajectorySet, ViewParameters
from lorenzlab.utils.logging import get_logger

logger = get_logger(__name__)

MeanPoint = Tuple[float, float, float]


@dataclass
class RenderedFigure:
    figure: Figure
    axes: Axes
    lines: list
    colors: np.ndarray


def trajectory_colors(n: int, colormap: str = COLORMAP) -> np.ndarray:
    """
    RGBA colors for ``n`` trajectories, sampled evenly along a colormap.

    The color of trajectory ``i`` depends only on ``i`` and ``n``.
    """
    if n <= 0:
        raise ValidationError(f"Number of colors must be > 0, got {n}")
    try:
        cmap = colormaps[colormap]
    except KeyError as exc:
        raise ValidationError(f"Unknown colormap '{colormap}'") from exc
    return cmap(np.linspace(0.0, 1.0, n))


def _require_trajectories(trajectories: TrajectorySet) -> None:
    if len(trajectories) == 0:
        raise ValidationError("TrajectorySet is empty.")


def render(trajectories: TrajectorySet, view: ViewParameters | None = None) -> RenderedFigure:
    """Draw every trajectory as a 3-D polyline in a fixed axis box."""
    _require_trajectories(trajectories)
    view = view or ViewParameters()
    colors = trajectory_colors(len(trajectories), view.colormap)

    fig = plt.figure()
    ax = fig.add_axes([0, 0, 1, 1], projection="3d")
    ax.axis("off")
    ax.set_xlim(view.xlim)
    ax.set_ylim(view.ylim)
    ax.set_zlim(view.zlim)

    lines = []
    for traj, color in zip(trajectories, colors):
        (line,) = ax.plot(traj.x, traj.y, traj.z, "-", color=color, linewidth=LINE_WIDTH)
        lines.append(line)

    ax.view_init(view.elev, view.azim)
    logger.debug("Rendered %d trajectories elev=%s azim=%s", len(lines), view.elev, view.azim)
    return RenderedFigure(figure=fig, axes=ax, lines=lines, colors=colors)


def summarize(trajectories: TrajectorySet) -> List[MeanPoint]:
    """Mean (x, y, z) of each trajectory over all samples, in input order."""
    _require_trajectories(trajectories)
    means = []
    for traj in trajectories:
        mx, my, mz = traj.states.mean(axis=0)
        means.append((float(mx), float(my), float(mz)))
    return means


def render_mean_histograms(means: Sequence[MeanPoint], bins: int = HIST_BINS) -> Figure:
    """Side-by-side histograms of the per-trajectory x and y means."""
    if len(means) == 0:
        raise ValidationError("No trajectory means to plot.")
    if bins <= 0:
        raise ValidationError(f"bins must be > 0, got {bins}")
    xyz = np.asarray(means, dtype=np.float64)

    fig, (ax_x, ax_y) = plt.subplots(1, 2, figsize=(8, 3))
    ax_x.hist(xyz[:, 0], bins=bins)
    ax_x.set_title("Average $x(t)$")
    ax_y.hist(xyz[:, 1], bins=bins)
    ax_y.set_title("Average $y(t)$")
    fig.tight_layout()
    return fig


def save_figure(fig: Figure, path: Path, dpi: int = 120) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=dpi)
    plt.close(fig)
    logger.info("Saved figure to %s", path)
    return path
