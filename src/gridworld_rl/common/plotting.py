from __future__ import annotations
from pathlib import Path
from typing import Sequence
import matplotlib

matplotlib.use("Agg")  # files only, never a window

import matplotlib.pyplot as plt
import numpy as np

from ..tabular import GridConfig

ARROWS = {
    0: "↑",
    1: "↓",
    2: "←",
    3: "→",
}


def moving_average(x: np.ndarray, window: int) -> np.ndarray:
    """
    Compute a simple moving average for smoothing curves.

    :param x: 1D array to smooth.
        :type x: np.ndarray
    :param window: Window size (>= 1). If 1, returns x unchanged.
        :type window: int

    :return: Smoothed array (same length as x).
        :rtype: np.ndarray
    """
    x = np.asarray(x, dtype=np.float64)
    if window <= 1 or x.size == 0:
        return x

    pad = window - 1
    x_pad = np.pad(x, (pad, 0), mode="edge")
    kernel = np.ones(window, dtype=np.float64) / window
    return np.convolve(x_pad, kernel, mode="valid")


def save_lines(
    *,
    ys: Sequence[np.ndarray],
    labels: Sequence[str],
    title: str,
    xlabel: str,
    ylabel: str,
    out_path: str | Path,
    smooth_window: int = 1,
    x: np.ndarray | None = None,
) -> Path:
    """
    Save a line plot with multiple curves (e.g. reward or step trends per strategy).

    :param ys: A sequence of 1D arrays (each array is one curve).
        :type ys: Sequence[np.ndarray]
    :param labels: Labels for the legend (same length as ys).
        :type labels: Sequence[str]
    :param title: Plot title.
        :type title: str
    :param xlabel: x-axis label.
        :type xlabel: str
    :param ylabel: y-axis label.
        :type ylabel: str
    :param out_path: Output path for the saved image.
        :type out_path: str | Path
    :param smooth_window: Moving average window for smoothing (1 means no smoothing).
        :type smooth_window: int
    :param x: Optional shared x values (e.g. episode numbers). Defaults to 0..len-1.
        :type x: np.ndarray | None

    :return: Path of the saved image.
        :rtype: Path
    """
    if len(ys) != len(labels):
        raise ValueError("ys and labels must have the same length")

    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots()
    for y, label in zip(ys, labels):
        y_plot = moving_average(np.asarray(y, dtype=np.float64), smooth_window)
        if x is None:
            ax.plot(y_plot, label=label)
        else:
            ax.plot(np.asarray(x)[-len(y_plot):], y_plot, label=label)

    ax.set_title(title)
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    ax.grid(True)
    ax.legend()
    fig.tight_layout()
    fig.savefig(out_path)
    plt.close(fig)
    return out_path


def save_policy_grid(
    *,
    policy: np.ndarray,
    grid: GridConfig,
    title: str,
    out_path: str | Path,
) -> Path:
    """
    Draw a greedy policy as arrows on the grid.

    Cells are labelled:
        - 'S' start (with its arrow)
        - 'G' goal
        - 'H' hazard
        - arrows elsewhere

    :param policy: Policy array of shape (n_states,), one action index per state.
        :type policy: np.ndarray
    :param grid: Grid layout the policy was learned on.
        :type grid: GridConfig
    :param title: Plot title.
        :type title: str
    :param out_path: Output path for the saved image.
        :type out_path: str | Path

    :return: Path of the saved image.
        :rtype: Path
    """
    policy = np.asarray(policy)
    if policy.shape != (grid.n_states,):
        raise ValueError(f"policy must have shape ({grid.n_states},), got {policy.shape}")

    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    # 0 = free, 1 = hazard, 2 = goal (only used for colouring)
    cell_kind = np.zeros(shape=(grid.size, grid.size), dtype=np.int64)
    for h in grid.hazards:
        cell_kind[divmod(h, grid.size)] = 1
    cell_kind[divmod(grid.goal_state, grid.size)] = 2

    fig, ax = plt.subplots(figsize=(0.6 * grid.size + 1.5, 0.6 * grid.size + 1.5))
    ax.imshow(cell_kind, cmap="Pastel1", vmin=0, vmax=8)

    for s in range(grid.n_states):
        r, c = divmod(s, grid.size)
        if s == grid.goal_state:
            text = "G"
        elif s in grid.hazards:
            text = "H"
        elif s == grid.start_state:
            text = "S" + ARROWS[int(policy[s])]
        else:
            text = ARROWS[int(policy[s])]
        ax.text(c, r, text, ha="center", va="center", fontsize=12)

    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_title(title)
    fig.tight_layout()
    fig.savefig(out_path)
    plt.close(fig)
    return out_path
