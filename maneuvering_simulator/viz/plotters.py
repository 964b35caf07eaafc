"""
    plotters.py

    Summary:
        Contains methods for plotting the simulated trajectory table.
        The simulation core never imports this module.
"""

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional, Tuple

import maneuvering_simulator.common.config_parsing as cp
import matplotlib
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd


@dataclass
class Config:
    """Configuration class for the result plots.

    Parameters:
        matplotlib_backend (Optional[str]): Backend to select before plotting, e.g. "TkAgg" or "Agg". Defaults to None (matplotlib default).
        show_plots (bool): Whether to show the figures.
        show_animation (bool): Whether to animate the north-east trajectory.
        ship_size (float): Scaling of the ship polygon in the animation.
        fig_size (Tuple[float, float]): Figure size in inches.
        linewidth (float): Line width of the plotted curves.
        fontsize (int): Font size of titles and labels.
    """

    matplotlib_backend: Optional[str] = None
    show_plots: bool = True
    show_animation: bool = False
    ship_size: float = 0.5
    fig_size: Tuple[float, float] = (10.0, 8.0)
    linewidth: float = 2.0
    fontsize: int = 14

    @classmethod
    def from_dict(cls, config_dict: dict):
        config = cp.convert_settings_dict_to_dataclass(cls, config_dict)
        config.fig_size = tuple(config.fig_size)
        return config

    def to_dict(self) -> dict:
        output = asdict(self)
        output["fig_size"] = list(self.fig_size)
        return output


def set_backend(backend: Optional[str]) -> None:
    """Selects the matplotlib backend, if specified."""
    if backend is not None:
        matplotlib.use(backend)


def plot_north_east(trajectory: pd.DataFrame, ax: Optional[plt.Axes] = None, color: str = "b", linewidth: float = 2.0) -> plt.Axes:
    """Plots the north-east trajectory with east on the horizontal axis and north on the vertical axis.

    Args:
        trajectory (pd.DataFrame): Trajectory table with columns t, x, y, psi, u, v, r.
        ax (Optional[plt.Axes]): Axes to plot in. Defaults to a new figure.
        color (str): Line color. Defaults to "b".
        linewidth (float): Line width. Defaults to 2.0.

    Returns:
        plt.Axes: The axes containing the plot.
    """
    if ax is None:
        _, ax = plt.subplots()
    ax.plot(trajectory["y"], trajectory["x"], color=color, linewidth=linewidth)
    ax.set_xlabel("East (m)")
    ax.set_ylabel("North (m)")
    ax.set_title("North-East plot (m)")
    ax.set_aspect("equal", adjustable="datalim")
    ax.grid(True)
    return ax


def plot_speed_and_heading(trajectory: pd.DataFrame, fig: Optional[plt.Figure] = None, linewidth: float = 2.0) -> plt.Figure:
    """Plots the ship speed U = sqrt(u^2 + v^2) in m/s and the heading psi in degrees versus time.

    Args:
        trajectory (pd.DataFrame): Trajectory table with columns t, x, y, psi, u, v, r.
        fig (Optional[plt.Figure]): Figure to plot in. Defaults to a new figure.
        linewidth (float): Line width. Defaults to 2.0.

    Returns:
        plt.Figure: Figure with two stacked subplots.
    """
    if fig is None:
        fig = plt.figure()
    t = trajectory["t"].to_numpy()
    U = np.sqrt(trajectory["u"].to_numpy() ** 2 + trajectory["v"].to_numpy() ** 2)
    psi = np.rad2deg(trajectory["psi"].to_numpy())

    ax_U = fig.add_subplot(211)
    ax_U.plot(t, U, linewidth=linewidth)
    ax_U.set_xlabel("Time (s)")
    ax_U.set_title("Ship speed (m/s)")
    ax_U.grid(True)

    ax_psi = fig.add_subplot(212)
    ax_psi.plot(t, psi, linewidth=linewidth)
    ax_psi.set_xlabel("Time (s)")
    ax_psi.set_title(r"Yaw angle $\psi$ (deg)")
    ax_psi.grid(True)

    fig.tight_layout()
    return fig


def plot_results(
    trajectory: pd.DataFrame, config: Optional[Config] = None, save_path: Optional[Path] = None
) -> Tuple[plt.Figure, plt.Figure]:
    """Plots the north-east trajectory and the speed/heading time series.

    Args:
        trajectory (pd.DataFrame): Trajectory table.
        config (Optional[Config]): Plot configuration. Defaults to Config().
        save_path (Optional[Path]): Folder where the figures are saved as png. Defaults to None (not saved).

    Returns:
        Tuple[plt.Figure, plt.Figure]: North-east figure and speed/heading figure.
    """
    if config is None:
        config = Config()
    set_backend(config.matplotlib_backend)
    plt.rcParams.update({"font.size": config.fontsize})

    fig_ne, ax_ne = plt.subplots(figsize=config.fig_size)
    plot_north_east(trajectory, ax=ax_ne, linewidth=config.linewidth)

    fig_states = plt.figure(figsize=config.fig_size)
    plot_speed_and_heading(trajectory, fig=fig_states, linewidth=config.linewidth)

    if save_path is not None:
        save_path = Path(save_path)
        save_path.mkdir(parents=True, exist_ok=True)
        fig_ne.savefig(save_path / "north_east.png", dpi=150)
        fig_states.savefig(save_path / "speed_and_heading.png", dpi=150)

    if config.show_plots:
        plt.show()

    return fig_ne, fig_states
