"""
    animation.py

    Summary:
        Contains functionality for animating the north-east trajectory of the ship.
        All animation state lives in a ShipAnimation object, which is reset explicitly
        before each new animation.
"""
from pathlib import Path
from typing import Optional

import matplotlib.animation as animation
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd


def create_ship_polygon(x: float, y: float, psi: float, length: float, width: float, scale: float = 1.0) -> np.ndarray:
    """Creates the ship outline in north-east coordinates, with a pointed bow.

    Args:
        x (float): North position (m)
        y (float): East position (m)
        psi (float): Heading (rad)
        length (float): Ship length (m)
        width (float): Ship width (m)
        scale (float): Scaling of the outline. Defaults to 1.0.

    Returns:
        np.ndarray: 2 x 5 array of [north; east] vertex coordinates.
    """
    l = scale * length / 2.0
    w = scale * width / 2.0
    vertices = np.array([[0.7 * l, l, 0.7 * l, -l, -l], [w, 0.0, -w, -w, w]])
    R = np.array([[np.cos(psi), -np.sin(psi)], [np.sin(psi), np.cos(psi)]])
    return R @ vertices + np.array([[x], [y]])


class ShipAnimation:
    """Animates the ship along the trajectory. Replaces any hidden persistent plotting state
    with explicit attributes, cleared by reset()."""

    def __init__(self, length: float = 100.0, width: float = 20.0, ship_size: float = 0.5, color: str = "b") -> None:
        self.length = length
        self.width = width
        self.ship_size = ship_size
        self.color = color
        self.reset()

    def reset(self) -> None:
        """Clears all animation state, closing any figure owned by a previous animation."""
        if getattr(self, "fig", None) is not None:
            plt.close(self.fig)
        self.fig: Optional[plt.Figure] = None
        self.ax: Optional[plt.Axes] = None
        self.hull = None
        self.track = None
        self.frame: int = 0
        self.trajectory: Optional[pd.DataFrame] = None

    def init(self, trajectory: pd.DataFrame) -> list:
        """Sets up the figure and artists for a new trajectory.

        Args:
            trajectory (pd.DataFrame): Trajectory table with columns t, x, y, psi, u, v, r.

        Returns:
            list: The animated artists.
        """
        self.reset()
        self.trajectory = trajectory
        self.fig, self.ax = plt.subplots(figsize=(10, 10))
        self.ax.set_xlabel("East (m)")
        self.ax.set_ylabel("North (m)")
        self.ax.set_title("North-East plot (m)")
        self.ax.grid(True)
        self.ax.set_aspect("equal", adjustable="datalim")

        margin = self.ship_size * self.length
        self.ax.set_xlim(trajectory["y"].min() - margin, trajectory["y"].max() + margin)
        self.ax.set_ylim(trajectory["x"].min() - margin, trajectory["x"].max() + margin)

        self.track = self.ax.plot([], [], self.color + "-")[0]
        first = trajectory.iloc[0]
        outline = create_ship_polygon(first["x"], first["y"], first["psi"], self.length, self.width, self.ship_size)
        self.hull = plt.Polygon(np.array([outline[1], outline[0]]).T, closed=True, color=self.color, alpha=0.6)
        self.ax.add_patch(self.hull)
        return [self.track, self.hull]

    def update(self, i: int) -> list:
        """Draws frame i, i.e. the track up to sample i and the ship outline at sample i."""
        self.frame = i
        sample = self.trajectory.iloc[i]
        self.track.set_data(self.trajectory["y"].iloc[: i + 1], self.trajectory["x"].iloc[: i + 1])
        outline = create_ship_polygon(sample["x"], sample["y"], sample["psi"], self.length, self.width, self.ship_size)
        self.hull.set_xy(np.array([outline[1], outline[0]]).T)
        return [self.track, self.hull]


def animate(
    trajectory: pd.DataFrame,
    ship_animation: Optional[ShipAnimation] = None,
    n_frames: int = 200,
    interval: int = 20,
    show_animation: bool = True,
    save_path: Optional[Path] = None,
) -> animation.FuncAnimation:
    """Animates the north-east trajectory.

    Args:
        trajectory (pd.DataFrame): Trajectory table.
        ship_animation (Optional[ShipAnimation]): Animation state object. Defaults to a new ShipAnimation.
        n_frames (int): Number of frames, the trajectory is subsampled evenly. Defaults to 200.
        interval (int): Delay between frames in ms. Defaults to 20.
        show_animation (bool): Whether to show the animation. Defaults to True.
        save_path (Optional[Path]): File where the animation is saved (e.g. .gif). Defaults to None.

    Returns:
        animation.FuncAnimation: The animation object.
    """
    if ship_animation is None:
        ship_animation = ShipAnimation()
    ship_animation.init(trajectory)

    frames = np.unique(np.linspace(0, len(trajectory) - 1, max(n_frames, 1)).astype(int))
    anim = animation.FuncAnimation(
        ship_animation.fig, func=ship_animation.update, frames=frames, repeat=False, interval=interval, blit=False
    )

    if save_path is not None:
        save_path = Path(save_path)
        save_path.parent.mkdir(parents=True, exist_ok=True)
        anim.save(str(save_path), writer="pillow")

    if show_animation:
        plt.show()

    return anim
