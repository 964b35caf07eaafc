"""
    math_functions.py

    Summary:
        Contains common math functions: angle wrapping, the yaw rotation
        matrix used to map body-fixed velocities to NED and the ship speed.
"""
import math

import numpy as np


def wrap_min_max(x: float | np.ndarray, x_min: float | np.ndarray, x_max: float | np.ndarray) -> float | np.ndarray:
    """Wraps input x to [x_min, x_max)

    Args:
        x (float or np.ndarray): Unwrapped value
        x_min (float or np.ndarray): Minimum value
        x_max (float or np.ndarray): Maximum value

    Returns:
        float or np.ndarray: Wrapped value
    """
    if isinstance(x, np.ndarray):
        return x_min + np.mod(x - x_min, x_max - x_min)
    else:
        return x_min + (x - x_min) % (x_max - x_min)


def wrap_angle_to_pmpi(angle: float | np.ndarray) -> float | np.ndarray:
    """Wraps input angle to [-pi, pi)

    Args:
        angle (float or np.ndarray): Angle in radians

    Returns:
        float or np.ndarray: Wrapped angle
    """
    return wrap_min_max(angle, -np.pi, np.pi)


def ssa(angle: float | np.ndarray) -> float | np.ndarray:
    """Smallest signed angle, maps angle to (-pi, pi].

    Used on heading errors, e.g. ssa(3 * pi / 2) = -pi / 2 and ssa(-pi) = pi.

    Args:
        angle (float or np.ndarray): Angle in radians

    Returns:
        float or np.ndarray: Wrapped angle
    """
    wrapped = -wrap_angle_to_pmpi(-angle)
    if isinstance(angle, np.ndarray):
        return np.where(wrapped <= -np.pi, wrapped + 2.0 * np.pi, wrapped)
    wrapped = float(wrapped)
    return wrapped + 2.0 * np.pi if wrapped <= -np.pi else wrapped


def Rmtrx(psi: float) -> np.ndarray:
    """
    R = Rmtrx(psi) computes the 3x3 rotation matrix of an angle psi about the z-axis,
    mapping nu = [u, v, r]^T to eta_dot = [x_dot, y_dot, psi_dot]^T
    """
    return np.array([[np.cos(psi), -np.sin(psi), 0], [np.sin(psi), np.cos(psi), 0], [0, 0, 1]])


def speed(nu: np.ndarray) -> float | np.ndarray:
    """Computes the speed U = sqrt(u^2 + v^2) from body-frame velocities.

    Args:
        nu (np.ndarray): Velocity nu = [u, v, r]^T, or an n_samples x 3 array of velocities.

    Returns:
        float or np.ndarray: Speed(s) in m/s, always >= 0.
    """
    if nu.ndim == 2:
        return np.sqrt(nu[:, 0] ** 2 + nu[:, 1] ** 2)
    return math.sqrt(nu[0] ** 2 + nu[1] ** 2)
