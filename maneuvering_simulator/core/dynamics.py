"""
    dynamics.py

    Summary:
        Contains the equation of motion solver for the linear maneuvering model

        M * nu_dot = tau - N * nu

        The system is solved through an LU factorization of M, never through an explicit inverse.
"""

import warnings

import numpy as np
import scipy.linalg as la
from maneuvering_simulator.common.exceptions import SingularModelError


def generalized_force(tau: np.ndarray, Dmtrx: np.ndarray, nu: np.ndarray) -> np.ndarray:
    """Computes the net generalized force tau - N * nu acting on the ship.

    Args:
        tau (np.ndarray): Control forces tau = [X, Y, N]^T
        Dmtrx (np.ndarray): Damping matrix
        nu (np.ndarray): Velocity nu = [u, v, r]^T

    Returns:
        np.ndarray: Net generalized force.
    """
    return tau - Dmtrx @ nu


def solve_acceleration(Mmtrx: np.ndarray, Dmtrx: np.ndarray, nu: np.ndarray, tau: np.ndarray) -> np.ndarray:
    """Solves M * nu_dot = tau - N * nu for the acceleration nu_dot.

    Precondition: M is invertible, which holds for any physical hull.

    Args:
        Mmtrx (np.ndarray): Mass matrix (M_RB + M_A)
        Dmtrx (np.ndarray): Damping matrix
        nu (np.ndarray): Velocity nu = [u, v, r]^T
        tau (np.ndarray): Control forces tau = [X, Y, N]^T

    Raises:
        SingularModelError: If M is singular.

    Returns:
        np.ndarray: Acceleration nu_dot.
    """
    rhs = generalized_force(tau, Dmtrx, nu)
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", la.LinAlgWarning)
            lu, piv = la.lu_factor(Mmtrx, check_finite=True)
    except ValueError as e:
        raise SingularModelError(f"Mass matrix could not be factorized: {e}") from e

    if np.any(np.diag(lu) == 0.0):
        raise SingularModelError(f"Mass matrix is singular:\n{Mmtrx}")

    return la.lu_solve((lu, piv), rhs, check_finite=False)
