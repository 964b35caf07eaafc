"""
    integrators.py

    Summary:
        Contains ODE integrator functionality used in the simulator.
"""

from typing import Tuple

import maneuvering_simulator.common.math_functions as mf
import numpy as np


def mixed_euler_integration_step(
    eta: np.ndarray, nu: np.ndarray, nu_dot: np.ndarray, dt: float
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Summary:
        Performs a single step of the mixed forward/backward Euler scheme (Fossen 2021, Eq. B27-B28):

        nu_k+1  = nu_k + dt * nu_dot_k                     (forward Euler)
        eta_k+1 = eta_k + dt * R(psi_k) * nu_k+1            (backward Euler)

    Args:
        eta (np.ndarray): Pose eta_k = [x, y, psi]^T.
        nu (np.ndarray): Velocity nu_k = [u, v, r]^T.
        nu_dot (np.ndarray): Acceleration at step k.
        dt (float): Time step.

    Returns:
        Tuple[np.ndarray, np.ndarray]: New pose eta_k+1 and velocity nu_k+1. The inputs are left untouched.
    """
    nu_next = nu + dt * nu_dot
    eta_next = eta + dt * mf.Rmtrx(eta[2]) @ nu_next
    return eta_next, nu_next
