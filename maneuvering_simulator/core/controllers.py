"""
    controllers.py

    Summary:
        Contains the heading control strategy used for the ship. The controller
        applies a constant surge thrust and a PD yaw moment scaled by the yaw
        inertia of the current mass matrix. Every controller must adhere to the
        interface IController.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Optional, Tuple

import maneuvering_simulator.common.config_parsing as cp
import maneuvering_simulator.common.math_functions as mf
import numpy as np
from maneuvering_simulator.common.exceptions import InvalidConfigurationError


@dataclass
class PDHeadingParams:
    """Parameters for the PD heading controller.

    Parameters:
        w_n (float): Closed-loop natural frequency (rad/s), sets K_p = w_n^2 and K_d = 2 w_n.
        thrust (float): Constant surge force (N).
    """

    w_n: float = 0.1
    thrust: float = 1000000.0

    def validate(self) -> None:
        cp.check_number("w_n", self.w_n)
        cp.check_number("thrust", self.thrust)
        if not np.isfinite(self.w_n) or self.w_n <= 0.0:
            raise InvalidConfigurationError(f"Natural frequency w_n must be strictly positive, got {self.w_n}.")
        if not np.isfinite(self.thrust):
            raise InvalidConfigurationError(f"Surge thrust must be finite, got {self.thrust}.")

    @property
    def gains(self) -> Tuple[float, float]:
        return pd_gains(self.w_n)

    @classmethod
    def from_dict(cls, config_dict: dict):
        return cp.convert_settings_dict_to_dataclass(cls, config_dict)

    def to_dict(self) -> dict:
        return asdict(self)


def pd_gains(w_n: float) -> Tuple[float, float]:
    """Pole placement for the normalized second order yaw loop psi_ddot = K_p * e - K_d * r,
    giving critical damping at the natural frequency w_n.

    Args:
        w_n (float): Closed-loop natural frequency (rad/s).

    Returns:
        Tuple[float, float]: Gains K_p = w_n^2 and K_d = 2 * w_n.
    """
    return w_n**2, 2.0 * w_n


def heading_moment(psi_ref: float, psi: float, r: float, K_p: float, K_d: float, M33: float) -> float:
    """Computes the yaw moment tau_N = M33 * (K_p * ssa(psi_ref - psi) - K_d * r).

    Args:
        psi_ref (float): Desired heading (rad)
        psi (float): Current heading (rad)
        r (float): Current yaw rate (rad/s)
        K_p (float): Proportional gain
        K_d (float): Derivative gain
        M33 (float): Yaw entry of the mass matrix

    Returns:
        float: Yaw moment command (Nm).
    """
    psi_error = mf.ssa(psi_ref - psi)
    return float(M33 * (K_p * psi_error - K_d * r))


class IController(ABC):
    @abstractmethod
    def compute_inputs(self, psi_ref: float, eta: np.ndarray, nu: np.ndarray, Mmtrx: np.ndarray) -> np.ndarray:
        """Computes the generalized force tau = [X, Y, N]^T to apply to the ship."""


class PDHeading(IController):
    """Implements constant thrust in surge combined with a PD heading autopilot

    tau = [thrust, 0, M[2, 2] * (K_p * ssa(psi_d - psi) - K_d * r)]^T

    for the system

    eta_dot = R(psi) * nu
    M * nu_dot + N * nu = tau

    The controller is stateless, so the same instance can be reused across runs.
    """

    def __init__(self, params: Optional[PDHeadingParams] = None) -> None:
        if params is not None:
            self._params: PDHeadingParams = params
        else:
            self._params = PDHeadingParams()
        self._params.validate()

    def compute_inputs(self, psi_ref: float, eta: np.ndarray, nu: np.ndarray, Mmtrx: np.ndarray) -> np.ndarray:
        """Computes inputs based on the PD law.

        Args:
            psi_ref (float): Desired heading (rad)
            eta (np.ndarray): Pose eta = [x, y, psi]^T
            nu (np.ndarray): Velocity nu = [u, v, r]^T
            Mmtrx (np.ndarray): Current mass matrix

        Returns:
            np.ndarray: Inputs u = tau to apply to the system.
        """
        K_p, K_d = self._params.gains
        tau_N = heading_moment(psi_ref, eta[2], nu[2], K_p, K_d, Mmtrx[2, 2])
        return np.array([self._params.thrust, 0.0, tau_N])

    @property
    def params(self) -> PDHeadingParams:
        return self._params
