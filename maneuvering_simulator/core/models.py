"""
    models.py

    Summary:
        Contains the hull parameter class and the linear maneuvering model of
        Clarke et al. (1983), which gives the speed dependent mass and damping
        matrices of a displacement ship from its main dimensions.
        Every model class must adhere to the interface IModel.

    Reference:
        D. Clarke, P. Gedling and G. Hine (1983). The application of manoeuvring
        criteria in hull design using linear theory. Transactions of the Royal
        Institution of Naval Architects, Vol. 125, pp. 45-68.
"""
import math
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Optional, Tuple

import maneuvering_simulator.common.config_parsing as cp
import maneuvering_simulator.common.math_functions as mf
import numpy as np
from maneuvering_simulator.common.exceptions import InvalidConfigurationError


@dataclass(frozen=True)
class HullParams:
    """Main dimensions of the hull, fixed for the entire run.

    Parameters:
        length (float): Length L (m).
        beam (float): Beam B (m).
        draft (float): Draft T (m).
        block_coefficient (float): Cb = V / (L * B * T), in (0, 1].
        radius_of_gyration (float): Yaw radius of gyration R66 (m). Smaller vessels R66 ~ 0.25L, tankers R66 ~ 0.27L.
        xg (float): x-coordinate of the CG relative to the CO (m).
        rho (float): Density of water (kg/m^3).
        T_surge (Optional[float]): Time constant in surge (s). Defaults to the ship length when not set.
    """

    length: float = 100.0
    beam: float = 20.0
    draft: float = 10.0
    block_coefficient: float = 0.8
    radius_of_gyration: float = 27.0
    xg: float = -3.0
    rho: float = 1025.0
    T_surge: Optional[float] = None

    def validate(self) -> None:
        """Checks that the hull parameters are physical.

        Raises:
            InvalidConfigurationError: On non-physical values.
        """
        for name in ["length", "beam", "draft", "block_coefficient", "radius_of_gyration", "xg", "rho"]:
            cp.check_number(name, getattr(self, name))
        if self.T_surge is not None:
            cp.check_number("T_surge", self.T_surge)

        for name in ["length", "beam", "draft", "radius_of_gyration", "rho"]:
            value = getattr(self, name)
            if not np.isfinite(value) or value <= 0.0:
                raise InvalidConfigurationError(f"Hull parameter '{name}' must be strictly positive, got {value}.")

        if not np.isfinite(self.block_coefficient) or not 0.0 < self.block_coefficient <= 1.0:
            raise InvalidConfigurationError(f"Block coefficient must be in (0, 1], got {self.block_coefficient}.")

        if not np.isfinite(self.xg):
            raise InvalidConfigurationError(f"Hull parameter 'xg' must be finite, got {self.xg}.")

        if self.T_surge is not None and (not np.isfinite(self.T_surge) or self.T_surge <= 0.0):
            raise InvalidConfigurationError(f"Surge time constant must be strictly positive, got {self.T_surge}.")

    @property
    def displacement(self) -> float:
        "Displaced volume V = Cb * L * B * T (m^3)."
        return self.block_coefficient * self.length * self.beam * self.draft

    @property
    def mass(self) -> float:
        return self.rho * self.displacement

    @classmethod
    def from_dict(cls, params_dict: dict):
        return cp.convert_settings_dict_to_dataclass(cls, params_dict)

    def to_dict(self) -> dict:
        output_dict = asdict(self)
        if self.T_surge is None:
            del output_dict["T_surge"]
        return output_dict


def added_mass_surge(m: float, L: float, rho: float = 1025.0) -> Tuple[float, float]:
    """Approximates the added mass in surge by the formula of Söding (1982):

    A11 = 2.7 * rho * nabla^(5/3) / L^2

    Args:
        m (float): Ship mass (kg)
        L (float): Ship length (m)
        rho (float, optional): Density of water. Defaults to 1025.0.

    Returns:
        Tuple[float, float]: Added mass A11 (kg) and the ratio A11 / m.
    """
    nabla = m / rho
    A11 = 2.7 * rho * nabla ** (5.0 / 3.0) / L**2
    return A11, A11 / m


def clarke83(
    U: float,
    L: float,
    B: float,
    T: float,
    Cb: float,
    R66: float,
    xg: float,
    T_surge: Optional[float] = None,
    rho: float = 1025.0,
) -> Tuple[np.ndarray, np.ndarray]:
    """[M, N] = clarke83(U, L, B, T, Cb, R66, xg) computes the system matrices of the linear maneuvering model

    M * nu_dot + N * nu = tau

    where the sway-yaw hydrodynamic derivatives are based on the multiple linear regression
    formulas of Clarke et al. (1983), and the surge added mass and damping on a first order
    approximation with time constant T_surge.

    Args:
        U (float): Speed (m/s), U >= 0
        L (float): Length (m)
        B (float): Beam (m)
        T (float): Draft (m)
        Cb (float): Block coefficient
        R66 (float): Radius of gyration in yaw (m)
        xg (float): x-coordinate of the CG (m)
        T_surge (Optional[float]): Time constant in surge (s). Defaults to L.
        rho (float): Density of water. Defaults to 1025.0.

    Returns:
        Tuple[np.ndarray, np.ndarray]: 3 x 3 mass matrix M = M_RB + M_A and 3 x 3 damping matrix N.
    """
    if T_surge is None:
        T_surge = L

    V = Cb * L * B * T
    m = rho * V
    Iz = m * R66**2 + m * xg**2  # moment of inertia about the CO

    M_rb = np.array([[m, 0.0, 0.0], [0.0, m, m * xg], [0.0, m * xg, Iz]])

    # Surge
    Xudot = -added_mass_surge(m, L, rho)[0]
    Xu = -(m - Xudot) / T_surge

    # Nondimensional sway-yaw derivatives
    S = math.pi * (T / L) ** 2
    Yvdot = -S * (1.0 + 0.16 * Cb * B / T - 5.1 * (B / L) ** 2)
    Yrdot = -S * (0.67 * B / L - 0.0033 * (B / T) ** 2)
    Nvdot = -S * (1.1 * B / L - 0.041 * B / T)
    Nrdot = -S * (1.0 / 12.0 + 0.017 * Cb * B / T - 0.33 * B / L)
    Yv = -S * (1.0 + 0.4 * Cb * B / T)
    Yr = -S * (-1.0 / 2.0 + 2.2 * B / L - 0.08 * B / T)
    Nv = -S * (1.0 / 2.0 + 2.4 * T / L)
    Nr = -S * (1.0 / 4.0 + 0.039 * B / T - 0.56 * B / L)

    M_a_prime = np.array([[0.0, 0.0, 0.0], [0.0, -Yvdot, -Yrdot], [0.0, -Nvdot, -Nrdot]])
    N_prime = np.array([[0.0, 0.0, 0.0], [0.0, -Yv, -Yr], [0.0, -Nv, -Nr]])

    # Dimensional model (Fossen 2021, Appendix D), Tinv^2 * (T * A' * Tinv)
    Tmtrx = np.diag([1.0, 1.0, 1.0 / L])
    Tinv = np.diag([1.0, 1.0, L])
    M_a = (0.5 * rho * L**3) * (Tinv @ Tinv) @ (Tmtrx @ M_a_prime @ Tinv)
    N = (0.5 * rho * L**2 * U) * (Tinv @ Tinv) @ (Tmtrx @ N_prime @ Tinv)

    M_a[0, 0] = -Xudot
    N[0, 0] = -Xu

    M = M_rb + M_a
    return M, N


class IModel(ABC):
    @abstractmethod
    def matrices(self, nu: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Returns the mass and damping matrices (M, N) at the operating point given by the velocity nu = [u, v, r]^T."""


class Clarke83(IModel):
    """Implements the 3DOF linear maneuvering model

    eta_dot = R(psi) * nu
    M * nu_dot + N(U) * nu = tau

    with eta = [x, y, psi]^T, nu = [u, v, r]^T and U = sqrt(u^2 + v^2), where M and N are
    recomputed from the hull parameters at every call since N depends on the speed.

    NOTE: The model is linear and only valid for moderate speeds and rudder/drift angles.
    """

    def __init__(self, params: Optional[HullParams] = None) -> None:
        if params is not None:
            self._params: HullParams = params
        else:
            self._params = HullParams()
        self._params.validate()

    def matrices(self, nu: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Computes the model matrices at the current speed.

        Args:
            nu (np.ndarray): Velocity nu = [u, v, r]^T

        Returns:
            Tuple[np.ndarray, np.ndarray]: Mass matrix M and damping matrix N.
        """
        U = mf.speed(nu)
        p = self._params
        return clarke83(
            U, p.length, p.beam, p.draft, p.block_coefficient, p.radius_of_gyration, p.xg, T_surge=p.T_surge, rho=p.rho
        )

    @property
    def params(self) -> HullParams:
        "Returns the hull parameters of the considered model."
        return self._params
