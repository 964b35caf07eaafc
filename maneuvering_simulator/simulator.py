"""
    simulator.py

    Summary:
        Contains class definitions for the simulator, which runs the closed-loop
        heading control simulation of a ship described by the Clarke (1983) linear
        maneuvering model and returns the trajectory table.

        Each step k evaluates, in fixed order:
            1. Model matrices M, N at the current speed U = sqrt(u^2 + v^2).
            2. Control forces tau from the PD heading controller.
            3. Acceleration nu_dot from M * nu_dot = tau - N * nu.
            4. Record (t_k, eta_k, nu_k) in the trajectory table.
            5. Mixed forward/backward Euler step to (eta_k+1, nu_k+1).

        The recorded sample at index k is the state before the step k update, so the
        acceleration computed at the last step is applied but its result is not recorded.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, NamedTuple, Optional

import maneuvering_simulator.common.config_parsing as cp
import maneuvering_simulator.common.file_utils as fu
import maneuvering_simulator.common.paths as dp
import maneuvering_simulator.core.controllers as controllers
import maneuvering_simulator.core.models as models
import numpy as np
import pandas as pd
from maneuvering_simulator.common.exceptions import InvalidConfigurationError, NumericDivergenceError
from maneuvering_simulator.core.dynamics import solve_acceleration
from maneuvering_simulator.core.integrators import mixed_euler_integration_step

logger = logging.getLogger(__name__)


class TrajectorySample(NamedTuple):
    """One row of the trajectory table."""

    t: float
    x: float
    y: float
    psi: float
    u: float
    v: float
    r: float


def _as_state_vector(name: str, value) -> np.ndarray:
    try:
        return np.array(value, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidConfigurationError(f"Initial state '{name}' must be a list of numbers, got {value!r}.") from e


@dataclass
class InitialState:
    """Initial pose eta = [x, y, psi]^T and velocity nu = [u, v, r]^T. Angles and the yaw rate are in degrees (deg/s) in the config file."""

    eta: np.ndarray = field(default_factory=lambda: np.zeros(3))
    nu: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def validate(self) -> None:
        for name in ["eta", "nu"]:
            value = _as_state_vector(name, getattr(self, name))
            if value.shape != (3,):
                raise InvalidConfigurationError(f"Initial state '{name}' should have dimension 3, got shape {value.shape}.")
            if not np.all(np.isfinite(value)):
                raise InvalidConfigurationError(f"Initial state '{name}' must be finite, got {value}.")

    @classmethod
    def from_dict(cls, config_dict: Optional[dict]):
        if config_dict is None:
            return InitialState()
        cp.check_keys(cls, config_dict)
        state = InitialState()
        if "eta" in config_dict:
            state.eta = _as_state_vector("eta", config_dict["eta"])
            if state.eta.shape == (3,):
                state.eta[2] = np.deg2rad(state.eta[2])
        if "nu" in config_dict:
            state.nu = _as_state_vector("nu", config_dict["nu"])
            if state.nu.shape == (3,):
                state.nu[2] = np.deg2rad(state.nu[2])
        return state

    def to_dict(self) -> dict:
        eta = np.asarray(self.eta, dtype=float).copy()
        nu = np.asarray(self.nu, dtype=float).copy()
        eta[2] = np.rad2deg(eta[2])
        nu[2] = np.rad2deg(nu[2])
        return {"eta": eta.tolist(), "nu": nu.tolist()}


@dataclass
class Config:
    """Simulation related configuration/parameter class.

    Parameters:
        dt (float): Sampling time h (s).
        n_steps (int): Number of steps N, the trajectory holds N + 1 samples.
        psi_ref (float): Heading setpoint (rad), given in degrees in the config file.
        verbose (bool): Log run progress at INFO level instead of DEBUG.
        check_divergence (bool): Abort with NumericDivergenceError when the state becomes non-finite.
        controller (PDHeadingParams): Heading controller parameters.
        hull (HullParams): Hull parameters of the ship.
        initial_state (InitialState): Initial pose and velocity.
    """

    dt: float = 0.05
    n_steps: int = 10000
    psi_ref: float = float(np.deg2rad(10.0))
    verbose: bool = False
    check_divergence: bool = True
    controller: controllers.PDHeadingParams = field(default_factory=controllers.PDHeadingParams)
    hull: models.HullParams = field(default_factory=models.HullParams)
    initial_state: InitialState = field(default_factory=InitialState)

    def validate(self) -> None:
        """Checks the full configuration before a run.

        Raises:
            InvalidConfigurationError: On any invalid setting.
        """
        if isinstance(self.dt, bool) or not isinstance(self.dt, (int, float)) or not np.isfinite(self.dt) or self.dt <= 0.0:
            raise InvalidConfigurationError(f"Sampling time dt must be a strictly positive number, got {self.dt}.")

        if isinstance(self.n_steps, bool) or not isinstance(self.n_steps, (int, np.integer)) or self.n_steps < 1:
            raise InvalidConfigurationError(f"Number of steps must be an integer >= 1, got {self.n_steps}.")

        if not isinstance(self.verbose, bool) or not isinstance(self.check_divergence, bool):
            raise InvalidConfigurationError(
                f"Settings verbose and check_divergence must be booleans, got {self.verbose!r} and {self.check_divergence!r}."
            )

        if not np.isfinite(cp.check_number("psi_ref", self.psi_ref)):
            raise InvalidConfigurationError(f"Heading setpoint must be finite, got {self.psi_ref}.")

        self.controller.validate()
        self.hull.validate()
        self.initial_state.validate()

    @classmethod
    def from_dict(cls, config_dict: dict):
        cp.check_keys(cls, config_dict)
        config = Config()
        for key in ["dt", "n_steps", "verbose", "check_divergence"]:
            if key in config_dict:
                setattr(config, key, config_dict[key])

        if "psi_ref" in config_dict:
            config.psi_ref = float(np.deg2rad(cp.check_number("psi_ref", config_dict["psi_ref"])))

        if "controller" in config_dict:
            config.controller = controllers.PDHeadingParams.from_dict(config_dict["controller"])

        if "hull" in config_dict:
            config.hull = models.HullParams.from_dict(config_dict["hull"])

        if "initial_state" in config_dict:
            config.initial_state = InitialState.from_dict(config_dict["initial_state"])

        return config

    @classmethod
    def from_file(cls, config_file: Path, **kwargs):
        return cp.extract(cls, config_file, **kwargs)

    def to_dict(self) -> dict:
        return {
            "dt": self.dt,
            "n_steps": self.n_steps,
            "psi_ref": float(np.rad2deg(self.psi_ref)),
            "verbose": self.verbose,
            "check_divergence": self.check_divergence,
            "controller": self.controller.to_dict(),
            "hull": self.hull.to_dict(),
            "initial_state": self.initial_state.to_dict(),
        }

    def save(self, config_file: Path) -> None:
        fu.write_dict_to_yaml(self.to_dict(), Path(config_file))


class Simulator:
    """Class for simulating a ship under closed-loop heading control."""

    def __init__(
        self, config: Optional[Config] = None, config_file: Optional[Path] = dp.simulator_config, **kwargs
    ) -> None:
        """Initializes the simulator.

        Additional key-value arguments can be passed to override the settings in the config file.

        Args:
            config (Optional[Config]): Configuration object. Defaults to None.
            config_file (Optional[Path]): Path to configuration file. Defaults to dp.simulator_config.
            kwargs: key-value dictionary of settings to override, e.g. n_steps=100 or psi_ref=20.0 (deg).

        Raises:
            InvalidConfigurationError: On an invalid configuration, or on overrides given together with a Config object.
        """
        if config is not None:
            overrides = sorted(k for k, v in kwargs.items() if v is not None)
            if overrides:
                raise InvalidConfigurationError(
                    f"Setting overrides {overrides} only apply to a config file, apply them to the Config object instead."
                )
            self._config = config
        elif config_file is not None:
            self._config = cp.extract(Config, config_file, **kwargs)
        else:
            raise InvalidConfigurationError("No configuration file or configuration object provided.")

        self._config.validate()
        self.model: models.IModel = models.Clarke83(self._config.hull)
        self.controller: controllers.IController = controllers.PDHeading(self._config.controller)

    @property
    def config(self) -> Config:
        return self._config

    def _log(self, msg: str, *args) -> None:
        logger.log(logging.INFO if self._config.verbose else logging.DEBUG, msg, *args)

    def simulate(self) -> Iterator[TrajectorySample]:
        """Runs the simulation lazily, yielding the N + 1 trajectory samples in time order.

        Each call returns an independent generator starting from the configured initial state.
        The configuration is validated again before the first sample, since it may have been
        modified through the config property.

        Yields:
            Iterator[TrajectorySample]: Sample (t_k, x_k, y_k, psi_k, u_k, v_k, r_k) for k = 0, ..., N.
        """
        self._config.validate()
        dt = self._config.dt
        n_steps = int(self._config.n_steps)
        psi_ref = self._config.psi_ref
        eta = np.array(self._config.initial_state.eta, dtype=float)
        nu = np.array(self._config.initial_state.nu, dtype=float)

        self._log("Simulator: Started running %d steps with dt = %.3f s...", n_steps, dt)
        for k in range(n_steps + 1):
            t = k * dt

            Mmtrx, Dmtrx = self.model.matrices(nu)
            tau = self.controller.compute_inputs(psi_ref, eta, nu, Mmtrx)
            nu_dot = solve_acceleration(Mmtrx, Dmtrx, nu, tau)

            yield TrajectorySample(t, *eta.tolist(), *nu.tolist())

            eta, nu = mixed_euler_integration_step(eta, nu, nu_dot, dt)

            if self._config.check_divergence and not (np.all(np.isfinite(eta)) and np.all(np.isfinite(nu))):
                raise NumericDivergenceError(k + 1, (k + 1) * dt, np.concatenate((eta, nu)))

        self._log(
            "Simulator: Finished at t = %.2f s, psi = %.3f deg, U = %.3f m/s.",
            n_steps * dt,
            np.rad2deg(eta[2]),
            np.sqrt(nu[0] ** 2 + nu[1] ** 2),
        )

    def run(self) -> pd.DataFrame:
        """Runs the simulation to the end.

        Returns:
            pd.DataFrame: Trajectory table with columns t, x, y, psi, u, v, r and N + 1 rows.
        """
        samples = list(self.simulate())
        return pd.DataFrame.from_records(samples, columns=list(TrajectorySample._fields))


def run(config: Optional[Config] = None) -> pd.DataFrame:
    """Runs a single simulation from the configuration and returns the trajectory table.

    Args:
        config (Optional[Config]): Configuration object. Defaults to the built-in Config().

    Returns:
        pd.DataFrame: Trajectory table with columns t, x, y, psi, u, v, r.
    """
    if config is None:
        config = Config()
    return Simulator(config=config).run()
