"""
    Test module for the Simulator class.

    Shows how to configure and run the simulator, and checks the closed-loop behavior
    of the reference ship under PD heading control.
"""

from typing import Tuple

import maneuvering_simulator.common.math_functions as mf
import maneuvering_simulator.core.controllers as controllers
import maneuvering_simulator.core.models as models
import maneuvering_simulator.simulator as sim
import numpy as np
import pandas as pd
import pytest
import yaml
from maneuvering_simulator.common.exceptions import (
    InvalidConfigurationError,
    NumericDivergenceError,
    SingularModelError,
)
from maneuvering_simulator.core.dynamics import solve_acceleration
from maneuvering_simulator.core.integrators import mixed_euler_integration_step


class ConstantModel(models.IModel):
    """Model with fixed matrices, used to provoke failure modes."""

    def __init__(self, Mmtrx: np.ndarray, Dmtrx: np.ndarray) -> None:
        self.Mmtrx = Mmtrx
        self.Dmtrx = Dmtrx

    def matrices(self, nu: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        return self.Mmtrx, self.Dmtrx


@pytest.fixture(scope="module")
def reference_trajectory() -> pd.DataFrame:
    config = sim.Config(
        dt=0.05,
        n_steps=10000,
        psi_ref=float(np.deg2rad(10.0)),
        controller=controllers.PDHeadingParams(w_n=0.1, thrust=1.0e6),
        hull=models.HullParams(length=100.0, beam=20.0, draft=10.0, block_coefficient=0.8, radius_of_gyration=27.0, xg=-3.0),
    )
    return sim.run(config)


def test_trajectory_has_n_plus_one_rows() -> None:
    for n_steps in [1, 2, 37]:
        trajectory = sim.run(sim.Config(n_steps=n_steps))
        assert len(trajectory) == n_steps + 1
        assert list(trajectory.columns) == ["t", "x", "y", "psi", "u", "v", "r"]


def test_time_is_index_times_step() -> None:
    dt = 0.1
    trajectory = sim.run(sim.Config(dt=dt, n_steps=250))
    expected = np.arange(251) * dt
    np.testing.assert_array_equal(trajectory["t"].to_numpy(), expected)
    assert np.all(np.diff(trajectory["t"].to_numpy()) > 0.0)


def test_determinism() -> None:
    config = sim.Config(n_steps=500)
    pd.testing.assert_frame_equal(sim.run(config), sim.run(config), check_exact=True)

    simulator = sim.Simulator(config=config)
    pd.testing.assert_frame_equal(simulator.run(), simulator.run(), check_exact=True)


def test_first_sample_is_initial_state() -> None:
    config = sim.Config(n_steps=3, initial_state=sim.InitialState(eta=np.array([5.0, -3.0, 0.2]), nu=np.array([1.0, 0.1, 0.0])))
    first = next(sim.Simulator(config=config).simulate())
    assert first == sim.TrajectorySample(0.0, 5.0, -3.0, 0.2, 1.0, 0.1, 0.0)


def test_zero_input_equilibrium() -> None:
    config = sim.Config(n_steps=200, psi_ref=0.0, controller=controllers.PDHeadingParams(thrust=0.0))
    trajectory = sim.run(config)
    np.testing.assert_allclose(trajectory[["x", "y", "psi", "u", "v", "r"]].to_numpy(), 0.0, atol=1e-12)


def test_simulate_is_lazy_and_finite() -> None:
    simulator = sim.Simulator(config=sim.Config(n_steps=4))
    samples = simulator.simulate()
    assert next(samples).t == 0.0
    remaining = list(samples)
    assert len(remaining) == 4
    assert list(samples) == []


def test_recorded_sample_is_pre_update_state() -> None:
    """Row k + 1 is obtained from row k by one model/controller/solver/integrator cycle."""
    config = sim.Config(n_steps=20, initial_state=sim.InitialState(eta=np.array([0.0, 0.0, 0.4]), nu=np.array([3.0, 0.2, -0.01])))
    trajectory = sim.run(config)
    model = models.Clarke83(config.hull)
    controller = controllers.PDHeading(config.controller)

    for k in [0, 7, 19]:
        row = trajectory.iloc[k]
        eta = row[["x", "y", "psi"]].to_numpy(dtype=float)
        nu = row[["u", "v", "r"]].to_numpy(dtype=float)
        Mmtrx, Dmtrx = model.matrices(nu)
        tau = controller.compute_inputs(config.psi_ref, eta, nu, Mmtrx)
        eta_next, nu_next = mixed_euler_integration_step(eta, nu, solve_acceleration(Mmtrx, Dmtrx, nu, tau), config.dt)

        next_row = trajectory.iloc[k + 1]
        np.testing.assert_allclose(next_row[["x", "y", "psi"]].to_numpy(dtype=float), eta_next, rtol=1e-12, atol=1e-12)
        np.testing.assert_allclose(next_row[["u", "v", "r"]].to_numpy(dtype=float), nu_next, rtol=1e-12, atol=1e-12)


def test_heading_convergence(reference_trajectory: pd.DataFrame) -> None:
    psi_ref = np.deg2rad(10.0)
    final = reference_trajectory.iloc[-1]
    assert abs(final["psi"] - psi_ref) < 0.01
    assert abs(final["r"]) < 1e-3
    assert np.max(np.abs(reference_trajectory["r"].to_numpy())) < 0.1


def test_reference_scenario(reference_trajectory: pd.DataFrame) -> None:
    assert len(reference_trajectory) == 10001
    assert reference_trajectory["t"].iloc[-1] == pytest.approx(500.0)

    x = reference_trajectory["x"].to_numpy()
    y = reference_trajectory["y"].to_numpy()
    assert np.all(np.diff(x) > 0.0)
    assert np.all(np.isfinite(y))
    assert np.max(np.abs(y)) < np.max(x)

    U = mf.speed(reference_trajectory[["u", "v", "r"]].to_numpy())
    assert np.all(U >= 0.0)
    assert U[-1] > 1.0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"dt": 0.0},
        {"dt": -0.05},
        {"dt": float("nan")},
        {"n_steps": 0},
        {"n_steps": 2.5},
        {"psi_ref": float("inf")},
        {"controller": controllers.PDHeadingParams(w_n=0.0)},
        {"hull": models.HullParams(block_coefficient=0.0)},
        {"hull": models.HullParams(length=-100.0)},
        {"initial_state": sim.InitialState(eta=np.zeros(2))},
    ],
)
def test_invalid_configuration_rejected_before_run(kwargs) -> None:
    with pytest.raises(InvalidConfigurationError):
        sim.Simulator(config=sim.Config(**kwargs))


@pytest.mark.parametrize(
    "kwargs",
    [
        {"psi_ref": "ten"},
        {"dt": "0.05"},
        {"verbose": "yes"},
        {"controller": controllers.PDHeadingParams(w_n="0.1")},
        {"controller": controllers.PDHeadingParams(thrust=None)},
        {"hull": models.HullParams(length="100")},
        {"hull": models.HullParams(block_coefficient=True)},
        {"hull": models.HullParams(T_surge="100")},
        {"initial_state": sim.InitialState(eta=["a", 0.0, 0.0])},
    ],
)
def test_wrongly_typed_configuration_rejected(kwargs) -> None:
    with pytest.raises(InvalidConfigurationError):
        sim.Simulator(config=sim.Config(**kwargs))


def test_wrongly_typed_config_file_rejected(tmp_path) -> None:
    config_file = tmp_path / "simulator.yaml"
    for settings in [{"psi_ref": "ten"}, {"hull": {"length": "100"}}, {"initial_state": {"eta": [0.0, "north", 0.0]}}]:
        config_file.write_text(yaml.safe_dump(settings))
        with pytest.raises(InvalidConfigurationError):
            sim.Simulator(config_file=config_file)


def test_config_modified_after_construction_is_validated_before_run() -> None:
    simulator = sim.Simulator(config=sim.Config(n_steps=3))
    simulator.config.dt = -1.0
    with pytest.raises(InvalidConfigurationError):
        simulator.run()

    simulator.config.dt = 0.5
    trajectory = simulator.run()
    np.testing.assert_array_equal(trajectory["t"].to_numpy(), [0.0, 0.5, 1.0, 1.5])


def test_overrides_with_config_object_rejected() -> None:
    with pytest.raises(InvalidConfigurationError):
        sim.Simulator(config=sim.Config(), n_steps=5)
    assert sim.Simulator(config=sim.Config(n_steps=5), n_steps=None).config.n_steps == 5


def test_singular_model_aborts_run() -> None:
    simulator = sim.Simulator(config=sim.Config(n_steps=10))
    simulator.model = ConstantModel(np.zeros((3, 3)), np.zeros((3, 3)))
    with pytest.raises(SingularModelError):
        simulator.run()


def test_numeric_divergence_is_detected() -> None:
    config = sim.Config(n_steps=1000, initial_state=sim.InitialState(nu=np.array([1.0, 0.0, 0.0])))
    simulator = sim.Simulator(config=config)
    simulator.model = ConstantModel(np.eye(3), -1000.0 * np.eye(3))
    with np.errstate(over="ignore", invalid="ignore"):
        with pytest.raises(NumericDivergenceError) as exc_info:
            simulator.run()
    assert 0 < exc_info.value.step <= config.n_steps
    assert not np.all(np.isfinite(exc_info.value.state))


def test_config_from_file_with_overrides(tmp_path) -> None:
    config_file = tmp_path / "simulator.yaml"
    config_file.write_text(
        yaml.safe_dump(
            {
                "dt": 0.1,
                "n_steps": 50,
                "psi_ref": 20.0,
                "controller": {"w_n": 0.2, "thrust": 5.0e5},
                "hull": {"length": 80.0, "beam": 15.0, "draft": 6.0, "block_coefficient": 0.7, "radius_of_gyration": 20.0, "xg": 0.0},
                "initial_state": {"eta": [0.0, 0.0, 90.0], "nu": [1.0, 0.0, 0.0]},
            }
        )
    )
    config = sim.Config.from_file(config_file, n_steps=10, controller={"thrust": 1.0e5})
    assert config.dt == 0.1
    assert config.n_steps == 10
    assert config.psi_ref == pytest.approx(np.deg2rad(20.0))
    assert config.controller.w_n == 0.2
    assert config.controller.thrust == 1.0e5
    assert config.hull.length == 80.0
    assert config.initial_state.eta[2] == pytest.approx(np.pi / 2.0)

    trajectory = sim.Simulator(config_file=config_file, n_steps=5).run()
    assert len(trajectory) == 6


def test_config_rejects_unknown_keys(tmp_path) -> None:
    config_file = tmp_path / "simulator.yaml"
    config_file.write_text(yaml.safe_dump({"dt": 0.1, "sample_count": 5}))
    with pytest.raises(InvalidConfigurationError):
        sim.Config.from_file(config_file)

    with pytest.raises(InvalidConfigurationError):
        sim.Config.from_file(tmp_path / "missing.yaml")


def test_config_save_and_reload(tmp_path) -> None:
    config = sim.Config(n_steps=42, psi_ref=float(np.deg2rad(-15.0)), hull=models.HullParams(xg=2.0))
    config_file = tmp_path / "saved.yaml"
    config.save(config_file)
    reloaded = sim.Config.from_file(config_file)
    assert reloaded.n_steps == 42
    assert reloaded.psi_ref == pytest.approx(config.psi_ref)
    assert reloaded.hull == config.hull
    assert reloaded.controller == config.controller


def test_default_config_file_matches_reference_setup() -> None:
    simulator = sim.Simulator()
    config = simulator.config
    assert config.dt == 0.05
    assert config.n_steps == 10000
    assert config.psi_ref == pytest.approx(np.deg2rad(10.0))
    assert config.controller == controllers.PDHeadingParams(w_n=0.1, thrust=1.0e6)
    assert config.hull == models.HullParams()


if __name__ == "__main__":
    test_recorded_sample_is_pre_update_state()
    test_zero_input_equilibrium()
