"""
    Test module for the common math and file utilities.
"""

import maneuvering_simulator.common.file_utils as fu
import maneuvering_simulator.common.math_functions as mf
import numpy as np
import pandas as pd
import pytest


def test_ssa_wraps_to_half_open_interval() -> None:
    """Test smallest signed angle wrap to (-pi, pi]."""
    assert mf.ssa(0.0) == 0.0
    assert mf.ssa(3.0 * np.pi / 2.0) == pytest.approx(-np.pi / 2.0)
    assert mf.ssa(-3.0 * np.pi / 2.0) == pytest.approx(np.pi / 2.0)
    assert mf.ssa(np.pi) == pytest.approx(np.pi)
    assert mf.ssa(-np.pi) == pytest.approx(np.pi)
    assert mf.ssa(2.0 * np.pi + 0.1) == pytest.approx(0.1)


def test_ssa_array_never_exceeds_pi() -> None:
    angles = np.linspace(-20.0, 20.0, 1001)
    wrapped = mf.ssa(angles)
    assert isinstance(wrapped, np.ndarray)
    assert np.all(wrapped > -np.pi)
    assert np.all(wrapped <= np.pi)
    np.testing.assert_allclose(np.sin(wrapped), np.sin(angles), atol=1e-12)
    np.testing.assert_allclose(np.cos(wrapped), np.cos(angles), atol=1e-12)


def test_rmtrx_is_yaw_rotation() -> None:
    for psi in [0.0, 0.3, -2.0, np.pi]:
        R = mf.Rmtrx(psi)
        np.testing.assert_allclose(R @ R.T, np.eye(3), atol=1e-12)
        assert np.linalg.det(R) == pytest.approx(1.0)
        np.testing.assert_array_equal(R[2], [0.0, 0.0, 1.0])


def test_rmtrx_maps_surge_to_heading_direction() -> None:
    psi = np.deg2rad(90.0)
    eta_dot = mf.Rmtrx(psi) @ np.array([2.0, 0.0, 0.1])
    np.testing.assert_allclose(eta_dot, [0.0, 2.0, 0.1], atol=1e-12)


def test_speed() -> None:
    assert mf.speed(np.array([3.0, -4.0, 1.0])) == pytest.approx(5.0)
    np.testing.assert_allclose(mf.speed(np.array([[3.0, 4.0, 0.0], [0.0, 0.0, 1.0]])), [5.0, 0.0])


def test_trajectory_csv_round_trip(tmp_path) -> None:
    trajectory = pd.DataFrame(
        {"t": [0.0, 0.05], "x": [0.0, 1e-3], "y": [0.0, -2e-7], "psi": [0.0, 0.1], "u": [0.0, 0.2], "v": [0.0, 0.0], "r": [0.0, 1e-4]}
    )
    file_name = tmp_path / "out" / "trajectory.csv"
    fu.write_trajectory_csv(trajectory, file_name)
    restored = fu.read_trajectory_csv(file_name)
    pd.testing.assert_frame_equal(restored, trajectory)
    assert all(restored[column].dtype == np.float64 for column in fu.TRAJECTORY_COLUMNS)


def test_read_trajectory_csv_missing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        fu.read_trajectory_csv(tmp_path / "missing.csv")


if __name__ == "__main__":
    test_ssa_wraps_to_half_open_interval()
    test_rmtrx_is_yaw_rotation()
