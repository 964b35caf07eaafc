"""
    file_utils.py

    Summary:
        Contains general non-math related utility functions for reading
        configuration files and storing simulation results.
"""

from pathlib import Path

import pandas as pd
import yaml

TRAJECTORY_COLUMNS = ["t", "x", "y", "psi", "u", "v", "r"]


def read_yaml_into_dict(file_name: Path) -> dict:
    with file_name.open(mode="r", encoding="utf-8") as file:
        output_dict = yaml.safe_load(file)
    return output_dict


def write_dict_to_yaml(output_dict: dict, file_name: Path) -> None:
    with file_name.open(mode="w", encoding="utf-8") as file:
        yaml.safe_dump(output_dict, file, sort_keys=False)


def write_trajectory_csv(trajectory: pd.DataFrame, file_name: Path) -> None:
    """Writes the trajectory table to a csv file, creating parent directories as needed.

    Args:
        trajectory (pd.DataFrame): Trajectory table with columns t, x, y, psi, u, v, r.
        file_name (Path): Output file.
    """
    file_name = Path(file_name)
    file_name.parent.mkdir(parents=True, exist_ok=True)
    trajectory.to_csv(file_name, sep=";", index=False, float_format="%.17g")


def read_trajectory_csv(file_name: Path) -> pd.DataFrame:
    """Reads a trajectory table previously written by write_trajectory_csv.

    Args:
        file_name (Path): Input file.

    Returns:
        pd.DataFrame: Trajectory table.
    """
    file_name = Path(file_name)
    if not file_name.is_file():
        raise FileNotFoundError(f"Trajectory file not found: {file_name}")
    trajectory = pd.read_csv(file_name, sep=";", float_precision="round_trip", dtype={c: float for c in TRAJECTORY_COLUMNS})
    missing = [c for c in TRAJECTORY_COLUMNS if c not in trajectory.columns]
    if missing:
        raise ValueError(f"Trajectory file {file_name} is missing column(s) {missing}.")
    return trajectory[TRAJECTORY_COLUMNS]
