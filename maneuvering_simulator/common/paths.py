"""
    paths.py

    Summary:
        Contains paths to default configuration files and output folders.
"""

import pathlib

package = pathlib.Path(__file__).absolute().parents[1]
config = package / "config"
output = pathlib.Path.cwd() / "output"

simulator_config = config / "simulator.yaml"

figure_output = output / "figures"
animation_output = output / "animations"
trajectory_output = output / "trajectories"
