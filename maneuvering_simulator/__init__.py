"""Ship heading control simulator based on the Clarke (1983) linear maneuvering model."""

from maneuvering_simulator.simulator import Config, Simulator, TrajectorySample, run

__all__ = ["Config", "Simulator", "TrajectorySample", "run"]
