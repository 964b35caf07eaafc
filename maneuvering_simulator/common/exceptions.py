"""
    exceptions.py

    Summary:
        Contains the exceptions raised by the simulator. All failures propagate
        to the caller, nothing is retried.
"""
import numpy as np


class SimulatorError(Exception):
    """Base class for all simulator errors."""


class InvalidConfigurationError(SimulatorError, ValueError):
    """Raised before a run starts when the configuration is non-physical or malformed."""


class SingularModelError(SimulatorError, np.linalg.LinAlgError):
    """Raised when the mass matrix cannot be factorized. Indicates a defect in the model, not a retryable condition."""


class NumericDivergenceError(SimulatorError, ArithmeticError):
    """Raised when NaN or Inf values appear in the simulated state."""

    def __init__(self, step: int, t: float, state: np.ndarray) -> None:
        self.step = step
        self.t = t
        self.state = state
        super().__init__(f"Non-finite state at step {step} (t = {t:.3f} s): {state}")
