"""
Calculation Errors

Exception and warning types raised by the valuation engine.
"""

from typing import Optional


class InvalidParameterError(ValueError):
    """Raised when an input is outside its documented domain."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NumericInstabilityWarning(RuntimeWarning):
    """IRR iteration stopped without converging; the returned rate is a best effort."""


class SimulationCancelledError(RuntimeError):
    """Raised when a Monte Carlo run is cancelled between iterations."""

    def __init__(self, completed: int, requested: int):
        super().__init__(
            f"Simulation cancelled after {completed} of {requested} iterations"
        )
        self.completed = completed
        self.requested = requested
