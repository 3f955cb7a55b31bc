"""Solver error types."""

from __future__ import annotations


class InsufficientObservationsError(ValueError):
    """Raised when there are not more observations than estimated parameters."""

    def __init__(self, num_observations: int, num_params: int) -> None:
        self.num_observations = num_observations
        self.num_params = num_params
        super().__init__(
            f"Need more than {num_params} observations to estimate {num_params} parameters, "
            f"got {num_observations}."
        )


class SingularMatrixError(ArithmeticError):
    """Raised when the normal-equations matrix cannot be inverted."""


class NonConvergenceWarning(RuntimeWarning):
    """Iteration cap reached before the update norm fell below tolerance."""
