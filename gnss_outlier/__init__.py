"""Pseudorange outlier simulation with robust WLS positioning."""

from gnss_outlier.config import SimConfig
from gnss_outlier.errors import InsufficientObservationsError, SingularMatrixError
from gnss_outlier.round import Round, simulate_round

__all__ = [
    "InsufficientObservationsError",
    "Round",
    "SimConfig",
    "SingularMatrixError",
    "simulate_round",
    "meas",
    "receiver",
    "sat",
    "utils",
]
