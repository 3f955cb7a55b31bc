"""Core data models and interfaces for the outlier simulation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

import numpy as np


@dataclass(frozen=True)
class SatelliteGeometry:
    """Position and look angles of one satellite, as supplied by a provider."""

    sat_id: int
    pos_m: np.ndarray
    az_deg: float
    elev_deg: float


@dataclass(frozen=True)
class SatelliteObservation:
    """Simulated range to one satellite for a round.

    ``bias_m`` and ``is_outlier`` are ground truth and are never read by the
    solver. ``residual_m`` stays ``None`` until residuals are evaluated.
    """

    sat_id: int
    pos_m: np.ndarray
    az_deg: float
    elev_deg: float
    measurement_m: float
    bias_m: float = 0.0
    is_outlier: bool = False
    residual_m: float | None = None


@dataclass(frozen=True)
class ReceiverTruth:
    """Receiver ground truth for a round."""

    pos_m: np.ndarray
    clock_bias_m: float = 0.0


class SolverStatus(str, Enum):
    """Why the solver stopped iterating."""

    CONVERGED = "converged"
    MAX_ITERATIONS = "max_iterations"
    SINGULAR_MATRIX = "singular_matrix"


@dataclass(frozen=True)
class DopMetrics:
    """Dilution of precision metrics."""

    gdop: float
    pdop: float
    hdop: float
    vdop: float


@dataclass(frozen=True)
class ResidualStats:
    """Residual summary statistics for a solution."""

    rms_m: float
    mean_m: float
    max_abs_m: float
    chi_square: float
    dof: int
    p_value: float


@dataclass(frozen=True)
class EstimatedPosition:
    """Best-effort solver output with an explicit convergence indicator."""

    pos_m: np.ndarray
    clock_bias_m: float | None
    converged: bool
    iterations: int
    status: SolverStatus
    weights: np.ndarray = field(default_factory=lambda: np.zeros(0))
    weight_history: tuple[np.ndarray, ...] = ()
    covariance: np.ndarray | None = None
    dop: DopMetrics | None = None

    @property
    def num_params(self) -> int:
        return 3 if self.clock_bias_m is None else 4

    @property
    def state_vector(self) -> np.ndarray:
        if self.clock_bias_m is None:
            return np.array(self.pos_m, dtype=float)
        return np.append(np.asarray(self.pos_m, dtype=float), self.clock_bias_m)


class GeometryProvider(ABC):
    """Interface for satellite geometry sources."""

    @abstractmethod
    def get_geometries(
        self,
        count: int,
        receiver_pos_m: np.ndarray,
        rng: np.random.Generator,
    ) -> list[SatelliteGeometry]:
        """Return ``count`` satellite geometries around the receiver."""
