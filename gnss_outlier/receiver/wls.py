"""Iteratively reweighted least squares position (and clock bias) solver."""

from __future__ import annotations

import logging
import warnings
from typing import Sequence

import numpy as np

from gnss_outlier.config import WeightingPolicy
from gnss_outlier.errors import InsufficientObservationsError, NonConvergenceWarning, SingularMatrixError
from gnss_outlier.models import DopMetrics, EstimatedPosition, SatelliteObservation, SolverStatus
from gnss_outlier.receiver.linalg import covariance_from_normal, regularize, solve_normal_equations

logger = logging.getLogger(__name__)


def robust_weights(residuals_m: np.ndarray, epsilon: float = 0.1) -> np.ndarray:
    """Weights ``1 / (epsilon + |r|)``, strictly decreasing in ``|r|``."""

    return 1.0 / (epsilon + np.abs(np.asarray(residuals_m, dtype=float)))


def build_jacobian(
    pos_m: np.ndarray,
    sat_pos_m: np.ndarray,
    include_clock_bias: bool,
) -> tuple[np.ndarray, np.ndarray]:
    """Return the range Jacobian and the geometric ranges at ``pos_m``.

    Rows are the unit vectors from each satellite to the receiver, with a
    trailing column of ones when the clock bias is estimated. The unit
    vectors are normalized by the geometric range alone, not by the modeled
    range including clock bias, which makes them the exact derivative of
    the range model.
    """

    offsets = np.asarray(pos_m, dtype=float)[None, :] - sat_pos_m
    ranges = np.linalg.norm(offsets, axis=1)
    if np.any(ranges <= 0.0):
        raise SingularMatrixError("Estimate coincides with a satellite position")
    h_matrix = offsets / ranges[:, None]
    if include_clock_bias:
        h_matrix = np.hstack([h_matrix, np.ones((h_matrix.shape[0], 1))])
    return h_matrix, ranges


def _compute_dop_from_geometry(geometry: np.ndarray) -> DopMetrics:
    try:
        q = np.linalg.inv(geometry.T @ geometry)
    except np.linalg.LinAlgError:
        return DopMetrics(gdop=float("inf"), pdop=float("inf"), hdop=float("inf"), vdop=float("inf"))
    diag = np.diag(q)
    return DopMetrics(
        gdop=float(np.sqrt(np.trace(q))),
        pdop=float(np.sqrt(np.sum(diag[:3]))),
        hdop=float(np.sqrt(np.sum(diag[:2]))),
        vdop=float(np.sqrt(diag[2])),
    )


def _observation_weights(
    residuals_m: np.ndarray,
    policy: WeightingPolicy,
    epsilon: float,
) -> np.ndarray:
    if policy is WeightingPolicy.UNIFORM:
        return np.ones_like(residuals_m)
    return robust_weights(residuals_m, epsilon)


def solve(
    observations: Sequence[SatelliteObservation],
    initial_guess: np.ndarray,
    include_clock_bias: bool,
    *,
    max_iterations: int = 10,
    tolerance: float = 1e-6,
    regularization: float = 1e-6,
    weighting: WeightingPolicy | str = WeightingPolicy.ROBUST,
    weight_epsilon: float = 0.1,
    initial_clock_bias_m: float = 0.0,
    max_condition_number: float = 1e12,
) -> EstimatedPosition:
    """Estimate receiver position, and optionally clock bias, from ranges.

    Gauss-Newton iterations on the weighted normal equations
    ``(J^T W J + regularization * I) delta = J^T W r``. With robust
    weighting, ``W`` is rebuilt each iteration from the current residuals
    so discordant ranges pull the estimate less.

    A singular normal matrix stops the iteration and returns the last valid
    estimate flagged ``SINGULAR_MATRIX``; hitting ``max_iterations`` returns
    the last estimate flagged ``MAX_ITERATIONS``. Neither raises.

    Raises:
        InsufficientObservationsError: if there are not strictly more
            observations than estimated parameters.
    """

    num_params = 4 if include_clock_bias else 3
    if len(observations) <= num_params:
        raise InsufficientObservationsError(len(observations), num_params)

    policy = WeightingPolicy(weighting)
    sat_pos_m = np.array([obs.pos_m for obs in observations], dtype=float)
    measured_m = np.array([obs.measurement_m for obs in observations], dtype=float)

    state = np.asarray(initial_guess, dtype=float).reshape(3).copy()
    if include_clock_bias:
        state = np.append(state, float(initial_clock_bias_m))

    status = SolverStatus.MAX_ITERATIONS
    weight_history: list[np.ndarray] = []
    geometry: np.ndarray | None = None
    normal: np.ndarray | None = None
    iterations = 0
    for _ in range(max_iterations):
        clock_bias_m = state[3] if include_clock_bias else 0.0
        try:
            h_matrix, ranges_m = build_jacobian(state[:3], sat_pos_m, include_clock_bias)
            residuals_m = measured_m - (ranges_m + clock_bias_m)
            weights = _observation_weights(residuals_m, policy, weight_epsilon)
            weighted_h = h_matrix * weights[:, None]
            geometry_normal = h_matrix.T @ weighted_h
            delta = solve_normal_equations(
                geometry_normal,
                weighted_h.T @ residuals_m,
                regularization=regularization,
                max_condition_number=max_condition_number,
            )
        except SingularMatrixError as exc:
            logger.warning("Stopping after %d iterations: %s", iterations, exc)
            status = SolverStatus.SINGULAR_MATRIX
            break
        state = state + delta
        iterations += 1
        geometry = h_matrix
        normal = regularize(geometry_normal, regularization)
        weight_history.append(weights)
        step_m = float(np.linalg.norm(delta))
        logger.debug("Iteration %d: |delta|=%.3e", iterations, step_m)
        if step_m < tolerance:
            status = SolverStatus.CONVERGED
            break

    if status is SolverStatus.MAX_ITERATIONS:
        warnings.warn(
            f"No convergence to {tolerance:.1e} within {max_iterations} iterations",
            NonConvergenceWarning,
            stacklevel=2,
        )

    return EstimatedPosition(
        pos_m=state[:3].copy(),
        clock_bias_m=float(state[3]) if include_clock_bias else None,
        converged=status is SolverStatus.CONVERGED,
        iterations=iterations,
        status=status,
        weights=weight_history[-1] if weight_history else np.zeros(0),
        weight_history=tuple(weight_history),
        covariance=covariance_from_normal(normal) if normal is not None else None,
        dop=_compute_dop_from_geometry(geometry) if geometry is not None else None,
    )
