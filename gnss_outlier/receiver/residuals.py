"""Post-fit residual evaluation."""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

import numpy as np
from scipy.stats import chi2

from gnss_outlier.meas.simulator import geometric_range_m
from gnss_outlier.models import EstimatedPosition, ResidualStats, SatelliteObservation


def modeled_range_m(obs: SatelliteObservation, estimate: EstimatedPosition) -> float:
    """Range predicted at the estimate, including the estimated clock bias if any."""

    clock_bias_m = estimate.clock_bias_m if estimate.clock_bias_m is not None else 0.0
    return geometric_range_m(estimate.pos_m, obs.pos_m) + clock_bias_m


def evaluate(
    observations: Sequence[SatelliteObservation],
    estimate: EstimatedPosition,
) -> list[SatelliteObservation]:
    """Return copies of ``observations`` with signed residuals filled in.

    The residual is ``measurement - modeled range``. Inputs are not modified.
    """

    return [
        replace(obs, residual_m=float(obs.measurement_m - modeled_range_m(obs, estimate)))
        for obs in observations
    ]


def summarize_residuals(
    observations: Sequence[SatelliteObservation],
    num_params: int,
    sigma_m: float,
) -> ResidualStats:
    """Summarize evaluated residuals with a chi-square consistency statistic."""

    residuals = np.array(
        [obs.residual_m for obs in observations if obs.residual_m is not None],
        dtype=float,
    )
    if residuals.size == 0:
        nan = float("nan")
        return ResidualStats(rms_m=nan, mean_m=nan, max_abs_m=nan, chi_square=nan, dof=0, p_value=nan)
    sigma = max(float(sigma_m), 1e-3)
    chi_square = float(np.sum((residuals / sigma) ** 2))
    dof = int(residuals.size - num_params)
    p_value = float(chi2.sf(chi_square, dof)) if dof > 0 else float("nan")
    return ResidualStats(
        rms_m=float(np.sqrt(np.mean(residuals**2))),
        mean_m=float(np.mean(residuals)),
        max_abs_m=float(np.max(np.abs(residuals))),
        chi_square=chi_square,
        dof=dof,
        p_value=p_value,
    )
