"""Synthetic range measurements with injected outlier biases."""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

import numpy as np

from gnss_outlier.meas.noise import UniformNoiseModel
from gnss_outlier.models import SatelliteGeometry, SatelliteObservation

logger = logging.getLogger(__name__)


class NoiseModel(Protocol):
    def sample(self, rng: np.random.Generator) -> float: ...


def geometric_range_m(receiver_pos_m: np.ndarray, sat_pos_m: np.ndarray) -> float:
    """Euclidean distance between receiver and satellite."""

    return float(np.linalg.norm(np.asarray(sat_pos_m, dtype=float) - np.asarray(receiver_pos_m, dtype=float)))


def simulate(
    geometries: Sequence[SatelliteGeometry],
    true_pos_m: np.ndarray,
    true_clock_bias_m: float,
    outlier_probability: float,
    *,
    bias_range_m: tuple[float, float] = (10.0, 20.0),
    noise_model: NoiseModel | None = None,
    rng: np.random.Generator | None = None,
) -> list[SatelliteObservation]:
    """Simulate one range measurement per satellite geometry.

    Each satellite is independently an outlier with probability
    ``outlier_probability``; outliers get a bias drawn uniformly from
    ``[low, high)`` of ``bias_range_m``. Every measurement carries the true
    clock bias plus a noise sample.

    Random draws happen per satellite in a fixed order (outlier decision,
    bias if any, noise), so a seeded ``rng`` reproduces the same round.
    """

    if not 0.0 <= outlier_probability <= 1.0:
        raise ValueError("outlier_probability must be within [0, 1]")
    bias_lo, bias_hi = (float(v) for v in bias_range_m)
    if bias_hi < bias_lo:
        raise ValueError("bias_range_m must be (low, high) with low <= high")
    noise = noise_model if noise_model is not None else UniformNoiseModel()
    generator = rng if rng is not None else np.random.default_rng()
    truth = np.asarray(true_pos_m, dtype=float)

    observations: list[SatelliteObservation] = []
    for geom in geometries:
        is_outlier = bool(generator.random() < outlier_probability)
        bias_m = float(generator.uniform(bias_lo, bias_hi)) if is_outlier else 0.0
        true_range_m = geometric_range_m(truth, geom.pos_m)
        measurement_m = true_range_m + bias_m + float(true_clock_bias_m) + noise.sample(generator)
        observations.append(
            SatelliteObservation(
                sat_id=geom.sat_id,
                pos_m=np.asarray(geom.pos_m, dtype=float),
                az_deg=float(geom.az_deg),
                elev_deg=float(geom.elev_deg),
                measurement_m=measurement_m,
                bias_m=bias_m,
                is_outlier=is_outlier,
            )
        )
    logger.debug(
        "Simulated %d observations (%d outliers)",
        len(observations),
        sum(obs.is_outlier for obs in observations),
    )
    return observations
