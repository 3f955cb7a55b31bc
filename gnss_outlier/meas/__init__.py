"""Measurement models."""

from gnss_outlier.meas.noise import GaussianNoiseModel, UniformNoiseModel
from gnss_outlier.meas.simulator import geometric_range_m, simulate

__all__ = [
    "GaussianNoiseModel",
    "UniformNoiseModel",
    "geometric_range_m",
    "simulate",
]
