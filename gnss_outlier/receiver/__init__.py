"""Receiver algorithms."""

from gnss_outlier.receiver.residuals import evaluate, modeled_range_m, summarize_residuals
from gnss_outlier.receiver.wls import build_jacobian, robust_weights, solve

__all__ = [
    "build_jacobian",
    "evaluate",
    "modeled_range_m",
    "robust_weights",
    "solve",
    "summarize_residuals",
]
