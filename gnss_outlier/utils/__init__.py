"""Utilities for the outlier simulation.

NOTE: Keep this package lightweight; no optional dependencies at import time.
"""

from gnss_outlier.utils.angles import (
    elev_az_from_rx_sv,
    look_angle_from_offset,
    unit_vector_from_look_angle,
)
from gnss_outlier.utils.logging import get_logger
from gnss_outlier.utils.wgs84 import ecef_to_enu_matrix, ecef_to_lla, lla_to_ecef

__all__ = [
    "ecef_to_enu_matrix",
    "ecef_to_lla",
    "elev_az_from_rx_sv",
    "get_logger",
    "lla_to_ecef",
    "look_angle_from_offset",
    "unit_vector_from_look_angle",
]
