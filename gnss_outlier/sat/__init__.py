"""Satellite geometry providers."""

from gnss_outlier.sat.constellation import ConstellationConfig, ConstellationGeometryProvider
from gnss_outlier.sat.look_angle import (
    EphemerisGeometryProvider,
    FixedGeometryProvider,
    LookAngleGeometryProvider,
    position_from_look_angle,
)

__all__ = [
    "ConstellationConfig",
    "ConstellationGeometryProvider",
    "EphemerisGeometryProvider",
    "FixedGeometryProvider",
    "LookAngleGeometryProvider",
    "position_from_look_angle",
]
