"""Closed-form geometry providers in a local receiver-centred frame."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from gnss_outlier.models import GeometryProvider, SatelliteGeometry
from gnss_outlier.utils.angles import look_angle_from_offset, unit_vector_from_look_angle

logger = logging.getLogger(__name__)

NOMINAL_DISTANCE_M = 20_200.0


def position_from_look_angle(
    receiver_pos_m: np.ndarray,
    az_deg: float,
    elev_deg: float,
    distance_m: float,
) -> np.ndarray:
    """Place a satellite ``distance_m`` away from the receiver along a look angle."""

    return np.asarray(receiver_pos_m, dtype=float) + distance_m * unit_vector_from_look_angle(az_deg, elev_deg)


@dataclass(frozen=True)
class LookAngleGeometryProvider(GeometryProvider):
    """Random azimuth/elevation/distance around the receiver.

    Azimuth is uniform on [0, 360), elevation uniform on
    [min_elev_deg, max_elev_deg) and distance uniform on
    ``distance_m +/- distance_spread_m / 2``. Elevations at or below the
    horizon are redrawn.
    """

    distance_m: float = NOMINAL_DISTANCE_M
    distance_spread_m: float = 1_000.0
    min_elev_deg: float = 0.0
    max_elev_deg: float = 90.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.min_elev_deg < self.max_elev_deg <= 90.0:
            raise ValueError("Elevation bounds must satisfy 0 <= min < max <= 90")
        if self.distance_m - self.distance_spread_m / 2.0 <= 0.0:
            raise ValueError("distance_spread_m must keep every distance positive")

    def get_geometries(
        self,
        count: int,
        receiver_pos_m: np.ndarray,
        rng: np.random.Generator,
    ) -> list[SatelliteGeometry]:
        geometries: list[SatelliteGeometry] = []
        for sat_id in range(count):
            az_deg = float(rng.uniform(0.0, 360.0))
            elev_deg = float(rng.uniform(self.min_elev_deg, self.max_elev_deg))
            while elev_deg <= 0.0:
                elev_deg = float(rng.uniform(self.min_elev_deg, self.max_elev_deg))
            distance_m = self.distance_m + (float(rng.random()) - 0.5) * self.distance_spread_m
            geometries.append(
                SatelliteGeometry(
                    sat_id=sat_id,
                    pos_m=position_from_look_angle(receiver_pos_m, az_deg, elev_deg, distance_m),
                    az_deg=az_deg,
                    elev_deg=elev_deg,
                )
            )
        return geometries


class FixedGeometryProvider(GeometryProvider):
    """Deterministic geometry from explicit look angles, used exactly as given."""

    def __init__(
        self,
        look_angles_deg: Sequence[tuple[float, float]],
        distance_m: float = NOMINAL_DISTANCE_M,
    ) -> None:
        self.look_angles_deg = [(float(az), float(el)) for az, el in look_angles_deg]
        self.distance_m = float(distance_m)

    def get_geometries(
        self,
        count: int,
        receiver_pos_m: np.ndarray,
        rng: np.random.Generator,
    ) -> list[SatelliteGeometry]:
        if count > len(self.look_angles_deg):
            raise ValueError(f"Requested {count} satellites but only {len(self.look_angles_deg)} look angles are defined")
        return [
            SatelliteGeometry(
                sat_id=sat_id,
                pos_m=position_from_look_angle(receiver_pos_m, az_deg, elev_deg, self.distance_m),
                az_deg=az_deg,
                elev_deg=elev_deg,
            )
            for sat_id, (az_deg, elev_deg) in enumerate(self.look_angles_deg[:count])
        ]


class EphemerisGeometryProvider(GeometryProvider):
    """Already-resolved satellite positions, e.g. propagated from orbital elements upstream.

    Positions at or below the receiver's horizon are dropped before the
    first ``count`` are taken.
    """

    def __init__(self, positions_m: Sequence[np.ndarray]) -> None:
        self.positions_m = [np.asarray(pos, dtype=float) for pos in positions_m]

    def get_geometries(
        self,
        count: int,
        receiver_pos_m: np.ndarray,
        rng: np.random.Generator,
    ) -> list[SatelliteGeometry]:
        receiver = np.asarray(receiver_pos_m, dtype=float)
        geometries: list[SatelliteGeometry] = []
        for sat_id, pos in enumerate(self.positions_m):
            az_deg, elev_deg = look_angle_from_offset(pos - receiver)
            if elev_deg <= 0.0:
                logger.debug("Dropping satellite %d below the horizon (elev=%.2f deg)", sat_id, elev_deg)
                continue
            geometries.append(SatelliteGeometry(sat_id=sat_id, pos_m=pos.copy(), az_deg=az_deg, elev_deg=elev_deg))
        if count > len(geometries):
            raise ValueError(f"Requested {count} satellites but only {len(geometries)} are above the horizon")
        return geometries[:count]
