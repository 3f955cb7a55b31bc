"""Circular-orbit constellation seen from an ECEF receiver."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from math import ceil

import numpy as np

from gnss_outlier.models import GeometryProvider, SatelliteGeometry
from gnss_outlier.utils.angles import elev_az_from_rx_sv

logger = logging.getLogger(__name__)

MU_EARTH = 3.986004418e14
OMEGA_EARTH = 7.2921159e-5


@dataclass(frozen=True)
class ConstellationConfig:
    """Walker-like constellation layout."""

    num_sats: int = 24
    num_planes: int = 6
    radius_m: float = 26_560_000.0
    inclination_deg: float = 55.0
    elevation_mask_deg: float = 5.0
    t_s: float = 0.0


def _rot_z(angle_rad: float) -> np.ndarray:
    c, s = np.cos(angle_rad), np.sin(angle_rad)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]], dtype=float)


def _rot_x(angle_rad: float) -> np.ndarray:
    c, s = np.cos(angle_rad), np.sin(angle_rad)
    return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]], dtype=float)


class ConstellationGeometryProvider(GeometryProvider):
    """Visible satellites of a circular-orbit constellation.

    Plane phase offsets are drawn from the round's generator, so the
    layout changes from round to round but repeats for a fixed seed.
    Satellites below the elevation mask are dropped; the highest ``count``
    of the rest are returned.
    """

    def __init__(self, config: ConstellationConfig | None = None) -> None:
        self.config = config or ConstellationConfig()

    def ecef_positions_m(self, rng: np.random.Generator) -> np.ndarray:
        cfg = self.config
        num_planes = max(1, min(cfg.num_planes, cfg.num_sats))
        sats_per_plane = ceil(cfg.num_sats / num_planes)
        plane_raan = np.linspace(0.0, 2.0 * np.pi, num_planes, endpoint=False)
        plane_offsets = rng.uniform(0.0, 2.0 * np.pi, size=num_planes)
        mean_motion = float(np.sqrt(MU_EARTH / cfg.radius_m**3))
        incl = _rot_x(np.deg2rad(cfg.inclination_deg))
        earth = _rot_z(OMEGA_EARTH * cfg.t_s)

        positions = np.zeros((cfg.num_sats, 3))
        for idx in range(cfg.num_sats):
            plane = idx % num_planes
            theta = mean_motion * cfg.t_s + 2.0 * np.pi * (idx // num_planes) / sats_per_plane + plane_offsets[plane]
            r_orb = cfg.radius_m * np.array([np.cos(theta), np.sin(theta), 0.0])
            positions[idx] = earth @ _rot_z(plane_raan[plane]) @ incl @ r_orb
        return positions

    def get_geometries(
        self,
        count: int,
        receiver_pos_m: np.ndarray,
        rng: np.random.Generator,
    ) -> list[SatelliteGeometry]:
        receiver = np.asarray(receiver_pos_m, dtype=float)
        visible: list[tuple[float, float, int, np.ndarray]] = []
        for idx, pos in enumerate(self.ecef_positions_m(rng)):
            elev_deg, az_deg = elev_az_from_rx_sv(receiver, pos)
            if elev_deg > self.config.elevation_mask_deg:
                visible.append((elev_deg, az_deg, idx, pos))
        if len(visible) < count:
            logger.warning("Only %d of %d requested satellites are above the mask", len(visible), count)
        visible.sort(key=lambda item: item[0], reverse=True)
        return [
            SatelliteGeometry(sat_id=idx + 1, pos_m=pos, az_deg=az_deg, elev_deg=elev_deg)
            for elev_deg, az_deg, idx, pos in visible[:count]
        ]
