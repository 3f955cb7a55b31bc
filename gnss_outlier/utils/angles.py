"""Look-angle utilities."""

from __future__ import annotations

import numpy as np

from gnss_outlier.utils.wgs84 import ecef_to_enu_matrix, ecef_to_lla


def elev_az_from_rx_sv(pos_rx: np.ndarray, pos_sv: np.ndarray) -> tuple[float, float]:
    """Elevation and azimuth (deg) of a satellite seen from an ECEF receiver position."""

    lat_deg, lon_deg, _ = ecef_to_lla(*pos_rx)
    east, north, up = ecef_to_enu_matrix(lat_deg, lon_deg) @ (np.asarray(pos_sv) - np.asarray(pos_rx))
    elev = float(np.rad2deg(np.arctan2(up, np.hypot(east, north))))
    az = float(np.rad2deg(np.arctan2(east, north))) % 360.0
    return elev, az


def unit_vector_from_look_angle(az_deg: float, elev_deg: float) -> np.ndarray:
    """Unit direction for an azimuth/elevation pair in the local simulation frame.

    Azimuth is measured from +x towards +y and elevation from the x/y plane
    towards +z.
    """

    az = np.deg2rad(az_deg)
    el = np.deg2rad(elev_deg)
    return np.array([np.cos(az) * np.cos(el), np.sin(az) * np.cos(el), np.sin(el)], dtype=float)


def look_angle_from_offset(offset_m: np.ndarray) -> tuple[float, float]:
    """Inverse of ``unit_vector_from_look_angle``: (az_deg, elev_deg) of an offset."""

    dx, dy, dz = (float(v) for v in offset_m)
    az = float(np.rad2deg(np.arctan2(dy, dx))) % 360.0
    elev = float(np.rad2deg(np.arctan2(dz, np.hypot(dx, dy))))
    return az, elev
