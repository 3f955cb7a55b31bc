"""WGS-84 coordinate utilities."""

from __future__ import annotations

import numpy as np

WGS84_A_M = 6_378_137.0
WGS84_F = 1.0 / 298.257223563
WGS84_B_M = WGS84_A_M * (1.0 - WGS84_F)
WGS84_E2 = WGS84_F * (2.0 - WGS84_F)
WGS84_EP2 = (WGS84_A_M**2 - WGS84_B_M**2) / WGS84_B_M**2


def _prime_vertical_radius_m(lat_rad: float) -> float:
    return float(WGS84_A_M / np.sqrt(1.0 - WGS84_E2 * np.sin(lat_rad) ** 2))


def lla_to_ecef(lat_deg: float, lon_deg: float, alt_m: float) -> np.ndarray:
    """Convert geodetic latitude/longitude/altitude to ECEF.

    Args:
        lat_deg: Latitude in degrees.
        lon_deg: Longitude in degrees.
        alt_m: Height above the WGS-84 ellipsoid in meters.

    Returns:
        ECEF position (x, y, z) in meters.
    """

    lat = np.deg2rad(lat_deg)
    lon = np.deg2rad(lon_deg)
    n = _prime_vertical_radius_m(lat)
    horiz = (n + alt_m) * np.cos(lat)
    return np.array(
        [
            horiz * np.cos(lon),
            horiz * np.sin(lon),
            (n * (1.0 - WGS84_E2) + alt_m) * np.sin(lat),
        ],
        dtype=float,
    )


def ecef_to_lla(x_m: float, y_m: float, z_m: float) -> tuple[float, float, float]:
    """Convert ECEF to geodetic latitude/longitude/altitude.

    Bowring's closed-form latitude, refined by fixed-point iteration.

    Returns:
        (lat_deg, lon_deg, alt_m)
    """

    lon = float(np.arctan2(y_m, x_m))
    p = float(np.hypot(x_m, y_m))
    if p == 0.0:
        lat = np.pi / 2.0 if z_m >= 0.0 else -np.pi / 2.0
        return float(np.rad2deg(lat)), float(np.rad2deg(lon)), abs(z_m) - WGS84_B_M

    theta = np.arctan2(z_m * WGS84_A_M, p * WGS84_B_M)
    lat = float(
        np.arctan2(
            z_m + WGS84_EP2 * WGS84_B_M * np.sin(theta) ** 3,
            p - WGS84_E2 * WGS84_A_M * np.cos(theta) ** 3,
        )
    )
    alt = p / np.cos(lat) - _prime_vertical_radius_m(lat)
    for _ in range(5):
        n = _prime_vertical_radius_m(lat)
        alt = p / np.cos(lat) - n
        refined = float(np.arctan2(z_m, p * (1.0 - WGS84_E2 * n / (n + alt))))
        done = abs(refined - lat) < 1e-12
        lat = refined
        if done:
            break
    alt = p / np.cos(lat) - _prime_vertical_radius_m(lat)
    return float(np.rad2deg(lat)), float(np.rad2deg(lon)), float(alt)


def ecef_to_enu_matrix(lat_deg: float, lon_deg: float) -> np.ndarray:
    """Return the rotation from ECEF deltas to local East/North/Up."""

    lat = np.deg2rad(lat_deg)
    lon = np.deg2rad(lon_deg)
    sin_lat, cos_lat = np.sin(lat), np.cos(lat)
    sin_lon, cos_lon = np.sin(lon), np.cos(lon)
    return np.array(
        [
            [-sin_lon, cos_lon, 0.0],
            [-sin_lat * cos_lon, -sin_lat * sin_lon, cos_lat],
            [cos_lat * cos_lon, cos_lat * sin_lon, sin_lat],
        ],
        dtype=float,
    )
