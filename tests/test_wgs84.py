import numpy as np

from gnss_outlier.utils.angles import elev_az_from_rx_sv, unit_vector_from_look_angle
from gnss_outlier.utils.wgs84 import ecef_to_enu_matrix, ecef_to_lla, lla_to_ecef


def test_lla_to_ecef_equator_prime_meridian() -> None:
    ecef = lla_to_ecef(0.0, 0.0, 0.0)
    assert np.allclose(ecef, [6_378_137.0, 0.0, 0.0])


def test_lla_ecef_roundtrip() -> None:
    ecef = lla_to_ecef(36.597383, -121.874300, 14.0)
    lat_rt, lon_rt, alt_rt = ecef_to_lla(*ecef)

    assert np.isclose(lat_rt, 36.597383, atol=1e-6)
    assert np.isclose(lon_rt, -121.874300, atol=1e-6)
    assert np.isclose(alt_rt, 14.0, atol=1e-3)


def test_ecef_to_lla_at_pole() -> None:
    lat_deg, _, alt_m = ecef_to_lla(0.0, 0.0, 6_356_752.3142)
    assert np.isclose(lat_deg, 90.0)
    assert abs(alt_m) < 1e-3


def test_enu_matrix_is_orthonormal() -> None:
    rot = ecef_to_enu_matrix(37.0, -122.0)
    assert np.allclose(rot @ rot.T, np.eye(3))


def test_elevation_overhead() -> None:
    pos_rx = lla_to_ecef(0.0, 0.0, 0.0)
    pos_sv = lla_to_ecef(0.0, 0.0, 20_200_000.0)

    elev_deg, az_deg = elev_az_from_rx_sv(pos_rx, pos_sv)

    assert elev_deg > 89.9
    assert 0.0 <= az_deg < 360.0


def test_unit_vector_from_look_angle() -> None:
    assert np.allclose(unit_vector_from_look_angle(0.0, 90.0), [0.0, 0.0, 1.0])
    assert np.allclose(unit_vector_from_look_angle(90.0, 0.0), [0.0, 1.0, 0.0])
    assert np.allclose(unit_vector_from_look_angle(180.0, 0.0), [-1.0, 0.0, 0.0])
