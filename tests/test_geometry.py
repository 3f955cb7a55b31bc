import numpy as np
import pytest

from gnss_outlier.sat import (
    ConstellationConfig,
    ConstellationGeometryProvider,
    EphemerisGeometryProvider,
    FixedGeometryProvider,
    LookAngleGeometryProvider,
    position_from_look_angle,
)
from gnss_outlier.utils.angles import elev_az_from_rx_sv, look_angle_from_offset
from gnss_outlier.utils.wgs84 import lla_to_ecef

TRUTH = np.array([1000.0, 1000.0, 1000.0])


def test_look_angle_provider_bounds() -> None:
    geometries = LookAngleGeometryProvider().get_geometries(50, TRUTH, np.random.default_rng(0))
    assert [g.sat_id for g in geometries] == list(range(50))
    for geom in geometries:
        distance = float(np.linalg.norm(geom.pos_m - TRUTH))
        assert 19_700.0 <= distance <= 20_700.0
        assert 0.0 <= geom.az_deg < 360.0
        assert 0.0 < geom.elev_deg < 90.0
        az_deg, elev_deg = look_angle_from_offset(geom.pos_m - TRUTH)
        assert az_deg == pytest.approx(geom.az_deg, abs=1e-9)
        assert elev_deg == pytest.approx(geom.elev_deg, abs=1e-9)


def test_look_angle_provider_rejects_bad_bounds() -> None:
    with pytest.raises(ValueError):
        LookAngleGeometryProvider(min_elev_deg=50.0, max_elev_deg=10.0)
    with pytest.raises(ValueError):
        LookAngleGeometryProvider(min_elev_deg=0.0, max_elev_deg=0.0)


def test_overhead_satellite_position() -> None:
    pos = position_from_look_angle(TRUTH, 0.0, 90.0, 20_200.0)
    assert np.allclose(pos, [1000.0, 1000.0, 21_200.0])


def test_fixed_provider_returns_requested_prefix() -> None:
    provider = FixedGeometryProvider([(0.0, 90.0), (0.0, 0.0), (90.0, 0.0)], distance_m=100.0)
    geometries = provider.get_geometries(2, TRUTH, np.random.default_rng(0))
    assert len(geometries) == 2
    assert np.allclose(geometries[1].pos_m, [1100.0, 1000.0, 1000.0])
    with pytest.raises(ValueError):
        provider.get_geometries(4, TRUTH, np.random.default_rng(0))


def test_ephemeris_provider_derives_look_angles() -> None:
    provider = EphemerisGeometryProvider([TRUTH + np.array([0.0, 500.0, 500.0])])
    (geom,) = provider.get_geometries(1, TRUTH, np.random.default_rng(0))
    assert geom.az_deg == pytest.approx(90.0)
    assert geom.elev_deg == pytest.approx(45.0)


def test_ephemeris_provider_drops_satellites_below_horizon() -> None:
    positions = [
        TRUTH + np.array([0.0, 0.0, 20_000.0]),
        TRUTH + np.array([20_000.0, 0.0, -500.0]),
        TRUTH + np.array([0.0, 20_000.0, 0.0]),
        TRUTH + np.array([-10_000.0, 0.0, 10_000.0]),
    ]
    provider = EphemerisGeometryProvider(positions)
    geometries = provider.get_geometries(2, TRUTH, np.random.default_rng(0))
    assert [g.sat_id for g in geometries] == [0, 3]
    assert all(g.elev_deg > 0.0 for g in geometries)
    with pytest.raises(ValueError):
        provider.get_geometries(3, TRUTH, np.random.default_rng(0))


def test_constellation_provider_masks_and_sorts_by_elevation() -> None:
    receiver = lla_to_ecef(36.597383, -121.874300, 14.0)
    provider = ConstellationGeometryProvider()
    geometries = provider.get_geometries(6, receiver, np.random.default_rng(7))
    assert len(geometries) == 6
    elevations = [geom.elev_deg for geom in geometries]
    assert elevations == sorted(elevations, reverse=True)
    for geom in geometries:
        assert geom.elev_deg > 5.0
        elev_deg, az_deg = elev_az_from_rx_sv(receiver, geom.pos_m)
        assert elev_deg == pytest.approx(geom.elev_deg)
        assert az_deg == pytest.approx(geom.az_deg)
        assert 20_000_000.0 < np.linalg.norm(geom.pos_m - receiver) < 26_000_000.0


def test_constellation_provider_returns_fewer_when_mask_hides_satellites(caplog: pytest.LogCaptureFixture) -> None:
    receiver = lla_to_ecef(36.597383, -121.874300, 14.0)
    provider = ConstellationGeometryProvider(ConstellationConfig(elevation_mask_deg=10.0))
    with caplog.at_level("WARNING"):
        geometries = provider.get_geometries(24, receiver, np.random.default_rng(7))
    assert 0 < len(geometries) < 24
    assert all(geom.elev_deg > 10.0 for geom in geometries)
    assert "above the mask" in caplog.text


def test_constellation_seed_repeatability() -> None:
    receiver = lla_to_ecef(0.0, 0.0, 0.0)
    provider = ConstellationGeometryProvider()
    ids_a = [g.sat_id for g in provider.get_geometries(8, receiver, np.random.default_rng(123))]
    ids_b = [g.sat_id for g in provider.get_geometries(8, receiver, np.random.default_rng(123))]
    assert ids_a == ids_b
