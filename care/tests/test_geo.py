import math

import pytest

from care.services.geo import EARTH_RADIUS_KM, haversine_km


def test_identity_is_zero():
    assert haversine_km(12.97, 77.59, 12.97, 77.59) == 0.0


def test_symmetry():
    a = haversine_km(28.6139, 77.2090, 19.0760, 72.8777)
    b = haversine_km(19.0760, 72.8777, 28.6139, 77.2090)
    assert a == pytest.approx(b)


def test_known_distance_delhi_mumbai():
    assert haversine_km(28.6139, 77.2090, 19.0760, 72.8777) == pytest.approx(1150, abs=10)


def test_one_degree_of_longitude_on_equator():
    assert haversine_km(0, 0, 0, 1) == pytest.approx(2 * math.pi * EARTH_RADIUS_KM / 360, rel=1e-9)


def test_antipodes_do_not_raise():
    assert haversine_km(0, 0, 0, 180) == pytest.approx(math.pi * EARTH_RADIUS_KM)


def test_nan_propagates():
    assert math.isnan(haversine_km(float('nan'), 0, 0, 0))


def test_out_of_range_input_returns_a_number():
    assert math.isfinite(haversine_km(500, 1000, -300, 0))


def test_infinite_input_yields_nan():
    assert math.isnan(haversine_km(float('inf'), 0, 0, 0))
    assert math.isnan(haversine_km(0, 0, 0, float('-inf')))
