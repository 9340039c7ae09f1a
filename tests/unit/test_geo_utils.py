from __future__ import annotations

import pytest

from src.domain.algorithms.geo_utils import haversine_distance_km, haversine_distance_m
from src.domain.models.geo import GeoPoint


def test_haversine_zero_for_identical_points() -> None:
    p = GeoPoint(lat=32.86, lon=-117.22)
    assert haversine_distance_m(p, p) == 0.0


def test_haversine_is_symmetric_and_reasonable_scale() -> None:
    # Rough sanity check: 1 degree of latitude is about 111km.
    a = GeoPoint(lat=0.0, lon=0.0)
    b = GeoPoint(lat=1.0, lon=0.0)

    d1 = haversine_distance_m(a, b)
    d2 = haversine_distance_m(b, a)

    assert abs(d1 - d2) < 1e-6
    assert 100_000.0 < d1 < 120_000.0


def test_haversine_km_matches_meters() -> None:
    a = GeoPoint(lat=0.0, lon=0.0)
    b = GeoPoint(lat=0.0, lon=1.0)

    assert haversine_distance_km(a, b) == pytest.approx(haversine_distance_m(a, b) / 1000.0)


def test_haversine_handles_antipodal_points() -> None:
    a = GeoPoint(lat=0.0, lon=0.0)
    b = GeoPoint(lat=0.0, lon=180.0)

    # Half the circumference, roughly 20015 km.
    assert 20_000.0 < haversine_distance_km(a, b) < 20_030.0
