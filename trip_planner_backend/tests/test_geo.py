"""
Unit tests for great-circle distance.
"""

import math
import pytest

from trip_planner_backend.app.services.geo import GeoPoint, distance_between, haversine_distance

POINTS = [
    (10.0, 20.0),
    (10.7769, 106.7009),   # Ho Chi Minh City
    (21.0285, 105.8542),   # Hanoi
    (-33.8688, 151.2093),  # Sydney
    (51.5074, -0.1278),    # London
    (89.9, 179.9),
    (-89.9, -179.9),
]


@pytest.mark.parametrize("a", POINTS)
@pytest.mark.parametrize("b", POINTS)
def test_haversine_is_symmetric(a, b):
    assert haversine_distance(a[0], a[1], b[0], b[1]) == haversine_distance(b[0], b[1], a[0], a[1])


@pytest.mark.parametrize("point", POINTS)
def test_distance_to_itself_is_zero(point):
    assert haversine_distance(point[0], point[1], point[0], point[1]) == 0.0


def test_known_distance_paris_london():
    # Paris (48.8566, 2.3522) to London (51.5074, -0.1278) is about 343.5 km
    distance = haversine_distance(48.8566, 2.3522, 51.5074, -0.1278)
    assert distance == pytest.approx(343.5, abs=1.0)


def test_one_degree_of_latitude():
    assert haversine_distance(0.0, 0.0, 1.0, 0.0) == pytest.approx(2 * math.pi * 6371.0 / 360, rel=1e-9)


def test_antipodal_points_are_half_circumference_apart():
    assert haversine_distance(0.0, 0.0, 0.0, 180.0) == pytest.approx(math.pi * 6371.0, rel=1e-9)


def test_near_antipodal_points_do_not_fail():
    distance = haversine_distance(7.33639367185711, 138.17895383110454, -7.33639367185711, 318.17895383110454)

    assert distance == pytest.approx(math.pi * 6371.0, rel=1e-6)


@pytest.mark.parametrize("latitude", [-60.0, -7.3, 0.0, 12.5, 45.0, 89.0])
@pytest.mark.parametrize("longitude", [-179.5, -33.3, 0.0, 138.17, 179.9])
def test_opposite_points_are_half_circumference_apart(latitude, longitude):
    distance = haversine_distance(latitude, longitude, -latitude, longitude + 180.0)

    assert distance == pytest.approx(math.pi * 6371.0, rel=1e-6)


def test_nan_input_propagates():
    assert math.isnan(haversine_distance(float("nan"), 0.0, 0.0, 0.0))


def test_distance_between_geopoints():
    hcmc = GeoPoint(10.7769, 106.7009)
    hanoi = GeoPoint(21.0285, 105.8542)
    assert distance_between(hcmc, hanoi) == haversine_distance(10.7769, 106.7009, 21.0285, 105.8542)
    assert distance_between(hcmc, hanoi) == pytest.approx(1140, abs=10)
