import math

import numpy as np
import pytest

from ev_route_planner.data.distance_utils import (
    distance_km,
    get_path_bounds,
    haversine_distance,
    haversine_to_many,
    is_near,
    path_length_km,
    stations_near_path
)
from ev_route_planner.data.models import KM_PER_DEGREE, BoundingBox, ChargingStation, GeoPoint


def test_one_degree_at_equator():
    assert haversine_distance(0, 0, 0, 1) == pytest.approx(111.195, abs=0.01)
    assert KM_PER_DEGREE == pytest.approx(111.195, abs=0.01)


def test_distance_is_symmetric_and_zero_on_self():
    berlin = GeoPoint(52.52, 13.405)
    munich = GeoPoint(48.1351, 11.582)
    assert distance_km(berlin, munich) == pytest.approx(distance_km(munich, berlin))
    assert distance_km(berlin, berlin) == 0.0
    assert distance_km(berlin, munich) == pytest.approx(504, abs=5)


def test_antipodal_points_are_half_circumference():
    assert haversine_distance(0, 0, 0, 180) == pytest.approx(math.pi * 6371.0)


def test_haversine_to_many_matches_scalar():
    origin = GeoPoint(10.0, 20.0)
    lats = np.array([10.0, 11.0, -5.0])
    lngs = np.array([20.0, 21.0, 40.0])
    result = haversine_to_many(origin, lats, lngs)
    expected = [haversine_distance(10.0, 20.0, lat, lng) for lat, lng in zip(lats, lngs)]
    assert result == pytest.approx(expected)


def test_is_near_checks_vertices_only():
    path = [GeoPoint(0, 0), GeoPoint(0, 1)]
    assert is_near(GeoPoint(0.05, 0.0), path)
    assert not is_near(GeoPoint(0.5, 0.5), path)
    # Midway between two far-apart vertices, close to the segment but not to a vertex
    assert not is_near(GeoPoint(0.0, 0.5), path, threshold_km=10.0)


def test_is_near_empty_path():
    assert not is_near(GeoPoint(0, 0), [])


def test_path_length():
    assert path_length_km([]) == 0.0
    assert path_length_km([GeoPoint(0, 0)]) == 0.0
    path = [GeoPoint(0, 0), GeoPoint(0, 1), GeoPoint(0, 2)]
    assert path_length_km(path) == pytest.approx(2 * haversine_distance(0, 0, 0, 1))


def test_stations_near_path_sorted():
    path = [GeoPoint(0, 0), GeoPoint(0, 1)]
    stations = [
        ChargingStation.at(0.02, 1.0),
        ChargingStation.at(-0.02, 0.0),
        ChargingStation.at(3.0, 3.0),
    ]
    near = stations_near_path(stations, path, threshold_km=10.0)
    assert [s.location for s in near] == [GeoPoint(-0.02, 0.0), GeoPoint(0.02, 1.0)]


def test_path_bounds_include_start_and_end():
    path = [GeoPoint(1.0, 1.0), GeoPoint(2.0, 2.0)]
    bounds = get_path_bounds(path, GeoPoint(0.0, 0.5), GeoPoint(2.5, 3.0), padding_deg=0.05)
    assert (bounds.south, bounds.west, bounds.north, bounds.east) == pytest.approx((-0.05, 0.45, 2.55, 3.05))


def test_bounding_box_requires_points():
    with pytest.raises(ValueError):
        BoundingBox.from_points([])


def test_padded_km_grows_box():
    box = BoundingBox.from_points([GeoPoint(10, 10), GeoPoint(11, 11)])
    padded = box.padded_km(20.0)
    assert padded.south < box.south and padded.north > box.north
    assert padded.west < box.west and padded.east > box.east
    assert box.north - box.south == pytest.approx(1.0)
    assert padded.contains(GeoPoint(10.5, 10.5))
    assert padded.center().as_tuple() == pytest.approx((10.5, 10.5))


def test_snapped_box_grows_to_grid():
    box = BoundingBox(0.1, -0.2, 0.6, 0.3)
    assert box.snapped(0.5) == BoundingBox(0.0, -0.5, 1.0, 0.5)
    assert box.snapped(0) == box

    # Grid-aligned boxes are unchanged; the poles and antimeridian clamp
    assert BoundingBox(0, 0, 1, 1).snapped(0.5) == BoundingBox(0, 0, 1, 1)
    assert BoundingBox(89.9, 179.9, 89.95, 179.95).snapped(7.0) == BoundingBox(84.0, 175.0, 90.0, 180.0)
