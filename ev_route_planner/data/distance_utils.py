"""
Distance calculation utilities for route planning.
"""

import math
from typing import Iterable, List, Sequence

import numpy as np

from .models import BoundingBox, ChargingStation, GeoPoint

# Earth's radius in kilometers
EARTH_RADIUS_KM = 6371.0


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great circle distance between two points on Earth.

    Args:
        lat1, lon1: First point coordinates in degrees
        lat2, lon2: Second point coordinates in degrees

    Returns:
        Distance in kilometers
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (math.sin(delta_lat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2)
    # Rounding can push a a hair past 1 for antipodal points
    a = min(max(a, 0.0), 1.0)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_km(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two GeoPoints in kilometers."""
    return haversine_distance(a.lat, a.lng, b.lat, b.lng)


def haversine_to_many(point: GeoPoint, lats: np.ndarray, lngs: np.ndarray) -> np.ndarray:
    """
    Vectorized haversine from one point to arrays of coordinates.

    Args:
        point: Reference point
        lats: Latitudes in degrees
        lngs: Longitudes in degrees

    Returns:
        Array of distances in kilometers
    """
    lat1 = np.radians(point.lat)
    lat2 = np.radians(lats)
    delta_lat = lat2 - lat1
    delta_lon = np.radians(lngs) - np.radians(point.lng)

    a = np.sin(delta_lat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(delta_lon / 2) ** 2
    a = np.clip(a, 0.0, 1.0)
    return EARTH_RADIUS_KM * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


def is_near(point: GeoPoint, route_path: Sequence[GeoPoint], threshold_km: float = 10.0) -> bool:
    """
    Check whether any vertex of a route lies within threshold_km of a point.

    This samples path vertices only. A route whose closest approach falls
    between two distant vertices can be reported as not near.

    Args:
        point: Point to test (typically a charging station)
        route_path: Route geometry
        threshold_km: Maximum distance in kilometers

    Returns:
        True if at least one vertex is within the threshold
    """
    if not route_path:
        return False

    lats = np.fromiter((p.lat for p in route_path), dtype=float, count=len(route_path))
    lngs = np.fromiter((p.lng for p in route_path), dtype=float, count=len(route_path))
    return bool(np.any(haversine_to_many(point, lats, lngs) <= threshold_km))


def path_length_km(path: Sequence[GeoPoint]) -> float:
    """
    Sum of great-circle distances between consecutive path vertices.

    Args:
        path: Ordered route geometry

    Returns:
        Total length in kilometers (0 for fewer than two points)
    """
    if len(path) < 2:
        return 0.0

    coords = np.array([[p.lat, p.lng] for p in path], dtype=float)
    lat1 = np.radians(coords[:-1, 0])
    lat2 = np.radians(coords[1:, 0])
    delta_lat = lat2 - lat1
    delta_lon = np.radians(coords[1:, 1] - coords[:-1, 1])

    a = np.sin(delta_lat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(delta_lon / 2) ** 2
    a = np.clip(a, 0.0, 1.0)
    segments = EARTH_RADIUS_KM * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return float(segments.sum())


def stations_near_path(stations: Iterable[ChargingStation], route_path: Sequence[GeoPoint],
                       threshold_km: float = 10.0) -> List[ChargingStation]:
    """Return the stations that are near the route, ordered by latitude then longitude."""
    near = [station for station in stations
            if is_near(station.location, route_path, threshold_km)]
    return sorted(near, key=lambda s: (s.lat, s.lng))


def get_path_bounds(path: Sequence[GeoPoint], start: GeoPoint, end: GeoPoint,
                    padding_deg: float = 0.0) -> BoundingBox:
    """
    Get the display bounds of a route.

    Args:
        path: Route geometry
        start: Route start (always included)
        end: Route end (always included)
        padding_deg: Padding in degrees added on every side

    Returns:
        BoundingBox covering path, start and end
    """
    return BoundingBox.from_points([start, end, *path], padding_deg=padding_deg)
