"""
Data types and utilities for EV route planning.

This module contains:
- Value types (GeoPoint, ChargingStation, Leg, RoutePlan, ...)
- Distance calculations
- Station file loading
- Vehicle range helpers
"""

from .models import (
    GeoPoint,
    ChargingStation,
    Leg,
    LegRoute,
    BoundingBox,
    PlanStatus,
    PlanningRequest,
    RoutePlan,
    WARNING_INSUFFICIENT_RANGE,
    WARNING_DIRECTORY_UNAVAILABLE
)
from .distance_utils import distance_km, is_near, path_length_km, stations_near_path, get_path_bounds
from .station_loader import load_stations
from .vehicle import usable_range_km, battery_status, estimate_charging_cost, BatteryStatus

__all__ = [
    'GeoPoint',
    'ChargingStation',
    'Leg',
    'LegRoute',
    'BoundingBox',
    'PlanStatus',
    'PlanningRequest',
    'RoutePlan',
    'WARNING_INSUFFICIENT_RANGE',
    'WARNING_DIRECTORY_UNAVAILABLE',
    'distance_km',
    'is_near',
    'path_length_km',
    'stations_near_path',
    'get_path_bounds',
    'load_stations',
    'usable_range_km',
    'battery_status',
    'estimate_charging_cost',
    'BatteryStatus'
]
