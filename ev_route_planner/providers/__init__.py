"""
External collaborators: routing service and charging-station directory.

This module contains:
- Provider interfaces
- HTTP clients (GraphHopper routing, Open Charge Map directory)
- File-backed station directory
- Station pool caching
"""

from .base import RoutingProvider, DirectoryProvider
from .graphhopper_client import GraphHopperRoutingProvider
from .station_directory import OpenChargeMapDirectory, GeoJSONStationDirectory
from .station_cache import StationPoolCache, StationPool

__all__ = [
    'RoutingProvider',
    'DirectoryProvider',
    'GraphHopperRoutingProvider',
    'OpenChargeMapDirectory',
    'GeoJSONStationDirectory',
    'StationPoolCache',
    'StationPool'
]
