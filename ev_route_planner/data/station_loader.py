"""
Charging station loader for GeoJSON station files.
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional

from .models import BoundingBox, ChargingStation, GeoPoint

logger = logging.getLogger(__name__)


def station_from_feature(feature: Dict[str, Any]) -> Optional[ChargingStation]:
    """
    Convert a GeoJSON Point feature into a ChargingStation.

    Args:
        feature: GeoJSON feature dictionary

    Returns:
        ChargingStation, or None if the feature is not a usable point
    """
    geometry = feature.get('geometry') or {}
    if geometry.get('type') != 'Point':
        return None

    coords = geometry.get('coordinates') or []
    if len(coords) < 2:
        return None

    # GeoJSON stores (lon, lat)
    lon, lat = coords[0], coords[1]
    if not isinstance(lat, (int, float)) or not isinstance(lon, (int, float)):
        return None

    properties = feature.get('properties') or {}
    attributes = {str(key): value for key, value in properties.items()}
    return ChargingStation(GeoPoint(float(lat), float(lon)), attributes)


def load_stations(data_path: str, region: Optional[BoundingBox] = None) -> List[ChargingStation]:
    """
    Load charging stations from a GeoJSON FeatureCollection.

    Args:
        data_path: Path to the GeoJSON station file
        region: Optional box; stations outside it are dropped

    Returns:
        List of charging stations

    Raises:
        FileNotFoundError: If the station file is missing
        ValueError: If the file is not a GeoJSON FeatureCollection
    """
    if not os.path.exists(data_path):
        raise FileNotFoundError(f"Station data file not found: {data_path}")

    logger.info(f"Loading charging stations from: {data_path}")

    try:
        with open(data_path, 'r') as f:
            station_data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON format in station data file: {e}")

    if 'features' not in station_data:
        raise ValueError("Station data must be in GeoJSON format with 'features' key")

    stations = []
    skipped = 0
    for feature in station_data['features']:
        station = station_from_feature(feature)
        if station is None:
            skipped += 1
            continue
        if region is not None and not region.contains(station.location):
            continue
        stations.append(station)

    if skipped:
        logger.warning(f"Skipped {skipped} features without point geometry")
    logger.info(f"Loaded {len(stations)} charging stations")
    return stations
