"""
Charging-station directory clients.
"""

import logging
import re
from typing import Any, Dict, FrozenSet, List, Optional

import requests

from ..data.models import BoundingBox, ChargingStation, GeoPoint
from ..data.station_loader import load_stations
from ..exceptions import DirectoryError
from .base import DirectoryProvider

logger = logging.getLogger(__name__)

# "0.39 EUR/kWh", "$0.45 per kWh"
PRICE_PER_KWH_PATTERN = re.compile(r"(\d+(?:[.,]\d+)?)\s*[^\d\s]*\s*(?:/|per)\s*kwh", re.IGNORECASE)


class OpenChargeMapDirectory(DirectoryProvider):
    """Station directory backed by the Open Charge Map POI API."""

    def __init__(self, base_url: str, api_key: str = "", timeout: float = 15.0,
                 max_results: int = 500):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout
        self.max_results = max_results

    def fetch_stations(self, region: BoundingBox) -> FrozenSet[ChargingStation]:
        params = {
            "output": "json",
            "boundingbox": f"({region.south},{region.west}),({region.north},{region.east})",
            "maxresults": self.max_results,
            "verbose": "false",
        }
        if self.api_key:
            params["key"] = self.api_key

        logger.info(f"Fetching charging stations for region {region.as_dict()}")
        try:
            response = requests.get(f"{self.base_url}/poi/", params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise DirectoryError(f"Station directory request failed: {e}") from e
        except ValueError as e:
            raise DirectoryError("Station directory returned invalid JSON") from e

        if not isinstance(payload, list):
            raise DirectoryError("Station directory returned an unexpected payload")

        stations = [station for station in (self.parse_poi(poi) for poi in payload) if station is not None]
        logger.info(f"Directory returned {len(stations)} stations")
        return frozenset(stations)

    @staticmethod
    def parse_poi(poi: Dict[str, Any]) -> Optional[ChargingStation]:
        """Convert one Open Charge Map POI into a ChargingStation (None if it has no position)."""
        address = poi.get("AddressInfo") or {}
        lat = address.get("Latitude")
        lng = address.get("Longitude")
        if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
            return None

        connectors: List[str] = []
        for connection in poi.get("Connections") or []:
            title = (connection.get("ConnectionType") or {}).get("Title")
            if title and title not in connectors:
                connectors.append(title)

        attributes = {
            "name": address.get("Title") or "",
            "operator": (poi.get("OperatorInfo") or {}).get("Title") or "",
            "address": ", ".join(part for part in (address.get("AddressLine1"), address.get("Town")) if part),
            "connectors": ", ".join(connectors),
            "usage_cost": poi.get("UsageCost") or "",
            "directory_id": str(poi.get("ID", "")),
            "operational_status": OpenChargeMapDirectory.parse_status(poi.get("StatusType")),
        }
        price = OpenChargeMapDirectory.parse_price_per_kwh(poi.get("UsageCost"))
        if price is not None:
            attributes["price_per_kwh"] = price
        return ChargingStation(GeoPoint(float(lat), float(lng)), attributes)

    @staticmethod
    def parse_status(status_type: Optional[Dict[str, Any]]) -> str:
        """Map an Open Charge Map StatusType onto operational, offline or unknown."""
        if not status_type or status_type.get("IsOperational") is None:
            return "unknown"
        return "operational" if status_type["IsOperational"] else "offline"

    @staticmethod
    def parse_price_per_kwh(usage_cost: Optional[str]) -> Optional[float]:
        """Pull a per-kWh price out of the free-text UsageCost field, if it has one."""
        if not usage_cost:
            return None
        match = PRICE_PER_KWH_PATTERN.search(usage_cost)
        if match is None:
            return None
        return float(match.group(1).replace(",", "."))


class GeoJSONStationDirectory(DirectoryProvider):
    """Station directory read from a local GeoJSON file."""

    def __init__(self, data_path: str):
        self.data_path = data_path

    def fetch_stations(self, region: BoundingBox) -> FrozenSet[ChargingStation]:
        try:
            return frozenset(load_stations(self.data_path, region))
        except (OSError, ValueError) as e:
            raise DirectoryError(f"Could not read station file: {e}") from e
