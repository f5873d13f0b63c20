"""
Interfaces for the external routing and station-directory services.
"""

from abc import ABC, abstractmethod
from typing import FrozenSet

from ..data.models import BoundingBox, ChargingStation, GeoPoint, LegRoute


class RoutingProvider(ABC):
    """Turn-by-turn routing service, one request per leg."""

    @abstractmethod
    def route_leg(self, origin: GeoPoint, destination: GeoPoint) -> LegRoute:
        """
        Route a single leg.

        Args:
            origin: Leg start
            destination: Leg end

        Returns:
            LegRoute whose path starts at the origin

        Raises:
            RoutingError: On network failure, non-success response, or an
                empty/missing path
        """
        pass


class DirectoryProvider(ABC):
    """Charging-station directory."""

    @abstractmethod
    def fetch_stations(self, region: BoundingBox) -> FrozenSet[ChargingStation]:
        """
        Fetch the stations inside a region.

        An empty result is valid and means the region has no stations.

        Raises:
            DirectoryError: On network failure or an unreadable response
        """
        pass
