"""
GraphHopper routing client.

Sole responsibility: talk to the GraphHopper /route endpoint over HTTP and
normalize the response into a LegRoute. It contains no stop-selection or
assembly rules.
"""

import logging
from typing import Any, Dict, List

import requests

from ..data.models import GeoPoint, LegRoute
from ..exceptions import RoutingError
from .base import RoutingProvider

logger = logging.getLogger(__name__)


class GraphHopperRoutingProvider(RoutingProvider):
    """
    Routing provider backed by the GraphHopper Directions API.

    Coordinates are sent as ``point=lat,lng`` and geometry is requested
    unencoded, so the response carries ``[lng, lat]`` pairs.
    """

    def __init__(self, base_url: str, api_key: str, profile: str = "car",
                 timeout: float = 15.0, locale: str = "en"):
        """
        Initialize the GraphHopper client.

        Args:
            base_url: API root, e.g. https://graphhopper.com/api/1
            api_key: GraphHopper API key
            profile: Vehicle profile
            timeout: Seconds to wait for a response before giving up
            locale: Language of the turn instructions
        """
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.profile = profile
        self.timeout = timeout
        self.locale = locale

    def route_leg(self, origin: GeoPoint, destination: GeoPoint) -> LegRoute:
        if not self.api_key:
            raise RoutingError("Routing API key not configured (set ROUTING_API_KEY)")

        params = {
            "point": [f"{origin.lat},{origin.lng}", f"{destination.lat},{destination.lng}"],
            "profile": self.profile,
            "locale": self.locale,
            "calc_points": "true",
            "points_encoded": "false",
            "instructions": "true",
            "key": self.api_key,
        }

        logger.debug(f"Requesting route {origin.as_tuple()} -> {destination.as_tuple()}")
        try:
            response = requests.get(f"{self.base_url}/route", params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise RoutingError(f"Routing request failed: {e}") from e

        data = self._parse_json(response)
        if response.status_code != 200:
            raise RoutingError(f"Routing provider error ({response.status_code}): "
                               f"{data.get('message', 'Unknown error')}")

        return self.parse_route(data)

    @staticmethod
    def _parse_json(response: requests.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise RoutingError(f"Routing provider returned invalid JSON (status {response.status_code})") from e
        if not isinstance(data, dict):
            raise RoutingError("Routing provider returned an unexpected payload")
        return data

    @staticmethod
    def parse_route(data: Dict[str, Any]) -> LegRoute:
        """
        Normalize a GraphHopper /route payload.

        Returns:
            LegRoute with distance in km and duration in whole minutes

        Raises:
            RoutingError: If the payload has no path geometry
        """
        paths = data.get("paths") or []
        if not paths:
            raise RoutingError("No route found")

        best = paths[0]
        coordinates = (best.get("points") or {}).get("coordinates") or []
        path: List[GeoPoint] = []
        for coord in coordinates:
            if len(coord) >= 2:
                lng, lat = coord[0], coord[1]
                path.append(GeoPoint(float(lat), float(lng)))

        if not path:
            raise RoutingError("Routing provider returned an empty path")

        instructions = [str(item["text"]) for item in best.get("instructions") or [] if item.get("text")]

        distance_m = best.get("distance")
        time_ms = best.get("time")
        return LegRoute(
            path=path,
            instructions=instructions,
            distance_km=float(distance_m) / 1000.0 if distance_m is not None else None,
            duration_minutes=int(round(float(time_ms) / 60000.0)) if time_ms is not None else None
        )
