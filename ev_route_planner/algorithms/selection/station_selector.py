"""
Greedy charging-stop selection for range-constrained trips.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ...data.distance_utils import distance_km
from ...data.models import ChargingStation, GeoPoint, Leg
from .strategies import ProgressStrategy, SelectionStrategy

logger = logging.getLogger(__name__)

DEFAULT_MAX_STOPS = 3


@dataclass
class SelectionResult:
    """Chosen stops and the legs that connect them."""
    stops: List[ChargingStation]
    legs: List[Leg]
    feasible: bool = True
    remaining_distance_km: float = 0.0  # distance from the last stop (or start) to the destination
    iterations: int = 0

    @property
    def waypoints(self) -> List[GeoPoint]:
        if not self.legs:
            return []
        return [self.legs[0].origin] + [leg.destination for leg in self.legs]


@dataclass
class StationSelector:
    """
    Pick charging stops one at a time until the destination is within range.

    The search is greedy: every iteration filters the stations reachable from
    the current position and lets the strategy pick one. It never backtracks,
    so it does not minimise total distance or stop count. Each iteration is
    O(pool size) and there are at most ``max_stops`` iterations.
    """
    strategy: SelectionStrategy = field(default_factory=ProgressStrategy)
    max_stops: int = DEFAULT_MAX_STOPS

    def select(self, start: GeoPoint, end: GeoPoint, usable_range_km: float,
               station_pool: Iterable[ChargingStation]) -> SelectionResult:
        """
        Choose the charging stops for a trip.

        Args:
            start: Trip origin
            end: Trip destination
            usable_range_km: Distance the vehicle covers on one charge
            station_pool: Candidate stations (not modified)

        Returns:
            SelectionResult. When the destination is still out of range after
            the loop, ``feasible`` is False and the legs end with a forced leg
            to ``end``.
        """
        direct_distance = distance_km(start, end)
        if direct_distance <= usable_range_km:
            logger.info(f"Destination within range ({direct_distance:.1f} km <= {usable_range_km:.1f} km), no stops needed")
            return SelectionResult(
                stops=[],
                legs=[Leg(start, end)],
                feasible=True,
                remaining_distance_km=direct_distance
            )

        pool = list(station_pool)
        current = start
        chosen: List[ChargingStation] = []
        iterations = 0

        while distance_km(current, end) > usable_range_km and len(chosen) < self.max_stops:
            iterations += 1
            candidates = self._reachable_candidates(current, usable_range_km, pool, chosen)
            if not candidates:
                logger.warning(f"No reachable station from ({current.lat:.4f}, {current.lng:.4f}) "
                               f"after {len(chosen)} stop(s)")
                break

            next_stop: Optional[ChargingStation] = self.strategy.choose(candidates, current, end)
            if next_stop is None:
                logger.warning(f"Strategy '{self.strategy.name}' rejected all {len(candidates)} candidates")
                break

            logger.debug(f"Stop {len(chosen) + 1}: {next_stop.name} "
                         f"({distance_km(next_stop.location, end):.1f} km to destination)")
            chosen.append(next_stop)
            current = next_stop.location

        remaining = distance_km(current, end)
        feasible = remaining <= usable_range_km
        if not feasible:
            logger.warning(f"Destination still {remaining:.1f} km away with {usable_range_km:.1f} km range "
                           f"after {len(chosen)} stop(s); returning forced final leg")

        return SelectionResult(
            stops=chosen,
            legs=self._build_legs(start, end, chosen),
            feasible=feasible,
            remaining_distance_km=remaining,
            iterations=iterations
        )

    @staticmethod
    def _reachable_candidates(current: GeoPoint, usable_range_km: float,
                              pool: List[ChargingStation],
                              chosen: List[ChargingStation]) -> List[ChargingStation]:
        """Stations within range of the current position that are not already chosen."""
        return [
            station for station in pool
            if station not in chosen
            and distance_km(current, station.location) <= usable_range_km
        ]

    @staticmethod
    def _build_legs(start: GeoPoint, end: GeoPoint, stops: List[ChargingStation]) -> List[Leg]:
        waypoints = [start] + [stop.location for stop in stops] + [end]
        return [Leg(origin, destination) for origin, destination in zip(waypoints, waypoints[1:])]
