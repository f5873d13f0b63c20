"""
Stitches per-leg routes from the routing provider into one continuous route.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ...config.planner_config import PlannerConfig
from ...data.distance_utils import get_path_bounds, path_length_km
from ...data.models import BoundingBox, GeoPoint, Leg, LegRoute
from ...exceptions import RoutingError
from ...providers.base import RoutingProvider

logger = logging.getLogger(__name__)


@dataclass
class AssembledRoute:
    """Merged geometry, guidance and totals for a leg sequence."""
    path: List[GeoPoint]
    instructions: List[str]
    total_distance_km: float
    total_duration_minutes: int
    bounds: BoundingBox
    leg_routes: List[LegRoute] = field(default_factory=list)
    totals_from_provider: bool = True
    calculation_time: Optional[float] = None


def merge_leg_routes(leg_routes: Sequence[LegRoute]) -> Tuple[List[GeoPoint], List[str]]:
    """
    Concatenate leg geometry and instructions in leg order.

    The routing provider always starts a leg's path at the leg origin, which
    is the previous leg's last point, so the first point of every leg after
    the first one is dropped. Instructions are kept as they are.

    Args:
        leg_routes: Leg results ordered by leg index

    Returns:
        (path, instructions)
    """
    path: List[GeoPoint] = []
    instructions: List[str] = []

    for index, leg_route in enumerate(leg_routes):
        leg_path = leg_route.path if index == 0 else leg_route.path[1:]
        path.extend(leg_path)
        instructions.extend(leg_route.instructions)

    return path, instructions


class RouteAssembler:
    """
    Turn a leg sequence into one route by calling the routing provider per leg.

    Legs are fetched sequentially by default. With ``parallel_leg_fetch``
    enabled they are fetched on a thread pool and put back in leg order
    before merging.
    """

    def __init__(self, routing_provider: RoutingProvider, config: Optional[PlannerConfig] = None):
        """
        Initialize route assembler.

        Args:
            routing_provider: Service that routes a single leg
            config: Planner configuration (padding, speeds, fetch mode)
        """
        self.routing_provider = routing_provider
        self.config = config or PlannerConfig()
        self.config.validate()

    def assemble(self, legs: Sequence[Leg], start: Optional[GeoPoint] = None,
                 end: Optional[GeoPoint] = None) -> AssembledRoute:
        """
        Fetch and merge all legs.

        Args:
            legs: Ordered legs; the first starts at ``start`` and the last ends at ``end``
            start: Route start used for the bounds (defaults to first leg origin)
            end: Route end used for the bounds (defaults to last leg destination)

        Returns:
            AssembledRoute

        Raises:
            RoutingError: If any leg fails; no partial route is returned
        """
        if not legs:
            raise ValueError("At least one leg is required to assemble a route")

        start = start or legs[0].origin
        end = end or legs[-1].destination
        start_time = time.time()

        leg_routes = self._fetch_legs(legs)
        path, instructions = merge_leg_routes(leg_routes)
        total_distance_km, total_duration_minutes, from_provider = self._compute_totals(leg_routes, path)
        bounds = get_path_bounds(path, start, end, padding_deg=self.config.bounds_padding_deg)

        elapsed = time.time() - start_time
        logger.info(f"Assembled {len(legs)} leg(s): {len(path)} points, {len(instructions)} instructions, "
                    f"{total_distance_km:.1f} km, {total_duration_minutes} min ({elapsed * 1000:.0f}ms)")

        return AssembledRoute(
            path=path,
            instructions=instructions,
            total_distance_km=total_distance_km,
            total_duration_minutes=total_duration_minutes,
            bounds=bounds,
            leg_routes=leg_routes,
            totals_from_provider=from_provider,
            calculation_time=elapsed
        )

    def _fetch_legs(self, legs: Sequence[Leg]) -> List[LegRoute]:
        if not self.config.parallel_leg_fetch or len(legs) == 1:
            return [self._fetch_leg(index, leg) for index, leg in enumerate(legs)]

        workers = min(self.config.max_fetch_workers, len(legs))
        logger.debug(f"Fetching {len(legs)} legs on {workers} workers")
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # map yields in submission order, i.e. by leg index
            return list(executor.map(self._fetch_leg, range(len(legs)), legs))

    def _fetch_leg(self, index: int, leg: Leg) -> LegRoute:
        logger.debug(f"Routing leg {index}: {leg.origin.as_tuple()} -> {leg.destination.as_tuple()}")
        try:
            leg_route = self.routing_provider.route_leg(leg.origin, leg.destination)
        except RoutingError as e:
            if e.leg_index is None:
                e.leg_index = index
            raise
        except Exception as e:
            raise RoutingError(f"Routing provider failed: {e}", leg_index=index) from e

        if leg_route is None or not leg_route.path:
            raise RoutingError("Routing provider returned an empty path", leg_index=index)
        return leg_route

    def _compute_totals(self, leg_routes: Sequence[LegRoute],
                        path: Sequence[GeoPoint]) -> Tuple[float, int, bool]:
        """
        Sum provider totals, or derive them from the geometry if any leg lacks them.

        Returns:
            (distance_km, duration_minutes, from_provider)
        """
        if all(r.distance_km is not None and r.duration_minutes is not None for r in leg_routes):
            distance = sum(r.distance_km for r in leg_routes)
            duration = sum(int(r.duration_minutes) for r in leg_routes)
            return float(distance), duration, True

        logger.debug("Provider totals missing, deriving from route geometry")
        distance = path_length_km(path)
        duration = int(round(distance / self.config.average_speed_kmh * 60))
        return distance, duration, False
