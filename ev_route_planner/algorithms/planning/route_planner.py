"""
Plans an EV trip: validates inputs, selects charging stops, assembles the route.
"""

import logging
import warnings
from typing import FrozenSet, Iterable, List, Optional

from ...config.planner_config import PlannerConfig
from ...data.distance_utils import stations_near_path
from ...data.models import (
    WARNING_DIRECTORY_UNAVAILABLE,
    WARNING_INSUFFICIENT_RANGE,
    ChargingStation,
    PlanningRequest,
    PlanStatus,
    RoutePlan
)
from ...data.vehicle import estimate_charging_cost
from ...exceptions import InfeasibleRouteWarning
from ...providers.base import RoutingProvider
from ..assembly.route_assembler import RouteAssembler
from ..selection.station_selector import SelectionResult, StationSelector
from ..selection.strategies import STRATEGY_CLASSES, SelectionStrategy

logger = logging.getLogger(__name__)


class RoutePlanner:
    """
    Main interface for EV route planning.

    Planning runs in two phases. Stop selection is pure and finishes before
    any network call; the assembler then routes each leg. The planner holds
    no per-request state, so the same request and pool always give the same
    stops.
    """

    def __init__(self, routing_provider: RoutingProvider, config: Optional[PlannerConfig] = None,
                 strategy: Optional[SelectionStrategy] = None):
        """
        Initialize the planner.

        Args:
            routing_provider: Service that routes a single leg
            config: Planner configuration
            strategy: Stop selection strategy (defaults to the one named in config)
        """
        self.config = config or PlannerConfig()
        self.config.validate()

        self.strategy = strategy or STRATEGY_CLASSES[self.config.selection_method]()
        self.selector = StationSelector(strategy=self.strategy, max_stops=self.config.max_stops)
        self.assembler = RouteAssembler(routing_provider, self.config)

        logger.info(f"RoutePlanner initialized (strategy: {self.strategy.name}, max stops: {self.config.max_stops})")

    def select_stops(self, request: PlanningRequest) -> SelectionResult:
        """
        Run stop selection only (no network calls).

        Raises:
            InvalidInputError: If the request is missing inputs or has a bad range
        """
        request.validate()
        return self.selector.select(request.start, request.end, float(request.usable_range_km),
                                    self.usable_stations(request.station_pool))

    def usable_stations(self, station_pool: Iterable[ChargingStation]) -> FrozenSet[ChargingStation]:
        """Drop stations the directory reports offline or under maintenance, if configured to."""
        pool = frozenset(station_pool)
        if not self.config.skip_non_operational:
            return pool
        usable = frozenset(s for s in pool if s.is_operational)
        if len(usable) < len(pool):
            logger.debug(f"Skipping {len(pool) - len(usable)} non-operational station(s)")
        return usable

    def plan(self, request: PlanningRequest) -> RoutePlan:
        """
        Plan a route with charging stops.

        Args:
            request: Planning inputs

        Returns:
            RoutePlan; status INFEASIBLE (plus an InfeasibleRouteWarning) when
            the destination cannot be reached within range

        Raises:
            InvalidInputError: Before any network call, for bad inputs
            RoutingError: If any leg cannot be routed
        """
        selection = self.select_stops(request)
        logger.info(f"Planning {len(selection.legs)} leg(s) with {len(selection.stops)} charging stop(s)")

        assembled = self.assembler.assemble(selection.legs, request.start, request.end)

        plan_warnings: List[str] = []
        status = PlanStatus.COMPLETE
        if not selection.feasible:
            status = PlanStatus.INFEASIBLE
            plan_warnings.append(WARNING_INSUFFICIENT_RANGE)
        if request.pool_unavailable:
            plan_warnings.append(WARNING_DIRECTORY_UNAVAILABLE)

        plan = RoutePlan(
            path=assembled.path,
            instructions=assembled.instructions,
            selected_stops=list(selection.stops),
            total_distance_km=assembled.total_distance_km,
            total_duration_minutes=assembled.total_duration_minutes,
            legs=list(selection.legs),
            bounds=assembled.bounds,
            status=status,
            warnings=plan_warnings,
            charging_time_minutes=len(selection.stops) * self.config.charging_stop_minutes,
            total_cost=estimate_charging_cost(selection.stops, request.battery_capacity_kwh,
                                              self.config.charge_target_fraction)
        )

        if status == PlanStatus.INFEASIBLE:
            message = (f"Insufficient range: destination is {selection.remaining_distance_km:.1f} km "
                       f"from the last reachable point with {float(request.usable_range_km):.1f} km of range")
            if request.pool_unavailable:
                message += " (station directory unavailable)"
            logger.warning(message)
            warnings.warn(message, InfeasibleRouteWarning, stacklevel=2)

        return plan

    def stations_along_route(self, plan: RoutePlan, station_pool: Iterable[ChargingStation],
                             threshold_km: Optional[float] = None) -> List[ChargingStation]:
        """
        Stations near the planned path, for display.

        Args:
            plan: Assembled plan
            station_pool: Stations to filter
            threshold_km: Proximity radius (defaults to config)

        Returns:
            Stations within the radius of at least one path vertex
        """
        if threshold_km is None:
            threshold_km = self.config.near_route_threshold_km
        return stations_near_path(station_pool, plan.path, threshold_km)
