"""
Service layer for the EV route planning API.
"""

import dataclasses
import logging
import threading
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

import geojson

from ev_route_planner.algorithms.planning.plan_state import PlanState, PlanStateContainer
from ev_route_planner.algorithms.planning.route_planner import RoutePlanner
from ev_route_planner.config.planner_config import PlannerConfig
from ev_route_planner.config.provider_settings import ProviderSettings
from ev_route_planner.data.models import (
    BoundingBox,
    ChargingStation,
    GeoPoint,
    PlanningRequest,
    PlanStatus,
    RoutePlan
)
from ev_route_planner.data.vehicle import battery_status, usable_range_km
from ev_route_planner.exceptions import InvalidInputError
from ev_route_planner.providers.base import DirectoryProvider, RoutingProvider
from ev_route_planner.providers.graphhopper_client import GraphHopperRoutingProvider
from ev_route_planner.providers.station_cache import StationPoolCache
from ev_route_planner.providers.station_directory import GeoJSONStationDirectory, OpenChargeMapDirectory
from api.schemas.planning import (
    BatteryStatusResponse,
    HealthResponse,
    PlanRequest,
    PlanResponse,
    PlanStateResponse,
    PlanStats,
    StationResponse,
    SubmitResponse
)

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


class EVRoutePlanningService:
    """
    Service class that provides EV route planning for the API.

    Owns the planner, the station pool cache and the plan state container.
    """

    def __init__(self, settings: Optional[ProviderSettings] = None,
                 config: Optional[PlannerConfig] = None,
                 routing_provider: Optional[RoutingProvider] = None,
                 directory: Optional[DirectoryProvider] = None):
        """
        Initialize the planning service.

        Args:
            settings: Provider endpoints and keys (defaults to environment)
            config: Planner configuration
            routing_provider: Override for the routing service
            directory: Override for the station directory
        """
        self.settings = settings or ProviderSettings.from_env()
        self.config = config or PlannerConfig.create_default_config()

        if routing_provider is None:
            routing_provider = GraphHopperRoutingProvider(
                self.settings.routing_base_url,
                self.settings.routing_api_key,
                profile=self.settings.routing_profile,
                timeout=self.settings.timeout_seconds
            )
        self.routing_configured = bool(self.settings.routing_api_key) or not isinstance(
            routing_provider, GraphHopperRoutingProvider)

        if directory is None:
            if self.settings.station_data_path:
                directory = GeoJSONStationDirectory(self.settings.station_data_path)
            else:
                directory = OpenChargeMapDirectory(
                    self.settings.directory_base_url,
                    self.settings.directory_api_key,
                    timeout=self.settings.timeout_seconds
                )
        self.station_source = "file" if isinstance(directory, GeoJSONStationDirectory) else "directory"

        self.planner = RoutePlanner(routing_provider, self.config)
        self.station_cache = StationPoolCache(directory, grid_deg=self.config.station_cache_grid_deg,
                                              max_regions=self.config.station_cache_max_regions)
        self.plan_state = PlanStateContainer(self.planner)

        # Request and pool of the latest submission, keyed by generation
        self._submissions: Dict[int, Tuple[PlanRequest, FrozenSet[ChargingStation]]] = {}
        self._submit_lock = threading.Lock()

        logger.info(f"Planning service initialized (stations from {self.station_source})")

    def get_health_status(self) -> HealthResponse:
        """Get the health status of the planning service."""
        return HealthResponse(
            status="healthy" if self.routing_configured else "degraded",
            version=API_VERSION,
            routing_configured=self.routing_configured,
            station_source=self.station_source,
            cached_regions=self.station_cache.get_cache_stats()['regions']
        )

    def plan_route(self, request: PlanRequest) -> PlanResponse:
        """
        Plan a route synchronously.

        Raises:
            InvalidInputError: For missing locations or range
            RoutingError: If a leg cannot be routed
        """
        planning_request = self.build_planning_request(request)
        plan = self.planner.plan(planning_request)
        return self._convert_to_response(plan, request, planning_request.station_pool)

    def submit(self, request: PlanRequest) -> SubmitResponse:
        """Start planning in the background, superseding earlier submissions."""
        planning_request = self.build_planning_request(request)
        with self._submit_lock:
            generation = self.plan_state.submit(planning_request)
            self._submissions = {generation: (request, planning_request.station_pool)}
        state = self.plan_state.current_plan()
        return SubmitResponse(generation=generation, status=state.status.value)

    def current_state(self) -> PlanStateResponse:
        """Get the state of the most recent submission."""
        return self._convert_state(self.plan_state.current_plan())

    def wait_for(self, generation: int, timeout: Optional[float] = None) -> PlanStateResponse:
        return self._convert_state(self.plan_state.wait(generation, timeout))

    def shutdown(self) -> None:
        self.plan_state.shutdown()

    def build_planning_request(self, request: PlanRequest) -> PlanningRequest:
        """
        Translate an API request into planner inputs.

        The usable range comes from ``usable_range_km`` or, failing that, the
        vehicle figures. The station pool is the explicit list if given,
        otherwise the directory snapshot for the trip region.
        """
        start = self._to_point(request.start)
        end = self._to_point(request.destination)

        range_km = request.usable_range_km
        if range_km is None and request.vehicle is not None:
            margin = request.vehicle.safety_margin or self.config.safety_margin
            range_km = usable_range_km(request.vehicle.battery_percentage,
                                       request.vehicle.rated_range_km, margin)

        capacity = request.vehicle.battery_capacity_kwh if request.vehicle is not None else None
        base = PlanningRequest(start=start, end=end, usable_range_km=range_km, battery_capacity_kwh=capacity)
        try:
            base.validate()
        except InvalidInputError as e:
            # Invalid requests never reach the station directory
            logger.debug(f"Skipping station lookup for invalid request: {e}")
            return base

        stations, unavailable = self._resolve_pool(request, start, end)
        return dataclasses.replace(base, station_pool=stations, pool_unavailable=unavailable)

    def _resolve_pool(self, request: PlanRequest, start: GeoPoint,
                      end: GeoPoint) -> Tuple[FrozenSet[ChargingStation], bool]:
        if request.stations is not None:
            return frozenset(
                ChargingStation.at(
                    s.latitude, s.longitude,
                    **{k: v for k, v in (('name', s.name), ('operator', s.operator),
                                         ('connectors', s.connectors), ('price_per_kwh', s.price_per_kwh),
                                         ('operational_status', s.operational_status)) if v is not None and v != ''}
                )
                for s in request.stations
            ), False

        region = BoundingBox.from_points([start, end]).padded_km(self.config.station_search_margin_km)
        pool = self.station_cache.get_pool(region)
        return pool.stations, pool.unavailable

    @staticmethod
    def _to_point(location) -> Optional[GeoPoint]:
        if location is None:
            return None
        return GeoPoint(location.latitude, location.longitude)

    def _convert_to_response(self, plan: RoutePlan, request: Optional[PlanRequest] = None,
                             station_pool: FrozenSet[ChargingStation] = frozenset()) -> PlanResponse:
        """
        Convert a RoutePlan to API response format.

        Args:
            plan: Planner result
            request: Original request (for battery status)
            station_pool: Pool the plan was built from

        Returns:
            Formatted PlanResponse
        """
        if plan.status == PlanStatus.INFEASIBLE:
            message = "Insufficient range: the destination cannot be reached with the available charging stops"
        elif plan.selected_stops:
            message = f"Route planned with {plan.stop_count} charging stop(s)"
        else:
            message = "Route planned, no charging stops needed"

        battery = None
        if request is not None and request.vehicle is not None:
            status = battery_status(plan.total_distance_km, request.vehicle.battery_percentage,
                                    request.vehicle.rated_range_km)
            battery = BatteryStatusResponse(
                trip_possible=status.trip_possible,
                remaining_percentage=status.remaining_percentage,
                extra_charge_needed_percentage=status.extra_charge_needed_percentage,
                message=status.message
            )

        nearby = self.planner.stations_along_route(plan, station_pool)

        return PlanResponse(
            success=True,
            status=plan.status.value,
            message=message,
            warnings=list(plan.warnings),
            route_geojson=self._plan_to_geojson(plan),
            plan_stats=PlanStats(
                total_distance_km=round(plan.total_distance_km, 2),
                total_duration_minutes=plan.total_duration_minutes,
                charging_time_minutes=plan.charging_time_minutes,
                stop_count=plan.stop_count,
                leg_count=len(plan.legs),
                total_cost=plan.total_cost
            ),
            stops=[self._station_to_response(s) for s in plan.selected_stops],
            instructions=list(plan.instructions),
            bounds=plan.bounds.as_dict() if plan.bounds is not None else None,
            battery_status=battery,
            stations_along_route=[self._station_to_response(s) for s in nearby]
        )

    def _convert_state(self, state: PlanState) -> PlanStateResponse:
        plan = None
        if state.plan is not None:
            with self._submit_lock:
                request, station_pool = self._submissions.get(state.generation, (None, frozenset()))
            plan = self._convert_to_response(state.plan, request, station_pool)
        return PlanStateResponse(
            generation=state.generation,
            status=state.status.value,
            plan=plan,
            error=str(state.error) if state.error is not None else None
        )

    @staticmethod
    def _station_to_response(station: ChargingStation) -> StationResponse:
        return StationResponse(
            name=station.name,
            latitude=station.lat,
            longitude=station.lng,
            attributes=dict(station.attributes)
        )

    @staticmethod
    def _plan_to_geojson(plan: RoutePlan) -> Dict[str, Any]:
        """
        Convert a plan to a GeoJSON FeatureCollection.

        Contains the route LineString, start and end Points and one Point per
        charging stop.
        """
        # GeoJSON uses (lon, lat)
        geojson_coords = [[p.lng, p.lat] for p in plan.path]
        features: List[geojson.Feature] = [
            geojson.Feature(
                geometry=geojson.LineString(geojson_coords),
                properties={
                    "type": "route",
                    "status": plan.status.value,
                    "total_distance_km": round(plan.total_distance_km, 2),
                    "total_duration_minutes": plan.total_duration_minutes
                }
            ),
            geojson.Feature(
                geometry=geojson.Point(geojson_coords[0]),
                properties={"type": "start", "name": "Start Point"}
            ),
            geojson.Feature(
                geometry=geojson.Point(geojson_coords[-1]),
                properties={"type": "end", "name": "End Point"}
            )
        ]

        for index, stop in enumerate(plan.selected_stops, 1):
            features.append(geojson.Feature(
                geometry=geojson.Point([stop.lng, stop.lat]),
                properties={"type": "charging_stop", "order": index, "name": stop.name}
            ))

        return geojson.FeatureCollection(features)
