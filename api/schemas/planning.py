"""
Pydantic schemas for the EV route planning API.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, validator


class LocationRequest(BaseModel):
    """Request model for a single location."""
    latitude: float = Field(..., ge=-90, le=90, description="Latitude coordinate")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude coordinate")


class VehicleRequest(BaseModel):
    """Battery and range figures used to derive the usable range."""
    battery_percentage: float = Field(..., gt=0, le=100, description="Current battery charge (%)")
    rated_range_km: float = Field(..., gt=0, description="Range on a full battery (km)")
    safety_margin: Optional[float] = Field(default=None, gt=0, le=1,
                                           description="Fraction of nominal range to rely on (defaults to server config)")
    battery_capacity_kwh: Optional[float] = Field(default=None, gt=0, description="Battery capacity (kWh), used for the cost estimate")


class StationRequest(BaseModel):
    """A charging station supplied by the caller."""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    name: Optional[str] = Field(default=None, description="Station name")
    operator: Optional[str] = Field(default=None, description="Network operator")
    connectors: Optional[str] = Field(default=None, description="Connector / socket types")
    price_per_kwh: Optional[float] = Field(default=None, ge=0, description="Charging price per kWh")
    operational_status: Optional[str] = Field(default=None, description="'operational', 'maintenance' or 'offline'")


class PlanRequest(BaseModel):
    """Request model for route planning."""
    start: Optional[LocationRequest] = Field(default=None, description="Starting location")
    destination: Optional[LocationRequest] = Field(default=None, description="Destination location")
    usable_range_km: Optional[float] = Field(default=None, description="Usable range in km (takes precedence over vehicle)")
    vehicle: Optional[VehicleRequest] = Field(default=None, description="Vehicle figures, used when usable_range_km is absent")
    stations: Optional[List[StationRequest]] = Field(default=None,
                                                     description="Explicit station pool; the directory is used when omitted")

    @validator('stations')
    def validate_station_count(cls, v):
        """Keep explicit pools to a size the greedy selector handles quickly."""
        if v is not None and len(v) > 5000:
            raise ValueError('At most 5000 stations may be supplied')
        return v


class StationResponse(BaseModel):
    """A charging station in a response."""
    name: str
    latitude: float
    longitude: float
    attributes: Dict[str, Any] = Field(default_factory=dict)


class PlanStats(BaseModel):
    """Aggregate figures for a planned route."""
    total_distance_km: float = Field(..., description="Total driving distance in km")
    total_duration_minutes: int = Field(..., description="Total driving time in minutes")
    charging_time_minutes: int = Field(..., description="Estimated time spent charging")
    stop_count: int = Field(..., description="Number of charging stops")
    leg_count: int = Field(..., description="Number of routed legs")
    total_cost: Optional[float] = Field(default=None, description="Estimated charging cost (needs battery capacity and station prices)")


class BatteryStatusResponse(BaseModel):
    """Whether the trip fits in the current charge."""
    trip_possible: bool
    remaining_percentage: Optional[float] = None
    extra_charge_needed_percentage: Optional[float] = None
    message: str


class PlanResponse(BaseModel):
    """Response model for route planning."""
    success: bool = Field(..., description="Whether a route was assembled")
    status: str = Field(..., description="'complete' or 'infeasible'")
    message: str = Field(..., description="Status message")
    warnings: List[str] = Field(default_factory=list, description="Warning codes")
    route_geojson: Optional[Dict[str, Any]] = Field(default=None, description="Route as GeoJSON FeatureCollection")
    plan_stats: Optional[PlanStats] = Field(default=None)
    stops: List[StationResponse] = Field(default_factory=list, description="Charging stops in travel order")
    instructions: List[str] = Field(default_factory=list, description="Turn-by-turn instructions")
    bounds: Optional[Dict[str, float]] = Field(default=None, description="Display bounds (north/south/east/west)")
    battery_status: Optional[BatteryStatusResponse] = Field(default=None)
    stations_along_route: List[StationResponse] = Field(default_factory=list)


class SubmitResponse(BaseModel):
    """Response to an asynchronous planning submission."""
    generation: int = Field(..., description="Generation number of this planning attempt")
    status: str = Field(..., description="State right after submission")


class PlanStateResponse(BaseModel):
    """Current plan state."""
    generation: int
    status: str = Field(..., description="idle, pending, complete, infeasible or failed")
    plan: Optional[PlanResponse] = None
    error: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Service status")
    version: str = Field(..., description="API version")
    routing_configured: bool = Field(..., description="Whether a routing API key is set")
    station_source: str = Field(..., description="'file' or 'directory'")
    cached_regions: int = Field(..., description="Number of cached station regions")


class ErrorResponse(BaseModel):
    """Error response model."""
    success: bool = Field(False, description="Always false for error responses")
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Detailed error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
