"""
Value types shared by the station selector, route assembler and planner.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from ..exceptions import InvalidInputError

# Length of one degree of latitude on the 6371 km sphere
KM_PER_DEGREE = 6371.0 * math.pi / 180.0

NON_OPERATIONAL_STATUSES = ('offline', 'maintenance')


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in degrees."""
    lat: float
    lng: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.lat, self.lng)


@dataclass(frozen=True)
class ChargingStation:
    """
    A charging station location plus the directory's opaque attributes.

    Equality and hashing only look at the location. The directory offers no
    stable identifier, so two distinct stations sharing coordinates are
    treated as one, and coordinate jitter between fetches yields duplicates.
    """
    location: GeoPoint
    attributes: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def lat(self) -> float:
        return self.location.lat

    @property
    def lng(self) -> float:
        return self.location.lng

    @property
    def name(self) -> str:
        return str(self.attributes.get('name') or f"Station ({self.lat:.4f}, {self.lng:.4f})")

    @property
    def price_per_kwh(self) -> Optional[float]:
        price = self.attributes.get('price_per_kwh')
        if price is None or isinstance(price, bool):
            return None
        try:
            return float(price)
        except (TypeError, ValueError):
            return None

    @property
    def operational_status(self) -> str:
        return str(self.attributes.get('operational_status') or 'unknown').lower()

    @property
    def is_operational(self) -> bool:
        """Stations of unknown status count as operational."""
        return self.operational_status not in NON_OPERATIONAL_STATUSES

    @classmethod
    def at(cls, lat: float, lng: float, **attributes: Any) -> 'ChargingStation':
        return cls(GeoPoint(float(lat), float(lng)), dict(attributes))


@dataclass(frozen=True)
class Leg:
    """One origin-to-destination request sent to the routing provider."""
    origin: GeoPoint
    destination: GeoPoint


@dataclass
class LegRoute:
    """Geometry and guidance returned by the routing provider for one leg."""
    path: List[GeoPoint]
    instructions: List[str] = field(default_factory=list)
    distance_km: Optional[float] = None
    duration_minutes: Optional[int] = None


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned lat/lng rectangle."""
    south: float
    west: float
    north: float
    east: float

    @classmethod
    def from_points(cls, points: Iterable[GeoPoint], padding_deg: float = 0.0) -> 'BoundingBox':
        """
        Build the minimal box covering all points, expanded by a fixed padding.

        Args:
            points: Points to cover (at least one)
            padding_deg: Padding in degrees added on every side

        Returns:
            BoundingBox covering the points
        """
        lats = []
        lngs = []
        for point in points:
            lats.append(point.lat)
            lngs.append(point.lng)

        if not lats:
            raise ValueError("Cannot build a bounding box from no points")

        return cls(
            south=min(lats) - padding_deg,
            west=min(lngs) - padding_deg,
            north=max(lats) + padding_deg,
            east=max(lngs) + padding_deg
        )

    def padded_km(self, padding_km: float) -> 'BoundingBox':
        """Expand the box by roughly padding_km on every side."""
        lat_pad = padding_km / KM_PER_DEGREE
        widest_lat = max(abs(self.south), abs(self.north))
        cos_lat = max(math.cos(math.radians(min(widest_lat, 89.0))), 1e-6)
        lng_pad = padding_km / (KM_PER_DEGREE * cos_lat)
        return BoundingBox(
            south=max(self.south - lat_pad, -90.0),
            west=max(self.west - lng_pad, -180.0),
            north=min(self.north + lat_pad, 90.0),
            east=min(self.east + lng_pad, 180.0)
        )

    def snapped(self, grid_deg: float) -> 'BoundingBox':
        """Expand the box outward to the nearest multiples of grid_deg."""
        if grid_deg <= 0:
            return self
        return BoundingBox(
            south=max(math.floor(self.south / grid_deg) * grid_deg, -90.0),
            west=max(math.floor(self.west / grid_deg) * grid_deg, -180.0),
            north=min(math.ceil(self.north / grid_deg) * grid_deg, 90.0),
            east=min(math.ceil(self.east / grid_deg) * grid_deg, 180.0)
        )

    def contains(self, point: GeoPoint) -> bool:
        return self.south <= point.lat <= self.north and self.west <= point.lng <= self.east

    def center(self) -> GeoPoint:
        return GeoPoint((self.south + self.north) / 2, (self.west + self.east) / 2)

    def as_dict(self) -> Dict[str, float]:
        return {
            'north': self.north,
            'south': self.south,
            'east': self.east,
            'west': self.west
        }


class PlanStatus(Enum):
    """States of plan construction."""
    IDLE = "idle"
    PENDING = "pending"
    COMPLETE = "complete"
    INFEASIBLE = "infeasible"
    FAILED = "failed"


# Warning codes carried on a RoutePlan
WARNING_INSUFFICIENT_RANGE = "insufficient_range"
WARNING_DIRECTORY_UNAVAILABLE = "station_directory_unavailable"


@dataclass(frozen=True)
class PlanningRequest:
    """
    Inputs for one planning attempt.

    The station pool is a read-only snapshot. ``pool_unavailable`` marks a pool
    that is empty because the directory could not be reached, as opposed to a
    region that genuinely has no stations.
    """
    start: Optional[GeoPoint]
    end: Optional[GeoPoint]
    usable_range_km: Optional[float]
    station_pool: FrozenSet[ChargingStation] = frozenset()
    pool_unavailable: bool = False
    battery_capacity_kwh: Optional[float] = None

    def __post_init__(self):
        if not isinstance(self.station_pool, frozenset):
            object.__setattr__(self, 'station_pool', frozenset(self.station_pool or ()))

    def validate(self) -> None:
        """Raise InvalidInputError unless start, end and a positive finite range are present."""
        if self.start is None:
            raise InvalidInputError("Start location is required")
        if self.end is None:
            raise InvalidInputError("Destination is required")
        if self.usable_range_km is None:
            raise InvalidInputError("Usable range is required (enter vehicle details first)")
        try:
            usable_range = float(self.usable_range_km)
        except (TypeError, ValueError):
            raise InvalidInputError(f"Usable range must be a number, got {self.usable_range_km!r}")
        if not math.isfinite(usable_range):
            raise InvalidInputError("Usable range must be finite")
        if usable_range <= 0:
            raise InvalidInputError(f"Usable range must be positive, got {usable_range}")
        if self.battery_capacity_kwh is not None:
            capacity = self.battery_capacity_kwh
            valid = isinstance(capacity, (int, float)) and not isinstance(capacity, bool)
            if not valid or not math.isfinite(capacity) or capacity <= 0:
                raise InvalidInputError(f"Battery capacity must be a positive number, got {capacity!r}")


@dataclass
class RoutePlan:
    """The assembled multi-leg route."""
    path: List[GeoPoint]
    instructions: List[str]
    selected_stops: List[ChargingStation]
    total_distance_km: float
    total_duration_minutes: int
    legs: List[Leg] = field(default_factory=list)
    bounds: Optional[BoundingBox] = None
    status: PlanStatus = PlanStatus.COMPLETE
    warnings: List[str] = field(default_factory=list)
    charging_time_minutes: int = 0
    total_cost: Optional[float] = None

    @property
    def is_feasible(self) -> bool:
        return self.status == PlanStatus.COMPLETE

    @property
    def stop_count(self) -> int:
        return len(self.selected_stops)

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics for the plan."""
        return {
            'status': self.status.value,
            'stop_count': self.stop_count,
            'leg_count': len(self.legs),
            'path_points': len(self.path),
            'instruction_count': len(self.instructions),
            'total_distance_km': round(self.total_distance_km, 2),
            'total_duration_minutes': self.total_duration_minutes,
            'charging_time_minutes': self.charging_time_minutes,
            'total_cost': self.total_cost,
            'warnings': list(self.warnings)
        }
