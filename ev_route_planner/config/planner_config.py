"""
Configuration management for EV route planning parameters.
"""

from dataclasses import dataclass

SELECTION_METHODS = ('progress', 'nearest')


@dataclass
class PlannerConfig:
    """Configuration parameters for charging-stop selection and route assembly."""

    # Station Selection
    max_stops: int = 3  # hard cap on inserted charging stops
    selection_method: str = 'progress'  # 'progress' (closest to destination) or 'nearest' (closest to current)

    # Route Assembly
    average_speed_kmh: float = 80.0  # duration estimate when the provider returns no totals
    bounds_padding_deg: float = 0.05  # fixed visual padding around the route bounds
    parallel_leg_fetch: bool = False  # fetch leg geometry concurrently once waypoints are fixed
    max_fetch_workers: int = 4

    # Vehicle
    safety_margin: float = 0.9  # fraction of nominal range to rely on (weather, traffic)
    charging_stop_minutes: int = 30  # assumed dwell time per charging stop
    charge_target_fraction: float = 0.8  # share of battery capacity bought at each stop

    # Station Directory
    station_search_margin_km: float = 20.0  # padding of the region fetched from the directory
    near_route_threshold_km: float = 10.0  # radius for "stations along the route"
    station_cache_grid_deg: float = 0.5  # cached regions snap outward to this grid
    station_cache_max_regions: int = 32  # least recently used regions are evicted beyond this
    skip_non_operational: bool = True  # ignore stations the directory reports offline

    # Visualization
    map_style: str = 'OpenStreetMap'
    route_color: str = '#2E8B57'  # green
    stop_color: str = 'orange'
    nearby_station_color: str = '#1E90FF'  # blue

    def validate(self) -> None:
        """Validate configuration parameters."""
        if self.max_stops < 0:
            raise ValueError("max_stops must be >= 0")
        if self.selection_method not in SELECTION_METHODS:
            raise ValueError(f"selection_method must be one of {SELECTION_METHODS}")
        if self.average_speed_kmh <= 0:
            raise ValueError("average_speed_kmh must be positive")
        if self.bounds_padding_deg < 0:
            raise ValueError("bounds_padding_deg must be >= 0")
        if self.max_fetch_workers < 1:
            raise ValueError("max_fetch_workers must be >= 1")
        if not 0 < self.safety_margin <= 1:
            raise ValueError("safety_margin must be in (0, 1]")
        if self.charging_stop_minutes < 0:
            raise ValueError("charging_stop_minutes must be >= 0")
        if self.near_route_threshold_km < 0:
            raise ValueError("near_route_threshold_km must be >= 0")
        if not 0 < self.charge_target_fraction <= 1:
            raise ValueError("charge_target_fraction must be in (0, 1]")
        if self.station_cache_grid_deg < 0:
            raise ValueError("station_cache_grid_deg must be >= 0")
        if self.station_cache_max_regions < 1:
            raise ValueError("station_cache_max_regions must be >= 1")

    @classmethod
    def create_default_config(cls) -> 'PlannerConfig':
        """Create the default configuration."""
        return cls()

    @classmethod
    def create_conservative_config(cls) -> 'PlannerConfig':
        """
        Create configuration for cautious drivers.

        Relies on less of the nominal range and hops to the nearest reachable
        station instead of the one furthest along.
        """
        return cls(
            safety_margin=0.8,
            selection_method='nearest',
            charging_stop_minutes=40
        )

    @classmethod
    def create_parallel_config(cls) -> 'PlannerConfig':
        """Create configuration that fetches leg geometry concurrently."""
        return cls(
            parallel_leg_fetch=True,
            max_fetch_workers=4
        )
