"""
EV Route Planner

Plans driving routes for electric vehicles, inserting charging stops when the
trip is longer than the usable range, and stitches per-leg routes from an
external routing service into one path with turn-by-turn instructions.

## Quick Start

```python
from ev_route_planner import RoutePlanner, PlannerConfig, PlanningRequest, GeoPoint
from ev_route_planner.providers import GraphHopperRoutingProvider

provider = GraphHopperRoutingProvider("https://graphhopper.com/api/1", api_key="...")
planner = RoutePlanner(provider, PlannerConfig.create_default_config())

plan = planner.plan(PlanningRequest(
    start=GeoPoint(52.5200, 13.4050),    # Berlin
    end=GeoPoint(48.1351, 11.5820),      # Munich
    usable_range_km=250.0,
    station_pool=stations
))
```

## Main Components

- **StationSelector**: greedy charging-stop selection
- **RouteAssembler**: per-leg routing and geometry merging
- **RoutePlanner**: validation, selection and assembly in one call
- **PlanStateContainer**: current plan with stale-result protection
- **RouteVisualizer**: interactive map generation

## Architecture

- `algorithms/`: stop selection, route assembly, planning
- `providers/`: routing service, station directory, pool cache
- `data/`: value types, distance math, station loading, vehicle helpers
- `visualization/`: map generation
- `config/`: configuration management
"""

from .algorithms import (
    RoutePlanner,
    PlanStateContainer,
    PlanState,
    StationSelector,
    RouteAssembler,
    SelectionStrategy
)
from .config import PlannerConfig, ProviderSettings
from .data import GeoPoint, ChargingStation, Leg, PlanningRequest, RoutePlan, PlanStatus, distance_km, is_near
from .exceptions import (
    PlannerError,
    InvalidInputError,
    RoutingError,
    DirectoryError,
    InfeasibleRouteWarning
)
from .visualization import RouteVisualizer

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    'RoutePlanner',
    'PlanStateContainer',
    'PlanState',
    'PlannerConfig',
    'ProviderSettings',
    'RouteVisualizer',

    # Core algorithms
    'StationSelector',
    'RouteAssembler',
    'SelectionStrategy',

    # Data types
    'GeoPoint',
    'ChargingStation',
    'Leg',
    'PlanningRequest',
    'RoutePlan',
    'PlanStatus',
    'distance_km',
    'is_near',

    # Errors
    'PlannerError',
    'InvalidInputError',
    'RoutingError',
    'DirectoryError',
    'InfeasibleRouteWarning',

    '__version__'
]
