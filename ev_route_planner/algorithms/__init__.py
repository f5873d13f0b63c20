"""
Route planning algorithms.

This module contains:
- Charging-stop selection strategies and the greedy station selector
- Multi-leg route assembly
- Route planning and plan state management
"""

from .selection.strategies import SelectionStrategy, ProgressStrategy, NearestStrategy
from .selection.station_selector import StationSelector, SelectionResult
from .assembly.route_assembler import RouteAssembler, AssembledRoute
from .planning.route_planner import RoutePlanner
from .planning.plan_state import PlanStateContainer, PlanState

__all__ = [
    'SelectionStrategy',
    'ProgressStrategy',
    'NearestStrategy',
    'StationSelector',
    'SelectionResult',
    'RouteAssembler',
    'AssembledRoute',
    'RoutePlanner',
    'PlanStateContainer',
    'PlanState'
]
