"""
Route planning and plan state management.
"""

from .route_planner import RoutePlanner
from .plan_state import PlanStateContainer, PlanState

__all__ = [
    'RoutePlanner',
    'PlanStateContainer',
    'PlanState'
]
