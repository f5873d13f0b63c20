"""
Charging-stop selection.
"""

from .strategies import SelectionStrategy, ProgressStrategy, NearestStrategy, STRATEGY_CLASSES
from .station_selector import StationSelector, SelectionResult, DEFAULT_MAX_STOPS

__all__ = [
    'SelectionStrategy',
    'ProgressStrategy',
    'NearestStrategy',
    'STRATEGY_CLASSES',
    'StationSelector',
    'SelectionResult',
    'DEFAULT_MAX_STOPS'
]
