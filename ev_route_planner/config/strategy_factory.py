"""
Factory for creating charging-stop selection strategies.

This makes it easy to switch between selection rules through simple
configuration rather than code changes.
"""

from enum import Enum
from typing import Dict, Optional

from .planner_config import PlannerConfig
from ..algorithms.selection.strategies import STRATEGY_CLASSES, SelectionStrategy


class SelectionMethod(Enum):
    """Available charging-stop selection methods."""
    PROGRESS = "progress"
    NEAREST = "nearest"


class SelectionStrategyFactory:
    """
    Factory for creating selection strategies.

    Centralizes the mapping from method names to strategy classes.
    """

    @staticmethod
    def create_strategy(method: SelectionMethod) -> SelectionStrategy:
        """
        Create a selection strategy for the given method.

        Raises:
            ValueError: If method is not supported
        """
        strategy_class = STRATEGY_CLASSES.get(method.value)
        if strategy_class is None:
            raise ValueError(f"Unsupported selection method: {method}")
        return strategy_class()

    @staticmethod
    def get_available_methods() -> Dict[str, str]:
        """
        Get available selection methods with descriptions.

        Returns:
            Dictionary mapping method names to descriptions
        """
        return {
            SelectionMethod.PROGRESS.value: "Reachable station closest to the destination (most progress per stop)",
            SelectionMethod.NEAREST.value: "Reachable station closest to the current position (shortest hops)"
        }


def create_strategy_from_string(method_name: str) -> SelectionStrategy:
    """
    Create a strategy from a method name.

    Args:
        method_name: 'progress' or 'nearest'

    Returns:
        Selection strategy instance
    """
    try:
        method = SelectionMethod(method_name.lower())
    except ValueError:
        available = list(SelectionStrategyFactory.get_available_methods().keys())
        raise ValueError(f"Unknown selection method '{method_name}'. Available: {available}")

    return SelectionStrategyFactory.create_strategy(method)


def create_strategy_from_config(config: Optional[PlannerConfig] = None) -> SelectionStrategy:
    """Create the strategy named by a planner configuration."""
    config = config or PlannerConfig()
    return create_strategy_from_string(config.selection_method)
