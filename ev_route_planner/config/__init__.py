"""
Configuration management for EV route planning.
"""

from .planner_config import PlannerConfig
from .provider_settings import ProviderSettings
from .strategy_factory import (
    SelectionStrategyFactory,
    SelectionMethod,
    create_strategy_from_string,
    create_strategy_from_config
)

__all__ = [
    'PlannerConfig',
    'ProviderSettings',
    'SelectionStrategyFactory',
    'SelectionMethod',
    'create_strategy_from_string',
    'create_strategy_from_config'
]
