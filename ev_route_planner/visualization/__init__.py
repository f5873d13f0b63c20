"""
Visualization tools for EV route plans.
"""

from .route_visualizer import RouteVisualizer

__all__ = ['RouteVisualizer']
