"""
Multi-leg route assembly.
"""

from .route_assembler import RouteAssembler, AssembledRoute, merge_leg_routes

__all__ = [
    'RouteAssembler',
    'AssembledRoute',
    'merge_leg_routes'
]
