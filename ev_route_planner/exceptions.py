"""
Error taxonomy for EV route planning.
"""

from typing import Optional


class PlannerError(Exception):
    """Base class for all route planning errors."""
    pass


class InvalidInputError(PlannerError, ValueError):
    """Raised when start/end are missing or the usable range is not a positive finite number."""
    pass


class RoutingError(PlannerError):
    """Raised when the routing provider cannot return a usable leg."""

    def __init__(self, message: str, leg_index: Optional[int] = None):
        super().__init__(message)
        self.leg_index = leg_index

    def __str__(self) -> str:
        message = super().__str__()
        if self.leg_index is not None:
            return f"Leg {self.leg_index}: {message}"
        return message


class DirectoryError(PlannerError):
    """Raised when the charging-station directory cannot be reached."""
    pass


class InfeasibleRouteWarning(UserWarning):
    """
    Issued when a plan is returned even though the destination cannot be
    reached within range after inserting the allowed charging stops.
    """
    pass
