"""
FastAPI routes for EV route planning endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
import logging

from ev_route_planner.exceptions import DirectoryError, InvalidInputError, RoutingError
from api.schemas.planning import (
    ErrorResponse,
    HealthResponse,
    PlanRequest,
    PlanResponse,
    PlanStateResponse,
    SubmitResponse
)
from api.services.planning_service import API_VERSION, EVRoutePlanningService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/planning", tags=["planning"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid planning inputs"},
    502: {"model": ErrorResponse, "description": "Routing or directory service failure"},
}


def get_planning_service(request: Request) -> EVRoutePlanningService:
    """Get the planning service owned by the application."""
    return request.app.state.planning_service


@router.get("/health", response_model=HealthResponse, summary="Health Check")
async def health_check(service: EVRoutePlanningService = Depends(get_planning_service)):
    """
    Check the health status of the planning service.

    Returns:
        HealthResponse: Service health information
    """
    try:
        return service.get_health_status()
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Health check failed"
        )


@router.post("/plan", response_model=PlanResponse, responses=ERROR_RESPONSES, summary="Plan EV Route")
def plan_route(request: PlanRequest, service: EVRoutePlanningService = Depends(get_planning_service)):
    """
    Plan a route with charging stops and wait for the result.

    A plan that cannot reach the destination within range is still returned,
    with status ``infeasible`` and the ``insufficient_range`` warning.

    Example:
        ```json
        {
            "start": {"latitude": 52.5200, "longitude": 13.4050},
            "destination": {"latitude": 48.1351, "longitude": 11.5820},
            "vehicle": {"battery_percentage": 80, "rated_range_km": 400}
        }
        ```
    """
    logger.info(f"Plan request: {request.start} -> {request.destination}")
    try:
        return service.plan_route(request)
    except InvalidInputError as e:
        logger.warning(f"Planning validation error: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except (RoutingError, DirectoryError) as e:
        logger.error(f"Planning failed: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.post("/submit", response_model=SubmitResponse, responses=ERROR_RESPONSES, summary="Submit Planning Request")
def submit_plan(request: PlanRequest, service: EVRoutePlanningService = Depends(get_planning_service)):
    """
    Start planning in the background.

    Any earlier submission still in flight is superseded; its result will be
    discarded when it arrives. Poll ``GET /api/planning/current`` for the outcome.
    """
    try:
        return service.submit(request)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/current", response_model=PlanStateResponse, summary="Current Plan State")
async def current_plan(service: EVRoutePlanningService = Depends(get_planning_service)):
    """Get the state of the most recent submission."""
    return service.current_state()


@router.get("/", summary="API Information")
async def get_api_info(service: EVRoutePlanningService = Depends(get_planning_service)):
    """
    Get information about the EV Route Planning API.

    Returns:
        dict: API information and available endpoints
    """
    return {
        "api": "EV Route Planning API",
        "version": API_VERSION,
        "description": "Plan electric-vehicle trips with charging stops",
        "endpoints": {
            "POST /api/planning/plan": "Plan a route and wait for the result",
            "POST /api/planning/submit": "Start planning in the background",
            "GET /api/planning/current": "State of the latest submission",
            "GET /api/planning/health": "Check service health status",
            "GET /api/planning/": "This information endpoint"
        },
        "max_charging_stops": service.config.max_stops
    }
