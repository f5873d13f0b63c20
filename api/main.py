"""
EV Route Planning API - FastAPI Main Application

A RESTful API for planning electric-vehicle trips with charging stops.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from api.routes.planning import router as planning_router
from api.services.planning_service import API_VERSION, EVRoutePlanningService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    400: "invalid_input",
    404: "not_found",
    502: "upstream_service_error",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle - startup and shutdown events.
    """
    logger.info("Starting EV Route Planning API...")

    health = app.state.planning_service.get_health_status()
    if health.routing_configured:
        logger.info(f"✓ Planning service ready (stations from {health.station_source})")
    else:
        logger.warning("⚠ Planning service running in degraded mode - routing API key not set")

    yield

    logger.info("Shutting down EV Route Planning API...")
    app.state.planning_service.shutdown()


def create_app(planning_service: Optional[EVRoutePlanningService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        planning_service: Service to use (built from the environment if omitted)

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="EV Route Planning API",
        description="""
        **Plan electric-vehicle trips with charging stops**

        Given a start, a destination and the vehicle's usable range, the API
        inserts up to three charging stops where the trip is longer than the
        range and returns one continuous route with turn-by-turn instructions.

        ## Features

        - **Charging Stop Selection**: greedy, progress-toward-destination stops
        - **Multi-Leg Routing**: per-leg routes merged without duplicate points
        - **Infeasibility Reporting**: best-effort plans flagged as insufficient range
        - **GeoJSON Output**: route, start/end and stops as a FeatureCollection

        ## Quick Start

        1. Check service health: `GET /api/planning/health`
        2. Plan a route: `POST /api/planning/plan`
        3. Or submit and poll: `POST /api/planning/submit`, `GET /api/planning/current`
        """,
        version=API_VERSION,
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
        lifespan=lifespan
    )
    app.state.planning_service = planning_service or EVRoutePlanningService()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Handle request validation errors with detailed information.
        """
        logger.warning(f"Validation error for {request.url}: {exc}")
        return JSONResponse(
            status_code=422,
            content={
                "success": False,
                "error": "validation_error",
                "message": "Request validation failed",
                "details": {"errors": jsonable_errors(exc)}
            }
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "error": HTTP_ERROR_CODES.get(exc.status_code, "http_error"),
                "message": str(exc.detail),
                "details": None
            }
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """
        Handle unexpected errors gracefully.
        """
        logger.error(f"Unexpected error for {request.url}: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "internal_server_error",
                "message": "An unexpected error occurred",
                "details": None
            }
        )

    app.include_router(planning_router)

    @app.get("/", tags=["general"])
    async def root():
        """
        API root endpoint with basic information.
        """
        return {
            "api": "EV Route Planning API",
            "version": API_VERSION,
            "status": "operational",
            "documentation": "/docs",
            "health_check": "/api/planning/health"
        }

    @app.get("/health", tags=["general"])
    async def api_health():
        """
        Simple health check endpoint.
        """
        service_health = app.state.planning_service.get_health_status()
        return {
            "api_status": "healthy",
            "service_status": service_health.status
        }

    return app


def jsonable_errors(exc: RequestValidationError):
    """Validation errors without non-serializable context objects."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


app = create_app()


# Development server configuration
if __name__ == "__main__":
    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
