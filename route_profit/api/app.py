"""
FastAPI application factory.

* Registers routes for route calculation, history, analytics and admin.
* Creates the history table on startup via lifespan events.
* Maps domain errors to HTTP responses.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from route_profit.api.middleware import limiter
from route_profit.api.routes import admin, analytics, history, routes
from route_profit.config import settings
from route_profit.domain.errors import (
    CityNotFoundError,
    CityResolutionError,
    LockUnavailable,
    RouteValidationError,
    SpreadsheetError,
)
from route_profit.infrastructure.database import init_db

logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Make sure the history table exists before serving requests."""
    await init_db()
    yield


# ── Domain error handlers ─────────────────────────────────────────────


async def _validation_error(request: Request, exc: RouteValidationError):
    return JSONResponse(status_code=422, content={"detail": str(exc), "errors": exc.errors})


async def _city_not_found(request: Request, exc: CityNotFoundError):
    return JSONResponse(status_code=422, content={"detail": str(exc), "city": exc.city})


async def _city_unresolved(request: Request, exc: CityResolutionError):
    return JSONResponse(status_code=503, content={"detail": str(exc), "city": exc.city})


async def _lock_unavailable(request: Request, exc: LockUnavailable):
    logger.warning("History write rejected: %s", exc)
    return JSONResponse(status_code=503, content={"detail": "History is busy, try again shortly"})


async def _spreadsheet_error(request: Request, exc: SpreadsheetError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Route Profitability API",
        description=(
            "Calculates the profitability of delivery routes: geocodes the "
            "cities, measures the distances, compares diesel and gasoline "
            "costs and keeps a searchable history with spreadsheet and PDF "
            "exports."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Domain errors (most specific first)
    app.add_exception_handler(RouteValidationError, _validation_error)
    app.add_exception_handler(CityNotFoundError, _city_not_found)
    app.add_exception_handler(CityResolutionError, _city_unresolved)
    app.add_exception_handler(SpreadsheetError, _spreadsheet_error)
    app.add_exception_handler(LockUnavailable, _lock_unavailable)

    # Routers
    app.include_router(routes.router, prefix="/api/v1")
    app.include_router(history.router, prefix="/api/v1")
    app.include_router(analytics.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
