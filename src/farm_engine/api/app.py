"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from farm_engine.api.routes import (
    costs_router,
    daily_logs_router,
    feed_router,
    health_router,
    houses_router,
    labor_router,
    payroll_router,
)
from farm_engine.config import Settings, get_settings
from farm_engine.database import create_schema, get_engine, get_session_factory
from farm_engine.errors import FarmEngineError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    settings: Settings = app.state.settings
    engine = get_engine(settings.database_url)
    app.state.engine = engine
    app.state.session_factory = get_session_factory(engine)
    if settings.auto_create_schema:
        await create_schema(engine)
    logger.info("Database engine ready")
    yield
    # Shutdown
    await engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    app = FastAPI(
        title="Farm Engine API",
        description="Laborer payroll, feed batch costing and egg pricing",
        version="0.1.0",
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.settings = settings

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(FarmEngineError)
    async def farm_engine_error_handler(
        request: Request, exc: FarmEngineError
    ) -> JSONResponse:
        """Map domain errors to their status code."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.message,
                "code": exc.code,
                "context": exc.context or None,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report malformed request bodies as client errors."""
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "invalid value")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": f"{field}: {message}" if field else message,
                "code": "VALIDATION_ERROR",
                "context": {"errors": len(errors)},
            },
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(
        request: Request, exc: IntegrityError
    ) -> JSONResponse:
        """Handle constraint violations that slipped past service checks."""
        logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={
                "detail": "Request conflicts with existing data",
                "code": "CONFLICT",
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(labor_router, prefix="/api/v1")
    app.include_router(payroll_router, prefix="/api/v1")
    app.include_router(feed_router, prefix="/api/v1")
    app.include_router(houses_router, prefix="/api/v1")
    app.include_router(daily_logs_router, prefix="/api/v1")
    app.include_router(costs_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
