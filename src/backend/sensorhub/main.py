"""SensorHub FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from sensorhub import __version__
from sensorhub.api import router as api_router
from sensorhub.core.config import settings
from sensorhub.core.deps import engine, get_db, get_status_cache
from sensorhub.services.health_service import health_service
from sensorhub.services.status_cache import StatusCache

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown events."""
    logger.info(
        "Starting SensorHub application",
        environment=settings.environment,
        status_cache_ttl=settings.status_cache_ttl_seconds,
    )

    yield

    logger.info("Shutting down SensorHub application")
    app.state.status_cache.clear()
    await engine.dispose()


fastapi_app = FastAPI(
    title="SensorHub API",
    description="IoT device registry and sensor telemetry ingestion/retrieval",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

# One latest-status cache per process, shared by all requests
fastapi_app.state.status_cache = StatusCache(ttl_seconds=settings.status_cache_ttl_seconds)

# CORS middleware
fastapi_app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
fastapi_app.include_router(api_router, prefix="/api/v1")


@fastapi_app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):
    # Convert errors to JSON-serializable format
    errors = []
    for error in exc.errors():
        errors.append({
            "loc": error.get("loc"),
            "msg": str(error.get("msg")),
            "type": error.get("type"),
        })

    logger.warning("Validation error", path=str(request.url.path), errors=errors)
    return JSONResponse(
        status_code=422,
        content={"detail": errors}
    )


# Set up Prometheus metrics instrumentation
if settings.metrics_enabled:
    from sensorhub.core.metrics import setup_metrics, expose_metrics

    _instrumentator = setup_metrics(fastapi_app)
    expose_metrics(fastapi_app, _instrumentator)


@fastapi_app.get("/health")
async def liveness_check() -> dict:
    """Liveness check: the application process is running."""
    return health_service.get_liveness().to_dict()


@fastapi_app.get("/health/ready")
async def readiness_check(
    db: AsyncSession = Depends(get_db),
    cache: StatusCache = Depends(get_status_cache),
) -> dict:
    """Readiness check: the application can serve traffic."""
    result = await health_service.get_readiness(db, cache)
    return result.to_dict()


app = fastapi_app
