"""
Product Cache API - FastAPI Application

Product catalog service reading through a distributed cache:
- Cache-aside reads and write-through updates for products
- Redis (or in-process) distributed cache with sliding expiration
- Async SQLAlchemy product store
- Structured logging with correlation IDs
- Health, readiness and Prometheus endpoints
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog
from opentelemetry import trace

from .api.endpoints.health import router as health_router
from .api.endpoints.metrics import router as metrics_router
from .api.endpoints.products import router as products_router
from .constants import APP_NAME, APP_VERSION
from .core.config import get_settings
from .core.correlation import CorrelationIdMiddleware, get_request_correlation_id
from .core.logging import configure_logging
from .db import close_database, init_database
from .infrastructure.cache import build_distributed_cache
from .infrastructure.redis.connection_factory import RedisConnectionFactory

logger = structlog.get_logger()


# Application lifecycle management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the product store and the distributed cache; close both on exit."""
    settings = get_settings()
    configure_logging(
        service_name=settings.SERVICE_NAME,
        log_level=settings.LOG_LEVEL,
        json_output=settings.LOG_JSON,
    )

    logger.info(
        "Starting Product Cache API",
        version=APP_VERSION,
        environment=settings.ENVIRONMENT,
        cache_backend=settings.CACHE_BACKEND,
    )

    redis_factory: Optional[RedisConnectionFactory] = None

    try:
        await init_database()

        if settings.CACHE_BACKEND == "redis":
            redis_factory = RedisConnectionFactory(settings)
            await redis_factory.initialize()

        app.state.distributed_cache = build_distributed_cache(settings, redis_factory)

        logger.info("Product Cache API started successfully")

    except Exception:
        logger.exception("Failed to initialize application")
        if redis_factory is not None:
            await redis_factory.close()
        await close_database()
        raise

    yield

    # Shutdown
    logger.info("Shutting down Product Cache API")

    try:
        if redis_factory is not None:
            await redis_factory.close()
        await close_database()
        logger.info("Application shutdown completed")

    except Exception as e:
        logger.error("Error during application shutdown", error=str(e))


# Create FastAPI application
app = FastAPI(
    title=APP_NAME,
    description="Product catalog with a cache-aside distributed cache",
    version=APP_VERSION,
    lifespan=lifespan,
)

# Add correlation ID middleware for request tracking
app.add_middleware(CorrelationIdMiddleware)

# Include API routers
app.include_router(health_router)
app.include_router(metrics_router)
app.include_router(products_router, tags=["products"])


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log anything that escaped a handler and answer with a generic 500."""
    correlation_id = get_request_correlation_id(request)

    span = trace.get_current_span()
    span.set_attribute("error.type", type(exc).__name__)
    span.set_attribute("error.path", request.url.path)

    logger.error(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        correlation_id=correlation_id,
        exc_info=True,
    )

    error_response = {
        "error": "Internal server error",
        "message": "An unexpected error occurred",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if correlation_id:
        error_response["correlation_id"] = correlation_id

    return JSONResponse(status_code=500, content=error_response)


def run() -> None:
    """Console entry point: serve the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)


if __name__ == "__main__":
    run()
