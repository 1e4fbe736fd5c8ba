"""FastAPI application factory and main entry point."""
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from codity import __version__
from codity.api import users
from codity.core.config import settings
from codity.core.database import check_database_connection, close_database, init_models
from codity.core.logging import configure_logging, get_logger
from codity.core.middleware import RequestIDMiddleware
from codity.core.tracing import configure_tracing, instrument_fastapi_app

configure_logging()
configure_tracing()
logger = get_logger(__name__)


def _utc_timestamp() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Create missing tables on startup and release the pool on shutdown."""
    logger.info("Starting Codity API", version=__version__, environment=settings.environment)
    await init_models()

    yield

    logger.info("Shutting down Codity API")
    await close_database()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Codity API",
        description="Social network backend: profiles, follows, posts and notifications",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health", tags=["health"], status_code=200)
    async def health_check() -> dict[str, Any]:
        """Report service health and database reachability.

        Always answers 200; ``status`` is "degraded" when the database is down.
        """
        db_start = time.time()
        db_healthy = await check_database_connection()
        db_response_time = round((time.time() - db_start) * 1000, 2)

        overall_status = "healthy" if db_healthy else "degraded"
        logger.info(
            "Health check completed",
            status=overall_status,
            database="healthy" if db_healthy else "unhealthy",
            duration_ms=db_response_time,
        )

        return {
            "status": overall_status,
            "service": settings.otel_service_name,
            "version": __version__,
            "timestamp": _utc_timestamp(),
            "checks": {
                "database": {
                    "status": "healthy" if db_healthy else "unhealthy",
                    "response_time_ms": db_response_time,
                },
            },
        }

    app.include_router(users.router, prefix="/api/v1")

    instrument_fastapi_app(app)

    logger.info("FastAPI application created", cors_origins=settings.cors_origins_list)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "codity.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=not settings.is_production,
        log_config=None,
    )
