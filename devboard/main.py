"""
FastAPI application entry point for the DevBoard API.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from devboard.api.dependencies import close_clients
from devboard.api.errors import setup_error_handlers
from devboard.api.schemas import HealthResponse
from devboard.api.v1 import v1_router
from devboard.infra.config.logging_config import get_logger, setup_logging
from devboard.infra.config.settings import get_settings
from devboard.infra.middleware.request_context import RequestContextMiddleware
from devboard.infra.observability.metrics import metrics_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    # Startup
    setup_logging()
    logger = get_logger("app")
    logger.info(
        "app.startup",
        app_name=settings.app_name,
        environment=settings.environment,
        llm_provider=settings.llm_provider,
    )

    yield

    # Shutdown
    await close_clients()
    logger.info("app.shutdown", app_name=settings.app_name)


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="LLM-backed GitHub profile README and portfolio generation service",
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
        # interactive docs only outside production
        docs_url=None if settings.is_production() else "/docs",
        redoc_url=None,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request context + logging middleware
    app.add_middleware(RequestContextMiddleware)

    setup_error_handlers(app)

    # Include routers
    app.include_router(v1_router, prefix="/api")
    if settings.prometheus_metrics_enabled:
        app.include_router(metrics_router)

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Liveness check."""
        return HealthResponse(status="healthy", service=settings.app_name, version=settings.version)

    return app


# Create FastAPI application
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "devboard.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info" if not settings.debug else "debug",
    )
