"""
FastAPI application entry point for the decks service.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from decks_service import __version__
from decks_service.api.errors import setup_error_handlers
from decks_service.api.routers import system_router, v1_router
from decks_service.infra.config.logging_config import get_logger, setup_logging
from decks_service.infra.config.settings import Settings, get_settings
from decks_service.infra.container import Container
from decks_service.infra.metrics import metrics_router
from decks_service.infra.middleware.request_context import RequestContextMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging()
    logger = get_logger("app")
    container: Container = app.state.container
    logger.info(
        "app.startup",
        app_name=container.settings.app_name,
        environment=container.settings.environment,
    )
    await container.startup()

    yield

    # Shutdown
    await container.shutdown()
    logger.info("app.shutdown", app_name=container.settings.app_name)


def create_app(
    settings: Optional[Settings] = None, container: Optional[Container] = None
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or (container.settings if container else get_settings())
    app = FastAPI(
        title=f"{settings.app_name} service",
        description="Deck storage and lifecycle events for the card-game backend",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.container = container or Container(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    setup_error_handlers(app)

    app.include_router(v1_router, prefix="/api")
    app.include_router(system_router)
    app.include_router(metrics_router)

    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "decks_service.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )
