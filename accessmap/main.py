"""
FastAPI application setup.
Exposes the accessibility place pipeline over HTTP.
"""

from fastapi import FastAPI
from contextlib import asynccontextmanager
from typing import Optional
import logging

from accessmap.config.settings import get_settings
from accessmap.core.dependencies import ServiceContainer
from accessmap.core.error_handlers import setup_error_handlers
from accessmap.core.logging import configure_logging

logger = logging.getLogger(__name__)


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        container: Pre-built services; built from settings at startup when omitted

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()
    configure_logging(settings.log_level.value, settings.log_format)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.app_name} v{settings.app_version}")
        if not hasattr(app.state, "service_container"):
            app.state.service_container = ServiceContainer(settings)
        yield
        logger.info("Shutting down application")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan
    )
    if container is not None:
        app.state.service_container = container

    setup_error_handlers(app)

    from accessmap.api.health_endpoints import router as health_router
    from accessmap.api.places_endpoints import router as places_router
    from accessmap.api.location_endpoints import router as location_router
    app.include_router(health_router)
    app.include_router(places_router)
    app.include_router(location_router)

    return app


# Create application instance
app = create_app()
