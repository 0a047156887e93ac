"""FastAPI application factory - server-rendered match schedule."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from loguru import logger

from goalwatch.config.settings import AppSettings, settings as default_settings
from goalwatch.config.version import VERSION
from goalwatch.logging.setup import setup_logging
from goalwatch.services.match_service import MatchService
from goalwatch.sources.base import LogoResolver, MatchSource
from goalwatch.sources.factory import build_logo_resolver, build_match_source
from goalwatch.web import routes


def create_app(
    settings: Optional[AppSettings] = None,
    match_source: Optional[MatchSource] = None,
    logo_resolver: Optional[LogoResolver] = None,
    service: Optional[MatchService] = None,
    configure_logging: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Source and resolver variants come from settings unless they are passed
    in; a complete ``service`` can be passed in as well.
    """
    app_settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler - runs on startup and shutdown."""
        if configure_logging:
            setup_logging()
        logger.info("Starting GoalWatch...")

        match_service = service
        if match_service is None:
            source = match_source or build_match_source(app_settings)
            resolver = logo_resolver or build_logo_resolver(app_settings, source)
            match_service = MatchService(
                source, resolver, ttl_seconds=app_settings.revalidate_seconds
            )
        app.state.service = match_service
        app.state.settings = app_settings
        logger.info("GoalWatch ready")

        yield

        logger.info("Shutting down GoalWatch...")
        await match_service.close()
        logger.info("GoalWatch stopped")

    app = FastAPI(
        title="GoalWatch",
        description="Football schedules and results with team logos",
        version=VERSION,
        lifespan=lifespan,
    )

    app.include_router(routes.health_router, tags=["Health"])
    app.include_router(routes.api_router, prefix="/api", tags=["Matches"])
    app.include_router(routes.page_router, tags=["Pages"])

    return app
