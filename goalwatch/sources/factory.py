from loguru import logger

from goalwatch.config.settings import AppSettings
from goalwatch.models.enums import LogoStrategy, SourceKind
from .base import LogoResolver, MatchSource
from .embedded_resolver import EmbeddedIconResolver
from .fixture_source import FixtureLogoResolver, FixtureMatchSource
from .openligadb_source import OpenLigaDBSource
from .sportsdb_resolver import SportsDBLogoResolver


def build_match_source(settings: AppSettings) -> MatchSource:
    if settings.match_source == SourceKind.FIXTURE:
        source: MatchSource = FixtureMatchSource()
    else:
        source = OpenLigaDBSource(
            base_url=settings.openligadb_api_root,
            max_attempts=settings.http_max_attempts,
        )
    logger.info(f"Using match source: {source.name}")
    return source


def build_logo_resolver(settings: AppSettings, match_source: MatchSource) -> LogoResolver:
    if settings.logo_strategy == LogoStrategy.FIXTURE:
        resolver: LogoResolver = FixtureLogoResolver()
    elif settings.logo_strategy == LogoStrategy.EMBEDDED:
        resolver = EmbeddedIconResolver(match_source, settings.default_scope())
    else:
        resolver = SportsDBLogoResolver(
            api_root=settings.sportsdb_api_root,
            max_attempts=settings.http_max_attempts,
        )
    logger.info(f"Using logo resolver: {resolver.name}")
    return resolver
