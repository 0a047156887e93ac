import logging
from typing import Optional

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

from goalwatch.models.enums import LogoStrategy, SourceKind
from goalwatch.models.scope import MatchScope

VALID_LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Upstream providers
    openligadb_base_url: HttpUrl = Field(
        "https://api.openligadb.de", description="Base URL of the OpenLigaDB API."
    )
    sportsdb_base_url: HttpUrl = Field(
        "https://www.thesportsdb.com/api/v1/json",
        description="Base URL of TheSportsDB v1 JSON API (without the key segment).",
    )
    sportsdb_api_key: str = Field(
        "3", description="TheSportsDB API key. '3' is the public test key."
    )

    # Default request scope
    league_shortcut: str = Field("gb1", description="OpenLigaDB league shortcut.")
    league_season: Optional[int] = Field(
        None, ge=1900, description="Season year, e.g. 2023."
    )
    league_round: Optional[int] = Field(
        None, ge=1, description="Round (group order id). Needs a season."
    )

    # Data source variants
    match_source: SourceKind = Field(
        SourceKind.LIVE, description="Where match records come from."
    )
    logo_strategy: LogoStrategy = Field(
        LogoStrategy.SEARCH, description="How team logos are resolved."
    )

    # HTTP / caching
    revalidate_seconds: int = Field(
        3600, ge=0, description="Time-to-live of the page data cache."
    )
    http_max_attempts: int = Field(
        1, ge=1, le=10, description="Attempts per upstream request (1 = no retries)."
    )

    # Presentation
    display_timezone: str = Field(
        "UTC", description="IANA timezone used when rendering kickoff times."
    )

    # Web server
    host: str = Field("127.0.0.1", description="Bind address for the web server.")
    port: int = Field(9002, ge=1, le=65535, description="Port for the web server.")

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def sportsdb_api_root(self) -> str:
        """TheSportsDB base URL with the API key path segment appended."""
        return f"{str(self.sportsdb_base_url).rstrip('/')}/{self.sportsdb_api_key}"

    @property
    def openligadb_api_root(self) -> str:
        return str(self.openligadb_base_url).rstrip("/")

    @property
    def uses_public_sportsdb_key(self) -> bool:
        return self.sportsdb_api_key == "3"

    def default_scope(self) -> MatchScope:
        """The league/season/round scope used when a request names none."""
        return MatchScope(
            league=self.league_shortcut,
            season=self.league_season,
            round=self.league_round,
        )


def load_settings() -> AppSettings:
    """Loads and validates application settings."""
    try:
        settings = AppSettings()
        log_level_upper = settings.log_level.upper()
        # Validate log_level even if loaded from .env
        if log_level_upper not in VALID_LOG_LEVELS:
            logging.warning(
                f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
            )
            settings.log_level = "INFO"
        else:
            settings.log_level = log_level_upper
        return settings
    except Exception as e:
        logging.exception(f"Error loading application settings: {e}")
        raise SystemExit("Failed to load application settings. Exiting.")


settings: AppSettings = load_settings()
