from enum import Enum


class ResultKind(str, Enum):
    FINAL = "final"
    HALF_TIME = "half_time"
    INTERIM = "interim"
    OTHER = "other"


class SourceKind(str, Enum):
    LIVE = "live"  # OpenLigaDB
    FIXTURE = "fixture"  # Bundled JSON fixture


class LogoStrategy(str, Enum):
    SEARCH = "search"  # TheSportsDB team search
    EMBEDDED = "embedded"  # Icons embedded in a re-fetched match set
    FIXTURE = "fixture"  # Bundled logo table
