import pytest

from goalwatch.caching.ttl_cache import TTLCache
from goalwatch.models.scope import MatchScope


@pytest.fixture
def gb1_scope() -> MatchScope:
    return MatchScope(league="gb1", season=2023)


@pytest.fixture
def cache() -> TTLCache:
    """A private cache so tests never share the process-wide one."""
    return TTLCache()
