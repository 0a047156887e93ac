import asyncio
from typing import Dict, Iterable, List, Optional

from loguru import logger

from goalwatch.caching.ttl_cache import TTLCache, page_cache
from goalwatch.models.league import AvailableLeague
from goalwatch.models.logos import ResolvedLogos
from goalwatch.models.match import NormalizedMatch
from goalwatch.models.raw import RawMatch
from goalwatch.models.scope import MatchScope
from goalwatch.normalization.normalizer import MatchNormalizer
from goalwatch.sources.base import LogoResolver, MatchSource


def collect_team_names(raw_matches: Iterable[RawMatch]) -> List[str]:
    """Distinct, trimmed, non-blank team names in encounter order."""
    names = {}
    for match in raw_matches:
        for name in match.team_names():
            name = name.strip()
            if name:
                names.setdefault(name, None)
    return list(names)


async def resolve_logos(resolver: LogoResolver, team_names: Iterable[str]) -> ResolvedLogos:
    """Resolve every name concurrently and wait for all of them.

    A lookup that raises only loses its own logo; the join itself never fails.
    """
    names = list(dict.fromkeys(team_names))

    async def resolve_one(name: str):
        try:
            return name, await resolver.resolve(name)
        except Exception as e:
            logger.error(f"Logo lookup for {name} failed via {resolver.name}: {e!r}")
            return name, None

    results = await asyncio.gather(*(resolve_one(name) for name in names))
    logos: ResolvedLogos = dict(results)
    found = sum(1 for url in logos.values() if url)
    logger.info(f"Resolved logos for {found}/{len(names)} teams via {resolver.name}")
    return logos


class MatchService:
    """Source -> logo fan-out -> normalizer, behind a revalidation cache."""

    def __init__(
        self,
        source: MatchSource,
        resolver: LogoResolver,
        normalizer: Optional[MatchNormalizer] = None,
        cache: Optional[TTLCache] = None,
        ttl_seconds: float = 3600,
    ):
        self.source = source
        self.resolver = resolver
        self.normalizer = normalizer or MatchNormalizer()
        self.cache = cache if cache is not None else page_cache
        self.ttl_seconds = ttl_seconds
        # One lock per cache key; requests that miss together rebuild once
        self._locks: Dict[str, asyncio.Lock] = {}

    def _lock_for(self, key: str) -> asyncio.Lock:
        return self._locks.setdefault(key, asyncio.Lock())

    async def build_matches(self, scope: MatchScope) -> List[NormalizedMatch]:
        """Run the pipeline once, bypassing the cache.

        Logos are resolved afresh on every run.
        """
        raw_matches = await self.source.fetch_matches(scope)
        if not raw_matches:
            logger.warning(f"No matches returned for {scope}")
            return []

        team_names = collect_team_names(raw_matches)
        self.resolver.reset()
        logos = await resolve_logos(self.resolver, team_names)
        matches = self.normalizer.normalize(raw_matches, logos)
        logger.success(f"Built {len(matches)} matches for {scope}")
        return matches

    async def get_matches(self, scope: MatchScope) -> List[NormalizedMatch]:
        """Matches for ``scope``, recomputed at most once per TTL.

        Empty results are not cached, so an upstream outage does not pin the
        empty page for a whole revalidation window. Unexpected exceptions
        propagate to the caller.
        """
        key = scope.cache_key()
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Page cache hit: {key}")
            return cached

        async with self._lock_for(key):
            # Another request may have rebuilt the entry while we waited
            cached = self.cache.get(key)
            if cached is not None:
                return cached
            matches = await self.build_matches(scope)
            if matches:
                self.cache.set(key, matches, self.ttl_seconds)
            return matches

    async def get_available_leagues(self) -> List[AvailableLeague]:
        key = "leagues"
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        async with self._lock_for(key):
            cached = self.cache.get(key)
            if cached is not None:
                return cached
            leagues = await self.source.fetch_available_leagues()
            if leagues:
                self.cache.set(key, leagues, self.ttl_seconds)
            return leagues

    async def close(self) -> None:
        await self.resolver.close()
        # The embedded resolver shares the source, which is closed here once
        await self.source.close()
