"""Tests for the match pipeline orchestration and its revalidation cache."""

import asyncio

import httpx
import pytest

from builders import StubLogoResolver, StubMatchSource, raw_match
from goalwatch.caching.ttl_cache import TTLCache
from goalwatch.models.league import AvailableLeague
from goalwatch.models.scope import MatchScope
from goalwatch.services.match_service import MatchService, collect_team_names, resolve_logos
from goalwatch.sources.embedded_resolver import EmbeddedIconResolver
from goalwatch.sources.sportsdb_resolver import SportsDBLogoResolver


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class SlowMatchSource(StubMatchSource):
    """Yields to the event loop before answering, like a real request."""

    async def fetch_matches(self, scope):
        await asyncio.sleep(0.01)
        return await super().fetch_matches(scope)


def two_matches():
    return [
        raw_match(
            matchID=2,
            matchDateTimeUTC="2023-08-19T14:00:00Z",
            team1={"teamName": "Liverpool FC", "teamIconUrl": "https://i/liverpool.png"},
            team2={"teamName": "Aston Villa"},
        ),
        raw_match(
            matchID=1,
            matchDateTimeUTC="2023-08-12T14:00:00Z",
            team1={"teamName": " Chelsea FC "},
            team2={"teamName": "Liverpool FC"},
        ),
    ]


class TestCollectTeamNames:
    """Distinct name set for the logo fan-out."""

    def test_distinct_trimmed_non_blank(self):
        matches = two_matches() + [raw_match(team1=None, team2={"teamName": "   "})]
        assert collect_team_names(matches) == ["Liverpool FC", "Aston Villa", "Chelsea FC"]


class TestResolveLogos:
    """Concurrent lookups joined into one mapping."""

    @pytest.mark.asyncio
    async def test_failing_lookup_degrades_to_none(self):
        resolver = StubLogoResolver({"Liverpool FC": "https://b/lfc.png"}, failing={"Chelsea FC"})

        logos = await resolve_logos(resolver, ["Liverpool FC", "Chelsea FC", "Aston Villa"])

        assert logos == {"Liverpool FC": "https://b/lfc.png", "Chelsea FC": None, "Aston Villa": None}

    @pytest.mark.asyncio
    async def test_each_name_is_requested_once(self):
        resolver = StubLogoResolver()
        await resolve_logos(resolver, ["A", "B", "A"])
        assert sorted(resolver.requested) == ["A", "B"]


class TestMatchService:
    """Source, logo fan-out and normalizer wired together."""

    @pytest.mark.asyncio
    async def test_build_matches(self, gb1_scope, cache):
        source = StubMatchSource(two_matches())
        resolver = StubLogoResolver({"Chelsea FC": "https://b/chelsea.png"}, failing={"Aston Villa"})
        service = MatchService(source, resolver, cache=cache)

        matches = await service.build_matches(gb1_scope)

        assert [m.id for m in matches] == [1, 2]
        assert matches[0].team1.logo_url == "https://b/chelsea.png"
        # No resolved logo, so the embedded icon is used
        assert matches[1].team1.logo_url == "https://i/liverpool.png"
        assert matches[1].team2.logo_url is None
        assert sorted(resolver.requested) == ["Aston Villa", "Chelsea FC", "Liverpool FC"]

    @pytest.mark.asyncio
    async def test_empty_source_skips_logo_lookups(self, gb1_scope, cache):
        resolver = StubLogoResolver()
        service = MatchService(StubMatchSource([]), resolver, cache=cache)

        assert await service.build_matches(gb1_scope) == []
        assert resolver.requested == []

    @pytest.mark.asyncio
    async def test_results_are_cached_per_scope(self, gb1_scope, cache):
        source = StubMatchSource(two_matches())
        service = MatchService(source, StubLogoResolver(), cache=cache, ttl_seconds=3600)

        first = await service.get_matches(gb1_scope)
        second = await service.get_matches(gb1_scope)

        assert first == second
        assert source.calls == 1

    @pytest.mark.asyncio
    async def test_cache_expires_after_ttl(self, gb1_scope):
        clock = FakeClock()
        source = StubMatchSource(two_matches())
        service = MatchService(source, StubLogoResolver(), cache=TTLCache(clock=clock), ttl_seconds=3600)

        await service.get_matches(gb1_scope)
        clock.now += 3599
        await service.get_matches(gb1_scope)
        assert source.calls == 1

        clock.now += 1
        await service.get_matches(gb1_scope)
        assert source.calls == 2

    @pytest.mark.asyncio
    async def test_empty_results_are_not_cached(self, gb1_scope, cache):
        source = StubMatchSource([])
        service = MatchService(source, StubLogoResolver(), cache=cache)

        await service.get_matches(gb1_scope)
        await service.get_matches(gb1_scope)

        assert source.calls == 2
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_zero_ttl_disables_cache(self, gb1_scope, cache):
        source = StubMatchSource(two_matches())
        service = MatchService(source, StubLogoResolver(), cache=cache, ttl_seconds=0)

        await service.get_matches(gb1_scope)
        await service.get_matches(gb1_scope)

        assert source.calls == 2

    @pytest.mark.asyncio
    async def test_unexpected_error_propagates(self, gb1_scope, cache):
        service = MatchService(StubMatchSource(error=RuntimeError("boom")), StubLogoResolver(), cache=cache)

        with pytest.raises(RuntimeError):
            await service.get_matches(gb1_scope)

    @pytest.mark.asyncio
    async def test_available_leagues_are_cached(self, cache):
        league = AvailableLeague(league_id=4612, league_name="Premier League", league_shortcut="gb1", league_season="2023")
        source = StubMatchSource(leagues=[league])
        service = MatchService(source, StubLogoResolver(), cache=cache)

        assert await service.get_available_leagues() == [league]
        source.leagues = []
        assert await service.get_available_leagues() == [league]

    @pytest.mark.asyncio
    async def test_close_closes_both_ends(self, cache):
        source, resolver = StubMatchSource(), StubLogoResolver()

        await MatchService(source, resolver, cache=cache).close()

        assert source.closed and resolver.closed


class TestRevalidation:
    """Logos are resolved again once the page cache expires."""

    @pytest.mark.asyncio
    async def test_sportsdb_badges_refresh_after_ttl(self, gb1_scope):
        badges = iter(["https://b/old.png", "https://b/new.png"])
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"teams": [{"strTeam": "Burnley", "strBadge": next(badges)}]})

        clock = FakeClock()
        source = StubMatchSource([raw_match(team1={"teamName": "Burnley FC"}, team2=None)])
        resolver = SportsDBLogoResolver(
            api_root="https://sportsdb.test/api/v1/json/3",
            client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )
        service = MatchService(source, resolver, cache=TTLCache(clock=clock), ttl_seconds=3600)

        try:
            [first] = await service.get_matches(gb1_scope)
            clock.now += 3600
            [second] = await service.get_matches(gb1_scope)
        finally:
            await service.close()

        assert first.team1.logo_url == "https://b/old.png"
        assert second.team1.logo_url == "https://b/new.png"
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_embedded_icons_refresh_after_ttl(self, gb1_scope):
        clock = FakeClock()
        source = StubMatchSource([raw_match(team1={"teamName": "Burnley FC", "teamIconUrl": None})])
        resolver = EmbeddedIconResolver(source, gb1_scope)
        service = MatchService(source, resolver, cache=TTLCache(clock=clock), ttl_seconds=3600)

        [first] = await service.get_matches(gb1_scope)
        source.matches = [raw_match(team1={"teamName": "Burnley FC", "teamIconUrl": "https://i/burnley.png"})]
        clock.now += 3600
        [second] = await service.get_matches(gb1_scope)

        assert first.team1.logo_url is None
        assert second.team1.logo_url == "https://i/burnley.png"

    @pytest.mark.asyncio
    async def test_resolver_is_reset_for_each_build(self, gb1_scope, cache):
        resets = []

        class RecordingResolver(StubLogoResolver):
            def reset(self):
                resets.append(True)

        service = MatchService(StubMatchSource(two_matches()), RecordingResolver(), cache=cache)

        await service.build_matches(gb1_scope)
        await service.build_matches(gb1_scope)

        assert len(resets) == 2


class TestConcurrentMisses:
    """Requests that miss the cache together share one rebuild."""

    @pytest.mark.asyncio
    async def test_one_rebuild_per_scope(self, gb1_scope, cache):
        source = SlowMatchSource(two_matches())
        resolver = StubLogoResolver()
        service = MatchService(source, resolver, cache=cache)

        results = await asyncio.gather(*(service.get_matches(gb1_scope) for _ in range(5)))

        assert source.calls == 1
        assert len(resolver.requested) == 3
        assert all(r == results[0] for r in results)

    @pytest.mark.asyncio
    async def test_different_scopes_rebuild_independently(self, cache):
        source = SlowMatchSource(two_matches())
        service = MatchService(source, StubLogoResolver(), cache=cache)

        await asyncio.gather(
            service.get_matches(MatchScope(league="gb1", season=2023)),
            service.get_matches(MatchScope(league="gb1", season=2023, round=1)),
        )

        assert source.calls == 2
