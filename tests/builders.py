"""Builders for OpenLigaDB-shaped records and stand-in sources."""

import copy
from typing import Dict, Iterable, List, Optional

from goalwatch.models.league import AvailableLeague
from goalwatch.models.raw import RawMatch
from goalwatch.models.scope import MatchScope
from goalwatch.sources.base import LogoResolver, MatchSource

BASE_MATCH = {
    "matchID": 1000,
    "matchDateTimeUTC": "2023-08-12T14:00:00Z",
    "matchDateTime": "2023-08-12T16:00:00",
    "timeZoneID": "W. Europe Standard Time",
    "leagueId": 4612,
    "leagueName": "Premier League 2023/2024",
    "leagueSeason": 2023,
    "leagueShortcut": "gb1",
    "group": {"groupName": "1. Spieltag", "groupOrderID": 1, "groupID": 41001},
    "team1": {"teamId": 4, "teamName": "Liverpool FC", "shortName": "Liverpool", "teamIconUrl": None},
    "team2": {"teamId": 3, "teamName": "Chelsea FC", "shortName": "Chelsea", "teamIconUrl": None},
    "lastUpdateDateTime": None,
    "matchIsFinished": False,
    "matchResults": [],
    "goals": [],
    "location": None,
    "numberOfViewers": None,
}


def match_payload(**overrides) -> dict:
    """An OpenLigaDB match record with top-level fields replaced."""
    payload = copy.deepcopy(BASE_MATCH)
    payload.update(overrides)
    return payload


def raw_match(**overrides) -> RawMatch:
    return RawMatch.model_validate(match_payload(**overrides))


def result(name: str, points1: int, points2: int, type_id: Optional[int] = None) -> dict:
    return {
        "resultName": name,
        "pointsTeam1": points1,
        "pointsTeam2": points2,
        "resultTypeID": type_id,
    }


def goal(minute: Optional[int], score1: int, score2: int, scorer: Optional[str] = "Someone", comment=None) -> dict:
    return {
        "matchMinute": minute,
        "scoreTeam1": score1,
        "scoreTeam2": score2,
        "goalGetterName": scorer,
        "comment": comment,
    }


class StubMatchSource(MatchSource):
    """Returns canned matches and counts calls."""

    name = "stub"

    def __init__(
        self,
        matches: Optional[List[RawMatch]] = None,
        leagues: Optional[List[AvailableLeague]] = None,
        error: Optional[Exception] = None,
    ):
        self.matches = matches or []
        self.leagues = leagues or []
        self.error = error
        self.calls = 0
        self.scopes: List[MatchScope] = []
        self.closed = False

    async def fetch_matches(self, scope: MatchScope) -> List[RawMatch]:
        self.calls += 1
        self.scopes.append(scope)
        if self.error is not None:
            raise self.error
        return list(self.matches)

    async def fetch_available_leagues(self) -> List[AvailableLeague]:
        return list(self.leagues)

    async def close(self) -> None:
        self.closed = True


class StubLogoResolver(LogoResolver):
    """Answers from a dict; names in ``failing`` raise."""

    name = "stub"

    def __init__(self, logos: Optional[Dict[str, str]] = None, failing: Iterable[str] = ()):
        self.logos = logos or {}
        self.failing = set(failing)
        self.requested: List[str] = []
        self.closed = False

    async def resolve(self, team_name: str) -> Optional[str]:
        self.requested.append(team_name)
        if team_name in self.failing:
            raise RuntimeError(f"lookup exploded for {team_name}")
        return self.logos.get(team_name)

    async def close(self) -> None:
        self.closed = True


