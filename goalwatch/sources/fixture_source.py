# goalwatch/sources/fixture_source.py
"""Bundled offline data behind the same interfaces as the live providers.

Selected with MATCH_SOURCE=fixture / LOGO_STRATEGY=fixture. Useful for
development without network access and for demos.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger

from goalwatch.models.league import AvailableLeague
from goalwatch.models.raw import RawMatch
from goalwatch.models.scope import MatchScope
from .base import LogoResolver, MatchSource
from .openligadb_source import parse_matches

FIXTURE_DIR = Path(__file__).resolve().parent.parent / "fixtures"
MATCHES_FIXTURE = FIXTURE_DIR / "matches.json"
LOGOS_FIXTURE = FIXTURE_DIR / "logos.json"


def _load_json(path: Path, default: Any) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load fixture {path}: {e}")
        return default


class FixtureMatchSource(MatchSource):
    """Serves OpenLigaDB-shaped match records from a JSON file."""

    name = "fixture"

    def __init__(self, path: Path = MATCHES_FIXTURE):
        self.path = Path(path)
        self._matches: Optional[List[RawMatch]] = None

    def _all_matches(self) -> List[RawMatch]:
        if self._matches is None:
            self._matches = parse_matches(_load_json(self.path, []), context=f" in {self.path.name}")
            logger.info(f"Loaded {len(self._matches)} fixture matches from {self.path}")
        return self._matches

    async def fetch_matches(self, scope: MatchScope) -> List[RawMatch]:
        selected = []
        for match in self._all_matches():
            if match.league_shortcut.lower() != scope.league:
                continue
            if scope.season is not None and match.league_season != scope.season:
                continue
            if scope.round is not None:
                order_id = match.group.group_order_id if match.group else None
                if order_id != scope.round:
                    continue
            selected.append(match)
        logger.debug(f"Fixture source returned {len(selected)} matches for {scope}")
        return selected

    async def fetch_available_leagues(self) -> List[AvailableLeague]:
        leagues: Dict[tuple, AvailableLeague] = {}
        for match in self._all_matches():
            key = (match.league_shortcut, match.league_season)
            if key not in leagues:
                leagues[key] = AvailableLeague(
                    league_id=match.league_id or 0,
                    league_name=match.league_name,
                    league_shortcut=match.league_shortcut,
                    league_season=match.league_season,
                )
        return list(leagues.values())


class FixtureLogoResolver(LogoResolver):
    """Answers from a bundled ``{team name: logo url}`` table."""

    name = "fixture"

    def __init__(self, path: Path = LOGOS_FIXTURE, logos: Optional[Dict[str, str]] = None):
        table = logos if logos is not None else _load_json(Path(path), {})
        self._logos = {
            str(name).strip().casefold(): url for name, url in table.items() if url
        }

    async def resolve(self, team_name: str) -> Optional[str]:
        if not team_name:
            return None
        logo = self._logos.get(team_name.strip().casefold())
        if logo is None:
            logger.warning(f"No fixture logo for team: {team_name}")
        return logo
