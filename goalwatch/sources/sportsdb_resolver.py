"""TheSportsDB logo lookup.

searchteams.php returns every team whose name loosely matches the query, so
picking the right badge needs a tie-break. The rules are applied in order
and the first one that yields a candidate wins:

- single_result: exactly one candidate came back; accept it regardless of
  its name. This is a heuristic, not a verified match.
- exact_name: case-insensitive equality with the candidate's strTeam.
- alternate_name: the query is a case-insensitive substring of strAlternate.
- first_result: the first candidate in provider order.

The chosen candidate's badge is returned; a chosen candidate without a
badge means no logo.
"""

from typing import List, Optional, Tuple

import httpx
from loguru import logger
from pydantic import ValidationError

from goalwatch.models.logos import SportsDBResponse, SportsDBTeam
from .base import BaseAPIClient, LogoResolver, SourceError, UpstreamStatusError

RULE_SINGLE_RESULT = "single_result"
RULE_EXACT_NAME = "exact_name"
RULE_ALTERNATE_NAME = "alternate_name"
RULE_FIRST_RESULT = "first_result"


def choose_candidate(
    query: str, candidates: List[SportsDBTeam]
) -> Tuple[Optional[SportsDBTeam], Optional[str]]:
    """Pick the candidate for ``query``. Returns (candidate, rule name)."""
    if not candidates:
        return None, None

    if len(candidates) == 1:
        return candidates[0], RULE_SINGLE_RESULT

    wanted = query.strip().casefold()
    for candidate in candidates:
        if candidate.name.strip().casefold() == wanted:
            return candidate, RULE_EXACT_NAME

    for candidate in candidates:
        if candidate.alternate_names and wanted in candidate.alternate_names.casefold():
            return candidate, RULE_ALTERNATE_NAME

    return candidates[0], RULE_FIRST_RESULT


class SportsDBLogoResolver(BaseAPIClient, LogoResolver):
    """Resolves team badges through TheSportsDB team search."""

    provider = "TheSportsDB"
    name = "sportsdb"

    def __init__(
        self,
        api_root: str = "https://www.thesportsdb.com/api/v1/json/3",
        client: Optional[httpx.AsyncClient] = None,
        max_attempts: int = 1,
    ):
        super().__init__(api_root, client=client, max_attempts=max_attempts)

    async def search_teams(self, team_name: str) -> List[SportsDBTeam]:
        """Raw candidate list for ``team_name``; [] on any upstream failure.

        Uncached; the page cache bounds how often this runs.
        """
        try:
            payload = await self._get_json("searchteams.php", {"t": team_name})
        except UpstreamStatusError as e:
            logger.error(
                f"Failed to fetch logo for {team_name}: HTTP {e.status_code} - {e.body}"
            )
            return []
        except SourceError as e:
            logger.error(f"Error fetching logo for {team_name}: {e}")
            return []

        try:
            candidates = SportsDBResponse.model_validate(payload).candidates
        except ValidationError as e:
            logger.error(f"Unexpected TheSportsDB payload for {team_name}: {e.error_count()} error(s)")
            return []

        return candidates

    async def resolve(self, team_name: str) -> Optional[str]:
        if not team_name or not team_name.strip():
            return None

        candidates = await self.search_teams(team_name)
        candidate, rule = choose_candidate(team_name, candidates)
        if candidate is None:
            logger.warning(f"No logo found for team: {team_name}")
            return None

        logger.debug(
            f"Logo candidate for {team_name}: {candidate.name} (rule={rule}, "
            f"{len(candidates)} candidate(s))"
        )
        if not candidate.badge_url:
            logger.warning(f"Chosen candidate {candidate.name} for {team_name} has no badge")
            return None
        return candidate.badge_url
