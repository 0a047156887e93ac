# goalwatch/sources/openligadb_source.py

from typing import Any, List, Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from goalwatch.models.league import AvailableLeague
from goalwatch.models.raw import RawMatch
from goalwatch.models.scope import MatchScope
from .base import BaseAPIClient, MatchSource, SourceError, UpstreamStatusError


def parse_matches(payload: Any, context: str = "") -> List[RawMatch]:
    """Validate an OpenLigaDB match array, skipping records that cannot be parsed."""
    if not isinstance(payload, list):
        logger.error(f"Expected a JSON array of matches{context}, got {type(payload).__name__}")
        return []

    matches: List[RawMatch] = []
    for index, item in enumerate(payload):
        try:
            matches.append(RawMatch.model_validate(item))
        except ValidationError as e:
            match_id = item.get("matchID") if isinstance(item, dict) else None
            logger.warning(
                f"Skipping malformed match record #{index} (matchID={match_id}){context}: "
                f"{e.error_count()} validation error(s)"
            )
            logger.debug(f"Validation details: {e}")
    return matches


class OpenLigaDBSource(BaseAPIClient, MatchSource):
    """Match source backed by the public OpenLigaDB API."""

    provider = "OpenLigaDB"
    name = "openligadb"

    def __init__(
        self,
        base_url: str = "https://api.openligadb.de",
        client: Optional[httpx.AsyncClient] = None,
        max_attempts: int = 1,
    ):
        super().__init__(base_url, client=client, max_attempts=max_attempts)

    async def fetch_matches(self, scope: MatchScope) -> List[RawMatch]:
        """Fetch /getmatchdata for the scope. Upstream failures yield []."""
        path = "getmatchdata/" + "/".join(scope.path_segments())
        logger.info(f"Fetching matches for {scope} from {self.provider}")
        try:
            payload = await self._get_json(path)
        except UpstreamStatusError as e:
            logger.error(
                f"Failed to fetch matches for {scope}: HTTP {e.status_code} - {e.body}"
            )
            return []
        except SourceError as e:
            logger.error(f"Error fetching matches for {scope}: {e}")
            return []

        matches = parse_matches(payload, context=f" for {scope}")
        logger.info(f"Fetched {len(matches)} matches for {scope} from {self.provider}")
        return matches

    async def fetch_available_leagues(self) -> List[AvailableLeague]:
        try:
            payload = await self._get_json("getavailableleagues")
        except SourceError as e:
            logger.error(f"Error fetching available leagues: {e}")
            return []

        if not isinstance(payload, list):
            logger.error("Expected a JSON array of leagues from getavailableleagues")
            return []

        leagues: List[AvailableLeague] = []
        for item in payload:
            try:
                leagues.append(AvailableLeague.model_validate(item))
            except ValidationError as e:
                logger.debug(f"Skipping malformed league entry: {e}")
        return leagues
