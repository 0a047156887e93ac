import asyncio
from typing import Dict, Optional

from loguru import logger

from goalwatch.models.scope import MatchScope
from .base import LogoResolver, MatchSource


class EmbeddedIconResolver(LogoResolver):
    """Answers logo lookups from the icons embedded in a known match set.

    The match set for ``scope`` is fetched on the first lookup of a render and
    every team's ``teamIconUrl`` is indexed by its lower-cased name. ``reset()``
    drops the index so the next render fetches again. No second network
    target is involved, at the cost of the provider's (often small) icons
    instead of external badges.
    """

    name = "embedded"

    def __init__(self, source: MatchSource, scope: MatchScope):
        self.source = source
        self.scope = scope
        self._icons: Optional[Dict[str, str]] = None
        self._lock = asyncio.Lock()

    def reset(self) -> None:
        self._icons = None

    async def _load_icons(self) -> Dict[str, str]:
        async with self._lock:
            if self._icons is None:
                matches = await self.source.fetch_matches(self.scope)
                icons: Dict[str, str] = {}
                for match in matches:
                    for team in (match.team1, match.team2):
                        key = team.team_name.strip().casefold()
                        if key and team.team_icon_url and key not in icons:
                            icons[key] = team.team_icon_url
                logger.info(f"Indexed {len(icons)} embedded team icons for {self.scope}")
                # An empty fetch is not remembered so the next lookup tries again
                if not matches:
                    return icons
                self._icons = icons
            return self._icons

    async def resolve(self, team_name: str) -> Optional[str]:
        if not team_name or not team_name.strip():
            return None
        icons = await self._load_icons()
        logo = icons.get(team_name.strip().casefold())
        if logo is None:
            logger.warning(f"No embedded icon for team: {team_name}")
        return logo
