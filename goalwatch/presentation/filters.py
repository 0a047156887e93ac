import unicodedata
from datetime import datetime
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from goalwatch.models.match import NormalizedMatch

PLACEHOLDER_LOGO_URL = "https://placehold.co/64x64.png"
ALL_TEAMS = "all"


def filter_matches_by_team(
    matches: List[NormalizedMatch], team: Optional[str]
) -> List[NormalizedMatch]:
    """Matches involving ``team`` (case-insensitive). No selection keeps everything."""
    if team is None or not team.strip() or team.strip().lower() == ALL_TEAMS:
        return matches
    wanted = team.strip().casefold()
    return [
        match
        for match in matches
        if match.team1.name.casefold() == wanted or match.team2.name.casefold() == wanted
    ]


def collation_key(name: str) -> tuple:
    """Sort key that compares base letters first: "aston" < "Bayern" < "Évian"."""
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), name.casefold(), name)


def team_names(matches: Iterable[NormalizedMatch]) -> List[str]:
    """Distinct team display names in alphabetical order, ignoring case and accents."""
    names = set()
    for match in matches:
        if match.team1.name:
            names.add(match.team1.name)
        if match.team2.name:
            names.add(match.team2.name)
    return sorted(names, key=collation_key)


def logo_or_placeholder(url: Optional[str]) -> str:
    return url or PLACEHOLDER_LOGO_URL


def _zone(tz_name: str) -> ZoneInfo:
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo("UTC")


def format_kickoff_date(kickoff: datetime, tz_name: str = "UTC") -> str:
    """e.g. 'August 11, 2023'."""
    local = kickoff.astimezone(_zone(tz_name))
    return f"{local.strftime('%B')} {local.day}, {local.year}"


def format_kickoff_time(kickoff: datetime, tz_name: str = "UTC") -> str:
    """e.g. '07:00 PM'."""
    return kickoff.astimezone(_zone(tz_name)).strftime("%I:%M %p")
