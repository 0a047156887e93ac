import re
from typing import Dict, List, Optional

from loguru import logger

from goalwatch.models.enums import ResultKind
from goalwatch.models.logos import ResolvedLogos
from goalwatch.models.match import DisplayGoal, DisplayTeam, NormalizedMatch, Score
from goalwatch.models.raw import RawGoal, RawMatch, RawResult, RawTeam

UNKNOWN_TEAM = "Unknown Team"
UNKNOWN_PLAYER = "Unknown Player"

# "15. Spieltag" -> "Spieltag". A run of stacked ordinals is removed as one
# prefix so stripping an already stripped label changes nothing.
ORDINAL_PREFIX_RE = re.compile(r"^\s*(?:\d+\.\s+)+")


def strip_ordinal_prefix(label: Optional[str]) -> str:
    """Trim ``label`` and drop a leading "<digits>. " ordinal."""
    if not label:
        return ""
    return ORDINAL_PREFIX_RE.sub("", label).strip()


def clean_optional(text: Optional[str]) -> Optional[str]:
    """Trimmed text, or None when nothing is left."""
    if text is None:
        return None
    text = text.strip()
    return text or None


def goal_sort_key(goal: RawGoal) -> int:
    # Null minutes order as minute 0; the stored minute stays None
    return goal.match_minute if goal.match_minute is not None else 0


def sort_goals(goals: List[RawGoal]) -> List[RawGoal]:
    """Goals ascending by minute. sorted() is stable, so ties keep provider order."""
    return sorted(goals, key=goal_sort_key)


def _find_result(results: List[RawResult], *kinds: ResultKind) -> Optional[RawResult]:
    for result in results:
        if result.kind in kinds:
            return result
    return None


def derive_score(match: RawMatch, ordered_goals: Optional[List[RawGoal]] = None) -> Optional[Score]:
    """The single score shown for a match; first satisfied rule wins.

    1. finished and a final result exists -> final result
    2. a half-time or interim result exists -> that result
    3. at least one goal -> running score after the last goal by minute
    4. otherwise no score
    """
    if match.is_finished:
        final = _find_result(match.results, ResultKind.FINAL)
        if final is not None:
            return Score(team1=final.points_team1, team2=final.points_team2)

    interim = _find_result(match.results, ResultKind.HALF_TIME, ResultKind.INTERIM)
    if interim is not None:
        return Score(team1=interim.points_team1, team2=interim.points_team2)

    goals = ordered_goals if ordered_goals is not None else sort_goals(match.goals)
    if goals:
        last = goals[-1]
        return Score(team1=last.score_team1, team2=last.score_team2)

    return None


class MatchNormalizer:
    """Joins raw OpenLigaDB matches with resolved logos into display records."""

    def normalize(
        self, raw_matches: List[RawMatch], logos: Optional[ResolvedLogos] = None
    ) -> List[NormalizedMatch]:
        """Normalizes raw matches into NormalizedMatch objects.

        Args:
            raw_matches: Validated match records from a MatchSource.
            logos: Team display name -> logo URL (None for "not found").

        Returns:
            One NormalizedMatch per input match, ascending by kickoff. Matches
            with equal kickoffs keep their input order.
        """
        logos = logos or {}
        logos_by_key: Dict[str, Optional[str]] = {}
        for name, url in logos.items():
            key = name.strip().casefold()
            # An exact entry with a URL beats a case-variant without one
            if url or key not in logos_by_key:
                logos_by_key[key] = url

        logger.debug(
            f"Normalizing {len(raw_matches)} matches with {len(logos_by_key)} resolved logos"
        )
        normalized = [self.normalize_match(raw, logos_by_key) for raw in raw_matches]
        normalized.sort(key=lambda m: m.kickoff_utc)

        logger.info(f"Normalization complete. Produced {len(normalized)} matches.")
        return normalized

    def normalize_match(
        self, raw: RawMatch, logos_by_key: Dict[str, Optional[str]]
    ) -> NormalizedMatch:
        ordered_goals = sort_goals(raw.goals)
        location = raw.location

        return NormalizedMatch(
            id=raw.match_id,
            kickoff_utc=raw.kickoff_utc,
            team1=self._display_team(raw.team1, logos_by_key),
            team2=self._display_team(raw.team2, logos_by_key),
            league_name=strip_ordinal_prefix(raw.league_name),
            league_season=raw.league_season,
            group_name=clean_optional(strip_ordinal_prefix(raw.group.group_name)) if raw.group else None,
            is_finished=raw.is_finished,
            score=derive_score(raw, ordered_goals),
            goals=[self._display_goal(goal) for goal in ordered_goals],
            location_city=clean_optional(location.location_city) if location else None,
            location_stadium=clean_optional(location.location_stadium) if location else None,
            number_of_viewers=raw.number_of_viewers,
            last_update=raw.last_update,
        )

    def _display_team(
        self, team: RawTeam, logos_by_key: Dict[str, Optional[str]]
    ) -> DisplayTeam:
        name = team.team_name.strip()
        logo = logos_by_key.get(name.casefold()) if name else None
        return DisplayTeam(
            id=team.team_id,
            name=name or UNKNOWN_TEAM,
            logo_url=logo or team.team_icon_url or None,
        )

    def _display_goal(self, goal: RawGoal) -> DisplayGoal:
        return DisplayGoal(
            score_team1=goal.score_team1,
            score_team2=goal.score_team2,
            scorer=goal.goal_getter_name.strip() or UNKNOWN_PLAYER,
            minute=goal.match_minute,
            comment=clean_optional(goal.comment),
        )
