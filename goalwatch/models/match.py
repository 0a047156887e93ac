from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, computed_field


class DisplayTeam(BaseModel):
    """A team as shown on a match card."""

    id: int
    name: str
    logo_url: Optional[str] = None  # Presentation substitutes a placeholder


class Score(BaseModel):
    model_config = ConfigDict(frozen=True)

    team1: int
    team2: int


class DisplayGoal(BaseModel):
    score_team1: int
    score_team2: int
    scorer: str
    minute: Optional[int] = None
    comment: Optional[str] = None

    @computed_field  # type: ignore[misc]
    @property
    def minute_label(self) -> str:
        return "N/A" if self.minute is None else f"{self.minute}'"


class NormalizedMatch(BaseModel):
    """Display-ready match: one derived score, resolved logos, cleaned labels."""

    id: int
    kickoff_utc: datetime
    team1: DisplayTeam
    team2: DisplayTeam
    league_name: str
    league_season: Optional[int] = None
    group_name: Optional[str] = None
    is_finished: bool
    score: Optional[Score] = None
    goals: List[DisplayGoal] = []
    location_city: Optional[str] = None
    location_stadium: Optional[str] = None
    number_of_viewers: Optional[int] = None
    last_update: Optional[datetime] = None

    @computed_field  # type: ignore[misc]
    @property
    def score_label(self) -> str:
        if self.score is None:
            return "vs"
        return f"{self.score.team1} - {self.score.team2}"

    @property
    def description(self) -> str:
        """A human-readable one-liner, used in logs and the terminal summary."""
        return (
            f"{self.league_name}: {self.team1.name} {self.score_label} {self.team2.name} "
            f"({self.kickoff_utc.strftime('%Y-%m-%d %H:%M')} UTC)"
        )
