from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# Team display name -> logo URL; None means "no logo found", not an error
ResolvedLogos = Dict[str, Optional[str]]


class SportsDBTeam(BaseModel):
    """A candidate returned by TheSportsDB searchteams.php."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    id_team: str = Field("", alias="idTeam")
    name: str = Field("", alias="strTeam")
    # The API renamed strTeamBadge to strBadge; accept either
    badge_url: Optional[str] = Field(
        None, validation_alias=AliasChoices("strTeamBadge", "strBadge", "badge_url")
    )
    alternate_names: Optional[str] = Field(None, alias="strAlternate")
    league: Optional[str] = Field(None, alias="strLeague")

    @field_validator("id_team", "name", mode="before")
    @classmethod
    def _text(cls, value):
        return "" if value is None else str(value)

    @field_validator("badge_url", "alternate_names", mode="before")
    @classmethod
    def _blank_as_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class SportsDBResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # The API returns null instead of an empty list when nothing matched
    teams: Optional[List[SportsDBTeam]] = None

    @property
    def candidates(self) -> List[SportsDBTeam]:
        return self.teams or []
