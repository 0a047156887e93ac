from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SportInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    sport_id: int = Field(..., alias="sportId")
    sport_name: str = Field("", alias="sportName")


class AvailableLeague(BaseModel):
    """An entry of OpenLigaDB /getavailableleagues."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    league_id: int = Field(..., alias="leagueId")
    league_name: str = Field("", alias="leagueName")
    league_shortcut: str = Field("", alias="leagueShortcut")
    # A string on this endpoint, unlike the int on match records
    league_season: str = Field("", alias="leagueSeason")
    sport: Optional[SportInfo] = None

    @field_validator("league_season", "league_name", "league_shortcut", mode="before")
    @classmethod
    def _as_text(cls, value):
        return "" if value is None else str(value)
