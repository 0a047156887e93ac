from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from goalwatch.caching.ttl_cache import make_cache_key


class MatchScope(BaseModel):
    """League, season and round a match list is requested for."""

    model_config = ConfigDict(frozen=True)

    league: str = Field(..., min_length=1)
    season: Optional[int] = Field(None, ge=1900)
    round: Optional[int] = Field(None, ge=1)

    @field_validator("league")
    @classmethod
    def _clean_league(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("league shortcut must not be blank")
        return value

    @model_validator(mode="after")
    def _round_needs_season(self) -> "MatchScope":
        if self.round is not None and self.season is None:
            raise ValueError("a round can only be requested together with a season")
        return self

    def path_segments(self) -> List[str]:
        """OpenLigaDB path segments after /getmatchdata."""
        segments = [self.league]
        if self.season is not None:
            segments.append(str(self.season))
            if self.round is not None:
                segments.append(str(self.round))
        return segments

    def cache_key(self) -> str:
        return make_cache_key("matches", self.league, self.season, self.round)

    def __str__(self) -> str:
        return "/".join(self.path_segments())
