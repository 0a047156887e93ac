# goalwatch/models/raw.py
"""OpenLigaDB match records.

Parsing a payload through these models is the single validation pass at the
source boundary: after it, collections are lists, team objects exist, names
are strings and kickoffs are timezone-aware UTC datetimes. Downstream code
never has to re-check any of that.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, List, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .enums import ResultKind

# OpenLigaDB reports Windows timezone ids next to its local kickoff
WINDOWS_TIMEZONES = {
    "W. Europe Standard Time": "Europe/Berlin",
    "Central Europe Standard Time": "Europe/Budapest",
    "GMT Standard Time": "Europe/London",
    "UTC": "UTC",
}
DEFAULT_PROVIDER_TIMEZONE = "Europe/Berlin"

FINAL_RESULT_TYPE_ID = 2
HALF_TIME_RESULT_TYPE_ID = 1

_DATETIME = TypeAdapter(datetime)


def _none_if_blank(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


Text = Annotated[str, BeforeValidator(lambda v: "" if v is None else v)]
Count = Annotated[int, BeforeValidator(lambda v: 0 if v is None else v)]
Flag = Annotated[bool, BeforeValidator(lambda v: False if v is None else v)]
OptionalText = Annotated[Optional[str], BeforeValidator(_none_if_blank)]
OptionalDatetime = Annotated[Optional[datetime], BeforeValidator(_none_if_blank)]


class RawModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class RawTeam(RawModel):
    team_id: Count = Field(0, alias="teamId")
    team_name: Text = Field("", alias="teamName")
    short_name: Text = Field("", alias="shortName")
    team_icon_url: OptionalText = Field(None, alias="teamIconUrl")
    team_group_name: OptionalText = Field(None, alias="teamGroupName")


class RawResult(RawModel):
    result_id: Optional[int] = Field(None, alias="resultID")
    result_name: Text = Field("", alias="resultName")
    points_team1: Count = Field(0, alias="pointsTeam1")
    points_team2: Count = Field(0, alias="pointsTeam2")
    result_order_id: Optional[int] = Field(None, alias="resultOrderID")
    result_type_id: Optional[int] = Field(None, alias="resultTypeID")
    result_description: Text = Field("", alias="resultDescription")

    @property
    def kind(self) -> ResultKind:
        """Classify the result from its label, then from its type id."""
        label = self.result_name.strip().lower()
        if "halbzeit" in label or "half" in label or label == "ht":
            return ResultKind.HALF_TIME
        if "zwischen" in label or "interim" in label:
            return ResultKind.INTERIM
        if "endergebnis" in label or label in {"final", "final result", "full time", "fulltime", "ft"}:
            return ResultKind.FINAL
        if self.result_type_id == FINAL_RESULT_TYPE_ID:
            return ResultKind.FINAL
        if self.result_type_id == HALF_TIME_RESULT_TYPE_ID:
            return ResultKind.HALF_TIME
        return ResultKind.OTHER


class RawGoal(RawModel):
    goal_id: Optional[int] = Field(None, alias="goalID")
    score_team1: Count = Field(0, alias="scoreTeam1")
    score_team2: Count = Field(0, alias="scoreTeam2")
    goal_getter_name: Text = Field("", alias="goalGetterName")
    match_minute: Optional[int] = Field(None, alias="matchMinute")
    comment: Optional[str] = None


class RawGroup(RawModel):
    group_name: Text = Field("", alias="groupName")
    group_order_id: Optional[int] = Field(None, alias="groupOrderID")
    group_id: Optional[int] = Field(None, alias="groupID")


class RawLocation(RawModel):
    location_id: Optional[int] = Field(None, alias="locationID")
    location_city: Optional[str] = Field(None, alias="locationCity")
    location_stadium: Optional[str] = Field(None, alias="locationStadium")


class RawMatch(RawModel):
    """One match as delivered by OpenLigaDB /getmatchdata."""

    match_id: int = Field(..., alias="matchID")
    kickoff_utc: datetime = Field(..., alias="matchDateTimeUTC")
    kickoff_local: OptionalDatetime = Field(None, alias="matchDateTime")
    time_zone_id: Optional[str] = Field(None, alias="timeZoneID")
    league_id: Optional[int] = Field(None, alias="leagueId")
    league_name: Text = Field("", alias="leagueName")
    league_season: Optional[int] = Field(None, alias="leagueSeason")
    league_shortcut: Text = Field("", alias="leagueShortcut")
    group: Optional[RawGroup] = None
    team1: RawTeam = Field(default_factory=RawTeam)
    team2: RawTeam = Field(default_factory=RawTeam)
    last_update: OptionalDatetime = Field(None, alias="lastUpdateDateTime")
    is_finished: Flag = Field(False, alias="matchIsFinished")
    results: List[RawResult] = Field(default_factory=list, alias="matchResults")
    goals: List[RawGoal] = Field(default_factory=list)
    location: Optional[RawLocation] = None
    number_of_viewers: Optional[int] = Field(None, alias="numberOfViewers")

    @model_validator(mode="before")
    @classmethod
    def _fill_utc_kickoff(cls, data: Any) -> Any:
        """Derive the UTC kickoff from the local one when the provider omits it."""
        if not isinstance(data, dict):
            return data
        if data.get("matchDateTimeUTC") or data.get("kickoff_utc"):
            return data
        local = data.get("matchDateTime") or data.get("kickoff_local")
        if not local:
            return data
        local_dt = _DATETIME.validate_python(local)
        if local_dt.tzinfo is None:
            tz_id = data.get("timeZoneID") or data.get("time_zone_id")
            local_dt = local_dt.replace(tzinfo=_provider_zone(tz_id))
        data = dict(data)
        data["matchDateTimeUTC"] = local_dt.astimezone(timezone.utc)
        return data

    @field_validator("team1", "team2", mode="before")
    @classmethod
    def _default_team(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("results", "goals", mode="before")
    @classmethod
    def _default_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("kickoff_utc")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def team_names(self) -> List[str]:
        return [self.team1.team_name, self.team2.team_name]


def _provider_zone(tz_id: Optional[str]) -> ZoneInfo:
    name = WINDOWS_TIMEZONES.get(tz_id or "", tz_id or DEFAULT_PROVIDER_TIMEZONE)
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo(DEFAULT_PROVIDER_TIMEZONE)
