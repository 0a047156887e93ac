"""HTTP routes: the match page, its JSON twins and a health check."""

from datetime import datetime
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from loguru import logger
from pydantic import ValidationError

from goalwatch.config.settings import AppSettings
from goalwatch.config.version import APP_DESCRIPTION, APP_NAME, VERSION
from goalwatch.models.league import AvailableLeague
from goalwatch.models.match import NormalizedMatch
from goalwatch.models.scope import MatchScope
from goalwatch.presentation.filters import (
    ALL_TEAMS,
    PLACEHOLDER_LOGO_URL,
    filter_matches_by_team,
    format_kickoff_date,
    format_kickoff_time,
    logo_or_placeholder,
    team_names,
)
from goalwatch.services.match_service import MatchService

TEMPLATE_DIR = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATE_DIR))
templates.env.filters["kickoff_date"] = format_kickoff_date
templates.env.filters["kickoff_time"] = format_kickoff_time
templates.env.filters["logo"] = logo_or_placeholder

# Goals listed on a card before "...and more"
MAX_GOALS_ON_CARD = 3

health_router = APIRouter()
api_router = APIRouter()
page_router = APIRouter()


def get_service(request: Request) -> MatchService:
    return request.app.state.service


def get_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def resolve_scope(
    settings: AppSettings,
    league: Optional[str] = None,
    season: Optional[int] = None,
    round: Optional[int] = None,
) -> MatchScope:
    """Scope from query parameters, falling back to the configured default."""
    if league is None and season is None and round is None:
        return settings.default_scope()
    try:
        return MatchScope(
            league=league or settings.league_shortcut,
            season=season,
            round=round,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=[{"loc": err["loc"], "msg": err["msg"]} for err in e.errors()],
        ) from e


def scope_params(
    request: Request,
    league: Optional[str] = Query(None, description="OpenLigaDB league shortcut"),
    season: Optional[int] = Query(None, description="Season year"),
    round: Optional[int] = Query(None, description="Round (needs a season)"),
) -> MatchScope:
    return resolve_scope(get_settings(request), league, season, round)


# =============================================================================
# Health
# =============================================================================


@health_router.get("/health")
def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy", "version": VERSION}


# =============================================================================
# JSON API
# =============================================================================


@api_router.get("/matches", response_model=List[NormalizedMatch])
async def list_matches(
    team: Optional[str] = Query(None, description="Only matches of this team"),
    scope: MatchScope = Depends(scope_params),
    service: MatchService = Depends(get_service),
):
    """Normalized matches for a scope, optionally filtered by team."""
    try:
        matches = await service.get_matches(scope)
    except Exception as e:
        logger.exception(f"Error building matches for {scope}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="There was a problem loading the match schedule.",
        ) from e
    return filter_matches_by_team(matches, team)


@api_router.get("/teams", response_model=List[str])
async def list_teams(
    scope: MatchScope = Depends(scope_params),
    service: MatchService = Depends(get_service),
):
    try:
        matches = await service.get_matches(scope)
    except Exception as e:
        logger.exception(f"Error building matches for {scope}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="There was a problem loading the match schedule.",
        ) from e
    return team_names(matches)


@api_router.get("/leagues", response_model=List[AvailableLeague])
async def list_leagues(service: MatchService = Depends(get_service)):
    return await service.get_available_leagues()


# =============================================================================
# Page
# =============================================================================


@page_router.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    team: Optional[str] = Query(None),
    scope: MatchScope = Depends(scope_params),
    service: MatchService = Depends(get_service),
):
    """Match cards with a team filter.

    An unexpected pipeline failure renders the error panel; an empty result
    renders the "no matches" message. The two never mix.
    """
    settings = get_settings(request)
    matches: List[NormalizedMatch] = []
    error_fetching_data = False

    try:
        matches = await service.get_matches(scope)
    except Exception:
        logger.exception(f"Error fetching data for the match page ({scope})")
        error_fetching_data = True

    selected_team = team.strip() if team and team.strip().lower() != ALL_TEAMS else None
    context = {
        "app_name": APP_NAME,
        "app_description": APP_DESCRIPTION,
        "version": VERSION,
        "scope": scope,
        "error_fetching_data": error_fetching_data,
        "has_matches": bool(matches),
        "matches": filter_matches_by_team(matches, selected_team),
        "teams": team_names(matches),
        "selected_team": selected_team,
        "display_timezone": settings.display_timezone,
        "placeholder_logo": PLACEHOLDER_LOGO_URL,
        "max_goals": MAX_GOALS_ON_CARD,
        "year": datetime.now().year,
    }
    return templates.TemplateResponse(request, "index.html", context)
