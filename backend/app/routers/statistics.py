"""
Statistics router: derived player and team figures, plus stat cache diagnostics.
"""

import asyncio
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_statistics_service
from app.models.common import ErrorResponse
from app.models.statistics import (
    CachedPlayerStatistics,
    CachedTeamStatistics,
    CompetitionRecord,
    Discrepancy,
    FormResponse,
    PlayerAggregate,
    ReconciliationResult,
    TeamAggregate,
    TeamReport,
)
from app.services.statistics import StatisticsService

router = APIRouter()

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Player or team not found"}}
CACHE_RESPONSES = {
    **NOT_FOUND,
    503: {"model": ErrorResponse, "description": "Stat cache store unavailable"},
}


@router.get("/players/{player_id}", response_model=PlayerAggregate, responses=NOT_FOUND)
async def get_player_statistics(player_id: str, service: StatisticsService = Depends(get_statistics_service)):
    """
    Player totals derived from the completed matches of the player's team.

    - **player_id**: Unique identifier for the player
    """
    return await asyncio.to_thread(service.get_player_aggregate, player_id)


@router.get("/players/{player_id}/cached", response_model=CachedPlayerStatistics, responses=CACHE_RESPONSES)
async def get_cached_player_statistics(player_id: str, service: StatisticsService = Depends(get_statistics_service)):
    """Cached counters for a player. Advisory only; may lag the derived figures."""
    return await asyncio.to_thread(service.get_cached_player, player_id)


@router.get("/teams/{team_id}", response_model=TeamAggregate, responses=NOT_FOUND)
async def get_team_statistics(team_id: str, service: StatisticsService = Depends(get_statistics_service)):
    """Results, goals and points over the team's completed matches."""
    return await asyncio.to_thread(service.get_team_aggregate, team_id)


@router.get("/teams/{team_id}/form", response_model=FormResponse, responses=NOT_FOUND)
async def get_team_form(
    team_id: str,
    n: Optional[int] = Query(None, ge=0, le=50, description="Number of matches, default 5"),
    service: StatisticsService = Depends(get_statistics_service),
):
    """W/D/L letters of the most recent completed matches, most recent first."""
    form = await asyncio.to_thread(service.get_recent_form, team_id, n)
    return FormResponse(team_id=team_id, form=form)


@router.get("/teams/{team_id}/competitions", response_model=Dict[str, CompetitionRecord], responses=NOT_FOUND)
async def get_team_competitions(team_id: str, service: StatisticsService = Depends(get_statistics_service)):
    """Played/won/drawn/lost per competition; matches without one count as Friendly."""
    return await asyncio.to_thread(service.get_competition_breakdown, team_id)


@router.get("/teams/{team_id}/report", response_model=TeamReport, responses=NOT_FOUND)
async def get_team_report(team_id: str, service: StatisticsService = Depends(get_statistics_service)):
    """Totals, clean sheets, competition breakdown and recent form in one payload."""
    return await asyncio.to_thread(service.get_team_report, team_id)


@router.get("/teams/{team_id}/cached", response_model=CachedTeamStatistics, responses=CACHE_RESPONSES)
async def get_cached_team_statistics(team_id: str, service: StatisticsService = Depends(get_statistics_service)):
    """Cached counters for a team. Advisory only; may lag the derived figures."""
    return await asyncio.to_thread(service.get_cached_team, team_id)


@router.get("/teams/{team_id}/discrepancies", response_model=List[Discrepancy], responses=CACHE_RESPONSES)
async def get_team_discrepancies(team_id: str, service: StatisticsService = Depends(get_statistics_service)):
    """Fields where cached counters of the team or its players differ from the derived values."""
    return await asyncio.to_thread(service.find_discrepancies, team_id)


@router.post("/teams/{team_id}/reconcile", response_model=ReconciliationResult, responses=CACHE_RESPONSES)
async def reconcile_team(team_id: str, service: StatisticsService = Depends(get_statistics_service)):
    """Overwrite the cached counters of the team and its roster from a fresh aggregation pass."""
    return await asyncio.to_thread(service.reconcile_team, team_id)
