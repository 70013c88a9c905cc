"""
Dashboard router.
"""

import asyncio
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_dashboard_composer
from app.models.common import ErrorResponse
from app.models.dashboard import Overview, PlayerPerformance, TeamDashboard
from app.services.dashboard import DashboardComposer

router = APIRouter()


@router.get("/overview", response_model=Overview)
async def get_overview(
    team_ids: Optional[List[str]] = Query(None, alias="teamIds", description="Limit to these teams"),
    composer: DashboardComposer = Depends(get_dashboard_composer),
):
    """
    Club overview: counts, results, standings, leaderboards and training attendance.

    - **teamIds**: Teams visible to the caller; omit for all teams
    """
    return await asyncio.to_thread(composer.overview, team_ids)


@router.get(
    "/teams/{team_id}",
    response_model=TeamDashboard,
    responses={404: {"model": ErrorResponse, "description": "Team not found"}},
)
async def get_team_dashboard(team_id: str, composer: DashboardComposer = Depends(get_dashboard_composer)):
    """Coach dashboard for one team."""
    return await asyncio.to_thread(composer.team_dashboard, team_id)


@router.get(
    "/players/{player_id}/performance",
    response_model=PlayerPerformance,
    responses={404: {"model": ErrorResponse, "description": "Player not found"}},
)
async def get_player_performance(player_id: str, composer: DashboardComposer = Depends(get_dashboard_composer)):
    """Player totals and per-match ratings, goals and assists."""
    return await asyncio.to_thread(composer.player_performance, player_id)
