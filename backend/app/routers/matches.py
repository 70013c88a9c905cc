"""
Matches router: recording of lineups and match events.
"""

import asyncio

from fastapi import APIRouter, Depends

from app.dependencies import get_match_event_service
from app.models.common import ErrorResponse
from app.models.match import CardCreate, GoalCreate, LineupUpdate, Match, MatchCompletion, SubstitutionCreate
from app.services.match_events import MatchEventService

router = APIRouter()

WRITE_RESPONSES = {
    200: {"description": "Updated match"},
    400: {"model": ErrorResponse, "description": "Player not on the team roster or not eligible"},
    404: {"model": ErrorResponse, "description": "Match not found"},
    409: {"model": ErrorResponse, "description": "Match is completed and locked"},
}


@router.get(
    "/{match_id}",
    response_model=Match,
    responses={
        200: {"description": "Match with its event log"},
        404: {"model": ErrorResponse, "description": "Match not found"},
    },
)
async def get_match(match_id: str, service: MatchEventService = Depends(get_match_event_service)):
    """
    Get a match by ID.

    - **match_id**: Unique identifier for the match
    """
    return await asyncio.to_thread(service.get_match, match_id)


@router.put("/{match_id}/lineup", response_model=Match, responses=WRITE_RESPONSES)
async def set_lineup(
    match_id: str,
    payload: LineupUpdate,
    service: MatchEventService = Depends(get_match_event_service),
):
    """Replace the lineup, substitutes and formation; marks the match lineup_set."""
    return await asyncio.to_thread(service.set_lineup, match_id, payload)


@router.post("/{match_id}/goals", response_model=Match, responses=WRITE_RESPONSES)
async def add_goal(
    match_id: str,
    payload: GoalCreate,
    service: MatchEventService = Depends(get_match_event_service),
):
    """
    Record a goal scored by the team.

    - **player**: Scorer id
    - **assist**: Optional assisting player id
    """
    return await asyncio.to_thread(service.record_goal, match_id, payload)


@router.post("/{match_id}/cards", response_model=Match, responses=WRITE_RESPONSES)
async def add_card(
    match_id: str,
    payload: CardCreate,
    service: MatchEventService = Depends(get_match_event_service),
):
    """Record a yellow, red or second yellow card."""
    return await asyncio.to_thread(service.record_card, match_id, payload)


@router.post("/{match_id}/substitutions", response_model=Match, responses=WRITE_RESPONSES)
async def add_substitution(
    match_id: str,
    payload: SubstitutionCreate,
    service: MatchEventService = Depends(get_match_event_service),
):
    """Record a substitution; the outgoing player must be on the field and the incoming one not."""
    return await asyncio.to_thread(service.record_substitution, match_id, payload)


@router.put("/{match_id}/complete", response_model=Match, responses=WRITE_RESPONSES)
async def complete_match(
    match_id: str,
    payload: MatchCompletion,
    service: MatchEventService = Depends(get_match_event_service),
):
    """
    Complete a match: final score, statistics, ratings and coach notes.
    Safe to repeat while the stat cache runs in recompute mode.
    """
    return await asyncio.to_thread(service.complete_match, match_id, payload)
