"""
Statistics value objects.

Aggregates are derived from match event logs on every read and are never
persisted by the aggregators. Cached statistics are the stored counters kept
by the stat cache writer; they are advisory and yield to the aggregates.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field

from app.models.common import CamelModel


class PlayerAggregate(CamelModel):
    player_id: str
    matches_played: int = 0
    goals: int = 0
    assists: int = 0
    yellow_cards: int = 0
    red_cards: int = 0
    average_rating: Optional[float] = None
    minutes_played: int = 0
    skipped_events: int = Field(0, description="Events ignored because they reference unknown players")


class TeamAggregate(CamelModel):
    team_id: Optional[str] = None
    total_matches: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    points: int = 0


class CompetitionRecord(CamelModel):
    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0


class TeamReport(CamelModel):
    """Results view of a team: totals, clean sheets, competitions and form."""

    team_id: str
    total: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    clean_sheets: int = 0
    by_competition: Dict[str, CompetitionRecord] = Field(default_factory=dict)
    recent_form: List[str] = Field(default_factory=list)


class PlayerMatchPerformance(CamelModel):
    match_id: str
    date: datetime
    opponent: str
    rating: Optional[float] = None
    goals: int = 0
    assists: int = 0


class CachedPlayerStatistics(CamelModel):
    matches_played: int = 0
    goals: int = 0
    assists: int = 0
    yellow_cards: int = 0
    red_cards: int = 0
    minutes_played: int = 0


class CachedTeamStatistics(CamelModel):
    total_matches: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0


class Discrepancy(CamelModel):
    subject: str = Field(..., description="'player' or 'team'")
    subject_id: str
    field: str
    cached: int
    derived: int


class ReconciliationResult(CamelModel):
    team_id: str
    players_updated: int = 0
    discrepancies: List[Discrepancy] = Field(default_factory=list)


class FormResponse(CamelModel):
    team_id: str
    form: List[str]
