"""
Dashboard payloads assembled from derived statistics and roster records.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field

from app.models.common import CamelModel
from app.models.match import MatchStatus, Score
from app.models.roster import Player, Position, Team
from app.models.statistics import PlayerAggregate, PlayerMatchPerformance, TeamAggregate


class LeaderboardEntry(CamelModel):
    player_id: str
    first_name: str
    last_name: str
    photo: Optional[str] = None
    team: str
    position: Position
    matches_played: int = 0
    goals: int = 0
    assists: int = 0
    average_rating: Optional[float] = None


class PositionCount(CamelModel):
    position: Position
    count: int


class AttendanceSummary(CamelModel):
    total_last_30_days: int = 0
    average_attendance: int = Field(0, description="Mean attendance percentage (present or late)")


class MatchSummary(CamelModel):
    id: str
    team: str
    opponent_name: str
    match_date: datetime
    is_home: bool
    competition: str
    status: MatchStatus
    score: Score
    result: Optional[str] = Field(None, description="W, D or L for completed matches")


class PlayerCounts(CamelModel):
    total_players: int = 0
    injured_players: int = 0
    available_players: int = 0


class TeamDashboard(CamelModel):
    team: Team
    counts: PlayerCounts
    statistics: TeamAggregate
    recent_form: List[str] = Field(default_factory=list)
    top_scorers: List[LeaderboardEntry] = Field(default_factory=list)
    recent_matches: List[MatchSummary] = Field(default_factory=list)
    upcoming_matches: List[MatchSummary] = Field(default_factory=list)
    training_stats: AttendanceSummary = Field(default_factory=AttendanceSummary)


class OverviewCounts(CamelModel):
    total_teams: int = 0
    active_teams: int = 0
    total_players: int = 0
    active_players: int = 0
    injured_players: int = 0


class ResultSummary(CamelModel):
    total: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_scored: int = 0
    win_rate: int = 0


class TeamStanding(CamelModel):
    team: Team
    statistics: TeamAggregate


class Overview(CamelModel):
    counts: OverviewCounts
    match_stats: ResultSummary
    teams: List[TeamStanding] = Field(default_factory=list)
    top_scorers: List[LeaderboardEntry] = Field(default_factory=list)
    top_assisters: List[LeaderboardEntry] = Field(default_factory=list)
    top_rated: List[LeaderboardEntry] = Field(default_factory=list)
    position_distribution: List[PositionCount] = Field(default_factory=list)
    training_stats: AttendanceSummary = Field(default_factory=AttendanceSummary)
    monthly_training_data: Dict[str, int] = Field(default_factory=dict)
    recent_matches: List[MatchSummary] = Field(default_factory=list)
    upcoming_matches: List[MatchSummary] = Field(default_factory=list)


class PlayerPerformance(CamelModel):
    player: Player
    statistics: PlayerAggregate
    match_performance: List[PlayerMatchPerformance] = Field(default_factory=list)
