"""
Data models for a match and its event log.

Scores are always stored by literal home/away side; the owning team's side is
selected by ``is_home``.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from app.models.common import CamelModel


class MatchStatus(str, Enum):
    SCHEDULED = "scheduled"
    LINEUP_SET = "lineup_set"
    IN_PROGRESS = "in_progress"
    HALF_TIME = "half_time"
    COMPLETED = "completed"
    POSTPONED = "postponed"
    CANCELLED = "cancelled"


class GoalType(str, Enum):
    REGULAR = "regular"
    PENALTY = "penalty"
    FREE_KICK = "free_kick"
    HEADER = "header"
    OWN_GOAL = "own_goal"


class CardType(str, Enum):
    YELLOW = "yellow"
    RED = "red"
    SECOND_YELLOW = "second_yellow"


class SubstitutionReason(str, Enum):
    TACTICAL = "tactical"
    INJURY = "injury"
    FATIGUE = "fatigue"
    PERFORMANCE = "performance"


class Score(CamelModel):
    home: Optional[int] = Field(0, ge=0)
    away: Optional[int] = Field(0, ge=0)


class LineupEntry(CamelModel):
    player: str
    position: str
    position_x: float = Field(..., ge=0, le=100, description="Horizontal position on the pitch (percent)")
    position_y: float = Field(..., ge=0, le=100, description="Vertical position on the pitch (percent)")
    is_substitute: bool = False
    is_captain: bool = False


class Goal(CamelModel):
    player: Optional[str] = Field(..., description="Scorer id")
    minute: int = Field(..., ge=0)
    type: GoalType = GoalType.REGULAR
    assist: Optional[str] = Field(None, description="Assisting player id")


class Card(CamelModel):
    player: Optional[str] = Field(..., description="Booked player id")
    minute: int = Field(..., ge=0)
    type: CardType
    reason: Optional[str] = None


class Substitution(CamelModel):
    player_out: str
    player_in: str
    minute: int = Field(..., ge=0)
    reason: SubstitutionReason = SubstitutionReason.TACTICAL


class PlayerRating(CamelModel):
    player: Optional[str] = None
    # Stored logs may hold 0 for "not rated"; only ratings above zero are aggregated.
    rating: Optional[float] = Field(None, ge=0, le=10)
    notes: Optional[str] = None


class MatchStatistics(CamelModel):
    """Team-level figures entered when a match is completed."""

    possession: int = 50
    shots: int = 0
    shots_on_target: int = 0
    corners: int = 0
    fouls: int = 0
    offsides: int = 0
    passes: int = 0
    pass_accuracy: int = 0


class Match(CamelModel):
    """One fixture of a team, with its recorded event log."""

    id: str
    team: str = Field(..., description="Owning team id")
    opponent_name: str
    match_date: datetime
    venue: Optional[str] = None
    is_home: bool = True
    competition: Optional[str] = "Friendly"
    status: MatchStatus = MatchStatus.SCHEDULED
    formation: str = "4-3-3"
    lineup: List[LineupEntry] = Field(default_factory=list)
    substitutes: List[str] = Field(default_factory=list)
    score: Optional[Score] = Field(default_factory=Score)
    goals: List[Goal] = Field(default_factory=list)
    cards: List[Card] = Field(default_factory=list)
    substitutions: List[Substitution] = Field(default_factory=list)
    player_ratings: List[PlayerRating] = Field(default_factory=list)
    statistics: MatchStatistics = Field(default_factory=MatchStatistics)
    opponent_statistics: MatchStatistics = Field(default_factory=MatchStatistics)
    man_of_the_match: Optional[str] = None
    coach_notes: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.status == MatchStatus.COMPLETED

    @property
    def final_score(self) -> str:
        score = self.score or Score()
        return f"{score.home or 0} - {score.away or 0}"


class GoalCreate(CamelModel):
    player: str
    minute: int = Field(..., ge=0)
    type: GoalType = GoalType.REGULAR
    assist: Optional[str] = None


class CardCreate(CamelModel):
    player: str
    minute: int = Field(..., ge=0)
    type: CardType
    reason: Optional[str] = None


class SubstitutionCreate(CamelModel):
    player_out: str
    player_in: str
    minute: int = Field(..., ge=0)
    reason: SubstitutionReason = SubstitutionReason.TACTICAL


class LineupUpdate(CamelModel):
    lineup: List[LineupEntry]
    substitutes: List[str] = Field(default_factory=list)
    formation: str = "4-3-3"


class MatchCompletion(CamelModel):
    score: Optional[Score] = None
    statistics: Optional[MatchStatistics] = None
    opponent_statistics: Optional[MatchStatistics] = None
    man_of_the_match: Optional[str] = None
    player_ratings: List[PlayerRating] = Field(default_factory=list)
    coach_notes: Optional[str] = None
