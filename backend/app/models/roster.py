"""
Roster records read by the statistics engine: teams, players and training attendance.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from app.models.common import CamelModel


class Position(str, Enum):
    GK = "GK"
    CB = "CB"
    LB = "LB"
    RB = "RB"
    CDM = "CDM"
    CM = "CM"
    CAM = "CAM"
    LM = "LM"
    RM = "RM"
    LW = "LW"
    RW = "RW"
    CF = "CF"
    ST = "ST"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
    EXCUSED = "excused"


class SkillRatings(CamelModel):
    """Coach-assessed skill attributes on a 1-100 scale (unrelated to match ratings)."""

    pace: int = Field(50, ge=1, le=100)
    shooting: int = Field(50, ge=1, le=100)
    passing: int = Field(50, ge=1, le=100)
    dribbling: int = Field(50, ge=1, le=100)
    defending: int = Field(50, ge=1, le=100)
    physical: int = Field(50, ge=1, le=100)


class Team(CamelModel):
    id: str
    name: str
    age_category: Optional[str] = None
    birth_year: Optional[int] = None
    logo: Optional[str] = None
    is_active: bool = True


class Player(CamelModel):
    id: str
    team: str = Field(..., description="Team id")
    first_name: str
    last_name: str
    position: Position
    jersey_number: Optional[int] = Field(None, ge=1, le=99)
    photo: Optional[str] = None
    is_active: bool = True
    is_injured: bool = False
    ratings: SkillRatings = Field(default_factory=SkillRatings)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def overall_rating(self) -> int:
        r = self.ratings
        total = r.pace + r.shooting + r.passing + r.dribbling + r.defending + r.physical
        return int(total / 6 + 0.5)


class AttendanceEntry(CamelModel):
    player: str
    status: AttendanceStatus


class Training(CamelModel):
    id: str
    team: str
    date: datetime
    attendance: List[AttendanceEntry] = Field(default_factory=list)
