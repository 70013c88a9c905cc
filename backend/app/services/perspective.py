"""
Team-relative view of a home/away score.
"""

from enum import Enum
from typing import Optional, Tuple

from app.models.match import Match, Score


class Outcome(str, Enum):
    WIN = "win"
    DRAW = "draw"
    LOSS = "loss"


FORM_LETTERS = {Outcome.WIN: "W", Outcome.DRAW: "D", Outcome.LOSS: "L"}


def normalize_score(is_home: bool, score: Optional[Score]) -> Tuple[int, int]:
    """Return (our_score, their_score); missing values count as 0."""
    home = (score.home if score else None) or 0
    away = (score.away if score else None) or 0
    if is_home:
        return home, away
    return away, home


def classify(our_score: int, their_score: int) -> Outcome:
    if our_score > their_score:
        return Outcome.WIN
    if our_score < their_score:
        return Outcome.LOSS
    return Outcome.DRAW


def match_scores(match: Match) -> Tuple[int, int]:
    return normalize_score(match.is_home, match.score)


def match_outcome(match: Match) -> Outcome:
    return classify(*match_scores(match))


def form_letter(outcome: Outcome) -> str:
    return FORM_LETTERS[outcome]


def match_result(match: Match) -> Optional[Outcome]:
    """Outcome of a completed match, None while it is still open."""
    if not match.is_completed:
        return None
    return match_outcome(match)
