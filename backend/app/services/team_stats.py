"""
Team statistics aggregator: results, goals, points, form and competition splits.

Team figures depend only on the score and the home/away flag, never on lineup data.
"""

from typing import Dict, Iterable, List

from app.models.match import Match
from app.models.statistics import CompetitionRecord, TeamAggregate, TeamReport
from app.services.perspective import Outcome, classify, form_letter, match_outcome, match_scores
from app.utils.dates import as_utc

POINTS_PER_WIN = 3
POINTS_PER_DRAW = 1
DEFAULT_COMPETITION = "Friendly"


def points(wins: int, draws: int) -> int:
    return wins * POINTS_PER_WIN + draws * POINTS_PER_DRAW


def aggregate_results(matches: Iterable[Match]) -> TeamAggregate:
    """Fold every supplied match into one results aggregate."""
    result = TeamAggregate()

    for match in matches:
        our_score, their_score = match_scores(match)
        result.total_matches += 1
        result.goals_for += our_score
        result.goals_against += their_score

        outcome = classify(our_score, their_score)
        if outcome == Outcome.WIN:
            result.wins += 1
        elif outcome == Outcome.LOSS:
            result.losses += 1
        else:
            result.draws += 1

    result.goal_difference = result.goals_for - result.goals_against
    result.points = points(result.wins, result.draws)
    return result


def team_matches(team_id: str, matches: Iterable[Match]) -> List[Match]:
    return [match for match in matches if match.team == team_id]


def aggregate_team(team_id: str, matches: Iterable[Match]) -> TeamAggregate:
    """Aggregate the matches owned by ``team_id``; matches of other teams are ignored."""
    result = aggregate_results(team_matches(team_id, matches))
    result.team_id = team_id
    return result


def recent_form(matches: Iterable[Match], n: int = 5) -> List[str]:
    """W/D/L letters of the ``n`` most recent completed matches, most recent first."""
    if n <= 0:
        return []
    completed = [match for match in matches if match.is_completed]
    completed.sort(key=lambda match: as_utc(match.match_date), reverse=True)
    return [form_letter(match_outcome(match)) for match in completed[:n]]


def clean_sheets(matches: Iterable[Match]) -> int:
    return sum(1 for match in matches if match_scores(match)[1] == 0)


def competition_name(match: Match) -> str:
    name = (match.competition or "").strip()
    return name or DEFAULT_COMPETITION


def competition_breakdown(matches: Iterable[Match]) -> Dict[str, CompetitionRecord]:
    breakdown: Dict[str, CompetitionRecord] = {}
    for match in matches:
        record = breakdown.setdefault(competition_name(match), CompetitionRecord())
        record.played += 1
        outcome = match_outcome(match)
        if outcome == Outcome.WIN:
            record.wins += 1
        elif outcome == Outcome.LOSS:
            record.losses += 1
        else:
            record.draws += 1
    return breakdown


def team_report(team_id: str, matches: Iterable[Match], form_size: int = 5) -> TeamReport:
    owned = team_matches(team_id, matches)
    totals = aggregate_results(owned)
    return TeamReport(
        team_id=team_id,
        total=totals.total_matches,
        wins=totals.wins,
        draws=totals.draws,
        losses=totals.losses,
        goals_for=totals.goals_for,
        goals_against=totals.goals_against,
        clean_sheets=clean_sheets(owned),
        by_competition=competition_breakdown(owned),
        recent_form=recent_form(owned, form_size),
    )
