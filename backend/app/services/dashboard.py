"""
Dashboard Composer

Assembles aggregator output into dashboard payloads for the teams a caller
may see. It adds no statistics of its own: sorting, limiting and pass-through
of roster fields (names, photos, positions) only.
"""

import calendar
import logging
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable, List, Optional, Set

from app.models.dashboard import (
    AttendanceSummary,
    LeaderboardEntry,
    MatchSummary,
    Overview,
    OverviewCounts,
    PlayerCounts,
    PlayerPerformance,
    PositionCount,
    ResultSummary,
    TeamDashboard,
    TeamStanding,
)
from app.models.match import Match, MatchStatus, Score
from app.models.roster import AttendanceStatus, Player, Training
from app.models.statistics import PlayerAggregate
from app.services import player_stats, team_stats
from app.services.perspective import form_letter, match_result
from app.services.store import RecordStore
from app.utils.dates import as_utc
from app.utils.exceptions import NotFoundException

logger = logging.getLogger("squadstats.dashboard")

PRESENT_STATUSES = (AttendanceStatus.PRESENT, AttendanceStatus.LATE)
UPCOMING_STATUSES = (MatchStatus.SCHEDULED, MatchStatus.LINEUP_SET)


def _round_percent(value: float) -> int:
    return int(value + 0.5)


def months_ago(now: datetime, months: int) -> datetime:
    year_offset, month_index = divmod(now.month - 1 - months, 12)
    year = now.year + year_offset
    month = month_index + 1
    day = min(now.day, calendar.monthrange(year, month)[1])
    return now.replace(year=year, month=month, day=day)


def leaderboard_entry(player: Player, aggregate: PlayerAggregate) -> LeaderboardEntry:
    return LeaderboardEntry(
        player_id=player.id,
        first_name=player.first_name,
        last_name=player.last_name,
        photo=player.photo,
        team=player.team,
        position=player.position,
        matches_played=aggregate.matches_played,
        goals=aggregate.goals,
        assists=aggregate.assists,
        average_rating=aggregate.average_rating,
    )


def top_scorers(players: Iterable[Player], aggregates: Dict[str, PlayerAggregate], limit: int = 10) -> List[LeaderboardEntry]:
    """Players with at least one goal: goals desc, then assists desc, then name."""
    entries = [leaderboard_entry(p, aggregates[p.id]) for p in players if aggregates[p.id].goals > 0]
    entries.sort(key=lambda e: (-e.goals, -e.assists, e.last_name, e.first_name))
    return entries[:limit]


def top_assisters(players: Iterable[Player], aggregates: Dict[str, PlayerAggregate], limit: int = 5) -> List[LeaderboardEntry]:
    entries = [leaderboard_entry(p, aggregates[p.id]) for p in players if aggregates[p.id].assists > 0]
    entries.sort(key=lambda e: (-e.assists, -e.goals, e.last_name, e.first_name))
    return entries[:limit]


def top_rated(players: Iterable[Player], aggregates: Dict[str, PlayerAggregate], limit: int = 5) -> List[LeaderboardEntry]:
    entries = [
        leaderboard_entry(p, aggregates[p.id]) for p in players if aggregates[p.id].average_rating is not None
    ]
    entries.sort(key=lambda e: (-e.average_rating, e.last_name, e.first_name))
    return entries[:limit]


def position_distribution(players: Iterable[Player]) -> List[PositionCount]:
    counts = Counter(player.position for player in players if player.is_active)
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0].value))
    return [PositionCount(position=position, count=count) for position, count in ordered]


def attendance_summary(trainings: Iterable[Training], now: datetime, days: int = 30) -> AttendanceSummary:
    since = as_utc(now) - timedelta(days=days)
    recent = [t for t in trainings if as_utc(t.date) >= since]

    total = 0.0
    counted = 0
    for training in recent:
        if not training.attendance:
            continue
        present = sum(1 for entry in training.attendance if entry.status in PRESENT_STATUSES)
        total += present / len(training.attendance) * 100
        counted += 1

    return AttendanceSummary(
        total_last_30_days=len(recent),
        average_attendance=_round_percent(total / counted) if counted else 0,
    )


def monthly_training_counts(trainings: Iterable[Training], now: datetime, months: int = 6) -> Dict[str, int]:
    since = months_ago(as_utc(now), months)
    counts = Counter(
        as_utc(t.date).strftime("%Y-%m") for t in trainings if as_utc(t.date) >= since
    )
    return dict(sorted(counts.items()))


def match_summary(match: Match) -> MatchSummary:
    outcome = match_result(match)
    return MatchSummary(
        id=match.id,
        team=match.team,
        opponent_name=match.opponent_name,
        match_date=match.match_date,
        is_home=match.is_home,
        competition=team_stats.competition_name(match),
        status=match.status,
        score=match.score or Score(),
        result=form_letter(outcome) if outcome else None,
    )


def recent_results(matches: Iterable[Match], limit: int = 5) -> List[MatchSummary]:
    completed = sorted((m for m in matches if m.is_completed), key=lambda m: as_utc(m.match_date), reverse=True)
    return [match_summary(m) for m in completed[:limit]]


def upcoming_fixtures(matches: Iterable[Match], now: datetime, limit: int = 5) -> List[MatchSummary]:
    current = as_utc(now)
    upcoming = sorted(
        (m for m in matches if m.status in UPCOMING_STATUSES and as_utc(m.match_date) >= current),
        key=lambda m: as_utc(m.match_date),
    )
    return [match_summary(m) for m in upcoming[:limit]]


def result_summary(matches: Iterable[Match]) -> ResultSummary:
    totals = team_stats.aggregate_results(matches)
    return ResultSummary(
        total=totals.total_matches,
        wins=totals.wins,
        draws=totals.draws,
        losses=totals.losses,
        goals_scored=totals.goals_for,
        win_rate=_round_percent(totals.wins / totals.total_matches * 100) if totals.total_matches else 0,
    )


class DashboardComposer:
    def __init__(
        self,
        records: RecordStore,
        form_size: int = 5,
        match_duration: int = 90,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.records = records
        self.form_size = form_size
        self.match_duration = match_duration
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def _player_aggregates(
        self, players: List[Player], completed: List[Match], roster: Set[str]
    ) -> Dict[str, PlayerAggregate]:
        by_team: Dict[str, List[Match]] = {}
        for match in completed:
            by_team.setdefault(match.team, []).append(match)
        return {
            player.id: player_stats.aggregate_player(
                player.id, by_team.get(player.team, []), roster, self.match_duration
            )
            for player in players
        }

    def team_dashboard(self, team_id: str) -> TeamDashboard:
        team = self.records.get_team(team_id)
        if team is None:
            raise NotFoundException(f"Team {team_id} not found")

        now = self.clock()
        players = self.records.list_players(team_ids=[team_id], active_only=True)
        matches = self.records.list_matches(team_ids=[team_id])
        completed = [m for m in matches if m.is_completed]
        aggregates = self._player_aggregates(players, completed, set(self.records.roster(team_id)))
        injured = sum(1 for p in players if p.is_injured)

        return TeamDashboard(
            team=team,
            counts=PlayerCounts(
                total_players=len(players),
                injured_players=injured,
                available_players=len(players) - injured,
            ),
            statistics=team_stats.aggregate_team(team_id, completed),
            recent_form=team_stats.recent_form(completed, self.form_size),
            top_scorers=top_scorers(players, aggregates, limit=5),
            recent_matches=recent_results(completed),
            upcoming_matches=upcoming_fixtures(matches, now),
            training_stats=attendance_summary(self.records.list_trainings(team_ids=[team_id]), now),
        )

    def overview(self, team_ids: Optional[Iterable[str]] = None) -> Overview:
        """
        Club-wide dashboard. ``team_ids`` limits it to the teams the caller may
        see (a coach's teams); None means every team.
        """
        scope = list(team_ids) if team_ids is not None else None
        now = self.clock()

        teams = self.records.list_teams(team_ids=scope)
        players = self.records.list_players(team_ids=scope)
        matches = self.records.list_matches(team_ids=scope)
        trainings = self.records.list_trainings(team_ids=scope)
        completed = [m for m in matches if m.is_completed]

        active_players = [p for p in players if p.is_active]
        aggregates = self._player_aggregates(active_players, completed, {p.id for p in players})
        standings = [
            TeamStanding(team=team, statistics=team_stats.aggregate_team(team.id, completed))
            for team in sorted(teams, key=lambda t: (-(t.birth_year or 0), t.name))
            if team.is_active
        ]

        logger.debug(f"Composed overview for {len(teams)} teams, {len(completed)} completed matches")
        return Overview(
            counts=OverviewCounts(
                total_teams=len(teams),
                active_teams=sum(1 for t in teams if t.is_active),
                total_players=len(players),
                active_players=len(active_players),
                injured_players=sum(1 for p in players if p.is_injured),
            ),
            match_stats=result_summary(completed),
            teams=standings,
            top_scorers=top_scorers(active_players, aggregates, limit=10),
            top_assisters=top_assisters(active_players, aggregates),
            top_rated=top_rated(active_players, aggregates),
            position_distribution=position_distribution(players),
            training_stats=attendance_summary(trainings, now),
            monthly_training_data=monthly_training_counts(trainings, now),
            recent_matches=recent_results(completed),
            upcoming_matches=upcoming_fixtures(matches, now),
        )

    def player_performance(self, player_id: str) -> PlayerPerformance:
        player = self.records.get_player(player_id)
        if player is None:
            raise NotFoundException(f"Player {player_id} not found")

        completed = self.records.completed_matches(player.team)
        roster = set(self.records.roster(player.team))
        return PlayerPerformance(
            player=player,
            statistics=player_stats.aggregate_player(player_id, completed, roster, self.match_duration),
            match_performance=player_stats.match_performance(player_id, completed),
        )
