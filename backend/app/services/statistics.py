"""
Read side of the statistics engine.

Every figure returned here is derived from the match event logs at call time.
Cached counters are only exposed for diagnostics and reconciliation.
"""

import logging
from typing import Dict, List, Optional

from app.models.match import Match
from app.models.roster import Player, Team
from app.models.statistics import (
    CachedPlayerStatistics,
    CachedTeamStatistics,
    CompetitionRecord,
    Discrepancy,
    PlayerAggregate,
    ReconciliationResult,
    TeamAggregate,
    TeamReport,
)
from app.services import player_stats, team_stats
from app.services.stat_cache import StatCacheWriter
from app.services.store import RecordStore
from app.utils.exceptions import NotFoundException, ServiceUnavailableException, StatCacheError

logger = logging.getLogger("squadstats.statistics")


class StatisticsService:
    def __init__(
        self,
        records: RecordStore,
        writer: StatCacheWriter,
        form_size: int = 5,
        match_duration: int = 90,
    ):
        self.records = records
        self.writer = writer
        self.form_size = form_size
        self.match_duration = match_duration

    def _team(self, team_id: str) -> Team:
        team = self.records.get_team(team_id)
        if team is None:
            raise NotFoundException(f"Team {team_id} not found")
        return team

    def _player(self, player_id: str) -> Player:
        player = self.records.get_player(player_id)
        if player is None:
            raise NotFoundException(f"Player {player_id} not found")
        return player

    def _roster_for(self, matches: List[Match]) -> set:
        team_ids = {match.team for match in matches}
        return {player.id for player in self.records.list_players(team_ids=team_ids)}

    def get_player_aggregate(self, player_id: str, matches: Optional[List[Match]] = None) -> PlayerAggregate:
        """Totals for a player over ``matches`` (default: the completed matches of their team)."""
        player = self._player(player_id)
        if matches is None:
            matches = self.records.completed_matches(player.team)
        aggregate = player_stats.aggregate_player(
            player_id, matches, roster=self._roster_for(matches), match_duration=self.match_duration
        )
        if aggregate.skipped_events:
            logger.warning(
                f"Skipped {aggregate.skipped_events} events with unknown players aggregating {player_id}",
                extra={"player_id": player_id, "team_id": player.team},
            )
        return aggregate

    def get_team_aggregate(self, team_id: str, matches: Optional[List[Match]] = None) -> TeamAggregate:
        self._team(team_id)
        if matches is None:
            matches = self.records.completed_matches(team_id)
        return team_stats.aggregate_team(team_id, matches)

    def get_recent_form(self, team_id: str, n: Optional[int] = None) -> List[str]:
        self._team(team_id)
        size = self.form_size if n is None else n
        return team_stats.recent_form(self.records.completed_matches(team_id), size)

    def get_competition_breakdown(self, team_id: str) -> Dict[str, CompetitionRecord]:
        self._team(team_id)
        return team_stats.competition_breakdown(self.records.completed_matches(team_id))

    def get_team_report(self, team_id: str) -> TeamReport:
        self._team(team_id)
        return team_stats.team_report(team_id, self.records.completed_matches(team_id), self.form_size)

    # Cache diagnostics

    def get_cached_player(self, player_id: str) -> CachedPlayerStatistics:
        self._player(player_id)
        try:
            return self.writer.cache.get_player(player_id)
        except StatCacheError as e:
            raise ServiceUnavailableException("stat cache", str(e)) from e

    def get_cached_team(self, team_id: str) -> CachedTeamStatistics:
        self._team(team_id)
        try:
            return self.writer.cache.get_team(team_id)
        except StatCacheError as e:
            raise ServiceUnavailableException("stat cache", str(e)) from e

    def find_discrepancies(self, team_id: str) -> List[Discrepancy]:
        self._team(team_id)
        try:
            return self.writer.find_discrepancies(team_id)
        except StatCacheError as e:
            raise ServiceUnavailableException("stat cache", str(e)) from e

    def reconcile_team(self, team_id: str) -> ReconciliationResult:
        self._team(team_id)
        try:
            return self.writer.reconcile_team(team_id)
        except StatCacheError as e:
            raise ServiceUnavailableException("stat cache", str(e)) from e
