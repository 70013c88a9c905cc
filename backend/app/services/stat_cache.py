"""
Stat Cache Writer

Maintains the cached statistics counters of players and teams as a side
effect of recording match events. The cache is a read optimisation only:
whenever it disagrees with the aggregates derived from the event log, the
derived value wins.

Modes:
- recompute: re-run the aggregators over the team's completed matches and
  overwrite the cached record. Repeated delivery of the same event is harmless.
- increment: add a single delta per recorded event. Retrying an event that
  partially succeeded counts it twice.
- off: never write.

Stores:
- MemoryStatCacheStore keeps records in process memory.
- RedisStatCacheStore keeps one hash per record under
  "{prefix}:player:{id}" and "{prefix}:team:{id}".
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

import redis

from app.models.match import Card, Goal, Match
from app.models.statistics import (
    CachedPlayerStatistics,
    CachedTeamStatistics,
    Discrepancy,
    PlayerAggregate,
    ReconciliationResult,
    TeamAggregate,
)
from app.services import membership
from app.services.perspective import Outcome, classify, match_scores
from app.services.player_stats import RED_TYPES, YELLOW_TYPES, aggregate_player
from app.services.store import RecordStore
from app.services.team_stats import aggregate_team
from app.utils.config import Settings
from app.utils.exceptions import StatCacheError

logger = logging.getLogger("squadstats.stat_cache")

PLAYER_FIELDS = tuple(CachedPlayerStatistics.model_fields)
TEAM_FIELDS = tuple(CachedTeamStatistics.model_fields)


class StatCacheStore(ABC):
    """Storage for cached statistics records."""

    @abstractmethod
    def get_player(self, player_id: str) -> CachedPlayerStatistics:
        pass

    @abstractmethod
    def get_team(self, team_id: str) -> CachedTeamStatistics:
        pass

    @abstractmethod
    def set_player(self, player_id: str, stats: CachedPlayerStatistics):
        pass

    @abstractmethod
    def set_team(self, team_id: str, stats: CachedTeamStatistics):
        pass

    @abstractmethod
    def increment_player(self, player_id: str, **deltas: int):
        pass

    @abstractmethod
    def increment_team(self, team_id: str, **deltas: int):
        pass

    @abstractmethod
    def ping(self) -> bool:
        pass


class MemoryStatCacheStore(StatCacheStore):
    def __init__(self):
        self._lock = threading.Lock()
        self._players: Dict[str, Dict[str, int]] = {}
        self._teams: Dict[str, Dict[str, int]] = {}

    def get_player(self, player_id: str) -> CachedPlayerStatistics:
        with self._lock:
            return CachedPlayerStatistics(**self._players.get(player_id, {}))

    def get_team(self, team_id: str) -> CachedTeamStatistics:
        with self._lock:
            return CachedTeamStatistics(**self._teams.get(team_id, {}))

    def set_player(self, player_id: str, stats: CachedPlayerStatistics):
        with self._lock:
            self._players[player_id] = stats.model_dump()

    def set_team(self, team_id: str, stats: CachedTeamStatistics):
        with self._lock:
            self._teams[team_id] = stats.model_dump()

    def increment_player(self, player_id: str, **deltas: int):
        self._increment(self._players, player_id, PLAYER_FIELDS, deltas)

    def increment_team(self, team_id: str, **deltas: int):
        self._increment(self._teams, team_id, TEAM_FIELDS, deltas)

    def _increment(self, records, key, fields, deltas):
        unknown = set(deltas) - set(fields)
        if unknown:
            raise ValueError(f"Unknown statistics fields: {', '.join(sorted(unknown))}")
        with self._lock:
            record = records.setdefault(key, {})
            for field, delta in deltas.items():
                record[field] = record.get(field, 0) + delta

    def ping(self) -> bool:
        return True


class RedisStatCacheStore(StatCacheStore):
    def __init__(self, client, prefix: str = "squadstats"):
        self.client = client
        self.prefix = prefix

    def _key(self, kind: str, record_id: str) -> str:
        return f"{self.prefix}:{kind}:{record_id}"

    def _read(self, key: str, fields) -> Dict[str, int]:
        try:
            raw = self.client.hgetall(key)
        except redis.RedisError as e:
            raise StatCacheError(f"Failed to read {key}: {e}") from e

        values = {}
        for name, value in raw.items():
            if isinstance(name, bytes):
                name = name.decode()
            if name in fields:
                values[name] = int(value)
        return values

    def _overwrite(self, key: str, mapping: Dict[str, int]):
        try:
            pipe = self.client.pipeline(transaction=True)
            pipe.delete(key)
            pipe.hset(key, mapping=mapping)
            pipe.execute()
        except redis.RedisError as e:
            raise StatCacheError(f"Failed to write {key}: {e}") from e

    def _increment(self, key: str, fields, deltas: Dict[str, int]):
        unknown = set(deltas) - set(fields)
        if unknown:
            raise ValueError(f"Unknown statistics fields: {', '.join(sorted(unknown))}")
        try:
            pipe = self.client.pipeline(transaction=True)
            for field, delta in deltas.items():
                pipe.hincrby(key, field, delta)
            pipe.execute()
        except redis.RedisError as e:
            raise StatCacheError(f"Failed to increment {key}: {e}") from e

    def get_player(self, player_id: str) -> CachedPlayerStatistics:
        return CachedPlayerStatistics(**self._read(self._key("player", player_id), PLAYER_FIELDS))

    def get_team(self, team_id: str) -> CachedTeamStatistics:
        return CachedTeamStatistics(**self._read(self._key("team", team_id), TEAM_FIELDS))

    def set_player(self, player_id: str, stats: CachedPlayerStatistics):
        self._overwrite(self._key("player", player_id), stats.model_dump())

    def set_team(self, team_id: str, stats: CachedTeamStatistics):
        self._overwrite(self._key("team", team_id), stats.model_dump())

    def increment_player(self, player_id: str, **deltas: int):
        self._increment(self._key("player", player_id), PLAYER_FIELDS, deltas)

    def increment_team(self, team_id: str, **deltas: int):
        self._increment(self._key("team", team_id), TEAM_FIELDS, deltas)

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError as e:
            logger.error(f"Stat cache ping failed: {e}")
            return False


def create_stat_cache_store(settings: Settings) -> StatCacheStore:
    if settings.STAT_CACHE_BACKEND == "redis":
        logger.info("Using redis stat cache store")
        return RedisStatCacheStore(redis.from_url(settings.REDIS_URL), prefix=settings.STAT_CACHE_PREFIX)
    return MemoryStatCacheStore()


def cached_from_player_aggregate(aggregate: PlayerAggregate) -> CachedPlayerStatistics:
    return CachedPlayerStatistics(**aggregate.model_dump(include=set(PLAYER_FIELDS)))


def cached_from_team_aggregate(aggregate: TeamAggregate) -> CachedTeamStatistics:
    return CachedTeamStatistics(**aggregate.model_dump(include=set(TEAM_FIELDS)))


def card_deltas(card: Card) -> Dict[str, int]:
    deltas = {}
    if card.type in YELLOW_TYPES:
        deltas["yellow_cards"] = 1
    if card.type in RED_TYPES:
        deltas["red_cards"] = 1
    return deltas


class StatCacheWriter:
    """Keeps cached player and team statistics in step with recorded events."""

    def __init__(
        self,
        records: RecordStore,
        cache: StatCacheStore,
        mode: str = "recompute",
        match_duration: int = 90,
    ):
        self.records = records
        self.cache = cache
        self.mode = mode
        self.match_duration = match_duration

    # Event hooks. A cache failure never fails the recording call: the event
    # log is already written and the cache is advisory.

    def on_goal(self, match: Match, goal: Goal):
        if self.mode == "increment":
            self._safely("goal", match, self._increment_goal, goal)
        elif self.mode == "recompute":
            self._safely("goal", match, self.refresh_players, match.team, [goal.player, goal.assist])

    def on_card(self, match: Match, card: Card):
        if self.mode == "increment":
            self._safely("card", match, self._increment_card, card)
        elif self.mode == "recompute":
            self._safely("card", match, self.refresh_players, match.team, [card.player])

    def on_match_completed(self, match: Match):
        if self.mode == "increment":
            self._safely("match completion", match, self._increment_completion, match)
        elif self.mode == "recompute":
            self._safely("match completion", match, self._refresh_after_completion, match)

    def _safely(self, event: str, match: Match, write, *args):
        try:
            write(*args)
        except StatCacheError as e:
            logger.error(
                f"Stat cache update after {event} failed, cached statistics are stale: {e}",
                extra={"match_id": match.id, "team_id": match.team},
            )

    def _increment_goal(self, goal: Goal):
        self.cache.increment_player(goal.player, goals=1)
        if goal.assist:
            self.cache.increment_player(goal.assist, assists=1)

    def _increment_card(self, card: Card):
        deltas = card_deltas(card)
        if deltas:
            self.cache.increment_player(card.player, **deltas)

    def _increment_completion(self, match: Match):
        our_score, their_score = match_scores(match)
        outcome = classify(our_score, their_score)
        result_field = {Outcome.WIN: "wins", Outcome.DRAW: "draws", Outcome.LOSS: "losses"}[outcome]
        self.cache.increment_team(
            match.team,
            total_matches=1,
            goals_for=our_score,
            goals_against=their_score,
            **{result_field: 1},
        )
        for player_id in sorted(membership.participants(match)):
            self.cache.increment_player(
                player_id,
                matches_played=1,
                minutes_played=membership.minutes_played(match, player_id, self.match_duration),
            )

    def _refresh_after_completion(self, match: Match):
        self.refresh_team(match.team)
        players = set(self.records.roster(match.team)) | membership.participants(match)
        self.refresh_players(match.team, sorted(players))

    # Recompute-and-set

    def derived_player(self, player_id: str, team_id: str, matches: Optional[List[Match]] = None) -> PlayerAggregate:
        if matches is None:
            matches = self.records.completed_matches(team_id)
        return aggregate_player(player_id, matches, match_duration=self.match_duration)

    def derived_team(self, team_id: str, matches: Optional[List[Match]] = None) -> TeamAggregate:
        if matches is None:
            matches = self.records.completed_matches(team_id)
        return aggregate_team(team_id, matches)

    def refresh_team(self, team_id: str):
        self.cache.set_team(team_id, cached_from_team_aggregate(self.derived_team(team_id)))

    def refresh_players(self, team_id: str, player_ids: Iterable[Optional[str]]):
        matches = self.records.completed_matches(team_id)
        for player_id in player_ids:
            if not player_id:
                continue
            aggregate = self.derived_player(player_id, team_id, matches)
            self.cache.set_player(player_id, cached_from_player_aggregate(aggregate))

    # Consistency

    def find_discrepancies(self, team_id: str) -> List[Discrepancy]:
        """
        Compare the cached records of a team and its roster with fresh aggregates.
        Each difference is logged as a warning; the derived value is authoritative.
        """
        matches = self.records.completed_matches(team_id)
        found = []

        cached_team = self.cache.get_team(team_id).model_dump()
        derived_team = cached_from_team_aggregate(self.derived_team(team_id, matches)).model_dump()
        found.extend(_diff("team", team_id, cached_team, derived_team))

        for player_id in self.records.roster(team_id):
            cached_player = self.cache.get_player(player_id).model_dump()
            derived_player = cached_from_player_aggregate(
                self.derived_player(player_id, team_id, matches)
            ).model_dump()
            found.extend(_diff("player", player_id, cached_player, derived_player))

        for item in found:
            logger.warning(
                f"Cached {item.subject} statistics for {item.subject_id} disagree on "
                f"{item.field}: cached={item.cached} derived={item.derived}",
                extra={"team_id": team_id},
            )
        return found

    def reconcile_team(self, team_id: str) -> ReconciliationResult:
        """Overwrite the team's and its roster's cached records from a fresh aggregation pass."""
        discrepancies = self.find_discrepancies(team_id)
        roster = self.records.roster(team_id)
        self.refresh_team(team_id)
        self.refresh_players(team_id, roster)
        logger.info(
            f"Reconciled stat cache for team {team_id}: "
            f"{len(roster)} players, {len(discrepancies)} discrepancies corrected",
            extra={"team_id": team_id},
        )
        return ReconciliationResult(team_id=team_id, players_updated=len(roster), discrepancies=discrepancies)


def _diff(subject: str, subject_id: str, cached: Dict[str, int], derived: Dict[str, int]) -> List[Discrepancy]:
    return [
        Discrepancy(subject=subject, subject_id=subject_id, field=field, cached=cached[field], derived=derived[field])
        for field in derived
        if cached.get(field) != derived[field]
    ]
