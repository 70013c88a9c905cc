"""
Tests for the stat cache stores and writer.
"""

import logging

import pytest

from builders import card, goal, make_match, rating, starter, sub
from fakes import BrokenRedis
from app.models.statistics import CachedPlayerStatistics, CachedTeamStatistics
from app.services.stat_cache import (
    MemoryStatCacheStore,
    RedisStatCacheStore,
    StatCacheStore,
    StatCacheWriter,
    card_deltas,
    create_stat_cache_store,
)
from app.utils.config import Settings
from app.utils.exceptions import StatCacheError


class BrokenStore(MemoryStatCacheStore):
    def set_player(self, player_id, stats):
        raise StatCacheError("store down")

    def set_team(self, team_id, stats):
        raise StatCacheError("store down")


def _completed_match(match_id="m1", **overrides):
    values = dict(
        home=2,
        away=1,
        lineup=[starter("p1"), starter("p2")],
        substitutions=[sub("p2", "p3", 60)],
        goals=[goal("p1", assist="p2"), goal("p1", minute=80)],
        cards=[card("p2", "second_yellow", 50)],
        ratings=[rating("p1", 8)],
    )
    values.update(overrides)
    return make_match(match_id, **values)


def test_memory_store_increment_and_overwrite():
    store = MemoryStatCacheStore()

    store.increment_player("p1", goals=1)
    store.increment_player("p1", goals=1, assists=2)
    assert store.get_player("p1").goals == 2
    assert store.get_player("p1").assists == 2

    store.set_player("p1", CachedPlayerStatistics(goals=5))
    assert store.get_player("p1") == CachedPlayerStatistics(goals=5)
    assert store.get_team("unknown") == CachedTeamStatistics()


def test_memory_store_rejects_unknown_fields():
    with pytest.raises(ValueError):
        MemoryStatCacheStore().increment_team("t1", trophies=1)


def test_redis_store_round_trips_through_hashes(fake_redis):
    store = RedisStatCacheStore(fake_redis, prefix="test")

    store.set_team("t1", CachedTeamStatistics(total_matches=3, wins=2, losses=1, goals_for=7))
    store.increment_team("t1", total_matches=1, draws=1)

    assert "test:team:t1" in fake_redis.hashes
    cached = store.get_team("t1")
    assert cached.total_matches == 4
    assert cached.wins == 2
    assert cached.draws == 1
    assert cached.goals_for == 7


def test_redis_store_overwrite_replaces_previous_hash(fake_redis):
    store = RedisStatCacheStore(fake_redis)
    store.increment_player("p1", goals=9)

    store.set_player("p1", CachedPlayerStatistics(assists=1))

    assert store.get_player("p1") == CachedPlayerStatistics(assists=1)
    assert fake_redis.commands[-2:] == ["delete", "hset"]


def test_redis_errors_become_stat_cache_errors():
    store = RedisStatCacheStore(BrokenRedis())
    with pytest.raises(StatCacheError):
        store.get_player("p1")
    with pytest.raises(StatCacheError):
        store.increment_player("p1", goals=1)
    assert store.ping() is False


def test_create_store_defaults_to_memory():
    assert isinstance(create_stat_cache_store(Settings()), MemoryStatCacheStore)


def test_card_deltas_follow_aggregator_rule():
    assert card_deltas(card("p1", "yellow")) == {"yellow_cards": 1}
    assert card_deltas(card("p1", "red")) == {"red_cards": 1}
    assert card_deltas(card("p1", "second_yellow")) == {"yellow_cards": 1, "red_cards": 1}


def test_increment_mode_counts_each_delivery(records, cache):
    writer = StatCacheWriter(records, cache, mode="increment")
    match = _completed_match()
    records.save_match(match)

    writer.on_match_completed(match)
    writer.on_match_completed(match)

    team = cache.get_team("t1")
    assert team.total_matches == 2
    assert team.wins == 2
    assert team.goals_for == 4
    assert cache.get_player("p3").matches_played == 2
    assert cache.get_player("p3").minutes_played == 60


def test_increment_mode_goal_and_card(records, cache):
    writer = StatCacheWriter(records, cache, mode="increment")
    match = make_match(status="in_progress")

    writer.on_goal(match, goal("p1", assist="p2"))
    writer.on_card(match, card("p2", "second_yellow"))

    assert cache.get_player("p1").goals == 1
    assert cache.get_player("p2").assists == 1
    assert cache.get_player("p2").yellow_cards == 1
    assert cache.get_player("p2").red_cards == 1


def test_recompute_mode_is_idempotent(records, cache):
    writer = StatCacheWriter(records, cache, mode="recompute")
    match = _completed_match()
    records.save_match(match)

    writer.on_match_completed(match)
    first_team = cache.get_team("t1")
    first_player = cache.get_player("p1")
    writer.on_match_completed(match)

    assert cache.get_team("t1") == first_team
    assert cache.get_player("p1") == first_player
    assert first_team == CachedTeamStatistics(total_matches=1, wins=1, goals_for=2, goals_against=1)
    assert first_player.goals == 2
    assert first_player.matches_played == 1
    assert cache.get_player("p2").assists == 1
    assert cache.get_player("p2").red_cards == 1


def test_off_mode_writes_nothing(records, cache):
    writer = StatCacheWriter(records, cache, mode="off")
    match = _completed_match()
    records.save_match(match)

    writer.on_goal(match, goal("p1"))
    writer.on_match_completed(match)

    assert cache.get_team("t1") == CachedTeamStatistics()
    assert cache.get_player("p1") == CachedPlayerStatistics()


def test_cache_failure_is_logged_not_raised(records, caplog):
    writer = StatCacheWriter(records, BrokenStore(), mode="recompute")
    match = _completed_match()
    records.save_match(match)

    with caplog.at_level(logging.ERROR, logger="squadstats.stat_cache"):
        writer.on_match_completed(match)

    assert "cached statistics are stale" in caplog.text


def test_discrepancies_and_reconcile(records, cache, caplog):
    writer = StatCacheWriter(records, cache, mode="increment")
    match = _completed_match()
    records.save_match(match)
    writer.on_match_completed(match)
    for scored in match.goals:
        writer.on_goal(match, scored)
    # retried delivery of the first goal
    writer.on_goal(match, match.goals[0])
    assert cache.get_player("p1").goals == 3

    with caplog.at_level(logging.WARNING, logger="squadstats.stat_cache"):
        found = writer.find_discrepancies("t1")

    fields = {(d.subject, d.subject_id, d.field) for d in found}
    assert ("player", "p1", "goals") in fields
    assert "disagree on goals" in caplog.text

    result = writer.reconcile_team("t1")

    assert result.players_updated == 4
    assert len(result.discrepancies) == len(found)
    assert writer.find_discrepancies("t1") == []
    assert cache.get_player("p1").goals == 2


def test_increment_completion_without_lineup_credits_no_player(records, cache):
    writer = StatCacheWriter(records, cache, mode="increment")
    match = _completed_match(lineup=[])

    writer.on_match_completed(match)

    assert cache.get_team("t1").total_matches == 1
    assert cache.get_player("p3") == CachedPlayerStatistics()


def test_store_interface_cannot_be_instantiated():
    with pytest.raises(TypeError):
        StatCacheStore()
