"""
Shared fixtures: a seeded record store and services wired to it.
"""

import pytest

from builders import make_player, make_team
from fakes import FakeRedis
from app.services.match_events import MatchEventService
from app.services.stat_cache import MemoryStatCacheStore, StatCacheWriter
from app.services.statistics import StatisticsService
from app.services.store import RecordStore


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def records():
    store = RecordStore()
    store.save_team(make_team("t1"))
    store.save_team(make_team("t2", name="U14 Tigers", birth_year=2010))
    for player_id in ("p1", "p2", "p3", "p4"):
        store.save_player(make_player(player_id, team="t1"))
    store.save_player(make_player("q1", team="t2"))
    return store


@pytest.fixture
def cache():
    return MemoryStatCacheStore()


@pytest.fixture
def writer(records, cache):
    return StatCacheWriter(records, cache, mode="recompute")


@pytest.fixture
def events(records, writer):
    return MatchEventService(records, writer, lock_completed=True)


@pytest.fixture
def stats_service(records, writer):
    return StatisticsService(records, writer)
