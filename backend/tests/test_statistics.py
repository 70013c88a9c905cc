"""
Tests for the statistics read service.
"""

import logging
from datetime import datetime

import pytest

from builders import goal, make_match, rating, starter
from fakes import BrokenRedis
from app.models.match import MatchStatus
from app.services.stat_cache import RedisStatCacheStore, StatCacheWriter
from app.services.statistics import StatisticsService
from app.utils.exceptions import NotFoundException, ServiceUnavailableException


@pytest.fixture
def played(records):
    records.save_match(
        make_match(
            "m1",
            match_date=datetime(2024, 3, 1),
            home=2,
            away=0,
            lineup=[starter("p1"), starter("p2")],
            goals=[goal("p1", assist="p2"), goal("ghost")],
            ratings=[rating("p1", 7)],
        )
    )
    records.save_match(make_match("m2", match_date=datetime(2024, 3, 8), home=1, away=1, competition=""))
    records.save_match(make_match("m3", match_date=datetime(2024, 3, 15), status=MatchStatus.IN_PROGRESS, home=5))


def test_player_aggregate_uses_completed_matches(stats_service, played):
    result = stats_service.get_player_aggregate("p1")
    assert result.goals == 1
    assert result.matches_played == 1
    assert result.average_rating == 7.0


def test_skipped_events_are_logged(stats_service, played, caplog):
    with caplog.at_level(logging.WARNING, logger="squadstats.statistics"):
        result = stats_service.get_player_aggregate("p2")

    assert result.assists == 1
    assert result.skipped_events == 1
    assert "Skipped 1 events" in caplog.text


def test_team_figures(stats_service, played):
    aggregate = stats_service.get_team_aggregate("t1")
    assert (aggregate.total_matches, aggregate.wins, aggregate.draws) == (2, 1, 1)
    assert aggregate.points == 4

    assert stats_service.get_recent_form("t1") == ["D", "W"]
    assert stats_service.get_recent_form("t1", 1) == ["D"]
    assert set(stats_service.get_competition_breakdown("t1")) == {"League", "Friendly"}
    assert stats_service.get_team_report("t1").clean_sheets == 1


def test_unknown_subjects_raise_not_found(stats_service):
    with pytest.raises(NotFoundException):
        stats_service.get_player_aggregate("nobody")
    with pytest.raises(NotFoundException):
        stats_service.get_team_aggregate("nowhere")
    with pytest.raises(NotFoundException):
        stats_service.get_cached_team("nowhere")


def test_cache_outage_maps_to_service_unavailable(records):
    writer = StatCacheWriter(records, RedisStatCacheStore(BrokenRedis()), mode="recompute")
    service = StatisticsService(records, writer)

    with pytest.raises(ServiceUnavailableException):
        service.get_cached_player("p1")
    with pytest.raises(ServiceUnavailableException):
        service.reconcile_team("t1")


def test_reconcile_through_service(stats_service, writer, played):
    result = stats_service.reconcile_team("t1")

    assert result.team_id == "t1"
    assert stats_service.get_cached_team("t1").wins == 1
    assert stats_service.get_cached_player("p1").goals == 1
    assert stats_service.find_discrepancies("t1") == []
