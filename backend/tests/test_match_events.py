"""
Tests for recording lineups and match events.
"""

import logging

import pytest

from builders import bench, make_match, starter
from app.models.match import (
    CardCreate,
    GoalCreate,
    LineupEntry,
    LineupUpdate,
    MatchCompletion,
    MatchStatus,
    PlayerRating,
    Score,
    SubstitutionCreate,
)
from app.services.match_events import MatchEventService
from app.utils.exceptions import BadRequestException, ConflictException, NotFoundException


@pytest.fixture
def open_match(records):
    match = make_match(
        "m1",
        status=MatchStatus.LINEUP_SET,
        lineup=[starter("p1"), starter("p2"), bench("p3")],
    )
    records.save_match(match)
    return match


def test_set_lineup_replaces_lineup_and_sets_status(records, events):
    records.save_match(make_match("m1", status=MatchStatus.SCHEDULED))
    payload = LineupUpdate(
        lineup=[
            LineupEntry(player="p1", position="GK", position_x=50, position_y=95, is_captain=True),
            LineupEntry(player="p2", position="ST", position_x=50, position_y=10),
        ],
        substitutes=["p3"],
        formation="4-4-2",
    )

    match = events.set_lineup("m1", payload)

    assert match.status == MatchStatus.LINEUP_SET
    assert [entry.player for entry in match.lineup] == ["p1", "p2"]
    assert match.substitutes == ["p3"]
    assert match.formation == "4-4-2"


def test_goal_appends_and_updates_our_score(records, events, open_match):
    match = events.record_goal("m1", GoalCreate(player="p1", assist="p2", minute=12))

    assert len(match.goals) == 1
    assert match.goals[0].assist == "p2"
    assert match.score == Score(home=1, away=0)
    assert records.get_match("m1").goals[0].player == "p1"


def test_goal_in_away_match_updates_away_score(records, events):
    records.save_match(make_match("m2", is_home=False, status=MatchStatus.IN_PROGRESS))
    match = events.record_goal("m2", GoalCreate(player="p1", minute=5))
    assert match.score == Score(home=0, away=1)


def test_unknown_match_is_not_found(events):
    with pytest.raises(NotFoundException):
        events.record_goal("missing", GoalCreate(player="p1", minute=1))


def test_player_from_another_team_is_rejected(records, events, open_match):
    with pytest.raises(BadRequestException):
        events.record_card("m1", CardCreate(player="q1", minute=10, type="yellow"))
    assert records.get_match("m1").cards == []


def test_completed_match_is_locked(records, events):
    records.save_match(make_match("m1", status=MatchStatus.COMPLETED))

    with pytest.raises(ConflictException):
        events.record_goal("m1", GoalCreate(player="p1", minute=1))
    assert records.get_match("m1").goals == []


def test_completed_match_writable_when_lock_disabled(records, writer):
    service = MatchEventService(records, writer, lock_completed=False)
    records.save_match(make_match("m1", status=MatchStatus.COMPLETED, lineup=[starter("p1")]))

    service.record_goal("m1", GoalCreate(player="p1", minute=88))

    assert writer.cache.get_player("p1").goals == 1


def test_substitution_validated_against_field(events, open_match):
    events.record_substitution("m1", SubstitutionCreate(player_out="p2", player_in="p3", minute=60))

    with pytest.raises(BadRequestException):
        events.record_substitution("m1", SubstitutionCreate(player_out="p2", player_in="p4", minute=70))
    with pytest.raises(BadRequestException):
        events.record_substitution("m1", SubstitutionCreate(player_out="p1", player_in="p3", minute=75))


def test_substitution_without_lineup_is_accepted(records, events):
    records.save_match(make_match("m3", status=MatchStatus.IN_PROGRESS))
    match = events.record_substitution("m3", SubstitutionCreate(player_out="p1", player_in="p2", minute=46))
    assert len(match.substitutions) == 1


def test_card_triggers_cache_refresh(records, writer):
    service = MatchEventService(records, writer, lock_completed=False)
    records.save_match(make_match("m1", status=MatchStatus.COMPLETED, lineup=[starter("p2")]))

    service.record_card("m1", CardCreate(player="p2", minute=40, type="second_yellow"))

    cached = writer.cache.get_player("p2")
    assert cached.yellow_cards == 1
    assert cached.red_cards == 1


def test_complete_match_sets_score_and_refreshes_cache(events, writer, open_match):
    events.record_goal("m1", GoalCreate(player="p1", minute=12))
    payload = MatchCompletion(
        score=Score(home=1, away=0),
        player_ratings=[PlayerRating(player="p1", rating=9)],
        man_of_the_match="p1",
        coach_notes="Solid",
    )

    match = events.complete_match("m1", payload)

    assert match.status == MatchStatus.COMPLETED
    assert match.man_of_the_match == "p1"
    assert writer.cache.get_team("t1").wins == 1
    assert writer.cache.get_player("p1").goals == 1
    assert writer.cache.get_player("p1").matches_played == 1
    assert writer.cache.get_player("p3").matches_played == 0


def test_repeated_completion_does_not_double_count(events, writer, open_match):
    payload = MatchCompletion(score=Score(home=0, away=2))

    events.complete_match("m1", payload)
    events.complete_match("m1", payload)

    team = writer.cache.get_team("t1")
    assert team.total_matches == 1
    assert team.losses == 1
    assert writer.cache.get_player("p1").matches_played == 1


def test_completion_rejects_ratings_for_other_teams(events, open_match):
    with pytest.raises(BadRequestException):
        events.complete_match("m1", MatchCompletion(player_ratings=[PlayerRating(player="q1", rating=7)]))


def test_event_log_lines_carry_match_context(events, open_match, caplog):
    with caplog.at_level(logging.INFO, logger="squadstats.match_events"):
        events.record_goal("m1", GoalCreate(player="p1", minute=12))

    record = next(r for r in caplog.records if r.name == "squadstats.match_events")
    assert record.match_id == "m1"
    assert record.team_id == "t1"
