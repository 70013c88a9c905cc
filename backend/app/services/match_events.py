"""
Recording of match events: lineups, goals, cards, substitutions and completion.

Every call appends to the match's event log first and then hands the event to
the stat cache writer. The match update and the cache update are separate
writes; a failure of the latter leaves the cache stale until the next
recompute or reconciliation.
"""

import logging
from typing import Callable, Iterable, Optional

from app.models.match import (
    Card,
    CardCreate,
    Goal,
    GoalCreate,
    LineupUpdate,
    Match,
    MatchCompletion,
    MatchStatus,
    Score,
    Substitution,
    SubstitutionCreate,
)
from app.services.membership import on_field_at
from app.services.stat_cache import StatCacheWriter
from app.services.store import RecordStore
from app.utils.exceptions import BadRequestException, ConflictException, NotFoundException

logger = logging.getLogger("squadstats.match_events")


def _context(match: Match) -> dict:
    return {"match_id": match.id, "team_id": match.team}


class MatchEventService:
    def __init__(self, records: RecordStore, writer: StatCacheWriter, lock_completed: bool = True):
        self.records = records
        self.writer = writer
        self.lock_completed = lock_completed

    def get_match(self, match_id: str) -> Match:
        match = self.records.get_match(match_id)
        if match is None:
            raise NotFoundException(f"Match {match_id} not found")
        return match

    def _update(self, match_id: str, change: Callable[[Match], None]) -> Match:
        updated = self.records.update_match(match_id, change)
        if updated is None:
            raise NotFoundException(f"Match {match_id} not found")
        return updated

    def _ensure_open(self, match: Match):
        if self.lock_completed and match.is_completed:
            raise ConflictException(f"Match {match.id} is completed; its event log is locked")

    def _ensure_on_roster(self, match: Match, player_ids: Iterable[Optional[str]]):
        for player_id in player_ids:
            if not player_id:
                continue
            player = self.records.get_player(player_id)
            if player is None or player.team != match.team:
                raise BadRequestException(f"Player {player_id} is not on the roster of team {match.team}")

    def set_lineup(self, match_id: str, payload: LineupUpdate) -> Match:
        def change(match: Match):
            self._ensure_open(match)
            self._ensure_on_roster(match, [entry.player for entry in payload.lineup])
            self._ensure_on_roster(match, payload.substitutes)
            match.lineup = [entry.model_copy() for entry in payload.lineup]
            match.substitutes = list(payload.substitutes)
            match.formation = payload.formation
            match.status = MatchStatus.LINEUP_SET

        updated = self._update(match_id, change)
        logger.info(
            f"Lineup set for match {match_id}: {len(payload.lineup)} players, formation {payload.formation}",
            extra=_context(updated),
        )
        return updated

    def record_goal(self, match_id: str, payload: GoalCreate) -> Match:
        goal = Goal(**payload.model_dump())

        def change(match: Match):
            self._ensure_open(match)
            self._ensure_on_roster(match, [goal.player, goal.assist])
            match.goals.append(goal)
            if match.score is None:
                match.score = Score()
            if match.is_home:
                match.score.home = (match.score.home or 0) + 1
            else:
                match.score.away = (match.score.away or 0) + 1

        updated = self._update(match_id, change)
        logger.info(
            f"Goal recorded for match {match_id}: player {goal.player} at {goal.minute}'",
            extra=_context(updated),
        )
        self.writer.on_goal(updated, goal)
        return updated

    def record_card(self, match_id: str, payload: CardCreate) -> Match:
        card = Card(**payload.model_dump())

        def change(match: Match):
            self._ensure_open(match)
            self._ensure_on_roster(match, [card.player])
            match.cards.append(card)

        updated = self._update(match_id, change)
        logger.info(
            f"{card.type.value} card recorded for match {match_id}: player {card.player} at {card.minute}'",
            extra=_context(updated),
        )
        self.writer.on_card(updated, card)
        return updated

    def record_substitution(self, match_id: str, payload: SubstitutionCreate) -> Match:
        substitution = Substitution(**payload.model_dump())

        def change(match: Match):
            self._ensure_open(match)
            self._ensure_on_roster(match, [substitution.player_out, substitution.player_in])
            if match.lineup:
                on_field = on_field_at(match, substitution.minute)
                if substitution.player_out not in on_field:
                    raise BadRequestException(
                        f"Player {substitution.player_out} is not on the field at minute {substitution.minute}"
                    )
                if substitution.player_in in on_field:
                    raise BadRequestException(
                        f"Player {substitution.player_in} is already on the field at minute {substitution.minute}"
                    )
            match.substitutions.append(substitution)

        updated = self._update(match_id, change)
        logger.info(
            f"Substitution recorded for match {match_id}: "
            f"{substitution.player_out} -> {substitution.player_in} at {substitution.minute}'",
            extra=_context(updated),
        )
        return updated

    def complete_match(self, match_id: str, payload: MatchCompletion) -> Match:
        """
        Finalize score, team statistics and ratings and mark the match completed.
        Completing an already completed match again re-applies the payload.
        """

        def change(match: Match):
            self._ensure_on_roster(match, [rating.player for rating in payload.player_ratings])
            self._ensure_on_roster(match, [payload.man_of_the_match])
            if payload.score is not None:
                match.score = payload.score.model_copy()
            if payload.statistics is not None:
                match.statistics = payload.statistics.model_copy()
            if payload.opponent_statistics is not None:
                match.opponent_statistics = payload.opponent_statistics.model_copy()
            match.man_of_the_match = payload.man_of_the_match
            match.player_ratings = [rating.model_copy() for rating in payload.player_ratings]
            match.coach_notes = payload.coach_notes
            match.status = MatchStatus.COMPLETED

        updated = self._update(match_id, change)
        logger.info(
            f"Match {match_id} completed: {updated.final_score}",
            extra=_context(updated),
        )
        self.writer.on_match_completed(updated)
        return updated
