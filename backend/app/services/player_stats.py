"""
Player statistics aggregator.

Folds the event logs of a set of matches into per-player totals. The fold is a
sum over matches, so the order of the match set does not matter, and it never
mutates the matches it reads.

Card rule: a ``second_yellow`` counts as one yellow card and one sending-off,
so it increments both ``yellow_cards`` and ``red_cards``.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Collection, Dict, Iterable, List, Optional

from app.models.match import CardType, Match
from app.models.statistics import PlayerAggregate, PlayerMatchPerformance
from app.services import membership
from app.utils.dates import as_utc

YELLOW_TYPES = (CardType.YELLOW, CardType.SECOND_YELLOW)
RED_TYPES = (CardType.RED, CardType.SECOND_YELLOW)


def round_rating(value: float) -> float:
    """Round half up to one decimal place."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _is_known(player_id: Optional[str], roster: Optional[Collection[str]]) -> bool:
    if not player_id:
        return False
    return roster is None or player_id in roster


def count_unknown_references(match: Match, roster: Optional[Collection[str]]) -> int:
    """Number of events in the match that reference a player outside the roster."""
    skipped = 0
    for goal in match.goals:
        if not _is_known(goal.player, roster):
            skipped += 1
        elif goal.assist and not _is_known(goal.assist, roster):
            skipped += 1
    for card in match.cards:
        if not _is_known(card.player, roster):
            skipped += 1
    for rating in match.player_ratings:
        if not _is_known(rating.player, roster):
            skipped += 1
    for sub in match.substitutions:
        if not _is_known(sub.player_in, roster):
            skipped += 1
    return skipped


def _rating_for(match: Match, player_id: str) -> Optional[float]:
    for entry in match.player_ratings:
        if entry.player == player_id:
            if entry.rating is not None and entry.rating > 0:
                return entry.rating
            return None
    return None


def aggregate_player(
    player_id: str,
    matches: Iterable[Match],
    roster: Optional[Collection[str]] = None,
    match_duration: int = 90,
) -> PlayerAggregate:
    """
    Derive a player's totals from the supplied matches.

    Args:
        player_id: Player to aggregate
        matches: Match set to fold, typically the completed matches of the player's team
        roster: Known player ids; events naming anyone else are skipped and counted
        match_duration: Length of a match in minutes, for minutes played

    Returns:
        PlayerAggregate; the zero aggregate (average rating None) for an empty set
    """
    result = PlayerAggregate(player_id=player_id)
    rating_total = 0.0
    rating_count = 0
    known = _is_known(player_id, roster)

    for match in matches:
        result.skipped_events += count_unknown_references(match, roster)
        if not known:
            continue

        if membership.played(match, player_id):
            result.matches_played += 1
            result.minutes_played += membership.minutes_played(match, player_id, match_duration)

        for goal in match.goals:
            if not _is_known(goal.player, roster):
                continue
            if goal.player == player_id:
                result.goals += 1
            if goal.assist == player_id:
                result.assists += 1

        for card in match.cards:
            if card.player != player_id:
                continue
            if card.type in YELLOW_TYPES:
                result.yellow_cards += 1
            if card.type in RED_TYPES:
                result.red_cards += 1

        rating = _rating_for(match, player_id)
        if rating is not None:
            rating_total += rating
            rating_count += 1

    if rating_count:
        result.average_rating = round_rating(rating_total / rating_count)

    return result


def aggregate_players(
    player_ids: Iterable[str],
    matches: Iterable[Match],
    roster: Optional[Collection[str]] = None,
    match_duration: int = 90,
) -> Dict[str, PlayerAggregate]:
    match_list = list(matches)
    return {
        player_id: aggregate_player(player_id, match_list, roster, match_duration)
        for player_id in player_ids
    }


def match_performance(player_id: str, matches: Iterable[Match]) -> List[PlayerMatchPerformance]:
    """Per-match rating, goals and assists for completed matches the player took part in, oldest first."""
    rows = []
    for match in matches:
        if not match.is_completed:
            continue
        rated = any(entry.player == player_id for entry in match.player_ratings)
        if not (rated or membership.played(match, player_id)):
            continue
        rows.append(
            PlayerMatchPerformance(
                match_id=match.id,
                date=match.match_date,
                opponent=match.opponent_name,
                rating=_rating_for(match, player_id),
                goals=sum(1 for goal in match.goals if goal.player == player_id),
                assists=sum(1 for goal in match.goals if goal.assist == player_id),
            )
        )
    rows.sort(key=lambda row: as_utc(row.date))
    return rows
