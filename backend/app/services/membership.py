"""
Lineup membership: whether a player actually took the field in a match.

A player played when they started (a lineup entry that is not a substitute)
or came on through a substitution. Being named on the bench does not count.
A match without a lineup has no appearances at all, whatever its
substitution log says.
"""

from typing import Set

from app.models.match import CardType, Match

SENDING_OFF = (CardType.RED, CardType.SECOND_YELLOW)


def started(match: Match, player_id: str) -> bool:
    return any(entry.player == player_id and not entry.is_substitute for entry in match.lineup)


def came_on(match: Match, player_id: str) -> bool:
    return any(sub.player_in == player_id for sub in match.substitutions)


def played(match: Match, player_id: str) -> bool:
    """True when the player started or entered as a substitute."""
    if not player_id or not match.lineup:
        return False
    return started(match, player_id) or came_on(match, player_id)


def participants(match: Match) -> Set[str]:
    """All players who took the field in the match."""
    if not match.lineup:
        return set()
    players = {entry.player for entry in match.lineup if not entry.is_substitute}
    players.update(sub.player_in for sub in match.substitutions)
    return players


def minutes_played(match: Match, player_id: str, duration: int = 90) -> int:
    """
    Minutes on the pitch: from kick-off (starter) or the substitution minute
    (entrant) until substituted off, sent off or full time.
    """
    if not played(match, player_id):
        return 0
    if started(match, player_id):
        start = 0
    else:
        entries = [sub.minute for sub in match.substitutions if sub.player_in == player_id]
        if not entries:
            return 0
        start = min(entries)

    end = duration
    for sub in match.substitutions:
        if sub.player_out == player_id and sub.minute >= start:
            end = min(end, sub.minute)
    for card in match.cards:
        if card.player == player_id and card.type in SENDING_OFF and card.minute >= start:
            end = min(end, card.minute)

    return max(0, min(end, duration) - min(start, duration))


def on_field_at(match: Match, minute: int) -> Set[str]:
    """Players on the pitch at ``minute``, replaying substitutions and sendings-off up to it."""
    on_field = {entry.player for entry in match.lineup if not entry.is_substitute}

    for sub in sorted(match.substitutions, key=lambda s: s.minute):
        if sub.minute > minute:
            break
        on_field.discard(sub.player_out)
        on_field.add(sub.player_in)

    for card in match.cards:
        if card.type in SENDING_OFF and card.minute <= minute:
            on_field.discard(card.player)

    return on_field
