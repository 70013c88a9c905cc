"""
In-memory record store for teams, players, matches and trainings.

The match document is the unit of mutation: ``update_match`` applies a change
to one match under the store lock, so an event append is atomic per match.
Writes to different documents are independent of each other.
"""

import threading
from typing import Callable, Dict, Iterable, List, Optional

from app.models.match import Match, MatchStatus
from app.models.roster import Player, Team, Training


class RecordStore:
    """Thread-safe document store; reads return copies, never live documents."""

    def __init__(self):
        self._lock = threading.RLock()
        self._teams: Dict[str, Team] = {}
        self._players: Dict[str, Player] = {}
        self._matches: Dict[str, Match] = {}
        self._trainings: Dict[str, Training] = {}

    def ping(self) -> bool:
        return True

    def clear(self):
        with self._lock:
            self._teams.clear()
            self._players.clear()
            self._matches.clear()
            self._trainings.clear()

    # Writes

    def save_team(self, team: Team) -> Team:
        with self._lock:
            self._teams[team.id] = team.model_copy(deep=True)
        return team

    def save_player(self, player: Player) -> Player:
        with self._lock:
            self._players[player.id] = player.model_copy(deep=True)
        return player

    def save_match(self, match: Match) -> Match:
        with self._lock:
            self._matches[match.id] = match.model_copy(deep=True)
        return match

    def save_training(self, training: Training) -> Training:
        with self._lock:
            self._trainings[training.id] = training.model_copy(deep=True)
        return training

    def update_match(self, match_id: str, change: Callable[[Match], None]) -> Optional[Match]:
        """
        Apply ``change`` to a working copy of the match and store it.

        Returns the updated match, or None if no such match exists. If
        ``change`` raises, the stored match is left untouched.
        """
        with self._lock:
            current = self._matches.get(match_id)
            if current is None:
                return None
            working = current.model_copy(deep=True)
            change(working)
            self._matches[match_id] = working
            return working.model_copy(deep=True)

    # Reads

    def get_team(self, team_id: str) -> Optional[Team]:
        with self._lock:
            team = self._teams.get(team_id)
            return team.model_copy(deep=True) if team else None

    def get_player(self, player_id: str) -> Optional[Player]:
        with self._lock:
            player = self._players.get(player_id)
            return player.model_copy(deep=True) if player else None

    def get_match(self, match_id: str) -> Optional[Match]:
        with self._lock:
            match = self._matches.get(match_id)
            return match.model_copy(deep=True) if match else None

    def list_teams(self, team_ids: Optional[Iterable[str]] = None, active_only: bool = False) -> List[Team]:
        wanted = set(team_ids) if team_ids is not None else None
        with self._lock:
            teams = [
                team.model_copy(deep=True)
                for team in self._teams.values()
                if (wanted is None or team.id in wanted) and (team.is_active or not active_only)
            ]
        return teams

    def list_players(self, team_ids: Optional[Iterable[str]] = None, active_only: bool = False) -> List[Player]:
        wanted = set(team_ids) if team_ids is not None else None
        with self._lock:
            players = [
                player.model_copy(deep=True)
                for player in self._players.values()
                if (wanted is None or player.team in wanted) and (player.is_active or not active_only)
            ]
        return players

    def roster(self, team_id: str) -> List[str]:
        """Ids of all players registered to the team."""
        with self._lock:
            return [player.id for player in self._players.values() if player.team == team_id]

    def list_matches(
        self,
        team_ids: Optional[Iterable[str]] = None,
        statuses: Optional[Iterable[MatchStatus]] = None,
    ) -> List[Match]:
        wanted_teams = set(team_ids) if team_ids is not None else None
        wanted_statuses = set(statuses) if statuses is not None else None
        with self._lock:
            matches = [
                match.model_copy(deep=True)
                for match in self._matches.values()
                if (wanted_teams is None or match.team in wanted_teams)
                and (wanted_statuses is None or match.status in wanted_statuses)
            ]
        return matches

    def completed_matches(self, team_id: str) -> List[Match]:
        return self.list_matches(team_ids=[team_id], statuses=[MatchStatus.COMPLETED])

    def list_trainings(self, team_ids: Optional[Iterable[str]] = None) -> List[Training]:
        wanted = set(team_ids) if team_ids is not None else None
        with self._lock:
            return [
                training.model_copy(deep=True)
                for training in self._trainings.values()
                if wanted is None or training.team in wanted
            ]
