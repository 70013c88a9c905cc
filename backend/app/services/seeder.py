"""
Record store seeding.

``SEED_DATA=demo`` builds the academy demo club: three age-group teams with
eighteen players each and one upcoming fixture per team. Any other value is
read as the path of a JSON export holding ``teams``, ``players``, ``matches``
and ``trainings`` lists in the API's camelCase shape.

Seeding replaces whatever the store held. The whole payload is validated
before anything is written, so a malformed export leaves the store untouched.
"""

import json
import logging
import random
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from app.models.match import Match
from app.models.roster import Player, Team, Training
from app.services.stat_cache import StatCacheWriter
from app.services.store import RecordStore
from app.utils.exceptions import StatCacheError

logger = logging.getLogger("squadstats.seeder")

DEMO_SOURCE = "demo"
SQUAD_SIZE = 18

DEMO_TEAMS = [
    ("u12-lions", "U-12 Lions", "U-12", 2014),
    ("u14-tigers", "U-14 Tigers", "U-14", 2012),
    ("u16-eagles", "U-16 Eagles", "U-16", 2010),
]
DEMO_OPPONENTS = ["City Academy", "Riverside FC", "North Stars"]

FIRST_NAMES = [
    "Aziz", "Bekzod", "Davron", "Eldor", "Farrux", "Gulom", "Hamid", "Ilhom", "Jasur", "Kamol",
    "Laziz", "Mirzo", "Nodir", "Obid", "Pulat", "Ravshan", "Sardor", "Timur", "Ulugbek", "Vohid",
]
LAST_NAMES = [
    "Aliyev", "Boboyev", "Choriyev", "Davlatov", "Ergashev", "Fozilov", "Gafurov", "Hasanov", "Ibragimov", "Jalolov",
    "Kamolov", "Latipov", "Mahmudov", "Nazarov", "Olimov", "Pulatov", "Rahimov", "Saidov", "Tojiyev", "Umarov",
]
POSITIONS = ["GK", "CB", "CB", "LB", "RB", "CDM", "CM", "CM", "CAM", "LW", "RW", "ST"]


def _skill(rng: random.Random) -> int:
    return 40 + rng.randrange(40)


def demo_records(seed: int = 0, now: Optional[datetime] = None) -> Dict[str, List[Dict[str, Any]]]:
    """The demo club as plain dicts; the same seed always gives the same club."""
    rng = random.Random(seed)
    now = now or datetime.now(timezone.utc)
    data: Dict[str, List[Dict[str, Any]]] = {"teams": [], "players": [], "matches": [], "trainings": []}

    for index, (team_id, name, age_category, birth_year) in enumerate(DEMO_TEAMS):
        data["teams"].append({"id": team_id, "name": name, "ageCategory": age_category, "birthYear": birth_year})

        for number in range(1, SQUAD_SIZE + 1):
            data["players"].append(
                {
                    "id": f"{team_id}-{number:02d}",
                    "team": team_id,
                    "firstName": rng.choice(FIRST_NAMES),
                    "lastName": rng.choice(LAST_NAMES),
                    "position": POSITIONS[(number - 1) % len(POSITIONS)],
                    "jerseyNumber": number,
                    "isInjured": rng.random() > 0.9,
                    "ratings": {
                        "pace": _skill(rng),
                        "shooting": _skill(rng),
                        "passing": _skill(rng),
                        "dribbling": _skill(rng),
                        "defending": _skill(rng),
                        "physical": _skill(rng),
                    },
                }
            )

        data["matches"].append(
            {
                "id": f"{team_id}-fixture-1",
                "team": team_id,
                "opponentName": DEMO_OPPONENTS[index],
                "matchDate": (now + timedelta(days=7 + index)).isoformat(),
                "venue": "Academy Main Field",
                "isHome": True,
                "competition": "League",
            }
        )

    return data


def read_seed_file(path: str) -> Dict[str, Any]:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def load_records(records: RecordStore, data: Dict[str, Any]) -> Dict[str, int]:
    """
    Replace the store's contents with ``data``.

    Raises:
        pydantic.ValidationError: when any record is malformed (nothing is written)
    """
    teams = [Team.model_validate(item) for item in data.get("teams", [])]
    players = [Player.model_validate(item) for item in data.get("players", [])]
    matches = [Match.model_validate(item) for item in data.get("matches", [])]
    trainings = [Training.model_validate(item) for item in data.get("trainings", [])]

    records.clear()
    for team in teams:
        records.save_team(team)
    for player in players:
        records.save_player(player)
    for match in matches:
        records.save_match(match)
    for training in trainings:
        records.save_training(training)

    return {"teams": len(teams), "players": len(players), "matches": len(matches), "trainings": len(trainings)}


def seed_records(records: RecordStore, source: str, writer: Optional[StatCacheWriter] = None) -> Dict[str, int]:
    """
    Seed ``records`` from ``source`` ("demo" or a JSON file path).

    When a writer is given and its cache is enabled, every team is reconciled
    afterwards so cached statistics start out equal to the derived ones.
    """
    data = demo_records() if source == DEMO_SOURCE else read_seed_file(source)
    counts = load_records(records, data)
    logger.info(
        f"Seeded record store from {source}: {counts['teams']} teams, {counts['players']} players, "
        f"{counts['matches']} matches, {counts['trainings']} trainings"
    )

    if writer is not None and writer.mode != "off":
        for team in records.list_teams():
            try:
                writer.reconcile_team(team.id)
            except StatCacheError as e:
                logger.error(f"Stat cache not primed after seeding: {e}", extra={"team_id": team.id})

    return counts
