"""Read side of rosters: one joined query, partitioned by player status."""

import logging

from rosters.db import Database
from rosters.models import ACTIVE, BENCHED, Player, Players, Roster

logger = logging.getLogger(__name__)

# No ORDER BY: partitions keep the order the read returns.
SELECT_ROSTER_PLAYERS = """
    SELECT
        r.roster_id,
        r.name,
        p.player_id,
        p.first_name,
        p.last_name,
        p.alias,
        p.status
    FROM players AS p
    INNER JOIN rosters AS r ON p.roster_id = r.roster_id
    WHERE p.roster_id = ?
"""


class RosterRepository:
    """Aggregates a roster and its players from the players/rosters join."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def get(self, roster_id: int, deadline: float | None = None) -> Roster:
        """Return the roster with its players split into active and benched.

        A roster without players and an unknown roster id look the same
        here: both partitions empty and ``name`` empty.  Telling them
        apart is left to the caller.
        """
        with self.db.connection(deadline) as conn:
            rows = conn.execute(SELECT_ROSTER_PLAYERS, (roster_id,)).fetchall()

        partitions: dict[str, list[Player]] = {ACTIVE: [], BENCHED: []}
        name = ""
        for row in rows:
            name = row["name"]
            player = Player(
                player_id=row["player_id"],
                roster_id=row["roster_id"],
                first_name=row["first_name"],
                last_name=row["last_name"],
                alias=row["alias"],
                status=row["status"],
            )
            partitions[player.status].append(player)

        logger.debug(
            "Roster %d: %d active, %d benched",
            roster_id, len(partitions[ACTIVE]), len(partitions[BENCHED]),
        )
        return Roster(
            roster_id=roster_id,
            name=name,
            players=Players(active=partitions[ACTIVE], benched=partitions[BENCHED]),
        )
