"""Data access layer for single player rows.

Provides PlayerRepository with insert and sparse-patch update.  Both are
single statements using ``RETURNING`` so the caller gets the persisted
row without a second read.
"""

import logging

from rosters.db import Database
from rosters.exceptions import NotFoundError
from rosters.models import BENCHED, NewPlayer, Player, PlayerPatch

logger = logging.getLogger(__name__)

PLAYER_COLUMNS = "player_id, roster_id, first_name, last_name, alias, status"

INSERT_PLAYER = f"""
    INSERT INTO players (roster_id, first_name, last_name, alias, status)
    VALUES (:roster_id, :first_name, :last_name, :alias, :status)
    RETURNING {PLAYER_COLUMNS}
"""

# Zero values leave the stored column untouched
PATCH_PLAYER = f"""
    UPDATE players
    SET
        roster_id  = COALESCE(NULLIF(:roster_id, 0), players.roster_id),
        first_name = COALESCE(NULLIF(:first_name, ''), players.first_name),
        last_name  = COALESCE(NULLIF(:last_name, ''), players.last_name),
        alias      = COALESCE(NULLIF(:alias, ''), players.alias),
        status     = COALESCE(NULLIF(:status, ''), players.status)
    WHERE player_id = :player_id
    RETURNING {PLAYER_COLUMNS}
"""


def row_to_player(row) -> Player:
    """Build a Player from a ``sqlite3.Row`` holding PLAYER_COLUMNS."""
    return Player.model_validate(dict(row))


class PlayerRepository:
    """Insert and update operations on the players table.

    Receives the process-wide Database pool; every call checks out one
    connection for a single autocommit statement.  Store failures arrive
    as StoreError from the pool and propagate unchanged.
    """

    def __init__(self, db: Database) -> None:
        self.db = db

    def insert(self, player: NewPlayer, deadline: float | None = None) -> Player:
        """Insert a new benched player and return it with its generated id.

        Raises StoreError when the roster does not exist (FK violation).
        """
        params = player.model_dump()
        params["status"] = BENCHED
        with self.db.connection(deadline) as conn:
            rows = conn.execute(INSERT_PLAYER, params).fetchall()
        created = row_to_player(rows[0])
        logger.debug(
            "Inserted player %d into roster %d", created.player_id, created.roster_id
        )
        return created

    def update(self, patch: PlayerPatch, deadline: float | None = None) -> Player:
        """Apply a sparse patch and return the full updated row.

        Raises:
            NotFoundError: No player has ``patch.player_id``.
            StoreError: Write failure, e.g. reassignment to an unknown roster.
        """
        with self.db.connection(deadline) as conn:
            rows = conn.execute(PATCH_PLAYER, patch.model_dump()).fetchall()
        if not rows:
            raise NotFoundError(
                f"player {patch.player_id} does not exist",
                detail={"player_id": patch.player_id},
            )
        return row_to_player(rows[0])
