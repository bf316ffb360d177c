"""Atomic exchange of two players' active/benched status.

The preconditions of a swap are checked by the writes themselves: each
UPDATE carries the expected prior state in its WHERE clause, so the
check and the mutation are one indivisible step (a row-level
compare-and-swap).  No SELECT precedes the UPDATEs.

A request names the players by their current status: ``active`` is the
player on the field and ``benched`` the one waiting.  Both writes run in
one ``BEGIN IMMEDIATE`` transaction:

1. Activate: ``status benched -> active`` for the requested benched player.
   The returned row gives the roster id observed at write time.
2. Bench: ``status active -> benched`` for the requested active player, further
   constrained to the roster id from step 1.

If either UPDATE matches no row the transaction is rolled back and
ConsistencyError is raised, so no half-done swap is ever committed or
visible to readers.  A concurrent swap on the same players waits for
the write lock, then finds the prior state gone and fails the same way.
"""

import logging

from rosters.db import Database
from rosters.exceptions import ConsistencyError
from rosters.models import PlayerChange, SwapRequest
from rosters.player_repository import PLAYER_COLUMNS, row_to_player

logger = logging.getLogger(__name__)

ACTIVATE_BENCHED = f"""
    UPDATE players
    SET status = 'active'
    WHERE player_id = :player_id
      AND status = 'benched'
    RETURNING {PLAYER_COLUMNS}
"""

BENCH_ACTIVE_IN_ROSTER = f"""
    UPDATE players
    SET status = 'benched'
    WHERE player_id = :player_id
      AND status = 'active'
      AND roster_id = :roster_id
    RETURNING {PLAYER_COLUMNS}
"""


class SwapEngine:
    """Runs status swaps against the players table."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def swap(self, change: SwapRequest, deadline: float | None = None) -> PlayerChange:
        """Bench ``change.active`` and activate ``change.benched`` atomically.

        Returns:
            Both rows as committed, keyed by their new status: ``active``
            is the player just activated, ``benched`` the one just benched.

        Raises:
            ConsistencyError: ``change.benched`` is not benched or does not
                exist, or ``change.active`` is not active, does not exist
                or sits in another roster.  Nothing was changed.
            StoreError: Transaction failure; rolled back.
        """
        activate_id = change.benched.player_id
        bench_id = change.active.player_id

        with self.db.transaction(deadline) as conn:
            rows = conn.execute(
                ACTIVATE_BENCHED, {"player_id": activate_id}
            ).fetchall()
            if not rows:
                raise ConsistencyError(
                    f"player {activate_id} is not a benched player",
                    detail={"player_id": activate_id, "step": "activate"},
                )
            activated = row_to_player(rows[0])

            rows = conn.execute(
                BENCH_ACTIVE_IN_ROSTER,
                {"player_id": bench_id, "roster_id": activated.roster_id},
            ).fetchall()
            if not rows:
                raise ConsistencyError(
                    f"player {bench_id} is not an active player "
                    f"of roster {activated.roster_id}",
                    detail={
                        "player_id": bench_id,
                        "roster_id": activated.roster_id,
                        "step": "bench",
                    },
                )
            benched = row_to_player(rows[0])

        logger.info(
            "Swapped roster %d: player %d active, player %d benched",
            activated.roster_id, activated.player_id, benched.player_id,
        )
        return PlayerChange(active=activated, benched=benched)
