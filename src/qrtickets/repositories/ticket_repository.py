"""Ticket repository: data access for the ``tickets`` table."""

from __future__ import annotations

from typing import Any

from qrtickets.core.constants import TicketStatus
from qrtickets.repositories.base import BaseRepository

# rowid breaks created_at ties in insertion order
NEWEST_FIRST = "created_at DESC, rowid DESC"


class TicketRepository(BaseRepository):
    """CRUD + lifecycle queries for tickets."""

    def __init__(self, pool: Any) -> None:
        super().__init__(pool=pool, table_name="tickets", id_column="id")

    def find_all_newest_first(self) -> list[dict[str, Any]]:
        """All tickets, most recently created first."""
        return self.find_all(order_by=NEWEST_FIRST)

    def transition(self, ticket_id: str, source: TicketStatus, target: TicketStatus) -> bool:
        """Move a ticket from *source* to *target* if it still holds *source*.

        Raises ``ValueError`` for a move the lifecycle does not allow.
        Returns ``False`` when no row changed.
        """
        if not source.can_transition_to(target):
            raise ValueError(f"Ticket cannot move from {source} to {target}")
        changed = self.update(
            ticket_id,
            data={"status": target.value},
            expected={"status": source.value},
        )
        return changed == 1

    def mark_redeemed(self, ticket_id: str) -> bool:
        """Flip a ``Valid`` ticket to ``Redeemed`` in one conditional UPDATE.

        Returns ``False`` when no row changed: the ticket is missing or was
        already redeemed.
        """
        return self.transition(ticket_id, TicketStatus.VALID, TicketStatus.REDEEMED)
