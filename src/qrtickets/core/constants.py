"""Domain constants for QR tickets."""

from __future__ import annotations

from enum import StrEnum


class TicketStatus(StrEnum):
    """Ticket lifecycle state. ``Valid`` → ``Redeemed`` is the only transition."""

    VALID = "Valid"
    REDEEMED = "Redeemed"

    def can_transition_to(self, target: TicketStatus) -> bool:
        return self is TicketStatus.VALID and target is TicketStatus.REDEEMED


TICKET_STATUSES: list[str] = [s.value for s in TicketStatus]

# ── Validation reasons ──────────────────────────────────────────────
REASON_VALID = "valid"
REASON_ALREADY_REDEEMED = "already redeemed"
REASON_NOT_FOUND = "not found"

# ── Response messages ───────────────────────────────────────────────
MSG_TICKET_REDEEMED = "Ticket redeemed successfully"
MSG_TICKET_DELETED = "Ticket deleted successfully"
MSG_TICKET_NOT_FOUND = "Ticket not found"
MSG_REDEEM_CONFLICT = "Ticket not found or already redeemed"
MSG_REQUIRED_FIELDS = "buyer_name and event_name are required"
MSG_TICKET_ID_REQUIRED = "ticket_id is required"

# ── QR rendering ────────────────────────────────────────────────────
QR_DATA_URL_PREFIX = "data:image/png;base64,"
