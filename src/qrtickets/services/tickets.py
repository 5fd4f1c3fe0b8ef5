"""Ticket service: issue, look up, validate, redeem and delete QR tickets.

The service owns the ticket lifecycle rules. Storage goes through an
injected ticket repository and QR rendering through an injected encoder, so
tests can swap either for an in-memory double.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from qrtickets.core.constants import (
    MSG_REDEEM_CONFLICT,
    MSG_REQUIRED_FIELDS,
    MSG_TICKET_DELETED,
    MSG_TICKET_NOT_FOUND,
    MSG_TICKET_REDEEMED,
    REASON_ALREADY_REDEEMED,
    REASON_NOT_FOUND,
    REASON_VALID,
    TicketStatus,
)
from qrtickets.repositories.base import RepositoryError

logger = logging.getLogger(__name__)


class TicketError(Exception):
    """Ticket service error with HTTP status hint."""

    status_code = 400

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code
        super().__init__(detail)


class TicketValidationError(TicketError):
    """Required input is missing or blank."""

    status_code = 400


class TicketNotFoundError(TicketError):
    status_code = 404


class TicketConflictError(TicketError):
    """Redeem precondition failed: the ticket is missing or already redeemed."""

    status_code = 400


ConflictOrNotFoundError = TicketConflictError


class StoreError(TicketError):
    """Storage failed. ``detail`` is safe to show; the cause is only logged."""

    status_code = 500


class QREncodingError(StoreError):
    pass


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a gate check. Never raised, always returned."""

    valid: bool
    reason: str
    ticket: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "reason": self.reason,
            "message": self.reason,
            "ticket": self.ticket,
        }


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class TicketService:
    """Enforces the ticket lifecycle over a repository and a QR encoder."""

    def __init__(self, ticket_repo: Any, qr_encoder: Any) -> None:
        self.ticket_repo = ticket_repo
        self.qr_encoder = qr_encoder

    # ── create ──────────────────────────────────────────────────────

    def create_ticket(
        self,
        *,
        buyer_name: str | None,
        event_name: str | None,
        buyer_email: str | None = None,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """Issue a new ``Valid`` ticket and return the stored record.

        Blank names are rejected before an ID or QR code is produced. The
        record is only returned once the row has been written.
        """
        buyer_name = _clean(buyer_name)
        event_name = _clean(event_name)
        if buyer_name is None or event_name is None:
            raise TicketValidationError(MSG_REQUIRED_FIELDS)

        if now is None:
            now = datetime.now(tz=UTC)

        ticket_id = str(uuid.uuid4())
        try:
            qr_code = self.qr_encoder.encode(ticket_id)
        except Exception as exc:
            logger.exception("QR encoding failed for ticket %s", ticket_id)
            raise QREncodingError("Error creating ticket") from exc

        data = {
            "buyer_name": buyer_name,
            "buyer_email": _clean(buyer_email),
            "event_name": event_name,
            "created_at": now.isoformat(timespec="microseconds"),
            "status": TicketStatus.VALID.value,
            "qr_code": qr_code,
        }
        try:
            self.ticket_repo.create(data=data, new_id=ticket_id)
        except RepositoryError as exc:
            logger.exception("Could not persist ticket %s", ticket_id)
            raise StoreError("Error creating ticket") from exc

        logger.info("Ticket %s issued for event %r", ticket_id, event_name)
        return {"id": ticket_id, **data}

    # ── read ────────────────────────────────────────────────────────

    def list_tickets(self) -> list[dict[str, Any]]:
        """All tickets, newest first."""
        try:
            result: list[dict[str, Any]] = self.ticket_repo.find_all_newest_first()
        except RepositoryError as exc:
            logger.exception("Could not list tickets")
            raise StoreError("Error fetching tickets") from exc
        return result

    def get_ticket(self, ticket_id: str) -> dict[str, Any]:
        ticket = self._find(ticket_id, "Error fetching ticket")
        if ticket is None:
            raise TicketNotFoundError(MSG_TICKET_NOT_FOUND)
        return ticket

    def validate_ticket(self, ticket_id: str) -> ValidationResult:
        """Report whether a ticket can be redeemed right now. Read-only."""
        ticket = self._find(ticket_id, "Error validating ticket")
        if ticket is None:
            return ValidationResult(valid=False, reason=REASON_NOT_FOUND)
        if ticket.get("status") == TicketStatus.REDEEMED:
            return ValidationResult(valid=False, reason=REASON_ALREADY_REDEEMED, ticket=ticket)
        return ValidationResult(valid=True, reason=REASON_VALID, ticket=ticket)

    # ── write ───────────────────────────────────────────────────────

    def redeem_ticket(self, ticket_id: str) -> dict[str, Any]:
        """Mark a ticket ``Redeemed``.

        The transition is a single conditional update, so two concurrent
        calls for the same ID cannot both succeed. A missing ticket and an
        already redeemed one fail the same way.
        """
        try:
            changed = self.ticket_repo.mark_redeemed(ticket_id)
        except RepositoryError as exc:
            logger.exception("Could not redeem ticket %s", ticket_id)
            raise StoreError("Error redeeming ticket") from exc

        if not changed:
            logger.info("Redeem rejected for ticket %s", ticket_id)
            raise TicketConflictError(MSG_REDEEM_CONFLICT)

        logger.info("Ticket %s redeemed", ticket_id)
        return {"message": MSG_TICKET_REDEEMED, "ticket_id": ticket_id}

    def delete_ticket(self, ticket_id: str) -> dict[str, Any]:
        try:
            deleted = self.ticket_repo.delete(ticket_id)
        except RepositoryError as exc:
            logger.exception("Could not delete ticket %s", ticket_id)
            raise StoreError("Error deleting ticket") from exc

        if not deleted:
            raise TicketNotFoundError(MSG_TICKET_NOT_FOUND)

        logger.info("Ticket %s deleted", ticket_id)
        return {"message": MSG_TICKET_DELETED, "ticket_id": ticket_id}

    def _find(self, ticket_id: str, failure_detail: str) -> dict[str, Any] | None:
        try:
            ticket: dict[str, Any] | None = self.ticket_repo.find_by_id(ticket_id)
        except RepositoryError as exc:
            logger.exception("Could not load ticket %s", ticket_id)
            raise StoreError(failure_detail) from exc
        return ticket
