"""Ticket request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from qrtickets.core.constants import TicketStatus


def _require_utf8(value: str | None) -> str | None:
    """Reject strings holding lone surrogates; they cannot be stored as UTF-8."""
    if value is not None:
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise ValueError("must be valid UTF-8 text") from e
    return value


class TicketCreate(BaseModel):
    """Body of ``POST /tickets``.

    Names are optional at the schema level so that a missing field is
    reported by the service as a 400, the same as a blank one.
    """

    buyer_name: str | None = None
    buyer_email: str | None = None
    event_name: str | None = None

    @field_validator("buyer_name", "buyer_email", "event_name")
    @classmethod
    def check_text(cls, v: str | None) -> str | None:
        return _require_utf8(v)


class TicketIdRequest(BaseModel):
    """Body of ``POST /tickets/validate`` and ``POST /tickets/redeem``."""

    ticket_id: str | None = None

    @field_validator("ticket_id")
    @classmethod
    def check_ticket_id(cls, v: str | None) -> str | None:
        return _require_utf8(v)


class TicketResponse(BaseModel):
    """Ticket in API responses."""

    id: str
    buyer_name: str
    buyer_email: str | None = None
    event_name: str
    created_at: str
    status: TicketStatus
    qr_code: str | None = None


class ValidationResultResponse(BaseModel):
    """Result of a gate check; ``ticket`` is null when the ID is unknown."""

    valid: bool
    reason: str
    message: str
    ticket: TicketResponse | None = None


class TicketActionResponse(BaseModel):
    """Acknowledgement for redeem and delete."""

    message: str
    ticket_id: str = Field(description="ID of the affected ticket")
