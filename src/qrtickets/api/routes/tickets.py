"""Ticket routes: /tickets."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from qrtickets.api.deps import get_ticket_service
from qrtickets.api.schemas.common import ErrorResponse
from qrtickets.api.schemas.tickets import (
    TicketActionResponse,
    TicketCreate,
    TicketIdRequest,
    TicketResponse,
    ValidationResultResponse,
)
from qrtickets.core.constants import MSG_TICKET_ID_REQUIRED
from qrtickets.services.tickets import TicketError, TicketService

router = APIRouter(
    prefix="/tickets",
    tags=["tickets"],
    responses={500: {"model": ErrorResponse, "description": "Ticket store failure"}},
)

BAD_REQUEST: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Missing or malformed input"},
}
NOT_FOUND: dict[int | str, dict[str, Any]] = {
    404: {"model": ErrorResponse, "description": "Ticket not found"},
}


def _require_ticket_id(body: TicketIdRequest) -> str:
    ticket_id = (body.ticket_id or "").strip()
    if not ticket_id:
        raise HTTPException(status_code=400, detail=MSG_TICKET_ID_REQUIRED)
    return ticket_id


@router.post("", response_model=TicketResponse, responses=BAD_REQUEST)
def create_ticket(
    body: TicketCreate,
    service: TicketService = Depends(get_ticket_service),
) -> dict[str, Any]:
    """Issue a ticket with an embedded QR code."""
    try:
        return service.create_ticket(
            buyer_name=body.buyer_name,
            buyer_email=body.buyer_email,
            event_name=body.event_name,
        )
    except TicketError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail) from e


@router.get("", response_model=list[TicketResponse])
def list_tickets(
    service: TicketService = Depends(get_ticket_service),
) -> list[dict[str, Any]]:
    """List every ticket, newest first."""
    try:
        return service.list_tickets()
    except TicketError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail) from e


@router.post("/validate", response_model=ValidationResultResponse, responses=BAD_REQUEST)
def validate_ticket(
    body: TicketIdRequest,
    service: TicketService = Depends(get_ticket_service),
) -> dict[str, Any]:
    """Check whether a ticket can be redeemed, without redeeming it."""
    ticket_id = _require_ticket_id(body)
    try:
        return service.validate_ticket(ticket_id).to_dict()
    except TicketError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail) from e


@router.post("/redeem", response_model=TicketActionResponse, responses=BAD_REQUEST)
def redeem_ticket(
    body: TicketIdRequest,
    service: TicketService = Depends(get_ticket_service),
) -> dict[str, Any]:
    """Redeem a ticket. Only the first redemption succeeds."""
    ticket_id = _require_ticket_id(body)
    try:
        return service.redeem_ticket(ticket_id)
    except TicketError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail) from e


@router.get("/{ticket_id}", response_model=TicketResponse, responses=NOT_FOUND)
def get_ticket(
    ticket_id: str,
    service: TicketService = Depends(get_ticket_service),
) -> dict[str, Any]:
    try:
        return service.get_ticket(ticket_id)
    except TicketError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail) from e


@router.delete("/{ticket_id}", response_model=TicketActionResponse, responses=NOT_FOUND)
def delete_ticket(
    ticket_id: str,
    service: TicketService = Depends(get_ticket_service),
) -> dict[str, Any]:
    """Permanently delete a ticket."""
    try:
        return service.delete_ticket(ticket_id)
    except TicketError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail) from e
