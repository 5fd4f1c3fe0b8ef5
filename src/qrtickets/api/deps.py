"""Dependency injection for FastAPI routes."""

from __future__ import annotations

from typing import Any

from fastapi import Depends, HTTPException, Request

from qrtickets.repositories.ticket_repository import TicketRepository
from qrtickets.services.qr import QREncoder
from qrtickets.services.tickets import TicketService


def get_db_pool(request: Request) -> Any:
    """The connection pool opened by the application lifespan."""
    pool = getattr(request.app.state, "db_pool", None)
    if pool is None:
        raise HTTPException(status_code=503, detail="Database not available")
    return pool


def get_qr_encoder(request: Request) -> QREncoder:
    settings = request.app.state.settings
    return QREncoder(box_size=settings.qr_box_size, border=settings.qr_border)


def get_ticket_service(
    pool: Any = Depends(get_db_pool),
    qr_encoder: QREncoder = Depends(get_qr_encoder),
) -> TicketService:
    """Build a ticket service bound to this app's pool and encoder."""
    return TicketService(ticket_repo=TicketRepository(pool), qr_encoder=qr_encoder)
