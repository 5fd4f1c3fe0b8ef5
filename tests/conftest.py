"""Shared pytest fixtures and test doubles."""

from __future__ import annotations

import os
import sys
from collections.abc import Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient

# Ensure src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from qrtickets.core.config import Settings  # noqa: E402
from qrtickets.core.constants import QR_DATA_URL_PREFIX, TicketStatus  # noqa: E402
from qrtickets.core.database import SQLitePool, close_pool, init_pool  # noqa: E402
from qrtickets.repositories.base import RepositoryError  # noqa: E402

# ── Test doubles ────────────────────────────────────────────────────


class StubQREncoder:
    """Records every payload and returns a fake, deterministic data URL."""

    def __init__(self, fail: bool = False) -> None:
        self.calls: list[str] = []
        self.fail = fail

    def encode(self, payload: str) -> str:
        self.calls.append(payload)
        if self.fail:
            raise ValueError("encoder exploded")
        return f"{QR_DATA_URL_PREFIX}stub-{payload}"


class InMemoryTicketRepo:
    """Dict-backed stand-in for ``TicketRepository``."""

    def __init__(self, fail: bool = False) -> None:
        self._store: dict[str, dict[str, Any]] = {}
        self.fail = fail

    def _check(self) -> None:
        if self.fail:
            raise RepositoryError("tickets: disk I/O error")

    def create(self, data: dict[str, Any], new_id: str) -> str:
        self._check()
        if new_id in self._store:
            raise RepositoryError("tickets: UNIQUE constraint failed: tickets.id")
        self._store[new_id] = {"id": new_id, **data}
        return new_id

    def find_by_id(self, ticket_id: str) -> dict[str, Any] | None:
        self._check()
        row = self._store.get(ticket_id)
        return dict(row) if row else None

    def find_all_newest_first(self) -> list[dict[str, Any]]:
        self._check()
        rows = list(self._store.values())
        rows.reverse()
        return sorted(rows, key=lambda r: r["created_at"], reverse=True)

    def mark_redeemed(self, ticket_id: str) -> bool:
        self._check()
        row = self._store.get(ticket_id)
        if row is None or row["status"] != TicketStatus.VALID:
            return False
        row["status"] = TicketStatus.REDEEMED.value
        return True

    def delete(self, ticket_id: str) -> int:
        self._check()
        return 1 if self._store.pop(ticket_id, None) is not None else 0

    def count(self) -> int:
        return len(self._store)


# ── Fixtures ────────────────────────────────────────────────────────


@pytest.fixture
def settings(tmp_path: Any) -> Settings:
    """Testing settings pointing at a throwaway database file."""
    return Settings(
        _env_file=None,
        app_env="testing",
        database_path=str(tmp_path / "tickets.db"),
        client_build_dir=str(tmp_path / "client" / "build"),
    )


@pytest.fixture
def db_pool(settings: Settings) -> Generator[SQLitePool, None, None]:
    """A real SQLite pool with the schema in place."""
    pool = init_pool(settings)
    yield pool
    close_pool(pool)


@pytest.fixture
def app(settings: Settings, db_pool: SQLitePool):  # type: ignore[no-untyped-def]
    """FastAPI test app bound to the temporary database."""
    from qrtickets.main import create_app

    return create_app(settings=settings, pool=db_pool)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:  # type: ignore[no-untyped-def]
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def ticket_repo() -> InMemoryTicketRepo:
    return InMemoryTicketRepo()


@pytest.fixture
def qr_encoder() -> StubQREncoder:
    return StubQREncoder()


def create_ticket_via_api(client: TestClient, **overrides: Any) -> dict[str, Any]:
    """POST a ticket and return the decoded response body."""
    body: dict[str, Any] = {
        "buyer_name": "Ana",
        "buyer_email": "ana@example.com",
        "event_name": "Concert",
    }
    body.update(overrides)
    resp = client.post("/tickets", json=body)
    assert resp.status_code == 200, resp.text
    result: dict[str, Any] = resp.json()
    return result
