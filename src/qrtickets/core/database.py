"""SQLite connection pool and schema bootstrap."""

from __future__ import annotations

import logging
import sqlite3
import uuid
from contextlib import closing
from pathlib import Path

from qrtickets.core.config import Settings

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"

SCHEMA_TICKETS = """
CREATE TABLE IF NOT EXISTS tickets (
    id          TEXT PRIMARY KEY,
    buyer_name  TEXT NOT NULL,
    buyer_email TEXT,
    event_name  TEXT NOT NULL,
    created_at  TEXT NOT NULL,
    status      TEXT NOT NULL DEFAULT 'Valid'
                CHECK (status IN ('Valid', 'Redeemed')),
    qr_code     TEXT
)
"""

SCHEMA_TICKETS_CREATED_AT_INDEX = """
CREATE INDEX IF NOT EXISTS idx_tickets_created_at ON tickets (created_at)
"""

SCHEMA_STATEMENTS: list[str] = [SCHEMA_TICKETS, SCHEMA_TICKETS_CREATED_AT_INDEX]


class SQLitePool:
    """Hands out short-lived connections to one SQLite database.

    SQLite connections are cheap, so ``acquire`` opens a fresh one per unit of
    work and callers close it when done. ``":memory:"`` is mapped to a named
    shared-cache database kept alive by an anchor connection, so every
    connection from the same pool sees the same tables.
    """

    def __init__(self, path: str, timeout: float = 5.0) -> None:
        self.timeout = timeout
        self._anchor: sqlite3.Connection | None = None
        if path == MEMORY_PATH:
            self.database = f"file:qrtickets-{uuid.uuid4().hex}?mode=memory&cache=shared"
            self.uri = True
            self._anchor = self._connect()
        else:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            self.database = path
            self.uri = False
        self.closed = False

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(
            self.database,
            timeout=self.timeout,
            uri=self.uri,
            check_same_thread=False,
        )

    def acquire(self) -> sqlite3.Connection:
        """Open a connection. The caller must close it."""
        if self.closed:
            raise sqlite3.ProgrammingError("Database pool is closed")
        return self._connect()

    def ping(self) -> bool:
        conn = self.acquire()
        try:
            with closing(conn.cursor()) as cur:
                cur.execute("SELECT 1")
                return cur.fetchone() == (1,)
        finally:
            conn.close()

    def close(self) -> None:
        if self._anchor is not None:
            self._anchor.close()
            self._anchor = None
        self.closed = True


def ensure_schema(pool: SQLitePool) -> None:
    """Create the tickets table and its index if they do not exist yet."""
    conn = pool.acquire()
    try:
        with closing(conn.cursor()) as cur:
            if not pool.uri:
                cur.execute("PRAGMA journal_mode=WAL")
            for statement in SCHEMA_STATEMENTS:
                cur.execute(statement)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema ready (%s)", pool.database)


def init_pool(settings: Settings) -> SQLitePool:
    """Create a pool for ``settings.database_path`` and bootstrap the schema."""
    logger.info("Opening SQLite database: %s", settings.database_path)
    pool = SQLitePool(settings.database_path, timeout=settings.database_timeout)
    ensure_schema(pool)
    return pool


def close_pool(pool: SQLitePool | None) -> None:
    if pool is not None:
        pool.close()
        logger.info("SQLite pool closed")
