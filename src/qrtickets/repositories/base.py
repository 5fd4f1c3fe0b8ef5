"""Base repository providing generic CRUD operations over SQLite."""

from __future__ import annotations

import logging
import sqlite3
import time
import uuid
from collections.abc import Iterator
from contextlib import closing, contextmanager
from typing import Any

logger = logging.getLogger(__name__)

SLOW_QUERY_THRESHOLD_MS = 100  # Log queries slower than this


class RepositoryError(Exception):
    """A statement failed inside the database driver."""


class BaseRepository:
    """Generic repository with CRUD operations on one table.

    Entity repositories extend this class and configure ``table_name`` and
    ``id_column``. Every public method runs exactly one statement on its own
    connection and commits before returning.
    """

    def __init__(
        self,
        pool: Any,
        table_name: str,
        id_column: str,
    ) -> None:
        self.pool = pool
        self.table_name = table_name
        self.id_column = id_column

    # ── helpers ──────────────────────────────────────────────────────

    @contextmanager
    def _cursor(self, sql: str, *, commit: bool = False) -> Iterator[Any]:
        """Yield a cursor on a fresh connection; time and log *sql*.

        Driver errors, including failing to open the connection, are
        re-raised as :class:`RepositoryError`.
        """
        conn = None
        try:
            conn = self.pool.acquire()
            with closing(conn.cursor()) as cur:
                start = time.perf_counter()
                yield cur
                if commit:
                    conn.commit()
                self._log_query(sql, (time.perf_counter() - start) * 1000)
        except sqlite3.Error as exc:
            raise RepositoryError(f"{self.table_name}: {exc}") from exc
        finally:
            if conn is not None:
                conn.close()

    @staticmethod
    def _log_query(sql: str, elapsed_ms: float) -> None:
        """Log query timing; warn if above slow-query threshold."""
        if elapsed_ms > SLOW_QUERY_THRESHOLD_MS:
            logger.warning("SLOW QUERY (%.1fms): %s", elapsed_ms, sql[:200])
        else:
            logger.debug("Query (%.1fms): %s", elapsed_ms, sql[:200])

    @staticmethod
    def _generate_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def _rows(cur: Any) -> list[dict[str, Any]]:
        columns = [col[0].lower() for col in (cur.description or [])]
        return [dict(zip(columns, row, strict=True)) for row in cur.fetchall()]

    def _build_where(
        self,
        filters: dict[str, Any],
        prefix: str = "w_",
    ) -> tuple[str, dict[str, Any]]:
        """Build a WHERE clause and bind-param dict from *filters*.

        Returns ("WHERE col1 = :w_col1 AND col2 = :w_col2", {"w_col1": v1, …}).
        """
        if not filters:
            return "", {}
        clauses: list[str] = []
        params: dict[str, Any] = {}
        for col, val in filters.items():
            bind_name = f"{prefix}{col}"
            clauses.append(f"{col} = :{bind_name}")
            params[bind_name] = val
        return "WHERE " + " AND ".join(clauses), params

    # ── read ─────────────────────────────────────────────────────────

    def find_by_id(self, entity_id: str) -> dict[str, Any] | None:
        """Return a single row by primary key, or ``None``."""
        sql = f"SELECT * FROM {self.table_name} WHERE {self.id_column} = :id"
        with self._cursor(sql) as cur:
            cur.execute(sql, {"id": entity_id})
            rows = self._rows(cur)
        return rows[0] if rows else None

    def find_all(
        self,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
    ) -> list[dict[str, Any]]:
        """Return every row, optionally filtered and ordered."""
        where_clause, params = self._build_where(filters or {})
        sql = f"SELECT * FROM {self.table_name} {where_clause}"
        if order_by:
            sql += f" ORDER BY {order_by}"
        with self._cursor(sql) as cur:
            cur.execute(sql, params)
            return self._rows(cur)

    def count(self, filters: dict[str, Any] | None = None) -> int:
        """Return row count, optionally filtered."""
        where_clause, params = self._build_where(filters or {})
        sql = f"SELECT COUNT(*) AS cnt FROM {self.table_name} {where_clause}"
        with self._cursor(sql) as cur:
            cur.execute(sql, params)
            row = cur.fetchone()
        return int(row[0]) if row else 0

    # ── write ────────────────────────────────────────────────────────

    def create(
        self,
        data: dict[str, Any],
        new_id: str | None = None,
    ) -> str:
        """Insert a new row and return its ID.

        The ID is either supplied via *new_id* or auto-generated.
        """
        if new_id is None:
            new_id = self._generate_id()

        all_data = {self.id_column: new_id, **data}
        columns = ", ".join(all_data.keys())
        placeholders = ", ".join(f":{k}" for k in all_data)
        sql = f"INSERT INTO {self.table_name} ({columns}) VALUES ({placeholders})"
        with self._cursor(sql, commit=True) as cur:
            cur.execute(sql, all_data)
        return new_id

    def update(
        self,
        entity_id: str,
        data: dict[str, Any],
        expected: dict[str, Any] | None = None,
    ) -> int:
        """Update a row by primary key. Returns rows affected.

        *expected* adds column conditions to the WHERE clause, turning the
        statement into a compare-and-set: the row only changes if it still
        holds those values, and a return of ``0`` means it did not.
        """
        if not data:
            raise ValueError("No data provided for update")

        set_clause = ", ".join(f"{k} = :s_{k}" for k in data)
        params: dict[str, Any] = {f"s_{k}": v for k, v in data.items()}
        params["id"] = entity_id

        sql = f"UPDATE {self.table_name} SET {set_clause} WHERE {self.id_column} = :id"
        if expected:
            extra, extra_params = self._build_where(expected, prefix="e_")
            sql += " AND " + extra.removeprefix("WHERE ")
            params.update(extra_params)

        with self._cursor(sql, commit=True) as cur:
            cur.execute(sql, params)
            return int(cur.rowcount)

    def delete(self, entity_id: str) -> int:
        """Delete a row by primary key. Returns rows affected."""
        sql = f"DELETE FROM {self.table_name} WHERE {self.id_column} = :id"
        with self._cursor(sql, commit=True) as cur:
            cur.execute(sql, {"id": entity_id})
            return int(cur.rowcount)
