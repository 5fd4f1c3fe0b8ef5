"""Request context via contextvars: correlation IDs for log lines."""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def new_correlation_id() -> str:
    """Short random ID used when the caller did not send one."""
    return uuid.uuid4().hex[:12]


def set_correlation_id(value: str) -> Token[str | None]:
    """Bind *value* to the current request context and return the reset token."""
    return _correlation_id.set(value)


def reset_correlation_id(token: Token[str | None]) -> None:
    _correlation_id.reset(token)


def get_correlation_id() -> str | None:
    return _correlation_id.get()
