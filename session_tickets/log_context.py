"""Logging context: ContextVar-based log enrichment for ticket operations.

Every log record is enriched with a ``[op:token]`` prefix via a
`ContextFilter` attached to the root logger handlers. Only the first
eight characters of a token are ever rendered.

Operation codes: ``create``, ``validate``, ``destroy``, ``purge``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

ctx_operation: ContextVar[str | None] = ContextVar("ctx_operation", default=None)
ctx_token: ContextVar[str | None] = ContextVar("ctx_token", default=None)

TOKEN_PREFIX_LEN = 8


def short_token(token: str) -> str:
    """Loggable prefix of a token; full tokens are credentials."""
    return token[:TOKEN_PREFIX_LEN]


class ContextFilter(logging.Filter):
    """Inject ContextVar values into every LogRecord as ``record.ctx``."""

    def filter(self, record: logging.LogRecord) -> bool:
        op = ctx_operation.get(None)
        token = ctx_token.get(None)
        parts: list[str] = []
        if op:
            parts.append(op)
        if token:
            parts.append(short_token(token))
        record.ctx = f"[{':'.join(parts)}] " if parts else ""
        return True


@contextmanager
def log_context(*, operation: str | None = None, token: str | None = None) -> Iterator[None]:
    """Set logging context for the enclosed block and restore it afterwards.

    Values propagate to coroutines awaited inside the block, including
    worker threads started with ``asyncio.to_thread`` (which copy the context).
    """
    op_reset = ctx_operation.set(operation) if operation is not None else None
    token_reset = ctx_token.set(token) if token is not None else None
    try:
        yield
    finally:
        if token_reset is not None:
            ctx_token.reset(token_reset)
        if op_reset is not None:
            ctx_operation.reset(op_reset)
