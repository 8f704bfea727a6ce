"""Persistence protocol for session records."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from session_tickets.session.models import Session

_TOKEN_RE = re.compile(r"^[A-Za-z0-9_-]{1,256}$")


def is_valid_token(token: str) -> bool:
    """True when *token* is usable as a flat storage key (no separators, no dots)."""
    return isinstance(token, str) and _TOKEN_RE.match(token) is not None


class SessionStore(Protocol):
    """Save, load and remove session records keyed by token.

    Implementations raise ``StoreError`` (or a subclass) for every failure:
    ``SessionNotFoundError`` for a missing record on ``load`` and
    ``CorruptSessionError`` for a record that cannot be deserialized.
    ``remove`` of an absent token succeeds silently.
    """

    async def save(self, session: Session) -> None: ...

    async def load(self, token: str) -> Session: ...

    async def remove(self, token: str) -> None: ...

    async def list_tokens(self) -> list[str]: ...
