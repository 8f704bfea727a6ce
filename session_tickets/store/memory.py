"""In-memory session store for tests and single-process deployments."""

from __future__ import annotations

import logging
from typing import Any

from session_tickets.errors import CorruptSessionError, SessionNotFoundError
from session_tickets.session.models import Session

logger = logging.getLogger(__name__)


class MemorySessionStore:
    """Keeps serialized records in a dict so callers never alias stored state."""

    def __init__(self) -> None:
        self._records: dict[str, dict[str, Any]] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, token: object) -> bool:
        return token in self._records

    async def save(self, session: Session) -> None:
        self._records[session.token] = session.to_dict()

    async def load(self, token: str) -> Session:
        data = self._records.get(token)
        if data is None:
            msg = "Session not found"
            raise SessionNotFoundError(msg)
        try:
            return Session.from_dict(data)
        except (KeyError, TypeError, ValueError) as exc:
            msg = f"Corrupt session record: {exc}"
            raise CorruptSessionError(msg) from exc

    async def remove(self, token: str) -> None:
        self._records.pop(token, None)

    async def list_tokens(self) -> list[str]:
        return sorted(self._records)
