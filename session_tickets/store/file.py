"""File-backed session store: one JSON file per token under a flat directory."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

from session_tickets.errors import CorruptSessionError, SessionNotFoundError, StoreError
from session_tickets.log_context import short_token
from session_tickets.session.models import Session
from session_tickets.store.base import is_valid_token

logger = logging.getLogger(__name__)

_TMP_SUFFIX = ".tmp"


def _describe(exc: BaseException) -> str:
    """Error text without file paths; OSError messages embed the token."""
    if isinstance(exc, OSError):
        return exc.strerror or type(exc).__name__
    return str(exc)


class FileSessionStore:
    """Stores each session at ``<base_path>/<token>``.

    Writes go through a temp file in the same directory followed by an
    atomic rename, so readers never observe a half-written record. There is
    no cross-process locking: one writer per token is assumed.
    """

    def __init__(self, base_path: Path) -> None:
        self._base = base_path

    @property
    def base_path(self) -> Path:
        return self._base

    def _path_for(self, token: str) -> Path:
        return self._base / token

    async def save(self, session: Session) -> None:
        if not is_valid_token(session.token):
            msg = f"Refusing to store session with malformed token {short_token(session.token)!r}"
            raise StoreError(msg)
        await asyncio.to_thread(self._write, session)

    async def load(self, token: str) -> Session:
        if not is_valid_token(token):
            msg = "Malformed session token"
            raise SessionNotFoundError(msg)
        return await asyncio.to_thread(self._read, token)

    async def remove(self, token: str) -> None:
        if not is_valid_token(token):
            logger.debug("Remove skipped: malformed token")
            return
        await asyncio.to_thread(self._unlink, token)

    async def list_tokens(self) -> list[str]:
        return await asyncio.to_thread(self._scan)

    def _ensure_base(self) -> None:
        if not self._base.is_dir():
            logger.info("Session storage location %s does not exist, creating", self._base)
        # exist_ok tolerates a concurrent creator winning the race.
        self._base.mkdir(parents=True, exist_ok=True)

    def _write(self, session: Session) -> None:
        try:
            self._ensure_base()
            content = json.dumps(session.to_dict())
            fd, tmp_path = tempfile.mkstemp(dir=str(self._base), suffix=_TMP_SUFFIX)
            tmp = Path(tmp_path)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(content)
                tmp.replace(self._path_for(session.token))
            except BaseException:
                tmp.unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as exc:
            logger.warning(
                "Failed to save session %s: %s", short_token(session.token), _describe(exc)
            )
            msg = f"Failed to save session: {_describe(exc)}"
            raise StoreError(msg) from exc
        logger.debug("Session file written")

    def _read(self, token: str) -> Session:
        path = self._path_for(token)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            msg = "Session not found"
            raise SessionNotFoundError(msg) from exc
        except IsADirectoryError as exc:
            msg = "Session path is a directory"
            raise SessionNotFoundError(msg) from exc
        except OSError as exc:
            logger.warning("Failed to read session %s: %s", short_token(token), _describe(exc))
            msg = f"Failed to read session: {_describe(exc)}"
            raise StoreError(msg) from exc

        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                msg = "Session record is not a JSON object"
                raise TypeError(msg)
            return Session.from_dict(data)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Corrupt session file %s: %s", short_token(token), exc)
            msg = f"Corrupt session record: {exc}"
            raise CorruptSessionError(msg) from exc

    def _unlink(self, token: str) -> None:
        try:
            self._path_for(token).unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Failed to remove session %s: %s", short_token(token), _describe(exc))
            msg = f"Failed to remove session: {_describe(exc)}"
            raise StoreError(msg) from exc

    def _scan(self) -> list[str]:
        if not self._base.is_dir():
            return []
        try:
            return sorted(
                entry.name
                for entry in self._base.iterdir()
                if entry.is_file() and is_valid_token(entry.name)
            )
        except OSError as exc:
            msg = f"Failed to list sessions: {_describe(exc)}"
            raise StoreError(msg) from exc
