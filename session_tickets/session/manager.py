"""Session ticket lifecycle: creation, nonce/expiry validation, sliding renewal, removal."""

from __future__ import annotations

import asyncio
import logging
import secrets
from collections.abc import AsyncIterator, Awaitable
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, TypeVar

from session_tickets.config import TicketConfig
from session_tickets.errors import CorruptSessionError, SessionNotFoundError, StoreTimeoutError
from session_tickets.log_context import log_context
from session_tickets.session.models import FailureReason, Session, ValidationResult

if TYPE_CHECKING:
    from session_tickets.store.base import SessionStore

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

_TOKEN_BYTES = 32


class SessionManager:
    """Issues, validates and destroys session tickets.

    All persistence goes through the injected ``SessionStore``; when none is
    given a ``FileSessionStore`` rooted at ``config.storage_path`` is built for
    this instance. Validation and destruction are serialized per token within
    the process. Separate processes sharing one store must not validate the
    same token concurrently.
    """

    def __init__(
        self,
        config: TicketConfig | None = None,
        *,
        store: SessionStore | None = None,
    ) -> None:
        self._config = config or TicketConfig()
        if store is None:
            from session_tickets.store.file import FileSessionStore

            store = FileSessionStore(self._config.storage_path)
        self._store: SessionStore = store
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    @property
    def config(self) -> TicketConfig:
        return self._config

    @property
    def store(self) -> SessionStore:
        return self._store

    async def create_session(self) -> Session:
        """Issue a new ticket with nonce 1 and persist it.

        Raises ``StoreError`` if the record cannot be saved.
        """
        token = secrets.token_urlsafe(_TOKEN_BYTES)
        expiration = datetime.now(UTC) + timedelta(minutes=self._config.valid_for_minutes)
        session = Session(token=token, nonce=1, expiration=expiration)
        with log_context(operation="create", token=token):
            await self._call("save", self._store.save(session))
            logger.info("Session created, expires %s", expiration.isoformat())
        return session

    async def validate_session(self, token: str, nonce: int) -> ValidationResult:
        """Check *token* and the client-supplied *nonce*; renew on success.

        Rejections (unknown token, nonce drift, expiry) come back as a
        ``ValidationResult`` with ``success=False`` and leave the stored record
        untouched. On success the nonce is incremented, the expiration slides
        forward when enabled, and the updated record is saved and returned.
        Raises ``StoreError`` when the store itself fails.
        """
        cfg = self._config
        with log_context(operation="validate", token=token):
            async with self._token_lock(token):
                try:
                    session = await self._call("load", self._store.load(token))
                except (SessionNotFoundError, CorruptSessionError):
                    logger.info("Validation failed: session not found")
                    return ValidationResult.rejected(FailureReason.NOT_FOUND)

                if cfg.use_nonce and abs(nonce - session.nonce) > cfg.nonce_acceptable_deviation:
                    logger.warning(
                        "Validation failed: nonce %d outside %d +/- %d",
                        nonce,
                        session.nonce,
                        cfg.nonce_acceptable_deviation,
                    )
                    return ValidationResult.rejected(FailureReason.NONCE_MISMATCH)

                if session.is_expired():
                    logger.info("Validation failed: expired at %s", session.expiration.isoformat())
                    return ValidationResult.rejected(FailureReason.EXPIRED)

                session.nonce += 1
                if cfg.sliding_validity:
                    session.expiration += timedelta(minutes=cfg.sliding_increment_minutes)

                await self._call("save", self._store.save(session))
                logger.debug(
                    "Session validated nonce=%d expires=%s",
                    session.nonce,
                    session.expiration.isoformat(),
                )
                return ValidationResult.ok(session)

    async def destroy_session(self, token: str) -> None:
        """Remove the ticket. Unknown tokens are ignored."""
        with log_context(operation="destroy", token=token):
            async with self._token_lock(token):
                await self._call("remove", self._store.remove(token))
            logger.info("Session destroyed")

    async def get_session(self, token: str) -> Session | None:
        """Return the stored record without validating or renewing it."""
        try:
            return await self._call("load", self._store.load(token))
        except (SessionNotFoundError, CorruptSessionError):
            return None

    async def purge_expired(self) -> int:
        """Remove every stored session past its expiration. Returns the count."""
        removed = 0
        now = datetime.now(UTC)
        with log_context(operation="purge"):
            for token in await self._call("list", self._store.list_tokens()):
                with log_context(token=token):
                    async with self._token_lock(token):
                        try:
                            session = await self._call("load", self._store.load(token))
                        except SessionNotFoundError:
                            continue
                        except CorruptSessionError:
                            logger.warning("Skipping corrupt session")
                            continue
                        if session.is_expired(now):
                            await self._call("remove", self._store.remove(token))
                            removed += 1
            if removed:
                logger.info("Purged %d expired sessions", removed)
        return removed

    @asynccontextmanager
    async def _token_lock(self, token: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(token, asyncio.Lock())
        self._lock_users[token] = self._lock_users.get(token, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[token] -= 1
            if not self._lock_users[token]:
                del self._lock_users[token]
                del self._locks[token]

    async def _call(self, op: str, pending: Awaitable[_T]) -> _T:
        """Await a store call, bounded by ``store_timeout_seconds`` when set."""
        timeout = self._config.store_timeout_seconds
        if timeout is None:
            return await pending
        try:
            return await asyncio.wait_for(pending, timeout)
        except TimeoutError as exc:
            logger.warning("Store %s timed out after %.1fs", op, timeout)
            msg = f"Store {op} timed out after {timeout}s"
            raise StoreTimeoutError(msg) from exc
