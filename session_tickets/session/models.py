"""Session record and validation result types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


@dataclass
class Session:
    """A persisted session ticket."""

    token: str
    nonce: int
    expiration: datetime

    def __post_init__(self) -> None:
        if self.expiration.tzinfo is None:
            msg = "Session expiration must be timezone-aware"
            raise ValueError(msg)
        self.expiration = self.expiration.astimezone(UTC)

    def is_expired(self, now: datetime | None = None) -> bool:
        """True once *now* is strictly past the expiration instant."""
        return (now or datetime.now(UTC)) > self.expiration

    def to_dict(self) -> dict[str, Any]:
        return {
            "sessionToken": self.token,
            "nonce": self.nonce,
            "expiration": self.expiration.isoformat(timespec="microseconds"),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Session:
        """Build a session from its stored form.

        Raises KeyError, TypeError or ValueError for malformed records.
        """
        token = data["sessionToken"]
        nonce = data["nonce"]
        if not isinstance(token, str) or not token:
            msg = "Invalid sessionToken"
            raise TypeError(msg)
        # bool is an int subclass; reject it explicitly.
        if not isinstance(nonce, int) or isinstance(nonce, bool):
            msg = f"Invalid nonce: {nonce!r}"
            raise TypeError(msg)
        return cls(
            token=token,
            nonce=nonce,
            expiration=datetime.fromisoformat(data["expiration"]),
        )


class FailureReason(StrEnum):
    """Why a ticket was rejected."""

    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    NONCE_MISMATCH = "nonce_mismatch"


_FAILURE_MESSAGES: dict[FailureReason, str] = {
    FailureReason.NOT_FOUND: "Session not found.",
    FailureReason.EXPIRED: "Session is expired.",
    FailureReason.NONCE_MISMATCH: "Nonce deviation exceeded threshold.",
}


@dataclass(frozen=True)
class ValidationResult:
    """Immutable outcome of a ticket validation.

    Routine rejections are carried here with ``success=False``; storage
    failures are raised as ``StoreError`` instead.
    """

    success: bool
    failure: FailureReason | None = None
    failure_reason: str = ""
    session: Session | None = None

    @classmethod
    def ok(cls, session: Session) -> ValidationResult:
        return cls(success=True, session=session)

    @classmethod
    def rejected(cls, failure: FailureReason) -> ValidationResult:
        return cls(success=False, failure=failure, failure_reason=_FAILURE_MESSAGES[failure])
