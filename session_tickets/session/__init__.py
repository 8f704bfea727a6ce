"""Session tickets: lifecycle, nonce checks, sliding expiration."""

from session_tickets.session.manager import SessionManager as SessionManager
from session_tickets.session.models import FailureReason as FailureReason
from session_tickets.session.models import Session as Session
from session_tickets.session.models import ValidationResult as ValidationResult

__all__ = ["FailureReason", "Session", "SessionManager", "ValidationResult"]
