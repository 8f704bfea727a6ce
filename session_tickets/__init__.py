"""Short-lived session tickets with nonce replay protection and pluggable storage."""

from session_tickets.config import TicketConfig as TicketConfig
from session_tickets.config import load_config as load_config
from session_tickets.errors import SessionTicketError as SessionTicketError
from session_tickets.errors import StoreError as StoreError
from session_tickets.logging_config import install_null_handler
from session_tickets.session import FailureReason as FailureReason
from session_tickets.session import Session as Session
from session_tickets.session import SessionManager as SessionManager
from session_tickets.session import ValidationResult as ValidationResult
from session_tickets.store import FileSessionStore as FileSessionStore
from session_tickets.store import MemorySessionStore as MemorySessionStore
from session_tickets.store import SessionStore as SessionStore

install_null_handler()

__all__ = [
    "FailureReason",
    "FileSessionStore",
    "MemorySessionStore",
    "Session",
    "SessionManager",
    "SessionStore",
    "SessionTicketError",
    "StoreError",
    "TicketConfig",
    "ValidationResult",
    "load_config",
]
