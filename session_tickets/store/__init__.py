"""Pluggable session persistence backends."""

from session_tickets.store.base import SessionStore as SessionStore
from session_tickets.store.file import FileSessionStore as FileSessionStore
from session_tickets.store.memory import MemorySessionStore as MemorySessionStore

__all__ = ["FileSessionStore", "MemorySessionStore", "SessionStore"]
