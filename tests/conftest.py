"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from session_tickets.config import TicketConfig
from session_tickets.session.manager import SessionManager
from session_tickets.store.memory import MemorySessionStore


@pytest.fixture
def storage_dir(tmp_path: Path) -> Path:
    """Session storage directory (not created up front)."""
    return tmp_path / "sessionstorage"


@pytest.fixture
def memory_store() -> MemorySessionStore:
    return MemorySessionStore()


@pytest.fixture
def make_manager(memory_store: MemorySessionStore) -> Any:
    """Factory: ``make_manager(**config_overrides)`` backed by the memory store."""

    def _make(**overrides: Any) -> SessionManager:
        return SessionManager(TicketConfig(**overrides), store=memory_store)

    return _make
