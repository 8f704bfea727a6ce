"""Tests for the file-backed session store."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

import pytest

from session_tickets.errors import CorruptSessionError, SessionNotFoundError, StoreError
from session_tickets.session.models import Session
from session_tickets.store.file import FileSessionStore


def _session(token: str = "tok_abc-123", nonce: int = 1) -> Session:
    return Session(
        token=token,
        nonce=nonce,
        expiration=datetime(2025, 6, 15, 12, 0, 0, 654321, tzinfo=UTC),
    )


async def test_save_creates_base_directory(storage_dir: Path) -> None:
    store = FileSessionStore(storage_dir)
    assert not storage_dir.exists()
    await store.save(_session())
    assert storage_dir.is_dir()


async def test_save_writes_flat_file_named_by_token(storage_dir: Path) -> None:
    store = FileSessionStore(storage_dir)
    await store.save(_session())
    path = storage_dir / "tok_abc-123"
    assert path.is_file()
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == {
        "sessionToken": "tok_abc-123",
        "nonce": 1,
        "expiration": "2025-06-15T12:00:00.654321+00:00",
    }


async def test_save_leaves_no_temp_files(storage_dir: Path) -> None:
    store = FileSessionStore(storage_dir)
    await store.save(_session())
    await store.save(_session(nonce=2))
    assert [p.name for p in storage_dir.iterdir()] == ["tok_abc-123"]


async def test_save_then_load_round_trip(storage_dir: Path) -> None:
    store = FileSessionStore(storage_dir)
    original = _session(nonce=42)
    await store.save(original)
    loaded = await store.load(original.token)
    assert loaded.token == original.token
    assert loaded.nonce == original.nonce
    assert loaded.expiration == original.expiration


async def test_save_overwrites_existing_record(storage_dir: Path) -> None:
    store = FileSessionStore(storage_dir)
    await store.save(_session(nonce=1))
    await store.save(_session(nonce=5))
    assert (await store.load("tok_abc-123")).nonce == 5


async def test_save_into_existing_directory(storage_dir: Path) -> None:
    storage_dir.mkdir()
    store = FileSessionStore(storage_dir)
    await store.save(_session())
    assert (storage_dir / "tok_abc-123").is_file()


async def test_save_failure_raises_store_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    store = FileSessionStore(blocker / "sessions")
    with pytest.raises(StoreError, match="Failed to save"):
        await store.save(_session())


async def test_save_rejects_malformed_token(storage_dir: Path) -> None:
    store = FileSessionStore(storage_dir)
    with pytest.raises(StoreError, match="malformed token"):
        await store.save(_session(token="../escape"))
    assert not (storage_dir.parent / "escape").exists()


async def test_load_missing_raises_not_found(storage_dir: Path) -> None:
    store = FileSessionStore(storage_dir)
    with pytest.raises(SessionNotFoundError):
        await store.load("absent")


@pytest.mark.parametrize("token", ["../etc/passwd", "a/b", "", ".hidden", "x" * 300])
async def test_load_malformed_token_raises_not_found(storage_dir: Path, token: str) -> None:
    store = FileSessionStore(storage_dir)
    with pytest.raises(SessionNotFoundError):
        await store.load(token)


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "[]",
        json.dumps({"sessionToken": "tok", "nonce": 1}),
        json.dumps({"sessionToken": "tok", "nonce": "one", "expiration": "2025-01-01T00:00:00+00:00"}),
        json.dumps({"sessionToken": "tok", "nonce": 1, "expiration": "2025-01-01T00:00:00"}),
    ],
)
async def test_load_malformed_content_raises_corrupt(storage_dir: Path, content: str) -> None:
    storage_dir.mkdir()
    (storage_dir / "tok").write_text(content, encoding="utf-8")
    store = FileSessionStore(storage_dir)
    with pytest.raises(CorruptSessionError):
        await store.load("tok")


async def test_remove_deletes_file(storage_dir: Path) -> None:
    store = FileSessionStore(storage_dir)
    await store.save(_session())
    await store.remove("tok_abc-123")
    assert not (storage_dir / "tok_abc-123").exists()
    with pytest.raises(SessionNotFoundError):
        await store.load("tok_abc-123")


async def test_remove_absent_is_noop(storage_dir: Path) -> None:
    store = FileSessionStore(storage_dir)
    await store.remove("absent")
    await store.remove("../outside")


async def test_list_tokens_ignores_foreign_entries(storage_dir: Path) -> None:
    store = FileSessionStore(storage_dir)
    await store.save(_session(token="b-token"))
    await store.save(_session(token="a-token"))
    (storage_dir / "leftover.tmp").write_text("", encoding="utf-8")
    (storage_dir / "nested").mkdir()
    assert await store.list_tokens() == ["a-token", "b-token"]


async def test_list_tokens_without_directory(storage_dir: Path) -> None:
    assert await FileSessionStore(storage_dir).list_tokens() == []


# -- tokens stay out of logs and error messages --


async def test_remove_failure_never_logs_full_token(
    storage_dir: Path, caplog: pytest.LogCaptureFixture
) -> None:
    from session_tickets.config import TicketConfig
    from session_tickets.session.manager import SessionManager

    mgr = SessionManager(TicketConfig(storage_path=storage_dir))
    session = await mgr.create_session()
    (storage_dir / session.token).unlink()
    (storage_dir / session.token).mkdir()

    with caplog.at_level(logging.DEBUG), pytest.raises(StoreError) as exc_info:
        await mgr.destroy_session(session.token)

    assert caplog.records
    assert all(session.token not in r.getMessage() for r in caplog.records)
    assert session.token not in str(exc_info.value)
    assert session.token[:8] in caplog.text


async def test_save_failure_never_logs_full_token(
    storage_dir: Path, caplog: pytest.LogCaptureFixture
) -> None:
    store = FileSessionStore(storage_dir)
    session = _session(token="secret-token-value-0123456789")
    (storage_dir / session.token).mkdir(parents=True)

    with caplog.at_level(logging.DEBUG), pytest.raises(StoreError) as exc_info:
        await store.save(session)

    assert any("Failed to save session" in r.getMessage() for r in caplog.records)
    assert all(session.token not in r.getMessage() for r in caplog.records)
    assert session.token not in str(exc_info.value)


async def test_corrupt_record_log_uses_token_prefix(
    storage_dir: Path, caplog: pytest.LogCaptureFixture
) -> None:
    token = "corrupt-token-value-0123456789"
    storage_dir.mkdir()
    (storage_dir / token).write_text(json.dumps({"sessionToken": 5}), encoding="utf-8")

    with caplog.at_level(logging.DEBUG), pytest.raises(CorruptSessionError) as exc_info:
        await FileSessionStore(storage_dir).load(token)

    assert "corrupt-" in caplog.text
    assert token not in caplog.text
    assert token not in str(exc_info.value)
