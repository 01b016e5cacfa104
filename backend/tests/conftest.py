"""
Notes API: Test Configuration (conftest.py)
============================================

What:  Shared pytest fixtures for the test suite.
How:   Persistence tests run against a real NoteStore on a throwaway SQLite
       file (aiosqlite driver); handler tests use an AsyncMock store.

Fixtures (all function-scoped):
    ├── test_settings: Settings pointing at a per-test SQLite file
    ├── note_store:    Real NoteStore with the notes table created
    ├── mock_store:    AsyncMock standing in for NoteStore
    ├── sample_note:   Transient Note ORM instance
    ├── test_app:      App from create_app() with note_store on app.state
    └── test_client:   HTTPX AsyncClient wired to test_app
"""

import os
from datetime import datetime, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Keep the import-time `settings` away from any real database
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_notes.db"
os.environ["LOG_LEVEL"] = "WARNING"

from notes_api.config import Settings  # noqa: E402
from notes_api.database import build_engine  # noqa: E402
from notes_api.models.note import Note  # noqa: E402
from notes_api.services.note_store import NoteStore  # noqa: E402


@pytest.fixture
def test_settings(tmp_path):
    """Settings bound to a fresh SQLite file under pytest's tmp_path."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}",
        log_level="WARNING",
        db_operation_timeout=5.0,
    )


@pytest_asyncio.fixture
async def note_store(test_settings):
    """
    A real NoteStore over an empty notes table.

    Usage:
        async def test_insert(note_store):
            note = await note_store.insert("t", "d")
    """
    store = NoteStore(
        build_engine(test_settings),
        operation_timeout=test_settings.db_operation_timeout,
    )
    await store.create_schema()
    yield store
    await store.dispose()


@pytest.fixture
def mock_store():
    """
    An AsyncMock shaped like NoteStore.

    Usage:
        mock_store.find_by_id.return_value = None
        envelope = await service.delete_note(mock_store, str(uuid4()))
    """
    store = AsyncMock(spec=NoteStore)
    store.list_all = AsyncMock(return_value=[])
    store.find_by_id = AsyncMock(return_value=None)
    store.insert = AsyncMock()
    store.update_fields = AsyncMock(return_value=None)
    store.delete_by_id = AsyncMock(return_value=None)
    return store


@pytest.fixture
def sample_note():
    """A transient Note as the store would return it."""
    return Note(
        id=uuid4(),
        title="Groceries",
        description="Milk, eggs, bread",
        created_on=datetime.now(timezone.utc),
    )


@pytest.fixture
def test_app(test_settings, note_store):
    """
    A fresh app backed by `note_store`.

    ASGITransport does not run the lifespan, so the store is attached to
    app.state here instead.
    """
    from notes_api.main import create_app

    app = create_app(test_settings)
    app.state.note_store = note_store
    return app


@pytest_asyncio.fixture
async def test_client(test_app):
    """HTTPX AsyncClient talking to `test_app`."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
