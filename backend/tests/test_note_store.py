"""
Notes API: Note Store Tests
============================

What:  Tests for NoteStore against a real SQLite database.
How:   Each test gets an empty notes table via the note_store fixture.

What we test:
    ✅ list/find/insert/update/delete semantics
    ✅ NotFoundError for unknown ids on update and delete
    ✅ id and created_on survive updates unchanged
    ✅ list_all is in creation order; created_on is timezone-aware UTC
    ✅ Driver failures and deadline overruns surface as StorageError
"""

import asyncio
from datetime import timedelta
from uuid import uuid4

import pytest

from notes_api.config import Settings
from notes_api.database import build_engine
from notes_api.exceptions import NotFoundError, StorageError
from notes_api.services.note_store import NoteStore


def _fields(note):
    return (note.id, note.title, note.description, note.created_on)


class TestNoteStoreReads:
    """Tests for list_all and find_by_id."""

    @pytest.mark.asyncio
    async def test_list_all_empty(self, note_store):
        """An empty collection lists as an empty sequence, not an error."""
        assert await note_store.list_all() == []

    @pytest.mark.asyncio
    async def test_list_all_returns_notes_in_creation_order(self, note_store):
        first = await note_store.insert("First", "one")
        second = await note_store.insert("Second", "two")
        third = await note_store.insert("Third", "three")
        fourth = await note_store.insert("Fourth", "four")

        notes = await note_store.list_all()

        assert [n.id for n in notes] == [first.id, second.id, third.id, fourth.id]

    @pytest.mark.asyncio
    async def test_list_all_order_survives_updates(self, note_store):
        """Overwriting a note does not move it in the listing."""
        first = await note_store.insert("First", "one")
        second = await note_store.insert("Second", "two")
        third = await note_store.insert("Third", "three")

        await note_store.update_fields(first.id, "First, edited", "one again")

        notes = await note_store.list_all()

        assert [n.id for n in notes] == [first.id, second.id, third.id]

    @pytest.mark.asyncio
    async def test_find_by_id_unknown_returns_none(self, note_store):
        assert await note_store.find_by_id(uuid4()) is None


class TestNoteStoreInsert:
    """Tests for insert."""

    @pytest.mark.asyncio
    async def test_insert_assigns_id_and_created_on(self, note_store):
        note = await note_store.insert("Title", "Description")

        assert note.id is not None
        assert note.created_on is not None
        assert note.title == "Title"
        assert note.description == "Description"

    @pytest.mark.asyncio
    async def test_insert_assigns_unique_ids(self, note_store):
        a = await note_store.insert("A", "a")
        b = await note_store.insert("B", "b")
        assert a.id != b.id

    @pytest.mark.asyncio
    async def test_insert_then_find_round_trip(self, note_store):
        """find_by_id returns a Note equal in all fields to the inserted one."""
        created = await note_store.insert("Round", "trip")

        found = await note_store.find_by_id(created.id)

        assert found is not None
        assert _fields(found) == _fields(created)

    @pytest.mark.asyncio
    async def test_created_on_is_utc_aware(self, note_store):
        created = await note_store.insert("When", "now")
        found = await note_store.find_by_id(created.id)
        listed = await note_store.list_all()

        for note in (created, found, listed[0]):
            assert note.created_on.tzinfo is not None
            assert note.created_on.utcoffset() == timedelta(0)


class TestNoteStoreUpdate:
    """Tests for update_fields."""

    @pytest.mark.asyncio
    async def test_update_fields_overwrites_title_and_description(self, note_store):
        created = await note_store.insert("Old title", "Old body")

        await note_store.update_fields(created.id, "New title", "New body")

        found = await note_store.find_by_id(created.id)
        assert found.title == "New title"
        assert found.description == "New body"
        assert found.id == created.id
        assert found.created_on == created.created_on

    @pytest.mark.asyncio
    async def test_update_fields_unknown_id_raises_not_found(self, note_store):
        existing = await note_store.insert("Keep", "me")

        with pytest.raises(NotFoundError):
            await note_store.update_fields(uuid4(), "x", "y")

        found = await note_store.find_by_id(existing.id)
        assert _fields(found) == _fields(existing)


class TestNoteStoreDelete:
    """Tests for delete_by_id."""

    @pytest.mark.asyncio
    async def test_delete_removes_note(self, note_store):
        created = await note_store.insert("Doomed", "note")

        await note_store.delete_by_id(created.id)

        assert await note_store.find_by_id(created.id) is None
        assert created.id not in {n.id for n in await note_store.list_all()}

    @pytest.mark.asyncio
    async def test_delete_twice_raises_not_found(self, note_store):
        created = await note_store.insert("Once", "only")
        await note_store.delete_by_id(created.id)

        with pytest.raises(NotFoundError):
            await note_store.delete_by_id(created.id)


class TestNoteStoreFailures:
    """StorageError translation and the health ping."""

    @pytest.fixture
    def broken_store(self, tmp_path):
        # Parent directory does not exist, so every connect fails
        settings = Settings(
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'notes.db'}",
            log_level="WARNING",
        )
        return NoteStore(build_engine(settings), operation_timeout=5.0)

    @pytest.mark.asyncio
    async def test_connection_failure_raises_storage_error(self, broken_store):
        with pytest.raises(StorageError) as exc_info:
            await broken_store.list_all()

        assert exc_info.value.operation == "list_all"
        assert "list_all" in exc_info.value.message
        await broken_store.dispose()

    @pytest.mark.asyncio
    async def test_insert_failure_raises_storage_error(self, broken_store):
        with pytest.raises(StorageError):
            await broken_store.insert("t", "d")
        await broken_store.dispose()

    @pytest.mark.asyncio
    async def test_deadline_exceeded_raises_storage_error(self, note_store):
        note_store.operation_timeout = 0.01

        async def slow():
            await asyncio.sleep(1)

        with pytest.raises(StorageError) as exc_info:
            await note_store._run("slow_op", slow)

        assert "timed out" in exc_info.value.message
        assert exc_info.value.context["timeout"] == 0.01

    @pytest.mark.asyncio
    async def test_ping(self, note_store, broken_store):
        assert await note_store.ping() is True
        assert await broken_store.ping() is False
        await broken_store.dispose()
