"""
Notes API: Note Service (Envelope Handlers)
============================================

What:  The four notes handlers: list, add, update, delete.
How:   Each handler checks input presence, calls the NoteStore it is given,
       and maps the outcome to an Envelope. Domain failures (ValidationError,
       NotFoundError, StorageError) end here as success=false envelopes; none
       of them propagate to the caller.
Who:   Called by the route handlers in notes_api.routes.notes.

Outcome table:
    handler   input missing/empty        id unknown              store failure
    ───────   ────────────────────────   ─────────────────────   ────────────────
    list      n/a                        n/a                     StorageError msg
    add       TITLE_DESCRIPTION_REQUIRED n/a                     StorageError msg
    update    TITLE_DESCRIPTION_REQUIRED NOTE_DOES_NOT_EXIST     StorageError msg
    delete    n/a                        POST_NOT_FOUND          StorageError msg

A missing or malformed id is treated as an unknown id.

NoteService holds no state; the store is passed into every call.
"""

import logging
from typing import Optional
from uuid import UUID

from notes_api.exceptions import NotesApiError, NotFoundError, ValidationError
from notes_api.schemas.note import Envelope, NoteResponse
from notes_api.services.note_store import NoteStore

logger = logging.getLogger(__name__)

TITLE_DESCRIPTION_REQUIRED = "Title and Description of Note required"
NOTE_DOES_NOT_EXIST = "Note does not exist"
POST_NOT_FOUND = "Post not found"

NOTES_FETCHED = "Notes fetched successfully"
NOTE_ADDED = "Note added successfully"
NOTE_UPDATED = "Note updated successfully"
NOTE_DELETED = "Note deleted successfully"


def _parse_id(raw_id: Optional[str]) -> Optional[UUID]:
    """Parse an id from the query string; None if missing or not a UUID."""
    if raw_id is None:
        return None
    try:
        return UUID(str(raw_id).strip())
    except ValueError:
        return None


def _require_fields(title: Optional[str], description: Optional[str]) -> None:
    missing = [
        name
        for name, value in (("title", title), ("description", description))
        if value is None or not value.strip()
    ]
    if missing:
        raise ValidationError(message=TITLE_DESCRIPTION_REQUIRED, fields=missing)


class NoteService:
    """
    Envelope-producing handlers over a NoteStore.

    Every method returns an Envelope and never raises a NotesApiError.
    """

    async def list_notes(self, store: NoteStore) -> Envelope:
        """List every note. Succeeds with an empty list on an empty store."""
        try:
            notes = await store.list_all()
        except NotesApiError as e:
            logger.warning("List notes failed: %s", e.message)
            return Envelope.failure(e.message)

        return Envelope.ok(
            NOTES_FETCHED,
            data=[NoteResponse.model_validate(note) for note in notes],
        )

    async def add_note(
        self,
        store: NoteStore,
        title: Optional[str],
        description: Optional[str],
    ) -> Envelope:
        """
        Create a note.

        Missing or blank fields short-circuit before the store is touched.
        A storage failure is reported with success=false.
        """
        try:
            _require_fields(title, description)
            note = await store.insert(title=title, description=description)
        except NotesApiError as e:
            logger.warning("Add note failed: %s | Context: %s", e.message, e.context)
            return Envelope.failure(e.message)

        return Envelope.ok(NOTE_ADDED, data=NoteResponse.model_validate(note))

    async def update_note(
        self,
        store: NoteStore,
        note_id: Optional[str],
        title: Optional[str],
        description: Optional[str],
    ) -> Envelope:
        """
        Overwrite title/description of an existing note.

        The note is looked up first; if it is absent no update is attempted.
        A note deleted between the lookup and the update is reported the
        same way as one that never existed.
        """
        parsed_id = _parse_id(note_id)
        try:
            if parsed_id is None or await store.find_by_id(parsed_id) is None:
                raise NotFoundError(resource="note", resource_id=note_id)
            _require_fields(title, description)
            await store.update_fields(parsed_id, title=title, description=description)
        except NotFoundError:
            return Envelope.failure(NOTE_DOES_NOT_EXIST)
        except NotesApiError as e:
            logger.warning("Update note %s failed: %s", note_id, e.message)
            return Envelope.failure(e.message)

        return Envelope.ok(NOTE_UPDATED)

    async def delete_note(self, store: NoteStore, note_id: Optional[str]) -> Envelope:
        """Delete an existing note; looked up first like update_note."""
        parsed_id = _parse_id(note_id)
        try:
            if parsed_id is None or await store.find_by_id(parsed_id) is None:
                raise NotFoundError(resource="note", resource_id=note_id)
            await store.delete_by_id(parsed_id)
        except NotFoundError:
            return Envelope.failure(POST_NOT_FOUND)
        except NotesApiError as e:
            logger.warning("Delete note %s failed: %s", note_id, e.message)
            return Envelope.failure(e.message)

        return Envelope.ok(NOTE_DELETED)


# Stateless; one instance is shared by all routes.
note_service = NoteService()
