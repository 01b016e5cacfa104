"""
Notes API: Notes Route Handlers
================================

What:  The four notes endpoints under /api/notes.
How:   Extract query/body fields, delegate to NoteService, return its
       Envelope. Every outcome is HTTP 200; callers inspect `success`.

Route Inventory:
    GET    /api/notes                        list all notes
    POST   /api/notes/add-note               create a note
    PUT    /api/notes/update-note?id=<id>    overwrite title/description
    DELETE /api/notes/delete-note?id=<id>    delete a note
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, Request

from notes_api.deps import get_note_store
from notes_api.schemas.note import Envelope, NoteCreateRequest, NoteUpdateRequest
from notes_api.services.note_service import note_service
from notes_api.services.note_store import NoteStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notes", tags=["Notes"])

ENVELOPE_ROUTE = {
    "response_model": Envelope,
    "response_model_exclude_none": True,
}


def _recorded(request: Request, envelope: Envelope) -> Envelope:
    """Expose the business outcome to the access log (HTTP status is always 200)."""
    request.state.envelope_success = envelope.success
    request.state.envelope_message = envelope.message
    return envelope


@router.get(
    "",
    summary="List all notes",
    description="Returns every stored note in creation order. An empty store yields an empty array.",
    **ENVELOPE_ROUTE,
)
async def list_notes(
    request: Request,
    store: NoteStore = Depends(get_note_store),
) -> Envelope:
    return _recorded(request, await note_service.list_notes(store))


@router.post(
    "/add-note",
    summary="Create a note",
    description=(
        "Creates a note from `title` and `description`. Both are required and must be "
        "non-empty; otherwise the envelope reports success=false."
    ),
    **ENVELOPE_ROUTE,
)
async def add_note(
    request: Request,
    payload: Optional[NoteCreateRequest] = Body(default=None),
    store: NoteStore = Depends(get_note_store),
) -> Envelope:
    """A missing body is handled like a body with both fields missing."""
    payload = payload or NoteCreateRequest()
    envelope = await note_service.add_note(
        store,
        title=payload.title,
        description=payload.description,
    )
    return _recorded(request, envelope)


@router.put(
    "/update-note",
    summary="Update a note",
    description="Overwrites `title` and `description` of the note identified by the `id` query parameter.",
    **ENVELOPE_ROUTE,
)
async def update_note(
    request: Request,
    id: Optional[str] = Query(default=None, description="Identifier of the note to update"),
    payload: Optional[NoteUpdateRequest] = Body(default=None),
    store: NoteStore = Depends(get_note_store),
) -> Envelope:
    payload = payload or NoteUpdateRequest()
    envelope = await note_service.update_note(
        store,
        note_id=id,
        title=payload.title,
        description=payload.description,
    )
    return _recorded(request, envelope)


@router.delete(
    "/delete-note",
    summary="Delete a note",
    description="Permanently removes the note identified by the `id` query parameter.",
    **ENVELOPE_ROUTE,
)
async def delete_note(
    request: Request,
    id: Optional[str] = Query(default=None, description="Identifier of the note to delete"),
    store: NoteStore = Depends(get_note_store),
) -> Envelope:
    return _recorded(request, await note_service.delete_note(store, note_id=id))
