"""
Notes API: Route Dependencies
==============================

What:  FastAPI dependencies that hand shared handles to route handlers.
How:   The lifespan hook stores the NoteStore on `app.state`; routes receive
       it through `Depends(get_note_store)`. Tests swap the store by setting
       `app.state.note_store` directly.
"""

from fastapi import Request

from notes_api.services.note_store import NoteStore


def get_note_store(request: Request) -> NoteStore:
    """Return the process-wide NoteStore built at startup."""
    return request.app.state.note_store
