"""
Notes API: Pydantic Request/Response Schemas
=============================================

What:  The JSON contract of the notes endpoints.
How:   FastAPI validates request bodies against the *Request models and
       serializes every handler result through `Envelope`.

Envelope shape (every notes endpoint, always HTTP 200):
    {"success": true,  "message": "...", "data": ...}
    {"success": false, "message": "..."}

Request fields are optional on purpose: a missing title or description is a
business outcome reported in the envelope, not a 422.
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreateRequest(BaseModel):
    """Body of POST /api/notes/add-note."""
    title: Optional[str] = Field(default=None, description="Note title (required, non-empty)")
    description: Optional[str] = Field(
        default=None, description="Note body text (required, non-empty)"
    )


class NoteUpdateRequest(BaseModel):
    """Body of PUT /api/notes/update-note."""
    title: Optional[str] = Field(default=None, description="New title (required, non-empty)")
    description: Optional[str] = Field(
        default=None, description="New body text (required, non-empty)"
    )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    Public representation of a Note.

    `created_on` is read from the ORM attribute of the same name and
    serialized as `createdOn`.
    """
    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    title: str = Field(description="Note title")
    description: str = Field(description="Note body text")
    created_on: datetime = Field(
        serialization_alias="createdOn",
        description="When the note was created (UTC ISO 8601)",
    )

    model_config = ConfigDict(from_attributes=True)


class Envelope(BaseModel):
    """
    The fixed response shape of every notes handler.

    `data` is omitted from the JSON when it is None (routes use
    response_model_exclude_none).
    """
    success: bool = Field(description="Whether the operation succeeded")
    message: str = Field(description="Human-readable outcome")
    data: Optional[Any] = Field(default=None, description="Operation payload, if any")

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "Envelope":
        return cls(success=True, message=message, data=data)

    @classmethod
    def failure(cls, message: str) -> "Envelope":
        return cls(success=False, message=message)


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer checks."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
