"""
Notes API: Note ORM Model
==========================

What:  ORM model for the `notes` table, the single collection of Note rows.
Who:   Read and written only by NoteStore.

Column notes:
    - id:          UUID assigned on insert, never updated
    - title:       required, non-empty (enforced by NoteService before insert)
    - description: required, non-empty (same)
    - created_on:  UTC, set once on insert, never updated

Types are dialect-neutral (Uuid, and DateTime wrapped in UTCDateTime) so the
same model runs on PostgreSQL in production and SQLite in tests, and
created_on always comes back timezone-aware in UTC.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Text, TypeDecorator, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from notes_api.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC datetime on every dialect.

    Values are normalized to UTC on the way in. SQLite stores no offset, so
    naive values read back from it are tagged as UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc)
        if dialect.name == "sqlite":
            return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Note(Base):
    """
    A single note record.

    Lifecycle:
        1. Inserted with a fresh id and created_on
        2. title / description may be overwritten any number of times
        3. Deleted permanently (no soft-delete, no versioning)
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)

    description: Mapped[str] = mapped_column(Text, nullable=False)

    created_on: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=_utcnow,
    )

    # list_all() returns notes in creation order
    __table_args__ = (
        Index("idx_notes_created_on", created_on),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, created_on='{self.created_on}')>"
