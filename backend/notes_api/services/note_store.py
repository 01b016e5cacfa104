"""
Notes API: Note Store (Persistence Handle)
===========================================

What:  Durable persistence of Note entities behind five operations:
       list_all, find_by_id, insert, update_fields, delete_by_id.
How:   Owns the async engine and a session factory. Every operation opens
       its own short session, performs one statement (plus a read-back for
       insert), commits, and closes. Each operation runs under a deadline.
Who:   Built once in the application lifespan and shared by every request
       through app.state; NoteService receives it as an explicit argument.

Failure signals:
    NotFoundError  → update_fields / delete_by_id matched no row (expected)
    StorageError   → driver, connection or I/O failure, or deadline expired

find_by_id never raises for a missing id; it returns None.

Concurrency:
    No cross-operation locking. A concurrent update and delete on the same id
    race at the database; whichever statement lands last wins.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, List, Optional, TypeVar
from uuid import UUID

from sqlalchemy import delete, select, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from notes_api.database import Base, build_session_factory
from notes_api.exceptions import NotFoundError, StorageError
from notes_api.models.note import Note

logger = logging.getLogger(__name__)

T = TypeVar("T")


class NoteStore:
    """
    Persistence handle for the `notes` collection.

    Args:
        engine:            Async engine built from the configured URL
        operation_timeout: Deadline in seconds for each store operation
    """

    def __init__(self, engine: AsyncEngine, operation_timeout: float = 10.0):
        self._engine = engine
        self._session_factory = build_session_factory(engine)
        self.operation_timeout = operation_timeout

    # ══════════════════════════════════════════════════════════════════════
    # Internal helpers
    # ══════════════════════════════════════════════════════════════════════

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        """Session that commits on success and rolls back on any error."""
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def _run(self, operation: str, func: Callable[[], Awaitable[T]]) -> T:
        """
        Execute one store operation under the deadline, translating failures.

        NotFoundError passes through untouched. Driver errors, OS errors and
        timeouts become StorageError; the original is logged, not returned.
        """
        try:
            return await asyncio.wait_for(func(), timeout=self.operation_timeout)
        except NotFoundError:
            raise
        except asyncio.TimeoutError:
            logger.error(
                "Storage operation '%s' exceeded %.1fs deadline",
                operation,
                self.operation_timeout,
            )
            raise StorageError(
                message=f"Storage operation '{operation}' timed out. Please try again.",
                operation=operation,
                context={"timeout": self.operation_timeout},
            )
        except (SQLAlchemyError, OSError) as e:
            logger.error(
                "Storage operation '%s' failed: %s: %s",
                operation,
                type(e).__name__,
                str(e),
            )
            raise StorageError(
                message=f"Storage operation '{operation}' failed. Please try again.",
                operation=operation,
                context={"original_error": type(e).__name__},
            ) from e

    # ══════════════════════════════════════════════════════════════════════
    # Note operations
    # ══════════════════════════════════════════════════════════════════════

    async def list_all(self) -> List[Note]:
        """Return every Note in creation order; an empty table yields []."""

        async def op() -> List[Note]:
            async with self._session() as session:
                result = await session.execute(
                    select(Note).order_by(Note.created_on, Note.id)
                )
                return list(result.scalars().all())

        return await self._run("list_all", op)

    async def find_by_id(self, note_id: UUID) -> Optional[Note]:
        """Return the Note with `note_id`, or None when there is none."""

        async def op() -> Optional[Note]:
            async with self._session() as session:
                return await session.get(Note, note_id)

        return await self._run("find_by_id", op)

    async def insert(self, title: str, description: str) -> Note:
        """
        Persist a new Note and return it as stored.

        The id and created_on are assigned here. The row is refreshed after
        commit so the returned object carries exactly what a later
        find_by_id will read.
        """

        async def op() -> Note:
            async with self._session() as session:
                note = Note(title=title, description=description)
                session.add(note)
                await session.flush()
                note_id = note.id
            async with self._session() as session:
                stored = await session.get(Note, note_id)
            if stored is None:
                raise SQLAlchemyError(f"Inserted note {note_id} could not be read back")
            logger.info("Note inserted: %s", stored.id)
            return stored

        return await self._run("insert", op)

    async def update_fields(self, note_id: UUID, title: str, description: str) -> None:
        """
        Overwrite title and description of an existing Note.

        Raises:
            NotFoundError: No Note has `note_id`
            StorageError:  Underlying failure
        """

        async def op() -> None:
            async with self._session() as session:
                result = await session.execute(
                    update(Note)
                    .where(Note.id == note_id)
                    .values(title=title, description=description)
                )
                if result.rowcount == 0:
                    raise NotFoundError(resource="note", resource_id=str(note_id))
            logger.info("Note updated: %s", note_id)

        await self._run("update_fields", op)

    async def delete_by_id(self, note_id: UUID) -> None:
        """
        Permanently remove a Note.

        Raises:
            NotFoundError: No Note has `note_id`
            StorageError:  Underlying failure
        """

        async def op() -> None:
            async with self._session() as session:
                result = await session.execute(delete(Note).where(Note.id == note_id))
                if result.rowcount == 0:
                    raise NotFoundError(resource="note", resource_id=str(note_id))
            logger.info("Note deleted: %s", note_id)

        await self._run("delete_by_id", op)

    # ══════════════════════════════════════════════════════════════════════
    # Lifecycle
    # ══════════════════════════════════════════════════════════════════════

    async def create_schema(self) -> None:
        """Create the notes table if it does not exist yet."""

        async def op() -> None:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

        await self._run("create_schema", op)

    async def ping(self) -> bool:
        """Lightweight connectivity check (SELECT 1). Never raises."""
        try:
            async with self._engine.connect() as conn:
                await asyncio.wait_for(
                    conn.execute(text("SELECT 1")), timeout=self.operation_timeout
                )
            return True
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            logger.warning("Storage ping failed: %s", str(e))
            return False

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self._engine.dispose()
