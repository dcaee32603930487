"""
Scriblink Backend — Note Service
==================================

What:  Owner-scoped CRUD for notes.
Why:   Keeps ownership rules and timestamp semantics out of the HTTP layer.
How:   Plain async methods over the caller's session; the commit happens in
       get_db_session once the request succeeds.
Who:   Called by WorkspaceService (which adds folder/tag/summary cascades)
       and by the note routes.

Timestamp rules:
    - set_title never touches last_modified
    - update_content bumps last_modified, unless the content is unchanged
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from scriblink.database import fresh_id
from scriblink.exceptions import DatabaseError, NotFoundError, PermissionDeniedError
from scriblink.models.note import DEFAULT_NOTE_TITLE, Note
from scriblink.schemas.note import NoteListItem, NoteListResponse, NoteResponse

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 200


class NoteService:
    """
    Business logic layer for note operations.

    Error Handling Strategy:
        Missing notes raise NotFoundError, foreign notes PermissionDeniedError.
        Unexpected SQLAlchemy failures on listing are wrapped in DatabaseError
        so internals never reach the client.
    """

    async def create_note(
        self,
        db: AsyncSession,
        user: str,
        title: Optional[str] = None,
    ) -> NoteResponse:
        """Create an empty note; a missing or blank title becomes "Untitled"."""
        now = datetime.now(timezone.utc)
        note = Note(
            id=fresh_id(),
            title=title if title and title.strip() else DEFAULT_NOTE_TITLE,
            content="",
            owner=user,
            date_created=now,
            last_modified=now,
        )
        db.add(note)
        await db.flush()
        logger.info("Note %s created for user %s", note.id, user)
        return NoteResponse.model_validate(note)

    async def delete_note(self, db: AsyncSession, note: str, user: str) -> None:
        row = await self._owned(db, note, user)
        await db.delete(row)
        await db.flush()
        logger.info("Note %s deleted", note)

    async def set_title(self, db: AsyncSession, note: str, user: str, title: str) -> NoteResponse:
        row = await self._owned(db, note, user)
        if row.title != title:
            row.title = title
            await db.flush()
            logger.info("Note %s renamed", note)
        return NoteResponse.model_validate(row)

    async def update_content(
        self,
        db: AsyncSession,
        note: str,
        user: str,
        content: str,
    ) -> NoteResponse:
        row = await self._owned(db, note, user)
        if row.content != content:
            row.content = content
            row.last_modified = datetime.now(timezone.utc)
            await db.flush()
            logger.info("Note %s content updated (%d chars)", note, len(content))
        return NoteResponse.model_validate(row)

    async def get_note(self, db: AsyncSession, note: str, user: str) -> NoteResponse:
        """
        Retrieve a single note.

        Raises:
            NotFoundError: no note with that id (→ 404)
            PermissionDeniedError: the note belongs to another user (→ 403)
        """
        return NoteResponse.model_validate(await self._owned(db, note, user))

    async def list_notes(self, db: AsyncSession, user: str) -> NoteListResponse:
        """
        All notes of `user`, most recently modified first.

        Query plan:
            SELECT * FROM notes WHERE owner = :user ORDER BY last_modified DESC
            → idx_notes_owner
        """
        try:
            result = await db.execute(
                select(Note).where(Note.owner == user).order_by(desc(Note.last_modified))
            )
            notes = list(result.scalars().all())
            count = await db.execute(select(func.count(Note.id)).where(Note.owner == user))
            total_count = count.scalar() or 0
        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve notes. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        return NoteListResponse(
            notes=[
                NoteListItem(
                    id=n.id,
                    title=n.title,
                    text_preview=n.content[:PREVIEW_LENGTH] if n.content else "",
                    last_modified=n.last_modified,
                )
                for n in notes
            ],
            total_count=total_count,
        )

    async def _owned(self, db: AsyncSession, note: str, user: str) -> Note:
        row = await db.get(Note, note)
        if row is None:
            raise NotFoundError(
                resource="note",
                resource_id=note,
                message=f"Note with ID {note} not found.",
            )
        if row.owner != user:
            raise PermissionDeniedError(
                message=f"User {user} does not own note {note}.",
                context={"note": note, "user": user},
            )
        return row


note_service = NoteService()
