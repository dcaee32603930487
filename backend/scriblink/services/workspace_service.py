"""
Scriblink Backend — Workspace Service (Request Flow Orchestrator)
===================================================================

What:  Composes the concept services (folders, notes, tags, summaries, auth)
       into the flows a signed-in user triggers.
Why:   Each concept service stays independent; the "when X happens, also do Y"
       rules live here in one place.
How:   Every method runs inside the request's session, so a flow either
       commits completely (get_db_session) or rolls back on the first error.
Who:   Called by the route handlers.

Flows:
    register        → create user → initialize root folder
    create note     → create note → insert into folder (root by default) → set content
    delete note     → leave folder → leave the owner's tags → drop summary → delete note
    delete folder   → delete closure → delete contained notes (note cascade)
    everything else → check the requesting user owns the target, then delegate

Ownership failures raise PermissionDeniedError before any state changes.
"""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from scriblink.exceptions import PermissionDeniedError
from scriblink.models.note import Note
from scriblink.schemas.folder import FolderDeletionResponse, FolderResponse
from scriblink.schemas.note import NoteResponse
from scriblink.schemas.summary import SummaryResponse
from scriblink.schemas.tag import TagRef, TagResponse
from scriblink.services.auth_service import AuthService, auth_service
from scriblink.services.folder_service import FolderService, folder_service
from scriblink.services.note_service import NoteService, note_service
from scriblink.services.summary_service import SummaryService, summary_service
from scriblink.services.tag_service import TagService, tag_service

logger = logging.getLogger(__name__)


class WorkspaceService:
    """
    Request flows for one user's workspace.

    The concept services are constructor arguments so tests can swap in a
    SummaryService with a mocked generator.
    """

    def __init__(
        self,
        folders: FolderService = folder_service,
        notes: NoteService = note_service,
        tags: TagService = tag_service,
        summaries: SummaryService = summary_service,
        auth: AuthService = auth_service,
    ):
        self.folders = folders
        self.notes = notes
        self.tags = tags
        self.summaries = summaries
        self.auth = auth

    # ── Accounts ──────────────────────────────────────────────────────────

    async def register(self, db: AsyncSession, username: str, password: str) -> dict:
        user = await self.auth.register(db, username, password)
        root = await self.folders.initialize_root(db, user)
        return {"user": user, "root_folder": root.id}

    async def login(self, db: AsyncSession, username: str, password: str) -> str:
        return await self.auth.authenticate(db, username, password)

    # ── Folders ───────────────────────────────────────────────────────────

    async def create_folder(
        self,
        db: AsyncSession,
        user: str,
        title: str,
        parent: Optional[str] = None,
    ) -> FolderResponse:
        if parent is None:
            parent = await self.folders.get_root_folder(db, user)
        return await self.folders.create_child(db, user, title, parent)

    async def get_folder(self, db: AsyncSession, user: str, folder: str) -> FolderResponse:
        return await self._owned_folder(db, user, folder)

    async def get_parent(self, db: AsyncSession, user: str, folder: str) -> Optional[str]:
        await self._owned_folder(db, user, folder)
        return await self.folders.find_parent(db, folder)

    async def move_folder(
        self,
        db: AsyncSession,
        user: str,
        folder: str,
        new_parent: str,
    ) -> FolderResponse:
        await self._owned_folder(db, user, folder)
        return await self.folders.move(db, folder, new_parent)

    async def delete_folder(
        self,
        db: AsyncSession,
        user: str,
        folder: str,
    ) -> FolderDeletionResponse:
        """
        Delete `folder`, its sub-tree and every note stored anywhere in it.

        Items that are not notes of `user` are left alone; they were only
        detached from the deleted folders.
        """
        await self._owned_folder(db, user, folder)
        result = await self.folders.delete_folder(db, folder)

        removed = 0
        for item in result.deleted_items:
            note = await db.get(Note, item)
            if note is None or note.owner != result.owner:
                continue
            await self._cascade_note(db, result.owner, item)
            removed += 1

        logger.info(
            "Folder %s delete cascaded to %d note(s) of %d item(s)",
            folder,
            removed,
            len(result.deleted_items),
        )
        return result

    # ── Notes ─────────────────────────────────────────────────────────────

    async def create_note(
        self,
        db: AsyncSession,
        user: str,
        title: Optional[str] = None,
        content: str = "",
        folder: Optional[str] = None,
    ) -> NoteResponse:
        if folder is None:
            folder = await self.folders.get_root_folder(db, user)
        else:
            await self._owned_folder(db, user, folder)

        note = await self.notes.create_note(db, user, title)
        await self.folders.insert_item(db, note.id, folder)
        if content:
            note = await self.notes.update_content(db, note.id, user, content)
        return note

    async def move_note(self, db: AsyncSession, user: str, note: str, folder: str) -> None:
        await self.notes.get_note(db, note, user)
        await self._owned_folder(db, user, folder)
        await self.folders.insert_item(db, note, folder)

    async def delete_note(self, db: AsyncSession, user: str, note: str) -> None:
        await self.notes.get_note(db, note, user)
        await self._cascade_note(db, user, note)

    # ── Tags ──────────────────────────────────────────────────────────────

    async def add_tag(self, db: AsyncSession, user: str, label: str, item: str) -> TagResponse:
        await self.notes.get_note(db, item, user)
        return await self.tags.add_tag(db, user, label, item)

    async def remove_tag(self, db: AsyncSession, user: str, tag: str, item: str) -> None:
        await self._owned_tag(db, user, tag)
        await self.tags.remove_tag_from_item(db, tag, item)

    async def get_tag(self, db: AsyncSession, user: str, tag: str) -> TagResponse:
        return await self._owned_tag(db, user, tag)

    async def get_tags_for_note(self, db: AsyncSession, user: str, note: str) -> List[TagRef]:
        await self.notes.get_note(db, note, user)
        return await self.tags.get_tags_for_item(db, user, note)

    # ── Summaries ─────────────────────────────────────────────────────────

    async def set_summary(
        self,
        db: AsyncSession,
        user: str,
        note: str,
        summary: str,
    ) -> SummaryResponse:
        await self.notes.get_note(db, note, user)
        return await self.summaries.set_summary(db, note, summary)

    async def generate_summary(
        self,
        db: AsyncSession,
        user: str,
        note: str,
        text: Optional[str] = None,
    ) -> SummaryResponse:
        """Summarize `text`, or the note's own content when `text` is None."""
        current = await self.notes.get_note(db, note, user)
        source = current.content if text is None else text
        return await self.summaries.set_summary_with_ai(db, note, source)

    async def get_summary(self, db: AsyncSession, user: str, note: str) -> SummaryResponse:
        await self.notes.get_note(db, note, user)
        return await self.summaries.get_summary(db, note)

    async def delete_summary(self, db: AsyncSession, user: str, note: str) -> None:
        await self.notes.get_note(db, note, user)
        await self.summaries.delete_summary(db, note)

    # ── Private helpers ───────────────────────────────────────────────────

    async def _cascade_note(self, db: AsyncSession, user: str, note: str) -> None:
        if await self.folders.find_item_folder(db, note) is not None:
            await self.folders.delete_item(db, note)
        await self.tags.remove_item_from_user_tags(db, user, note)
        if await self.summaries.has_summary(db, note):
            await self.summaries.delete_summary(db, note)
        await self.notes.delete_note(db, note, user)

    async def _owned_folder(self, db: AsyncSession, user: str, folder: str) -> FolderResponse:
        found = await self.folders.get_folder(db, folder)
        if found.owner != user:
            raise PermissionDeniedError(
                message=f"Folder with ID {folder} is not owned by the user.",
                context={"folder": folder, "user": user},
            )
        return found

    async def _owned_tag(self, db: AsyncSession, user: str, tag: str) -> TagResponse:
        found = await self.tags.get_tag(db, tag)
        if found.owner != user:
            raise PermissionDeniedError(
                message=f"Tag with ID {tag} is not owned by the user.",
                context={"tag": tag, "user": user},
            )
        return found


workspace_service = WorkspaceService()
