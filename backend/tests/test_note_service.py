"""
Scriblink Backend — Note Service Unit Tests
=============================================

What:  Tests for NoteService (create, title, content, get, list, delete).
How:   In-memory SQLite sessions; a mocked session for the database-error path.

What we test:
    ✅ Defaults on creation ("Untitled", empty content)
    ✅ set_title leaves last_modified alone; update_content bumps it
    ✅ Unchanged content is a no-op
    ✅ Ownership: NotFoundError vs PermissionDeniedError
    ✅ Listing is owner-scoped with previews
"""

from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from scriblink.exceptions import DatabaseError, NotFoundError, PermissionDeniedError
from scriblink.models.note import Note
from scriblink.services.note_service import NoteService


class TestNoteLifecycle:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_create_defaults(self, db_session):
        note = await self.service.create_note(db_session, "alice")

        assert note.title == "Untitled"
        assert note.content == ""
        assert note.owner == "alice"
        assert note.last_modified >= note.date_created

    @pytest.mark.asyncio
    async def test_blank_title_becomes_untitled(self, db_session):
        note = await self.service.create_note(db_session, "alice", "   ")
        assert note.title == "Untitled"

    @pytest.mark.asyncio
    async def test_set_title_does_not_touch_last_modified(self, db_session):
        note = await self.service.create_note(db_session, "alice", "Draft")

        renamed = await self.service.set_title(db_session, note.id, "alice", "Final")

        assert renamed.title == "Final"
        assert renamed.last_modified == note.last_modified

    @pytest.mark.asyncio
    async def test_update_content_bumps_last_modified(self, db_session):
        note = await self.service.create_note(db_session, "alice")
        # Push the creation time back so the bump is observable
        row = await db_session.get(Note, note.id)
        row.date_created = row.last_modified = row.last_modified - timedelta(minutes=5)
        await db_session.flush()
        before = row.last_modified

        updated = await self.service.update_content(db_session, note.id, "alice", "cells divide")

        assert updated.content == "cells divide"
        assert updated.last_modified > before
        assert updated.last_modified >= updated.date_created

    @pytest.mark.asyncio
    async def test_reloaded_timestamps_stay_utc(self, db_session):
        note = await self.service.create_note(db_session, "alice", "Draft")
        db_session.expunge_all()

        reloaded = await self.service.set_title(db_session, note.id, "alice", "Final")

        assert reloaded.last_modified.tzinfo is not None
        assert reloaded.last_modified == note.last_modified
        assert reloaded.last_modified >= reloaded.date_created

    @pytest.mark.asyncio
    async def test_unchanged_content_is_noop(self, db_session):
        note = await self.service.create_note(db_session, "alice")
        first = await self.service.update_content(db_session, note.id, "alice", "same")

        second = await self.service.update_content(db_session, note.id, "alice", "same")

        assert second.last_modified == first.last_modified

    @pytest.mark.asyncio
    async def test_delete(self, db_session):
        note = await self.service.create_note(db_session, "alice")

        await self.service.delete_note(db_session, note.id, "alice")

        with pytest.raises(NotFoundError):
            await self.service.get_note(db_session, note.id, "alice")


class TestNoteOwnership:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_missing_note(self, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await self.service.get_note(db_session, "ghost", "alice")
        assert exc_info.value.resource == "note"

    @pytest.mark.asyncio
    async def test_foreign_note(self, db_session):
        note = await self.service.create_note(db_session, "alice")

        with pytest.raises(PermissionDeniedError):
            await self.service.get_note(db_session, note.id, "bob")
        with pytest.raises(PermissionDeniedError):
            await self.service.set_title(db_session, note.id, "bob", "mine now")
        with pytest.raises(PermissionDeniedError):
            await self.service.delete_note(db_session, note.id, "bob")


class TestNoteListing:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_list_is_owner_scoped(self, db_session):
        mine = await self.service.create_note(db_session, "alice", "mine")
        await self.service.update_content(db_session, mine.id, "alice", "x" * 500)
        await self.service.create_note(db_session, "bob", "theirs")

        result = await self.service.list_notes(db_session, "alice")

        assert result.total_count == 1
        assert [n.title for n in result.notes] == ["mine"]
        assert len(result.notes[0].text_preview) == 200

    @pytest.mark.asyncio
    async def test_database_error_is_wrapped(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("gone"))

        with pytest.raises(DatabaseError):
            await self.service.list_notes(mock_db_session, "alice")
