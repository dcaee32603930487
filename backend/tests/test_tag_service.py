"""
Scriblink Backend — Tag Service Tests
=======================================

What:  Tagging items, lookup in both directions, and removal rules.
"""

import pytest

from scriblink.exceptions import ConflictError, NotFoundError, ValidationError
from scriblink.services.tag_service import TagService


class TestAddTag:

    def setup_method(self):
        self.service = TagService()

    @pytest.mark.asyncio
    async def test_first_use_creates_tag(self, db_session):
        tag = await self.service.add_tag(db_session, "alice", "biology", "note-1")

        assert tag.label == "biology"
        assert tag.owner == "alice"
        assert tag.items == ["note-1"]

    @pytest.mark.asyncio
    async def test_same_label_reuses_tag(self, db_session):
        first = await self.service.add_tag(db_session, "alice", "biology", "note-1")
        second = await self.service.add_tag(db_session, "alice", "biology", "note-2")

        assert first.id == second.id
        assert sorted(second.items) == ["note-1", "note-2"]

    @pytest.mark.asyncio
    async def test_labels_are_per_user(self, db_session):
        a = await self.service.add_tag(db_session, "alice", "biology", "note-1")
        b = await self.service.add_tag(db_session, "bob", "biology", "note-9")
        assert a.id != b.id

    @pytest.mark.asyncio
    async def test_blank_label(self, db_session):
        with pytest.raises(ValidationError):
            await self.service.add_tag(db_session, "alice", "   ", "note-1")

    @pytest.mark.asyncio
    async def test_duplicate_tagging(self, db_session):
        await self.service.add_tag(db_session, "alice", "biology", "note-1")

        with pytest.raises(ConflictError):
            await self.service.add_tag(db_session, "alice", "biology", "note-1")


class TestRemoveAndQuery:

    def setup_method(self):
        self.service = TagService()

    @pytest.mark.asyncio
    async def test_remove_tag_from_item(self, db_session):
        tag = await self.service.add_tag(db_session, "alice", "biology", "note-1")

        await self.service.remove_tag_from_item(db_session, tag.id, "note-1")

        assert await self.service.get_items_by_tag(db_session, tag.id) == []

    @pytest.mark.asyncio
    async def test_remove_from_untagged_item(self, db_session):
        tag = await self.service.add_tag(db_session, "alice", "biology", "note-1")

        with pytest.raises(ValidationError):
            await self.service.remove_tag_from_item(db_session, tag.id, "note-2")

    @pytest.mark.asyncio
    async def test_remove_unknown_tag(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.remove_tag_from_item(db_session, "ghost", "note-1")

    @pytest.mark.asyncio
    async def test_tags_for_item_are_owner_scoped(self, db_session):
        await self.service.add_tag(db_session, "alice", "physics", "note-1")
        await self.service.add_tag(db_session, "alice", "biology", "note-1")
        await self.service.add_tag(db_session, "bob", "chemistry", "note-1")

        refs = await self.service.get_tags_for_item(db_session, "alice", "note-1")

        assert [r.label for r in refs] == ["biology", "physics"]

    @pytest.mark.asyncio
    async def test_user_tags(self, db_session):
        await self.service.add_tag(db_session, "alice", "biology", "note-1")
        await self.service.add_tag(db_session, "alice", "biology", "note-2")
        await self.service.add_tag(db_session, "alice", "physics", "note-3")

        tags = await self.service.get_user_tags(db_session, "alice")

        assert [t.label for t in tags] == ["biology", "physics"]
        assert sorted(tags[0].items) == ["note-1", "note-2"]
        assert await self.service.get_user_tags(db_session, "nobody") == []

    @pytest.mark.asyncio
    async def test_remove_item_from_user_tags(self, db_session):
        await self.service.add_tag(db_session, "alice", "biology", "note-1")
        await self.service.add_tag(db_session, "alice", "physics", "note-1")
        bob = await self.service.add_tag(db_session, "bob", "biology", "note-1")

        removed = await self.service.remove_item_from_user_tags(db_session, "alice", "note-1")

        assert removed == 2
        assert await self.service.get_tags_for_item(db_session, "alice", "note-1") == []
        assert await self.service.get_items_by_tag(db_session, bob.id) == ["note-1"]
