"""
Scriblink Backend — Tag Service
=================================

What:  User-scoped labels flagging arbitrary items.
How:   A tag row per (owner, label) is created on first use; membership lives
       in tag_items. Labels are compared exactly as given (after trimming).
"""

import logging
from typing import Dict, List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from scriblink.database import fresh_id
from scriblink.exceptions import ConflictError, NotFoundError, ValidationError
from scriblink.models.tag import Tag, TagItem
from scriblink.schemas.tag import TagRef, TagResponse

logger = logging.getLogger(__name__)


class TagService:

    async def add_tag(self, db: AsyncSession, user: str, label: str, item: str) -> TagResponse:
        """
        Flag `item` with `label`, creating the user's tag on first use.

        Raises:
            ValidationError: blank label
            ConflictError: item already carries this label
        """
        label = (label or "").strip()
        if not label:
            raise ValidationError(message="Tag label cannot be empty.", field="label")

        result = await db.execute(
            select(Tag).where(Tag.owner == user, Tag.label == label)
        )
        tag = result.scalar_one_or_none()
        if tag is None:
            tag = Tag(id=fresh_id(), owner=user, label=label)
            db.add(tag)
            await db.flush()
            logger.info("Tag %s ('%s') created for user %s", tag.id, label, user)
        elif await db.get(TagItem, (tag.id, item)) is not None:
            raise ConflictError(
                message=f"Item {item} is already tagged with '{label}'.",
                context={"tag": tag.id, "item": item},
            )

        db.add(TagItem(tag_id=tag.id, item_id=item))
        await db.flush()
        return TagResponse(
            id=tag.id, owner=user, label=label, items=await self._item_ids(db, tag.id)
        )

    async def remove_tag_from_item(self, db: AsyncSession, tag: str, item: str) -> None:
        """
        Raises:
            NotFoundError: no such tag
            ValidationError: the item does not carry the tag
        """
        await self.get_tag(db, tag)
        link = await db.get(TagItem, (tag, item))
        if link is None:
            raise ValidationError(
                message=f"Item {item} is not associated with tag {tag}.",
                field="item",
            )
        await db.delete(link)
        await db.flush()
        logger.info("Item %s untagged from %s", item, tag)

    async def remove_item_from_user_tags(self, db: AsyncSession, user: str, item: str) -> int:
        """Drop `item` from every tag of `user`; returns how many links went away."""
        tag_ids = list((await db.execute(select(Tag.id).where(Tag.owner == user))).scalars())
        if not tag_ids:
            return 0
        result = await db.execute(
            delete(TagItem).where(TagItem.item_id == item, TagItem.tag_id.in_(tag_ids))
        )
        await db.flush()
        return result.rowcount or 0

    async def get_tag(self, db: AsyncSession, tag: str) -> TagResponse:
        row = await db.get(Tag, tag)
        if row is None:
            raise NotFoundError(
                resource="tag",
                resource_id=tag,
                message=f"Tag with ID {tag} not found.",
            )
        return TagResponse(
            id=row.id, owner=row.owner, label=row.label, items=await self._item_ids(db, tag)
        )

    async def get_items_by_tag(self, db: AsyncSession, tag: str) -> List[str]:
        return (await self.get_tag(db, tag)).items

    async def get_tags_for_item(self, db: AsyncSession, user: str, item: str) -> List[TagRef]:
        result = await db.execute(
            select(Tag.id, Tag.label)
            .join(TagItem, TagItem.tag_id == Tag.id)
            .where(Tag.owner == user, TagItem.item_id == item)
            .order_by(Tag.label)
        )
        return [TagRef(tag_id=tag_id, label=label) for tag_id, label in result.all()]

    async def get_user_tags(self, db: AsyncSession, user: str) -> List[TagResponse]:
        tags = list(
            (await db.execute(select(Tag).where(Tag.owner == user).order_by(Tag.label)))
            .scalars()
            .all()
        )
        if not tags:
            return []

        items: Dict[str, List[str]] = {t.id: [] for t in tags}
        links = await db.execute(
            select(TagItem.tag_id, TagItem.item_id).where(TagItem.tag_id.in_(items.keys()))
        )
        for tag_id, item_id in links.all():
            items[tag_id].append(item_id)

        return [
            TagResponse(id=t.id, owner=t.owner, label=t.label, items=items[t.id])
            for t in tags
        ]

    async def _item_ids(self, db: AsyncSession, tag: str) -> List[str]:
        result = await db.execute(select(TagItem.item_id).where(TagItem.tag_id == tag))
        return list(result.scalars().all())


tag_service = TagService()
