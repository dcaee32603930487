"""
Scriblink Backend — Folder Hierarchy Service
==============================================

What:  Maintains each user's forest of folders: sub-folders plus opaque items.
Why:   Notes are organised hierarchically; the hierarchy must stay a forest
       (single parent, no cycles, one root per user) whatever the request order.
How:   Containment lives in link tables (see models/folder.py). The parent of a
       folder is found by a reverse lookup on folder_children, never stored.
Who:   Called by WorkspaceService and the folder routes.

Invariants kept here:
    - a folder has one owner for life; children are created only under a
      parent owned by the same user, and moves require equal owners
    - move detaches from every current parent before attaching to the new one
    - move refuses self-moves and moves into a descendant (acyclicity)
    - an item sits in at most one folder
    - one root per user (initialize_root refuses users that own any folder)

Traversals (descendant test and closure collection) use an explicit worklist
with a visited set, so deep or corrupted hierarchies cannot recurse without
bound. A child id with no stored folder is a dead edge: logged and skipped.

Multi-step operations (detach then attach, collect then delete) run inside the
caller's session; concurrent requests on the same folders are not serialized.
"""

import logging
from collections import deque
from typing import Dict, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from scriblink.database import fresh_id
from scriblink.exceptions import (
    DatabaseError,
    NotFoundError,
    PermissionDeniedError,
    StructuralViolationError,
)
from scriblink.models.folder import ROOT_FOLDER_TITLE, Folder, FolderChild, FolderItem
from scriblink.schemas.folder import FolderDeletionResponse, FolderResponse

logger = logging.getLogger(__name__)


class FolderService:
    """
    Folder hierarchy operations.

    Public methods:
        initialize_root  -- create the user's single root folder
        create_child     -- create a folder under an owned parent
        move             -- re-parent a folder (ownership + acyclicity checks)
        insert_item      -- place an item, leaving its previous folder
        delete_folder    -- remove a folder and its whole sub-tree
        delete_item      -- take an item out of its folder
        is_descendant    -- breadth-first reachability test
        collect_descendants, find_parent, get_folder, get_children,
        get_items, list_folders, get_root_folder
    """

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def initialize_root(self, db: AsyncSession, user: str) -> FolderResponse:
        """
        Create the root folder for `user`.

        Fails if the user already owns any folder at all, root or not.

        Raises:
            StructuralViolationError: violation="root_exists"
        """
        existing = await db.execute(
            select(Folder.id).where(Folder.owner == user).limit(1)
        )
        if existing.scalar_one_or_none() is not None:
            raise StructuralViolationError(
                message=f"User {user} has already created folders.",
                violation="root_exists",
                context={"user": user},
            )

        folder = Folder(id=fresh_id(), owner=user, title=ROOT_FOLDER_TITLE)
        db.add(folder)
        await db.flush()
        logger.info("Root folder %s created for user %s", folder.id, user)
        return FolderResponse(id=folder.id, owner=user, title=folder.title)

    async def create_child(
        self,
        db: AsyncSession,
        user: str,
        title: str,
        parent: str,
    ) -> FolderResponse:
        """
        Create a folder titled `title` and append it to `parent`'s subfolders.

        Raises:
            NotFoundError: parent does not exist
            PermissionDeniedError: parent is owned by another user
        """
        parent_folder = await db.get(Folder, parent)
        if parent_folder is None:
            raise NotFoundError(
                resource="parent folder",
                resource_id=parent,
                message=f"Parent folder with ID {parent} not found.",
            )
        if parent_folder.owner != user:
            raise PermissionDeniedError(
                message=f"Parent folder with ID {parent} is not owned by the user.",
                context={"parent": parent, "user": user},
            )

        folder = Folder(id=fresh_id(), owner=user, title=title)
        db.add(folder)
        await db.flush()
        await self._append_child(db, parent, folder.id)
        logger.info("Folder %s ('%s') created under %s", folder.id, title, parent)
        return FolderResponse(id=folder.id, owner=user, title=title)

    async def move(
        self,
        db: AsyncSession,
        folder: str,
        new_parent: str,
    ) -> FolderResponse:
        """
        Move `folder` under `new_parent`.

        Checks, in order:
            1. folder exists                     → NotFoundError
            2. new_parent exists                 → NotFoundError
            3. both have the same owner          → PermissionDeniedError
            4. folder != new_parent              → StructuralViolationError(self_move)
            5. new_parent not below folder       → StructuralViolationError(cyclic_move)

        A folder with no current parent is simply attached; that is not an error.
        A failed check leaves the hierarchy untouched.
        """
        moving = await db.get(Folder, folder)
        if moving is None:
            raise NotFoundError(
                resource="folder",
                resource_id=folder,
                message=f"Folder with ID {folder} not found.",
            )
        target = await db.get(Folder, new_parent)
        if target is None:
            raise NotFoundError(
                resource="parent folder",
                resource_id=new_parent,
                message=f"New parent folder with ID {new_parent} not found.",
            )

        if moving.owner != target.owner:
            raise PermissionDeniedError(
                message=(
                    f"Folders must have the same owner to be moved. Folder {folder} "
                    f"owner: {moving.owner}, new parent {new_parent} owner: {target.owner}"
                ),
                context={"folder": folder, "new_parent": new_parent},
            )

        if folder == new_parent:
            raise StructuralViolationError(
                message="Cannot move a folder into itself.",
                violation="self_move",
                context={"folder": folder},
            )

        if await self.is_descendant(db, target=new_parent, ancestor=folder):
            raise StructuralViolationError(
                message=f"Cannot move folder {folder} into its own descendant folder {new_parent}.",
                violation="cyclic_move",
                context={"folder": folder, "new_parent": new_parent},
            )

        # Detach from every folder listing it, then attach to the new parent only
        detached = await db.execute(
            delete(FolderChild).where(FolderChild.child_id == folder)
        )
        await self._append_child(db, new_parent, folder)
        await db.flush()

        logger.info(
            "Folder %s moved under %s (detached from %d parent(s))",
            folder,
            new_parent,
            detached.rowcount or 0,
        )
        return await self._describe(db, moving)

    async def insert_item(self, db: AsyncSession, item: str, folder: str) -> None:
        """
        Place `item` in `folder`, removing it from whichever folder held it.

        Idempotent: inserting an item into the folder that already holds it
        is a successful no-op.

        Raises:
            NotFoundError: folder does not exist
        """
        if await db.get(Folder, folder) is None:
            raise NotFoundError(
                resource="folder",
                resource_id=folder,
                message=f"Target folder with ID {folder} not found.",
            )

        result = await db.execute(
            select(FolderItem.folder_id).where(FolderItem.item_id == item)
        )
        current = result.scalars().first()
        if current == folder:
            return

        if current is not None:
            await db.execute(delete(FolderItem).where(FolderItem.item_id == item))
            logger.info("Item %s removed from folder %s", item, current)

        db.add(FolderItem(folder_id=folder, item_id=item))
        await db.flush()
        logger.info("Item %s inserted into folder %s", item, folder)

    async def delete_folder(self, db: AsyncSession, folder: str) -> FolderDeletionResponse:
        """
        Delete `folder` and every folder reachable from it.

        Steps:
            1. Collect the descendant closure (folder included)
            2. Record the items stored in those folders
            3. Detach `folder` from its parent, if any
            4. Remove all closure folders and their link rows in one batch

        Items are NOT deleted; they are returned in `deleted_items` so the
        caller can cascade (WorkspaceService deletes the notes).

        Raises:
            NotFoundError: folder does not exist
        """
        root = await db.get(Folder, folder)
        if root is None:
            raise NotFoundError(
                resource="folder",
                resource_id=folder,
                message=f"Folder with ID {folder} not found.",
            )

        owner = root.owner
        closure = await self.collect_descendants(db, folder)
        try:
            items_result = await db.execute(
                select(FolderItem.item_id).where(FolderItem.folder_id.in_(closure))
            )
            items = list(items_result.scalars().all())

            await db.execute(delete(FolderChild).where(FolderChild.child_id == folder))
            await db.execute(delete(FolderChild).where(FolderChild.parent_id.in_(closure)))
            await db.execute(delete(FolderItem).where(FolderItem.folder_id.in_(closure)))
            await db.execute(delete(Folder).where(Folder.id.in_(closure)))
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting folder %s: %s", folder, str(e))
            raise DatabaseError(
                message="Could not delete the folder. Please try again.",
                context={"folder": folder},
            )

        logger.info(
            "Folder %s deleted with %d folder(s) and %d orphaned item(s)",
            folder,
            len(closure),
            len(items),
        )
        return FolderDeletionResponse(
            folder_id=folder,
            owner=owner,
            deleted_folders=closure,
            deleted_items=items,
        )

    async def delete_item(self, db: AsyncSession, item: str) -> None:
        """
        Remove `item` from the folder that contains it.

        Raises:
            NotFoundError: the item is in no folder
        """
        holder = await self.find_item_folder(db, item)
        if holder is None:
            raise NotFoundError(
                resource="item",
                resource_id=item,
                message=f"Item with ID {item} not found in any folder.",
            )

        await db.execute(delete(FolderItem).where(FolderItem.item_id == item))
        await db.flush()
        logger.info("Item %s removed from folder %s", item, holder)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    async def is_descendant(self, db: AsyncSession, target: str, ancestor: str) -> bool:
        """
        True if `target` is reachable from `ancestor` through subfolders.

        Breadth-first from `ancestor`; returns as soon as `target` shows up
        among the direct children of a visited folder. Visited ids are never
        expanded twice, so a cyclic (corrupted) graph still terminates.
        """
        queue = deque([ancestor])
        visited = set()

        while queue:
            current = queue.popleft()
            if current in visited or current == target:
                continue
            visited.add(current)

            if await db.get(Folder, current) is None:
                logger.warning(
                    "Folder ID %s found in hierarchy but document missing", current
                )
                continue

            children = await self._child_ids(db, current)
            if target in children:
                return True
            queue.extend(child for child in children if child not in visited)

        return False

    async def collect_descendants(self, db: AsyncSession, folder: str) -> List[str]:
        """
        `folder` plus every folder reachable from it, in pre-order.

        Worklist traversal; dead edges (ids with no stored folder) are skipped.
        """
        stack = [folder]
        visited = set()
        closure: List[str] = []

        while stack:
            current = stack.pop()
            if current in visited:
                continue
            visited.add(current)

            if await db.get(Folder, current) is None:
                logger.warning("Skipping missing folder %s during collection", current)
                continue

            closure.append(current)
            children = await self._child_ids(db, current)
            stack.extend(reversed(children))

        return closure

    async def find_parent(self, db: AsyncSession, folder: str) -> Optional[str]:
        """The folder listing `folder` as a child, or None for roots and detached folders."""
        result = await db.execute(
            select(FolderChild.parent_id)
            .where(FolderChild.child_id == folder)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def find_item_folder(self, db: AsyncSession, item: str) -> Optional[str]:
        """The folder holding `item`, or None when it sits in no folder."""
        result = await db.execute(
            select(FolderItem.folder_id).where(FolderItem.item_id == item)
        )
        return result.scalars().first()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_folder(self, db: AsyncSession, folder: str) -> FolderResponse:
        return await self._describe(db, await self._require(db, folder))

    async def get_children(self, db: AsyncSession, folder: str) -> List[str]:
        await self._require(db, folder)
        return await self._child_ids(db, folder)

    async def get_items(self, db: AsyncSession, folder: str) -> List[str]:
        await self._require(db, folder)
        result = await db.execute(
            select(FolderItem.item_id).where(FolderItem.folder_id == folder)
        )
        return list(result.scalars().all())

    async def list_folders(self, db: AsyncSession, user: str) -> List[FolderResponse]:
        """Every folder owned by `user`, with children and items, in creation order."""
        try:
            result = await db.execute(
                select(Folder).where(Folder.owner == user).order_by(Folder.created_at)
            )
            folders = list(result.scalars().all())
            ids = [f.id for f in folders]
            if not ids:
                return []

            children: Dict[str, List[str]] = {fid: [] for fid in ids}
            rows = await db.execute(
                select(FolderChild.parent_id, FolderChild.child_id)
                .where(FolderChild.parent_id.in_(ids))
                .order_by(FolderChild.position)
            )
            for parent_id, child_id in rows.all():
                children[parent_id].append(child_id)

            items: Dict[str, List[str]] = {fid: [] for fid in ids}
            rows = await db.execute(
                select(FolderItem.folder_id, FolderItem.item_id)
                .where(FolderItem.folder_id.in_(ids))
            )
            for folder_id, item_id in rows.all():
                items[folder_id].append(item_id)
        except SQLAlchemyError as e:
            logger.error("Database error listing folders for %s: %s", user, str(e))
            raise DatabaseError(
                message="Could not retrieve folders. Please try again.",
                context={"user": user},
            )

        return [
            FolderResponse(
                id=f.id,
                owner=f.owner,
                title=f.title,
                subfolders=children[f.id],
                items=items[f.id],
            )
            for f in folders
        ]

    async def get_root_folder(self, db: AsyncSession, user: str) -> str:
        """
        Id of the user's root folder.

        Picks the folder titled "Root", else the user's first folder; a user
        with no folders gets one initialized on the spot.
        """
        result = await db.execute(
            select(Folder).where(Folder.owner == user).order_by(Folder.created_at)
        )
        folders = list(result.scalars().all())
        if folders:
            root = next((f for f in folders if f.title == ROOT_FOLDER_TITLE), folders[0])
            return root.id

        created = await self.initialize_root(db, user)
        return created.id

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _require(self, db: AsyncSession, folder: str) -> Folder:
        found = await db.get(Folder, folder)
        if found is None:
            raise NotFoundError(
                resource="folder",
                resource_id=folder,
                message=f"Folder with ID {folder} not found.",
            )
        return found

    async def _child_ids(self, db: AsyncSession, folder: str) -> List[str]:
        result = await db.execute(
            select(FolderChild.child_id)
            .where(FolderChild.parent_id == folder)
            .order_by(FolderChild.position)
        )
        return list(result.scalars().all())

    async def _append_child(self, db: AsyncSession, parent: str, child: str) -> None:
        """Add `child` at the end of `parent`'s subfolders; no-op if already there."""
        present = await db.execute(
            select(FolderChild.child_id).where(
                FolderChild.parent_id == parent,
                FolderChild.child_id == child,
            )
        )
        if present.scalar_one_or_none() is not None:
            return

        last = await db.execute(
            select(func.max(FolderChild.position)).where(FolderChild.parent_id == parent)
        )
        highest = last.scalar()
        position = 0 if highest is None else highest + 1
        db.add(FolderChild(parent_id=parent, child_id=child, position=position))
        await db.flush()

    async def _describe(self, db: AsyncSession, folder: Folder) -> FolderResponse:
        return FolderResponse(
            id=folder.id,
            owner=folder.owner,
            title=folder.title,
            subfolders=await self._child_ids(db, folder.id),
            items=await self.get_items(db, folder.id),
        )


folder_service = FolderService()
