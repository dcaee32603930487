"""
Scriblink Backend — Folder Request/Response Schemas
=====================================================

What:  Pydantic models for the folder API contract.
Why:   Folder descriptors are returned by value; callers never hold ORM rows.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class FolderResponse(BaseModel):
    """
    What:  Full descriptor of one folder.
    Who:   Returned by every folder operation that yields a folder.

    subfolders keeps insertion order; items has no guaranteed order.
    """
    id: str = Field(description="Folder identifier")
    owner: str = Field(description="Owning user id")
    title: str = Field(description="Folder title")
    subfolders: List[str] = Field(default_factory=list, description="Child folder ids, in insertion order")
    items: List[str] = Field(default_factory=list, description="Ids of items stored in this folder")


class FolderDeletionResponse(BaseModel):
    """
    What:  Outcome of a cascading folder delete.
    Why:   Items inside deleted folders are not removed by the folder manager;
           the caller uses `deleted_items` to cascade.
    """
    folder_id: str = Field(description="The folder the delete was requested for")
    owner: str = Field(description="Owner of the deleted folders")
    deleted_folders: List[str] = Field(description="Every folder removed, requested one included")
    deleted_items: List[str] = Field(description="Items that were stored in the removed folders")


class CreateFolderRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    parent: Optional[str] = Field(default=None, description="Parent folder id; the root folder when omitted")


class MoveFolderRequest(BaseModel):
    new_parent: str = Field(description="Destination folder id")


class InsertItemRequest(BaseModel):
    item: str = Field(description="Item (note) id to place in the folder")


class RootFolderResponse(BaseModel):
    root_folder: str = Field(description="Id of the user's root folder")


class FolderListResponse(BaseModel):
    folders: List[FolderResponse]


class ParentResponse(BaseModel):
    folder: str
    parent: Optional[str] = Field(default=None, description="Parent folder id; null for roots and detached folders")
