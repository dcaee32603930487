# Models package init: importing it registers every table with Base.metadata
from scriblink.models.folder import Folder, FolderChild, FolderItem
from scriblink.models.note import Note
from scriblink.models.summary import Summary
from scriblink.models.tag import Tag, TagItem
from scriblink.models.user import User

__all__ = [
    "Folder",
    "FolderChild",
    "FolderItem",
    "Note",
    "Summary",
    "Tag",
    "TagItem",
    "User",
]
