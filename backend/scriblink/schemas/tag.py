"""Pydantic models for the tags API contract."""

from typing import List

from pydantic import BaseModel, Field


class TagResponse(BaseModel):
    id: str
    owner: str
    label: str
    items: List[str] = Field(default_factory=list)


class TagRef(BaseModel):
    """A tag attached to an item: just enough to render a chip."""
    tag_id: str
    label: str


class AddTagRequest(BaseModel):
    label: str = Field(max_length=100)
    item: str


class TagListResponse(BaseModel):
    tags: List[TagResponse]
