"""
Pydantic schemas for bookmarks.

URL well-formedness is checked by the bookmark service rather than here so
that the same rule applies to every caller.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from .tag import TagRef


class BookmarkBase(BaseModel):
    """Base schema with common bookmark fields."""
    title: str
    url: str


class BookmarkCreate(BookmarkBase):
    """Schema for creating a bookmark together with its initial tags."""
    folder_id: int | None = None
    tags: list[str] = []


class BookmarkUpdate(BaseModel):
    """
    Schema for updating a bookmark. All fields are optional.

    ``tags``, when given, replaces the whole tag set.
    """
    title: str | None = None
    url: str | None = None
    folder_id: int | None = None
    tags: list[str] | None = None


class BookmarkResponse(BookmarkBase):
    """Bookmark with its tag set, as returned by every read path."""
    id: int
    folder_id: int | None
    created_at: datetime
    updated_at: datetime
    tags: list[TagRef] = []

    model_config = ConfigDict(from_attributes=True)
