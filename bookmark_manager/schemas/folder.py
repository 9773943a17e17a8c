"""
Pydantic schemas for folders.

Defines schemas for creating, updating, and returning folder data
with support for nested structure responses.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class FolderBase(BaseModel):
    """Base schema with common folder fields."""
    name: str


class FolderCreate(FolderBase):
    """Schema for creating a new folder."""
    parent_id: int | None = None


class FolderUpdate(BaseModel):
    """
    Schema for updating an existing folder. All fields are optional.

    An explicit ``"parent_id": null`` moves the folder to the root; leaving
    the key out keeps the current parent.
    """
    name: str | None = None
    parent_id: int | None = None


class FolderResponse(FolderBase):
    """Schema for folder response with all fields."""
    id: int
    parent_id: int | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FolderWithChildren(FolderResponse):
    """Recursive folder schema used by the sidebar tree."""
    bookmark_count: int = 0
    children: list["FolderWithChildren"] = []


FolderWithChildren.model_rebuild()
