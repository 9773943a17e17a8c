"""
Pydantic schemas for tags.
"""

from pydantic import BaseModel, ConfigDict


class TagRef(BaseModel):
    """Tag as embedded in a bookmark view."""
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class TagCreate(BaseModel):
    """Schema for creating a tag explicitly."""
    name: str


class TagUpdate(BaseModel):
    """Schema for renaming a tag."""
    name: str


class TagResponse(TagRef):
    """Tag with the number of bookmarks carrying it."""
    bookmark_count: int = 0
