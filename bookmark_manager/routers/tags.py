"""
Tag management API routes.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.bookmark import BookmarkResponse
from ..schemas.tag import TagCreate, TagUpdate, TagResponse
from ..services.bookmark_query import BookmarkQuery
from .bookmarks import get_bookmark_query
from ..services.tag_service import TagService


router = APIRouter(prefix="/api/tags", tags=["tags"])


def get_tag_service(db: Session = Depends(get_db)) -> TagService:
    return TagService(db)


@router.get("", response_model=list[TagResponse])
def list_tags(tags: TagService = Depends(get_tag_service)):
    """List all tags with bookmark counts, ordered by name."""
    return tags.list_tags()


@router.get("/{tag_id}", response_model=TagResponse)
def get_tag(tag_id: int, tags: TagService = Depends(get_tag_service)):
    return tags.get(tag_id)


@router.get("/{tag_id}/bookmarks", response_model=list[BookmarkResponse])
def get_tag_bookmarks(
    tag_id: int,
    bookmarks: BookmarkQuery = Depends(get_bookmark_query),
):
    """Get the bookmarks carrying a tag, newest first."""
    return bookmarks.list_bookmarks(tag_id=tag_id)


@router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
def create_tag(tag_data: TagCreate, tags: TagService = Depends(get_tag_service)):
    """Create a tag explicitly. Fails with 409 if the name is taken."""
    return tags.create(tag_data.name)


@router.put("/{tag_id}", response_model=TagResponse)
def rename_tag(tag_id: int, tag_data: TagUpdate, tags: TagService = Depends(get_tag_service)):
    """Rename a tag. Fails with 409 if another tag has the name."""
    return tags.rename(tag_id, tag_data.name)


@router.delete("/{tag_id}")
def delete_tag(tag_id: int, tags: TagService = Depends(get_tag_service)):
    """Delete a tag and remove it from every bookmark."""
    tags.delete(tag_id)
    return {"message": "Tag deleted successfully"}
