"""
Bookmark management API routes.

Provides CRUD operations for bookmarks, text search, and URL metadata
scraping for the add-bookmark form.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import get_db
from ..schemas.bookmark import BookmarkCreate, BookmarkUpdate, BookmarkResponse
from ..schemas.metadata import MetadataRequest, PageMetadata
from ..services.bookmark_query import BookmarkQuery
from ..services.bookmark_service import BookmarkService
from ..services.metadata_scraper import MetadataFetcher


router = APIRouter(prefix="/api/bookmarks", tags=["bookmarks"])


def get_bookmark_query(db: Session = Depends(get_db)) -> BookmarkQuery:
    return BookmarkQuery(db)


def get_bookmark_service(db: Session = Depends(get_db)) -> BookmarkService:
    return BookmarkService(db)


def get_metadata_fetcher() -> MetadataFetcher:
    settings = get_settings()
    return MetadataFetcher(timeout=settings.fetch_timeout, user_agent=settings.fetch_user_agent)


@router.get("", response_model=list[BookmarkResponse])
def list_bookmarks(
    folder_id: int | None = None,
    tag_id: int | None = None,
    bookmarks: BookmarkQuery = Depends(get_bookmark_query),
):
    """
    List bookmarks, newest first.

    Args:
        folder_id: Only bookmarks directly inside this folder
        tag_id: Only bookmarks carrying this tag
    """
    return bookmarks.list_bookmarks(folder_id=folder_id, tag_id=tag_id)


@router.get("/search", response_model=list[BookmarkResponse])
def search_bookmarks(
    q: str = Query("", description="Text matched against title, URL and tag names"),
    bookmarks: BookmarkQuery = Depends(get_bookmark_query),
):
    """Search bookmarks by case-insensitive substring."""
    return bookmarks.search(q)


@router.post("/fetch-metadata", response_model=PageMetadata)
async def fetch_metadata(
    payload: MetadataRequest,
    fetcher: MetadataFetcher = Depends(get_metadata_fetcher),
):
    """Fetch title, description and favicon for a URL."""
    return await fetcher.fetch(payload.url)


@router.get("/{bookmark_id}", response_model=BookmarkResponse)
def get_bookmark(bookmark_id: int, bookmarks: BookmarkQuery = Depends(get_bookmark_query)):
    """Get a single bookmark with its tags."""
    return bookmarks.get(bookmark_id)


@router.post("", response_model=BookmarkResponse, status_code=status.HTTP_201_CREATED)
def create_bookmark(
    bookmark_data: BookmarkCreate,
    service: BookmarkService = Depends(get_bookmark_service),
):
    """Create a bookmark; unknown tag names are created on the fly."""
    return service.create(
        title=bookmark_data.title,
        url=bookmark_data.url,
        folder_id=bookmark_data.folder_id,
        tags=bookmark_data.tags,
    )


@router.put("/{bookmark_id}", response_model=BookmarkResponse)
def update_bookmark(
    bookmark_id: int,
    bookmark_data: BookmarkUpdate,
    service: BookmarkService = Depends(get_bookmark_service),
):
    """
    Update an existing bookmark.

    Only provided fields are updated. A provided ``tags`` list replaces the
    bookmark's whole tag set.
    """
    return service.update(bookmark_id, bookmark_data.model_dump(exclude_unset=True))


@router.delete("/{bookmark_id}")
def delete_bookmark(bookmark_id: int, service: BookmarkService = Depends(get_bookmark_service)):
    """Delete a bookmark. Its folder and tags are left in place."""
    service.delete(bookmark_id)
    return {"message": "Bookmark deleted successfully"}
