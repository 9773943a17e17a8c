"""
Bookmark write operations.

A bookmark row and its tag associations are always written in the same
transaction, so a failed tag write never leaves a half-created bookmark.
"""

import logging
from typing import Any, Iterable, Optional
from urllib.parse import urlparse

from sqlalchemy import delete
from sqlalchemy.orm import Session

from ..database import transaction, utcnow
from ..exceptions import NotFoundError, ValidationError
from ..models.bookmark import Bookmark
from ..models.folder import Folder
from ..models.tag import bookmark_tags
from .bookmark_query import BookmarkQuery
from .tag_reconciler import TagReconciler

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http", "https", "ftp")
UPDATABLE_FIELDS = ("title", "url", "folder_id", "tags")


def validate_url(url: Optional[str]) -> str:
    """
    Check that a URL is absolute with a supported scheme and a host.

    Returns:
        The URL with surrounding whitespace removed.

    Raises:
        ValidationError: if the URL is missing or malformed
    """
    if url is None or not url.strip():
        raise ValidationError("Bookmark URL cannot be empty")

    url = url.strip()
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
        parsed.port  # raises ValueError for a malformed port
    except ValueError:
        raise ValidationError(f"Invalid URL: {url}") from None

    if parsed.scheme.lower() not in ALLOWED_SCHEMES or not hostname or any(c.isspace() for c in url):
        raise ValidationError(f"Invalid URL: {url}")
    return url


class BookmarkService:
    """Create, update and delete bookmarks together with their tags."""

    def __init__(self, db: Session):
        self.db = db
        self.tags = TagReconciler(db)
        self.query = BookmarkQuery(db)

    def _check_folder(self, folder_id: Optional[int]) -> None:
        if folder_id is not None and self.db.get(Folder, folder_id) is None:
            raise NotFoundError("Folder", folder_id)

    def create(
        self,
        title: str,
        url: str,
        folder_id: Optional[int] = None,
        tags: Iterable[str] = (),
    ) -> dict:
        """Create a bookmark with its initial tag set and return its view."""
        if title is None:
            raise ValidationError("Bookmark title cannot be null")
        url = validate_url(url)
        self._check_folder(folder_id)

        bookmark = Bookmark(title=title, url=url, folder_id=folder_id)
        with transaction(self.db):
            self.db.add(bookmark)
            self.db.flush()
            self.tags.assign(bookmark.id, tags)

        logger.info("Created bookmark %s in folder %s", bookmark.id, folder_id)
        return self.query.get(bookmark.id)

    def update(self, bookmark_id: int, fields: dict[str, Any]) -> dict:
        """
        Update the supplied fields of a bookmark.

        ``tags`` replaces the complete tag set; a ``None`` value for it is
        treated as not supplied.
        """
        bookmark = self.db.get(Bookmark, bookmark_id)
        if bookmark is None:
            raise NotFoundError("Bookmark", bookmark_id)

        changes = {key: fields[key] for key in UPDATABLE_FIELDS if key in fields}
        tag_names = changes.pop("tags", None)

        if "title" in changes and changes["title"] is None:
            raise ValidationError("Bookmark title cannot be null")
        if "url" in changes:
            changes["url"] = validate_url(changes["url"])
        if "folder_id" in changes:
            self._check_folder(changes["folder_id"])

        with transaction(self.db):
            for field, value in changes.items():
                setattr(bookmark, field, value)
            bookmark.updated_at = utcnow()
            if tag_names is not None:
                self.tags.assign(bookmark_id, tag_names)

        logger.info("Updated bookmark %s", bookmark_id)
        return self.query.get(bookmark_id)

    def delete(self, bookmark_id: int) -> None:
        """Delete a bookmark and its tag associations. Tags and folder stay."""
        bookmark = self.db.get(Bookmark, bookmark_id)
        if bookmark is None:
            raise NotFoundError("Bookmark", bookmark_id)

        with transaction(self.db):
            self.db.execute(delete(bookmark_tags).where(bookmark_tags.c.bookmark_id == bookmark_id))
            self.db.delete(bookmark)

        logger.info("Deleted bookmark %s", bookmark_id)
