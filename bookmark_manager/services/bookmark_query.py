"""
Read paths for bookmarks.

Every result is a denormalized view: the bookmark's own fields plus its
tags as ``{id, name}`` pairs. Tag sets are loaded for the whole result in
one grouped SELECT through the ``Bookmark.tags`` relationship.
"""

from typing import Optional

from sqlalchemy import Select, or_, select
from sqlalchemy.orm import Session, selectinload

from ..exceptions import NotFoundError
from ..models.bookmark import Bookmark
from ..models.folder import Folder
from ..models.tag import Tag


def bookmark_view(bookmark: Bookmark) -> dict:
    """Flatten a Bookmark with loaded tags into a plain dictionary."""
    return {
        "id": bookmark.id,
        "title": bookmark.title,
        "url": bookmark.url,
        "folder_id": bookmark.folder_id,
        "created_at": bookmark.created_at,
        "updated_at": bookmark.updated_at,
        "tags": [{"id": tag.id, "name": tag.name} for tag in bookmark.tags],
    }


class BookmarkQuery:
    """Assembles bookmark views, newest first."""

    def __init__(self, db: Session):
        self.db = db

    def _base_query(self) -> Select:
        return (
            select(Bookmark)
            .options(selectinload(Bookmark.tags))
            .order_by(Bookmark.created_at.desc(), Bookmark.id.desc())
        )

    def _run(self, stmt: Select) -> list[dict]:
        return [bookmark_view(bookmark) for bookmark in self.db.scalars(stmt)]

    def get(self, bookmark_id: int) -> dict:
        stmt = self._base_query().where(Bookmark.id == bookmark_id)
        bookmark = self.db.scalars(stmt).first()
        if bookmark is None:
            raise NotFoundError("Bookmark", bookmark_id)
        return bookmark_view(bookmark)

    def list_bookmarks(
        self,
        folder_id: Optional[int] = None,
        tag_id: Optional[int] = None,
    ) -> list[dict]:
        """
        List bookmarks, optionally scoped to a folder and/or a tag.

        Raises:
            NotFoundError: the folder or tag used as a scope does not exist
        """
        stmt = self._base_query()

        if folder_id is not None:
            if self.db.get(Folder, folder_id) is None:
                raise NotFoundError("Folder", folder_id)
            stmt = stmt.where(Bookmark.folder_id == folder_id)

        if tag_id is not None:
            if self.db.get(Tag, tag_id) is None:
                raise NotFoundError("Tag", tag_id)
            stmt = stmt.where(Bookmark.tags.any(Tag.id == tag_id))

        return self._run(stmt)

    def search(self, query: str) -> list[dict]:
        """
        Case-insensitive substring search over title, url and tag names.

        The query is matched as given, surrounding whitespace included, and
        LIKE wildcards in it match literally. An empty or whitespace-only
        query matches every bookmark.
        """
        query = query or ""
        stmt = self._base_query()
        if query.strip():
            stmt = stmt.where(
                or_(
                    Bookmark.title.icontains(query, autoescape=True),
                    Bookmark.url.icontains(query, autoescape=True),
                    Bookmark.tags.any(Tag.name.icontains(query, autoescape=True)),
                )
            )
        return self._run(stmt)
