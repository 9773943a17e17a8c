"""
Explicit tag management: listing with usage counts, create, rename, delete.
"""

import logging

from sqlalchemy import Select, delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..database import transaction
from ..exceptions import ConflictError, NotFoundError, ValidationError
from ..models.tag import Tag, bookmark_tags

logger = logging.getLogger(__name__)


def clean_tag_name(name: str | None) -> str:
    if name is None or not name.strip():
        raise ValidationError("Tag name cannot be empty")
    return name.strip()


class TagService:
    """Tag operations bound to one database session."""

    def __init__(self, db: Session):
        self.db = db

    def _counted(self) -> Select:
        # COUNT ignores NULLs, so tags without bookmarks get 0
        return (
            select(Tag, func.count(bookmark_tags.c.bookmark_id).label("bookmark_count"))
            .outerjoin(bookmark_tags, Tag.id == bookmark_tags.c.tag_id)
            .group_by(Tag.id)
        )

    def list_tags(self) -> list[dict]:
        """All tags with their bookmark counts, ordered by name."""
        rows = self.db.execute(self._counted().order_by(Tag.name))
        return [{"id": tag.id, "name": tag.name, "bookmark_count": count} for tag, count in rows]

    def get(self, tag_id: int) -> dict:
        row = self.db.execute(self._counted().where(Tag.id == tag_id)).first()
        if row is None:
            raise NotFoundError("Tag", tag_id)
        tag, count = row
        return {"id": tag.id, "name": tag.name, "bookmark_count": count}

    def _name_taken(self, name: str, exclude_id: int | None = None) -> bool:
        stmt = select(Tag.id).where(Tag.name == name)
        if exclude_id is not None:
            stmt = stmt.where(Tag.id != exclude_id)
        return self.db.scalar(stmt) is not None

    def _flush_unique(self, name: str) -> None:
        # Another writer may claim the name between the check and the flush
        try:
            self.db.flush()
        except IntegrityError:
            raise ConflictError(f"Tag '{name}' already exists") from None

    def create(self, name: str) -> dict:
        name = clean_tag_name(name)
        if self._name_taken(name):
            raise ConflictError(f"Tag '{name}' already exists")

        tag = Tag(name=name)
        with transaction(self.db):
            self.db.add(tag)
            self._flush_unique(name)
        logger.info("Created tag %s (%r)", tag.id, name)
        return self.get(tag.id)

    def rename(self, tag_id: int, name: str) -> dict:
        tag = self.db.get(Tag, tag_id)
        if tag is None:
            raise NotFoundError("Tag", tag_id)
        name = clean_tag_name(name)
        if self._name_taken(name, exclude_id=tag_id):
            raise ConflictError(f"Tag '{name}' already exists")

        with transaction(self.db):
            tag.name = name
            self._flush_unique(name)
        logger.info("Renamed tag %s to %r", tag_id, name)
        return self.get(tag_id)

    def delete(self, tag_id: int) -> None:
        """Delete a tag and its bookmark associations. Bookmarks stay."""
        tag = self.db.get(Tag, tag_id)
        if tag is None:
            raise NotFoundError("Tag", tag_id)

        with transaction(self.db):
            self.db.execute(delete(bookmark_tags).where(bookmark_tags.c.tag_id == tag_id))
            self.db.delete(tag)
        logger.info("Deleted tag %s", tag_id)
