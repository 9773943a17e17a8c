"""
Bookmark model for saved URLs.
"""

from datetime import datetime
from typing import Optional, List, TYPE_CHECKING

from sqlalchemy import String, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..database import Base, utcnow
from .tag import bookmark_tags

if TYPE_CHECKING:
    from .tag import Tag


class Bookmark(Base):
    """
    SQLAlchemy model for bookmarks.

    Attributes:
        id: Unique identifier for the bookmark
        title: Display title
        url: Saved URL
        folder_id: Optional reference to the containing folder
        created_at: Timestamp when the bookmark was created
        updated_at: Timestamp when the bookmark was last updated
        tags: Tags associated through bookmark_tags, ordered by tag id.
            Read-only; associations are written by TagReconciler.
    """
    __tablename__ = "bookmarks"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(500))
    url: Mapped[str] = mapped_column(Text)
    folder_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("folders.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)

    # Relationships
    tags: Mapped[List["Tag"]] = relationship(
        "Tag",
        secondary=bookmark_tags,
        order_by="Tag.id",
        viewonly=True,
    )
