"""
Tag model and the bookmark/tag association table.
"""

from sqlalchemy import Column, ForeignKey, Index, String, Table
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base


# Junction table for many-to-many relationship between bookmarks and tags
bookmark_tags = Table(
    "bookmark_tags",
    Base.metadata,
    Column(
        "bookmark_id",
        ForeignKey("bookmarks.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    # Composite PK already indexes bookmark_id first
    Index("ix_bookmark_tags_tag_id", "tag_id"),
)


class Tag(Base):
    """
    SQLAlchemy model for tags.

    Tag names are unique and compared case-sensitively. Tags outlive their
    last bookmark association.
    """
    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True)
