"""
Folder model for organizing bookmarks.

Folders provide hierarchical organization for bookmarks.
Folders can be nested inside other folders.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base, utcnow


class Folder(Base):
    """
    SQLAlchemy model for folders.

    Folders form a tree through parent_id. Deleting a folder relinks its
    children to its own parent and detaches its bookmarks; that cascade is
    carried out by FolderHierarchy.delete rather than by the ORM.

    Attributes:
        id: Unique identifier for the folder
        name: Human-readable name for the folder
        parent_id: Optional reference to parent folder (for nesting)
        created_at: Timestamp when the folder was created
        updated_at: Timestamp when the folder was last updated
    """
    __tablename__ = "folders"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    parent_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("folders.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)
