"""
Models package for Bookmark Manager.

Exports all SQLAlchemy models for database operations.
"""

from .folder import Folder
from .bookmark import Bookmark
from .tag import Tag, bookmark_tags

__all__ = [
    "Folder",
    "Bookmark",
    "Tag",
    "bookmark_tags",
]
