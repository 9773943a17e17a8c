"""
Pydantic schemas package.

Exports all schemas for API request/response validation.
"""

from .folder import (
    FolderBase,
    FolderCreate,
    FolderUpdate,
    FolderResponse,
    FolderWithChildren,
)

from .tag import (
    TagRef,
    TagCreate,
    TagUpdate,
    TagResponse,
)

from .bookmark import (
    BookmarkCreate,
    BookmarkUpdate,
    BookmarkResponse,
)

from .metadata import (
    MetadataRequest,
    PageMetadata,
)

__all__ = [
    # Folder schemas
    "FolderBase",
    "FolderCreate",
    "FolderUpdate",
    "FolderResponse",
    "FolderWithChildren",
    # Tag schemas
    "TagRef",
    "TagCreate",
    "TagUpdate",
    "TagResponse",
    # Bookmark schemas
    "BookmarkCreate",
    "BookmarkUpdate",
    "BookmarkResponse",
    # Metadata schemas
    "MetadataRequest",
    "PageMetadata",
]
