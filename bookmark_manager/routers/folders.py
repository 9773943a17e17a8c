"""
Folder management API routes.

Provides CRUD operations for folders, the nested sidebar tree, and the
bookmarks stored in a folder.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.bookmark import BookmarkResponse
from ..schemas.folder import (
    FolderCreate,
    FolderUpdate,
    FolderResponse,
    FolderWithChildren,
)
from ..services.bookmark_query import BookmarkQuery
from .bookmarks import get_bookmark_query
from ..services.folder_tree import FolderHierarchy


router = APIRouter(prefix="/api/folders", tags=["folders"])


def get_folder_hierarchy(db: Session = Depends(get_db)) -> FolderHierarchy:
    return FolderHierarchy(db)


@router.get("", response_model=list[FolderResponse])
def list_folders(folders: FolderHierarchy = Depends(get_folder_hierarchy)):
    """List all folders, root folders first, then by name."""
    return folders.list_folders()


@router.get("/tree", response_model=list[FolderWithChildren])
def get_folder_tree(folders: FolderHierarchy = Depends(get_folder_hierarchy)):
    """
    Get the full folder tree.

    Returns root-level folders with recursively nested children and the
    number of bookmarks directly inside each folder.
    """
    return folders.tree()


@router.get("/{folder_id}", response_model=FolderResponse)
def get_folder(folder_id: int, folders: FolderHierarchy = Depends(get_folder_hierarchy)):
    """Get a single folder by ID."""
    return folders.get(folder_id)


@router.post("", response_model=FolderResponse, status_code=status.HTTP_201_CREATED)
def create_folder(
    folder_data: FolderCreate,
    folders: FolderHierarchy = Depends(get_folder_hierarchy)
):
    """Create a new folder, optionally inside an existing parent."""
    return folders.create(folder_data.name, folder_data.parent_id)


@router.put("/{folder_id}", response_model=FolderResponse)
def update_folder(
    folder_id: int,
    folder_data: FolderUpdate,
    folders: FolderHierarchy = Depends(get_folder_hierarchy)
):
    """
    Rename and/or move a folder.

    Only fields present in the body are changed. Sending ``parent_id: null``
    moves the folder to the root.
    """
    return folders.update(folder_id, folder_data.model_dump(exclude_unset=True))


@router.delete("/{folder_id}")
def delete_folder(folder_id: int, folders: FolderHierarchy = Depends(get_folder_hierarchy)):
    """
    Delete a folder by ID.

    Sub-folders move up to the deleted folder's parent and bookmarks in the
    folder are kept without a folder.
    """
    folders.delete(folder_id)
    return {"message": "Folder deleted successfully"}


@router.get("/{folder_id}/bookmarks", response_model=list[BookmarkResponse])
def get_folder_bookmarks(
    folder_id: int,
    bookmarks: BookmarkQuery = Depends(get_bookmark_query),
):
    """Get the bookmarks directly inside a folder, newest first."""
    return bookmarks.list_bookmarks(folder_id=folder_id)
