"""
Folder hierarchy service.

Provides:
- Folder create/update/delete with tree invariants (existing parent,
  no self-parenting, no cycles)
- Delete cascade that relinks children to the grandparent and detaches
  bookmarks instead of deleting them
- Building a recursive folder tree from the flat folder list
"""

import logging
from collections import defaultdict
from typing import Any, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from ..database import transaction, utcnow
from ..exceptions import NotFoundError, ValidationError
from ..models.bookmark import Bookmark
from ..models.folder import Folder

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "parent_id")


def clean_folder_name(name: Optional[str]) -> str:
    """Trim a folder name, rejecting missing or blank names."""
    if name is None or not name.strip():
        raise ValidationError("Folder name cannot be empty")
    return name.strip()


def build_folder_tree(
    folders: list[Folder],
    bookmark_counts: dict[int, int] | None = None,
) -> list[dict]:
    """
    Build a recursive folder tree from a flat list of folders.

    Args:
        folders: Flat list of Folder ORM objects from the database.
        bookmark_counts: Number of bookmarks per folder id.

    Returns:
        A list of root-level folder dictionaries with nested children,
        siblings ordered by name then id.
    """
    bookmark_counts = bookmark_counts or {}

    children_map: dict[Optional[int], list[Folder]] = defaultdict(list)
    for folder in folders:
        children_map[folder.parent_id].append(folder)

    for parent_id in children_map:
        children_map[parent_id].sort(key=lambda f: (f.name, f.id))

    def _build_subtree(parent_id: Optional[int]) -> list[dict]:
        result = []
        for folder in children_map.get(parent_id, []):
            result.append({
                "id": folder.id,
                "name": folder.name,
                "parent_id": folder.parent_id,
                "created_at": folder.created_at,
                "updated_at": folder.updated_at,
                "bookmark_count": bookmark_counts.get(folder.id, 0),
                "children": _build_subtree(folder.id),
            })
        return result

    return _build_subtree(None)


class FolderHierarchy:
    """Folder operations bound to one database session."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, folder_id: int) -> Folder:
        folder = self.db.get(Folder, folder_id)
        if folder is None:
            raise NotFoundError("Folder", folder_id)
        return folder

    def list_folders(self) -> list[Folder]:
        """All folders, root folders first, then by name."""
        stmt = select(Folder).order_by(
            Folder.parent_id.asc().nulls_first(),
            Folder.name,
            Folder.id,
        )
        return list(self.db.scalars(stmt))

    def tree(self) -> list[dict]:
        """Nested view of every folder with its bookmark count."""
        counts = dict(
            self.db.execute(
                select(Bookmark.folder_id, func.count(Bookmark.id))
                .where(Bookmark.folder_id.is_not(None))
                .group_by(Bookmark.folder_id)
            ).all()
        )
        return build_folder_tree(list(self.db.scalars(select(Folder))), counts)

    def create(self, name: str, parent_id: Optional[int] = None) -> Folder:
        name = clean_folder_name(name)
        if parent_id is not None and self.db.get(Folder, parent_id) is None:
            raise NotFoundError("Parent folder", parent_id)

        folder = Folder(name=name, parent_id=parent_id)
        with transaction(self.db):
            self.db.add(folder)
        self.db.refresh(folder)
        logger.info("Created folder %s (parent=%s)", folder.id, parent_id)
        return folder

    def update(self, folder_id: int, fields: dict[str, Any]) -> Folder:
        """
        Rename and/or reparent a folder.

        Only keys present in ``fields`` are changed, so ``{"parent_id": None}``
        moves the folder to the root while ``{}`` leaves it in place.

        Raises:
            NotFoundError: folder or new parent does not exist
            ValidationError: blank name, self-parent, or the new parent is a
                descendant of the folder
        """
        folder = self.get(folder_id)
        changes = {key: fields[key] for key in UPDATABLE_FIELDS if key in fields}

        if "name" in changes:
            changes["name"] = clean_folder_name(changes["name"])

        if "parent_id" in changes:
            new_parent_id = changes["parent_id"]

            if new_parent_id == folder_id:
                raise ValidationError("A folder cannot be its own parent")

            if new_parent_id is not None:
                if self.db.get(Folder, new_parent_id) is None:
                    raise NotFoundError("Parent folder", new_parent_id)

                if self.would_create_cycle(folder_id, new_parent_id):
                    raise ValidationError(
                        "Moving this folder would create a circular reference"
                    )

        with transaction(self.db):
            for field, value in changes.items():
                setattr(folder, field, value)
            folder.updated_at = utcnow()
        self.db.refresh(folder)
        logger.info("Updated folder %s: %s", folder_id, sorted(changes))
        return folder

    def delete(self, folder_id: int) -> None:
        """
        Delete a folder, keeping its contents.

        Bookmarks in the folder lose their folder and direct children move up
        to the deleted folder's parent. All three steps commit together.
        """
        folder = self.get(folder_id)
        grandparent_id = folder.parent_id

        with transaction(self.db):
            detached = self.db.execute(
                update(Bookmark)
                .where(Bookmark.folder_id == folder_id)
                .values(folder_id=None)
            ).rowcount
            relinked = self.db.execute(
                update(Folder)
                .where(Folder.parent_id == folder_id)
                .values(parent_id=grandparent_id)
            ).rowcount
            self.db.execute(delete(Folder).where(Folder.id == folder_id))

        logger.info(
            "Deleted folder %s: detached %d bookmarks, relinked %d folders to %s",
            folder_id, detached, relinked, grandparent_id,
        )

    def would_create_cycle(self, folder_id: int, new_parent_id: int) -> bool:
        """
        Check whether placing folder_id under new_parent_id closes a loop.

        Walks parent pointers upward from the proposed parent. The walk is
        bounded by the number of folders, so an already-corrupt chain is
        reported as a cycle instead of looping forever.
        """
        if new_parent_id == folder_id:
            return True

        remaining = self.db.scalar(select(func.count(Folder.id))) or 0
        current_id: Optional[int] = new_parent_id

        while current_id is not None:
            if current_id == folder_id:
                return True
            if remaining <= 0:
                logger.warning("Folder ancestry of %s does not terminate", new_parent_id)
                return True
            remaining -= 1
            current_id = self.db.scalar(
                select(Folder.parent_id).where(Folder.id == current_id)
            )

        return False
