"""
Tag reconciliation for bookmarks.

A bookmark's tag set is always replaced as a whole. The replacement is split
into a pure step that works out which associations to add and remove, and an
apply step that writes the difference inside the caller's transaction.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..exceptions import ConflictError
from ..models.tag import Tag, bookmark_tags

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TagDelta:
    """Associations to add and remove to reach a desired tag set."""
    to_add: frozenset[int]
    to_remove: frozenset[int]

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove


def normalize_tag_names(names: Iterable[str]) -> list[str]:
    """
    Trim tag names, drop blank ones and collapse duplicates.

    Case is preserved, so "News" and "news" are different tags. The first
    occurrence of each name decides its position.
    """
    seen: set[str] = set()
    result: list[str] = []
    for name in names:
        if name is None:
            continue
        name = name.strip()
        if name and name not in seen:
            seen.add(name)
            result.append(name)
    return result


def reconcile(existing: set[int], desired: set[int]) -> TagDelta:
    """Compute the association changes that turn ``existing`` into ``desired``."""
    return TagDelta(
        to_add=frozenset(desired - existing),
        to_remove=frozenset(existing - desired),
    )


class TagReconciler:
    """Maps tag names to tag rows and applies tag sets to bookmarks."""

    def __init__(self, db: Session):
        self.db = db

    def resolve(self, names: Iterable[str]) -> list[Tag]:
        """
        Get existing tags or create new ones.

        Args:
            names: Tag names as submitted by the client.

        Returns:
            One Tag per distinct normalized name, in first-seen order.
            New tags are flushed so they carry ids.

        Raises:
            ConflictError: a concurrent writer created one of the new names
                after the lookup
        """
        normalized = normalize_tag_names(names)
        if not normalized:
            return []

        existing = {
            tag.name: tag
            for tag in self.db.scalars(select(Tag).where(Tag.name.in_(normalized)))
        }

        tags = []
        created = []
        for name in normalized:
            tag = existing.get(name)
            if tag is None:
                tag = Tag(name=name)
                self.db.add(tag)
                existing[name] = tag
                created.append(name)
                logger.debug("Creating tag %r", name)
            tags.append(tag)

        try:
            self.db.flush()
        except IntegrityError:
            raise ConflictError(f"Tag already exists: {', '.join(created)}") from None
        return tags

    def current_tag_ids(self, bookmark_id: int) -> set[int]:
        stmt = select(bookmark_tags.c.tag_id).where(bookmark_tags.c.bookmark_id == bookmark_id)
        return set(self.db.scalars(stmt))

    def assign(self, bookmark_id: int, names: Iterable[str]) -> list[Tag]:
        """
        Replace the tag set of a bookmark with the tags named in ``names``.

        Must run inside the caller's transaction; nothing is committed here.
        Tags that lose their last bookmark are kept.
        """
        tags = self.resolve(names)
        delta = reconcile(self.current_tag_ids(bookmark_id), {tag.id for tag in tags})

        if delta.to_remove:
            self.db.execute(
                delete(bookmark_tags).where(
                    bookmark_tags.c.bookmark_id == bookmark_id,
                    bookmark_tags.c.tag_id.in_(delta.to_remove),
                )
            )
        if delta.to_add:
            self.db.execute(
                insert(bookmark_tags),
                [{"bookmark_id": bookmark_id, "tag_id": tag_id} for tag_id in sorted(delta.to_add)],
            )

        if not delta.is_empty:
            logger.debug(
                "Bookmark %s tags: +%s -%s",
                bookmark_id, sorted(delta.to_add), sorted(delta.to_remove),
            )
        return tags
