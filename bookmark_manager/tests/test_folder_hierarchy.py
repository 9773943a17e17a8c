"""
Unit tests for the folder hierarchy service.

Tests cover:
- create: name validation and parent existence
- update: rename, reparent, detach, self-parent and cycle rejection
- delete: child relinking, bookmark detaching, atomic rollback
- list ordering and the nested tree
"""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from bookmark_manager.exceptions import NotFoundError, StoreError, ValidationError
from bookmark_manager.models import Bookmark, Folder
from bookmark_manager.services import folder_tree
from bookmark_manager.services.folder_tree import FolderHierarchy


@pytest.fixture
def folders(db):
    return FolderHierarchy(db)


def _create_bookmark(db, title="Bookmark", folder_id=None) -> Bookmark:
    """Helper to create a bookmark directly in the database."""
    bookmark = Bookmark(title=title, url="https://example.com", folder_id=folder_id)
    db.add(bookmark)
    db.commit()
    db.refresh(bookmark)
    return bookmark


class TestCreateFolder:

    def test_create_root_folder(self, folders):
        folder = folders.create("Work")
        assert folder.id is not None
        assert folder.name == "Work"
        assert folder.parent_id is None
        assert folder.created_at is not None

    def test_create_nested_folder(self, folders):
        parent = folders.create("Work")
        child = folders.create("Sub", parent.id)
        assert child.parent_id == parent.id

    def test_name_is_trimmed(self, folders):
        assert folders.create("  Reading  ").name == "Reading"

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_empty_name_rejected(self, folders, db, name):
        with pytest.raises(ValidationError):
            folders.create(name)
        assert db.scalars(select(Folder)).all() == []

    def test_missing_parent_rejected_and_nothing_written(self, folders, db):
        with pytest.raises(NotFoundError) as exc_info:
            folders.create("Orphan", parent_id=999)
        assert "999" in exc_info.value.detail
        assert db.scalars(select(Folder)).all() == []


class TestUpdateFolder:

    def test_update_nonexistent_folder(self, folders):
        with pytest.raises(NotFoundError):
            folders.update(99999, {"name": "New Name"})

    def test_rename_only_keeps_parent(self, folders):
        parent = folders.create("Parent")
        child = folders.create("Child", parent.id)

        updated = folders.update(child.id, {"name": "Renamed"})
        assert updated.name == "Renamed"
        assert updated.parent_id == parent.id

    def test_rename_to_blank_rejected(self, folders):
        folder = folders.create("Folder")
        with pytest.raises(ValidationError):
            folders.update(folder.id, {"name": "  "})

    def test_updated_at_refreshed_on_empty_update(self, folders, db):
        folder = folders.create("Folder")
        folder.updated_at = folder.updated_at.replace(year=2000)
        db.commit()

        updated = folders.update(folder.id, {})
        assert updated.updated_at.year > 2000
        assert updated.name == "Folder"

    def test_updated_at_refreshed_on_rename(self, folders, db):
        folder = folders.create("Folder")
        # Push the stored timestamp into the past so the refresh is observable
        folder.updated_at = folder.updated_at.replace(year=2000)
        db.commit()

        updated = folders.update(folder.id, {"name": "Folder"})
        assert updated.updated_at.year > 2000

    def test_self_parent_rejected(self, folders):
        folder = folders.create("Folder A")
        with pytest.raises(ValidationError) as exc_info:
            folders.update(folder.id, {"parent_id": folder.id})
        assert exc_info.value.detail == "A folder cannot be its own parent"

    def test_move_parent_under_child_rejected(self, folders):
        parent = folders.create("Parent")
        child = folders.create("Child", parent.id)

        with pytest.raises(ValidationError) as exc_info:
            folders.update(parent.id, {"parent_id": child.id})
        assert exc_info.value.detail == "Moving this folder would create a circular reference"

    def test_move_grandparent_under_grandchild_rejected(self, folders, db):
        gp = folders.create("Grandparent")
        parent = folders.create("Parent", gp.id)
        child = folders.create("Child", parent.id)

        with pytest.raises(ValidationError):
            folders.update(gp.id, {"parent_id": child.id})

        db.expire_all()
        assert db.get(Folder, gp.id).parent_id is None

    def test_move_to_sibling_allowed(self, folders):
        root = folders.create("Root")
        sibling_a = folders.create("Sibling A", root.id)
        sibling_b = folders.create("Sibling B", root.id)

        updated = folders.update(sibling_a.id, {"parent_id": sibling_b.id})
        assert updated.parent_id == sibling_b.id

    def test_move_to_missing_parent(self, folders):
        folder = folders.create("Folder")
        with pytest.raises(NotFoundError):
            folders.update(folder.id, {"parent_id": 424242})

    def test_explicit_null_detaches_to_root(self, folders):
        parent = folders.create("Parent")
        child = folders.create("Child", parent.id)

        updated = folders.update(child.id, {"parent_id": None})
        assert updated.parent_id is None

    def test_unknown_fields_ignored(self, folders):
        folder = folders.create("Folder")
        updated = folders.update(folder.id, {"id": 77, "name": "Kept"})
        assert updated.id == folder.id
        assert updated.name == "Kept"


class TestWouldCreateCycle:

    def test_unrelated_folders(self, folders):
        a = folders.create("A")
        b = folders.create("B")
        assert folders.would_create_cycle(a.id, b.id) is False

    def test_deep_descendant(self, folders):
        chain = [folders.create("Level 0")]
        for level in range(1, 6):
            chain.append(folders.create(f"Level {level}", chain[-1].id))

        assert folders.would_create_cycle(chain[0].id, chain[-1].id) is True
        assert folders.would_create_cycle(chain[2].id, chain[4].id) is True
        assert folders.would_create_cycle(chain[4].id, chain[2].id) is False

    def test_corrupt_loop_terminates(self, folders, db):
        a = folders.create("A")
        b = folders.create("B", a.id)
        c = folders.create("C")
        # Bypass the service to build a loop A -> B -> A
        a.parent_id = b.id
        db.commit()

        assert folders.would_create_cycle(c.id, a.id) is True


class TestDeleteFolder:

    def test_delete_nonexistent_folder(self, folders):
        with pytest.raises(NotFoundError):
            folders.delete(99999)

    def test_children_relinked_to_grandparent(self, folders, db):
        gp = folders.create("Grandparent")
        parent = folders.create("Parent", gp.id)
        child_a = folders.create("Child A", parent.id)
        child_b = folders.create("Child B", parent.id)
        grandchild = folders.create("Grandchild", child_a.id)

        folders.delete(parent.id)

        db.expire_all()
        assert db.get(Folder, parent.id) is None
        assert db.get(Folder, child_a.id).parent_id == gp.id
        assert db.get(Folder, child_b.id).parent_id == gp.id
        # Only one level is flattened
        assert db.get(Folder, grandchild.id).parent_id == child_a.id

    def test_children_of_root_folder_become_roots(self, folders, db):
        root = folders.create("Root")
        child = folders.create("Child", root.id)

        folders.delete(root.id)

        db.expire_all()
        assert db.get(Folder, child.id).parent_id is None

    def test_bookmarks_detached_not_deleted(self, folders, db):
        folder = folders.create("Folder")
        other = folders.create("Other")
        inside = _create_bookmark(db, "Inside", folder.id)
        elsewhere = _create_bookmark(db, "Elsewhere", other.id)

        folders.delete(folder.id)

        db.expire_all()
        assert db.get(Bookmark, inside.id).folder_id is None
        assert db.get(Bookmark, elsewhere.id).folder_id == other.id

    def test_failure_rolls_back_every_step(self, folders, db, monkeypatch):
        root = folders.create("Root")
        target = folders.create("Target", root.id)
        child = folders.create("Child", target.id)
        bookmark = _create_bookmark(db, "Inside", target.id)

        def failing_delete(*args, **kwargs):
            raise SQLAlchemyError("disk I/O error")

        monkeypatch.setattr(folder_tree, "delete", failing_delete)

        with pytest.raises(StoreError):
            folders.delete(target.id)

        db.expire_all()
        assert db.get(Folder, target.id) is not None
        assert db.get(Folder, child.id).parent_id == target.id
        assert db.get(Bookmark, bookmark.id).folder_id == target.id


class TestListAndTree:

    def test_list_roots_first_then_name(self, folders):
        zeta = folders.create("Zeta")
        alpha = folders.create("Alpha")
        folders.create("Beta child", zeta.id)
        folders.create("Alpha child", alpha.id)

        listed = folders.list_folders()
        assert [f.name for f in listed[:2]] == ["Alpha", "Zeta"]
        assert all(f.parent_id is not None for f in listed[2:])

    def test_get_missing(self, folders):
        with pytest.raises(NotFoundError):
            folders.get(1)

    def test_tree_nesting_and_counts(self, folders, db):
        work = folders.create("Work")
        sub = folders.create("Sub", work.id)
        folders.create("Home")
        _create_bookmark(db, "One", sub.id)
        _create_bookmark(db, "Two", sub.id)
        _create_bookmark(db, "Loose")

        tree = folders.tree()

        assert [node["name"] for node in tree] == ["Home", "Work"]
        work_node = tree[1]
        assert work_node["bookmark_count"] == 0
        assert len(work_node["children"]) == 1
        assert work_node["children"][0]["id"] == sub.id
        assert work_node["children"][0]["bookmark_count"] == 2
