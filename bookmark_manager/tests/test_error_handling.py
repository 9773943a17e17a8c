"""
Tests for error mapping and transaction rollback.

Every failure reaches the client as {"detail", "error_code"} with the
status code of its exception class; store failures roll back and hide
internal detail unless debug mode is on.
"""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from bookmark_manager.config import get_settings
from bookmark_manager.database import transaction
from bookmark_manager.exceptions import (
    ConflictError,
    FetchTimeoutError,
    NetworkError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from bookmark_manager.models import Folder
from bookmark_manager.services import folder_tree


@pytest.mark.parametrize("exc, status_code, error_code", [
    (NotFoundError("Folder", 1), 404, "RESOURCE_NOT_FOUND"),
    (ValidationError("bad"), 400, "VALIDATION_ERROR"),
    (ConflictError("dup"), 409, "CONFLICT"),
    (StoreError(), 500, "DATABASE_ERROR"),
    (NetworkError("down"), 502, "NETWORK_ERROR"),
    (FetchTimeoutError(), 504, "TIMEOUT"),
])
def test_exception_status_codes(exc, status_code, error_code):
    assert exc.status_code == status_code
    assert exc.error_code == error_code


class TestTransaction:

    def test_commits_on_success(self, db):
        with transaction(db):
            db.add(Folder(name="Kept"))
        db.expire_all()
        assert [f.name for f in db.scalars(select(Folder))] == ["Kept"]

    def test_rolls_back_api_errors_unchanged(self, db):
        with pytest.raises(ValidationError):
            with transaction(db):
                db.add(Folder(name="Discarded"))
                db.flush()
                raise ValidationError("stop")
        assert db.scalars(select(Folder)).all() == []

    def test_wraps_store_errors(self, db):
        with pytest.raises(StoreError) as exc_info:
            with transaction(db):
                db.add(Folder(name="Discarded"))
                db.flush()
                raise SQLAlchemyError("constraint failed")
        assert isinstance(exc_info.value.__cause__, SQLAlchemyError)
        assert db.scalars(select(Folder)).all() == []

    def test_foreign_keys_enforced(self, db):
        with pytest.raises(StoreError):
            with transaction(db):
                db.add(Folder(name="Dangling", parent_id=12345))


class TestErrorResponses:

    def test_404_format(self, client):
        response = client.delete("/api/folders/99999")
        assert response.status_code == 404
        data = response.json()
        assert data["error_code"] == "RESOURCE_NOT_FOUND"
        assert "99999" in data["detail"]

    def test_request_validation_format(self, client):
        response = client.post("/api/folders", json={"parent_id": "abc"})
        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "VALIDATION_ERROR"
        assert "name" in data["detail"]

    def test_non_integer_path_id(self, client):
        assert client.get("/api/bookmarks/abc").status_code == 400

    def _break_folder_delete(self, monkeypatch):
        def failing_delete(*args, **kwargs):
            raise SQLAlchemyError("disk I/O error")

        monkeypatch.setattr(folder_tree, "delete", failing_delete)

    def test_store_error_hides_detail(self, client, monkeypatch):
        folder = client.post("/api/folders", json={"name": "F"}).json()
        child = client.post("/api/folders", json={"name": "C", "parent_id": folder["id"]}).json()
        self._break_folder_delete(monkeypatch)

        response = client.delete(f"/api/folders/{folder['id']}")

        assert response.status_code == 500
        assert response.json() == {"detail": "Database error occurred", "error_code": "DATABASE_ERROR"}
        # Nothing from the failed cascade is visible
        assert client.get(f"/api/folders/{child['id']}").json()["parent_id"] == folder["id"]

    def test_store_error_detail_in_debug(self, client, monkeypatch):
        folder = client.post("/api/folders", json={"name": "F"}).json()
        self._break_folder_delete(monkeypatch)
        monkeypatch.setattr(get_settings(), "debug", True)

        response = client.delete(f"/api/folders/{folder['id']}")

        assert response.status_code == 500
        assert "disk I/O error" in response.json()["detail"]
