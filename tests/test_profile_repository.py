"""
Tests for ProfileRepository against the in-memory PostgREST fake.
"""

import httpx
import pytest

from edunex.models.enums import Role
from edunex.models.user import User
from edunex.repositories.profile_repository import ProfileNotCreatedError

from .conftest import FakeAuthApiError


def _profile(user_id: str = "u-1", role: Role = Role.FACULTY, name: str = "Dr. Rao") -> User:
    return User(id=user_id, email=f"{user_id}@faculty.matrusri.edu.in", name=name, role=role)


class TestGetById:
    def test_returns_profile(self, profile_repo, users_table):
        users_table.rows["u-1"] = {
            "id": "u-1",
            "email": "u-1@faculty.matrusri.edu.in",
            "name": "Dr. Rao",
            "role": "faculty",
            "created_at": "2024-06-01T10:00:00+00:00",
        }

        user = profile_repo.get_by_id("u-1")

        assert user is not None
        assert user.role is Role.FACULTY
        assert user.created_at is not None

    def test_missing_row_is_none(self, profile_repo, users_table):
        assert profile_repo.get_by_id("nobody") is None
        assert users_table.selects == ["nobody"]

    def test_no_rows_error_code_is_none(self, profile_repo, users_table):
        users_table.select_error = FakeAuthApiError("JSON object requested, 0 rows", code="PGRST116")
        assert profile_repo.get_by_id("nobody") is None

    def test_other_errors_propagate(self, profile_repo, users_table):
        users_table.select_error = httpx.ConnectError("down")
        with pytest.raises(httpx.ConnectError):
            profile_repo.get_by_id("u-1")

    def test_unknown_role_is_kept_verbatim(self, profile_repo, users_table):
        users_table.rows["u-1"] = {
            "id": "u-1", "email": "x@matrusri.edu.in", "name": "X", "role": "dean",
        }

        user = profile_repo.get_by_id("u-1")

        assert user.role == "dean"
        assert not isinstance(user.role, Role)

    def test_blank_role_is_rejected(self, profile_repo, users_table):
        users_table.rows["u-1"] = {
            "id": "u-1", "email": "x@matrusri.edu.in", "name": "X", "role": "",
        }
        with pytest.raises(ValueError):
            profile_repo.get_by_id("u-1")

    def test_unconfigured_database_raises_runtime_error(self, logger):
        from edunex.database import DatabaseManager
        from edunex.repositories.profile_repository import ProfileRepository

        repo = ProfileRepository(db=DatabaseManager.from_client(None, logger), logger=logger)
        with pytest.raises(RuntimeError):
            repo.get_by_id("u-1")


class TestInsertIfAbsent:
    def test_inserts_new_profile(self, profile_repo, users_table):
        created, inserted = profile_repo.insert_if_absent(_profile())

        assert created.id == "u-1"
        assert inserted is True
        assert users_table.rows["u-1"]["role"] == "faculty"
        assert "student_id" not in users_table.upserts[0]

    def test_existing_profile_not_overwritten(self, profile_repo, users_table):
        profile_repo.insert_if_absent(_profile(name="First"))
        again, inserted = profile_repo.insert_if_absent(_profile(name="Second"))

        assert again.name == "First"
        assert inserted is False
        assert users_table.rows["u-1"]["name"] == "First"
        assert len(users_table.upserts) == 2

    def test_write_that_leaves_no_row_raises(self, profile_repo, users_table):
        users_table.drop_writes = True
        with pytest.raises(ProfileNotCreatedError):
            profile_repo.insert_if_absent(_profile())

    def test_custom_table_name(self, db, logger, client):
        from edunex.repositories.profile_repository import ProfileRepository

        repo = ProfileRepository(db=db, logger=logger, table="profiles")
        repo.insert_if_absent(_profile())

        assert "u-1" in client.tables["profiles"].rows
