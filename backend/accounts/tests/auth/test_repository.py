"""Tests for UserTableRepository."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest

from accounts.auth.errors import StorageError
from accounts.auth.models import UserRecord
from accounts.auth.repository import UserTableRepository, find_by_email, find_by_id
from accounts.storage import FileKeyValueStore, MemoryKeyValueStore

if TYPE_CHECKING:
    from pathlib import Path

NOW = datetime(2025, 1, 1, tzinfo=UTC)


def _user(user_id="u1", email="ada@x.com") -> UserRecord:
    return UserRecord(
        user_id=user_id,
        first_name="Ada",
        last_name="Lovelace",
        email=email,
        password_hash="encoded",
        avatar="a1.png",
        created_at=NOW,
        last_login=NOW,
    )


class TestLoad:
    def test_missing_key_is_empty_table(self):
        assert UserTableRepository(MemoryKeyValueStore()).load() == []

    def test_round_trips_through_store(self):
        repo = UserTableRepository(MemoryKeyValueStore())
        users = [_user(), _user(user_id="u2", email="grace@x.com")]

        repo.save(users)

        assert repo.load() == users

    @pytest.mark.parametrize("raw", ["not json", '{"id": "u1"}', "null", '"users"'])
    def test_malformed_table_is_empty(self, raw):
        store = MemoryKeyValueStore({"beyondTheBenchUsers": raw})

        assert UserTableRepository(store).load() == []

    def test_skips_invalid_records(self):
        good = _user().to_wire()
        store = MemoryKeyValueStore({"beyondTheBenchUsers": json.dumps([good, {"id": "broken"}, 7])})

        users = UserTableRepository(store).load()

        assert [u.user_id for u in users] == ["u1"]

    def test_store_read_error_is_empty_table(self):
        store = MemoryKeyValueStore()

        with patch.object(store, "get_item", side_effect=OSError("unreadable")):
            assert UserTableRepository(store).load() == []

    def test_corrupt_store_file_is_empty_table(self, tmp_path: Path):
        path = tmp_path / "accounts.json"
        path.write_text("{truncated")

        assert UserTableRepository(FileKeyValueStore(path)).load() == []

    def test_uses_custom_key(self):
        store = MemoryKeyValueStore()
        UserTableRepository(store, key="otherUsers").save([_user()])

        assert store.get_item("beyondTheBenchUsers") is None
        assert UserTableRepository(store, key="otherUsers").load() == [_user()]


class TestSave:
    def test_writes_json_array_of_wire_records(self):
        store = MemoryKeyValueStore()

        UserTableRepository(store).save([_user()])

        data = json.loads(store.get_item("beyondTheBenchUsers"))
        assert isinstance(data, list)
        assert data[0]["id"] == "u1"
        assert data[0]["firstName"] == "Ada"

    def test_replaces_whole_table(self):
        store = MemoryKeyValueStore()
        repo = UserTableRepository(store)
        repo.save([_user(), _user(user_id="u2", email="grace@x.com")])

        repo.save([_user(user_id="u2", email="grace@x.com")])

        assert [u.user_id for u in repo.load()] == ["u2"]

    def test_write_failure_raises_storage_error(self):
        store = MemoryKeyValueStore()

        with (
            patch.object(store, "set_item", side_effect=OSError("quota exceeded")),
            pytest.raises(StorageError, match="Error saving user data"),
        ):
            UserTableRepository(store).save([_user()])


class TestFinders:
    def test_find_by_email_is_case_insensitive(self):
        users = [_user(), _user(user_id="u2", email="grace@x.com")]

        assert find_by_email(users, "  GRACE@x.com").user_id == "u2"
        assert find_by_email(users, "nobody@x.com") is None

    def test_find_by_id(self):
        users = [_user(), _user(user_id="u2", email="grace@x.com")]

        assert find_by_id(users, "u2").email == "grace@x.com"
        assert find_by_id(users, "u3") is None
