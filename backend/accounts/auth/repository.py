"""User table persistence over a key-value store."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError as ModelValidationError

from accounts.auth.errors import StorageError
from accounts.auth.models import UserRecord
from accounts.auth.validation import normalize_email

if TYPE_CHECKING:
    from accounts.storage import KeyValueStore

logger = structlog.get_logger()

DEFAULT_USERS_KEY = "beyondTheBenchUsers"


class UserTableRepository:
    """Read and write the whole user table stored as a JSON array under one key.

    There are no partial updates: callers load the table, change it, and save
    it back in full. Reads never fail. A missing key, an unreadable store or
    a value that is not a JSON array all read as an empty table, and
    individual records that do not validate are skipped.
    """

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_USERS_KEY) -> None:
        self._store = store
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> list[UserRecord]:
        try:
            raw = self._store.get_item(self._key)
        except OSError:
            logger.warning("could not read user table, treating as empty", key=self._key, exc_info=True)
            return []
        if raw is None:
            return []

        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("malformed user table, treating as empty", key=self._key)
            return []
        if not isinstance(data, list):
            logger.warning("user table is not a list, treating as empty", key=self._key)
            return []

        users: list[UserRecord] = []
        for index, item in enumerate(data):
            try:
                users.append(UserRecord.model_validate(item))
            except ModelValidationError:
                logger.warning("skipping invalid user record", key=self._key, index=index)
        return users

    def save(self, users: list[UserRecord]) -> None:
        """Serialize and write the full table. Raises StorageError on failure."""
        content = json.dumps([user.to_wire() for user in users])
        try:
            self._store.set_item(self._key, content)
        except OSError as exc:
            logger.error("failed to save user table", key=self._key, count=len(users), exc_info=True)
            raise StorageError("Error saving user data") from exc


def find_by_email(users: list[UserRecord], email: str) -> UserRecord | None:
    """Look up a user by email (case-insensitive, surrounding whitespace ignored)."""
    wanted = normalize_email(email)
    return next((u for u in users if u.email.lower() == wanted), None)


def find_by_id(users: list[UserRecord], user_id: str) -> UserRecord | None:
    return next((u for u in users if u.user_id == user_id), None)
