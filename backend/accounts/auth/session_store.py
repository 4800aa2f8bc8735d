"""Durable copy of the current session."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError as ModelValidationError

from accounts.auth.errors import StorageError
from accounts.auth.models import UserRecord

if TYPE_CHECKING:
    from accounts.storage import KeyValueStore

logger = structlog.get_logger()

DEFAULT_SESSION_KEY = "beyondTheBenchCurrentUser"


class SessionRepository:
    """Persist a snapshot of the logged-in user under a single key.

    The snapshot is a full copy of the user record at login time; it does not
    follow later changes to the user table.
    """

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_SESSION_KEY) -> None:
        self._store = store
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> UserRecord | None:
        """Return the stored snapshot, or None if absent, unreadable or malformed."""
        try:
            raw = self._store.get_item(self._key)
        except OSError:
            logger.warning("could not read session", key=self._key, exc_info=True)
            return None
        if raw is None:
            return None

        try:
            return UserRecord.model_validate_json(raw)
        except ModelValidationError:
            logger.warning("malformed session data", key=self._key)
            return None

    def save(self, user: UserRecord) -> None:
        try:
            self._store.set_item(self._key, user.model_dump_json(by_alias=True))
        except OSError as exc:
            logger.error("failed to save session", key=self._key, user_id=user.user_id, exc_info=True)
            raise StorageError("Error saving user session") from exc

    def clear(self) -> None:
        try:
            self._store.remove_item(self._key)
        except OSError as exc:
            logger.error("failed to clear session", key=self._key, exc_info=True)
            raise StorageError("Error clearing user session") from exc
