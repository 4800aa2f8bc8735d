"""SQLite-backed key-value store."""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from accounts.db.connection import Database


class SqliteKeyValueStore:
    """KeyValueStore over the ``kv`` table.

    Each write commits immediately. sqlite3 errors are re-raised as OSError so
    callers handle every store backend the same way.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    def get_item(self, key: str) -> str | None:
        try:
            row = self._db.connection.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as exc:
            raise OSError(f"Failed to read key {key!r}") from exc
        if row is None:
            return None
        return row[0]

    def set_item(self, key: str, value: str) -> None:
        self._write(
            "INSERT INTO kv (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value = excluded.value",
            (key, value),
        )

    def remove_item(self, key: str) -> None:
        self._write("DELETE FROM kv WHERE key = ?", (key,))

    def _write(self, sql: str, params: tuple[str, ...]) -> None:
        conn = self._db.connection
        try:
            conn.execute(sql, params)
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise OSError(f"Failed to write key {params[0]!r}") from exc
