"""SQLite storage: connection management and the key-value table."""

from accounts.db.connection import Database
from accounts.db.kv_store import SqliteKeyValueStore

__all__ = [
    "Database",
    "SqliteKeyValueStore",
]
