"""Build an AccountStore and its backing store from settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from accounts.auth.password import get_encoder
from accounts.auth.service import AccountStore
from accounts.db import Database, SqliteKeyValueStore
from accounts.logging import setup_logging
from accounts.settings import AccountSettings, StoreBackend
from accounts.storage import FileKeyValueStore, KeyValueStore, MemoryKeyValueStore

if TYPE_CHECKING:
    from collections.abc import Callable

logger = structlog.get_logger()


@dataclass
class AccountRuntime:
    """An AccountStore plus whatever must be released on shutdown."""

    accounts: AccountStore
    store: KeyValueStore
    database: Database | None = None

    def close(self) -> None:
        if self.database is not None:
            self.database.close()
            self.database = None


def build_store(settings: AccountSettings) -> tuple[KeyValueStore, Database | None]:
    """Create the configured key-value store. SQLite databases are connected here."""
    if settings.store_backend == StoreBackend.MEMORY:
        return MemoryKeyValueStore(), None
    if settings.store_backend == StoreBackend.FILE:
        return FileKeyValueStore(settings.store_path), None
    db = Database(settings.store_path)
    db.connect()
    return SqliteKeyValueStore(db), db


def build_account_store(
    settings: AccountSettings | None = None,
    *,
    restore: bool = True,
    listeners: list[Callable] | None = None,
) -> AccountRuntime:
    """Wire an AccountStore from settings and, by default, restore the saved session.

    Listeners are subscribed before the restore so they see its outcome.
    """
    if settings is None:
        settings = AccountSettings()

    store, db = build_store(settings)
    accounts = AccountStore(
        store,
        encoder=get_encoder(settings.password_encoder),
        users_key=settings.users_key,
        session_key=settings.session_key,
    )
    for listener in listeners or []:
        accounts.subscribe(listener)

    logger.info(
        "account store ready",
        backend=settings.store_backend,
        encoder=settings.password_encoder,
        path=None if settings.store_backend == StoreBackend.MEMORY else settings.store_path,
    )
    if restore:
        accounts.restore_session()
    return AccountRuntime(accounts=accounts, store=store, database=db)


def bootstrap(settings: AccountSettings | None = None) -> AccountRuntime:
    """Configure logging and build a restored AccountStore for process startup."""
    if settings is None:
        settings = AccountSettings()
    log_file = setup_logging(log_dir=settings.log_dir, level=settings.log_level, log_format=settings.log_format)
    if log_file is not None:
        logger.info("logging to file", path=str(log_file))
    return build_account_store(settings)
