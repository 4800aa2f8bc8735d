"""Durable string key-value stores backing the account data.

All stores share the KeyValueStore protocol modelled on browser local
storage: string keys, string values, missing keys read as None.
"""

from __future__ import annotations

import contextlib
import json
import os
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog

logger = structlog.get_logger()

_STORE_FILE_MODE = 0o600  # owner read/write only, the store holds credentials


@runtime_checkable
class KeyValueStore(Protocol):
    """Protocol for persistent string key-value storage."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """Process-local store. Contents are lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileKeyValueStore:
    """Store all keys in a single JSON object file.

    The file is re-read on every access so that writes from another process
    are picked up; concurrent writers are not coordinated and the last write
    wins. Writes go to a temporary file in the same directory which is then
    renamed into place, so readers never see a truncated file.
    """

    def __init__(self, file_path: str | Path) -> None:
        self._file_path = Path(file_path)

    @property
    def file_path(self) -> Path:
        return self._file_path

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._load()
        items[key] = value
        self._save(items)

    def remove_item(self, key: str) -> None:
        items = self._load()
        if items.pop(key, None) is not None:
            self._save(items)

    def _load(self) -> dict[str, str]:
        """Read the whole store.

        A missing file is an empty store. An unreadable or malformed file
        raises OSError so that it is never silently overwritten.
        """
        if not self._file_path.exists():
            return {}

        try:
            data = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, ValueError, OSError) as exc:
            msg = f"Failed to read key-value store {self._file_path}"
            raise OSError(msg) from exc

        if not isinstance(data, dict) or not all(isinstance(v, str) for v in data.values()):
            msg = f"Expected JSON object of strings in {self._file_path}"
            raise OSError(msg)
        return data

    def _save(self, items: dict[str, str]) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(items, indent=2).encode("utf-8")

        fd, tmp_path = tempfile.mkstemp(dir=self._file_path.parent, prefix=".kv_", suffix=".tmp")
        fd_owned = True
        try:
            with os.fdopen(fd, "wb") as f:
                fd_owned = False  # os.fdopen took ownership; it will close fd
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, _STORE_FILE_MODE)  # noqa: PTH101
            Path(tmp_path).replace(self._file_path)
        except BaseException:
            if fd_owned:
                with contextlib.suppress(OSError):
                    os.close(fd)
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise
        logger.debug("wrote key-value store", path=str(self._file_path), keys=len(items))
