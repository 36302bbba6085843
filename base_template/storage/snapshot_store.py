"""Snapshot persistence backends.

The engine persists one document, ``{knowledge, metrics, lastSaved}``,
through any object with async ``load()``, ``save(snapshot)`` and ``clear()``.
Backends wrap their I/O failures in ``PersistenceError``.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Protocol

import aiosqlite

from base_template.config import SNAPSHOT_DB_PATH, SNAPSHOT_PATH
from base_template.exceptions import PersistenceError

logger = logging.getLogger(__name__)

SNAPSHOT_KEY = "knowledge_base"


class SnapshotStorage(Protocol):
    async def load(self) -> dict[str, Any] | None: ...

    async def save(self, snapshot: dict[str, Any]) -> None: ...

    async def clear(self) -> None: ...


class MemorySnapshotStorage:
    """Keeps the last snapshot in process memory. Used by tests and as the default."""

    def __init__(self, snapshot: dict[str, Any] | None = None) -> None:
        self._snapshot = copy.deepcopy(snapshot)
        self.save_count = 0

    async def load(self) -> dict[str, Any] | None:
        return copy.deepcopy(self._snapshot)

    async def save(self, snapshot: dict[str, Any]) -> None:
        self._snapshot = copy.deepcopy(snapshot)
        self.save_count += 1

    async def clear(self) -> None:
        self._snapshot = None


class JSONFileSnapshotStorage:
    """Single JSON document on disk, replaced atomically on every save."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or SNAPSHOT_PATH

    async def load(self) -> dict[str, Any] | None:
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(f"Failed to read snapshot {self.path}: {exc}") from exc

    async def save(self, snapshot: dict[str, Any]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(snapshot, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as exc:
            raise PersistenceError(f"Failed to write snapshot {self.path}: {exc}") from exc

    async def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Failed to remove snapshot {self.path}: {exc}") from exc


_SCHEMA = """
CREATE TABLE IF NOT EXISTS snapshots (
    key         TEXT PRIMARY KEY,
    payload     TEXT NOT NULL,
    saved_at    INTEGER
);
"""


class SQLiteSnapshotStorage:
    """Async SQLite key-value table holding the snapshot document."""

    def __init__(self, db_path: Path | None = None, key: str = SNAPSHOT_KEY) -> None:
        self.db_path = db_path or SNAPSHOT_DB_PATH
        self.key = key
        self._db: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._db = await aiosqlite.connect(str(self.db_path))
            self._db.row_factory = aiosqlite.Row
            await self._db.executescript(_SCHEMA)
            await self._db.commit()
        except (OSError, aiosqlite.Error) as exc:
            raise PersistenceError(f"Failed to open snapshot database {self.db_path}: {exc}") from exc

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    @property
    def db(self) -> aiosqlite.Connection:
        assert self._db is not None, "SQLiteSnapshotStorage not initialized. Call initialize() first"
        return self._db

    async def _ensure_open(self) -> None:
        if self._db is None:
            await self.initialize()

    async def load(self) -> dict[str, Any] | None:
        await self._ensure_open()
        try:
            async with self.db.execute(
                "SELECT payload FROM snapshots WHERE key = ?", (self.key,)
            ) as cur:
                row = await cur.fetchone()
        except aiosqlite.Error as exc:
            raise PersistenceError(f"Failed to read snapshot: {exc}") from exc
        if not row:
            return None
        try:
            return json.loads(row["payload"])
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Stored snapshot is not valid JSON: {exc}") from exc

    async def save(self, snapshot: dict[str, Any]) -> None:
        await self._ensure_open()
        try:
            payload = json.dumps(snapshot, ensure_ascii=False)
            await self.db.execute(
                "INSERT OR REPLACE INTO snapshots (key, payload, saved_at) VALUES (?, ?, ?)",
                (self.key, payload, snapshot.get("lastSaved")),
            )
            await self.db.commit()
        except (aiosqlite.Error, TypeError, ValueError) as exc:
            raise PersistenceError(f"Failed to write snapshot: {exc}") from exc

    async def clear(self) -> None:
        await self._ensure_open()
        try:
            await self.db.execute("DELETE FROM snapshots WHERE key = ?", (self.key,))
            await self.db.commit()
        except aiosqlite.Error as exc:
            raise PersistenceError(f"Failed to clear snapshot: {exc}") from exc
