"""Tests for the snapshot persistence backends."""

import pytest
import pytest_asyncio

from base_template.exceptions import PersistenceError
from base_template.storage.snapshot_store import (
    JSONFileSnapshotStorage,
    MemorySnapshotStorage,
    SQLiteSnapshotStorage,
)

SNAPSHOT = {
    "knowledge": [["k1", {"id": "k1", "content": "ceramic coating", "tags": ["ceramic"]}]],
    "metrics": {"totalQueries": 2},
    "lastSaved": 1700000000000,
}


@pytest_asyncio.fixture
async def sqlite_storage(tmp_path):
    s = SQLiteSnapshotStorage(tmp_path / "kb.db")
    await s.initialize()
    yield s
    await s.close()


@pytest.mark.asyncio
async def test_memory_storage_round_trip():
    storage = MemorySnapshotStorage()
    assert await storage.load() is None

    await storage.save(SNAPSHOT)
    loaded = await storage.load()
    assert loaded == SNAPSHOT
    assert storage.save_count == 1

    loaded["metrics"]["totalQueries"] = 99
    assert (await storage.load())["metrics"]["totalQueries"] == 2

    await storage.clear()
    assert await storage.load() is None


@pytest.mark.asyncio
async def test_json_file_round_trip(tmp_path):
    path = tmp_path / "nested" / "kb.json"
    storage = JSONFileSnapshotStorage(path)
    assert await storage.load() is None

    await storage.save(SNAPSHOT)
    assert path.exists()
    assert await storage.load() == SNAPSHOT

    await storage.clear()
    assert not path.exists()
    await storage.clear()


@pytest.mark.asyncio
async def test_json_file_corrupt_raises(tmp_path):
    path = tmp_path / "kb.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(PersistenceError):
        await JSONFileSnapshotStorage(path).load()


@pytest.mark.asyncio
async def test_json_file_unserialisable_raises(tmp_path):
    storage = JSONFileSnapshotStorage(tmp_path / "kb.json")
    with pytest.raises(PersistenceError):
        await storage.save({"knowledge": [], "bad": object()})


@pytest.mark.asyncio
async def test_sqlite_round_trip(sqlite_storage):
    assert await sqlite_storage.load() is None
    await sqlite_storage.save(SNAPSHOT)
    assert await sqlite_storage.load() == SNAPSHOT


@pytest.mark.asyncio
async def test_sqlite_save_overwrites(sqlite_storage):
    await sqlite_storage.save(SNAPSHOT)
    await sqlite_storage.save({**SNAPSHOT, "metrics": {"totalQueries": 5}})

    loaded = await sqlite_storage.load()
    assert loaded["metrics"] == {"totalQueries": 5}

    async with sqlite_storage.db.execute("SELECT COUNT(*) AS cnt FROM snapshots") as cur:
        row = await cur.fetchone()
        assert row["cnt"] == 1


@pytest.mark.asyncio
async def test_sqlite_clear(sqlite_storage):
    await sqlite_storage.save(SNAPSHOT)
    await sqlite_storage.clear()
    assert await sqlite_storage.load() is None


@pytest.mark.asyncio
async def test_sqlite_opens_lazily(tmp_path):
    writer = SQLiteSnapshotStorage(tmp_path / "kb.db")
    await writer.save(SNAPSHOT)
    await writer.close()

    reader = SQLiteSnapshotStorage(tmp_path / "kb.db")
    assert await reader.load() == SNAPSHOT
    await reader.close()
