import json
import sqlite3

import pytest

from bookmarks.config import Settings
from bookmarks.database import (
    CorruptDataError,
    JsonFileStore,
    MemoryStore,
    SqliteStore,
    StorageError,
    get_store,
)

RECORDS = [
    {"id": "2", "title": "B", "author": "X", "description": "", "link": "/b", "tags": ["t"], "dateAdded": "2024-01-02T00:00:00.000Z"},
    {"id": "1", "title": "Ä", "author": "Y", "description": "d", "link": "https://a", "tags": [], "dateAdded": "2024-01-01T00:00:00.000Z"},
]


@pytest.fixture(params=["memory", "json", "sqlite"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    if request.param == "json":
        return JsonFileStore(str(tmp_path / "data" / "bookmarks.json"))
    return SqliteStore(str(tmp_path / "data" / "bookmarks.db"))


def test_load_absent_returns_none(store):
    assert store.load() is None


def test_save_and_load(store):
    store.save(RECORDS)
    assert store.load() == RECORDS


def test_save_overwrites(store):
    store.save(RECORDS)
    store.save(RECORDS[:1])
    assert store.load() == RECORDS[:1]


def test_not_json_is_corrupt(store):
    store.set_item(store.key, "{oops")
    with pytest.raises(CorruptDataError):
        store.load()


def test_not_an_array_is_corrupt(store):
    store.set_item(store.key, json.dumps({"id": "1"}))
    with pytest.raises(CorruptDataError):
        store.load()


def test_sqlite_uses_single_key(tmp_path):
    db_file = str(tmp_path / "bookmarks.db")
    store = SqliteStore(db_file, key="shelf")
    store.save(RECORDS)

    conn = sqlite3.connect(db_file)
    try:
        rows = conn.execute("SELECT key, value FROM storage").fetchall()
    finally:
        conn.close()
    assert len(rows) == 1
    assert rows[0][0] == "shelf"
    assert json.loads(rows[0][1]) == RECORDS


def test_sqlite_keys_are_independent(tmp_path):
    db_file = str(tmp_path / "bookmarks.db")
    SqliteStore(db_file, key="a").save(RECORDS)
    assert SqliteStore(db_file, key="b").load() is None


def test_json_file_write_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    store = JsonFileStore(str(blocker / "bookmarks.json"))
    with pytest.raises(StorageError):
        store.save(RECORDS)


def test_get_store_backends(tmp_path):
    config = Settings()
    config.db_file = str(tmp_path / "b.db")
    config.json_file = str(tmp_path / "b.json")
    config.storage_key = "shelf"

    config.storage_backend = "sqlite"
    assert isinstance(get_store(config), SqliteStore)
    config.storage_backend = "json"
    assert isinstance(get_store(config), JsonFileStore)
    config.storage_backend = "memory"
    store = get_store(config)
    assert isinstance(store, MemoryStore)
    assert store.key == "shelf"


def test_get_store_unknown_backend():
    config = Settings()
    config.storage_backend = "redis"
    with pytest.raises(ValueError, match="Unknown storage backend"):
        get_store(config)


def test_json_file_not_utf8_is_corrupt(tmp_path):
    path = tmp_path / "bookmarks.json"
    path.write_bytes(b"\xff\xfe[not utf8")
    with pytest.raises(CorruptDataError):
        JsonFileStore(str(path)).load()
