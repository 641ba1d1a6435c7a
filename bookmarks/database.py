import json
import logging
import os
import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional

from bookmarks.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the key-value store cannot be read or written."""


class CorruptDataError(StorageError):
    """Raised when the stored value cannot be decoded into a JSON array."""


class KeyValueStore:
    """Key-value persistence holding the whole collection under one key.

    Subclasses provide ``get_item``/``set_item``; ``load``/``save`` handle the
    JSON encoding shared by every backend.
    """

    def __init__(self, key: str = "bookmarks") -> None:
        self.key = key

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def load(self) -> Optional[List[Dict[str, Any]]]:
        """Return the stored collection, or None if nothing is stored yet."""
        raw = self.get_item(self.key)
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptDataError(f"Stored value under '{self.key}' is not valid JSON: {e}") from e
        if not isinstance(data, list):
            raise CorruptDataError(f"Stored value under '{self.key}' is not a JSON array")
        return data

    def save(self, items: List[Dict[str, Any]]) -> None:
        self.set_item(self.key, json.dumps(items, ensure_ascii=False))


class MemoryStore(KeyValueStore):
    """In-process store; nothing survives the process."""

    def __init__(self, key: str = "bookmarks", initial: Optional[Dict[str, str]] = None) -> None:
        super().__init__(key)
        self.items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


class JsonFileStore(KeyValueStore):
    """Keeps the value as the whole content of one JSON file."""

    def __init__(self, path: str, key: str = "bookmarks") -> None:
        super().__init__(key)
        self.path = Path(path).expanduser()

    def get_item(self, key: str) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            return self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise CorruptDataError(f"{self.path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise StorageError(f"Could not read {self.path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(value, encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e


class SqliteStore(KeyValueStore):
    """Key-value table inside a SQLite file."""

    def __init__(self, db_file: str, key: str = "bookmarks") -> None:
        super().__init__(key)
        self.db_file = str(Path(db_file).expanduser())
        self.create_tables()

    def get_db_connection(self) -> sqlite3.Connection:
        """Open a connection to the SQLite file, creating its directory if needed."""
        Path(self.db_file).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_file)
        conn.row_factory = sqlite3.Row
        return conn

    def create_tables(self) -> None:
        """Create the storage table if it does not exist."""
        try:
            conn = self.get_db_connection()
        except (OSError, sqlite3.Error) as e:
            raise StorageError(f"Could not open database {self.db_file}: {e}") from e
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS storage (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Could not initialize database {self.db_file}: {e}") from e
        finally:
            conn.close()

    def get_item(self, key: str) -> Optional[str]:
        conn = self.get_db_connection()
        try:
            row = conn.execute("SELECT value FROM storage WHERE key = ?", (key,)).fetchone()
            return row["value"] if row else None
        except sqlite3.Error as e:
            raise StorageError(f"Could not read key '{key}': {e}") from e
        finally:
            conn.close()

    def set_item(self, key: str, value: str) -> None:
        conn = self.get_db_connection()
        try:
            conn.execute(
                """
                INSERT INTO storage (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP
                """,
                (key, value),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Could not write key '{key}': {e}") from e
        finally:
            conn.close()


def get_store(config: Optional[Settings] = None) -> KeyValueStore:
    """Build the storage backend named in the configuration."""
    config = config or default_settings
    backend = config.storage_backend
    if backend == "sqlite":
        return SqliteStore(config.db_file, key=config.storage_key)
    if backend == "json":
        return JsonFileStore(config.json_file, key=config.storage_key)
    if backend == "memory":
        return MemoryStore(key=config.storage_key)
    raise ValueError(f"Unknown storage backend: {backend}. Use sqlite, json or memory.")
