"""Key-value persistence for GroGetter.

Records are stored as strings under fixed keys. Two on-disk backends are
available, one JSON file per key (default) or a single SQLite database.
Use create_kv_store() to get the appropriate backend based on configuration.
"""

import json
import logging
import sqlite3
from collections.abc import Iterable
from contextlib import contextmanager
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Protocol, TypeVar
from uuid import UUID

from pydantic import BaseModel

logger = logging.getLogger(__name__)

# Record keys
LISTS_KEY = "grocery_lists"
SELECTED_LIST_KEY = "selected_list_id"
CUSTOM_CATEGORIES_KEY = "custom_categories"
LEGACY_ITEMS_KEY = "grocery_items"


class BackendType(str, Enum):
    """Data storage backend types."""

    JSON = "json"
    SQLITE = "sqlite"


class StorageError(Exception):
    """Raised when a backend cannot read or write a record."""

    def __init__(self, key: str, cause: Exception):
        self.key = key
        self.cause = cause
        super().__init__(f"Storage failure for '{key}': {cause}")


class KeyValueStore(Protocol):
    """Protocol defining the key-value store interface."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...
    def contains(self, key: str) -> bool: ...


class MemoryStore:
    """Keeps records in a dict. Nothing survives the process."""

    def __init__(self, records: dict[str, str] | None = None):
        self.records: dict[str, str] = dict(records or {})

    def get(self, key: str) -> str | None:
        return self.records.get(key)

    def set(self, key: str, value: str) -> None:
        self.records[key] = value

    def delete(self, key: str) -> None:
        self.records.pop(key, None)

    def contains(self, key: str) -> bool:
        return key in self.records


class JSONFileStore:
    """Stores each record as <key>.json inside a data directory."""

    def __init__(self, data_dir: Path | None = None):
        """Initialize file store.

        Args:
            data_dir: Directory for data files. Defaults to ./data
        """
        self.data_dir = data_dir or Path.cwd() / "data"
        self._ensure_directories()

    def _ensure_directories(self) -> None:
        """Create the data directory if it doesn't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _record_path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> str | None:
        """Read a record.

        Returns:
            The stored text, None if the record doesn't exist
        """
        path = self._record_path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(key, e) from e

    def set(self, key: str, value: str) -> None:
        """Overwrite a record."""
        path = self._record_path(key)
        try:
            path.write_text(value, encoding="utf-8")
        except OSError as e:
            raise StorageError(key, e) from e

    def delete(self, key: str) -> None:
        """Remove a record if present."""
        try:
            self._record_path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(key, e) from e

    def contains(self, key: str) -> bool:
        return self._record_path(key).exists()


class SQLiteKVStore:
    """Stores records as rows of a single SQLite table."""

    def __init__(self, db_path: Path | None = None):
        """Initialize SQLite store.

        Args:
            db_path: Path to the SQLite database file. Defaults to ./data/grogetter.db
        """
        if db_path is None:
            db_path = Path.cwd() / "data" / "grogetter.db"
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_database()

    @contextmanager
    def _get_connection(self):
        """Get a database connection with proper cleanup."""
        conn = sqlite3.connect(self.db_path)
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_database(self) -> None:
        """Initialize database schema if not exists."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_records (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

    def get(self, key: str) -> str | None:
        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT value FROM kv_records WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(key, e) from e
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        try:
            with self._get_connection() as conn:
                conn.execute(
                    """
                    INSERT INTO kv_records (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, value, datetime.now().isoformat()),
                )
        except sqlite3.Error as e:
            raise StorageError(key, e) from e

    def delete(self, key: str) -> None:
        try:
            with self._get_connection() as conn:
                conn.execute("DELETE FROM kv_records WHERE key = ?", (key,))
        except sqlite3.Error as e:
            raise StorageError(key, e) from e

    def contains(self, key: str) -> bool:
        return self.get(key) is not None


def create_kv_store(
    backend: BackendType = BackendType.JSON,
    data_dir: Path | None = None,
    db_path: Path | None = None,
) -> KeyValueStore:
    """Create a key-value store with the specified backend.

    Args:
        backend: Which backend to use (json or sqlite)
        data_dir: Directory for data files (used by JSON backend, also used
                  as base path for SQLite if db_path not specified)
        db_path: Path to SQLite database file (only used by SQLite backend)

    Returns:
        A JSONFileStore or SQLiteKVStore instance
    """
    if backend == BackendType.SQLITE:
        if db_path is None and data_dir is not None:
            db_path = data_dir / "grogetter.db"
        logger.debug("Using SQLite storage at %s", db_path)
        return SQLiteKVStore(db_path=db_path)
    logger.debug("Using JSON file storage in %s", data_dir)
    return JSONFileStore(data_dir=data_dir)


ModelT = TypeVar("ModelT", bound=BaseModel)


class JSONEncoder(json.JSONEncoder):
    """Custom JSON encoder for our data types."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, date):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


def encode_records(records: Iterable[BaseModel]) -> str:
    """Encode models as a JSON array."""
    return json.dumps([record.model_dump() for record in records], cls=JSONEncoder, indent=2)


def decode_records(text: str, model: type[ModelT]) -> list[ModelT]:
    """Decode a JSON array produced by encode_records().

    Raises:
        ValueError: If the text is not valid JSON or a record fails validation
    """
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of {model.__name__} records")
    return [model.model_validate(entry) for entry in data]
