"""GroGetter - Multi-list grocery management with local persistence."""

from .categories import CategoryRegistry
from .config import ConfigManager
from .grocery_store import GroceryStore
from .kv_store import (
    BackendType,
    JSONFileStore,
    KeyValueStore,
    MemoryStore,
    SQLiteKVStore,
    StorageError,
    create_kv_store,
)
from .list_manager import ItemNotFoundError, ListManager, ListNotFoundError
from .models import (
    STANDARD_CATEGORIES,
    GroceryCategory,
    GroceryItem,
    GroceryList,
    QuantityUnit,
    SaveResult,
)
from .output_formatter import OutputFormatter
from .repository import ListRepository
from .share import format_share_markdown, format_share_text

__version__ = "0.1.0"

__all__ = [
    "BackendType",
    "CategoryRegistry",
    "ConfigManager",
    "create_kv_store",
    "format_share_markdown",
    "format_share_text",
    "GroceryCategory",
    "GroceryItem",
    "GroceryList",
    "GroceryStore",
    "ItemNotFoundError",
    "JSONFileStore",
    "KeyValueStore",
    "ListManager",
    "ListNotFoundError",
    "ListRepository",
    "MemoryStore",
    "OutputFormatter",
    "QuantityUnit",
    "SaveResult",
    "SQLiteKVStore",
    "STANDARD_CATEGORIES",
    "StorageError",
]
