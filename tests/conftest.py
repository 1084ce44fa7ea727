"""Shared test fixtures for GroGetter."""

import pytest

from grogetter.grocery_store import GroceryStore
from grogetter.kv_store import JSONFileStore, MemoryStore, SQLiteKVStore
from grogetter.list_manager import ListManager
from grogetter.models import GroceryCategory, GroceryItem, QuantityUnit


@pytest.fixture
def temp_data_dir(tmp_path):
    """Create a temporary data directory."""
    data_dir = tmp_path / "test_data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def memory_kv():
    """In-memory key-value backend."""
    return MemoryStore()


@pytest.fixture
def json_kv(temp_data_dir):
    """JSON file backend in a temporary directory."""
    return JSONFileStore(data_dir=temp_data_dir)


@pytest.fixture
def sqlite_kv(tmp_path):
    """SQLite backend with a temporary database."""
    return SQLiteKVStore(db_path=tmp_path / "test.db")


@pytest.fixture
def store(json_kv):
    """GroceryStore seeded with its default list."""
    return GroceryStore(json_kv)


@pytest.fixture
def empty_store(memory_kv):
    """GroceryStore that starts without any lists."""
    return GroceryStore(memory_kv, seed_default_list=False)


@pytest.fixture
def list_manager(store):
    """ListManager over a temporary store."""
    return ListManager(store)


@pytest.fixture
def sample_items():
    """A few items across standard and custom categories."""
    return [
        GroceryItem(name="Milk", category=GroceryCategory(name="Dairy")),
        GroceryItem(
            name="Flour",
            quantity=2,
            unit=QuantityUnit.KILOGRAM,
            category=GroceryCategory(name="Aisles"),
        ),
        GroceryItem(name="Tofu", category=GroceryCategory(name="Vegan"), notes="firm"),
    ]
