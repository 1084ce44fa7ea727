"""Tests for the category registry."""

import json

import pytest

from grogetter.categories import CategoryRegistry
from grogetter.kv_store import CUSTOM_CATEGORIES_KEY, StorageError
from grogetter.models import STANDARD_CATEGORIES, GroceryCategory


class FailingWrites:
    """Backend whose reads work and whose writes always fail."""

    def __init__(self):
        self.records = {}

    def get(self, key):
        return self.records.get(key)

    def set(self, key, value):
        raise StorageError(key, OSError("read-only"))

    def delete(self, key):
        raise StorageError(key, OSError("read-only"))

    def contains(self, key):
        return key in self.records


@pytest.fixture
def registry(memory_kv):
    return CategoryRegistry(memory_kv)


class TestCategoryRegistry:
    def test_starts_with_standard_only(self, registry):
        assert registry.custom_categories() == []
        assert registry.all_categories() == list(STANDARD_CATEGORIES)

    def test_add_custom_category(self, registry, memory_kv):
        category = registry.add_category("  Pet Food ")
        assert category.name == "Pet Food"
        assert registry.custom_categories() == [category]
        assert registry.all_categories()[-1] == category
        stored = json.loads(memory_kv.get(CUSTOM_CATEGORIES_KEY))
        assert stored[0]["name"] == "Pet Food"

    def test_add_existing_custom_returns_it(self, registry):
        first = registry.add_category("Pet Food")
        second = registry.add_category("pet food")
        assert second.id == first.id
        assert len(registry.custom_categories()) == 1

    def test_add_standard_name_returns_standard(self, registry):
        category = registry.add_category("DAIRY")
        assert category.name == "Dairy"
        assert registry.custom_categories() == []

    def test_add_blank_rejected(self, registry):
        with pytest.raises(ValueError):
            registry.add_category("   ")

    def test_find_ignores_case(self, registry):
        registry.add_category("Pet Food")
        assert registry.find("PET FOOD").name == "Pet Food"
        assert registry.find("bakery").name == "Bakery"
        assert registry.find("Hardware") is None

    def test_save_filters_standard(self, registry):
        result = registry.save_custom_categories(
            [GroceryCategory(name="Produce"), GroceryCategory(name="Snacks")]
        )
        assert result.ok
        assert [c.name for c in registry.custom_categories()] == ["Snacks"]

    def test_save_deduplicates(self, registry):
        registry.save_custom_categories(
            [GroceryCategory(name="Snacks"), GroceryCategory(name="SNACKS")]
        )
        assert len(registry.custom_categories()) == 1

    def test_remove_custom_category(self, registry):
        registry.add_category("Pet Food")
        registry.add_category("Snacks")
        registry.remove_custom_category(GroceryCategory(name="pet food"))
        assert [c.name for c in registry.custom_categories()] == ["Snacks"]

    def test_corrupt_payload_reads_as_empty(self, registry, memory_kv):
        memory_kv.set(CUSTOM_CATEGORIES_KEY, "garbage")
        assert registry.custom_categories() == []
        assert registry.all_categories() == list(STANDARD_CATEGORIES)

    def test_write_failure_reported_not_raised(self):
        registry = CategoryRegistry(FailingWrites())
        result = registry.save_custom_categories([GroceryCategory(name="Snacks")])
        assert result.ok is False
        assert "read-only" in result.error
