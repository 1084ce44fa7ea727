"""Standard and user-defined item categories."""

import logging

from .kv_store import (
    CUSTOM_CATEGORIES_KEY,
    KeyValueStore,
    StorageError,
    decode_records,
    encode_records,
)
from .models import STANDARD_CATEGORIES, GroceryCategory, SaveResult

logger = logging.getLogger(__name__)


class CategoryRegistry:
    """The category universe: built-in categories plus stored custom ones."""

    standard_categories = STANDARD_CATEGORIES

    def __init__(self, kv_store: KeyValueStore):
        self.kv_store = kv_store

    def custom_categories(self) -> list[GroceryCategory]:
        """Load the stored custom categories. Unreadable data counts as none."""
        try:
            text = self.kv_store.get(CUSTOM_CATEGORIES_KEY)
            if text is None:
                return []
            return decode_records(text, GroceryCategory)
        except (StorageError, ValueError) as e:
            logger.debug("Ignoring unreadable custom categories: %s", e)
            return []

    def all_categories(self) -> list[GroceryCategory]:
        return list(self.standard_categories) + self.custom_categories()

    def find(self, name: str) -> GroceryCategory | None:
        """Look up a category by name, ignoring case."""
        probe = GroceryCategory(name=name.strip())
        for category in self.all_categories():
            if category == probe:
                return category
        return None

    def add_category(self, name: str) -> GroceryCategory:
        """Register a custom category, or return the existing one of that name.

        Raises:
            ValueError: If the name is blank
        """
        name = name.strip()
        if not name:
            raise ValueError("Category name cannot be empty")

        existing = self.find(name)
        if existing is not None:
            return existing

        category = GroceryCategory(name=name)
        self.save_custom_categories(self.custom_categories() + [category])
        logger.info("Added custom category %s", name)
        return category

    def save_custom_categories(self, categories: list[GroceryCategory]) -> SaveResult:
        """Persist custom categories. Standard categories are dropped first."""
        custom: list[GroceryCategory] = []
        for category in categories:
            if category.is_custom and category not in custom:
                custom.append(category)
        try:
            self.kv_store.set(CUSTOM_CATEGORIES_KEY, encode_records(custom))
        except (StorageError, TypeError, ValueError) as e:
            logger.debug("Could not save custom categories: %s", e)
            return SaveResult.failed(e)
        return SaveResult()

    def remove_custom_category(self, category: GroceryCategory) -> SaveResult:
        remaining = [c for c in self.custom_categories() if c != category]
        logger.info("Removing unused custom category %s", category.name)
        return self.save_custom_categories(remaining)
