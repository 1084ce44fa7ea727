"""The grocery list aggregate and its persistence.

GroceryStore owns every list, the current selection and the category
registry. Each mutation finishes by re-encoding all lists and overwriting
the stored record. Storage problems never propagate to callers: unreadable
data loads as an empty/default state, and failed writes are reported
through the returned SaveResult (also kept as ``last_save_result``).
"""

import logging
from collections.abc import Iterable
from uuid import UUID

from .categories import CategoryRegistry
from .kv_store import (
    LEGACY_ITEMS_KEY,
    LISTS_KEY,
    SELECTED_LIST_KEY,
    KeyValueStore,
    StorageError,
    decode_records,
    encode_records,
)
from .models import GroceryCategory, GroceryItem, GroceryList, SaveResult
from .repository import ListRepository

logger = logging.getLogger(__name__)

DEFAULT_LIST_NAME = "My Grocery List"


class GroceryStore:
    """All grocery lists, the selected list and the category universe."""

    def __init__(
        self,
        kv_store: KeyValueStore,
        default_list_name: str = DEFAULT_LIST_NAME,
        seed_default_list: bool = True,
    ):
        """Load the store from persistent storage.

        Args:
            kv_store: Key-value backend holding the records
            default_list_name: Name used for seeded and migrated lists
            seed_default_list: Create an empty default list when storage
                holds no lists at all
        """
        self.kv_store = kv_store
        self.default_list_name = default_list_name
        self.seed_default_list = seed_default_list
        self.categories = CategoryRegistry(kv_store)
        self.lists = ListRepository()
        self.last_save_result = SaveResult()
        self._selected_list_id: UUID | None = None

        self._load_lists()
        self._migrate_if_needed()

    # --- Selection ---

    @property
    def selected_list_id(self) -> UUID | None:
        return self._selected_list_id

    @property
    def selected_list(self) -> GroceryList | None:
        return self.lists.get(self._selected_list_id)

    def select_list(self, list_id: UUID | None) -> SaveResult:
        """Select a list. An id that matches no list clears the selection."""
        if not self.lists.contains(list_id):
            list_id = None
        self._selected_list_id = list_id

        try:
            if list_id is None:
                self.kv_store.delete(SELECTED_LIST_KEY)
            else:
                self.kv_store.set(SELECTED_LIST_KEY, str(list_id))
        except StorageError as e:
            logger.debug("Could not persist selected list: %s", e)
            return SaveResult.failed(e)
        return SaveResult()

    # --- List management ---

    def create_list(self, name: str) -> GroceryList:
        """Append a new empty list, selecting it if nothing is selected."""
        grocery_list = GroceryList(name=name)
        self.lists.add(grocery_list)
        selection = SaveResult()
        if self._selected_list_id is None:
            selection = self.select_list(grocery_list.id)
        self._save_after(selection)
        logger.info("Created list %s", name)
        return grocery_list

    def delete_list(self, grocery_list: GroceryList) -> None:
        removed = self.lists.remove(grocery_list.id)
        if removed is None:
            return
        selection = SaveResult()
        if self._selected_list_id == removed.id:
            first = self.lists.first()
            selection = self.select_list(first.id if first else None)
        self._save_after(selection)
        self._collect_unused_categories(item.category for item in removed.items)

    def rename_list(self, grocery_list: GroceryList, new_name: str) -> None:
        target = self.lists.get(grocery_list.id)
        if target is None:
            return
        target.name = new_name
        self.save()

    def update_list(self, grocery_list: GroceryList) -> None:
        """Replace the stored list that has the same id."""
        if self.lists.replace(grocery_list):
            self.save()

    # --- Item management ---

    def _target_list(self, list_id: UUID | None) -> GroceryList | None:
        return self.lists.get(list_id if list_id is not None else self._selected_list_id)

    def all_items(self) -> list[GroceryItem]:
        return [item for grocery_list in self.lists for item in grocery_list.items]

    def add_item(self, item: GroceryItem, list_id: UUID | None = None) -> None:
        target = self._target_list(list_id)
        if target is None:
            return
        target.add_item(item)
        self.save()

    def update_item(self, item: GroceryItem, list_id: UUID | None = None) -> None:
        target = self._target_list(list_id)
        current = target.get_item(item.id) if target is not None else None
        if current is None:
            return
        old_category = current.category
        target.update_item(item)
        self.save()
        self._collect_unused_categories([old_category])

    def delete_items(self, indices: Iterable[int], list_id: UUID | None = None) -> None:
        """Delete items by position, then drop custom categories left unused."""
        target = self._target_list(list_id)
        if target is None:
            return
        removed = target.delete_items(indices)
        self.save()
        self._collect_unused_categories(removed)

    def toggle_item_completion(self, item: GroceryItem, list_id: UUID | None = None) -> None:
        target = self._target_list(list_id)
        if target is None or target.get_item(item.id) is None:
            return
        target.toggle_item_completion(item.id)
        self.save()

    def move_items(
        self, source: Iterable[int], destination: int, list_id: UUID | None = None
    ) -> None:
        target = self._target_list(list_id)
        if target is None:
            return
        target.move_items(source, destination)
        self.save()

    def clear_completed_items(self, grocery_list: GroceryList) -> None:
        target = self.lists.get(grocery_list.id)
        if target is None:
            return
        removed = target.clear_completed_items()
        self.save()
        self._collect_unused_categories(removed)

    def _collect_unused_categories(self, categories: Iterable[GroceryCategory]) -> None:
        """Forget custom categories that no remaining item references."""
        in_use = {item.category for item in self.all_items()}
        for category in set(categories):
            if category.is_custom and category not in in_use:
                self.categories.remove_custom_category(category)

    # --- Persistence ---

    def save(self) -> SaveResult:
        """Encode every list and overwrite the stored record."""
        try:
            self.kv_store.set(LISTS_KEY, encode_records(self.lists))
            result = SaveResult()
        except (StorageError, TypeError, ValueError) as e:
            logger.debug("Could not save grocery lists: %s", e)
            result = SaveResult.failed(e)
        self.last_save_result = result
        return result

    def _save_after(self, selection: SaveResult) -> SaveResult:
        """Save lists, keeping an earlier failed selection write as the result."""
        result = self.save()
        if result.ok and not selection.ok:
            self.last_save_result = selection
        return self.last_save_result

    def _read_lists(self) -> list[GroceryList] | None:
        try:
            text = self.kv_store.get(LISTS_KEY)
            if text is None:
                return None
            return decode_records(text, GroceryList)
        except (StorageError, ValueError) as e:
            logger.debug("Ignoring unreadable grocery lists: %s", e)
            return None

    def _read_selected_id(self) -> UUID | None:
        try:
            text = self.kv_store.get(SELECTED_LIST_KEY)
            return UUID(text.strip()) if text else None
        except (StorageError, ValueError) as e:
            logger.debug("Ignoring unreadable selected list id: %s", e)
            return None

    def _load_lists(self) -> None:
        lists = self._read_lists()
        if lists is not None:
            self.lists = ListRepository(lists)
            stored_id = self._read_selected_id()
            if self.lists.contains(stored_id):
                self._selected_list_id = stored_id
            else:
                first = self.lists.first()
                self.select_list(first.id if first else None)
            logger.debug("Loaded %d grocery lists", len(self.lists))
            return

        if not self.seed_default_list:
            self.select_list(None)
            return

        default_list = GroceryList(name=self.default_list_name, is_default=True)
        self.lists = ListRepository([default_list])
        self.select_list(default_list.id)
        self.save()
        logger.debug("No stored lists, created %s", default_list.name)

    def _migrate_if_needed(self) -> None:
        """Fold items saved by the single-list layout into a default list."""
        try:
            text = self.kv_store.get(LEGACY_ITEMS_KEY)
        except StorageError as e:
            logger.debug("Could not read legacy items: %s", e)
            return
        if text is None:
            return

        try:
            old_items = decode_records(text, GroceryItem)
        except ValueError as e:
            logger.debug("Leaving unreadable legacy items in place: %s", e)
            return

        lists = self.lists.all()
        if not lists or (len(lists) == 1 and not lists[0].items):
            migrated = GroceryList(name=self.default_list_name, items=old_items, is_default=True)
            self.lists = ListRepository([migrated])
            self.select_list(migrated.id)
            self.save()
            logger.info("Migrated %d items into %s", len(old_items), migrated.name)

        try:
            self.kv_store.delete(LEGACY_ITEMS_KEY)
        except StorageError as e:
            logger.debug("Could not remove legacy items: %s", e)
