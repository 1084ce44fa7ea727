"""Grocery list commands built on top of GroceryStore.

ListManager turns user-facing references (list names, item positions)
into store calls and packages the outcome as result dicts for output.
Unlike the store it reports lookup misses as errors.
"""

from typing import Any
from uuid import UUID

from .grocery_store import GroceryStore
from .models import (
    DEFAULT_CATEGORY_NAME,
    GroceryCategory,
    GroceryItem,
    GroceryList,
    QuantityUnit,
)
from .share import format_share_markdown, format_share_text, group_by_category, sort_for_display


class ListNotFoundError(Exception):
    """Raised when a list reference matches no list."""

    def __init__(self, list_ref: UUID | str | None):
        self.list_ref = list_ref
        if list_ref is None:
            super().__init__("No list is selected")
        else:
            super().__init__(f"List '{list_ref}' not found")


class ItemNotFoundError(Exception):
    """Raised when an item reference matches no item."""

    def __init__(self, item_ref: UUID | str):
        self.item_ref = item_ref
        super().__init__(f"Item '{item_ref}' not found")


def _parse_uuid(value: UUID | str) -> UUID | None:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(value)
    except ValueError:
        return None


class ListManager:
    """Manages grocery list operations."""

    def __init__(
        self,
        store: GroceryStore,
        default_category: str = DEFAULT_CATEGORY_NAME,
        default_unit: QuantityUnit = QuantityUnit.PIECE,
    ):
        """Initialize list manager.

        Args:
            store: GroceryStore to operate on
            default_category: Category name for items added without one
            default_unit: Unit for items added without one
        """
        self.store = store
        self.default_category = default_category
        self.default_unit = default_unit

    # --- Reference resolution ---

    def resolve_list(self, list_ref: UUID | str | None = None) -> GroceryList:
        """Find a list by id or name. None means the selected list.

        Raises:
            ListNotFoundError: If nothing matches
        """
        if list_ref is None:
            grocery_list = self.store.selected_list
        else:
            list_id = _parse_uuid(list_ref)
            if list_id is not None:
                grocery_list = self.store.lists.get(list_id)
            else:
                grocery_list = self.store.lists.find_by_name(str(list_ref).strip())

        if grocery_list is None:
            raise ListNotFoundError(list_ref)
        return grocery_list

    def resolve_item(
        self, grocery_list: GroceryList, item_ref: UUID | str
    ) -> tuple[int, GroceryItem]:
        """Find an item by id, 1-based position or name.

        Returns:
            The item's index in the list and the item

        Raises:
            ItemNotFoundError: If nothing matches
        """
        item_id = _parse_uuid(item_ref)
        ref = str(item_ref).strip()
        for index, item in enumerate(grocery_list.items):
            if item_id is not None and item.id == item_id:
                return index, item

        if item_id is None:
            if ref.isdigit():
                position = int(ref)
                if 1 <= position <= len(grocery_list.items):
                    return position - 1, grocery_list.items[position - 1]
            for index, item in enumerate(grocery_list.items):
                if item.name.lower() == ref.lower():
                    return index, item

        raise ItemNotFoundError(item_ref)

    def resolve_category(self, name: str | None) -> GroceryCategory:
        """Find a category by name, registering unknown names as custom."""
        name = name or self.default_category
        existing = self.store.categories.find(name)
        if existing is not None:
            return existing
        return self.store.categories.add_category(name)

    def resolve_unit(self, unit: QuantityUnit | str | None) -> QuantityUnit:
        if unit is None:
            return self.default_unit
        if isinstance(unit, QuantityUnit):
            return unit
        return QuantityUnit.parse(unit)

    # --- Serialization helpers ---

    def _item_data(self, item: GroceryItem) -> dict[str, Any]:
        data = item.model_dump(mode="json")
        data["display_quantity"] = item.display_quantity
        return data

    def _list_summary(self, grocery_list: GroceryList) -> dict[str, Any]:
        return {
            "id": str(grocery_list.id),
            "name": grocery_list.name,
            "is_default": grocery_list.is_default,
            "created_at": grocery_list.created_at.isoformat(),
            "total_items": len(grocery_list.items),
            "completed_items": sum(1 for item in grocery_list.items if item.is_completed),
            "selected": grocery_list.id == self.store.selected_list_id,
        }

    def _result(self, message: str, data: dict[str, Any]) -> dict[str, Any]:
        return {
            "success": True,
            "message": message,
            "saved": self.store.last_save_result.ok,
            "data": data,
        }

    # --- Lists ---

    def create_list(self, name: str) -> dict:
        """Create a new list.

        Raises:
            ValueError: If the name is blank
        """
        name = name.strip()
        if not name:
            raise ValueError("List name cannot be empty")
        grocery_list = self.store.create_list(name)
        return self._result(
            f"Created list {name}", {"list_summary": self._list_summary(grocery_list)}
        )

    def delete_list(self, list_ref: UUID | str | None = None) -> dict:
        grocery_list = self.resolve_list(list_ref)
        self.store.delete_list(grocery_list)
        selected = self.store.selected_list
        return self._result(
            f"Deleted list {grocery_list.name}",
            {
                "list_summary": self._list_summary(grocery_list),
                "selected_list": selected.name if selected else None,
            },
        )

    def rename_list(self, list_ref: UUID | str | None, new_name: str) -> dict:
        new_name = new_name.strip()
        if not new_name:
            raise ValueError("List name cannot be empty")
        grocery_list = self.resolve_list(list_ref)
        old_name = grocery_list.name
        self.store.rename_list(grocery_list, new_name)
        return self._result(
            f"Renamed {old_name} to {new_name}",
            {"list_summary": self._list_summary(grocery_list)},
        )

    def select_list(self, list_ref: UUID | str) -> dict:
        grocery_list = self.resolve_list(list_ref)
        result = self.store.select_list(grocery_list.id)
        response = self._result(
            f"Selected list {grocery_list.name}",
            {"list_summary": self._list_summary(grocery_list)},
        )
        response["saved"] = result.ok
        return response

    def get_lists(self) -> dict:
        summaries = [self._list_summary(grocery_list) for grocery_list in self.store.lists]
        return {
            "success": True,
            "data": {"lists": summaries, "total_lists": len(summaries)},
        }

    def get_list(
        self,
        list_ref: UUID | str | None = None,
        category: str | None = None,
        completed: bool | None = None,
        sort: bool = False,
    ) -> dict:
        """Get a list's items with optional filtering.

        Args:
            list_ref: List id or name, selected list if omitted
            category: Only items in this category
            completed: Only completed (True) or open (False) items
            sort: Open items first, then by name

        Returns:
            Dict with list data
        """
        grocery_list = self.resolve_list(list_ref)
        items = grocery_list.items

        if category:
            probe = GroceryCategory(name=category.strip())
            items = [i for i in items if i.category == probe]

        if completed is not None:
            items = [i for i in items if i.is_completed == completed]

        if sort:
            items = sort_for_display(items)

        return {
            "success": True,
            "data": {
                "list": {
                    "id": str(grocery_list.id),
                    "name": grocery_list.name,
                    "items": [self._item_data(item) for item in items],
                    "total_items": len(items),
                }
            },
        }

    def get_by_category(self, list_ref: UUID | str | None = None) -> dict:
        """Get a list's items grouped by category, categories sorted by name."""
        grocery_list = self.resolve_list(list_ref)
        grouped = group_by_category(grocery_list.items)

        by_category = {
            category.name: [self._item_data(item) for item in grouped[category]]
            for category in sorted(grouped, key=lambda c: c.name)
        }
        return {
            "success": True,
            "data": {"list_name": grocery_list.name, "by_category": by_category},
        }

    def share(self, list_ref: UUID | str | None = None, markdown: bool = False) -> dict:
        grocery_list = self.resolve_list(list_ref)
        if markdown:
            text = format_share_markdown(grocery_list, self.store.categories.all_categories())
        else:
            text = format_share_text(grocery_list)
        return {"success": True, "data": {"share_text": text}}

    # --- Items ---

    def add_item(
        self,
        name: str,
        quantity: float = 1,
        unit: QuantityUnit | str | None = None,
        category: str | None = None,
        notes: str = "",
        list_ref: UUID | str | None = None,
    ) -> dict:
        """Add an item to a list.

        Args:
            name: Item name
            quantity: Amount to buy, must be positive
            unit: Unit value or label, default unit if omitted
            category: Category name; unknown names become custom categories
            notes: Free-text notes
            list_ref: Target list, selected list if omitted

        Returns:
            Dict with success status and item data

        Raises:
            ListNotFoundError: If the target list doesn't exist
            ValueError: On a blank name, bad quantity or unknown unit
        """
        name = name.strip()
        if not name:
            raise ValueError("Item name cannot be empty")
        grocery_list = self.resolve_list(list_ref)

        item = GroceryItem(
            name=name,
            quantity=quantity,
            unit=self.resolve_unit(unit),
            category=self.resolve_category(category),
            notes=notes or "",
        )
        self.store.add_item(item, grocery_list.id)

        return self._result(
            f"Added {name} to {grocery_list.name}", {"item": self._item_data(item)}
        )

    def remove_item(self, item_ref: UUID | str, list_ref: UUID | str | None = None) -> dict:
        grocery_list = self.resolve_list(list_ref)
        index, item = self.resolve_item(grocery_list, item_ref)
        registered = (
            item.category.is_custom
            and self.store.categories.find(item.category.name) is not None
        )

        self.store.delete_items([index], grocery_list.id)

        category_removed = registered and self.store.categories.find(item.category.name) is None
        return self._result(
            f"Removed {item.name} from {grocery_list.name}",
            {"item": self._item_data(item), "category_removed": category_removed},
        )

    def toggle_item(self, item_ref: UUID | str, list_ref: UUID | str | None = None) -> dict:
        grocery_list = self.resolve_list(list_ref)
        _, item = self.resolve_item(grocery_list, item_ref)

        self.store.toggle_item_completion(item, grocery_list.id)
        state = "done" if item.is_completed else "not done"
        return self._result(f"Marked {item.name} as {state}", {"item": self._item_data(item)})

    def update_item(
        self,
        item_ref: UUID | str,
        list_ref: UUID | str | None = None,
        name: str | None = None,
        quantity: float | None = None,
        unit: QuantityUnit | str | None = None,
        category: str | None = None,
        notes: str | None = None,
        completed: bool | None = None,
    ) -> dict:
        """Update fields of an existing item.

        Raises:
            ListNotFoundError: If the list doesn't exist
            ItemNotFoundError: If the item doesn't exist
            ValueError: On invalid new values
        """
        grocery_list = self.resolve_list(list_ref)
        _, item = self.resolve_item(grocery_list, item_ref)

        changes: dict[str, Any] = {}
        if name is not None:
            if not name.strip():
                raise ValueError("Item name cannot be empty")
            changes["name"] = name.strip()
        if quantity is not None:
            changes["quantity"] = quantity
        if unit is not None:
            changes["unit"] = self.resolve_unit(unit)
        if category is not None:
            changes["category"] = self.resolve_category(category)
        if notes is not None:
            changes["notes"] = notes
        if completed is not None:
            changes["is_completed"] = completed

        updated = GroceryItem.model_validate({**item.model_dump(), **changes})
        self.store.update_item(updated, grocery_list.id)

        return self._result(f"Updated {updated.name}", {"item": self._item_data(updated)})

    def move_item(
        self, item_ref: UUID | str, position: int, list_ref: UUID | str | None = None
    ) -> dict:
        """Move an item so it ends up at the given 1-based position."""
        grocery_list = self.resolve_list(list_ref)
        index, item = self.resolve_item(grocery_list, item_ref)

        target = max(0, min(position - 1, len(grocery_list.items) - 1))
        destination = target + 1 if target > index else target
        self.store.move_items([index], destination, grocery_list.id)

        return self._result(
            f"Moved {item.name} to position {target + 1}",
            {"item": self._item_data(item), "position": target + 1},
        )

    def clear_completed(self, list_ref: UUID | str | None = None) -> dict:
        grocery_list = self.resolve_list(list_ref)
        removed_count = sum(1 for item in grocery_list.items if item.is_completed)

        self.store.clear_completed_items(grocery_list)

        return self._result(
            f"Cleared {removed_count} completed items", {"removed_count": removed_count}
        )

    # --- Categories ---

    def get_categories(self) -> dict:
        counts: dict[GroceryCategory, int] = {}
        for item in self.store.all_items():
            counts[item.category] = counts.get(item.category, 0) + 1

        categories = [
            {
                "id": str(category.id),
                "name": category.name,
                "is_custom": category.is_custom,
                "item_count": counts.get(category, 0),
            }
            for category in self.store.categories.all_categories()
        ]
        return {"success": True, "data": {"categories": categories}}

    def add_category(self, name: str) -> dict:
        existing = self.store.categories.find(name) if name.strip() else None
        category = self.store.categories.add_category(name)
        message = (
            f"Category {category.name} already exists"
            if existing is not None
            else f"Added category {category.name}"
        )
        return {
            "success": True,
            "message": message,
            "data": {"category": {"id": str(category.id), "name": category.name}},
        }
