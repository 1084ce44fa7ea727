"""Id-indexed, ordered collection of grocery lists."""

from collections.abc import Iterable, Iterator
from uuid import UUID

from .models import GroceryList


class ListRepository:
    """Holds the lists in display order with an id index for lookups."""

    def __init__(self, lists: Iterable[GroceryList] = ()):
        self._lists: list[GroceryList] = []
        self._by_id: dict[UUID, GroceryList] = {}
        for grocery_list in lists:
            self.add(grocery_list)

    def __iter__(self) -> Iterator[GroceryList]:
        return iter(self._lists)

    def __len__(self) -> int:
        return len(self._lists)

    def all(self) -> list[GroceryList]:
        return list(self._lists)

    def get(self, list_id: UUID | None) -> GroceryList | None:
        if list_id is None:
            return None
        return self._by_id.get(list_id)

    def contains(self, list_id: UUID | None) -> bool:
        return list_id is not None and list_id in self._by_id

    def first(self) -> GroceryList | None:
        return self._lists[0] if self._lists else None

    def find_by_name(self, name: str) -> GroceryList | None:
        """First list whose name matches, ignoring case."""
        for grocery_list in self._lists:
            if grocery_list.name.lower() == name.lower():
                return grocery_list
        return None

    def add(self, grocery_list: GroceryList) -> None:
        """Append a list. A list whose id is already present is ignored."""
        if grocery_list.id in self._by_id:
            return
        self._lists.append(grocery_list)
        self._by_id[grocery_list.id] = grocery_list

    def remove(self, list_id: UUID) -> GroceryList | None:
        grocery_list = self._by_id.pop(list_id, None)
        if grocery_list is not None:
            self._lists = [existing for existing in self._lists if existing is not grocery_list]
        return grocery_list

    def replace(self, grocery_list: GroceryList) -> bool:
        """Swap in a list for the stored one with the same id.

        Returns:
            False if no list has that id
        """
        current = self._by_id.get(grocery_list.id)
        if current is None:
            return False
        index = next(i for i, existing in enumerate(self._lists) if existing is current)
        self._lists[index] = grocery_list
        self._by_id[grocery_list.id] = grocery_list
        return True
