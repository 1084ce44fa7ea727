"""Core data models for GroGetter."""

from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GroceryCategory(BaseModel):
    """A named item category.

    Two categories are the same category when their names match ignoring
    case, regardless of their ids.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    name: str

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GroceryCategory):
            return NotImplemented
        return self.name.lower() == other.name.lower()

    def __hash__(self) -> int:
        return hash(self.name.lower())

    @property
    def is_custom(self) -> bool:
        """Whether this category is user-defined rather than built in."""
        return self not in STANDARD_CATEGORIES


STANDARD_CATEGORIES: tuple[GroceryCategory, ...] = tuple(
    GroceryCategory(name=name)
    for name in ("Produce", "Bakery", "Deli", "Butcher", "Dairy", "Aisles", "Frozen")
)

DEFAULT_CATEGORY_NAME = "Produce"


def standard_category(name: str) -> GroceryCategory | None:
    """Return the built-in category matching name, if any."""
    for category in STANDARD_CATEGORIES:
        if category.name.lower() == name.lower():
            return category
    return None


def _default_category() -> GroceryCategory:
    return GroceryCategory(name=DEFAULT_CATEGORY_NAME)


class QuantityUnit(str, Enum):
    """Units an item quantity can be measured in."""

    PIECE = "piece"
    GRAM = "gram"
    KILOGRAM = "kilogram"
    MILLILITER = "milliliter"
    LITER = "liter"
    CUP = "cup"
    TABLESPOON = "tablespoon"
    TEASPOON = "teaspoon"
    PINCH = "pinch"
    BUNCH = "bunch"
    PACK = "pack"
    CAN = "can"
    BOTTLE = "bottle"
    JAR = "jar"
    BOX = "box"
    BAG = "bag"

    @property
    def label(self) -> str:
        """Short display label."""
        return _UNIT_LABELS[self]

    @classmethod
    def parse(cls, text: str) -> "QuantityUnit":
        """Parse a unit from its value or its display label.

        Raises:
            ValueError: If text names no known unit
        """
        needle = text.strip().lower()
        for unit in cls:
            if needle in (unit.value, unit.label.lower()):
                return unit
        raise ValueError(f"Unknown unit '{text}'")


_UNIT_LABELS = {
    QuantityUnit.PIECE: "piece(s)",
    QuantityUnit.GRAM: "g",
    QuantityUnit.KILOGRAM: "kg",
    QuantityUnit.MILLILITER: "ml",
    QuantityUnit.LITER: "L",
    QuantityUnit.CUP: "cup(s)",
    QuantityUnit.TABLESPOON: "tbsp",
    QuantityUnit.TEASPOON: "tsp",
    QuantityUnit.PINCH: "pinch(es)",
    QuantityUnit.BUNCH: "bunch(es)",
    QuantityUnit.PACK: "pack(s)",
    QuantityUnit.CAN: "can(s)",
    QuantityUnit.BOTTLE: "bottle(s)",
    QuantityUnit.JAR: "jar(s)",
    QuantityUnit.BOX: "box(es)",
    QuantityUnit.BAG: "bag(s)",
}


def clean_quantity(quantity: float) -> str:
    """Format a quantity without a trailing '.0' for whole numbers."""
    if quantity % 1 == 0:
        return f"{quantity:.0f}"
    return str(quantity)


class GroceryItem(BaseModel):
    """A single entry on a grocery list."""

    id: UUID = Field(default_factory=uuid4)
    name: str
    category: GroceryCategory = Field(default_factory=_default_category)
    quantity: float = 1
    unit: QuantityUnit = QuantityUnit.PIECE
    is_completed: bool = False
    notes: str = ""

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Quantity must be positive")
        return v

    @property
    def display_quantity(self) -> str:
        """Quantity text shown next to the item name.

        Empty for a single piece, since that is what an unqualified
        item name already means.
        """
        if self.unit == QuantityUnit.PIECE:
            if self.quantity == 1:
                return ""
            return f"{int(self.quantity)} "
        return f"{clean_quantity(self.quantity)} {self.unit.label}"


class GroceryList(BaseModel):
    """A named, ordered collection of items."""

    id: UUID = Field(default_factory=uuid4)
    name: str
    items: list[GroceryItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)
    is_default: bool = False

    def get_item(self, item_id: UUID) -> GroceryItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def add_item(self, item: GroceryItem) -> None:
        self.items.append(item)

    def delete_items(self, indices: Iterable[int]) -> set[GroceryCategory]:
        """Remove the items at the given positions.

        Out-of-range positions are ignored.

        Returns:
            Categories of the removed items
        """
        doomed = {i for i in indices if 0 <= i < len(self.items)}
        removed = {self.items[i].category for i in doomed}
        self.items = [item for i, item in enumerate(self.items) if i not in doomed]
        return removed

    def toggle_item_completion(self, item_id: UUID) -> None:
        item = self.get_item(item_id)
        if item is not None:
            item.is_completed = not item.is_completed

    def update_item(self, item: GroceryItem) -> None:
        """Replace the stored item that has the same id."""
        for i, existing in enumerate(self.items):
            if existing.id == item.id:
                self.items[i] = item
                return

    def move_items(self, source: Iterable[int], destination: int) -> None:
        """Move the items at source positions so they land before destination.

        destination is a position in the list as it was before the move,
        so moving the first item to the end uses len(items).
        """
        picked = sorted({i for i in source if 0 <= i < len(self.items)})
        if not picked:
            return
        destination = max(0, min(destination, len(self.items)))
        moving = [self.items[i] for i in picked]
        remaining = [item for i, item in enumerate(self.items) if i not in picked]
        offset = destination - sum(1 for i in picked if i < destination)
        remaining[offset:offset] = moving
        self.items = remaining

    def clear_completed_items(self) -> set[GroceryCategory]:
        """Remove completed items.

        Returns:
            Categories of the removed items
        """
        removed = {item.category for item in self.items if item.is_completed}
        self.items = [item for item in self.items if not item.is_completed]
        return removed


class SaveResult(BaseModel):
    """Outcome of a persistence write."""

    ok: bool = True
    error: str | None = None

    @classmethod
    def failed(cls, error: Exception | str) -> "SaveResult":
        return cls(ok=False, error=str(error))
