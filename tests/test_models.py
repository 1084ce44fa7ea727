"""Tests for data models."""

from datetime import datetime
from uuid import UUID

import pytest
from pydantic import ValidationError

from grogetter.kv_store import decode_records, encode_records
from grogetter.models import (
    STANDARD_CATEGORIES,
    GroceryCategory,
    GroceryItem,
    GroceryList,
    QuantityUnit,
    SaveResult,
    clean_quantity,
    standard_category,
)


class TestGroceryCategory:
    """Tests for category identity."""

    def test_equal_ignoring_case(self):
        """Names differing only in case are the same category."""
        assert GroceryCategory(name="Snacks") == GroceryCategory(name="sNACKS")

    def test_hash_ignoring_case(self):
        """Equal categories hash identically."""
        a = GroceryCategory(name="Snacks")
        b = GroceryCategory(name="SNACKS")
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_ids_do_not_affect_equality(self):
        """Different ids with the same name still compare equal."""
        a = GroceryCategory(name="Deli")
        b = GroceryCategory(name="Deli")
        assert a.id != b.id
        assert a == b

    def test_different_names_not_equal(self):
        assert GroceryCategory(name="Deli") != GroceryCategory(name="Dairy")

    def test_standard_category_not_custom(self):
        assert GroceryCategory(name="produce").is_custom is False

    def test_unknown_category_is_custom(self):
        assert GroceryCategory(name="Pet Food").is_custom is True

    def test_standard_set(self):
        names = [c.name for c in STANDARD_CATEGORIES]
        assert names == ["Produce", "Bakery", "Deli", "Butcher", "Dairy", "Aisles", "Frozen"]

    def test_standard_category_lookup(self):
        assert standard_category("FROZEN").name == "Frozen"
        assert standard_category("Pet Food") is None

    def test_category_is_frozen(self):
        category = GroceryCategory(name="Deli")
        with pytest.raises(ValidationError):
            category.name = "Other"


class TestQuantityUnit:
    """Tests for quantity units."""

    def test_labels(self):
        assert QuantityUnit.PIECE.label == "piece(s)"
        assert QuantityUnit.KILOGRAM.label == "kg"
        assert QuantityUnit.LITER.label == "L"
        assert QuantityUnit.BOX.label == "box(es)"

    def test_every_unit_has_label(self):
        assert len(QuantityUnit) == 16
        assert all(unit.label for unit in QuantityUnit)

    def test_parse_value(self):
        assert QuantityUnit.parse("kilogram") == QuantityUnit.KILOGRAM

    def test_parse_label_case_insensitive(self):
        assert QuantityUnit.parse("KG") == QuantityUnit.KILOGRAM
        assert QuantityUnit.parse("tbsp") == QuantityUnit.TABLESPOON
        assert QuantityUnit.parse("l") == QuantityUnit.LITER

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown unit"):
            QuantityUnit.parse("furlong")


class TestGroceryItem:
    """Tests for GroceryItem model."""

    def test_defaults(self):
        item = GroceryItem(name="Milk")
        assert isinstance(item.id, UUID)
        assert item.category.name == "Produce"
        assert item.quantity == 1
        assert item.unit == QuantityUnit.PIECE
        assert item.is_completed is False
        assert item.notes == ""

    def test_non_positive_quantity_rejected(self):
        with pytest.raises(ValidationError):
            GroceryItem(name="Milk", quantity=0)
        with pytest.raises(ValidationError):
            GroceryItem(name="Milk", quantity=-2)

    def test_display_quantity_single_piece(self):
        assert GroceryItem(name="Milk").display_quantity == ""

    def test_display_quantity_pieces(self):
        """Pieces show the whole count with a trailing space."""
        assert GroceryItem(name="Eggs", quantity=12).display_quantity == "12 "

    def test_display_quantity_pieces_truncates(self):
        assert GroceryItem(name="Lemons", quantity=2.5).display_quantity == "2 "

    def test_display_quantity_whole_measure(self):
        item = GroceryItem(name="Flour", quantity=2, unit=QuantityUnit.KILOGRAM)
        assert item.display_quantity == "2 kg"

    def test_display_quantity_fractional_measure(self):
        item = GroceryItem(name="Juice", quantity=1.5, unit=QuantityUnit.LITER)
        assert item.display_quantity == "1.5 L"

    def test_display_quantity_single_non_piece(self):
        """A quantity of one is only hidden for pieces."""
        item = GroceryItem(name="Rice", quantity=1, unit=QuantityUnit.BAG)
        assert item.display_quantity == "1 bag(s)"

    def test_clean_quantity(self):
        assert clean_quantity(3.0) == "3"
        assert clean_quantity(0.25) == "0.25"


class TestGroceryList:
    """Tests for in-memory list mutations."""

    @pytest.fixture
    def grocery_list(self, sample_items):
        return GroceryList(name="Weekly", items=list(sample_items))

    def test_defaults(self):
        grocery_list = GroceryList(name="Weekly")
        assert grocery_list.items == []
        assert grocery_list.is_default is False
        assert isinstance(grocery_list.created_at, datetime)

    def test_add_item(self, grocery_list):
        grocery_list.add_item(GroceryItem(name="Eggs"))
        assert grocery_list.items[-1].name == "Eggs"

    def test_delete_items_returns_categories(self, grocery_list):
        removed = grocery_list.delete_items({0, 2})
        assert [item.name for item in grocery_list.items] == ["Flour"]
        assert removed == {GroceryCategory(name="Dairy"), GroceryCategory(name="vegan")}

    def test_delete_items_ignores_out_of_range(self, grocery_list):
        removed = grocery_list.delete_items([7, -1])
        assert removed == set()
        assert len(grocery_list.items) == 3

    def test_toggle_item_completion(self, grocery_list):
        item = grocery_list.items[1]
        grocery_list.toggle_item_completion(item.id)
        assert item.is_completed is True
        grocery_list.toggle_item_completion(item.id)
        assert item.is_completed is False

    def test_update_item_replaces_by_id(self, grocery_list):
        original = grocery_list.items[0]
        updated = original.model_copy(update={"name": "Oat Milk"})
        grocery_list.update_item(updated)
        assert grocery_list.items[0].name == "Oat Milk"
        assert grocery_list.items[0].id == original.id

    def test_update_unknown_item_is_noop(self, grocery_list):
        grocery_list.update_item(GroceryItem(name="Ghost"))
        assert [item.name for item in grocery_list.items] == ["Milk", "Flour", "Tofu"]

    def test_move_first_to_end(self, grocery_list):
        grocery_list.move_items([0], 3)
        assert [item.name for item in grocery_list.items] == ["Flour", "Tofu", "Milk"]

    def test_move_last_to_front(self, grocery_list):
        grocery_list.move_items([2], 0)
        assert [item.name for item in grocery_list.items] == ["Tofu", "Milk", "Flour"]

    def test_move_several(self, grocery_list):
        grocery_list.add_item(GroceryItem(name="Eggs"))
        grocery_list.move_items([0, 2], 4)
        assert [item.name for item in grocery_list.items] == ["Flour", "Eggs", "Milk", "Tofu"]

    def test_move_to_own_position_is_noop(self, grocery_list):
        grocery_list.move_items([1], 1)
        assert [item.name for item in grocery_list.items] == ["Milk", "Flour", "Tofu"]

    def test_clear_completed_items(self, grocery_list):
        grocery_list.items[0].is_completed = True
        grocery_list.items[2].is_completed = True
        removed = grocery_list.clear_completed_items()
        assert [item.name for item in grocery_list.items] == ["Flour"]
        assert removed == {GroceryCategory(name="Dairy"), GroceryCategory(name="Vegan")}

    def test_round_trip(self, grocery_list):
        """Encoding then decoding reproduces an equal collection."""
        grocery_list.items[1].is_completed = True
        lists = [grocery_list, GroceryList(name="Party", is_default=True)]

        decoded = decode_records(encode_records(lists), GroceryList)

        assert decoded == lists
        assert decoded[0].items[1].unit == QuantityUnit.KILOGRAM
        assert decoded[0].items[0].category.id == grocery_list.items[0].category.id


class TestSaveResult:
    def test_default_ok(self):
        assert SaveResult().ok is True

    def test_failed(self):
        result = SaveResult.failed(OSError("disk full"))
        assert result.ok is False
        assert result.error == "disk full"
