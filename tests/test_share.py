"""Tests for share text rendering."""

import pytest

from grogetter.models import (
    STANDARD_CATEGORIES,
    GroceryCategory,
    GroceryItem,
    GroceryList,
    QuantityUnit,
)
from grogetter.share import (
    format_share_markdown,
    format_share_text,
    group_by_category,
    sort_for_display,
)


@pytest.fixture
def weekend():
    return GroceryList(
        name="Weekend",
        items=[
            GroceryItem(name="Milk"),
            GroceryItem(
                name="Flour",
                quantity=2,
                unit=QuantityUnit.KILOGRAM,
                is_completed=True,
                notes="bread flour",
            ),
            GroceryItem(name="Eggs", quantity=12, category=GroceryCategory(name="Dairy")),
        ],
    )


class TestShareText:
    def test_plain_text(self, weekend):
        assert format_share_text(weekend) == (
            "Weekend\n"
            "- Milk\n"
            "✓ 2 kg Flour (bread flour)\n"
            "- 12 Eggs"
        )

    def test_empty_list(self):
        assert format_share_text(GroceryList(name="Nothing")) == "Nothing"


class TestShareMarkdown:
    def test_grouped_by_category(self, weekend):
        text = format_share_markdown(weekend, STANDARD_CATEGORIES)
        assert text == (
            "# Weekend\n\n"
            "## Produce\n"
            "- ✅ 2 kg Flour\n"
            "  - bread flour\n"
            "- ◻️ Milk\n"
            "\n"
            "## Dairy\n"
            "- ◻️ 12 Eggs\n"
            "\n"
        )

    def test_unused_categories_skipped(self, weekend):
        text = format_share_markdown(weekend, STANDARD_CATEGORIES)
        assert "## Bakery" not in text

    def test_custom_category_included_when_in_universe(self):
        snacks = GroceryCategory(name="Snacks")
        grocery_list = GroceryList(name="Party", items=[GroceryItem(name="Chips", category=snacks)])
        text = format_share_markdown(grocery_list, list(STANDARD_CATEGORIES) + [snacks])
        assert "## Snacks\n- ◻️ Chips" in text

    def test_category_outside_universe_kept(self):
        vegan = GroceryCategory(name="Vegan")
        grocery_list = GroceryList(
            name="Weekend",
            items=[GroceryItem(name="Tofu", category=vegan), GroceryItem(name="Milk")],
        )
        text = format_share_markdown(grocery_list, STANDARD_CATEGORIES)
        assert text == (
            "# Weekend\n\n"
            "## Produce\n"
            "- ◻️ Milk\n"
            "\n"
            "## Vegan\n"
            "- ◻️ Tofu\n"
            "\n"
        )


class TestDisplayOrdering:
    def test_sort_open_first_then_name(self, weekend):
        names = [item.name for item in sort_for_display(weekend.items)]
        assert names == ["Eggs", "Milk", "Flour"]

    def test_group_by_category(self, weekend):
        grouped = group_by_category(weekend.items)
        assert [i.name for i in grouped[GroceryCategory(name="produce")]] == ["Milk", "Flour"]
        assert [i.name for i in grouped[GroceryCategory(name="Dairy")]] == ["Eggs"]
