"""Plain-text renderings of a grocery list for sharing."""

from collections.abc import Iterable

from .models import GroceryCategory, GroceryItem, GroceryList


def sort_for_display(items: Iterable[GroceryItem]) -> list[GroceryItem]:
    """Incomplete items first, then alphabetical."""
    return sorted(items, key=lambda item: (item.is_completed, item.name))


def group_by_category(items: Iterable[GroceryItem]) -> dict[GroceryCategory, list[GroceryItem]]:
    """Group items by category, each group in display order."""
    grouped: dict[GroceryCategory, list[GroceryItem]] = {}
    for item in items:
        grouped.setdefault(item.category, []).append(item)
    return {category: sort_for_display(group) for category, group in grouped.items()}


def _quantity_prefix(item: GroceryItem) -> str:
    text = item.display_quantity
    if text and not text.endswith(" "):
        text += " "
    return text


def format_share_text(grocery_list: GroceryList) -> str:
    """Render a list as a header line followed by one line per item.

    Example:
        Weekend
        - Milk
        ✓ 2 kg Flour (bread flour)
    """
    lines = [grocery_list.name]
    for item in grocery_list.items:
        mark = "✓" if item.is_completed else "-"
        line = f"{mark} {_quantity_prefix(item)}{item.name}"
        if item.notes:
            line += f" ({item.notes})"
        lines.append(line)
    return "\n".join(lines)


def format_share_markdown(
    grocery_list: GroceryList, categories: Iterable[GroceryCategory]
) -> str:
    """Render a list as markdown, one section per category in use.

    Sections follow the order of categories. Categories missing from that
    order come last, in order of first use. Items within a section are
    sorted by name.
    """
    by_category: dict[GroceryCategory, list[GroceryItem]] = {}
    for item in grocery_list.items:
        by_category.setdefault(item.category, []).append(item)

    sections: list[tuple[GroceryCategory, list[GroceryItem]]] = []
    for category in categories:
        items = by_category.pop(category, None)
        if items:
            sections.append((category, items))
    sections.extend(by_category.items())

    content = f"# {grocery_list.name}\n\n"
    for category, items in sections:
        content += f"## {category.name}\n"
        for item in sorted(items, key=lambda i: i.name):
            status = "✅" if item.is_completed else "◻️"
            content += f"- {status} {_quantity_prefix(item)}{item.name}\n"
            if item.notes:
                content += f"  - {item.notes}\n"
        content += "\n"
    return content
