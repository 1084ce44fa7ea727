"""CLI entry point for GroGetter."""

import logging
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from .config import ConfigManager
from .grocery_store import GroceryStore
from .kv_store import BackendType, create_kv_store
from .list_manager import ItemNotFoundError, ListManager, ListNotFoundError
from .models import QuantityUnit
from .output_formatter import OutputFormatter

app = typer.Typer(
    name="grogetter",
    help="Grocery lists from the command line",
    no_args_is_help=True,
)

# Global state for formatter and config (set by callback)
formatter: OutputFormatter = OutputFormatter()
config: ConfigManager | None = None
list_manager: ListManager | None = None


def get_config() -> ConfigManager:
    """Get or create ConfigManager instance."""
    global config
    if config is None:
        config = ConfigManager()
    return config


def build_list_manager(
    data_dir: Path | None = None, backend: BackendType | None = None
) -> ListManager:
    """Create a ListManager over a freshly loaded store.

    CLI values override config values, which override defaults.
    """
    cfg = get_config()
    kv_store = create_kv_store(
        backend=backend or BackendType(cfg.data.backend),
        data_dir=data_dir or cfg.data.storage_dir,
    )
    store = GroceryStore(
        kv_store,
        default_list_name=cfg.defaults.list_name,
        seed_default_list=cfg.defaults.seed_default_list,
    )
    return ListManager(
        store,
        default_category=cfg.defaults.category,
        default_unit=QuantityUnit.parse(cfg.defaults.unit),
    )


def get_list_manager() -> ListManager:
    """Get or create ListManager instance."""
    global list_manager
    if list_manager is None:
        list_manager = build_list_manager()
    return list_manager


def fail(e: Exception) -> NoReturn:
    """Report an exception and exit with status 1."""
    if isinstance(e, ListNotFoundError):
        formatter.error(str(e), error_code="LIST_NOT_FOUND")
    elif isinstance(e, ItemNotFoundError):
        formatter.error(str(e), error_code="ITEM_NOT_FOUND")
    elif isinstance(e, ValueError):
        formatter.error(str(e), error_code="INVALID_INPUT")
    else:
        formatter.error(str(e))
    raise typer.Exit(code=1)


ListOption = Annotated[
    str | None, typer.Option("--list", "-l", help="List name or ID (default: selected list)")
]


@app.callback()
def main(
    json_output: Annotated[
        bool, typer.Option("--json", help="Output as JSON for programmatic use")
    ] = False,
    data_dir: Annotated[Path | None, typer.Option("--data-dir", help="Data directory path")] = None,
    backend: Annotated[
        BackendType | None, typer.Option("--backend", help="Storage backend")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """GroGetter CLI - Keep your grocery lists in order."""
    global formatter, config, list_manager

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
        )

    formatter = OutputFormatter(json_mode=json_output)

    # Load config early
    config = ConfigManager()
    list_manager = build_list_manager(data_dir=data_dir, backend=backend)


# --- Lists ---


@app.command(name="lists")
def show_lists() -> None:
    """Show all grocery lists."""
    try:
        result = get_list_manager().get_lists()
    except Exception as e:
        fail(e)
    formatter.output(result)


@app.command(name="new-list")
def new_list(
    name: Annotated[str, typer.Argument(help="Name of the new list")],
) -> None:
    """Create a new grocery list."""
    try:
        result = get_list_manager().create_list(name)
    except Exception as e:
        fail(e)
    formatter.output(result, result["message"])


@app.command(name="delete-list")
def delete_list(
    list_ref: Annotated[str, typer.Argument(help="List name or ID")],
) -> None:
    """Delete a grocery list and its items."""
    try:
        result = get_list_manager().delete_list(list_ref)
    except Exception as e:
        fail(e)
    formatter.output(result, result["message"])


@app.command(name="rename-list")
def rename_list(
    list_ref: Annotated[str, typer.Argument(help="List name or ID")],
    new_name: Annotated[str, typer.Argument(help="New list name")],
) -> None:
    """Rename a grocery list."""
    try:
        result = get_list_manager().rename_list(list_ref, new_name)
    except Exception as e:
        fail(e)
    formatter.output(result, result["message"])


@app.command()
def select(
    list_ref: Annotated[str, typer.Argument(help="List name or ID")],
) -> None:
    """Select the list other commands work on by default."""
    try:
        result = get_list_manager().select_list(list_ref)
    except Exception as e:
        fail(e)
    formatter.output(result, result["message"])


@app.command()
def show(
    list_ref: ListOption = None,
    category: Annotated[
        str | None, typer.Option("--category", "-c", help="Filter by category")
    ] = None,
    done: Annotated[
        bool | None, typer.Option("--done/--open", help="Only completed or only open items")
    ] = None,
    sort: Annotated[bool, typer.Option("--sort", help="Open items first, then by name")] = False,
    by_category: Annotated[bool, typer.Option("--by-category", help="Group by category")] = False,
) -> None:
    """View the items on a list."""
    try:
        manager = get_list_manager()
        if by_category:
            result = manager.get_by_category(list_ref)
        else:
            result = manager.get_list(list_ref, category=category, completed=done, sort=sort)
    except Exception as e:
        fail(e)
    formatter.output(result)


@app.command()
def share(
    list_ref: ListOption = None,
    markdown: Annotated[
        bool, typer.Option("--markdown", "-m", help="Markdown grouped by category")
    ] = False,
) -> None:
    """Print a list as shareable text."""
    try:
        result = get_list_manager().share(list_ref, markdown=markdown)
    except Exception as e:
        fail(e)
    formatter.output(result)


@app.command()
def clear(list_ref: ListOption = None) -> None:
    """Remove completed items from a list."""
    try:
        result = get_list_manager().clear_completed(list_ref)
    except Exception as e:
        fail(e)
    formatter.output(result, result["message"])


# --- Items ---


@app.command()
def add(
    item: Annotated[str, typer.Argument(help="Item name to add")],
    quantity: Annotated[float, typer.Option("--quantity", "-q", help="Quantity to buy")] = 1,
    unit: Annotated[
        str | None, typer.Option("--unit", "-u", help="Unit, e.g. kg, piece, bottle")
    ] = None,
    category: Annotated[
        str | None, typer.Option("--category", "-c", help="Category name")
    ] = None,
    notes: Annotated[str, typer.Option("--notes", "-n", help="Additional notes")] = "",
    list_ref: ListOption = None,
) -> None:
    """Add an item to a list."""
    try:
        result = get_list_manager().add_item(
            name=item,
            quantity=quantity,
            unit=unit,
            category=category,
            notes=notes,
            list_ref=list_ref,
        )
    except Exception as e:
        fail(e)
    formatter.output(result, result["message"])


@app.command()
def remove(
    item: Annotated[str, typer.Argument(help="Item name, position or ID")],
    list_ref: ListOption = None,
) -> None:
    """Remove an item from a list."""
    try:
        result = get_list_manager().remove_item(item, list_ref=list_ref)
    except Exception as e:
        fail(e)
    formatter.output(result, result["message"])


@app.command()
def toggle(
    item: Annotated[str, typer.Argument(help="Item name, position or ID")],
    list_ref: ListOption = None,
) -> None:
    """Check an item off, or uncheck it."""
    try:
        result = get_list_manager().toggle_item(item, list_ref=list_ref)
    except Exception as e:
        fail(e)
    formatter.output(result, result["message"])


@app.command()
def update(
    item: Annotated[str, typer.Argument(help="Item name, position or ID")],
    name: Annotated[str | None, typer.Option("--name", help="New name")] = None,
    quantity: Annotated[float | None, typer.Option("--quantity", "-q", help="New quantity")] = None,
    unit: Annotated[str | None, typer.Option("--unit", "-u", help="New unit")] = None,
    category: Annotated[str | None, typer.Option("--category", "-c", help="New category")] = None,
    notes: Annotated[str | None, typer.Option("--notes", "-n", help="New notes")] = None,
    done: Annotated[
        bool | None, typer.Option("--done/--not-done", help="Set completion state")
    ] = None,
    list_ref: ListOption = None,
) -> None:
    """Update an existing item."""
    try:
        result = get_list_manager().update_item(
            item,
            list_ref=list_ref,
            name=name,
            quantity=quantity,
            unit=unit,
            category=category,
            notes=notes,
            completed=done,
        )
    except Exception as e:
        fail(e)
    formatter.output(result, result["message"])


@app.command()
def move(
    item: Annotated[str, typer.Argument(help="Item name, position or ID")],
    position: Annotated[int, typer.Argument(help="New 1-based position")],
    list_ref: ListOption = None,
) -> None:
    """Move an item to another position in its list."""
    try:
        result = get_list_manager().move_item(item, position, list_ref=list_ref)
    except Exception as e:
        fail(e)
    formatter.output(result, result["message"])


# Category subcommand group
categories_app = typer.Typer(help="Category commands")
app.add_typer(categories_app, name="categories")


@categories_app.command("list")
def categories_list() -> None:
    """Show standard and custom categories."""
    try:
        result = get_list_manager().get_categories()
    except Exception as e:
        fail(e)
    formatter.output(result)


@categories_app.command("add")
def categories_add(
    name: Annotated[str, typer.Argument(help="Category name")],
) -> None:
    """Add a custom category."""
    try:
        result = get_list_manager().add_category(name)
    except Exception as e:
        fail(e)
    formatter.output(result, result["message"])


if __name__ == "__main__":
    app()
