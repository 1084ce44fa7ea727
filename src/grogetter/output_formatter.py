"""Output formatting for CLI and programmatic use."""

import json
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .kv_store import JSONEncoder


class OutputFormatter:
    """Formats output for both Rich terminal and JSON modes."""

    def __init__(self, json_mode: bool = False):
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON instead of Rich formatting
        """
        self.json_mode = json_mode
        self.console = Console()

    def output(self, data: dict[str, Any], message: str = "") -> None:
        """Output data in appropriate format.

        Args:
            data: Data to output
            message: Optional message for Rich mode
        """
        if self.json_mode:
            self._output_json(data)
        else:
            self._output_rich(data, message)

    def _output_json(self, data: dict[str, Any]) -> None:
        """Output as JSON to stdout."""
        print(json.dumps(data, cls=JSONEncoder, indent=2, ensure_ascii=False))

    def _output_rich(self, data: dict[str, Any], message: str) -> None:
        """Output with Rich formatting."""
        if message:
            self.console.print(f"[green]✓[/green] {escape(message)}")

        payload = data.get("data", {})
        if "list" in payload:
            self._render_grocery_list(data)
        elif "lists" in payload:
            self._render_lists(data)
        elif "by_category" in payload:
            self._render_by_category(data)
        elif "share_text" in payload:
            self._render_share_text(data)
        elif "categories" in payload:
            self._render_categories(data)
        elif "item" in payload and isinstance(payload["item"], dict):
            self._render_item(data)

        if data.get("saved") is False:
            self.warning("Changes could not be saved")

    def _render_grocery_list(self, data: dict) -> None:
        """Render a list's items with Rich."""
        list_data = data["data"]["list"]
        items = list_data["items"]

        if not items:
            self.console.print(f"[dim]No items on {escape(list_data['name'])}[/dim]")
            return

        table = Table(title=list_data["name"], show_header=True, header_style="bold cyan")
        table.add_column("#", style="dim", justify="right")
        table.add_column("Item", style="cyan", no_wrap=False)
        table.add_column("Qty", style="magenta", justify="right")
        table.add_column("Category", style="yellow")
        table.add_column("Notes")
        table.add_column("Done", style="blue", justify="center")

        for position, item in enumerate(items, start=1):
            name = escape(item["name"])
            if item.get("is_completed"):
                name = f"[strike dim]{name}[/strike dim]"
            table.add_row(
                str(position),
                name,
                item.get("display_quantity", "").strip() or "-",
                escape(item["category"]["name"]),
                escape(item.get("notes") or ""),
                "[green]✓[/green]" if item.get("is_completed") else "○",
            )

        self.console.print(table)
        self.console.print(f"\nTotal items: {len(items)}")

    def _render_lists(self, data: dict) -> None:
        """Render the overview of all lists."""
        lists = data["data"]["lists"]

        if not lists:
            self.console.print("[dim]No lists yet[/dim]")
            return

        table = Table(title="Grocery Lists", show_header=True, header_style="bold cyan")
        table.add_column("", justify="center")
        table.add_column("Name", style="cyan")
        table.add_column("Items", justify="right")
        table.add_column("Done", justify="right", style="green")
        table.add_column("Created", style="dim")

        for summary in lists:
            table.add_row(
                "[bold green]▶[/bold green]" if summary.get("selected") else "",
                escape(summary["name"]),
                str(summary["total_items"]),
                str(summary["completed_items"]),
                summary["created_at"][:10],
            )

        self.console.print(table)

    def _render_item(self, data: dict) -> None:
        """Render a single item with Rich."""
        item = data["data"]["item"]

        quantity = item.get("display_quantity", "").strip() or "1"
        panel_content = f"""[bold]{escape(item["name"])}[/bold]

Quantity: {escape(quantity)}
Category: {escape(item["category"]["name"])}
Done: {"yes" if item.get("is_completed") else "no"}"""

        if item.get("notes"):
            panel_content += f"\nNotes: {escape(item['notes'])}"

        panel = Panel(panel_content, title="Item Details", border_style="green")
        self.console.print(panel)

    def _render_by_category(self, data: dict) -> None:
        """Render items grouped by category."""
        by_category = data["data"]["by_category"]

        if not by_category:
            self.console.print("[dim]No items on the list[/dim]")
            return

        for category, items in by_category.items():
            self.console.print(f"\n[bold yellow]{escape(category)}[/bold yellow]")
            for item in items:
                mark = "[green]✓[/green]" if item.get("is_completed") else "○"
                quantity = item.get("display_quantity", "").strip()
                suffix = f" ({escape(quantity)})" if quantity else ""
                self.console.print(f"  {mark} {escape(item['name'])}{suffix}")

    def _render_share_text(self, data: dict) -> None:
        """Print share text verbatim."""
        self.console.print(data["data"]["share_text"], markup=False, highlight=False)

    def _render_categories(self, data: dict) -> None:
        """Render the category universe."""
        table = Table(title="Categories", show_header=True, header_style="bold cyan")
        table.add_column("Name", style="yellow")
        table.add_column("Type")
        table.add_column("Items", justify="right")

        for category in data["data"]["categories"]:
            table.add_row(
                escape(category["name"]),
                "custom" if category["is_custom"] else "standard",
                str(category["item_count"]),
            )

        self.console.print(table)

    def error(self, message: str, error_code: str | None = None) -> None:
        """Output error message.

        Args:
            message: Error message
            error_code: Optional error code
        """
        if self.json_mode:
            output = {"success": False, "error": message}
            if error_code:
                output["error_code"] = error_code
            print(json.dumps(output))
        else:
            self.console.print(f"[red]✗ Error:[/red] {escape(message)}")

    def warning(self, message: str) -> None:
        """Output warning message.

        Args:
            message: Warning message
        """
        if self.json_mode:
            print(json.dumps({"warning": message}))
        else:
            self.console.print(f"[yellow]⚠[/yellow] {escape(message)}")
