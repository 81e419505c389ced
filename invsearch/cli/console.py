"""Console output for the CLI.

Provides a Console class that wraps rich for consistent output.
All CLI output should go through this module.
"""

from typing import Any

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.table import Table

from invsearch.application.pipeline import SearchViewState
from invsearch.domain.inventory.model import PeakAvailability

RESULT_COLUMNS: list[tuple[str, str]] = [
    ("part_number", "Part Number"),
    ("supplier_sku", "Supplier SKU"),
    ("description", "Description"),
    ("branch", "Branch"),
    ("available_qty", "Available"),
    ("uom", "UOM"),
    ("lead_time_days", "Lead Time (days)"),
    ("last_purchase_date", "Last Purchase"),
]


class Console:
    """CLI output manager wrapping rich."""

    def __init__(
        self,
        *,
        force_terminal: bool | None = None,
        quiet: bool = False,
    ) -> None:
        self._console = RichConsole(force_terminal=force_terminal, stderr=False)
        self._err_console = RichConsole(force_terminal=force_terminal, stderr=True)
        self._quiet = quiet

    # -------------------------------------------------------------------------
    # Status messages
    # -------------------------------------------------------------------------

    def error(self, message: str, *, hint: str | None = None) -> None:
        """Print an error message to stderr."""
        self._err_console.print(f"[red]✗[/red] {message}")
        if hint:
            self._err_console.print(f"  [dim]{hint}[/dim]")

    def info(self, message: str) -> None:
        """Print an info message (suppressed in quiet mode)."""
        if not self._quiet:
            self._console.print(f"[dim]{message}[/dim]")

    def print(self, *args: Any, **kwargs: Any) -> None:
        self._console.print(*args, **kwargs)

    # -------------------------------------------------------------------------
    # Search results
    # -------------------------------------------------------------------------

    def search_results(self, state: SearchViewState) -> None:
        """Print the current page of results with a pager line."""
        if state.info_message:
            self.info(state.info_message)
            return

        sort = f" sorted by {state.current_sort}" if state.current_sort else ""
        table = Table(
            title=f"{state.total} items{sort}",
            show_header=True,
            header_style="bold",
        )
        for _, header in RESULT_COLUMNS:
            table.add_column(header)
        for item in state.items:
            row = item.model_dump()
            table.add_row(*(_cell(row.get(key)) for key, _ in RESULT_COLUMNS))
        self._console.print(table)
        self.info(f"Page {state.current_page + 1} of {state.total_pages}")

    def peak_availability(self, peak: PeakAvailability) -> None:
        if not peak.branches:
            content = "[dim]No stock at any branch[/dim]"
        else:
            content = "\n".join(f"[cyan]{b.branch}[/cyan]  {b.qty}" for b in peak.branches)
        self._console.print(
            Panel(
                content,
                title=f"[bold]{peak.part_number}[/bold]",
                subtitle=f"[dim]{peak.total_available} available[/dim]",
                border_style="blue",
                padding=(1, 2),
            )
        )


def _cell(value: Any) -> str:
    if value is None:
        return "-"
    if hasattr(value, "strftime"):
        return value.strftime("%Y-%m-%d")
    return str(value)
