"""Console output formatting for deploysync."""

import json
from typing import Any, Optional

from rich.console import Console
from rich.table import Table


class OutputFormatter:
    """Formats user-facing output with Rich.

    Informational output goes to stdout and is suppressed in quiet or JSON
    mode. Warnings and errors always go to stderr.
    """

    def __init__(self, json_output: bool = False, quiet: bool = False):
        """Initialize output formatter.

        Args:
            json_output: Emit machine-readable JSON instead of text
            quiet: Suppress non-essential output
        """
        self.json_output = json_output
        self.quiet = quiet
        self.console = Console(highlight=False, soft_wrap=True)
        self.err_console = Console(stderr=True, highlight=False, soft_wrap=True)

    @property
    def _text_enabled(self) -> bool:
        return not (self.quiet or self.json_output)

    def print(self, message: str = "") -> None:
        """Print a plain line."""
        if self._text_enabled:
            self.console.print(message, markup=False)

    def info(self, message: str) -> None:
        """Print an informational message."""
        if self._text_enabled:
            self.console.print(message, markup=False)

    def success(self, message: str) -> None:
        """Print a success message in green."""
        if self._text_enabled:
            self.console.print(message, style="green", markup=False)

    def warning(self, message: str) -> None:
        """Print a warning in yellow to stderr."""
        self.err_console.print(message, style="yellow", markup=False)

    def error(self, message: str) -> None:
        """Print an error in red to stderr."""
        self.err_console.print(f"Error: {message}", style="bold red", markup=False)

    def print_summary(self, title: str, items: list[tuple[str, str]]) -> None:
        """Print a titled list of label/value pairs.

        Args:
            title: Summary title
            items: (label, value) pairs
        """
        if not self._text_enabled:
            return
        self.console.print("")
        self.console.print(title, style="bold", markup=False)
        width = max((len(label) for label, _ in items), default=0) + 1
        for label, value in items:
            self.console.print(f"  {label + ':':<{width}} {value}", markup=False)

    def output_json(self, data: Any) -> None:
        """Write data as indented JSON to stdout."""
        self.console.print_json(json.dumps(data, default=str))

    def output_table(
        self,
        rows: list[dict[str, Any]],
        columns: list[str],
        headers: Optional[dict[str, str]] = None,
        title: Optional[str] = None,
    ) -> None:
        """Render rows as a table.

        Args:
            rows: One dict per row
            columns: Keys to show, in order
            headers: Optional display names per key
            title: Optional table title
        """
        if self.json_output:
            self.output_json(rows)
            return
        if self.quiet:
            return
        headers = headers or {}
        table = Table(title=title)
        for column in columns:
            table.add_column(headers.get(column, column))
        for row in rows:
            table.add_row(*(str(row.get(column, "")) for column in columns))
        self.console.print(table)
