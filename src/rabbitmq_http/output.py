"""Terminal output for the ``rabbitmq-http`` CLI and client diagnostics.

Data (resources, tables, exported definitions) goes to **stdout**;
everything else (status lines, request traces, warnings, errors) goes to
**stderr**, so ``rabbitmq-http queues list --json | jq`` only ever sees
JSON.

The client façades report each request and response through
:func:`get_output` at ``debug`` level, which is silent unless the manager
was created with ``verbose=True`` (the CLI's ``--verbose`` flag).
Credentials never reach this module.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Iterable, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from rabbitmq_http.models.common import ArgumentsMap, Unrecognized, WireModel, render_json


class OutputFormat(str, Enum):
    """How data is rendered on stdout.

    ``AUTO`` becomes ``RICH`` on an interactive, colour-capable terminal
    and ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


def to_jsonable(data: Any) -> Any:
    """Convert resource models (and lists of them) into plain JSON values."""
    if isinstance(data, WireModel):
        return data.encode()
    if isinstance(data, ArgumentsMap):
        return data.to_dict()
    if isinstance(data, (list, tuple)):
        return [to_jsonable(item) for item in data]
    if isinstance(data, dict):
        return {key: to_jsonable(value) for key, value in data.items()}
    return data


def cell(value: Any) -> str:
    """Render one table cell."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, (Enum, Unrecognized)):
        return str(value.value)
    if isinstance(value, (list, tuple)):
        return ", ".join(cell(item) for item in value)
    if isinstance(value, (WireModel, ArgumentsMap, dict)):
        return render_json(to_jsonable(value))
    return str(value)


class OutputManager:
    """Routes data to stdout and diagnostics to stderr in the chosen format.

    Args:
        format: Output format for data.
        no_color: Disable colour and Rich markup.
        quiet: Suppress informational messages (errors still print).
        verbose: Print debug messages, including one line per HTTP request.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _color_disabled_by_env()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            rich_ok = _is_tty() and not self._no_color
            self._format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def format_response(self, data: Any) -> None:
        """Print a decoded resource, list of resources, or JSON value.

        In plain mode a mapping prints as ``key<TAB>value`` lines and a list
        prints one item per line.
        """
        data = to_jsonable(data)
        if self._format == OutputFormat.JSON:
            self.print_data(render_json(data, indent=2, default=str))
        elif self._format == OutputFormat.PLAIN:
            self._print_plain(data)
        else:
            rendered = render_json(data, indent=2, default=str)
            self._stdout.print(Syntax(rendered, "json", theme="monokai", word_wrap=True))

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def print_table(
        self,
        headers: Sequence[str],
        rows: Iterable[Sequence[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows as a Rich table, tab-separated lines, or a JSON array of objects."""
        rows = [list(row) for row in rows]
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
        elif self._format == OutputFormat.PLAIN:
            self.print_data("\t".join(headers))
            for row in rows:
                self.print_data("\t".join(row))
        else:
            table = Table(title=title, show_header=True, header_style="bold cyan")
            for header in headers:
                table.add_column(header)
            for row in rows:
                table.add_row(*row)
            self._stdout.print(table)

    def print_resources(
        self,
        resources: Sequence[Any],
        columns: Sequence[str],
        title: Optional[str] = None,
    ) -> None:
        """Print selected attributes of each resource as a table.

        In JSON mode the full encoded resources are printed instead, so no
        field is lost to the column selection.
        """
        if self._format == OutputFormat.JSON:
            self.format_response(list(resources))
            return
        rows = [[cell(getattr(resource, column, None)) for column in columns] for resource in resources]
        self.print_table(list(columns), rows, title=title)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def _diagnostic(self, plain: str, styled: str) -> None:
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._stderr.print(styled)

    def info(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message, escape(message))

    def success(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message, f"[green]{escape(message)}[/green]")

    def warning(self, message: str) -> None:
        """Warnings are printed even in quiet mode."""
        self._diagnostic(f"Warning: {message}", f"[yellow]Warning:[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        self._diagnostic(f"Error: {message}", f"[bold red]Error:[/bold red] {escape(message)}")

    def suggest(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(f"-> {message}", f"[dim]-> {escape(message)}[/dim]")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._diagnostic(f"[debug] {message}", f"[dim]\\[debug] {escape(message)}[/dim]")

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _print_plain(self, data: Any) -> None:
        if isinstance(data, dict):
            for key, value in data.items():
                self.print_data(f"{key}\t{cell(value)}")
        elif isinstance(data, list):
            for item in data:
                if isinstance(item, dict):
                    self.print_data("\t".join(cell(value) for value in item.values()))
                else:
                    self.print_data(cell(item))
        else:
            self.print_data(cell(data))


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _color_disabled_by_env() -> bool:
    """``NO_COLOR`` (any value) or ``TERM=dumb`` disables colour."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Global output instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one if needed."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager; used between tests."""
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Shortcuts for the installed manager
# ------------------------------------------------------------------ #


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_resources(
    resources: Sequence[Any],
    columns: Sequence[str],
    title: Optional[str] = None,
) -> None:
    get_output().print_resources(resources, columns, title)


def info(message: str) -> None:
    get_output().info(message)


def error(message: str) -> None:
    get_output().error(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)
