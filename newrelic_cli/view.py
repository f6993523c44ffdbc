"""Output rendering for the CLI: rich tables, JSON or tab-separated text."""

import json
import sys
from typing import Any, List, Optional, Sequence, TextIO

from pydantic import BaseModel
from rich import box
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from .exceptions import ValidationError


OUTPUT_FORMATS = ("table", "json", "plain")


def validate_format(output: str) -> str:
    if output not in OUTPUT_FORMATS:
        raise ValidationError(
            f"invalid output format {output!r}: must be one of table, json, plain",
            field_name="output",
            field_value=output
        )
    return output


def truncate(value: str, max_len: int) -> str:
    """Shorten ``value`` to ``max_len`` characters, ending in ``...``."""
    if len(value) <= max_len:
        return value
    if max_len <= 3:
        return value[:max_len]
    return value[:max_len - 3] + "..."


def to_jsonable(data: Any) -> Any:
    """Convert models, and lists or dicts of models, into plain JSON values."""
    if isinstance(data, BaseModel):
        return data.dict()
    if isinstance(data, (list, tuple)):
        return [to_jsonable(item) for item in data]
    if isinstance(data, dict):
        return {key: to_jsonable(value) for key, value in data.items()}
    return data


class View:
    """Renders command results in the selected output format.

    Results go to ``out``; status messages and prompts go to ``err`` so
    that JSON and plain output stay pipeable.
    """

    def __init__(self, output: str = "table", out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        self.format = validate_format(output)
        self.out = out or sys.stdout
        self.err = err or sys.stderr
        self.console = Console(file=self.out, highlight=False)
        self.err_console = Console(file=self.err, highlight=False)

    def table(self, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        if not rows:
            return
        table = Table(box=box.SIMPLE_HEAD, show_header=True, header_style="bold")
        for header in headers:
            table.add_column(header, overflow="fold")
        for row in rows:
            table.add_row(*[str(cell) for cell in row])
        self.console.print(table)

    def json(self, data: Any) -> None:
        self.out.write(json.dumps(to_jsonable(data), indent=2, default=str) + "\n")

    def plain(self, rows: Sequence[Sequence[str]]) -> None:
        for row in rows:
            self.out.write("\t".join(str(cell) for cell in row) + "\n")

    def render(self, headers: Sequence[str], rows: List[List[str]], data: Any) -> None:
        """Render ``rows`` as a table or plain text, or ``data`` as JSON."""
        if self.format == "json":
            self.json(data)
        elif self.format == "plain":
            self.plain(rows)
        else:
            self.table(headers, rows)

    def details(self, fields: Sequence[Sequence[Any]], data: Any) -> None:
        """Render a single record as aligned ``label: value`` lines."""
        if self.format == "json":
            self.json(data)
            return
        if self.format == "plain":
            self.plain([[str(value) for _, value in fields]])
            return
        width = max(len(label) for label, _ in fields) + 1
        for label, value in fields:
            self.out.write(f"{label + ':':<{width}} {value}\n")

    def println(self, message: str) -> None:
        self.out.write(message + "\n")

    def success(self, message: str) -> None:
        self.err_console.print(f"[green]{message}[/green]", markup=True)

    def warning(self, message: str) -> None:
        self.err_console.print(f"[yellow]{message}[/yellow]", markup=True)

    def error(self, message: str) -> None:
        self.err_console.print(f"[red]{message}[/red]", markup=True)

    def confirm(self, message: str) -> bool:
        """Ask a yes/no question on stderr; anything but yes declines."""
        response = Prompt.ask(message, choices=["y", "n"], default="n", console=self.err_console)
        return response.lower() == "y"
