"""Shared plumbing for CLI command handlers."""

import argparse
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Sequence, TypeVar

import httpx

from ..api_client import NewRelicAPIClient
from ..config import CredentialStore, NewRelicConfig
from ..time_utils import parse_flexible_time
from ..view import View, truncate

T = TypeVar("T")

# Column width for free-text cells in tables
TEXT_WIDTH = 50


class CommandContext:
    """What a command handler needs: configuration, output and a lazily built client.

    The API client is only created when a handler first asks for it, so
    ``config`` commands work without an API key.
    """

    def __init__(
        self,
        config: NewRelicConfig,
        view: View,
        config_path: Optional[Path] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.config = config
        self.view = view
        self.store = CredentialStore(config_path)
        self._transport = transport
        self._client: Optional[NewRelicAPIClient] = None

    @property
    def client(self) -> NewRelicAPIClient:
        if self._client is None:
            self._client = NewRelicAPIClient(self.config, transport=self._transport)
            if self._client.auth.warning:
                self.view.warning(self._client.auth.warning)
        return self._client

    def resource(self, resource_class: Callable[[NewRelicAPIClient], T]) -> T:
        return resource_class(self.client)

    def confirm(self, message: str, force: bool) -> bool:
        """Return True when the action may proceed; prints the cancel notice otherwise."""
        if force or self.view.confirm(message):
            return True
        self.view.warning("Operation canceled")
        return False

    def close(self) -> None:
        if self._client is not None:
            self._client.close()


Handler = Callable[[CommandContext, argparse.Namespace], Optional[int]]


def cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def text_cell(value: Any, width: int = TEXT_WIDTH) -> str:
    return truncate(cell(value), width)


def apply_limit(items: Sequence[T], limit: Optional[int]) -> List[T]:
    if limit and limit > 0:
        return list(items[:limit])
    return list(items)


def parse_time_flag(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return parse_flexible_time(value)


def render_list(
    ctx: CommandContext,
    items: Sequence[T],
    noun: str,
    headers: Sequence[str],
    row: Callable[[T], List[str]],
) -> None:
    """Render a list result, or a "No <noun> found" line when it is empty.

    JSON output always prints the (possibly empty) list.
    """
    if not items and ctx.view.format != "json":
        ctx.view.println(f"No {noun} found")
        return
    ctx.view.render(headers, [row(item) for item in items], list(items))


def add_limit(parser: argparse.ArgumentParser, default: int = 0) -> None:
    parser.add_argument(
        "--limit", "-l",
        type=int,
        default=default,
        help="Maximum number of results (0 for no limit)" if not default else f"Maximum number of results (default: {default})"
    )


def add_force(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--force", action="store_true", help="Skip the confirmation prompt")


def add_time_range(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--since", help="Start time, e.g. '7 days ago', 'yesterday', '2024-01-15'")
    parser.add_argument("--until", help="End time, same formats as --since")


def join(values: Iterable[str]) -> str:
    return ", ".join(values)
