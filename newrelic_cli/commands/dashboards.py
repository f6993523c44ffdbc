"""``dashboards`` commands."""

import argparse
import json

from ..exceptions import ValidationError
from ..models.requests import DashboardInput
from ..models.responses import DashboardDetail
from ..resources import DashboardResource
from .base import CommandContext, add_force, add_limit, apply_limit, cell, render_list, text_cell


def load_dashboard_file(path: str) -> DashboardInput:
    """Read a dashboard definition from a JSON file.

    Raises:
        ValidationError: If the file cannot be read or is not a valid definition
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ValidationError(f"failed to read dashboard file {path}: {e}", field_name="from_file") from e
    except json.JSONDecodeError as e:
        raise ValidationError(f"invalid JSON in dashboard file {path}: {e}", field_name="from_file") from e
    return DashboardInput.from_dict(data)


def show_dashboard(ctx: CommandContext, dashboard: DashboardDetail) -> None:
    ctx.view.details(
        [
            ("GUID", dashboard.guid),
            ("Name", dashboard.name),
            ("Description", dashboard.description),
            ("Permissions", dashboard.permissions),
            ("Pages", len(dashboard.pages)),
            ("Widgets", dashboard.widget_count),
        ],
        dashboard,
    )
    if ctx.view.format != "table" or not dashboard.widget_count:
        return

    ctx.view.println("")
    rows = [
        [page.name, widget.id, text_cell(widget.title), cell(widget.visualization.get("id"))]
        for page in dashboard.pages
        for widget in page.widgets
    ]
    ctx.view.table(["PAGE", "WIDGET ID", "TITLE", "VISUALIZATION"], rows)


def dashboards_list(ctx: CommandContext, args: argparse.Namespace) -> None:
    dashboards = apply_limit(ctx.resource(DashboardResource).list(), args.limit)
    render_list(
        ctx, dashboards, "dashboards",
        ["GUID", "NAME", "ACCOUNT ID"],
        lambda dashboard: [dashboard.guid, dashboard.name, cell(dashboard.account_id)],
    )


def dashboards_get(ctx: CommandContext, args: argparse.Namespace) -> None:
    show_dashboard(ctx, ctx.resource(DashboardResource).get(args.guid))


def dashboards_create(ctx: CommandContext, args: argparse.Namespace) -> None:
    definition = load_dashboard_file(args.from_file)
    dashboard = ctx.resource(DashboardResource).create(definition)
    ctx.view.success(f"Dashboard created: {dashboard.guid}")
    show_dashboard(ctx, dashboard)


def dashboards_update(ctx: CommandContext, args: argparse.Namespace) -> None:
    definition = load_dashboard_file(args.from_file)
    dashboard = ctx.resource(DashboardResource).update(args.guid, definition)
    ctx.view.success(f"Dashboard {args.guid} updated")
    show_dashboard(ctx, dashboard)


def dashboards_delete(ctx: CommandContext, args: argparse.Namespace) -> None:
    if not ctx.confirm(f"Delete dashboard {args.guid}?", args.force):
        return
    ctx.resource(DashboardResource).delete(args.guid)
    ctx.view.success(f"Dashboard {args.guid} deleted")


def register(subparsers: argparse._SubParsersAction) -> None:
    dashboards = subparsers.add_parser("dashboards", help="Manage dashboards")
    commands = dashboards.add_subparsers(dest="dashboards_command", metavar="<command>", required=True)

    list_parser = commands.add_parser("list", help="List dashboards in the account")
    add_limit(list_parser)
    list_parser.set_defaults(handler=dashboards_list)

    get_parser = commands.add_parser("get", help="Show a dashboard with its pages and widgets")
    get_parser.add_argument("guid", help="Dashboard GUID")
    get_parser.set_defaults(handler=dashboards_get)

    create_parser = commands.add_parser("create", help="Create a dashboard from a JSON file")
    create_parser.add_argument("--from-file", "-f", required=True, help="Path to the dashboard JSON definition")
    create_parser.set_defaults(handler=dashboards_create)

    update_parser = commands.add_parser("update", help="Replace a dashboard from a JSON file")
    update_parser.add_argument("guid", help="Dashboard GUID")
    update_parser.add_argument("--from-file", "-f", required=True, help="Path to the dashboard JSON definition")
    update_parser.set_defaults(handler=dashboards_update)

    delete_parser = commands.add_parser("delete", help="Delete a dashboard")
    delete_parser.add_argument("guid", help="Dashboard GUID")
    add_force(delete_parser)
    delete_parser.set_defaults(handler=dashboards_delete)
