"""``apps`` commands: APM applications and their metrics."""

import argparse

from ..resolver import AppResolver
from ..resources import ApplicationResource
from .base import CommandContext, add_limit, apply_limit, cell, join, render_list


def apps_list(ctx: CommandContext, args: argparse.Namespace) -> None:
    apps = apply_limit(ctx.resource(ApplicationResource).list(), args.limit)
    render_list(
        ctx, apps, "applications",
        ["ID", "NAME", "LANGUAGE", "STATUS", "REPORTING"],
        lambda app: [cell(app.id), app.name, app.language, app.health_status, cell(app.reporting)],
    )


def apps_get(ctx: CommandContext, args: argparse.Namespace) -> None:
    app_id = AppResolver(ctx.client).resolve_app_id(args.app)
    app = ctx.resource(ApplicationResource).get(app_id)
    ctx.view.details(
        [
            ("ID", app.id),
            ("Name", app.name),
            ("Language", app.language),
            ("Health Status", app.health_status),
            ("Reporting", cell(app.reporting)),
            ("Last Reported", app.last_reported_at),
        ],
        app,
    )


def apps_metrics(ctx: CommandContext, args: argparse.Namespace) -> None:
    app_id = AppResolver(ctx.client).resolve_app_id(args.app)
    metrics = apply_limit(ctx.resource(ApplicationResource).metrics(app_id), args.limit)
    render_list(
        ctx, metrics, "metrics",
        ["NAME", "VALUES"],
        lambda metric: [metric.name, join(metric.values)],
    )


def register(subparsers: argparse._SubParsersAction) -> None:
    apps = subparsers.add_parser("apps", help="Manage APM applications")
    commands = apps.add_subparsers(dest="apps_command", metavar="<command>", required=True)

    list_parser = commands.add_parser("list", help="List APM applications")
    add_limit(list_parser)
    list_parser.set_defaults(handler=apps_list)

    get_parser = commands.add_parser("get", help="Show an application")
    get_parser.add_argument("app", help="Application name, GUID or numeric ID")
    get_parser.set_defaults(handler=apps_get)

    metrics_parser = commands.add_parser("metrics", help="List metric names reported by an application")
    metrics_parser.add_argument("app", help="Application name, GUID or numeric ID")
    add_limit(metrics_parser)
    metrics_parser.set_defaults(handler=apps_metrics)
