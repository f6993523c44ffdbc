"""``deployments`` commands."""

import argparse
from datetime import datetime, timezone
from typing import Any

from ..exceptions import AmbiguityError, NotFoundError, ValidationError
from ..resolver import AppResolver
from ..resources import DeploymentResource
from ..time_utils import filter_by_time
from .base import (
    CommandContext, add_limit, add_time_range, apply_limit, cell, parse_time_flag, render_list, text_cell
)

# NRQL timestamps above this are milliseconds since the epoch
MILLIS_THRESHOLD = 1e12


def resolve_app(ctx: CommandContext, args: argparse.Namespace) -> str:
    """Pick the application from the positional argument, --name or --guid and resolve it."""
    identifier = args.app or args.name or args.guid
    if not identifier:
        raise ValidationError(
            "application must be specified via positional argument, --name, or --guid",
            field_name="app"
        )
    try:
        return AppResolver(ctx.client).resolve_app_id(identifier)
    except AmbiguityError as e:
        raise AmbiguityError(f"failed to resolve application: {e}", candidates=e.candidates) from e
    except NotFoundError as e:
        raise NotFoundError(f"failed to resolve application: {e}") from e


def format_event_time(value: Any) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > MILLIS_THRESHOLD:
        stamp = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        return stamp.strftime("%Y-%m-%dT%H:%M:%SZ")
    return cell(value)


def deployments_list(ctx: CommandContext, args: argparse.Namespace) -> None:
    since = parse_time_flag(args.since)
    until = parse_time_flag(args.until)
    app_id = resolve_app(ctx, args)

    deployments = ctx.resource(DeploymentResource).list(app_id)
    deployments = apply_limit(filter_by_time(deployments, since, until), args.limit)
    render_list(
        ctx, deployments, "deployments",
        ["ID", "REVISION", "DESCRIPTION", "USER", "TIMESTAMP"],
        lambda d: [cell(d.id), d.revision, text_cell(d.description), d.user, d.timestamp],
    )


def deployments_create(ctx: CommandContext, args: argparse.Namespace) -> None:
    app_id = resolve_app(ctx, args)
    deployment = ctx.resource(DeploymentResource).create(
        app_id,
        args.revision,
        description=args.description or "",
        user=args.user or "",
        changelog=args.changelog or "",
    )
    ctx.view.success(f"Deployment {deployment.id} created for application {app_id}")
    ctx.view.details(
        [
            ("ID", deployment.id),
            ("Revision", deployment.revision),
            ("Description", deployment.description),
            ("User", deployment.user),
            ("Timestamp", deployment.timestamp),
        ],
        deployment,
    )


def deployments_search(ctx: CommandContext, args: argparse.Namespace) -> None:
    since = parse_time_flag(args.since)
    until = parse_time_flag(args.until)
    result = ctx.resource(DeploymentResource).search(args.where, since, until, args.limit)
    render_list(
        ctx, result.results, "deployments",
        ["TIMESTAMP", "APP NAME", "REVISION", "DESCRIPTION", "USER"],
        lambda row: [
            format_event_time(row.get("timestamp")),
            cell(row.get("appName")),
            cell(row.get("revision")),
            text_cell(row.get("description")),
            cell(row.get("user")),
        ],
    )


def add_app_selector(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("app", nargs="?", help="Application name, GUID or numeric ID")
    parser.add_argument("--name", "-n", help="Application name")
    parser.add_argument("--guid", "-g", help="Application entity GUID")


def register(subparsers: argparse._SubParsersAction) -> None:
    deployments = subparsers.add_parser("deployments", help="Manage deployment markers")
    commands = deployments.add_subparsers(dest="deployments_command", metavar="<command>", required=True)

    list_parser = commands.add_parser("list", help="List deployments for an application")
    add_app_selector(list_parser)
    add_time_range(list_parser)
    add_limit(list_parser)
    list_parser.set_defaults(handler=deployments_list)

    create_parser = commands.add_parser("create", help="Record a deployment for an application")
    add_app_selector(create_parser)
    create_parser.add_argument("--revision", "-r", required=True, help="Revision identifier, e.g. a git SHA or version")
    create_parser.add_argument("--description", "-d", help="Deployment description")
    create_parser.add_argument("--user", "-u", help="User who deployed")
    create_parser.add_argument("--changelog", "-c", help="Changelog text")
    create_parser.set_defaults(handler=deployments_create)

    search_parser = commands.add_parser("search", help="Search deployment events with an NRQL WHERE clause")
    search_parser.add_argument("where", help="NRQL WHERE clause, e.g. \"appName = 'checkout'\"")
    add_time_range(search_parser)
    add_limit(search_parser, default=100)
    search_parser.set_defaults(handler=deployments_search)
