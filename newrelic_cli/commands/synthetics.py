"""``synthetics`` commands."""

import argparse

from ..resources import SyntheticsResource
from .base import CommandContext, add_limit, apply_limit, cell, render_list


def synthetics_list(ctx: CommandContext, args: argparse.Namespace) -> None:
    monitors = apply_limit(ctx.resource(SyntheticsResource).list(), args.limit)
    render_list(
        ctx, monitors, "monitors",
        ["ID", "NAME", "TYPE", "STATUS", "FREQUENCY", "URI"],
        lambda m: [m.id, m.name, m.type, m.status, cell(m.frequency), m.uri],
    )


def synthetics_get(ctx: CommandContext, args: argparse.Namespace) -> None:
    monitor = ctx.resource(SyntheticsResource).get(args.monitor_id)
    ctx.view.details(
        [
            ("ID", monitor.id),
            ("Name", monitor.name),
            ("Type", monitor.type),
            ("Status", monitor.status),
            ("Frequency", monitor.frequency),
            ("URI", monitor.uri),
        ],
        monitor,
    )


def register(subparsers: argparse._SubParsersAction) -> None:
    synthetics = subparsers.add_parser("synthetics", help="Synthetic monitors")
    commands = synthetics.add_subparsers(dest="synthetics_command", metavar="<command>", required=True)

    list_parser = commands.add_parser("list", help="List synthetic monitors")
    add_limit(list_parser)
    list_parser.set_defaults(handler=synthetics_list)

    get_parser = commands.add_parser("get", help="Show a synthetic monitor")
    get_parser.add_argument("monitor_id", help="Monitor ID")
    get_parser.set_defaults(handler=synthetics_get)
