"""``alerts`` commands."""

import argparse

from ..resources import AlertResource
from .base import CommandContext, add_limit, apply_limit, cell, render_list


def policies_list(ctx: CommandContext, args: argparse.Namespace) -> None:
    policies = apply_limit(ctx.resource(AlertResource).list_policies(), args.limit)
    render_list(
        ctx, policies, "alert policies",
        ["ID", "NAME", "INCIDENT PREFERENCE"],
        lambda policy: [cell(policy.id), policy.name, policy.incident_preference],
    )


def policies_get(ctx: CommandContext, args: argparse.Namespace) -> None:
    policy = ctx.resource(AlertResource).get_policy(args.policy_id)
    ctx.view.details(
        [("ID", policy.id), ("Name", policy.name), ("Incident Preference", policy.incident_preference)],
        policy,
    )


def register(subparsers: argparse._SubParsersAction) -> None:
    alerts = subparsers.add_parser("alerts", help="Manage alert policies")
    commands = alerts.add_subparsers(dest="alerts_command", metavar="<command>", required=True)

    policies = commands.add_parser("policies", help="Alert policies")
    policy_commands = policies.add_subparsers(dest="policies_command", metavar="<command>", required=True)

    list_parser = policy_commands.add_parser("list", help="List alert policies")
    add_limit(list_parser)
    list_parser.set_defaults(handler=policies_list)

    get_parser = policy_commands.add_parser("get", help="Show an alert policy")
    get_parser.add_argument("policy_id", help="Alert policy ID")
    get_parser.set_defaults(handler=policies_get)
