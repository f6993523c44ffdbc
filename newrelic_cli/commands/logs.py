"""``logs rules`` commands: log parsing rules."""

import argparse

from ..models.requests import LogParsingRuleUpdate
from ..models.responses import LogParsingRule
from ..resources import LogResource
from .base import CommandContext, add_force, add_limit, apply_limit, cell, render_list, text_cell


def show_rule(ctx: CommandContext, rule: LogParsingRule) -> None:
    ctx.view.details(
        [
            ("ID", rule.id),
            ("Description", rule.description),
            ("Enabled", cell(rule.enabled)),
            ("NRQL", rule.nrql),
            ("Lucene", rule.lucene),
            ("Grok", rule.grok),
            ("Updated At", rule.updated_at),
        ],
        rule,
    )


def rules_list(ctx: CommandContext, args: argparse.Namespace) -> None:
    rules = apply_limit(ctx.resource(LogResource).list_rules(), args.limit)
    render_list(
        ctx, rules, "log parsing rules",
        ["ID", "DESCRIPTION", "ENABLED", "NRQL"],
        lambda rule: [rule.id, text_cell(rule.description), cell(rule.enabled), text_cell(rule.nrql)],
    )


def rules_get(ctx: CommandContext, args: argparse.Namespace) -> None:
    show_rule(ctx, ctx.resource(LogResource).get_rule(args.rule_id))


def rules_create(ctx: CommandContext, args: argparse.Namespace) -> None:
    rule = ctx.resource(LogResource).create_rule(
        description=args.description,
        grok=args.grok,
        nrql=args.nrql,
        enabled=args.enabled,
        lucene=args.lucene or "",
    )
    ctx.view.success(f"Log parsing rule {rule.id} created")
    show_rule(ctx, rule)


def rules_update(ctx: CommandContext, args: argparse.Namespace) -> None:
    update = LogParsingRuleUpdate(
        description=args.description,
        enabled=args.enabled,
        grok=args.grok,
        lucene=args.lucene,
        nrql=args.nrql,
    )
    rule = ctx.resource(LogResource).update_rule(args.rule_id, update)
    ctx.view.success(f"Log parsing rule {args.rule_id} updated")
    show_rule(ctx, rule)


def rules_delete(ctx: CommandContext, args: argparse.Namespace) -> None:
    if not ctx.confirm(f"Delete log parsing rule {args.rule_id}?", args.force):
        return
    ctx.resource(LogResource).delete_rule(args.rule_id)
    ctx.view.success(f"Log parsing rule {args.rule_id} deleted")


def add_enabled_flags(parser: argparse.ArgumentParser, default=None) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--enabled", dest="enabled", action="store_const", const=True, help="Enable the rule")
    group.add_argument("--disabled", dest="enabled", action="store_const", const=False, help="Disable the rule")
    parser.set_defaults(enabled=default)


def register(subparsers: argparse._SubParsersAction) -> None:
    logs = subparsers.add_parser("logs", help="Manage log configuration")
    commands = logs.add_subparsers(dest="logs_command", metavar="<command>", required=True)

    rules = commands.add_parser("rules", help="Log parsing rules")
    rule_commands = rules.add_subparsers(dest="rules_command", metavar="<command>", required=True)

    list_parser = rule_commands.add_parser("list", help="List log parsing rules")
    add_limit(list_parser)
    list_parser.set_defaults(handler=rules_list)

    get_parser = rule_commands.add_parser("get", help="Show a log parsing rule")
    get_parser.add_argument("rule_id", help="Rule ID")
    get_parser.set_defaults(handler=rules_get)

    create_parser = rule_commands.add_parser("create", help="Create a log parsing rule")
    create_parser.add_argument("--description", required=True, help="Rule description")
    create_parser.add_argument("--grok", required=True, help="Grok pattern")
    create_parser.add_argument("--nrql", required=True, help="NRQL WHERE clause selecting the logs to parse")
    create_parser.add_argument("--lucene", help="Lucene filter")
    add_enabled_flags(create_parser, default=True)
    create_parser.set_defaults(handler=rules_create)

    update_parser = rule_commands.add_parser("update", help="Update fields of a log parsing rule")
    update_parser.add_argument("rule_id", help="Rule ID")
    update_parser.add_argument("--description", help="Rule description")
    update_parser.add_argument("--grok", help="Grok pattern")
    update_parser.add_argument("--nrql", help="NRQL WHERE clause")
    update_parser.add_argument("--lucene", help="Lucene filter")
    add_enabled_flags(update_parser)
    update_parser.set_defaults(handler=rules_update)

    delete_parser = rule_commands.add_parser("delete", help="Delete a log parsing rule")
    delete_parser.add_argument("rule_id", help="Rule ID")
    add_force(delete_parser)
    delete_parser.set_defaults(handler=rules_delete)
