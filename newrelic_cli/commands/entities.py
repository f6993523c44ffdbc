"""``entities`` commands."""

import argparse

from ..resources import EntityResource
from .base import CommandContext, add_limit, apply_limit, cell, render_list


def entities_search(ctx: CommandContext, args: argparse.Namespace) -> None:
    entities = apply_limit(ctx.resource(EntityResource).search(args.query), args.limit)
    render_list(
        ctx, entities, "entities",
        ["GUID", "NAME", "TYPE", "DOMAIN", "ACCOUNT ID"],
        lambda entity: [entity.guid, entity.name, entity.type, entity.domain, cell(entity.account_id)],
    )


def register(subparsers: argparse._SubParsersAction) -> None:
    entities = subparsers.add_parser("entities", help="Search entities")
    commands = entities.add_subparsers(dest="entities_command", metavar="<command>", required=True)

    search_parser = commands.add_parser("search", help="Search entities with an entity search query")
    search_parser.add_argument("query", help="Entity search query, e.g. \"domain = 'APM'\"")
    add_limit(search_parser)
    search_parser.set_defaults(handler=entities_search)
