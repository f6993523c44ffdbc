"""``users`` commands."""

import argparse

from ..resources import UserResource
from .base import CommandContext, add_limit, apply_limit, join, render_list


def users_list(ctx: CommandContext, args: argparse.Namespace) -> None:
    users = apply_limit(ctx.resource(UserResource).list(), args.limit)
    render_list(
        ctx, users, "users",
        ["ID", "NAME", "EMAIL", "TYPE", "AUTH DOMAIN"],
        lambda user: [user.id, user.name, user.email, user.type, user.authentication_domain],
    )


def users_get(ctx: CommandContext, args: argparse.Namespace) -> None:
    user = ctx.resource(UserResource).get(args.user_id)
    ctx.view.details(
        [
            ("ID", user.id),
            ("Name", user.name),
            ("Email", user.email),
            ("Type", user.type),
            ("Auth Domain", user.authentication_domain),
            ("Groups", join(user.groups)),
        ],
        user,
    )


def register(subparsers: argparse._SubParsersAction) -> None:
    users = subparsers.add_parser("users", help="Organization users")
    commands = users.add_subparsers(dest="users_command", metavar="<command>", required=True)

    list_parser = commands.add_parser("list", help="List users across authentication domains")
    add_limit(list_parser)
    list_parser.set_defaults(handler=users_list)

    get_parser = commands.add_parser("get", help="Show a user and their groups")
    get_parser.add_argument("user_id", help="User ID")
    get_parser.set_defaults(handler=users_get)
