"""``keys`` commands: user and ingest API keys."""

import argparse
from typing import List, Optional

from ..exceptions import ValidationError
from ..models.requests import ApiAccessKeyUpdate
from ..models.responses import ApiAccessKey
from ..resources import KeyResource
from .base import CommandContext, add_force, add_limit, apply_limit, render_list, text_cell


def cli_key_type(value: Optional[str]) -> Optional[str]:
    """Map ``user``/``ingest`` to the API bucket name; None passes through."""
    if value is None:
        return None
    if value.lower() not in ("user", "ingest"):
        raise ValidationError(
            f'invalid key type "{value}": must be user or ingest',
            field_name="type",
            field_value=value
        )
    return value.upper()


def show_key(ctx: CommandContext, key: ApiAccessKey) -> None:
    fields = [
        ("ID", key.id),
        ("Name", key.name),
        ("Type", key.type),
        ("Notes", key.notes),
        ("Key", key.key),
    ]
    if key.ingest_type:
        fields.append(("Ingest Type", key.ingest_type))
    ctx.view.details(fields, key)


def keys_list(ctx: CommandContext, args: argparse.Namespace) -> None:
    key_type = cli_key_type(args.type)
    account_id = args.account or ctx.client.auth.optional_account_id_int()
    keys = ctx.resource(KeyResource).search([key_type] if key_type else None, account_id)
    keys = apply_limit(keys, args.limit)
    render_list(
        ctx, keys, "API keys",
        ["ID", "NAME", "TYPE", "INGEST TYPE", "NOTES"],
        lambda key: [key.id, key.name, key.type, key.ingest_type, text_cell(key.notes)],
    )


def keys_get(ctx: CommandContext, args: argparse.Namespace) -> None:
    keys = ctx.resource(KeyResource)
    key_type = cli_key_type(args.type)
    key = keys.get(args.key_id, key_type) if key_type else keys.find(args.key_id)
    show_key(ctx, key)


def keys_create(ctx: CommandContext, args: argparse.Namespace) -> None:
    key_type = cli_key_type(args.type)
    keys = ctx.resource(KeyResource)
    account_id = args.account or ctx.client.account_id
    notes = args.notes or ""

    if key_type == "USER":
        user_id = args.user_id or keys.current_user_id()
        key = keys.create_user_key(account_id, user_id, args.name, notes)
    else:
        if not args.ingest_type:
            raise ValidationError(
                "--ingest-type is required for ingest keys: license or browser",
                field_name="ingest_type"
            )
        key = keys.create_ingest_key(account_id, args.ingest_type, args.name, notes)

    ctx.view.success(f"API key {key.id} created")
    show_key(ctx, key)


def keys_update(ctx: CommandContext, args: argparse.Namespace) -> None:
    update = ApiAccessKeyUpdate(name=args.name, notes=args.notes)
    if update.is_empty():
        raise ValidationError("nothing to update: set --name and/or --notes", field_name="key")

    keys = ctx.resource(KeyResource)
    key_type = cli_key_type(args.type) or keys.find(args.key_id).type
    key = keys.update(args.key_id, key_type, update)
    ctx.view.success(f"API key {args.key_id} updated")
    show_key(ctx, key)


def keys_delete(ctx: CommandContext, args: argparse.Namespace) -> None:
    keys = ctx.resource(KeyResource)
    key_type = cli_key_type(args.type)

    user_ids: List[str] = []
    ingest_ids: List[str] = []
    for key_id in args.key_ids:
        bucket = key_type or keys.find(key_id).type
        (user_ids if bucket == "USER" else ingest_ids).append(key_id)

    if len(args.key_ids) == 1:
        prompt = f"Delete API key {args.key_ids[0]}?"
    else:
        prompt = f"Delete {len(args.key_ids)} API key(s)?"
    if not ctx.confirm(prompt, args.force):
        return

    deleted = keys.delete(user_key_ids=user_ids, ingest_key_ids=ingest_ids)
    if len(deleted) == 1:
        ctx.view.success(f"API key {deleted[0]} deleted")
    else:
        ctx.view.success(f"{len(deleted)} API keys deleted")


def register(subparsers: argparse._SubParsersAction) -> None:
    keys = subparsers.add_parser("keys", help="Manage user and ingest API keys")
    commands = keys.add_subparsers(dest="keys_command", metavar="<command>", required=True)

    list_parser = commands.add_parser("list", help="List API keys")
    list_parser.add_argument("--type", "-t", help="Key type: user or ingest (default: both)")
    list_parser.add_argument("--account", type=int, default=0, help="Account ID scope (default: configured account)")
    add_limit(list_parser)
    list_parser.set_defaults(handler=keys_list)

    get_parser = commands.add_parser("get", help="Show an API key")
    get_parser.add_argument("key_id", help="Key ID")
    get_parser.add_argument("--type", "-t", help="Key type: user or ingest (detected when omitted)")
    get_parser.set_defaults(handler=keys_get)

    create_parser = commands.add_parser("create", help="Create an API key")
    create_parser.add_argument("--type", "-t", required=True, help="Key type: user or ingest")
    create_parser.add_argument("--name", required=True, help="Key name")
    create_parser.add_argument("--notes", help="Notes stored with the key")
    create_parser.add_argument("--account", type=int, default=0, help="Account ID (default: configured account)")
    create_parser.add_argument("--user-id", type=int, default=0, help="Owner of a user key (default: current user)")
    create_parser.add_argument("--ingest-type", help="Ingest key type: license or browser")
    create_parser.set_defaults(handler=keys_create)

    update_parser = commands.add_parser("update", help="Rename an API key or change its notes")
    update_parser.add_argument("key_id", help="Key ID")
    update_parser.add_argument("--type", "-t", help="Key type: user or ingest (detected when omitted)")
    update_parser.add_argument("--name", help="New name")
    update_parser.add_argument("--notes", help="New notes")
    update_parser.set_defaults(handler=keys_update)

    delete_parser = commands.add_parser("delete", help="Delete one or more API keys")
    delete_parser.add_argument("key_ids", nargs="+", metavar="key_id", help="Key ID")
    delete_parser.add_argument("--type", "-t", help="Key type: user or ingest (detected per key when omitted)")
    add_force(delete_parser)
    delete_parser.set_defaults(handler=keys_delete)
