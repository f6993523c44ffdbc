"""``config`` commands: stored credentials and a connection check."""

import argparse
from typing import Optional

from rich.prompt import Prompt

from ..error_handler import EXIT_ERROR
from ..config import validate_region
from ..models.identifiers import APIKey, validate_account_id, validate_api_key
from ..resources import ConnectionResource
from .base import CommandContext, add_force, cell


def credential_source(status: dict, name: str) -> str:
    if status[f"{name}_env"]:
        return "environment"
    if status[f"{name}_stored"]:
        return "config file"
    return "not set"


def set_api_key(ctx: CommandContext, args: argparse.Namespace) -> None:
    key = args.key
    if not key:
        key = Prompt.ask("Enter New Relic User API key", password=True, console=ctx.view.err_console)
    key = (key or "").strip()

    warning = validate_api_key(key)
    if warning:
        ctx.view.warning(warning)

    ctx.store.set("api_key", key)
    ctx.view.success(f"API key saved to {ctx.store.path}")


def delete_api_key(ctx: CommandContext, args: argparse.Namespace) -> None:
    if not ctx.confirm("Delete the stored API key?", args.force):
        return
    if ctx.store.delete("api_key"):
        ctx.view.success("API key deleted")
    else:
        ctx.view.warning("No stored API key to delete")


def set_account_id(ctx: CommandContext, args: argparse.Namespace) -> None:
    account_id = args.account_id.strip()
    validate_account_id(account_id)
    ctx.store.set("account_id", account_id)
    ctx.view.success(f"Account ID {account_id} saved to {ctx.store.path}")


def delete_account_id(ctx: CommandContext, args: argparse.Namespace) -> None:
    if ctx.store.delete("account_id"):
        ctx.view.success("Account ID deleted")
    else:
        ctx.view.warning("No stored account ID to delete")


def set_region(ctx: CommandContext, args: argparse.Namespace) -> None:
    region = validate_region(args.region)
    ctx.store.set("region", region.value)
    ctx.view.success(f"Region set to {region.value}")


def show(ctx: CommandContext, args: argparse.Namespace) -> None:
    config = ctx.config
    status = ctx.store.status()
    api_key = APIKey(config.api_key).masked() if config.api_key else "(not set)"

    data = {
        "config_file": str(ctx.store.path),
        "api_key": api_key,
        "api_key_source": credential_source(status, "api_key"),
        "account_id": config.account_id,
        "account_id_source": credential_source(status, "account_id"),
        "region": config.region,
        "region_source": credential_source(status, "region"),
        "nerdgraph_url": config.endpoints.nerdgraph,
    }
    ctx.view.details(
        [
            ("Config File", data["config_file"]),
            ("API Key", f"{api_key} ({data['api_key_source']})"),
            ("Account ID", f"{config.account_id or '(not set)'} ({data['account_id_source']})"),
            ("Region", f"{config.region} ({data['region_source']})"),
            ("NerdGraph URL", data["nerdgraph_url"]),
        ],
        data,
    )


def connection_test(ctx: CommandContext, args: argparse.Namespace) -> Optional[int]:
    result = ctx.resource(ConnectionResource).test_connection()
    fields = [
        ("Region", result.region),
        ("NerdGraph URL", result.nerdgraph_url),
        ("API Key Valid", cell(result.api_key_valid)),
        ("User", f"{result.user_email} ({result.user_id})" if result.user_id else ""),
    ]
    if result.account_access:
        fields.append(("Account", f"{result.account_name} ({result.account_id})"))
    ctx.view.details(fields, result)

    if not result.success:
        ctx.view.error(result.error_message or "connection test failed")
        return EXIT_ERROR
    ctx.view.success("Connection OK")
    return None


def register(subparsers: argparse._SubParsersAction) -> None:
    config = subparsers.add_parser("config", help="Manage stored credentials")
    commands = config.add_subparsers(dest="config_command", metavar="<command>", required=True)

    show_parser = commands.add_parser("show", help="Show the effective configuration")
    show_parser.set_defaults(handler=show)

    set_key_parser = commands.add_parser("set-api-key", help="Store the User API key (prompts when omitted)")
    set_key_parser.add_argument("key", nargs="?", help="User API key")
    set_key_parser.set_defaults(handler=set_api_key)

    delete_key_parser = commands.add_parser("delete-api-key", help="Remove the stored API key")
    add_force(delete_key_parser)
    delete_key_parser.set_defaults(handler=delete_api_key)

    set_account_parser = commands.add_parser("set-account-id", help="Store the default account ID")
    set_account_parser.add_argument("account_id", help="Account ID")
    set_account_parser.set_defaults(handler=set_account_id)

    delete_account_parser = commands.add_parser("delete-account-id", help="Remove the stored account ID")
    delete_account_parser.set_defaults(handler=delete_account_id)

    region_parser = commands.add_parser("set-region", help="Store the data center region")
    region_parser.add_argument("region", help="US or EU")
    region_parser.set_defaults(handler=set_region)

    test_parser = commands.add_parser("test", help="Check the API key and account access")
    test_parser.set_defaults(handler=connection_test)
