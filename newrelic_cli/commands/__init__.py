"""CLI command groups. Each module registers its subcommands on the root parser."""

import argparse

from . import alerts, apps, config, dashboards, deployments, entities, keys, logs, query, synthetics, users
from .base import CommandContext, Handler

COMMAND_MODULES = [apps, alerts, dashboards, deployments, entities, logs, query, synthetics, users, keys, config]


def register_all(subparsers: argparse._SubParsersAction) -> None:
    for module in COMMAND_MODULES:
        module.register(subparsers)


__all__ = ["CommandContext", "Handler", "register_all"]
