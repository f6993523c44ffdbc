"""``nrql`` and ``nerdgraph`` commands. Both always print JSON."""

import argparse
import json

from ..exceptions import ValidationError
from ..resources import NRQLResource
from ..resources.nrql import with_time_range
from .base import CommandContext, add_time_range, parse_time_flag


def nrql_query(ctx: CommandContext, args: argparse.Namespace) -> None:
    nrql = with_time_range(args.nrql, parse_time_flag(args.since), parse_time_flag(args.until))
    result = ctx.resource(NRQLResource).query(nrql)
    ctx.view.json(result.results)


def nerdgraph_query(ctx: CommandContext, args: argparse.Namespace) -> None:
    variables = None
    if args.variables:
        try:
            variables = json.loads(args.variables)
        except json.JSONDecodeError as e:
            raise ValidationError(f"invalid --variables JSON: {e}", field_name="variables") from e
        if not isinstance(variables, dict):
            raise ValidationError("--variables must be a JSON object", field_name="variables")
    ctx.view.json(ctx.client.nerdgraph_query(args.document, variables))


def register(subparsers: argparse._SubParsersAction) -> None:
    nrql = subparsers.add_parser("nrql", help="Run NRQL queries")
    nrql_commands = nrql.add_subparsers(dest="nrql_command", metavar="<command>", required=True)

    query_parser = nrql_commands.add_parser("query", help="Run an NRQL query and print the rows as JSON")
    query_parser.add_argument("nrql", help="NRQL query")
    add_time_range(query_parser)
    query_parser.set_defaults(handler=nrql_query)

    nerdgraph = subparsers.add_parser("nerdgraph", help="Run raw NerdGraph queries")
    nerdgraph_commands = nerdgraph.add_subparsers(dest="nerdgraph_command", metavar="<command>", required=True)

    raw_parser = nerdgraph_commands.add_parser("query", help="Run a GraphQL document and print the data as JSON")
    raw_parser.add_argument("document", help="GraphQL query or mutation")
    raw_parser.add_argument("--variables", help="Variables as a JSON object")
    raw_parser.set_defaults(handler=nerdgraph_query)
