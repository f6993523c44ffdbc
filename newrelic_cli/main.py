"""Main entry point for the ``nrq`` command-line tool."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

import httpx
import structlog
from pydantic import ValidationError as PydanticValidationError

from . import __version__
from .commands import CommandContext, register_all
from .config import NewRelicConfig
from .error_handler import EXIT_CONFIG, EXIT_ERROR, EXIT_SUCCESS, ErrorHandler
from .exceptions import ConfigurationError
from .view import View


def setup_logging(config: NewRelicConfig) -> None:
    """Set up structured logging on stderr based on configuration."""
    logging.basicConfig(level=getattr(logging, config.log_level), stream=sys.stderr, format="%(message)s")
    logging.getLogger().setLevel(getattr(logging, config.log_level))

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if config.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nrq",
        description="nrq - command-line client for the New Relic REST and NerdGraph APIs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables:
  NEWRELIC_API_KEY          User API key (NRAK-...)
  NEWRELIC_ACCOUNT_ID       Default account ID
  NEWRELIC_REGION           Data center region: US or EU (default: US)
  NEWRELIC_TIMEOUT          Request timeout in seconds (default: 30)
  NEWRELIC_LOG_LEVEL        Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: WARNING)
  NEWRELIC_LOG_FORMAT       Log format: json, text (default: text)
  NEWRELIC_CONFIG_FILE      Configuration file path

Examples:
  nrq config set-api-key
  nrq apps list
  nrq deployments create checkout-service --revision v1.4.2
  nrq nrql query "SELECT count(*) FROM Transaction" --since "1 hour ago"
        """
    )

    parser.add_argument(
        "--output", "-o",
        choices=["table", "json", "plain"],
        help="Output format (default: table)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log HTTP requests and responses to stderr"
    )
    parser.add_argument(
        "--config-file",
        type=Path,
        help="Path to the configuration file (environment variables take precedence)"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<command>", required=True)
    register_all(subparsers)
    return parser


def load_configuration(args: argparse.Namespace) -> NewRelicConfig:
    """Load configuration from the config file and environment, then apply flags.

    Raises:
        ConfigurationError: If the configuration file or a value is invalid
    """
    try:
        config = NewRelicConfig.from_env_and_file(args.config_file)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = " -> ".join(str(x) for x in first["loc"])
        raise ConfigurationError(f"invalid configuration: {field}: {first['msg']}", config_key=field) from e

    overrides = {}
    if args.output:
        overrides["output"] = args.output
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    return config.copy(update=overrides) if overrides else config


def run(
    argv: Optional[List[str]] = None,
    transport: Optional[httpx.BaseTransport] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None
) -> int:
    """Parse ``argv``, run the selected command and return the exit code.

    Usage errors exit with status 2 from argparse itself.
    """
    args = build_parser().parse_args(argv)
    command = " ".join(argv if argv is not None else sys.argv[1:])
    handler = ErrorHandler(stream=err, verbose=args.verbose)

    try:
        config = load_configuration(args)
        view = View(config.output, out=out, err=err)
    except ConfigurationError as e:
        setup_logging(NewRelicConfig())
        handler.handle(e, command)
        return EXIT_CONFIG

    setup_logging(config)
    ctx = CommandContext(config, view, config_path=args.config_file, transport=transport)
    try:
        code = args.handler(ctx, args)
        return EXIT_SUCCESS if code is None else code
    except KeyboardInterrupt:
        view.warning("Operation canceled")
        return EXIT_ERROR
    except Exception as e:
        return handler.handle(e, command)
    finally:
        ctx.close()


def main(argv: Optional[List[str]] = None) -> None:
    """Console script entry point."""
    sys.exit(run(argv))


if __name__ == "__main__":
    main()
