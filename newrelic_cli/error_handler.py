"""Centralized error reporting and exit codes for the CLI."""

import sys
import traceback
from typing import Any, Dict, Optional, TextIO

import structlog

from .exceptions import (
    NewRelicError,
    APIError,
    AmbiguityError,
    ConfigurationError,
    GraphQLError,
    MutationError,
    NotFoundError,
    ResponseError,
    TimeoutError,
    TransportError,
    ValidationError
)

logger = structlog.get_logger(__name__)


EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_CONFIG = 3
EXIT_AUTH = 4
EXIT_API = 5
EXIT_SERVER = 6


def exit_code_for(error: BaseException) -> int:
    """Map an exception to the process exit code."""
    if isinstance(error, (ConfigurationError, ValidationError)):
        return EXIT_CONFIG
    if isinstance(error, APIError):
        if error.status_code in (401, 403):
            return EXIT_AUTH
        if error.is_server_error:
            return EXIT_SERVER
        if error.is_client_error:
            return EXIT_API
    return EXIT_ERROR


class ErrorHandler:
    """Turns exceptions raised by commands into a message and an exit code."""

    def __init__(self, stream: Optional[TextIO] = None, verbose: bool = False):
        self.stream = stream or sys.stderr
        self.verbose = verbose
        self.logger = logger

    def handle(self, error: BaseException, command: str = "") -> int:
        """Log the error, print a one-line message to stderr and return the exit code."""
        self._log_error(error, command)
        self.stream.write(f"Error: {self.format_error(error)}\n")
        if self.verbose and not isinstance(error, NewRelicError):
            self.stream.write(traceback.format_exc())
        return exit_code_for(error)

    def format_error(self, error: BaseException) -> str:
        if isinstance(error, APIError):
            return self._format_api_error(error)
        if isinstance(error, AmbiguityError) and error.candidates:
            return f"{error} (candidates: {', '.join(error.candidates)})"
        if isinstance(error, NewRelicError):
            return str(error)
        return f"unexpected error: {error}"

    def _format_api_error(self, error: APIError) -> str:
        if error.status_code in (401, 403):
            return f"{error} (check that the API key is valid and has access to this account)"
        if error.is_not_found:
            return f"{error} (resource not found)"
        return str(error)

    def _log_error(self, error: BaseException, command: str) -> None:
        log_context: Dict[str, Any] = {
            "command": command,
            "error_type": type(error).__name__,
            "error_message": str(error),
        }

        if isinstance(error, NewRelicError) and error.context:
            log_context["error_context"] = error.context

        if isinstance(error, APIError):
            log_context["status_code"] = error.status_code

        if isinstance(error, ValidationError) and error.field_name:
            log_context["field_name"] = error.field_name

        if isinstance(error, ResponseError) and error.missing:
            log_context["missing"] = error.missing

        if isinstance(error, MutationError) and error.operation:
            log_context["operation"] = error.operation

        if isinstance(error, TimeoutError) and error.timeout_seconds:
            log_context["timeout_seconds"] = error.timeout_seconds

        if isinstance(error, (ValidationError, ConfigurationError, NotFoundError, AmbiguityError)):
            self.logger.info("Command rejected", **log_context)
        elif isinstance(error, APIError):
            if error.is_client_error:
                self.logger.warning("API client error", **log_context)
            else:
                self.logger.error("API server error", **log_context)
        elif isinstance(error, (TransportError, GraphQLError, ResponseError, MutationError)):
            self.logger.error("Request failed", **log_context)
        elif isinstance(error, NewRelicError):
            self.logger.error("New Relic error", **log_context)
        else:
            log_context["traceback"] = traceback.format_exc()
            self.logger.error("Unexpected error", **log_context)
