"""Custom exception classes for the New Relic CLI."""

from typing import Optional, Dict, Any, List


class NewRelicError(Exception):
    """Base exception for all New Relic operations.

    Every error raised by the client library derives from this class so callers
    can catch the whole family with a single ``except`` clause.
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        """Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error message
            context: Optional dictionary containing additional error context
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return string representation of the exception."""
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context
        }


class APIError(NewRelicError):
    """Raised when an HTTP request returns a status code >= 400.

    The raw status code is preserved so callers can branch on "not found"
    versus "unauthorized" versus a generic failure.
    """

    def __init__(
        self,
        status_code: int,
        response_body: str = "",
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """Initialize API error.

        Args:
            status_code: HTTP status code from the failed request
            response_body: Raw response body from the failed request
            message: Optional message used when the body is empty
            context: Additional context about the API failure
        """
        super().__init__(message or f"request failed with status {status_code}", context)
        self.status_code = status_code
        self.response_body = response_body

    def __str__(self) -> str:
        """Return string representation including status code."""
        if self.response_body:
            return f"HTTP {self.status_code}: {self.response_body}"
        return f"HTTP {self.status_code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        result = super().to_dict()
        result["status_code"] = self.status_code
        if self.response_body:
            result["response_body"] = self.response_body
        return result

    @property
    def is_not_found(self) -> bool:
        """Check if this is a 404."""
        return self.status_code == 404

    @property
    def is_unauthorized(self) -> bool:
        """Check if this is a 401."""
        return self.status_code == 401

    @property
    def is_client_error(self) -> bool:
        """Check if this is a client error (4xx status code)."""
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        """Check if this is a server error (5xx status code)."""
        return 500 <= self.status_code < 600


class TransportError(NewRelicError):
    """Raised when a request cannot be built, sent or read."""


class TimeoutError(TransportError):
    """Raised when a request exceeds the configured timeout."""

    def __init__(
        self,
        message: str,
        timeout_seconds: Optional[float] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, context)
        self.timeout_seconds = timeout_seconds
        self.operation = operation

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        result = super().to_dict()
        if self.timeout_seconds:
            result["timeout_seconds"] = self.timeout_seconds
        if self.operation:
            result["operation"] = self.operation
        return result


class GraphQLError(NewRelicError):
    """Raised when NerdGraph reports an error list.

    This is distinct from APIError because the HTTP status may well be 200.
    Only the first reported error is surfaced.
    """

    def __str__(self) -> str:
        return f"GraphQL error: {self.message}"


class ResponseError(NewRelicError):
    """Raised when a response cannot be decoded or does not have the expected shape.

    For shape failures ``missing`` names the first key that was absent or of the
    wrong type while walking the response tree.
    """

    def __init__(
        self,
        message: str,
        missing: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, context)
        self.missing = missing

    @classmethod
    def missing_key(cls, key: str) -> "ResponseError":
        """Build the shape failure for a missing key."""
        return cls(f"unexpected response format: missing {key}", missing=key)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        result = super().to_dict()
        if self.missing:
            result["missing"] = self.missing
        return result


class ValidationError(NewRelicError):
    """Raised when local input validation fails before any request is made.

    Covers account IDs, API keys, GUIDs, key types, regions and dashboard input.
    """

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        field_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """Initialize validation error.

        Args:
            message: Error message describing the validation failure
            field_name: Name of the field that failed validation
            field_value: Value that failed validation
            context: Additional context about the validation failure
        """
        super().__init__(message, context)
        self.field_name = field_name
        self.field_value = field_value

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        result = super().to_dict()
        if self.field_name:
            result["field_name"] = self.field_name
        if self.field_value is not None:
            result["field_value"] = str(self.field_value)
        return result


class TimeValidationError(ValidationError):
    """Raised when a time expression cannot be parsed."""

    def __init__(self, message: str, time_value: str = ""):
        super().__init__(message, field_name="time", field_value=time_value)


class ConfigurationError(NewRelicError):
    """Raised when required credentials or settings are missing.

    This exception is raised when:
    - No API key is configured
    - An operation needs an account ID and none is configured
    - The configuration file cannot be read or written
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, context)
        self.config_key = config_key

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        result = super().to_dict()
        if self.config_key:
            result["config_key"] = self.config_key
        return result


class NotFoundError(NewRelicError):
    """Raised when a lookup succeeds but the requested resource is absent."""


class AmbiguityError(NewRelicError):
    """Raised when a lookup that must be unique matched several candidates."""

    def __init__(
        self,
        message: str,
        candidates: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, context)
        self.candidates = candidates or []

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        result = super().to_dict()
        result["candidates"] = self.candidates
        return result


class MutationError(NewRelicError):
    """Raised when a mutation payload reports an embedded error."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, context)
        self.operation = operation


# Sentinel messages shared by the client and the CLI
ACCOUNT_ID_REQUIRED = (
    "account ID required - run 'nrq config set-account-id' or set NEWRELIC_ACCOUNT_ID"
)
API_KEY_REQUIRED = (
    "API key required - run 'nrq config set-api-key' or set NEWRELIC_API_KEY"
)


__all__ = [
    'NewRelicError',
    'APIError',
    'TransportError',
    'TimeoutError',
    'GraphQLError',
    'ResponseError',
    'ValidationError',
    'TimeValidationError',
    'ConfigurationError',
    'NotFoundError',
    'AmbiguityError',
    'MutationError',
    'ACCOUNT_ID_REQUIRED',
    'API_KEY_REQUIRED',
]
