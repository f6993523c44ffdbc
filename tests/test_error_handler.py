import io

import pytest

from newrelic_cli.error_handler import (
    EXIT_API,
    EXIT_AUTH,
    EXIT_CONFIG,
    EXIT_ERROR,
    EXIT_SERVER,
    ErrorHandler,
    exit_code_for,
)
from newrelic_cli.exceptions import (
    ACCOUNT_ID_REQUIRED,
    AmbiguityError,
    APIError,
    ConfigurationError,
    GraphQLError,
    NotFoundError,
    ValidationError,
)


@pytest.mark.parametrize("error, code", [
    (ConfigurationError(ACCOUNT_ID_REQUIRED), EXIT_CONFIG),
    (ValidationError("bad"), EXIT_CONFIG),
    (APIError(401), EXIT_AUTH),
    (APIError(403), EXIT_AUTH),
    (APIError(404), EXIT_API),
    (APIError(422), EXIT_API),
    (APIError(503), EXIT_SERVER),
    (GraphQLError("boom"), EXIT_ERROR),
    (NotFoundError("gone"), EXIT_ERROR),
    (RuntimeError("unexpected"), EXIT_ERROR),
])
def test_exit_codes(error, code):
    assert exit_code_for(error) == code


def test_handle_prints_one_line_message():
    stream = io.StringIO()
    code = ErrorHandler(stream=stream).handle(NotFoundError("dashboard not found: X"), "dashboards get X")
    assert code == EXIT_ERROR
    assert stream.getvalue() == "Error: dashboard not found: X\n"


def test_auth_errors_include_hint():
    stream = io.StringIO()
    ErrorHandler(stream=stream).handle(APIError(401, response_body="Unauthorized"))
    assert stream.getvalue().startswith("Error: HTTP 401: Unauthorized (check that the API key")


def test_ambiguity_lists_candidates():
    error = AmbiguityError("multiple applications found", candidates=["G1", "G2"])
    assert ErrorHandler().format_error(error) == "multiple applications found (candidates: G1, G2)"


def test_unexpected_errors_are_labelled():
    assert ErrorHandler().format_error(KeyError("x")) == "unexpected error: 'x'"
