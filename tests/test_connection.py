from newrelic_cli.api_client import NewRelicAPIClient
from newrelic_cli.config import NewRelicConfig
from newrelic_cli.resources import ConnectionResource

from .conftest import TEST_API_KEY


def test_successful_connection(client, fake_api):
    fake_api.graphql({"actor": {"user": {"id": 1001, "email": "ada@example.com"}}})
    fake_api.graphql({"actor": {"account": {"id": 12345, "name": "Prod"}}})

    result = ConnectionResource(client).test_connection()

    assert result.success
    assert result.user_id == "1001"
    assert result.account_access
    assert result.account_name == "Prod"
    assert result.region == "US"
    assert fake_api.last.variables == {"accountId": 12345}


def test_invalid_key_is_captured(client, fake_api):
    fake_api.queue({"errors": [{"message": "Invalid API key"}]}, status_code=401)

    result = ConnectionResource(client).test_connection()

    assert not result.success
    assert not result.api_key_valid
    assert result.error_message.startswith("API key validation failed: HTTP 401")


def test_account_failure_is_captured(client, fake_api):
    fake_api.graphql({"actor": {"user": {"id": "1001", "email": "ada@example.com"}}})
    fake_api.graphql(None, errors=[{"message": "Account not found"}])

    result = ConnectionResource(client).test_connection()

    assert result.api_key_valid
    assert not result.account_access
    assert result.error_message == "Account access failed: GraphQL error: Account not found"


def test_without_account_id_only_checks_key(fake_api):
    client = NewRelicAPIClient(NewRelicConfig(api_key=TEST_API_KEY), transport=fake_api.transport)
    fake_api.graphql({"actor": {"user": {"id": "1001", "email": "ada@example.com"}}})

    result = ConnectionResource(client).test_connection()

    assert result.success
    assert len(fake_api.requests) == 1
