"""Credential and account access check."""

import logging

from ..api_client import NewRelicAPIClient
from ..exceptions import NewRelicError
from ..models.responses import ConnectionTestResult
from ..navigation import as_int, as_object, as_string

logger = logging.getLogger(__name__)


CURRENT_USER_QUERY = "query { actor { user { id email } } }"

ACCOUNT_QUERY = """
query($accountId: Int!) {
  actor {
    account(id: $accountId) {
      id
      name
    }
  }
}
"""


def scalar_text(node) -> str:
    """Render a string or integer ID as text."""
    text = as_string(node)
    if text:
        return text
    number = as_int(node)
    return str(number) if number else ""


class ConnectionResource:

    def __init__(self, api_client: NewRelicAPIClient):
        self.api_client = api_client

    def test_connection(self) -> ConnectionTestResult:
        """Check the API key and, when an account ID is configured, account access.

        Failures are recorded in ``error_message`` instead of being raised.
        """
        result = ConnectionTestResult(
            region=self.api_client.config.region,
            nerdgraph_url=self.api_client.nerdgraph_url,
        )

        try:
            data = self.api_client.nerdgraph_query(CURRENT_USER_QUERY)
        except NewRelicError as e:
            result.error_message = f"API key validation failed: {e}"
            logger.debug("Connection test failed", extra={"stage": "api_key", "error": str(e)})
            return result

        result.api_key_valid = True
        actor, _ = as_object(data.get("actor"))
        user, _ = as_object(actor.get("user"))
        result.user_id = scalar_text(user.get("id"))
        result.user_email = as_string(user.get("email"))

        if self.api_client.auth.account_id.is_empty:
            return result

        try:
            account_id = self.api_client.account_id
            account_data = self.api_client.nerdgraph_query(ACCOUNT_QUERY, {"accountId": account_id})
        except NewRelicError as e:
            result.error_message = f"Account access failed: {e}"
            logger.debug("Connection test failed", extra={"stage": "account", "error": str(e)})
            return result

        actor, _ = as_object(account_data.get("actor"))
        account, ok = as_object(actor.get("account"))
        if ok:
            result.account_access = True
            result.account_id = as_int(account.get("id"))
            result.account_name = as_string(account.get("name"))

        return result
