"""Alert policy operations."""

import logging
from typing import Any, List

from ..api_client import NewRelicAPIClient
from ..exceptions import NotFoundError
from ..models.identifiers import is_numeric
from ..models.responses import AlertPolicy
from ..navigation import as_int, as_object, as_string, expect_list, expect_path, objects_in

logger = logging.getLogger(__name__)


ALERT_POLICY_QUERY = """
query($accountId: Int!, $policyId: ID!) {
  actor {
    account(id: $accountId) {
      alerts {
        policy(id: $policyId) {
          id
          name
          incidentPreference
        }
      }
    }
  }
}
"""


def parse_policy_id(node: Any) -> int:
    """REST returns numeric IDs, NerdGraph returns them as strings."""
    value = as_string(node)
    if is_numeric(value):
        return int(value)
    return as_int(node)


class AlertResource:
    """Alert policy operations."""

    def __init__(self, api_client: NewRelicAPIClient):
        self.api_client = api_client

    def list_policies(self) -> List[AlertPolicy]:
        """List alert policies through the REST API."""
        data = self.api_client.get_json(f"{self.api_client.rest_url}/alerts_policies.json")
        return [
            AlertPolicy(
                id=parse_policy_id(node.get("id")),
                name=as_string(node.get("name")),
                incident_preference=as_string(node.get("incident_preference")),
            )
            for node in objects_in(expect_list(data, "policies"))
        ]

    def get_policy(self, policy_id: str) -> AlertPolicy:
        """Get one alert policy through NerdGraph.

        Raises:
            ConfigurationError: If no account ID is configured
            NotFoundError: If the account has no policy with this ID
        """
        account_id = self.api_client.account_id
        data = self.api_client.nerdgraph_query(
            ALERT_POLICY_QUERY, {"accountId": account_id, "policyId": str(policy_id)}
        )
        alerts = expect_path(data, "actor", "account", "alerts")
        policy, ok = as_object(alerts.get("policy"))
        if not ok:
            raise NotFoundError(f"alert policy not found: {policy_id}")

        return AlertPolicy(
            id=parse_policy_id(policy.get("id")),
            name=as_string(policy.get("name")),
            incident_preference=as_string(policy.get("incidentPreference")),
        )
