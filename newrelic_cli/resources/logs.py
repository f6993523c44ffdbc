"""
Log parsing rule operations.

Rules flagged ``deleted`` by the server are never returned. Updating a rule
is a read, merge, write sequence: the current rule is fetched, the fields set
on the update are applied, and the full rule is written back. Nothing guards
against another client changing the rule between the read and the write; the
last write wins.
"""

import logging
from typing import Any, Dict, List

from ..api_client import NewRelicAPIClient
from ..exceptions import MutationError, NotFoundError, ValidationError
from ..models.requests import LogParsingRuleUpdate
from ..models.responses import LogParsingRule
from ..navigation import as_bool, as_string, expect_list, expect_object, expect_path, first_error_message, objects_in

logger = logging.getLogger(__name__)


RULE_FIELDS = """
id
description
enabled
grok
lucene
nrql
updatedAt
"""

LIST_RULES_QUERY = """
query($accountId: Int!) {
  actor {
    account(id: $accountId) {
      logConfigurations {
        parsingRules {
          %s
          deleted
        }
      }
    }
  }
}
""" % RULE_FIELDS

CREATE_RULE_MUTATION = """
mutation($accountId: Int!, $rule: LogConfigurationsParsingRuleConfiguration!) {
  logConfigurationsCreateParsingRule(accountId: $accountId, rule: $rule) {
    rule {
      %s
    }
    errors { message type }
  }
}
""" % RULE_FIELDS

UPDATE_RULE_MUTATION = """
mutation($accountId: Int!, $id: ID!, $rule: LogConfigurationsParsingRuleConfiguration!) {
  logConfigurationsUpdateParsingRule(accountId: $accountId, id: $id, rule: $rule) {
    rule {
      %s
    }
    errors { message type }
  }
}
""" % RULE_FIELDS

DELETE_RULE_MUTATION = """
mutation($accountId: Int!, $id: ID!) {
  logConfigurationsDeleteParsingRule(accountId: $accountId, id: $id) {
    errors { message type }
  }
}
"""


def map_rule(node: Dict[str, Any]) -> LogParsingRule:
    return LogParsingRule(
        id=as_string(node.get("id")),
        description=as_string(node.get("description")),
        enabled=as_bool(node.get("enabled")),
        grok=as_string(node.get("grok")),
        lucene=as_string(node.get("lucene")),
        nrql=as_string(node.get("nrql")),
        updated_at=as_string(node.get("updatedAt")),
    )


def rule_configuration(rule: LogParsingRule) -> Dict[str, Any]:
    """Full rule configuration as sent to create and update."""
    return {
        "description": rule.description,
        "enabled": rule.enabled,
        "grok": rule.grok,
        "lucene": rule.lucene,
        "nrql": rule.nrql,
    }


class LogResource:
    """Log parsing rules for the configured account."""

    def __init__(self, api_client: NewRelicAPIClient):
        self.api_client = api_client

    def list_rules(self) -> List[LogParsingRule]:
        """List parsing rules, leaving out deleted ones.

        Raises:
            ConfigurationError: If no account ID is configured
        """
        account_id = self.api_client.account_id
        data = self.api_client.nerdgraph_query(LIST_RULES_QUERY, {"accountId": account_id})
        log_configurations = expect_path(data, "actor", "account", "logConfigurations")
        return [
            map_rule(node)
            for node in objects_in(expect_list(log_configurations, "parsingRules"))
            if not as_bool(node.get("deleted"))
        ]

    def get_rule(self, rule_id: str) -> LogParsingRule:
        """Raises NotFoundError for unknown and deleted rules."""
        for rule in self.list_rules():
            if rule.id == rule_id:
                return rule
        raise NotFoundError(f"log parsing rule not found: {rule_id}")

    def create_rule(
        self,
        description: str,
        grok: str,
        nrql: str,
        enabled: bool = True,
        lucene: str = ""
    ) -> LogParsingRule:
        account_id = self.api_client.account_id
        rule = LogParsingRule(description=description, enabled=enabled, grok=grok, lucene=lucene, nrql=nrql)
        data = self.api_client.nerdgraph_query(
            CREATE_RULE_MUTATION, {"accountId": account_id, "rule": rule_configuration(rule)}
        )
        created = self._mutation_rule(data, "logConfigurationsCreateParsingRule", "create")
        logger.info("Log parsing rule created", extra={"rule_id": created.id})
        return created

    def update_rule(self, rule_id: str, update: LogParsingRuleUpdate) -> LogParsingRule:
        """Apply a partial update to a rule.

        Raises:
            ValidationError: If the update sets no fields
            NotFoundError: If the rule does not exist
            MutationError: If the mutation reports an error
        """
        if update.is_empty():
            raise ValidationError("no fields to update", field_name="rule")

        account_id = self.api_client.account_id
        current = self.get_rule(rule_id)
        changes = {name: value for name, value in update.dict().items() if value is not None}
        merged = current.copy(update=changes)

        data = self.api_client.nerdgraph_query(
            UPDATE_RULE_MUTATION,
            {"accountId": account_id, "id": rule_id, "rule": rule_configuration(merged)}
        )
        updated = self._mutation_rule(data, "logConfigurationsUpdateParsingRule", "update")
        logger.info("Log parsing rule updated", extra={"rule_id": rule_id, "fields": sorted(changes)})
        return updated

    def delete_rule(self, rule_id: str) -> None:
        account_id = self.api_client.account_id
        data = self.api_client.nerdgraph_query(DELETE_RULE_MUTATION, {"accountId": account_id, "id": rule_id})
        payload = expect_object(data, "logConfigurationsDeleteParsingRule")

        message = first_error_message(payload)
        if message is not None:
            raise MutationError(f"failed to delete rule: {message}", operation="delete")
        logger.info("Log parsing rule deleted", extra={"rule_id": rule_id})

    def _mutation_rule(self, data: Dict[str, Any], field: str, operation: str) -> LogParsingRule:
        payload = expect_object(data, field)

        message = first_error_message(payload)
        if message is not None:
            raise MutationError(f"failed to {operation} rule: {message}", operation=operation)

        return map_rule(expect_object(payload, "rule"))
