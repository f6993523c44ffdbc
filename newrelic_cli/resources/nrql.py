"""NRQL query execution."""

import logging
from datetime import datetime
from typing import Optional

from ..api_client import NewRelicAPIClient
from ..models.responses import NRQLResult
from ..navigation import expect_list, expect_path, objects_in
from ..time_utils import TimeParser

logger = logging.getLogger(__name__)


NRQL_QUERY = """
query($accountId: Int!, $nrql: Nrql!) {
  actor {
    account(id: $accountId) {
      nrql(query: $nrql) {
        results
      }
    }
  }
}
"""


def contains_clause(nrql: str, clause: str) -> bool:
    """Check whether a query already has a SINCE/UNTIL style clause."""
    upper = nrql.upper()
    return f" {clause} " in upper or upper.endswith(f" {clause}")


def with_time_range(nrql: str, since: Optional[datetime] = None, until: Optional[datetime] = None) -> str:
    """Append SINCE/UNTIL epoch-second clauses unless the query already has them."""
    if since is not None and not contains_clause(nrql, "SINCE"):
        nrql += f" SINCE {TimeParser.to_epoch_seconds(since)}"
    if until is not None and not contains_clause(nrql, "UNTIL"):
        nrql += f" UNTIL {TimeParser.to_epoch_seconds(until)}"
    return nrql


class NRQLResource:
    """Runs NRQL queries against the configured account."""

    def __init__(self, api_client: NewRelicAPIClient):
        self.api_client = api_client

    def query(self, nrql: str) -> NRQLResult:
        """Execute an NRQL query.

        Rows keep their source order and JSON types. Rows that are not
        objects are dropped.

        Raises:
            ConfigurationError: If no account ID is configured
            ResponseError: Naming the first of actor, account, nrql or results
                that is missing
        """
        account_id = self.api_client.account_id
        logger.debug("Executing NRQL query", extra={"nrql": nrql, "account_id": account_id})

        data = self.api_client.nerdgraph_query(NRQL_QUERY, {"accountId": account_id, "nrql": nrql})
        nrql_node = expect_path(data, "actor", "account", "nrql")
        rows = list(objects_in(expect_list(nrql_node, "results")))
        return NRQLResult(results=rows)
