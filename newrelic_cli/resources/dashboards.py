"""
Dashboard operations.

Dashboards are NerdGraph entities. Listing goes through entity search, while
get, create, update and delete use the dashboard-specific fields and
mutations. Mutation payloads carry their own ``errors`` list, which is checked
before the result.
"""

import logging
from typing import Any, Dict, List

from ..api_client import NewRelicAPIClient
from ..exceptions import MutationError, NotFoundError, ResponseError
from ..models.requests import DashboardInput
from ..models.responses import Dashboard, DashboardDetail, DashboardPage, DashboardWidget
from ..navigation import as_int, as_list, as_object, as_string, expect_object, first_error_message, objects_in
from .entities import search_entity_nodes

logger = logging.getLogger(__name__)


DASHBOARD_SEARCH_QUERY = """
query($query: String!) {
  actor {
    entitySearch(query: $query) {
      results {
        entities {
          guid
          name
          accountId
          ... on DashboardEntityOutline {
            dashboardParentGuid
          }
        }
      }
    }
  }
}
"""

DASHBOARD_FIELDS = """
guid
name
description
permissions
pages {
  guid
  name
  widgets {
    id
    title
    visualization { id }
    rawConfiguration
  }
}
"""

DASHBOARD_GET_QUERY = """
query($guid: EntityGuid!) {
  actor {
    entity(guid: $guid) {
      ... on DashboardEntity {
        %s
      }
    }
  }
}
""" % DASHBOARD_FIELDS

DASHBOARD_CREATE_MUTATION = """
mutation($accountId: Int!, $dashboard: DashboardInput!) {
  dashboardCreate(accountId: $accountId, dashboard: $dashboard) {
    entityResult {
      %s
    }
    errors {
      description
      type
    }
  }
}
""" % DASHBOARD_FIELDS

DASHBOARD_UPDATE_MUTATION = """
mutation($guid: EntityGuid!, $dashboard: DashboardInput!) {
  dashboardUpdate(guid: $guid, dashboard: $dashboard) {
    entityResult {
      %s
    }
    errors {
      description
      type
    }
  }
}
""" % DASHBOARD_FIELDS

DASHBOARD_DELETE_MUTATION = """
mutation($guid: EntityGuid!) {
  dashboardDelete(guid: $guid) {
    status
    errors {
      description
      type
    }
  }
}
"""


def map_widget(node: Dict[str, Any]) -> DashboardWidget:
    visualization, _ = as_object(node.get("visualization"))
    configuration, _ = as_object(node.get("rawConfiguration"))
    return DashboardWidget(
        id=as_string(node.get("id")),
        title=as_string(node.get("title")),
        visualization=visualization,
        configuration=configuration,
    )


def map_page(node: Dict[str, Any]) -> DashboardPage:
    widgets, _ = as_list(node.get("widgets"))
    return DashboardPage(
        guid=as_string(node.get("guid")),
        name=as_string(node.get("name")),
        widgets=[map_widget(widget) for widget in objects_in(widgets)],
    )


def map_dashboard_entity(node: Dict[str, Any]) -> DashboardDetail:
    """Map a dashboard entity with its pages and widgets.

    Pages and widgets are optional; malformed ones are dropped.
    """
    pages, _ = as_list(node.get("pages"))
    return DashboardDetail(
        guid=as_string(node.get("guid")),
        name=as_string(node.get("name")),
        description=as_string(node.get("description")),
        permissions=as_string(node.get("permissions")),
        pages=[map_page(page) for page in objects_in(pages)],
    )


class DashboardResource:
    """Dashboard operations."""

    def __init__(self, api_client: NewRelicAPIClient):
        self.api_client = api_client

    def list(self) -> List[Dashboard]:
        """List dashboards in the configured account.

        Raises:
            ConfigurationError: If no account ID is configured
        """
        account_id = self.api_client.account_id
        nodes = search_entity_nodes(
            self.api_client, DASHBOARD_SEARCH_QUERY, f"type = 'DASHBOARD' AND accountId = {account_id}"
        )
        return [
            Dashboard(
                guid=as_string(node.get("guid")),
                name=as_string(node.get("name")),
                account_id=as_int(node.get("accountId")),
            )
            for node in nodes
        ]

    def get(self, guid: str) -> DashboardDetail:
        """Get a dashboard with its pages and widgets.

        Raises:
            NotFoundError: If no dashboard has this GUID
        """
        data = self.api_client.nerdgraph_query(DASHBOARD_GET_QUERY, {"guid": guid})
        actor = expect_object(data, "actor")
        entity, ok = as_object(actor.get("entity"))
        if not ok or not entity:
            raise NotFoundError(f"dashboard not found: {guid}")
        return map_dashboard_entity(entity)

    def create(self, dashboard: DashboardInput) -> DashboardDetail:
        """Create a dashboard in the configured account.

        Permissions default to ``PUBLIC_READ_WRITE``.

        Raises:
            ConfigurationError: If no account ID is configured
            MutationError: If the mutation reports an error
        """
        account_id = self.api_client.account_id
        data = self.api_client.nerdgraph_query(
            DASHBOARD_CREATE_MUTATION,
            {"accountId": account_id, "dashboard": dashboard.to_variables(for_create=True)}
        )
        detail = self._mutation_result(data, "dashboardCreate", "create")
        logger.info("Dashboard created", extra={"guid": detail.guid, "dashboard_name": detail.name})
        return detail

    def update(self, guid: str, dashboard: DashboardInput) -> DashboardDetail:
        """Replace a dashboard's definition.

        Raises:
            MutationError: If the mutation reports an error
        """
        data = self.api_client.nerdgraph_query(
            DASHBOARD_UPDATE_MUTATION,
            {"guid": guid, "dashboard": dashboard.to_variables(for_create=False)}
        )
        detail = self._mutation_result(data, "dashboardUpdate", "update")
        logger.info("Dashboard updated", extra={"guid": guid})
        return detail

    def delete(self, guid: str) -> None:
        """Delete a dashboard.

        Raises:
            MutationError: If the status is not SUCCESS
        """
        data = self.api_client.nerdgraph_query(DASHBOARD_DELETE_MUTATION, {"guid": guid})
        payload = expect_object(data, "dashboardDelete")

        status = as_string(payload.get("status"))
        if status != "SUCCESS":
            message = first_error_message(payload)
            if message is not None:
                raise MutationError(f"failed to delete dashboard: {message}", operation="delete")
            raise MutationError(f"failed to delete dashboard: status {status}", operation="delete")

        logger.info("Dashboard deleted", extra={"guid": guid})

    def _mutation_result(self, data: Dict[str, Any], field: str, operation: str) -> DashboardDetail:
        payload = expect_object(data, field)

        message = first_error_message(payload)
        if message is not None:
            raise MutationError(f"failed to {operation} dashboard: {message}", operation=operation)

        entity, ok = as_object(payload.get("entityResult"))
        if not ok:
            raise ResponseError.missing_key("entityResult")
        return map_dashboard_entity(entity)
