"""Deployment marker operations."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..api_client import NewRelicAPIClient
from ..exceptions import ValidationError
from ..models.responses import Deployment, NRQLResult
from ..navigation import as_int, as_string, expect_list, expect_object, objects_in
from ..time_utils import TimeParser
from .nrql import NRQLResource

logger = logging.getLogger(__name__)


def map_deployment(node: Dict[str, Any]) -> Deployment:
    return Deployment(
        id=as_int(node.get("id")),
        revision=as_string(node.get("revision")),
        description=as_string(node.get("description")),
        user=as_string(node.get("user")),
        timestamp=as_string(node.get("timestamp")),
    )


def build_search_query(
    where_clause: str,
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
    limit: int = 0
) -> str:
    """Build the NRQL used by deployment search.

    ``SELECT * FROM Deployment WHERE <clause> [SINCE <epoch>] [UNTIL <epoch>] [LIMIT <n>]``
    """
    nrql = f"SELECT * FROM Deployment WHERE {where_clause}"
    if since is not None:
        nrql += f" SINCE {TimeParser.to_epoch_seconds(since)}"
    if until is not None:
        nrql += f" UNTIL {TimeParser.to_epoch_seconds(until)}"
    if limit > 0:
        nrql += f" LIMIT {limit}"
    return nrql


class DeploymentResource:
    """Deployment markers for APM applications."""

    def __init__(self, api_client: NewRelicAPIClient):
        self.api_client = api_client
        self.nrql = NRQLResource(api_client)

    def list(self, app_id: str) -> List[Deployment]:
        data = self.api_client.get_json(f"{self.api_client.rest_url}/applications/{app_id}/deployments.json")
        return [map_deployment(node) for node in objects_in(expect_list(data, "deployments"))]

    def create(
        self,
        app_id: str,
        revision: str,
        description: str = "",
        user: str = "",
        changelog: str = ""
    ) -> Deployment:
        """Record a deployment for an application.

        Optional fields are left out of the request when empty.

        Raises:
            ValidationError: If revision is empty
        """
        if not revision:
            raise ValidationError("revision is required", field_name="revision")

        deployment: Dict[str, Any] = {"revision": revision}
        if description:
            deployment["description"] = description
        if user:
            deployment["user"] = user
        if changelog:
            deployment["changelog"] = changelog

        data = self.api_client.post_json(
            f"{self.api_client.rest_url}/applications/{app_id}/deployments.json",
            {"deployment": deployment}
        )
        created = map_deployment(expect_object(data, "deployment"))
        logger.info("Deployment created", extra={"app_id": app_id, "revision": revision})
        return created

    def search(
        self,
        where_clause: str,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        limit: int = 0
    ) -> NRQLResult:
        """Search Deployment events across applications with NRQL."""
        return self.nrql.query(build_search_query(where_clause, since, until, limit))
