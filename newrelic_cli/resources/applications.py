"""APM application operations (REST v2)."""

import logging
from typing import Any, Dict, List

from ..api_client import NewRelicAPIClient
from ..models.responses import Application, Metric
from ..navigation import as_bool, as_int, as_list, as_string, expect_list, expect_object, objects_in

logger = logging.getLogger(__name__)


def map_application(node: Dict[str, Any]) -> Application:
    return Application(
        id=as_int(node.get("id")),
        name=as_string(node.get("name")),
        language=as_string(node.get("language")),
        health_status=as_string(node.get("health_status")),
        reporting=as_bool(node.get("reporting")),
        last_reported_at=as_string(node.get("last_reported_at")),
    )


def map_metric(node: Dict[str, Any]) -> Metric:
    values, _ = as_list(node.get("values"))
    return Metric(
        name=as_string(node.get("name")),
        values=[as_string(value) for value in values],
    )


class ApplicationResource:
    """Operations on APM applications."""

    def __init__(self, api_client: NewRelicAPIClient):
        self.api_client = api_client

    def list(self) -> List[Application]:
        data = self.api_client.get_json(f"{self.api_client.rest_url}/applications.json")
        return [map_application(node) for node in objects_in(expect_list(data, "applications"))]

    def get(self, app_id: str) -> Application:
        """Get one application by its numeric ID.

        Raises:
            APIError: With status 404 if the application does not exist
        """
        data = self.api_client.get_json(f"{self.api_client.rest_url}/applications/{app_id}.json")
        return map_application(expect_object(data, "application"))

    def metrics(self, app_id: str) -> List[Metric]:
        """List metric names, and their value names, reported by an application."""
        data = self.api_client.get_json(f"{self.api_client.rest_url}/applications/{app_id}/metrics.json")
        metrics = [map_metric(node) for node in objects_in(expect_list(data, "metrics"))]
        logger.debug("Fetched application metrics", extra={"app_id": app_id, "count": len(metrics)})
        return metrics
