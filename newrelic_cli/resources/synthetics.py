"""Synthetic monitor operations (Synthetics REST v3)."""

import logging
from typing import Any, Dict, List

from ..api_client import NewRelicAPIClient
from ..models.responses import SyntheticMonitor
from ..navigation import as_int, as_string, expect_list, objects_in

logger = logging.getLogger(__name__)


def map_monitor(node: Dict[str, Any]) -> SyntheticMonitor:
    return SyntheticMonitor(
        id=as_string(node.get("id")),
        name=as_string(node.get("name")),
        type=as_string(node.get("type")),
        frequency=as_int(node.get("frequency")),
        status=as_string(node.get("status")),
        uri=as_string(node.get("uri")),
    )


class SyntheticsResource:
    """Synthetic monitors, served from the region's Synthetics base URL."""

    def __init__(self, api_client: NewRelicAPIClient):
        self.api_client = api_client

    def list(self) -> List[SyntheticMonitor]:
        data = self.api_client.get_json(f"{self.api_client.synthetics_url}/monitors.json")
        monitors = [map_monitor(node) for node in objects_in(expect_list(data, "monitors"))]
        logger.debug("Listed synthetic monitors", extra={"count": len(monitors)})
        return monitors

    def get(self, monitor_id: str) -> SyntheticMonitor:
        # The single-monitor endpoint returns the monitor object itself
        data = self.api_client.get_json(f"{self.api_client.synthetics_url}/monitors/{monitor_id}")
        return map_monitor(data)
