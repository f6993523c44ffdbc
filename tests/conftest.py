"""
Pytest fixtures for the New Relic CLI tests.

This file provides:
- A fake New Relic backend built on ``httpx.MockTransport`` that records
  requests and replays queued responses
- Configuration and API client fixtures wired to the fake
- Environment isolation so real credentials never leak into tests
"""

import json
from typing import Any, Dict, List, Optional

import httpx
import pytest

from newrelic_cli.api_client import NewRelicAPIClient
from newrelic_cli.config import NewRelicConfig
from newrelic_cli.models.identifiers import encode_guid

TEST_API_KEY = "NRAK-" + "x" * 20
TEST_ACCOUNT_ID = "12345"


class RecordedRequest:
    def __init__(self, request: httpx.Request):
        self.method = request.method
        self.url = str(request.url)
        self.headers = request.headers
        body = request.content
        self.json = json.loads(body) if body else None

    @property
    def variables(self) -> Dict[str, Any]:
        return (self.json or {}).get("variables", {})

    @property
    def query(self) -> str:
        return (self.json or {}).get("query", "")


class FakeNewRelic:
    """Records every request and answers with the next queued response."""

    def __init__(self):
        self.requests: List[RecordedRequest] = []
        self._responses: List[httpx.Response] = []

    def queue(self, payload: Any, status_code: int = 200) -> "FakeNewRelic":
        if isinstance(payload, (bytes, str)):
            response = httpx.Response(status_code, content=payload)
        else:
            response = httpx.Response(status_code, json=payload)
        self._responses.append(response)
        return self

    def graphql(self, data: Any = None, errors: Optional[List[Dict[str, Any]]] = None) -> "FakeNewRelic":
        payload: Dict[str, Any] = {"data": data}
        if errors is not None:
            payload["errors"] = errors
        return self.queue(payload)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(RecordedRequest(request))
        if not self._responses:
            raise AssertionError(f"unexpected request: {request.method} {request.url}")
        return self._responses.pop(0)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last(self) -> RecordedRequest:
        return self.requests[-1]


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Clear NEWRELIC_* variables and point the config file at a temp path."""
    for name in (
        "NEWRELIC_API_KEY", "NEWRELIC_ACCOUNT_ID", "NEWRELIC_REGION",
        "NEWRELIC_TIMEOUT", "NEWRELIC_LOG_LEVEL", "NEWRELIC_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    config_file = tmp_path / "config.json"
    monkeypatch.setenv("NEWRELIC_CONFIG_FILE", str(config_file))
    return config_file


@pytest.fixture
def fake_api():
    return FakeNewRelic()


@pytest.fixture
def config():
    return NewRelicConfig(api_key=TEST_API_KEY, account_id=TEST_ACCOUNT_ID)


@pytest.fixture
def client(config, fake_api):
    api_client = NewRelicAPIClient(config, transport=fake_api.transport)
    yield api_client
    api_client.close()


@pytest.fixture
def app_guid():
    """A 40-character APM application GUID for application 890123."""
    return str(encode_guid("1234567", "APM", "APPLICATION", "890123"))


def entity_search(*entities: Dict[str, Any]) -> Dict[str, Any]:
    """GraphQL ``data`` for an entity search returning ``entities``."""
    return {"actor": {"entitySearch": {"results": {"entities": list(entities)}}}}
