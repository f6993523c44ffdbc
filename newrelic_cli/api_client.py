"""HTTP transport for the New Relic REST and NerdGraph APIs."""

import json
import logging
from typing import Any, Dict, Optional

import httpx

from .auth import NewRelicAuth
from .config import NewRelicConfig
from .exceptions import APIError, GraphQLError, ResponseError, TimeoutError, TransportError
from .navigation import as_object, first_error_message


logger = logging.getLogger(__name__)


class NewRelicAPIClient:
    """Low-level client for New Relic REST and NerdGraph APIs.

    Every call is a single synchronous round-trip. Errors propagate to the
    caller unchanged: there is no retry and no rate limiting.

    Attributes:
        config: New Relic configuration
        auth: Credential holder supplying request headers and the account ID
        http_client: Lazily created ``httpx.Client``
    """

    def __init__(
        self,
        config: NewRelicConfig,
        auth: Optional[NewRelicAuth] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        """Initialize API client with configuration and authentication.

        Args:
            config: New Relic configuration containing region and timeout
            auth: Credential holder; built from ``config`` when omitted
            transport: Optional httpx transport, used to substitute a fake in tests
        """
        self.config = config
        self.auth = auth or NewRelicAuth(config)
        self._transport = transport
        self._http_client: Optional[httpx.Client] = None

        endpoints = self.config.endpoints
        self.rest_url = endpoints.rest
        self.nerdgraph_url = endpoints.nerdgraph
        self.synthetics_url = endpoints.synthetics

        logger.debug(
            "Initialized New Relic API client",
            extra={
                "region": self.config.region,
                "nerdgraph_url": self.nerdgraph_url,
                "timeout": self.config.timeout
            }
        )

    @property
    def http_client(self) -> httpx.Client:
        """Get or create HTTP client for API requests."""
        if self._http_client is None:
            self._http_client = httpx.Client(
                timeout=httpx.Timeout(self.config.timeout),
                headers=self.auth.get_auth_headers(),
                transport=self._transport
            )
        return self._http_client

    @property
    def account_id(self) -> int:
        """Configured account ID; raises ConfigurationError when unset."""
        return self.auth.account_id_int()

    def request(self, method: str, url: str, json_body: Optional[Any] = None) -> bytes:
        """Execute one HTTP request and return the raw response body.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            url: Absolute URL
            json_body: Optional JSON-serializable request body

        Returns:
            Response body bytes for a status below 400

        Raises:
            APIError: If the response status is 400 or above
            TimeoutError: If the request times out
            TransportError: If the request cannot be encoded or sent
        """
        content = None
        if json_body is not None:
            try:
                content = json.dumps(json_body).encode("utf-8")
            except (TypeError, ValueError) as e:
                raise TransportError(f"failed to encode request body: {e}") from e

        logger.debug(
            f"Making {method} request",
            extra={"method": method, "url": url, "has_json_data": json_body is not None}
        )

        try:
            response = self.http_client.request(method=method, url=url, content=content)
        except httpx.TimeoutException as e:
            raise TimeoutError(
                f"request to {url} timed out",
                timeout_seconds=self.config.timeout,
                operation=f"{method} {url}"
            ) from e
        except httpx.RequestError as e:
            raise TransportError(
                f"request to {url} failed: {e}",
                context={"method": method, "url": url, "error_type": type(e).__name__}
            ) from e

        logger.debug(
            "Received response",
            extra={
                "status_code": response.status_code,
                "response_size": len(response.content),
                "url": url
            }
        )

        if response.status_code >= 400:
            raise APIError(
                response.status_code,
                response_body=response.text,
                context={"method": method, "url": url}
            )

        return response.content

    def _parse_json(self, body: bytes) -> Any:
        """Decode a JSON body.

        Raises:
            ResponseError: If the body is not valid JSON
        """
        try:
            return json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ResponseError("failed to parse response", context={"error": str(e)}) from e

    def get_json(self, url: str) -> Dict[str, Any]:
        """GET a REST resource and return its decoded JSON object."""
        data, ok = as_object(self._parse_json(self.request("GET", url)))
        if not ok:
            raise ResponseError("failed to parse response: expected a JSON object")
        return data

    def post_json(self, url: str, json_body: Any) -> Dict[str, Any]:
        """POST to a REST resource and return its decoded JSON object."""
        data, ok = as_object(self._parse_json(self.request("POST", url, json_body)))
        if not ok:
            raise ResponseError("failed to parse response: expected a JSON object")
        return data

    def nerdgraph_query(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Execute a NerdGraph document and return its ``data`` object.

        Any non-empty ``errors`` list fails the call, even when ``data`` is also
        present. Only the first error message is reported.

        Args:
            query: GraphQL query or mutation document
            variables: Bound variables for the document

        Returns:
            The ``data`` object, or an empty dict when ``data`` is null

        Raises:
            GraphQLError: If the response carries errors
            ResponseError: If the response is not a JSON object
        """
        body = {"query": query, "variables": variables or {}}
        payload, ok = as_object(self._parse_json(self.request("POST", self.nerdgraph_url, body)))
        if not ok:
            raise ResponseError("failed to parse response: expected a JSON object")

        message = first_error_message(payload)
        if message is not None:
            raise GraphQLError(message, context={"error_count": len(payload["errors"])})

        data, _ = as_object(payload.get("data"))
        return data

    def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        if self._http_client:
            self._http_client.close()
            self._http_client = None

        logger.debug("New Relic API client closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
