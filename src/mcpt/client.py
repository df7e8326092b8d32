"""High-level MCP operations: ping, list a feature family, call a tool."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from mcpt._types import OPERATION_ID, ClientConfig, FeatureKind
from mcpt.errors import ArgumentParseError, FeatureNotFoundError, MalformedResultError
from mcpt.jsonrpc import check_ping, result_object
from mcpt.session import McpSession
from mcpt.transport import HttpTransport

logger = logging.getLogger("mcpt.client")


class McpClient:
    """Synchronous MCP client for one host and one run.

    Each operation performs the handshake (once per client) and then sends
    exactly one request::

        with McpClient(ClientConfig(host="http://localhost:8080/mcp")) as client:
            tools = client.list_feature("tools")
    """

    def __init__(
        self, config: ClientConfig, *, transport: httpx.BaseTransport | None = None
    ) -> None:
        self.config = config
        self._transport = HttpTransport(timeout=config.timeout, transport=transport)
        self._session = McpSession(config, self._transport)

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> McpClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @property
    def session_id(self) -> str | None:
        return self._session.session_id

    def ping(self) -> None:
        """Raise unless the server answers ``ping`` with an empty result."""
        self._session.ensure_established()
        response = self._session.request("ping", None, OPERATION_ID)
        check_ping(response)
        logger.debug("Ping OK")

    def list_feature(self, kind: FeatureKind | str) -> list[Any]:
        """Return the raw descriptors from ``<kind>/list``."""
        feature = FeatureKind(kind)
        self._session.ensure_established()
        response = self._session.request(f"{feature}/list", None, OPERATION_ID)
        result = result_object(response)

        features = result.get(feature.value)
        if not isinstance(features, list):
            raise FeatureNotFoundError(f"{feature} not found or wrong type in list result")
        logger.debug("Listed %d %s", len(features), feature)
        return features

    def call_tool(self, tool: str, arguments_json: str) -> dict[str, Any]:
        """Call ``tool`` and return the decoded response, server errors included."""
        try:
            arguments = json.loads(arguments_json)
        except json.JSONDecodeError as exc:
            raise ArgumentParseError(f"Failed to parse arguments JSON: {exc}") from exc

        self._session.ensure_established()
        response = self._session.request(
            "tools/call", {"name": tool, "arguments": arguments}, OPERATION_ID
        )
        if "result" not in response and "error" not in response:
            raise MalformedResultError("Response carries neither result nor error")
        return response
