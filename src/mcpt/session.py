"""MCP session: the initialize handshake and correlated requests."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from mcpt._types import (
    CLIENT_VERSION,
    INITIALIZE_ID,
    SESSION_HEADER,
    ClientConfig,
    JsonRpcRequest,
    SessionState,
)
from mcpt.errors import MissingSessionIDError
from mcpt.jsonrpc import build_notification, build_request, check_response, encode
from mcpt.transport import HttpResponse, HttpTransport

logger = logging.getLogger("mcpt.session")


@dataclass
class Session:
    """Per-run session state. ``session_id`` is written once by the handshake."""

    host: str
    protocol_version: str
    session_id: str | None = None
    state: SessionState = SessionState.UNINITIALIZED
    server_info: dict[str, Any] | None = None
    server_protocol_version: str | None = None

    def bind(self, session_id: str) -> None:
        if self.session_id is not None:
            raise RuntimeError("Session id is already set")
        self.session_id = session_id


class McpSession:
    """Drives the handshake, then sends requests carrying the session id."""

    def __init__(self, config: ClientConfig, transport: HttpTransport) -> None:
        self._config = config
        self._transport = transport
        self.session = Session(host=config.host, protocol_version=config.protocol_version)

    @property
    def session_id(self) -> str | None:
        return self.session.session_id

    def _headers(self) -> dict[str, str]:
        if self.session.session_id:
            return {SESSION_HEADER: self.session.session_id}
        return {}

    def _initialize_params(self) -> dict[str, Any]:
        return {
            "capabilities": {"textDocument": {"synchronization": {"didSave": True}}},
            "clientInfo": {"name": self._config.client_name, "version": CLIENT_VERSION},
            "protocolVersion": self.session.protocol_version,
        }

    def _send(self, request: JsonRpcRequest, *, json_required: bool) -> HttpResponse:
        params = json.dumps(request.params, default=str)[:200] if request.params else ""
        logger.debug("-> %s %s", request.method, params)
        return self._transport.post(
            self.session.host,
            encode(request),
            headers=self._headers(),
            json_required=json_required,
        )

    # -- Handshake -----------------------------------------------------------

    def ensure_established(self) -> None:
        """Run the handshake unless it already completed."""
        if self.session.state == SessionState.ESTABLISHED:
            return
        if self.session.state == SessionState.INITIALIZING:
            raise RuntimeError("A previous handshake attempt did not complete")
        self.handshake()

    def handshake(self) -> None:
        """Send initialize, store the session id, then notifications/initialized."""
        if self.session.state != SessionState.UNINITIALIZED:
            raise RuntimeError(f"Handshake already attempted (state: {self.session.state})")
        self.session.state = SessionState.INITIALIZING

        request = build_request("initialize", INITIALIZE_ID, self._initialize_params())
        resp = self._send(request, json_required=False)

        session_id = resp.headers.get(SESSION_HEADER)
        if not session_id:
            raise MissingSessionIDError(f"{SESSION_HEADER} not found in response headers")
        self.session.bind(session_id)
        logger.info("MCP-Session-ID: %s", session_id)
        self._record_server_info(resp.body)

        notification = build_notification("notifications/initialized")
        ack = self._send(notification, json_required=False)
        logger.debug("<- %d (notification ack)", ack.status_code)

        self.session.state = SessionState.ESTABLISHED

    def _record_server_info(self, body: Any) -> None:
        if not isinstance(body, dict) or not isinstance(body.get("result"), dict):
            return
        result = body["result"]
        if isinstance(result.get("serverInfo"), dict):
            self.session.server_info = result["serverInfo"]
            logger.info(
                "Server: %s %s",
                result["serverInfo"].get("name", "unknown"),
                result["serverInfo"].get("version", ""),
            )
        if isinstance(result.get("protocolVersion"), str):
            self.session.server_protocol_version = result["protocolVersion"]
            if result["protocolVersion"] != self.session.protocol_version:
                logger.info(
                    "Server negotiated protocol version %s (requested %s)",
                    result["protocolVersion"],
                    self.session.protocol_version,
                )

    # -- Correlated requests -------------------------------------------------

    def request(self, method: str, params: Any, request_id: int | str) -> dict[str, Any]:
        """Send a request and return the response once its envelope checks out."""
        if self.session.state != SessionState.ESTABLISHED:
            raise RuntimeError(f"Cannot send {method!r} before the session is established")
        resp = self._send(build_request(method, request_id, params), json_required=True)
        return check_response(resp.body, request_id)
