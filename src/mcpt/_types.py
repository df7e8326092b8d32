"""Data models for client configuration, JSON-RPC envelopes and tool schemas."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

JSONRPC_VERSION = "2.0"
DEFAULT_HOST = "http://localhost:8080/mcp"
DEFAULT_PROTOCOL_VERSION = "2025-06-18"
DEFAULT_TIMEOUT = 5.0
CLIENT_VERSION = "1.0.0"
SESSION_HEADER = "Mcp-Session-Id"

# Request ids used by the handshake and by every single-shot operation.
INITIALIZE_ID = 1
OPERATION_ID = "123"


class OutputFormat(StrEnum):
    """How `list` renders feature descriptors."""

    JSON = "json"
    CALL = "call"


class FeatureKind(StrEnum):
    """Feature families a server can enumerate with `<kind>/list`."""

    TOOLS = "tools"
    PROMPTS = "prompts"
    RESOURCES = "resources"


class SessionState(StrEnum):
    """Lifecycle of an MCP session within one process run."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    ESTABLISHED = "established"


class ClientConfig(BaseModel):
    """Settings for one client run, built once by the CLI."""

    model_config = ConfigDict(frozen=True)

    host: str = DEFAULT_HOST
    protocol_version: str = DEFAULT_PROTOCOL_VERSION
    output: OutputFormat = OutputFormat.JSON
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    client_name: str = "mcpt"

    @field_validator("protocol_version")
    @classmethod
    def _default_when_empty(cls, value: str) -> str:
        return value or DEFAULT_PROTOCOL_VERSION


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request, or a notification when ``id`` is None."""

    model_config = ConfigDict(frozen=True)

    jsonrpc: str = JSONRPC_VERSION
    id: int | str | None = None
    method: str
    params: Any = None

    @property
    def is_notification(self) -> bool:
        return self.id is None

    def to_payload(self) -> dict[str, Any]:
        """Wire form: ``id`` omitted for notifications, ``params`` omitted when unset."""
        payload: dict[str, Any] = {"jsonrpc": self.jsonrpc}
        if self.id is not None:
            payload["id"] = self.id
        payload["method"] = self.method
        if self.params is not None:
            payload["params"] = self.params
        return payload


class SchemaNode(BaseModel):
    """The subset of JSON Schema used to describe a tool's input.

    Unknown keywords (``description``, ``default``, ``$schema``...) are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    type: str | list[str] | None = None
    properties: dict[str, SchemaNode] | None = None
    required: list[str] | None = None
    enum: list[Any] | None = None
    items: SchemaNode | None = None
    unique_items: bool | None = Field(default=None, alias="uniqueItems")


class FeatureDescriptor(BaseModel):
    """One entry of a ``tools/list``, ``prompts/list`` or ``resources/list`` result."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    name: str
    input_schema: SchemaNode | None = Field(default=None, alias="inputSchema")
