"""Unit tests for the ping, list and call operations."""

from __future__ import annotations

import pytest
from mock_server import ADD_TOOL, SESSION_ID, MockMcpServer

from mcpt import ClientConfig, McpClient
from mcpt.errors import (
    ArgumentParseError,
    FeatureNotFoundError,
    IDMismatchError,
    MalformedResultError,
    ProtocolMismatchError,
)


def _client_for(server: MockMcpServer) -> McpClient:
    return McpClient(ClientConfig(host="http://mcp.test/mcp"), transport=server.transport())


class TestPing:
    def test_ping_ok(self, client: McpClient, mock_server: MockMcpServer) -> None:
        client.ping()

        assert mock_server.methods() == ["initialize", "notifications/initialized", "ping"]
        ping = mock_server.requests[-1]
        assert ping.body == {"jsonrpc": "2.0", "id": "123", "method": "ping"}
        assert ping.headers["mcp-session-id"] == SESSION_ID

    def test_non_empty_result_fails(self) -> None:
        server = MockMcpServer(
            overrides={"ping": {"jsonrpc": "2.0", "id": "123", "result": {"status": "ok"}}}
        )
        with _client_for(server) as client, pytest.raises(MalformedResultError):
            client.ping()

    def test_wrong_id_fails(self) -> None:
        server = MockMcpServer(overrides={"ping": {"jsonrpc": "2.0", "id": "1", "result": {}}})
        with _client_for(server) as client, pytest.raises(IDMismatchError):
            client.ping()

    def test_wrong_jsonrpc_fails(self) -> None:
        server = MockMcpServer(overrides={"ping": {"jsonrpc": "1.0", "id": "123", "result": {}}})
        with _client_for(server) as client, pytest.raises(ProtocolMismatchError):
            client.ping()


class TestListFeature:
    def test_list_tools(self, client: McpClient, mock_server: MockMcpServer) -> None:
        tools = client.list_feature("tools")

        assert [t["name"] for t in tools] == ["add", "search"]
        assert mock_server.requests[-1].body == {
            "jsonrpc": "2.0",
            "id": "123",
            "method": "tools/list",
        }

    def test_single_tool(self) -> None:
        server = MockMcpServer(tools=[ADD_TOOL])
        with _client_for(server) as client:
            tools = client.list_feature("tools")
        assert len(tools) == 1
        assert tools[0]["name"] == "add"

    @pytest.mark.parametrize("kind", ["prompts", "resources"])
    def test_other_kinds(self, kind: str, mock_server: MockMcpServer) -> None:
        with _client_for(mock_server) as client:
            assert client.list_feature(kind) == []
        assert mock_server.methods()[-1] == f"{kind}/list"

    def test_missing_feature_key(self) -> None:
        server = MockMcpServer(
            overrides={"tools/list": {"jsonrpc": "2.0", "id": "123", "result": {"prompts": []}}}
        )
        with _client_for(server) as client, pytest.raises(FeatureNotFoundError):
            client.list_feature("tools")

    def test_feature_not_a_list(self) -> None:
        server = MockMcpServer(
            overrides={"tools/list": {"jsonrpc": "2.0", "id": "123", "result": {"tools": {}}}}
        )
        with _client_for(server) as client, pytest.raises(FeatureNotFoundError):
            client.list_feature("tools")

    def test_missing_result(self) -> None:
        server = MockMcpServer(overrides={"tools/list": {"jsonrpc": "2.0", "id": "123"}})
        with _client_for(server) as client, pytest.raises(MalformedResultError):
            client.list_feature("tools")

    def test_unknown_kind(self, client: McpClient, mock_server: MockMcpServer) -> None:
        with pytest.raises(ValueError):
            client.list_feature("widgets")
        assert mock_server.requests == []


class TestCallTool:
    def test_call_returns_full_response(
        self, client: McpClient, mock_server: MockMcpServer
    ) -> None:
        response = client.call_tool("add", '{"a": 2, "b": 3}')

        assert response["jsonrpc"] == "2.0"
        assert response["id"] == "123"
        assert response["result"]["content"][0]["text"] == '{"a": 2, "b": 3}'
        assert mock_server.requests[-1].body == {
            "jsonrpc": "2.0",
            "id": "123",
            "method": "tools/call",
            "params": {"name": "add", "arguments": {"a": 2, "b": 3}},
        }

    def test_unknown_tool_is_still_sent(
        self, client: McpClient, mock_server: MockMcpServer
    ) -> None:
        response = client.call_tool("nonexistent_tool", "{}")

        assert mock_server.methods()[-1] == "tools/call"
        assert response == {
            "jsonrpc": "2.0",
            "id": "123",
            "error": {"code": -32602, "message": "Unknown tool: nonexistent_tool"},
        }

    def test_arguments_can_be_any_json(
        self, client: McpClient, mock_server: MockMcpServer
    ) -> None:
        client.call_tool("add", "[1, 2]")
        assert mock_server.requests[-1].body["params"]["arguments"] == [1, 2]

    def test_invalid_arguments_fail_before_any_request(
        self, client: McpClient, mock_server: MockMcpServer
    ) -> None:
        with pytest.raises(ArgumentParseError):
            client.call_tool("add", "{a: 2}")
        assert mock_server.requests == []

    def test_response_without_result_or_error(self) -> None:
        server = MockMcpServer(overrides={"tools/call": {"jsonrpc": "2.0", "id": "123"}})
        with _client_for(server) as client, pytest.raises(MalformedResultError):
            client.call_tool("add", "{}")


class TestSingleHandshake:
    def test_operations_share_one_handshake(
        self, client: McpClient, mock_server: MockMcpServer
    ) -> None:
        client.ping()
        client.list_feature("tools")

        assert mock_server.methods().count("initialize") == 1
        assert client.session_id == SESSION_ID
        assert all(
            r.headers.get("mcp-session-id") == SESSION_ID for r in mock_server.requests[1:]
        )
