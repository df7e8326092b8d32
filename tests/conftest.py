"""Shared test fixtures for mcpt."""

from __future__ import annotations

from collections.abc import Generator

import pytest
from mock_server import MockMcpServer, serve

from mcpt import ClientConfig, McpClient

TEST_HOST = "http://mcp.test/mcp"


@pytest.fixture
def mock_server() -> MockMcpServer:
    return MockMcpServer()


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(host=TEST_HOST)


@pytest.fixture
def client(mock_server: MockMcpServer, config: ClientConfig) -> Generator[McpClient, None, None]:
    with McpClient(config, transport=mock_server.transport()) as c:
        yield c


@pytest.fixture
def live_server(mock_server: MockMcpServer) -> Generator[str, None, None]:
    """Serve ``mock_server`` over real HTTP and yield its MCP URL."""
    with serve(mock_server.create_app()) as url:
        yield url
