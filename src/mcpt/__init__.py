"""mcpt: command-line client for probing and calling MCP servers over HTTP."""

from importlib.metadata import version

from mcpt._types import ClientConfig
from mcpt.client import McpClient

__all__ = ["ClientConfig", "McpClient", "__version__"]
__version__ = version("mcpt")
