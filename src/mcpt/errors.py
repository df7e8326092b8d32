"""Exception taxonomy. Every error is fatal to the current invocation."""

from __future__ import annotations


class McptError(Exception):
    """Base class for all client errors."""


class TransportError(McptError):
    """The HTTP exchange failed (connection, send or read)."""


class TransportTimeoutError(TransportError):
    """The run's deadline expired before a response was fully read."""


class DecodeError(TransportError):
    """A response body that had to be JSON was empty or not JSON."""


class MissingSessionIDError(McptError):
    """The initialize response carried no Mcp-Session-Id header."""


class ProtocolError(McptError):
    """A response violated the JSON-RPC correlation contract."""


class ProtocolMismatchError(ProtocolError):
    """The response is not a JSON-RPC 2.0 object."""


class IDMismatchError(ProtocolError):
    """The response id does not echo the request id."""

    def __init__(self, expected: object, actual: object) -> None:
        super().__init__(f"Unexpected id value: expected {expected!r}, got {actual!r}")
        self.expected = expected
        self.actual = actual


class MalformedResultError(ProtocolError):
    """The response ``result`` is missing or has the wrong shape."""


class FeatureNotFoundError(McptError):
    """A list result lacks the requested feature array."""


class ArgumentParseError(McptError):
    """User-supplied tool arguments are not valid JSON."""


class SchemaMalformedError(McptError):
    """A tool's input schema is inconsistent with its own required list."""
