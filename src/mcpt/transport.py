"""Single-shot HTTP POST transport bound to one run-wide deadline."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx

from mcpt._types import DEFAULT_TIMEOUT
from mcpt.errors import DecodeError, TransportError, TransportTimeoutError

logger = logging.getLogger("mcpt.transport")

_BASE_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class Deadline:
    """A fixed point in time shared by every request of a run."""

    def __init__(self, seconds: float, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._expires_at = clock() + seconds

    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0


@dataclass(frozen=True)
class HttpResponse:
    """A fully read response. ``body`` is the decoded JSON, or None."""

    status_code: int
    headers: httpx.Headers
    body: Any


def _decode(status_code: int, content: bytes, json_required: bool) -> Any:
    is_error = status_code >= 400
    if not content:
        if json_required:
            if is_error:
                raise TransportError(f"HTTP {status_code} with empty body")
            raise DecodeError(f"Empty response body (HTTP {status_code})")
        return None
    try:
        return json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        if not json_required:
            return None
        if is_error:
            text = content[:200].decode(errors="replace")
            raise TransportError(f"HTTP {status_code}: {text}") from exc
        raise DecodeError(f"Failed to decode JSON response: {exc}") from exc


def _limit_read_timeout(request: httpx.Request, seconds: float) -> None:
    # The connection pool looks the read timeout up again before every read.
    timeout = request.extensions.get("timeout")
    if isinstance(timeout, dict):
        timeout["read"] = seconds


class HttpTransport:
    """POSTs JSON bodies to an MCP endpoint.

    All requests share one :class:`Deadline`. Connect, send and every body
    read get only the budget that is left, and the body is checked against
    the deadline chunk by chunk. There are no retries.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
        deadline: Deadline | None = None,
    ) -> None:
        self._deadline = deadline or Deadline(timeout)
        self._client = httpx.Client(transport=transport)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _read_body(self, resp: httpx.Response, url: str) -> bytes:
        chunks: list[bytes] = []
        for chunk in resp.iter_bytes():
            chunks.append(chunk)
            remaining = self._deadline.remaining()
            if remaining <= 0.0:
                raise TransportTimeoutError(
                    f"Deadline exceeded while reading response from {url}"
                )
            _limit_read_timeout(resp.request, remaining)
        if self._deadline.expired:
            raise TransportTimeoutError(f"Deadline exceeded while reading response from {url}")
        return b"".join(chunks)

    def post(
        self,
        url: str,
        body: bytes,
        *,
        headers: dict[str, str] | None = None,
        json_required: bool = True,
    ) -> HttpResponse:
        """Send one POST and return the fully read response."""
        remaining = self._deadline.remaining()
        if remaining <= 0.0:
            raise TransportTimeoutError("Deadline exceeded before request was sent")

        merged = dict(_BASE_HEADERS)
        if headers:
            merged.update(headers)

        try:
            with self._client.stream(
                "POST", url, content=body, headers=merged, timeout=httpx.Timeout(remaining)
            ) as resp:
                content = self._read_body(resp, url)
        except httpx.TimeoutException as exc:
            raise TransportTimeoutError(f"Request to {url} timed out: {exc}") from exc
        except httpx.InvalidURL as exc:
            raise TransportError(f"Invalid URL {url!r}: {exc}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Request to {url} failed: {exc}") from exc

        logger.debug(
            "<- %d %s",
            resp.status_code,
            content[:200].decode(errors="replace") if content else "(empty)",
        )
        return HttpResponse(
            status_code=resp.status_code,
            headers=resp.headers,
            body=_decode(resp.status_code, content, json_required),
        )
