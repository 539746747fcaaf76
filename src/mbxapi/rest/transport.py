"""
HTTP transport for the REST client.

One aiohttp session per transport, opened explicitly (or via ``async with``)
and closed on every exit path. Once closed, a transport refuses requests
until it is opened again. Calls are serialized: a transport never has
more than one request in flight. There are no retries; a failed round trip
is reported once as TransportError.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import aiohttp
from yarl import URL

from mbxapi.rest.errors import TransportError
from mbxapi.rest.types import HttpMethod, RawResponse

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "mbxapi-python/0.1.0"


@dataclass(frozen=True)
class TransportConfig:
    """
    Connection settings fixed for the lifetime of a transport.

    Attributes:
        verify_peer: Verify the server TLS certificate and hostname.
        connect_timeout_s: Timeout for establishing a connection.
        total_timeout_s: Timeout for the whole request including body read.
        user_agent: User-Agent header sent on every request.
    """

    verify_peer: bool = True
    connect_timeout_s: float = 20.0
    total_timeout_s: float = 300.0
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        if self.connect_timeout_s <= 0:
            raise ValueError(f"connect_timeout_s must be > 0, got {self.connect_timeout_s}")
        if self.total_timeout_s <= 0:
            raise ValueError(f"total_timeout_s must be > 0, got {self.total_timeout_s}")


class HttpTransport:
    """Executes single HTTP round trips over a reusable aiohttp session."""

    def __init__(self, config: TransportConfig | None = None) -> None:
        self._config = config or TransportConfig()
        self._session: aiohttp.ClientSession | None = None
        self._closed = False
        self._lock = asyncio.Lock()

    @property
    def config(self) -> TransportConfig:
        return self._config

    @property
    def is_open(self) -> bool:
        return self._session is not None and not self._session.closed

    async def open(self) -> None:
        """Create the session. No-op if already open."""
        self._closed = False
        if self.is_open:
            return
        timeout = aiohttp.ClientTimeout(
            total=self._config.total_timeout_s,
            connect=self._config.connect_timeout_s,
        )
        connector = aiohttp.TCPConnector(ssl=self._config.verify_peer)
        self._session = aiohttp.ClientSession(
            timeout=timeout,
            connector=connector,
            headers={"User-Agent": self._config.user_agent},
        )

    async def close(self) -> None:
        """Close the session. Safe to call more than once."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
        self._closed = True

    async def __aenter__(self) -> HttpTransport:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def execute(
        self,
        url: str,
        method: HttpMethod,
        headers: Mapping[str, str] | None = None,
        body: Mapping[str, str] | None = None,
    ) -> RawResponse:
        """
        Perform one HTTP request and buffer the response body.

        Args:
            url: Fully composed, already-encoded URL. Sent byte-for-byte.
            method: HTTP verb.
            headers: Extra request headers.
            body: Form fields for the request body, or None for no body.

        Returns:
            RawResponse with status and body bytes.

        Raises:
            TransportError: On connection, TLS or timeout failures, or when
                called after close().
        """
        if self._closed:
            raise TransportError("Transport is closed")
        await self.open()
        assert self._session is not None  # Type narrowing

        async with self._lock:
            try:
                async with self._session.request(
                    method.value,
                    URL(url, encoded=True),
                    headers=dict(headers or {}),
                    data=dict(body) if body is not None else None,
                ) as response:
                    payload = await response.read()
                    return RawResponse(status=response.status, body=payload)
            except asyncio.TimeoutError as e:
                logger.warning(
                    "Request timed out",
                    extra={"url": url, "method": method.value, "error": str(e)},
                )
                raise TransportError(f"Request timed out: {str(e) or type(e).__name__}") from e
            except aiohttp.ClientError as e:
                logger.warning(
                    "Request failed",
                    extra={"url": url, "method": method.value, "error": str(e)},
                )
                raise TransportError(f"HTTP transport error: {e}") from e
