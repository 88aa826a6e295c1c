"""
HTTP transport seam.

The resource engine only needs "send a request, get status + headers + body".
Anything satisfying the Transport protocol can be injected; AiohttpTransport is
the default and owns a pooled aiohttp.ClientSession.
"""

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

import aiohttp

logger = logging.getLogger(__name__)

# Exceptions a transport raises when no response was received
TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (
    aiohttp.ClientError,
    asyncio.TimeoutError,
    OSError,
)


@dataclass(frozen=True)
class HttpRequest:
    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None


@dataclass(frozen=True)
class HttpResponse:
    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""


class Transport(Protocol):
    """
    Protocol for sending one HTTP exchange.

    Implementations must be safe for concurrent use by many tasks and must
    raise one of TRANSPORT_ERRORS when no response could be obtained.
    """

    async def send(self, request: HttpRequest) -> HttpResponse:
        ...

    async def close(self) -> None:
        ...


class AiohttpTransport:
    """Transport backed by a lazily created aiohttp.ClientSession."""

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        max_connections: int = 100,
        session: aiohttp.ClientSession | None = None,
    ):
        self.timeout_seconds = timeout_seconds
        self.max_connections = max_connections
        self._session = session
        self._owns_session = session is None
        self._closed = False

    async def __aenter__(self) -> "AiohttpTransport":
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._closed:
            raise RuntimeError("AiohttpTransport is closed, cannot create new session")
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=self.max_connections,
                limit_per_host=self.max_connections,
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        self._closed = True
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            # Let the connector finish closing its transports
            await asyncio.sleep(0)
        self._session = None

    async def send(self, request: HttpRequest) -> HttpResponse:
        session = await self._ensure_session()
        async with session.request(
            request.method,
            request.url,
            data=request.body,
            headers=dict(request.headers),
        ) as response:
            body = await response.read()
            return HttpResponse(
                status=response.status,
                headers=dict(response.headers),
                body=body,
            )


__all__ = [
    "AiohttpTransport",
    "HttpRequest",
    "HttpResponse",
    "TRANSPORT_ERRORS",
    "Transport",
]
