"""Broker client: base URL, connection options, transport and auth."""

import logging
from dataclasses import dataclass
from urllib.parse import quote

from core.types import TokenProvider
from nakadi.transport import AiohttpTransport, HttpRequest, Transport

logger = logging.getLogger(__name__)

DEFAULT_NAKADI_URL = "http://localhost:8080"


@dataclass
class ClientOptions:
    """Connection settings used when the client builds its own transport."""

    connection_timeout: float = 30.0
    max_connections: int = 100

    def __post_init__(self):
        self.connection_timeout = float(self.connection_timeout)
        self.max_connections = int(self.max_connections)


class Client:
    """
    Shared handle to one broker.

    API objects (e.g. SubscriptionAPI) borrow the client's transport; the
    client closes the transport only if it created it.
    """

    def __init__(
        self,
        nakadi_url: str = DEFAULT_NAKADI_URL,
        options: ClientOptions | None = None,
        transport: Transport | None = None,
        token_provider: TokenProvider | None = None,
    ):
        self.base_url = nakadi_url.rstrip("/") if nakadi_url else ""

        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError(
                f"Client nakadi_url must start with http:// or https://, got: {nakadi_url!r}"
            )

        self.options = options or ClientOptions()
        self._owns_transport = transport is None
        self.transport: Transport = transport or AiohttpTransport(
            timeout_seconds=self.options.connection_timeout,
            max_connections=self.options.max_connections,
        )
        self._token_provider = token_provider

        logger.info(
            "Nakadi client initialized",
            extra={
                "base_url": self.base_url,
                "connection_timeout": self.options.connection_timeout,
            },
        )

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_transport:
            await self.transport.close()

    def url(self, *segments: str) -> str:
        """Join path segments onto the base URL, escaping each segment."""
        path = "/".join(quote(segment, safe="") for segment in segments)
        return f"{self.base_url}/{path}"

    async def build_request(
        self, method: str, url: str, body: bytes | None = None
    ) -> HttpRequest:
        headers = {"Accept": "application/json"}
        if body is not None:
            headers["Content-Type"] = "application/json"
        if self._token_provider is not None:
            token = await self._token_provider.get_token()
            headers["Authorization"] = f"Bearer {token}"
        return HttpRequest(method=method, url=url, headers=headers, body=body)


__all__ = ["Client", "ClientOptions", "DEFAULT_NAKADI_URL"]
