"""Subscription API: Get, List, Create and Delete with optional retry."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import TypeVar

from core.errors.exceptions import ConnectionError, NakadiError, RemoteError
from core.resilience.retry import retry_operation
from core.types import ErrorCategory
from nakadi.classify import classify_response, classify_transport_error
from nakadi.client import Client
from nakadi.options import SubscriptionOptions, with_defaults
from nakadi.schemas import Subscription, SubscriptionList
from nakadi.transport import TRANSPORT_ERRORS, HttpResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")

SLOW_REQUEST_SECONDS = 2.0


class SubscriptionAPI:
    """
    Manages subscription resources on the broker.

    Each call is independent; the only state kept between calls is the
    client and a private copy of the resolved options.
    """

    def __init__(
        self,
        client: Client,
        options: SubscriptionOptions | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._client = client
        self._options = with_defaults(options)
        self._sleep = sleep
        self._clock = clock

    @property
    def options(self) -> SubscriptionOptions:
        return replace(self._options)

    async def get(
        self, subscription_id: str, cancel: asyncio.Event | None = None
    ) -> Subscription:
        """Fetch one subscription by id."""
        if not subscription_id:
            raise ValueError("subscription_id must not be empty")

        url = self._client.url("subscriptions", subscription_id)
        action = "request subscription"

        async def attempt() -> Subscription:
            response = await self._send("GET", url, action)
            return classify_response(
                response, expected=(200, 201), model=Subscription, action=action
            )

        return await self._execute("get", attempt, cancel, subscription_id=subscription_id)

    async def list(self, cancel: asyncio.Event | None = None) -> list[Subscription]:
        """Fetch all subscriptions in the order the broker returns them."""
        url = self._client.url("subscriptions")
        action = "request subscriptions"

        async def attempt() -> list[Subscription]:
            response = await self._send("GET", url, action)
            page = classify_response(
                response, expected=(200, 201), model=SubscriptionList, action=action
            )
            return page.items

        items = await self._execute("list", attempt, cancel)
        logger.debug("Listed subscriptions", extra={"items": len(items)})
        return items

    async def create(
        self, subscription: Subscription, cancel: asyncio.Event | None = None
    ) -> Subscription:
        """Create a subscription and return the broker's full record."""
        if subscription is None:
            raise ValueError("subscription must not be None")

        url = self._client.url("subscriptions")
        payload = subscription.to_payload()
        action = "create subscription"

        async def attempt() -> Subscription:
            response = await self._send("POST", url, action, payload)
            return classify_response(
                response, expected=(200, 201), model=Subscription, action=action
            )

        created = await self._execute("create", attempt, cancel)
        logger.info(
            "Subscription created",
            extra={
                "subscription_id": created.id,
                "owning_application": created.owning_application,
            },
        )
        return created

    async def delete(
        self, subscription_id: str, cancel: asyncio.Event | None = None
    ) -> None:
        """Delete a subscription by id."""
        if not subscription_id:
            raise ValueError("subscription_id must not be empty")

        url = self._client.url("subscriptions", subscription_id)
        action = "delete subscription"

        async def attempt() -> None:
            response = await self._send("DELETE", url, action)
            classify_response(response, expected=(204,), model=None, action=action)

        await self._execute("delete", attempt, cancel, subscription_id=subscription_id)
        logger.info("Subscription deleted", extra={"subscription_id": subscription_id})

    def _should_retry(self, error: NakadiError) -> bool:
        if isinstance(error, ConnectionError):
            return True
        if isinstance(error, RemoteError):
            return (
                self._options.retry_server_errors
                and error.category == ErrorCategory.TRANSIENT
            )
        return False

    async def _execute(
        self,
        operation: str,
        attempt: Callable[[], Awaitable[T]],
        cancel: asyncio.Event | None,
        subscription_id: str | None = None,
    ) -> T:
        try:
            return await retry_operation(
                attempt,
                operation=f"subscriptions.{operation}",
                backoff=self._options.new_backoff(clock=self._clock),
                should_retry=self._should_retry,
                sleep=self._sleep,
                cancel=cancel,
            )
        except NakadiError as e:
            if subscription_id:
                e.context.setdefault("subscription_id", subscription_id)
            raise

    async def _send(
        self, method: str, url: str, action: str, body: bytes | None = None
    ) -> HttpResponse:
        """Send one request, wrapping transport failures in ConnectionError."""
        request = await self._client.build_request(method, url, body)
        log_extra = {"api_method": method, "api_url": url}

        logger.debug("API request starting", extra=log_extra)
        start = self._clock()
        try:
            response = await self._client.transport.send(request)
        except TRANSPORT_ERRORS as e:
            logger.warning(
                "API connection error",
                extra={
                    **log_extra,
                    "duration_seconds": round(self._clock() - start, 3),
                    "error_type": type(e).__name__,
                    "error_message": str(e)[:200],
                    "is_retryable": True,
                },
            )
            raise classify_transport_error(e, action, url) from e

        duration = self._clock() - start
        slow = duration > SLOW_REQUEST_SECONDS
        logger.log(
            logging.INFO if slow else logging.DEBUG,
            "Slow API request" if slow else "API request completed",
            extra={
                **log_extra,
                "http_status": response.status,
                "duration_seconds": round(duration, 3),
            },
        )
        return response


__all__ = ["SubscriptionAPI"]
