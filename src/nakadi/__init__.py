"""
Nakadi subscription client.

Manages subscription resources through the broker's HTTP API with typed
results, classified errors and optional retry with exponential backoff.

Usage:
    async with Client("https://nakadi.example.org") as client:
        api = SubscriptionAPI(client, SubscriptionOptions(retry=True))
        subscription = await api.create(
            Subscription(owning_application="my-app", event_types=["order.created"])
        )
"""

from nakadi.client import DEFAULT_NAKADI_URL, Client, ClientOptions
from nakadi.options import SubscriptionOptions, with_defaults
from nakadi.problem import ProblemDetail
from nakadi.schemas import Subscription, SubscriptionList
from nakadi.subscriptions import SubscriptionAPI
from nakadi.transport import AiohttpTransport, HttpRequest, HttpResponse, Transport

__all__ = [
    "AiohttpTransport",
    "Client",
    "ClientOptions",
    "DEFAULT_NAKADI_URL",
    "HttpRequest",
    "HttpResponse",
    "ProblemDetail",
    "Subscription",
    "SubscriptionAPI",
    "SubscriptionList",
    "SubscriptionOptions",
    "Transport",
    "with_defaults",
]
