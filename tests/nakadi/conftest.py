"""
Fixtures for nakadi client tests.

Provides:
- FakeTransport: per-route canned responses or raised errors
- FakeBroker: stateful in-memory subscriptions endpoint
- FakeClock: deterministic clock whose sleep advances time
"""

import asyncio
import json
import uuid
from datetime import UTC, datetime
from pathlib import Path

import aiohttp
import pytest

from nakadi.client import Client
from nakadi.transport import HttpRequest, HttpResponse

TEST_URL = "http://localhost:8080"
DATA_DIR = Path(__file__).parent.parent / "data"


def json_response(status: int, data) -> HttpResponse:
    return HttpResponse(
        status=status,
        headers={"Content-Type": "application/json"},
        body=json.dumps(data).encode("utf-8"),
    )


def problem_response(status: int, detail: str) -> HttpResponse:
    return json_response(status, {"title": "Problem", "status": status, "detail": detail})


class FakeTransport:
    """Transport returning registered responders keyed by (method, url)."""

    def __init__(self):
        self.responders: dict[tuple[str, str], object] = {}
        self.requests: list[HttpRequest] = []
        self.closed = False

    def register(self, method: str, url: str, *responders) -> None:
        """Register responders; several are consumed in order, the last one sticks."""
        self.responders[(method, url)] = list(responders)

    async def send(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        queue = self.responders[(request.method, request.url)]
        responder = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(responder, BaseException):
            raise responder
        if callable(responder):
            responder = responder(request)
            if asyncio.iscoroutine(responder):
                responder = await responder
        return responder

    async def close(self) -> None:
        self.closed = True


class FakeBroker:
    """In-memory subscriptions endpoint with broker-like validation."""

    def __init__(self, base_url: str = TEST_URL):
        self.base_url = base_url
        self.subscriptions: dict[str, dict] = {}
        self.requests: list[HttpRequest] = []

    async def send(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        path = request.url[len(self.base_url):]
        if path == "/subscriptions":
            if request.method == "GET":
                return json_response(200, {"items": list(self.subscriptions.values())})
            if request.method == "POST":
                return self._create(json.loads(request.body))
        elif path.startswith("/subscriptions/"):
            subscription_id = path[len("/subscriptions/"):]
            if subscription_id not in self.subscriptions:
                return problem_response(
                    404, f"Subscription with id \"{subscription_id}\" does not exist"
                )
            if request.method == "GET":
                return json_response(200, self.subscriptions[subscription_id])
            if request.method == "DELETE":
                del self.subscriptions[subscription_id]
                return HttpResponse(status=204)
        return problem_response(405, "Method not allowed")

    def _create(self, data: dict) -> HttpResponse:
        if not data.get("event_types"):
            return problem_response(422, "Field \"event_types\" may not be empty")
        record = {
            "id": str(uuid.uuid4()),
            "owning_application": data["owning_application"],
            "event_types": data["event_types"],
            "consumer_group": data.get("consumer_group") or "default",
            "read_from": data.get("read_from") or "end",
            "created_at": datetime.now(UTC).isoformat(),
        }
        self.subscriptions[record["id"]] = record
        return json_response(201, record)

    async def close(self) -> None:
        pass


class FakeClock:
    """Monotonic clock replacement; sleep() only advances the reading."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += delay


@pytest.fixture
def load_test_data():
    def _load(name: str):
        return json.loads((DATA_DIR / name).read_text())

    return _load


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def broker():
    return FakeBroker()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def client(transport):
    return Client(TEST_URL, transport=transport)


@pytest.fixture
def broker_client(broker):
    return Client(TEST_URL, transport=broker)


@pytest.fixture
def connection_refused():
    return aiohttp.ClientConnectionError("connection refused")
