"""
Pytest configuration for MCQ Extractor client tests.
"""

import asyncio
import inspect
import os
import sys
from typing import Any, Callable, Dict, List, Tuple

import httpx
import pytest

# Ensure project root is importable
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

# ✅ ONE DEFAULT SYSTEM - NO CONFLICTS
os.environ.setdefault("MCQ_BACKEND_URL", "http://backend.test")
os.environ.setdefault("MCQ_POLL_INTERVAL", "2")

from services.backend_client import BackendClient  # noqa: E402
from services.config import ClientConfig  # noqa: E402

BACKEND_URL = "http://backend.test"

# Short cadence so polling tests finish quickly
TEST_INTERVAL = 0.01


class FakeBackend:
    """
    Scriptable stand-in for the MCQ backend behind httpx.MockTransport.

    Each (method, path) route holds a queue of replies. A reply is a dict
    (200 JSON), an httpx.Response, or a callable taking the request. The
    last reply of a queue repeats forever.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], List[Any]] = {}
        self.requests: List[Tuple[str, str]] = []
        self.bodies: List[Any] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def on(self, method: str, path: str, *replies) -> "FakeBackend":
        self.routes[(method, path)] = list(replies)
        return self

    def count(self, method: str, path: str) -> int:
        return self.requests.count((method, path))

    async def handler(self, request: httpx.Request) -> httpx.Response:
        key = (request.method, request.url.path)
        self.requests.append(key)
        self.bodies.append(request.content or None)

        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            queue = self.routes.get(key)
            if not queue:
                return httpx.Response(404, json={"detail": "Not Found"})
            reply = queue.pop(0) if len(queue) > 1 else queue[0]
            if callable(reply):
                reply = reply(request)
                if inspect.isawaitable(reply):
                    reply = await reply
            if isinstance(reply, httpx.Response):
                return reply
            return httpx.Response(200, json=reply)
        finally:
            self.in_flight -= 1


def connect_error(request: httpx.Request):
    """Reply that simulates the backend being unreachable."""
    raise httpx.ConnectError("Connection refused", request=request)


def slow(reply: dict, delay: float) -> Callable:
    """Reply that answers `reply` after `delay` seconds."""

    async def _reply(request: httpx.Request):
        await asyncio.sleep(delay)
        return reply

    return _reply


async def settle(seconds: float = 0.05):
    """Give the event loop time to run a few polling ticks."""
    await asyncio.sleep(seconds)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def config():
    return ClientConfig(backend_url=BACKEND_URL, poll_interval=TEST_INTERVAL)


@pytest.fixture
def client(backend, config):
    """BackendClient wired to the fake backend."""
    return BackendClient(config, transport=httpx.MockTransport(backend.handler))
