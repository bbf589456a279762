"""Shared test fixtures."""

import asyncio
import json

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from app.config import Settings
from app.dependencies import build_orchestrator, get_orchestrator, get_resolver
from app.main import app

API_BASE = "https://gateway.test/v1"


class FakeGateway:
    """
    Scripted stand-in for the gateway's HTTP API.

    Responses are queued per endpoint path; every request the relay sends is
    recorded so tests can assert on payloads, auth headers, or the absence
    of any outbound call.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._responses: dict[str, list] = {}

    def queue(self, path: str, response) -> None:
        self._responses.setdefault(path, []).append(response)

    def queue_json(self, path: str, payload, status_code: int = 200) -> None:
        self.queue(path, httpx.Response(status_code, json=payload))

    def queue_html(self, path: str, html: str, status_code: int = 200) -> None:
        self.queue(path, httpx.Response(status_code, text=html, headers={"content-type": "text/html; charset=utf-8"}))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/v1")
        queued = self._responses.get(path)
        if not queued:
            return httpx.Response(404, json={"error": {"code": "NOT_FOUND", "description": path}})
        response = queued.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def sent(self, path: str) -> list[dict]:
        """JSON bodies sent to an endpoint, in order."""
        return [
            json.loads(r.content)
            for r in self.requests
            if r.url.path.removeprefix("/v1") == path
        ]


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        razorpay_api_base=API_BASE,
        razorpay_key_id_my="rzp_test_my",
        razorpay_key_secret_my="secret_my",
        razorpay_key_id_sg="rzp_test_sg",
        razorpay_key_secret_sg="",  # Identifier without secret: unconfigured
        razorpay_key_id_us="rzp_test_us",
        razorpay_key_secret_us="secret_us",
        razorpay_key_id_in="rzp_test_in",
        razorpay_key_secret_in="secret_in",
    )


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest_asyncio.fixture
async def orchestrator(settings, fake_gateway):
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_gateway.handler)) as client:
        yield build_orchestrator(settings, client)


@pytest.fixture
def client(settings, fake_gateway):
    """API client wired to the fake gateway (startup lifespan not run)."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_gateway.handler))
    test_orchestrator = build_orchestrator(settings, http_client)
    app.dependency_overrides[get_orchestrator] = lambda: test_orchestrator
    app.dependency_overrides[get_resolver] = lambda: test_orchestrator.resolver
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
    asyncio.run(http_client.aclose())


@pytest.fixture
def card_body():
    return {
        "amount": 1000,
        "currency": "INR",
        "country": "IN",
        "method": "card",
        "contact": "+919999999999",
        "email": "buyer@example.com",
        "card": {
            "number": "4111111111111111",
            "name": "Test Buyer",
            "expiry_month": "12",
            "expiry_year": "27",
            "cvv": "123",
        },
    }
