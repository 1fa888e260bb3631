"""Pytest configuration and fixtures for SecretHide tests."""

import asyncio
import json
import os
from typing import Callable, Generator

import httpx
import pytest

# Set test environment variables before importing the entry points
os.environ.setdefault("RECAPTCHA_SECRET_KEY", "test-secret")
os.environ.setdefault("EMAIL_ADDRESS", "owner@example.com")

from secrethide.config import Settings  # noqa: E402

EMAIL = "owner@example.com"


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio for async tests."""
    return "asyncio"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        recaptcha_secret_key="test-secret",
        email_address=EMAIL,
        siteverify_url="https://siteverify.test/recaptcha/api/siteverify",
        siteverify_timeout=5.0,
    )


@pytest.fixture
def siteverify_requests() -> list:
    """Requests seen by the fake siteverify service."""
    return []


def siteverify_transport(siteverify_requests: list, json=None, status: int = 200, text: str | None = None, exc=None):
    """MockTransport standing in for siteverify.

    ``json={...}`` answers with that payload, ``text="..."`` with a raw body
    and ``exc=httpx.ConnectError`` fails at the transport level.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        siteverify_requests.append(request)
        if exc is not None:
            raise exc("connection refused", request=request)
        if text is not None:
            return httpx.Response(status, text=text)
        return httpx.Response(status, content=_dumps(json))

    return httpx.MockTransport(handler)


@pytest.fixture
def siteverify(siteverify_requests) -> Generator[Callable[..., httpx.AsyncClient], None, None]:
    """Build AsyncClients whose transport fakes siteverify.

    Takes the same keywords as ``siteverify_transport``. Clients are closed
    at teardown.
    """
    clients: list[httpx.AsyncClient] = []

    def factory(**kwargs) -> httpx.AsyncClient:
        client = httpx.AsyncClient(transport=siteverify_transport(siteverify_requests, **kwargs))
        clients.append(client)
        return client

    yield factory

    open_clients = [client for client in clients if not client.is_closed]
    if open_clients:
        asyncio.run(_close_all(open_clients))


async def _close_all(clients: list[httpx.AsyncClient]) -> None:
    for client in clients:
        await client.aclose()


def _dumps(payload) -> bytes:
    return json.dumps(payload).encode()


@pytest.fixture
def api_gateway_event() -> Callable[..., dict]:
    """Minimal API Gateway (REST v1) proxy event."""

    def factory(body: str | None, is_base64: bool = False) -> dict:
        return {
            "resource": "/verify",
            "path": "/verify",
            "httpMethod": "POST",
            "headers": {"Content-Type": "application/x-www-form-urlencoded"},
            "body": body,
            "isBase64Encoded": is_base64,
        }

    return factory
