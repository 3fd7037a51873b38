"""Pytest configuration and shared fixtures."""

import orjson
import httpx
import pytest
from fastapi.testclient import TestClient

from astro_assistant.main import app
from fakes import Recorder, make_provider, sse_body


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def upstream_requests():
    """Requests received by the fake gateway, decoded as JSON."""
    return []


@pytest.fixture
def gateway_handler(upstream_requests):
    """Fake gateway answering every completion with "Hello"."""

    def handler(request: httpx.Request) -> httpx.Response:
        upstream_requests.append(orjson.loads(request.content))
        return httpx.Response(200, content=sse_body("Hel", "lo"))

    return handler


@pytest.fixture
def install_provider():
    """Install a provider on the app for the duration of a test."""

    def install(handler, **kwargs):
        provider = make_provider(handler, **kwargs)
        app.state.provider = provider
        return provider

    yield install
    app.state.provider = None


@pytest.fixture
def client(install_provider, gateway_handler):
    install_provider(gateway_handler)
    with TestClient(app) as test_client:
        yield test_client
