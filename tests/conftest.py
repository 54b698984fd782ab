"""
Pytest configuration and fixtures for test suite.
"""

import os

import pytest

# Set test environment variables before importing the app
os.environ["APP_ENV"] = "test"
os.environ["LOG_FORMAT"] = "console"
os.environ["LOG_LEVEL"] = "warning"
os.environ["STATIC_DIR"] = "tests/no-client"
os.environ.pop("DATABASE_URL", None)

from fastapi.testclient import TestClient

from vapi_gateway.main import create_app
from vapi_gateway.services.credentials import Credentials
from vapi_gateway.services.transport import VapiTransport
from vapi_gateway.services.vapi_service import VapiService

from tests.fakes import ASSISTANT_ID, PRIVATE_KEY, PUBLIC_KEY, FakeVapi, make_settings


@pytest.fixture
def fake_vapi():
    """Fake upstream with no routes registered."""
    return FakeVapi()


@pytest.fixture
def settings():
    """Fully configured settings."""
    return make_settings()


@pytest.fixture
def app(settings, fake_vapi):
    """Application wired to the fake upstream."""
    return create_app(settings, http_transport=fake_vapi.transport)


@pytest.fixture
def client(app):
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def unconfigured_client(fake_vapi):
    """Client for an app with no Vapi credentials."""
    app = create_app(
        make_settings(vapi_private_key=None, vapi_public_key=None, vapi_assistant_id=None),
        http_transport=fake_vapi.transport,
    )
    return TestClient(app)


@pytest.fixture
def vapi_service(fake_vapi):
    """Configured call gateway talking to the fake upstream."""
    return VapiService(
        Credentials(private_key=PRIVATE_KEY, public_key=PUBLIC_KEY, assistant_id=ASSISTANT_ID),
        VapiTransport("https://api.vapi.ai", transport=fake_vapi.transport),
    )


@pytest.fixture
def sample_assistant():
    """Sample assistant returned by GET /assistant/{id}."""
    return {
        "id": ASSISTANT_ID,
        "name": "Realty Concierge",
        "firstMessage": "Hi! Looking for a new home?",
        "model": {"provider": "openai", "model": "gpt-4o", "messages": []},
    }


@pytest.fixture
def sample_web_call():
    """Sample web call returned by the web-call endpoint."""
    return {
        "id": "call_web_001",
        "orgId": "org_internal_42",
        "type": "webCall",
        "status": "queued",
        "assistantId": ASSISTANT_ID,
        "transport": {
            "provider": "vapi.websocket",
            "websocketCallUrl": "wss://api.vapi.ai/call_web_001/transport",
            "audioFormat": {"format": "pcm_s16le", "container": "raw", "sampleRate": 16000},
        },
    }
