import json

import pytest
import requests

from innochannel.client import InnochannelClient
from innochannel.config import ClientConfig

WEBHOOK_SECRET = "0123456789abcdef"


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Mock environment variables for testing."""
    monkeypatch.setenv("INNOCHANNEL_API_KEY", "test_api_key_123")
    monkeypatch.setenv("INNOCHANNEL_API_SECRET", "test_api_secret")
    monkeypatch.setenv("INNOCHANNEL_BASE_URL", "https://api.test.com")
    monkeypatch.setenv("INNOCHANNEL_RETRY_ATTEMPTS", "0")
    monkeypatch.setenv("INNOCHANNEL_WEBHOOK_SECRET", WEBHOOK_SECRET)


@pytest.fixture
def client_config():
    """Client configuration with two retries and no delay."""
    return ClientConfig(
        api_key="test_api_key_123",
        api_secret="test_api_secret",
        base_url="https://api.test.com",
        retry_attempts=2,
        retry_delay=0.0,
    )


@pytest.fixture
def client(client_config):
    with InnochannelClient(client_config) as client:
        yield client


@pytest.fixture
def webhook_secret():
    return WEBHOOK_SECRET


def make_response(status_code=200, body=None, headers=None):
    """Build a real requests.Response with the given status and body."""
    response = requests.Response()
    response.status_code = status_code
    if body is None:
        content = b""
    elif isinstance(body, (bytes, str)):
        content = body.encode("utf-8") if isinstance(body, str) else body
    else:
        content = json.dumps(body).encode("utf-8")
    response._content = content
    response.encoding = "utf-8"
    response.headers.update(headers or {})
    return response


@pytest.fixture
def response_factory():
    return make_response
