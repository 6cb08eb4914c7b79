"""
Shared fixtures: a mocked upstream provider, a gateway wired to it, and the API app.
"""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from config.app_config import ClientConfig, LLMConfig
from infrastructure.external.openai_client import OpenAIClientFactory
from services.ai_service.completion_gateway import CompletionGateway, get_completion_gateway


UPSTREAM_BASE_URL = "https://upstream.test/v1"
TEST_CHAT_API_URL = "http://testserver/api/chat"


def completion_body(content="Hello"):
    """Minimal chat-completions response body"""
    return {"choices": [{"message": {"content": content}}]}


class MockUpstream:
    """Callable httpx transport handler recording requests to the fake provider"""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.body = completion_body()
        self.error = None

    def respond(self, status_code=200, body=None):
        self.status_code = status_code
        self.body = body
        self.error = None

    def fail_with(self, error_cls):
        self.error = error_cls

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error("simulated failure", request=request)
        if isinstance(self.body, (dict, list)):
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(self.status_code, text=self.body or "")

    @property
    def call_count(self):
        return len(self.requests)

    def last_payload(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture(autouse=True)
def nvidia_api_key(monkeypatch):
    """Every test starts with a (fake) API key in the environment"""
    monkeypatch.setenv("NVIDIA_API_KEY", "nvapi-test-key")
    return "nvapi-test-key"


@pytest.fixture
def upstream():
    return MockUpstream()


@pytest.fixture
def gateway(upstream):
    factory = OpenAIClientFactory(
        base_url=UPSTREAM_BASE_URL,
        http_client=httpx.Client(transport=httpx.MockTransport(upstream))
    )
    return CompletionGateway(LLMConfig(), factory)


@pytest.fixture
def app(gateway):
    from api.app import create_app

    application = create_app()
    application.dependency_overrides[get_completion_gateway] = lambda: gateway
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def api_client(app):
    return TestClient(app)


@pytest.fixture
def client_config():
    return ClientConfig(chat_api_url=TEST_CHAT_API_URL, timeout=5.0)
