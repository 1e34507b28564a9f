"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
Tests run against an in-memory SQLite store and a mocked LLM endpoint.
"""
import json
import os
import random
import sys
from pathlib import Path

import httpx
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Must be set before config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LLM_API_KEY"] = "test-key"
os.environ["LLM_API_URL"] = "https://llm.test/v1/chat/completions"
os.environ.pop("LOG_FILE", None)

from buddy.db.database import SessionLocal, engine  # noqa: E402
from buddy.db.models import Base  # noqa: E402
from buddy.llm.gateway import LLMGateway  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (API with in-memory store)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def db_session():
    """Fresh schema for each test; yields a session bound to it."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


def chat_completion(content):
    """OpenAI-style response envelope with a single message."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


class FakeLLMEndpoint:
    """
    Records requests sent to the mocked endpoint and answers them.

    Set ``reply`` to the content to return, or ``handler`` to a callable
    taking an ``httpx.Request`` for full control (status codes, errors).
    """

    def __init__(self):
        self.requests = []
        self.reply = "How do you list all branches, including remote ones?"
        self.handler = None

    @property
    def payloads(self):
        return [json.loads(r.content) for r in self.requests]

    @property
    def last_payload(self):
        return self.payloads[-1]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.handler is not None:
            return self.handler(request)
        return httpx.Response(200, json=chat_completion(self.reply))


@pytest.fixture
def llm_endpoint():
    """Mocked chat-completion endpoint."""
    return FakeLLMEndpoint()


@pytest.fixture
def gateway(llm_endpoint):
    """Gateway wired to the mocked endpoint, with a seeded random source."""
    gw = LLMGateway(
        api_url="https://llm.test/v1/chat/completions",
        api_key="test-key",
        model="test-model",
        provider_name="Groq",
        timeout_seconds=5.0,
        rng=random.Random(1234),
        transport=httpx.MockTransport(llm_endpoint),
    )
    yield gw
    gw.close()


@pytest.fixture
def sample_command():
    """Provide a sample command payload for testing."""
    return {
        "toolName": "git",
        "commandText": "git commit -m 'initial commit'",
        "explanation": "Records staged changes with a message",
    }
