"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_llm_client
from app.db.memory_store import MemoryStore
from app.main import create_app
from tests.fakes.fake_openai import FakeOpenAI


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    os.environ["OPENAI_API_KEY"] = "test-openai-key"
    os.environ["SDLC_ENV"] = "test"

    from app.core.config import get_settings

    get_settings.cache_clear()


@pytest.fixture
def store() -> MemoryStore:
    """Fresh store seeded with the default user."""
    return MemoryStore()


@pytest.fixture
def fake_llm() -> FakeOpenAI:
    return FakeOpenAI()


@pytest.fixture
def api_client(store: MemoryStore, fake_llm: FakeOpenAI) -> TestClient:
    """TestClient over an app wired to the test store and the fake model."""
    app = create_app(store=store)
    app.dependency_overrides[get_llm_client] = lambda: fake_llm
    return TestClient(app)
