"""Tests for the test generation chain."""

import pytest

from app.chains.generate_tests import build_tests_prompt, generate_tests
from app.core.config import Settings
from tests.fakes.fake_openai import FakeOpenAI


@pytest.fixture
def settings() -> Settings:
    return Settings(OPENAI_API_KEY="test-key")


def test_prompt_for_code_input():
    prompt = build_tests_prompt("def f(): pass", "pytest")
    assert "Code to test:" in prompt
    assert "using the pytest testing framework" in prompt


def test_prompt_for_requirements_input():
    prompt = build_tests_prompt("Users can log in", "jest", input_type="requirements")
    assert "Requirements to test:" in prompt
    assert "following requirements" in prompt


def test_total_is_recomputed(settings):
    client = FakeOpenAI().queue_json(
        {
            "testCode": "def test_reverse(): ...",
            "coverage": 90,
            "totalTests": 20,
            "positiveTests": 5,
            "negativeTests": 3,
        }
    )

    result = generate_tests("def reverse(s): return s[::-1]", "pytest", settings=settings, client=client)

    assert result.total_tests == 8
    assert result.coverage == 90
    assert result.test_code == "def test_reverse(): ..."


def test_missing_counts_default_to_zero(settings):
    client = FakeOpenAI().queue_json({"testCode": "def test_x(): ..."})

    result = generate_tests("x = 1", settings=settings, client=client)

    assert result.total_tests == 0
    assert result.coverage == 0
    assert client.last_call["temperature"] == 0.2
    assert "unittest" in client.last_user_prompt
