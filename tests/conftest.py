"""Pytest configuration and fixtures."""

import os
import random
from typing import Callable
from unittest.mock import MagicMock

import pytest

from pageforge.agents.examples import ExamplesSearchService
from pageforge.agents.multi_model import MultiModelService
from pageforge.builder.elements import Element, ElementType
from pageforge.core.config import get_settings
from pageforge.models.config import AIModelConfig, AIProvider, GenerationResult


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ["PAGEFORGE_LOG_LEVEL"] = "DEBUG"
    os.environ["PAGEFORGE_JSON_LOGS"] = "false"
    os.environ["GEMINI_API_KEY"] = "test-gemini-key"
    os.environ["OPENAI_API_KEY"] = ""  # Gemini only unless a test says otherwise
    os.environ["SERP_API_KEY"] = ""  # No web search in tests
    os.environ["GOOGLE_SEARCH_API_KEY"] = ""


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Settings are cached; give every test the environment it sets up."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Test settings."""
    return get_settings()


# ============================================================================
# Element Fixtures
# ============================================================================

@pytest.fixture
def make_element() -> Callable[..., Element]:
    """Factory for flat elements: make_element("a", parent_id=None, order=0, type="text")."""

    def _make(element_id: str, parent_id: str | None = None, order: int = 0, **fields) -> Element:
        fields.setdefault("type", ElementType.CONTAINER)
        return Element(id=element_id, parent_id=parent_id, order=order, **fields)

    return _make


@pytest.fixture
def sample_flat(make_element):
    """Root ``a`` with children ``b``, ``c``; separate text root ``d``."""
    return [
        make_element("a", order=0),
        make_element("b", parent_id="a", order=0, type="text", content="B"),
        make_element("c", parent_id="a", order=1, type="button", content="C"),
        make_element("d", order=1, type="text", content="D"),
    ]


# ============================================================================
# Model Fixtures
# ============================================================================

class FakeProvider:
    """Scripted ModelProvider: returns ``reply`` or raises ``error``."""

    def __init__(self, reply: str = "ok", error: Exception | None = None, valid: bool = True):
        self.reply = reply
        self.error = error
        self.valid = valid
        self.calls: list[str] = []

    def generate_content(self, prompt, options=None):
        self.calls.append(prompt)
        if self.error:
            raise self.error
        return self.reply

    def generate_with_history(self, messages, options=None):
        return self.generate_content(messages[-1].content, options)

    def generate_content_streaming(self, prompt, on_chunk, options=None):
        text = self.generate_content(prompt, options)
        for token in text.split(" "):
            on_chunk(token)
        return text

    def validate_api_key(self):
        return self.valid


@pytest.fixture
def fake_provider_cls():
    return FakeProvider


@pytest.fixture
def two_model_configs():
    return [
        AIModelConfig(provider=AIProvider.GEMINI, model="gemini-1.5-flash", priority=1),
        AIModelConfig(provider=AIProvider.OPENAI, model="gpt-4o", priority=2),
    ]


@pytest.fixture
def make_multi_model(two_model_configs):
    """Build a MultiModelService whose providers are the given fakes, in priority order."""

    def _make(*providers: FakeProvider) -> MultiModelService:
        configs = two_model_configs[: len(providers)]
        by_label = {config.label: provider for config, provider in zip(configs, providers)}
        return MultiModelService(configs, provider_factory=lambda c: by_label.get(c.label))

    return _make


@pytest.fixture
def mock_multi_model():
    """MultiModelService stand-in whose generate_content returns ``reply``."""
    mock = MagicMock(spec=MultiModelService)

    def reply_with(content: str) -> None:
        result = GenerationResult(content=content, provider=AIProvider.GEMINI, model="gemini-1.5-flash")
        mock.generate_content.return_value = result
        mock.generate_streaming.return_value = result

    mock.reply_with = reply_with
    reply_with("")
    return mock


@pytest.fixture
def examples_service():
    """Examples service with a seeded RNG and no web search."""
    return ExamplesSearchService(rng=random.Random(7))
