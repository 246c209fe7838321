"""
Pytest fixtures for gemini-bridge tests.

All provider access is replaced by `FakeProvider`; no test touches the
network. Async code is driven with `asyncio.run` from plain test functions.
"""

import pytest

from gemini_bridge.catalog.registry import CapabilityRegistry
from gemini_bridge.core.router import Router
from gemini_bridge.llm.client import GenerationResult
from gemini_bridge.memory.conversation_store import ConversationStore
from gemini_bridge.tools.dispatcher import ToolDispatcher

DEFAULT_MODEL = "gemini-3-pro-preview"


class FakeProvider:
    """Records every call and answers with canned results.

    Set `error` to make every operation raise it.
    """

    def __init__(self):
        self.generate_calls = []
        self.count_calls = []
        self.embed_calls = []
        self.reply = "Gemini says hi"
        self.error = None
        self.embedding = [0.25, -0.5, 0.125]

    async def generate(self, request):
        self.generate_calls.append(request)
        if self.error is not None:
            raise self.error
        return GenerationResult(
            text=f"{self.reply} #{len(self.generate_calls)}",
            model=request.model,
            finish_reason="STOP",
            total_tokens=42,
            prompt_tokens=12,
        )

    async def count_tokens(self, model, text):
        self.count_calls.append((model, text))
        if self.error is not None:
            raise self.error
        return len(text.split())

    async def embed(self, model, text):
        self.embed_calls.append((model, text))
        if self.error is not None:
            raise self.error
        return list(self.embedding)


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def registry() -> CapabilityRegistry:
    return CapabilityRegistry(DEFAULT_MODEL)


@pytest.fixture
def store() -> ConversationStore:
    return ConversationStore()


@pytest.fixture
def dispatcher(registry, provider, store) -> ToolDispatcher:
    return ToolDispatcher(registry, provider, store)


@pytest.fixture
def router(registry, dispatcher) -> Router:
    return Router(registry, dispatcher)
