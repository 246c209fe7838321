"""Async provider facade over the blocking Gemini client.

Architectural role:
    The tool dispatcher depends only on the three awaitable operations below
    (`generate`, `count_tokens`, `embed`). Each runs the blocking `requests`
    call in a worker thread via `asyncio.to_thread`, so a slow provider call
    never stalls stdin reading or other in-flight requests.

Token behavior:
    No token-budget enforcement is implemented here; `maxOutputTokens` is
    passed through and the provider applies its own limits.
"""

import asyncio
from dataclasses import dataclass, field

from gemini_bridge.llm.client import GeminiClient, GenerationResult, to_gemini_contents


@dataclass
class GenerationRequest:
    """Normalized generation call.

    Attributes:
        parts: Gemini parts of the new user turn (text and/or inline data).
        history: Prior conversation turns, oldest first.
    """

    model: str
    parts: list
    history: list = field(default_factory=list)
    system_instruction: str | None = None
    generation_config: dict = field(default_factory=dict)
    safety_settings: list | None = None
    tools: list | None = None

    def contents(self) -> list[dict]:
        return to_gemini_contents(self.history) + [{"role": "user", "parts": list(self.parts)}]


class GeminiProvider:
    def __init__(self, client: GeminiClient):
        self.client = client

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        return await asyncio.to_thread(
            self.client.generate_content,
            request.model,
            request.contents(),
            request.system_instruction,
            request.generation_config or None,
            request.safety_settings,
            request.tools,
        )

    async def count_tokens(self, model: str, text: str) -> int:
        contents = [{"role": "user", "parts": [{"text": text}]}]
        return await asyncio.to_thread(self.client.count_tokens, model, contents)

    async def embed(self, model: str, text: str) -> list[float]:
        return await asyncio.to_thread(self.client.embed_content, model, text)
