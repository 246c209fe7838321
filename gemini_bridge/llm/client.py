"""Gemini REST transport client.

Architectural role:
    Executes blocking HTTP requests against the Gemini v1beta REST API and
    normalizes responses into small result objects.

Model invocation flow:
    `service.GeminiProvider` -> `asyncio.to_thread(client.<operation>)` ->
    `POST {base}/models/{model}:{action}` -> parsed result or `ProviderError`.

Retry behavior:
    No retry loop is implemented. Each HTTP call is attempted once with the
    configured timeout; a timeout is reported as an ordinary failure.

Failure handling model:
    Every failure (network, HTTP status, malformed body, blocked prompt) is
    raised as `ProviderError` with a readable message that names the model.
    The API key travels in a header and never appears in error text.
"""

import logging
from dataclasses import dataclass

import requests

from gemini_bridge.core.errors import ProviderError
from gemini_bridge.llm.provider_config import DEFAULT_REQUEST_TIMEOUT, GEMINI_API_BASE_URL


logger = logging.getLogger(__name__)

# Upstream error bodies are echoed to the caller; keep them bounded.
MAX_ERROR_DETAIL_CHARS = 500


@dataclass
class GenerationResult:
    text: str
    model: str
    finish_reason: str | None = None
    total_tokens: int | None = None
    prompt_tokens: int | None = None
    candidates_count: int = 1


def to_gemini_contents(turns) -> list[dict]:
    """Map provider-neutral turns onto Gemini `contents` entries.

    `assistant` becomes Gemini's `model` role; empty turns are skipped.
    """
    contents = []
    for turn in turns:
        if not turn.content:
            continue
        role = "model" if turn.role == "assistant" else "user"
        contents.append({"role": role, "parts": [{"text": str(turn.content)}]})
    return contents


def _build_http_error(model: str, response: requests.Response) -> ProviderError:
    """Build a provider-labeled HTTP error from an error response.

    Gemini error bodies look like `{"error": {"code", "message", "status"}}`;
    anything else falls back to the raw (truncated) body text.
    """
    detail = ""
    try:
        body = response.json()
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            detail = str(error.get("message") or error.get("status") or "")
    except ValueError:
        detail = response.text or ""

    detail = detail.strip()[:MAX_ERROR_DETAIL_CHARS]
    message = f"Gemini API error for model '{model}' (HTTP {response.status_code})"
    if detail:
        message += f": {detail}"
    return ProviderError(message, status_code=response.status_code, model=model)


def _build_network_error(model: str, err: requests.exceptions.RequestException) -> ProviderError:
    if isinstance(err, requests.exceptions.Timeout):
        reason = "request timed out"
    elif isinstance(err, requests.exceptions.ConnectionError):
        reason = "connection failed"
    else:
        reason = type(err).__name__
    return ProviderError(f"Gemini request for model '{model}' failed: {reason}", model=model)


class GeminiClient:
    """Thin blocking client over the three Gemini operations the bridge uses."""

    def __init__(
        self,
        api_key: str,
        base_url: str = GEMINI_API_BASE_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _post(self, model: str, action: str, body: dict) -> dict:
        url = f"{self.base_url}/models/{model}:{action}"
        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }

        try:
            response = self.session.post(url, headers=headers, json=body, timeout=self.timeout)
        except requests.exceptions.RequestException as err:
            logger.warning("Gemini %s for %s failed: %s", action, model, err)
            raise _build_network_error(model, err) from err

        if response.status_code >= 400:
            raise _build_http_error(model, response)

        try:
            data = response.json()
        except ValueError as err:
            raise ProviderError(
                f"Gemini returned a non-JSON response for model '{model}'", model=model
            ) from err

        if not isinstance(data, dict):
            raise ProviderError(f"Gemini returned an unexpected response for model '{model}'", model=model)
        return data

    def generate_content(
        self,
        model: str,
        contents: list[dict],
        system_instruction: str | None = None,
        generation_config: dict | None = None,
        safety_settings: list | None = None,
        tools: list | None = None,
    ) -> GenerationResult:
        """Call `models/{model}:generateContent`.

        Text is the concatenation of the first candidate's non-thought parts.

        Raises:
            ProviderError: on transport failure, or when the prompt was
                blocked and no candidate came back.
        """
        body = {"contents": contents}
        if system_instruction:
            body["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        if generation_config:
            body["generationConfig"] = generation_config
        if safety_settings:
            body["safetySettings"] = safety_settings
        if tools:
            body["tools"] = tools

        data = self._post(model, "generateContent", body)

        candidates = data.get("candidates") or []
        if not candidates:
            feedback = data.get("promptFeedback") or {}
            reason = feedback.get("blockReason") or "no candidates returned"
            raise ProviderError(
                f"Gemini returned no output for model '{model}' ({reason})", model=model
            )

        first = candidates[0]
        parts = (first.get("content") or {}).get("parts") or []
        text = "".join(
            part.get("text") or "" for part in parts if isinstance(part, dict) and not part.get("thought")
        )

        usage = data.get("usageMetadata") or {}
        return GenerationResult(
            text=text,
            model=model,
            finish_reason=first.get("finishReason"),
            total_tokens=usage.get("totalTokenCount"),
            prompt_tokens=usage.get("promptTokenCount"),
            candidates_count=len(candidates),
        )

    def count_tokens(self, model: str, contents: list[dict]) -> int:
        data = self._post(model, "countTokens", {"contents": contents})
        return int(data.get("totalTokens") or 0)

    def embed_content(self, model: str, text: str) -> list[float]:
        data = self._post(model, "embedContent", {"content": {"parts": [{"text": text}]}})
        embedding = data.get("embedding") or {}
        return list(embedding.get("values") or [])
