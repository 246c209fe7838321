"""Provider/runtime configuration for the LLM layer.

Architectural role:
    Centralizes credential lookup and default-model selection for
    `gemini_bridge.llm.client` and the capability registry.

Resolution:
    `.env` values are loaded into the process environment at import time
    (`load_dotenv`, never overriding variables already set). `load_settings`
    then reads:
        GEMINI_API_KEY          required (or key file `config/gemini.key`)
        GEMINI_DEFAULT_MODEL    optional, validated against the model catalog
        GEMINI_API_BASE_URL     optional REST base URL
        GEMINI_REQUEST_TIMEOUT  optional per-request timeout in seconds
        (LOG_LEVEL is read by `api.main` before settings load.)

Failure behavior:
    Missing key material is represented as `None`; `api.main` refuses to start
    without it. Unknown default models and bad timeouts warn and fall back.
"""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from gemini_bridge.catalog.models import FALLBACK_MODEL, is_known_model

load_dotenv()


logger = logging.getLogger(__name__)

GEMINI_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
GEMINI_KEY_FILE = "config/gemini.key"
DEFAULT_REQUEST_TIMEOUT = 120.0


@dataclass(frozen=True)
class Settings:
    api_key: str | None
    default_model: str
    base_url: str = GEMINI_API_BASE_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT


def load_key(path):
    """Load API key from environment override or key file.

    Resolution order:
        1. Environment variable inferred from file stem (for example
           `config/gemini.key` -> `GEMINI_API_KEY`).
        2. Raw file contents at `path`.

    Edge cases:
        - `None` path returns `None`.
        - Missing or empty file returns `None`.
    """
    if not path:
        return None
    key_name = os.path.splitext(os.path.basename(path))[0].upper() + "_API_KEY"
    env_value = os.getenv(key_name)
    if env_value:
        return env_value.strip()
    if not os.path.exists(path):
        return None
    with open(path, "r", encoding="utf-8") as f:
        return f.read().strip() or None


def resolve_default_model(requested: str | None) -> str:
    """Return the configured default model, or the fallback with a warning."""
    if not requested:
        return FALLBACK_MODEL

    requested = requested.strip()
    if is_known_model(requested):
        return requested

    logger.warning(
        'GEMINI_DEFAULT_MODEL="%s" is not a known model. Falling back to %s.',
        requested,
        FALLBACK_MODEL,
    )
    return FALLBACK_MODEL


def _resolve_timeout(raw: str | None) -> float:
    if not raw:
        return DEFAULT_REQUEST_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        value = -1.0
    if value <= 0:
        logger.warning(
            'GEMINI_REQUEST_TIMEOUT="%s" is not a positive number. Using %.0fs.',
            raw,
            DEFAULT_REQUEST_TIMEOUT,
        )
        return DEFAULT_REQUEST_TIMEOUT
    return value


def load_settings() -> Settings:
    return Settings(
        api_key=load_key(GEMINI_KEY_FILE),
        default_model=resolve_default_model(os.getenv("GEMINI_DEFAULT_MODEL")),
        base_url=(os.getenv("GEMINI_API_BASE_URL") or GEMINI_API_BASE_URL).rstrip("/"),
        request_timeout=_resolve_timeout(os.getenv("GEMINI_REQUEST_TIMEOUT")),
    )
