"""Gemini model catalog.

Consumers:
    - `llm.provider_config.resolve_default_model` validates the configured
      default against `GEMINI_MODELS`.
    - `catalog.registry` builds the model enums in tool schemas.
    - `tools.dispatcher` checks per-model features (grounding, thinking levels).
    - `catalog.resources` serializes the catalog for `gemini://models`.

Ordering:
    Dict insertion order is the public listing order. Do not reorder entries
    without expecting `tools/list` and `gemini://models` output to change.
"""

FALLBACK_MODEL = "gemini-3-pro-preview"

GEMINI_MODELS = {
    # Gemini 3 series
    "gemini-3-pro-preview": {
        "description": "Most capable reasoning model, state-of-the-art multimodal and agentic",
        "features": ["thinking", "function_calling", "json_mode", "grounding", "system_instructions"],
        "contextWindow": 1048576,
        "maxOutputTokens": 65536,
        "thinking": True,
        "thinkingLevels": ["low", "high"],
    },
    "gemini-3-flash-preview": {
        "description": "Best balance of speed, scale, and frontier intelligence",
        "features": ["thinking", "function_calling", "json_mode", "grounding", "system_instructions"],
        "contextWindow": 1048576,
        "maxOutputTokens": 65536,
        "thinking": True,
        "thinkingLevels": ["minimal", "low", "medium", "high"],
    },
    # 2.5 series
    "gemini-2.5-pro": {
        "description": "Previous generation thinking model, complex reasoning and coding",
        "features": ["thinking", "function_calling", "json_mode", "grounding", "system_instructions"],
        "contextWindow": 2000000,
        "thinking": True,
    },
    "gemini-2.5-flash": {
        "description": "Previous generation fast thinking model",
        "features": ["thinking", "function_calling", "json_mode", "grounding", "system_instructions"],
        "contextWindow": 1000000,
        "thinking": True,
    },
    "gemini-2.5-flash-lite": {
        "description": "Previous generation ultra-fast, cost-efficient thinking model",
        "features": ["thinking", "function_calling", "json_mode", "system_instructions"],
        "contextWindow": 1000000,
        "thinking": True,
    },
}

VISION_MODELS = (
    "gemini-3-pro-preview",
    "gemini-3-flash-preview",
    "gemini-2.5-pro",
    "gemini-2.5-flash",
)

EMBEDDING_MODELS = ("gemini-embedding-001",)
DEFAULT_EMBEDDING_MODEL = "gemini-embedding-001"

THINKING_LEVELS = ("minimal", "low", "medium", "high")
MEDIA_RESOLUTIONS = (
    "media_resolution_low",
    "media_resolution_medium",
    "media_resolution_high",
)
MODEL_FILTERS = ("all", "thinking", "vision", "grounding", "json_mode")


def is_known_model(name) -> bool:
    return name in GEMINI_MODELS


def get_model_info(name: str) -> dict | None:
    return GEMINI_MODELS.get(name)


def supports(name: str, feature: str) -> bool:
    info = GEMINI_MODELS.get(name)
    return bool(info) and feature in info["features"]


def filter_models(capability: str = "all") -> list[dict]:
    """Return catalog entries matching a capability filter, in catalog order.

    Args:
        capability: One of `MODEL_FILTERS`.

    Returns:
        List of `{"name": ..., **info}` dicts (fresh copies).

    Raises:
        ValueError: for an unknown filter name.
    """
    if capability not in MODEL_FILTERS:
        raise ValueError(f"Unknown model filter: {capability}")

    selected = []
    for name, info in GEMINI_MODELS.items():
        if capability == "thinking" and not info.get("thinking"):
            continue
        if capability == "vision" and name not in VISION_MODELS:
            continue
        if capability in ("grounding", "json_mode") and capability not in info["features"]:
            continue
        selected.append({"name": name, **_copy_info(info)})

    return selected


def _copy_info(info: dict) -> dict:
    return {key: list(value) if isinstance(value, list) else value for key, value in info.items()}
