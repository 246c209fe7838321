"""Safety-settings normalization for `generate_text`.

Purpose:
    Turn the loosely typed `safetySettings` tool argument into the exact list
    of `{category, threshold}` objects the Gemini API accepts, or reject it
    with a readable message the calling agent can act on.

Validation model:
    - Rule-based only: membership checks against fixed category/threshold
      lists.
    - Category names are accepted with or without the `HARM_CATEGORY_`
      prefix and in any case (`harassment` -> `HARM_CATEGORY_HARASSMENT`).
    - Duplicate categories keep the last threshold given.

Determinism:
    Output order follows first appearance of each category in the input.
"""

HARM_CATEGORY_PREFIX = "HARM_CATEGORY_"

HARM_CATEGORIES = [
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
]

BLOCK_THRESHOLDS = [
    "BLOCK_NONE",
    "BLOCK_ONLY_HIGH",
    "BLOCK_MEDIUM_AND_ABOVE",
    "BLOCK_LOW_AND_ABOVE",
]


def _canonical_category(value) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("safetySettings entries need a non-empty 'category'")

    name = value.strip().upper()
    if not name.startswith(HARM_CATEGORY_PREFIX):
        name = HARM_CATEGORY_PREFIX + name

    if name not in HARM_CATEGORIES:
        raise ValueError(
            f"Unknown safety category: {value}. Expected one of {', '.join(HARM_CATEGORIES)}"
        )
    return name


def _canonical_threshold(value) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("safetySettings entries need a non-empty 'threshold'")

    name = value.strip().upper()
    if name not in BLOCK_THRESHOLDS:
        raise ValueError(
            f"Unknown safety threshold: {value}. Expected one of {', '.join(BLOCK_THRESHOLDS)}"
        )
    return name


def normalize_safety_settings(entries) -> list[dict] | None:
    """Validate and canonicalize safety settings.

    Args:
        entries: `None`, or a list of dicts with `category` and `threshold`.

    Returns:
        `None` when no settings were given, else the canonical list.

    Raises:
        ValueError: on a non-list value, non-dict entry, or unknown
            category/threshold. The message is shown to the caller verbatim.
    """
    if entries is None:
        return None

    if not isinstance(entries, list):
        raise ValueError("safetySettings must be a list of {category, threshold} objects")

    by_category: dict[str, str] = {}
    for entry in entries:
        if not isinstance(entry, dict):
            raise ValueError("safetySettings entries must be objects")
        category = _canonical_category(entry.get("category"))
        by_category[category] = _canonical_threshold(entry.get("threshold"))

    return [
        {"category": category, "threshold": threshold}
        for category, threshold in by_category.items()
    ]
