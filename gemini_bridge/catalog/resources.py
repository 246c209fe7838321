"""Resource document content for `resources/read`."""

import json

from gemini_bridge.catalog.help_content import get_capabilities_text, get_help_text
from gemini_bridge.catalog.models import GEMINI_MODELS
from gemini_bridge.catalog.registry import RESOURCES


_MIME_TYPES = {resource.uri: resource.mime_type for resource in RESOURCES}


def read_resource(uri: str, default_model: str) -> tuple[str, str] | None:
    """Return `(mime_type, text)` for a known resource URI, else `None`."""
    if uri not in _MIME_TYPES:
        return None

    if uri == "gemini://models":
        text = json.dumps(GEMINI_MODELS, indent=2)
    elif uri == "gemini://capabilities":
        text = get_capabilities_text()
    elif uri == "gemini://help/usage":
        text = get_help_text("overview", default_model) + "\n\n" + get_help_text("tools", default_model)
    elif uri == "gemini://help/parameters":
        text = get_help_text("parameters", default_model)
    else:
        text = get_help_text("examples", default_model)

    return _MIME_TYPES[uri], text
