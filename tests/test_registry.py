"""Tests for the capability registry, resources and prompts."""

import json

import pytest

from gemini_bridge.catalog.help_content import HELP_TOPICS, UNKNOWN_TOPIC_TEXT, get_help_text
from gemini_bridge.catalog.models import GEMINI_MODELS, VISION_MODELS, filter_models
from gemini_bridge.catalog.prompts import render_prompt
from gemini_bridge.catalog.registry import CapabilityRegistry
from gemini_bridge.catalog.resources import read_resource

EXPECTED_TOOLS = [
    "generate_text",
    "analyze_image",
    "count_tokens",
    "list_models",
    "embed_text",
    "get_help",
]


def test_tool_list_is_fixed_and_ordered(registry):
    assert [tool["name"] for tool in registry.list_tools()] == EXPECTED_TOOLS


def test_listings_encode_byte_identically(registry):
    first = json.dumps(registry.list_tools())
    second = json.dumps(registry.list_tools())
    assert first == second
    assert json.dumps(registry.list_resources()) == json.dumps(registry.list_resources())


def test_listing_mutation_does_not_leak(registry):
    tools = registry.list_tools()
    tools[0]["inputSchema"]["properties"].clear()
    tools.pop()

    fresh = registry.list_tools()
    assert len(fresh) == len(EXPECTED_TOOLS)
    assert "prompt" in fresh[0]["inputSchema"]["properties"]


def test_generate_text_schema(registry):
    schema = registry.get_tool("generate_text").to_dict()["inputSchema"]
    props = schema["properties"]

    assert schema["required"] == ["prompt"]
    assert props["model"]["default"] == "gemini-3-pro-preview"
    assert props["model"]["enum"] == list(GEMINI_MODELS)
    assert props["temperature"]["default"] == 1.0
    assert props["temperature"]["maximum"] == 2
    assert props["thinkingLevel"]["enum"] == ["minimal", "low", "medium", "high"]
    assert props["safetySettings"]["items"]["properties"]["threshold"]["enum"][0] == "BLOCK_NONE"


def test_configured_default_model_is_advertised():
    registry = CapabilityRegistry("gemini-2.5-flash")
    tools = {tool["name"]: tool for tool in registry.list_tools()}

    assert tools["generate_text"]["inputSchema"]["properties"]["model"]["default"] == "gemini-2.5-flash"
    assert tools["count_tokens"]["inputSchema"]["properties"]["model"]["default"] == "gemini-2.5-flash"


def test_analyze_image_default_stays_vision_capable():
    registry = CapabilityRegistry("gemini-2.5-flash-lite")
    schema = registry.get_tool("analyze_image").to_dict()["inputSchema"]

    assert schema["properties"]["model"]["default"] in VISION_MODELS
    assert "mediaResolution" in schema["properties"]


def test_unknown_tool_lookup(registry):
    assert registry.get_tool("nope") is None


def test_resources_are_fixed(registry):
    uris = [resource["uri"] for resource in registry.list_resources()]
    assert uris == [
        "gemini://models",
        "gemini://capabilities",
        "gemini://help/usage",
        "gemini://help/parameters",
        "gemini://help/examples",
    ]


def test_every_resource_is_readable(registry):
    for resource in registry.list_resources():
        mime_type, text = read_resource(resource["uri"], registry.default_model)
        assert mime_type == resource["mimeType"]
        assert text


def test_models_resource_is_json():
    mime_type, text = read_resource("gemini://models", "gemini-3-pro-preview")
    assert mime_type == "application/json"
    assert set(json.loads(text)) == set(GEMINI_MODELS)


def test_unknown_resource_is_none():
    assert read_resource("gemini://nope", "gemini-3-pro-preview") is None


def test_prompts_listing(registry):
    prompts = registry.list_prompts()
    assert [prompt["name"] for prompt in prompts] == ["code_review", "explain_with_thinking", "creative_writing"]
    assert prompts[0]["arguments"][0] == {"name": "code", "description": "Code to review", "required": True}


def test_render_prompt_places_material_last():
    messages = render_prompt("code_review", {"code": "print(1)", "language": "python"})
    text = messages[0]["content"]["text"]

    assert messages[0]["role"] == "user"
    assert "written in python" in text
    assert text.endswith("```python\nprint(1)\n```")


@pytest.mark.parametrize("topic", HELP_TOPICS)
def test_help_topics_render(topic):
    assert get_help_text(topic, "gemini-3-pro-preview").startswith("#")


def test_unknown_help_topic():
    assert get_help_text("nope", "gemini-3-pro-preview") == UNKNOWN_TOPIC_TEXT


def test_filter_models():
    assert len(filter_models("all")) == len(GEMINI_MODELS)
    assert [m["name"] for m in filter_models("grounding")] == [
        "gemini-3-pro-preview",
        "gemini-3-flash-preview",
        "gemini-2.5-pro",
        "gemini-2.5-flash",
    ]
    assert [m["name"] for m in filter_models("vision")] == list(VISION_MODELS)
    with pytest.raises(ValueError):
        filter_models("bogus")
