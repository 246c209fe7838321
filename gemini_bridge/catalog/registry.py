"""Tool, resource and prompt descriptors.

Architectural role:
    Static, versioned description of everything the bridge exposes. The router
    answers `tools/list`, `resources/list` and `prompts/list` from here; the
    dispatcher looks tools up by name before executing them.

Lifecycle:
    A `CapabilityRegistry` is built once at startup with the resolved default
    model (which appears as the `default` of every model parameter) and is
    read-only afterwards. Listing methods return deep copies, so a caller that
    mutates a listing cannot affect later listings, and two listings encode to
    identical bytes.
"""

import copy
from dataclasses import dataclass, field

from gemini_bridge.catalog.models import (
    DEFAULT_EMBEDDING_MODEL,
    EMBEDDING_MODELS,
    GEMINI_MODELS,
    MEDIA_RESOLUTIONS,
    MODEL_FILTERS,
    THINKING_LEVELS,
    VISION_MODELS,
)
from gemini_bridge.catalog.help_content import HELP_TOPICS
from gemini_bridge.safety.settings import BLOCK_THRESHOLDS, HARM_CATEGORIES


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    input_schema: dict

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": copy.deepcopy(self.input_schema),
        }


@dataclass(frozen=True)
class ResourceDescriptor:
    uri: str
    name: str
    description: str
    mime_type: str

    def to_dict(self) -> dict:
        return {
            "uri": self.uri,
            "name": self.name,
            "description": self.description,
            "mimeType": self.mime_type,
        }


@dataclass(frozen=True)
class PromptArgument:
    name: str
    description: str
    required: bool = False


@dataclass(frozen=True)
class PromptDescriptor:
    name: str
    description: str
    arguments: tuple = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "arguments": [
                {"name": arg.name, "description": arg.description, "required": arg.required}
                for arg in self.arguments
            ],
        }


# =========================================================
# TOOL SCHEMAS
# =========================================================

def _generate_text_tool(default_model: str) -> ToolDescriptor:
    return ToolDescriptor(
        name="generate_text",
        description="Generate text using Google Gemini with advanced features",
        input_schema={
            "type": "object",
            "properties": {
                "prompt": {
                    "type": "string",
                    "description": "The prompt to send to Gemini",
                },
                "model": {
                    "type": "string",
                    "description": "Specific Gemini model to use",
                    "enum": list(GEMINI_MODELS),
                    "default": default_model,
                },
                "systemInstruction": {
                    "type": "string",
                    "description": "System instruction to guide model behavior",
                },
                "temperature": {
                    "type": "number",
                    "description": "Temperature for generation (0-2)",
                    "default": 1.0,
                    "minimum": 0,
                    "maximum": 2,
                },
                "maxTokens": {
                    "type": "number",
                    "description": "Maximum tokens to generate",
                    "default": 2048,
                    "minimum": 1,
                },
                "topK": {
                    "type": "number",
                    "description": "Top-k sampling parameter",
                    "default": 40,
                    "minimum": 1,
                },
                "topP": {
                    "type": "number",
                    "description": "Top-p (nucleus) sampling parameter",
                    "default": 0.95,
                    "minimum": 0,
                    "maximum": 1,
                },
                "jsonMode": {
                    "type": "boolean",
                    "description": "Enable JSON mode for structured output",
                    "default": False,
                },
                "jsonSchema": {
                    "type": "object",
                    "description": "JSON schema for structured output (when jsonMode is true)",
                },
                "grounding": {
                    "type": "boolean",
                    "description": "Enable Google Search grounding for up-to-date information",
                    "default": False,
                },
                "safetySettings": {
                    "type": "array",
                    "description": "Safety settings for content filtering",
                    "items": {
                        "type": "object",
                        "properties": {
                            "category": {"type": "string", "enum": list(HARM_CATEGORIES)},
                            "threshold": {"type": "string", "enum": list(BLOCK_THRESHOLDS)},
                        },
                        "required": ["category", "threshold"],
                    },
                },
                "conversationId": {
                    "type": "string",
                    "description": "ID for maintaining conversation context",
                },
                "thinkingLevel": {
                    "type": "string",
                    "description": (
                        "Thinking depth for Gemini 3 models. Pro supports low/high; "
                        "Flash supports minimal/low/medium/high."
                    ),
                    "enum": list(THINKING_LEVELS),
                },
            },
            "required": ["prompt"],
        },
    )


def _analyze_image_tool(default_model: str) -> ToolDescriptor:
    vision_default = default_model if default_model in VISION_MODELS else VISION_MODELS[0]
    return ToolDescriptor(
        name="analyze_image",
        description="Analyze images using Gemini vision capabilities",
        input_schema={
            "type": "object",
            "properties": {
                "prompt": {
                    "type": "string",
                    "description": "Question or instruction about the image",
                },
                "imageUrl": {
                    "type": "string",
                    "description": "URL of the image to analyze. Provide exactly one of imageUrl or imageBase64.",
                },
                "imageBase64": {
                    "type": "string",
                    "description": (
                        "Base64-encoded image data, raw or as a data URI. "
                        "Provide exactly one of imageUrl or imageBase64."
                    ),
                },
                "model": {
                    "type": "string",
                    "description": "Vision-capable Gemini model",
                    "enum": list(VISION_MODELS),
                    "default": vision_default,
                },
                "mediaResolution": {
                    "type": "string",
                    "description": (
                        "Token allocation for image/video inputs. Higher resolution uses "
                        "more tokens but provides better detail."
                    ),
                    "enum": list(MEDIA_RESOLUTIONS),
                },
            },
            "required": ["prompt"],
        },
    )


def _count_tokens_tool(default_model: str) -> ToolDescriptor:
    return ToolDescriptor(
        name="count_tokens",
        description="Count tokens for a given text with a specific model",
        input_schema={
            "type": "object",
            "properties": {
                "text": {"type": "string", "description": "Text to count tokens for"},
                "model": {
                    "type": "string",
                    "description": "Model to use for token counting",
                    "enum": list(GEMINI_MODELS),
                    "default": default_model,
                },
            },
            "required": ["text"],
        },
    )


def _list_models_tool() -> ToolDescriptor:
    return ToolDescriptor(
        name="list_models",
        description="List all available Gemini models and their capabilities",
        input_schema={
            "type": "object",
            "properties": {
                "filter": {
                    "type": "string",
                    "description": "Filter models by capability",
                    "enum": list(MODEL_FILTERS),
                    "default": "all",
                },
            },
        },
    )


def _embed_text_tool() -> ToolDescriptor:
    return ToolDescriptor(
        name="embed_text",
        description="Generate embeddings for text using Gemini embedding models",
        input_schema={
            "type": "object",
            "properties": {
                "text": {"type": "string", "description": "Text to generate embeddings for"},
                "model": {
                    "type": "string",
                    "description": "Embedding model to use",
                    "enum": list(EMBEDDING_MODELS),
                    "default": DEFAULT_EMBEDDING_MODEL,
                },
            },
            "required": ["text"],
        },
    )


def _get_help_tool() -> ToolDescriptor:
    return ToolDescriptor(
        name="get_help",
        description="Get help and usage information for the Gemini bridge",
        input_schema={
            "type": "object",
            "properties": {
                "topic": {
                    "type": "string",
                    "description": "Help topic to get information about",
                    "enum": list(HELP_TOPICS),
                    "default": "overview",
                },
            },
        },
    )


RESOURCES = (
    ResourceDescriptor(
        uri="gemini://models",
        name="Available Gemini Models",
        description="List of all available Gemini models and their capabilities",
        mime_type="application/json",
    ),
    ResourceDescriptor(
        uri="gemini://capabilities",
        name="API Capabilities",
        description="Detailed information about Gemini API capabilities",
        mime_type="text/markdown",
    ),
    ResourceDescriptor(
        uri="gemini://help/usage",
        name="Usage Guide",
        description="Complete guide on using all tools and features",
        mime_type="text/markdown",
    ),
    ResourceDescriptor(
        uri="gemini://help/parameters",
        name="Parameters Reference",
        description="Detailed documentation of all parameters",
        mime_type="text/markdown",
    ),
    ResourceDescriptor(
        uri="gemini://help/examples",
        name="Examples",
        description="Example usage patterns for common tasks",
        mime_type="text/markdown",
    ),
)

PROMPTS = (
    PromptDescriptor(
        name="code_review",
        description="Comprehensive code review with Gemini 3 Pro",
        arguments=(
            PromptArgument("code", "Code to review", required=True),
            PromptArgument("language", "Programming language"),
        ),
    ),
    PromptDescriptor(
        name="explain_with_thinking",
        description="Deep explanation using Gemini 3 thinking capabilities",
        arguments=(
            PromptArgument("topic", "Topic to explain", required=True),
            PromptArgument("level", "Explanation level (beginner/intermediate/expert)"),
        ),
    ),
    PromptDescriptor(
        name="creative_writing",
        description="Creative writing with style control",
        arguments=(
            PromptArgument("prompt", "Writing prompt", required=True),
            PromptArgument("style", "Writing style"),
            PromptArgument("length", "Desired length"),
        ),
    ),
)


class CapabilityRegistry:
    """Read-only lookup over the fixed tool/resource/prompt sets."""

    def __init__(self, default_model: str):
        self.default_model = default_model
        self._tools = (
            _generate_text_tool(default_model),
            _analyze_image_tool(default_model),
            _count_tokens_tool(default_model),
            _list_models_tool(),
            _embed_text_tool(),
            _get_help_tool(),
        )
        self._tools_by_name = {tool.name: tool for tool in self._tools}
        self._resources_by_uri = {resource.uri: resource for resource in RESOURCES}
        self._prompts_by_name = {prompt.name: prompt for prompt in PROMPTS}

    def list_tools(self) -> list[dict]:
        return [tool.to_dict() for tool in self._tools]

    def list_resources(self) -> list[dict]:
        return [resource.to_dict() for resource in RESOURCES]

    def list_prompts(self) -> list[dict]:
        return [prompt.to_dict() for prompt in PROMPTS]

    def tool_names(self) -> list[str]:
        return [tool.name for tool in self._tools]

    def get_tool(self, name) -> ToolDescriptor | None:
        return self._tools_by_name.get(name)

    def get_resource(self, uri) -> ResourceDescriptor | None:
        return self._resources_by_uri.get(uri)

    def get_prompt(self, name) -> PromptDescriptor | None:
        return self._prompts_by_name.get(name)
