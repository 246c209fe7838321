"""Markdown help topics.

Shared by the `get_help` tool and the `gemini://help/*` / `gemini://capabilities`
resources. Texts mention the configured default model, so they are rendered
per call from templates rather than stored pre-formatted.
"""

from gemini_bridge import SERVER_NAME, __version__
from gemini_bridge.catalog.models import GEMINI_MODELS, MODEL_FILTERS


HELP_TOPICS = ("overview", "tools", "models", "parameters", "examples", "quick-start")

UNKNOWN_TOPIC_TEXT = (
    "Unknown help topic. Available topics: " + ", ".join(HELP_TOPICS)
)


_OVERVIEW = """# {server} Help

Version {version}. This server gives MCP clients access to Google Gemini models
over a stdio JSON-RPC connection.

## Available Tools
1. **generate_text** - Generate text with advanced features
2. **analyze_image** - Analyze images using vision models
3. **count_tokens** - Count tokens for cost estimation
4. **list_models** - List all available models
5. **embed_text** - Generate text embeddings
6. **get_help** - Get help on using this server

## Key Features
- Gemini 3 models with configurable thinking depth
- Media resolution control for vision tasks
- JSON mode with optional response schema
- Google Search grounding
- System instructions
- Conversation memory keyed by conversationId
- Per-category safety settings

Default model: `{default_model}`

Use topic "tools" for detailed tool information."""


_TOOLS = """# Available Tools

## 1. generate_text
Generate text with a Gemini model.

**Parameters:**
- prompt (required): Your text prompt
- model: One of the catalog models (default {default_model})
- temperature: 0-2 (default 1.0)
- maxTokens: Max output tokens (default 2048)
- systemInstruction: Guide model behavior
- jsonMode / jsonSchema: Structured JSON output
- grounding: Enable Google Search
- conversationId: Keep context across calls
- thinkingLevel: minimal/low/medium/high for Gemini 3 models

## 2. analyze_image
Analyze an image with a vision-capable model.

**Parameters:**
- prompt (required): Question about the image
- imageUrl OR imageBase64 (exactly one): Image source
- model: Vision-capable model
- mediaResolution: media_resolution_low/medium/high

## 3. count_tokens
**Parameters:**
- text (required): Text to count
- model: Model whose tokenizer is used (default {default_model})

## 4. list_models
**Parameters:**
- filter: {filters}

## 5. embed_text
**Parameters:**
- text (required): Text to embed
- model: gemini-embedding-001 (default)

## 6. get_help
**Parameters:**
- topic: {topics}"""


_PARAMETERS = """# Parameter Reference

## generate_text

**Required:**
- prompt (string)

**Optional:**
- model (string): default {default_model}
- systemInstruction (string)
- temperature (0-2): default 1.0, out-of-range values are clamped
- maxTokens (number): default 2048
- topK (number): default 40
- topP (0-1): default 0.95
- jsonMode (boolean), jsonSchema (object)
- grounding (boolean): ignored for models without grounding support
- conversationId (string)
- safetySettings (array of {{category, threshold}})
- thinkingLevel (string): must be a level the chosen model supports

## analyze_image

**Required:**
- prompt (string)
- exactly one of imageUrl / imageBase64

**Optional:**
- model (string)
- mediaResolution: media_resolution_low | media_resolution_medium | media_resolution_high

## Thinking Levels
- gemini-3-pro-preview: low, high
- gemini-3-flash-preview: minimal, low, medium, high

## Safety Settings
Categories: HARASSMENT, HATE_SPEECH, SEXUALLY_EXPLICIT, DANGEROUS_CONTENT
(with or without the HARM_CATEGORY_ prefix)
Thresholds: BLOCK_NONE, BLOCK_ONLY_HIGH, BLOCK_MEDIUM_AND_ABOVE, BLOCK_LOW_AND_ABOVE

## JSON Mode Example
Set jsonMode to true and pass a schema:
{{
  "type": "object",
  "properties": {{
    "sentiment": {{"type": "string"}},
    "score": {{"type": "number"}}
  }}
}}"""


_EXAMPLES = """# Usage Examples

## Basic generation
{{"name": "generate_text", "arguments": {{"prompt": "Explain machine learning"}}}}

## Specific model and thinking level
{{"name": "generate_text", "arguments": {{"prompt": "Prove sqrt(2) is irrational",
  "model": "gemini-3-pro-preview", "thinkingLevel": "high"}}}}

## JSON mode
{{"name": "generate_text", "arguments": {{"prompt": "Rate: 'great product'",
  "jsonMode": true, "jsonSchema": {{"type": "object",
  "properties": {{"sentiment": {{"type": "string"}}}}}}}}}}

## Conversation
{{"name": "generate_text", "arguments": {{"prompt": "Let's talk about React",
  "conversationId": "chat-001"}}}}
{{"name": "generate_text", "arguments": {{"prompt": "And hooks?",
  "conversationId": "chat-001"}}}}

## Image analysis
{{"name": "analyze_image", "arguments": {{"prompt": "Describe the UI",
  "imageBase64": "data:image/png;base64,...", "mediaResolution": "media_resolution_high"}}}}

## Token counting
{{"name": "count_tokens", "arguments": {{"text": "...", "model": "{default_model}"}}}}"""


_QUICK_START = """# Quick Start

1. Call `generate_text` with just a `prompt`.
2. Add `conversationId` to keep context between calls.
3. Use `analyze_image` with `imageUrl` or `imageBase64` for pictures.
4. Use `list_models` to see what each model supports.

## Tips
- {default_model} is the default model
- Lower temperature for facts, higher for creativity
- Enable grounding for current information"""


_CAPABILITIES = """# Gemini API Capabilities

## Text Generation
- System instructions, temperature, topK and topP control
- Default temperature 1.0

## Thinking Models
- Configurable depth via thinkingLevel on Gemini 3 models

## Media Resolution
- media_resolution_low / medium / high for image inputs

## JSON Mode
- Structured output with optional response schema

## Google Search Grounding
- Available on models with the grounding feature

## Vision
- Image analysis from URLs or base64 data

## Embeddings
- gemini-embedding-001

## Safety Settings
- Per-category block thresholds

## Conversation Memory
- In-process, keyed by conversationId, cleared on restart"""


def _models_help() -> str:
    lines = ["# Available Gemini Models", ""]
    for name, info in GEMINI_MODELS.items():
        lines.append(f"**{name}**")
        lines.append(f"- {info['description']}")
        lines.append(f"- Context window: {info['contextWindow']:,} tokens")
        if info.get("thinkingLevels"):
            lines.append(f"- Thinking levels: {', '.join(info['thinkingLevels'])}")
        lines.append(f"- Features: {', '.join(info['features'])}")
        lines.append("")
    return "\n".join(lines).rstrip()


def get_help_text(topic: str, default_model: str) -> str:
    """Render one help topic; unknown topics return `UNKNOWN_TOPIC_TEXT`."""
    values = {
        "server": SERVER_NAME,
        "version": __version__,
        "default_model": default_model,
        "filters": ", ".join(MODEL_FILTERS),
        "topics": ", ".join(HELP_TOPICS),
    }

    if topic == "models":
        return _models_help()

    templates = {
        "overview": _OVERVIEW,
        "tools": _TOOLS,
        "parameters": _PARAMETERS,
        "examples": _EXAMPLES,
        "quick-start": _QUICK_START,
    }
    template = templates.get(topic)
    if template is None:
        return UNKNOWN_TOPIC_TEXT
    return template.format(**values)


def get_capabilities_text() -> str:
    return _CAPABILITIES
