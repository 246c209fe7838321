"""Tool argument schemas.

Each tool's `arguments` object is validated by one pydantic model below.
Field names are snake_case with the camelCase wire names as aliases, so both
`maxTokens` and `max_tokens` are accepted. Unknown keys are ignored.

Normalization rules:
    - Explicit `null` values are treated as omitted, so defaults apply.
    - Sampling values are clamped into range rather than rejected
      (temperature 0..2, topP 0..1, topK >= 1, maxTokens >= 1).
    - Enumerated values are checked strictly.

Validation failures are turned into one readable line by
`format_validation_error` and reported to the caller as a tool error.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from gemini_bridge.catalog.models import DEFAULT_EMBEDDING_MODEL
from gemini_bridge.safety.settings import normalize_safety_settings


ThinkingLevel = Literal["minimal", "low", "medium", "high"]
MediaResolution = Literal["media_resolution_low", "media_resolution_medium", "media_resolution_high"]
ModelFilter = Literal["all", "thinking", "vision", "grounding", "json_mode"]


def _clamp(value, lower, upper=None):
    if value < lower:
        return lower
    if upper is not None and value > upper:
        return upper
    return value


class ToolArguments(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class GenerateTextArguments(ToolArguments):
    prompt: str
    model: str | None = None
    system_instruction: str | None = Field(None, alias="systemInstruction")
    temperature: float = 1.0
    max_tokens: int = Field(2048, alias="maxTokens")
    top_k: int = Field(40, alias="topK")
    top_p: float = Field(0.95, alias="topP")
    json_mode: bool = Field(False, alias="jsonMode")
    json_schema: dict | None = Field(None, alias="jsonSchema")
    grounding: bool = False
    safety_settings: list | None = Field(None, alias="safetySettings")
    conversation_id: str | None = Field(None, alias="conversationId")
    thinking_level: ThinkingLevel | None = Field(None, alias="thinkingLevel")

    @field_validator("prompt")
    @classmethod
    def _prompt_not_blank(cls, value):
        if not value.strip():
            raise ValueError("prompt must be a non-empty string")
        return value

    @field_validator("temperature")
    @classmethod
    def _clamp_temperature(cls, value):
        return _clamp(value, 0.0, 2.0)

    @field_validator("top_p")
    @classmethod
    def _clamp_top_p(cls, value):
        return _clamp(value, 0.0, 1.0)

    @field_validator("top_k", "max_tokens")
    @classmethod
    def _at_least_one(cls, value):
        return _clamp(value, 1)

    @field_validator("safety_settings", mode="before")
    @classmethod
    def _normalize_safety(cls, value):
        return normalize_safety_settings(value)

    @field_validator("conversation_id")
    @classmethod
    def _blank_conversation_is_none(cls, value):
        return value if value and value.strip() else None


class AnalyzeImageArguments(ToolArguments):
    prompt: str
    image_url: str | None = Field(None, alias="imageUrl")
    image_base64: str | None = Field(None, alias="imageBase64")
    model: str | None = None
    media_resolution: MediaResolution | None = Field(None, alias="mediaResolution")

    @field_validator("prompt")
    @classmethod
    def _prompt_not_blank(cls, value):
        if not value.strip():
            raise ValueError("prompt must be a non-empty string")
        return value

    @model_validator(mode="after")
    def _exactly_one_image_source(self):
        has_url = bool(self.image_url and self.image_url.strip())
        has_inline = bool(self.image_base64 and self.image_base64.strip())
        if not has_url and not has_inline:
            raise ValueError("Either imageUrl or imageBase64 must be provided")
        if has_url and has_inline:
            raise ValueError("Provide only one of imageUrl or imageBase64, not both")
        return self


class CountTokensArguments(ToolArguments):
    text: str
    model: str | None = None


class ListModelsArguments(ToolArguments):
    capability: ModelFilter = Field("all", alias="filter")


class EmbedTextArguments(ToolArguments):
    text: str
    model: str = DEFAULT_EMBEDDING_MODEL

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value):
        if not value.strip():
            raise ValueError("text must be a non-empty string")
        return value


class GetHelpArguments(ToolArguments):
    topic: str = "overview"


def format_validation_error(err: ValidationError) -> str:
    """Collapse a pydantic error into `field: reason; field: reason`."""
    problems = []
    for error in err.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        if error.get("type") == "missing":
            message = "required field is missing"
        problems.append(f"{location}: {message}" if location else message)
    return "; ".join(problems)
