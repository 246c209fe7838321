"""Tool execution for `tools/call`.

Architectural role:
    Validates tool arguments, runs the matching provider operation, keeps
    conversation transcripts up to date, and shapes the tool result.

Control-flow model (per call):
    1. Look the tool up in the registry. Unknown or missing names are protocol
       errors (`InvalidParamsError`, -32602).
    2. Validate/normalize arguments with the pydantic models in
       `tools.arguments`. Failures are tool errors.
    3. For `generate_text` with a `conversationId`, hold that conversation's
       lock while prior turns are prepended, the provider is called, and the
       new user/assistant turns are appended.
    4. Await exactly one provider operation (generate / count tokens / embed).
    5. Return a text result with metadata.

Error handling strategy:
    `ToolExecutionError` and `ProviderError` become `isError` results with a
    tool-specific prefix. Anything else propagates to the router, which turns
    it into an internal-error response.
"""

import asyncio
import json
import logging

from pydantic import ValidationError

from gemini_bridge.catalog.help_content import get_help_text
from gemini_bridge.catalog.models import (
    EMBEDDING_MODELS,
    VISION_MODELS,
    filter_models,
    get_model_info,
    supports,
)
from gemini_bridge.catalog.registry import CapabilityRegistry
from gemini_bridge.core.errors import InvalidParamsError, ProviderError, ToolExecutionError
from gemini_bridge.llm.service import GenerationRequest
from gemini_bridge.memory.conversation_store import ConversationStore
from gemini_bridge.tools.arguments import (
    AnalyzeImageArguments,
    CountTokensArguments,
    EmbedTextArguments,
    GenerateTextArguments,
    GetHelpArguments,
    ListModelsArguments,
    format_validation_error,
)
from gemini_bridge.tools.media import FETCH_TIMEOUT, fetch_image_part, inline_part_from_base64
from gemini_bridge.tools.results import text_result, tool_error_result


logger = logging.getLogger(__name__)


class ToolDispatcher:
    """Name -> handler table over the registered tools.

    Args:
        registry: Capability registry; its default model fills omitted
            `model` arguments.
        provider: Object with async `generate`, `count_tokens`, `embed`
            (normally `llm.service.GeminiProvider`).
        store: Conversation store owned by this dispatcher.
    """

    def __init__(
        self,
        registry: CapabilityRegistry,
        provider,
        store: ConversationStore,
        fetch_timeout: float = FETCH_TIMEOUT,
    ):
        self.registry = registry
        self.provider = provider
        self.store = store
        self.fetch_timeout = fetch_timeout

        # name -> (handler, prefix used for in-band error text)
        self._handlers = {
            "generate_text": (self._generate_text, "Error"),
            "analyze_image": (self._analyze_image, "Image analysis failed"),
            "count_tokens": (self._count_tokens, "Token counting failed"),
            "list_models": (self._list_models, "Error"),
            "embed_text": (self._embed_text, "Embedding failed"),
            "get_help": (self._get_help, "Error"),
        }

        missing = set(registry.tool_names()) ^ set(self._handlers)
        if missing:
            raise RuntimeError(f"Tool registry and handlers disagree on: {sorted(missing)}")

    @property
    def default_model(self) -> str:
        return self.registry.default_model

    async def call_tool(self, name, arguments) -> dict:
        """Execute one tool call and return its result payload.

        Raises:
            InvalidParamsError: missing/unknown tool name or non-object
                arguments.
        """
        if not isinstance(name, str) or not name:
            raise InvalidParamsError("Missing required parameter: name")
        if self.registry.get_tool(name) is None:
            raise InvalidParamsError(f"Unknown tool: {name}")

        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise InvalidParamsError("Tool arguments must be an object")

        handler, error_prefix = self._handlers[name]
        logger.info("Calling tool %s", name)

        try:
            return await handler(arguments)
        except (ToolExecutionError, ProviderError) as err:
            logger.warning("Tool %s failed: %s", name, err)
            return tool_error_result(f"{error_prefix}: {err}")

    def _parse(self, schema, tool_name: str, arguments: dict):
        try:
            return schema.model_validate(arguments)
        except ValidationError as err:
            raise ToolExecutionError(
                f"Invalid arguments for {tool_name}: {format_validation_error(err)}"
            ) from err

    # =========================================================
    # generate_text
    # =========================================================

    def _generation_config(self, args: GenerateTextArguments, model: str, info: dict) -> dict:
        max_tokens = args.max_tokens
        if info.get("maxOutputTokens"):
            max_tokens = min(max_tokens, info["maxOutputTokens"])

        config = {
            "temperature": args.temperature,
            "maxOutputTokens": max_tokens,
            "topK": args.top_k,
            "topP": args.top_p,
        }

        if args.json_mode:
            config["responseMimeType"] = "application/json"
            if args.json_schema:
                config["responseSchema"] = args.json_schema

        if args.thinking_level:
            levels = info.get("thinkingLevels")
            if not levels:
                logger.info("thinkingLevel ignored: %s has no selectable thinking levels", model)
            elif args.thinking_level not in levels:
                raise ToolExecutionError(
                    f"Model {model} does not support thinkingLevel '{args.thinking_level}'. "
                    f"Supported levels: {', '.join(levels)}"
                )
            else:
                config["thinkingConfig"] = {"thinkingLevel": args.thinking_level.upper()}

        return config

    async def _generate_text(self, arguments: dict) -> dict:
        args = self._parse(GenerateTextArguments, "generate_text", arguments)
        model = args.model or self.default_model
        info = get_model_info(model)
        if info is None:
            raise ToolExecutionError(f"Unknown model: {model}")

        search_tools = None
        if args.grounding:
            if supports(model, "grounding"):
                search_tools = [{"googleSearch": {}}]
            else:
                logger.info("grounding ignored: %s does not support it", model)

        request = GenerationRequest(
            model=model,
            parts=[{"text": args.prompt}],
            system_instruction=args.system_instruction,
            generation_config=self._generation_config(args, model, info),
            safety_settings=args.safety_settings,
            tools=search_tools,
        )

        metadata = {}
        if args.conversation_id:
            async with self.store.transaction(args.conversation_id) as session:
                request.history = session.history
                result = await self.provider.generate(request)
                session.record(args.prompt, result.text)
            metadata["conversationId"] = args.conversation_id
            metadata["historyTurns"] = len(session.history)
        else:
            result = await self.provider.generate(request)

        metadata.update(
            model=model,
            tokensUsed=result.total_tokens,
            promptTokens=result.prompt_tokens,
            candidatesCount=result.candidates_count,
            finishReason=result.finish_reason,
        )
        return text_result(result.text, metadata)

    # =========================================================
    # analyze_image
    # =========================================================

    async def _analyze_image(self, arguments: dict) -> dict:
        args = self._parse(AnalyzeImageArguments, "analyze_image", arguments)

        model = args.model
        if model is None:
            model = self.default_model if self.default_model in VISION_MODELS else VISION_MODELS[0]
        if model not in VISION_MODELS:
            if get_model_info(model) is None:
                raise ToolExecutionError(f"Unknown model: {model}")
            raise ToolExecutionError(
                f"Model {model} does not support image analysis. "
                f"Vision models: {', '.join(VISION_MODELS)}"
            )

        if args.image_base64:
            image_part = inline_part_from_base64(args.image_base64)
            source = "inline"
        else:
            image_part = await asyncio.to_thread(fetch_image_part, args.image_url, self.fetch_timeout)
            source = "url"

        config = {}
        if args.media_resolution:
            config["mediaResolution"] = args.media_resolution.upper()

        result = await self.provider.generate(
            GenerationRequest(
                model=model,
                parts=[{"text": args.prompt}, image_part],
                generation_config=config,
            )
        )

        return text_result(
            result.text,
            {
                "model": model,
                "imageSource": source,
                "tokensUsed": result.total_tokens,
                "finishReason": result.finish_reason,
            },
        )

    # =========================================================
    # count_tokens / embed_text
    # =========================================================

    async def _count_tokens(self, arguments: dict) -> dict:
        args = self._parse(CountTokensArguments, "count_tokens", arguments)
        model = args.model or self.default_model
        if get_model_info(model) is None:
            raise ToolExecutionError(f"Unknown model: {model}")

        count = await self.provider.count_tokens(model, args.text)
        return text_result(f"Token count: {count}", {"tokenCount": count, "model": model})

    async def _embed_text(self, arguments: dict) -> dict:
        args = self._parse(EmbedTextArguments, "embed_text", arguments)
        if args.model not in EMBEDDING_MODELS:
            raise ToolExecutionError(
                f"Unknown embedding model: {args.model}. Available: {', '.join(EMBEDDING_MODELS)}"
            )

        values = await self.provider.embed(args.model, args.text)
        return text_result(
            json.dumps({"embedding": values, "model": args.model}),
            {"model": args.model, "dimensions": len(values)},
        )

    # =========================================================
    # Local tools (no provider call)
    # =========================================================

    async def _list_models(self, arguments: dict) -> dict:
        args = self._parse(ListModelsArguments, "list_models", arguments)
        models = filter_models(args.capability)
        return text_result(
            json.dumps(models, indent=2),
            {"count": len(models), "filter": args.capability},
        )

    async def _get_help(self, arguments: dict) -> dict:
        args = self._parse(GetHelpArguments, "get_help", arguments)
        return text_result(get_help_text(args.topic, self.default_model))
