"""Prompt template rendering for `prompts/get`.

This module only builds message text from already validated arguments.
Required-argument presence is checked against the registry descriptor by the
router; argument values are interpolated as given.

Prompt component order (every template):
    1) Task instruction
    2) Optional modifiers (language / level / style / length)
    3) User-supplied material, last, so it cannot be mistaken for instructions
"""


# =========================================================
# CODE REVIEW
# =========================================================

def _code_review(arguments: dict) -> str:
    language = str(arguments.get("language") or "").strip()
    header = "Review the following code"
    if language:
        header += f" written in {language}"
    return (
        f"{header}. Cover correctness, security, performance and readability. "
        "List concrete issues with suggested fixes, most severe first.\n\n"
        f"```{language}\n{arguments['code']}\n```"
    )


# =========================================================
# EXPLANATION
# =========================================================

def _explain_with_thinking(arguments: dict) -> str:
    level = str(arguments.get("level") or "intermediate").strip()
    return (
        f"Explain the topic below for a {level} audience. Think it through step by "
        "step before answering, then give a structured explanation with an example.\n\n"
        f"Topic: {arguments['topic']}"
    )


# =========================================================
# CREATIVE WRITING
# =========================================================

def _creative_writing(arguments: dict) -> str:
    modifiers = []
    if arguments.get("style"):
        modifiers.append(f"Style: {arguments['style']}")
    if arguments.get("length"):
        modifiers.append(f"Length: {arguments['length']}")

    text = "Write an original piece based on the prompt below."
    if modifiers:
        text += "\n" + "\n".join(modifiers)
    return f"{text}\n\nPrompt: {arguments['prompt']}"


_RENDERERS = {
    "code_review": _code_review,
    "explain_with_thinking": _explain_with_thinking,
    "creative_writing": _creative_writing,
}


def render_prompt(name: str, arguments: dict) -> list[dict]:
    """Build the MCP `messages` list for a prompt.

    Returns:
        One user message with text content.

    Raises:
        KeyError: for an unregistered prompt name.
    """
    text = _RENDERERS[name](arguments)
    return [{"role": "user", "content": {"type": "text", "text": text}}]
