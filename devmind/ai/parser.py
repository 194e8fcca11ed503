"""
AI Response Parser

Pulls the reply text out of a chat-completions payload and, for
refactor replies, the first fenced code block inside it.
"""

from dataclasses import dataclass
from typing import Any

from devmind.exceptions import MalformedResponseError

FENCE = "```"


@dataclass
class AIResult:
    """Parsed AI reply."""

    mode: str
    content: str
    extracted_code: str | None = None


def extract_code_block(text: str) -> str | None:
    """
    Extract the first fenced code block from free-form text.

    The opening fence may be followed by a language tag and one newline,
    both skipped. Everything up to the next fence is captured and trimmed.

    Args:
        text: Reply text from the AI provider

    Returns:
        The inner code, or None if no complete block exists
    """
    start = text.find(FENCE)
    if start == -1:
        return None

    pos = start + len(FENCE)

    # Optional language tag, e.g. ```python or ```c++
    while pos < len(text) and not text[pos].isspace() and text[pos] != "`":
        pos += 1

    # One newline after the tag
    if text.startswith("\r\n", pos):
        pos += 2
    elif text.startswith("\n", pos):
        pos += 1

    end = text.find(FENCE, pos)
    if end == -1:
        return None

    return text[pos:end].strip()


def extract_content(payload: dict[str, Any]) -> str:
    """
    Get the first choice's message content from a chat-completions payload.

    Raises:
        MalformedResponseError: If there is no choice or no text content
    """
    choices = payload.get("choices") if isinstance(payload, dict) else None
    if not choices or not isinstance(choices, list):
        raise MalformedResponseError("No choices in AI response", {"keys": _keys(payload)})

    choice = choices[0]
    message = choice.get("message") if isinstance(choice, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str) or not content:
        raise MalformedResponseError(
            "No message content in AI response",
            {"finish_reason": choice.get("finish_reason") if isinstance(choice, dict) else None},
        )
    return content


def parse_response(payload: dict[str, Any], mode: str) -> AIResult:
    """
    Parse a raw chat-completions payload for the given mode.

    Args:
        payload: Response body as returned by AIClient.send()
        mode: "explain" or "refactor"

    Returns:
        AIResult; extracted_code is set only for refactor replies with a fenced block

    Raises:
        MalformedResponseError: If the payload has no usable content
    """
    content = extract_content(payload)
    extracted = extract_code_block(content) if mode == "refactor" else None
    return AIResult(mode=mode, content=content, extracted_code=extracted)


def _keys(payload: Any) -> list[str] | str:
    return list(payload.keys()) if isinstance(payload, dict) else type(payload).__name__
