"""AI client, prompts and response parsing for explain/refactor."""

from devmind.ai.client import MODES, AIClient, AIRequest, ping_sync
from devmind.ai.parser import AIResult, extract_code_block, parse_response
from devmind.ai.prompts import EXPLAIN_SYSTEM_PROMPT, REFACTOR_SYSTEM_PROMPT

__all__ = [
    "MODES",
    "AIClient",
    "AIRequest",
    "AIResult",
    "ping_sync",
    "extract_code_block",
    "parse_response",
    "EXPLAIN_SYSTEM_PROMPT",
    "REFACTOR_SYSTEM_PROMPT",
]
