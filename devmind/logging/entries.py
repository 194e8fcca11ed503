"""
Log Entry Data Structures for DevMind.

Structured entries for AI provider calls and snippet store operations.
"""

import json
from dataclasses import asdict, dataclass
from datetime import datetime


@dataclass
class AILogEntry:
    """Log entry for AI provider interactions."""

    # Identity
    timestamp: str  # ISO 8601
    request_id: str  # UUID for correlating request/response

    # Request
    mode: str = ""  # "explain" or "refactor"
    scope: str = ""  # "selection" or "document"
    language: str = ""
    system_prompt: str = ""
    user_prompt: str = ""
    temperature: float = 0.0

    # Response
    response_content: str = ""
    model: str = ""
    finish_reason: str = ""

    # Metrics
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    latency_ms: int = 0

    # Error (if any)
    error: str | None = None
    error_type: str | None = None
    status_code: int | None = None

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(asdict(self), default=str)


@dataclass
class StoreLogEntry:
    """Log entry for snippet store operations."""

    timestamp: str  # ISO 8601
    operation: str  # "load", "create", "update", "delete", "persist"

    snippet_id: int | None = None
    snippet_count: int = 0
    path: str = ""
    migrated_records: int = 0

    # Error info
    error: str | None = None
    error_type: str | None = None

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(asdict(self), default=str)


def now_iso() -> str:
    """Get current time as ISO 8601 string."""
    return datetime.now().isoformat()
