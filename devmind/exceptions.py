"""
DevMind - Exception Hierarchy

All DevMind-specific exceptions inherit from DevMindError.
Errors from file I/O and the AI provider are caught where they occur
and turned into status messages; these classes carry what is shown.
"""

from typing import Any


class DevMindError(Exception):
    """Base exception for all DevMind errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# Configuration Errors
class ConfigError(DevMindError):
    """Raised when configuration is invalid or missing."""

    pass


# Snippet Store Errors
class StoreError(DevMindError):
    """Base exception for snippet store errors."""

    pass


class LoadError(StoreError):
    """Raised when the snippet file cannot be read or parsed."""

    pass


class SaveError(StoreError):
    """Raised when the snippet file cannot be written."""

    pass


class ValidationError(StoreError):
    """Raised when a required snippet field is empty."""

    def __init__(self, message: str, field: str):
        super().__init__(message, {"field": field})
        self.field = field


# AI Provider Errors
class AIError(DevMindError):
    """Base exception for AI provider errors."""

    pass


class NetworkError(AIError):
    """Raised when the request never reached the provider or timed out."""

    pass


class UpstreamError(AIError):
    """Raised when the provider answers with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message, {"status_code": status_code})
        self.status_code = status_code


class MalformedResponseError(AIError):
    """Raised when the provider reply has no usable choice or content."""

    pass


# State Errors
class StateTransitionError(DevMindError):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, message: str, from_state: str, to_state: str):
        super().__init__(message, {"from_state": from_state, "to_state": to_state})
        self.from_state = from_state
        self.to_state = to_state
