"""
DevMind Logging System.

Provides structured JSONL logging for:
- AI provider interactions (prompts, responses, tokens, timing)
- Snippet store operations (load, mutations, persist failures)

Usage:
    from devmind.logging import ai_logger, AILogEntry, now_iso

    entry = AILogEntry(timestamp=now_iso(), request_id=str(uuid.uuid4()), mode="refactor")
    ai_logger.info(entry.to_json())

Logs are written to ~/.devmind/logs/:
    - ai.jsonl: AI provider interactions
    - store.jsonl: Snippet store operations
"""

import logging
import threading

from .config import LogConfig, get_config, set_config
from .entries import AILogEntry, StoreLogEntry, now_iso
from .handlers import create_jsonl_logger, setup_console_logging

# Lazy-initialized loggers to avoid creating files before needed
_loggers: dict[str, logging.Logger] = {}
_init_lock = threading.Lock()


def _ensure_loggers() -> None:
    """Initialize loggers on first use."""
    if _loggers:
        return

    with _init_lock:
        # Double-check after acquiring lock
        if _loggers:
            return

        config = get_config()

        _loggers["ai"] = create_jsonl_logger(
            "devmind.jsonl.ai",
            config.ai_log_path,
            level=config.ai_level,
            max_bytes=config.max_file_size_bytes,
            backup_count=config.backup_count,
        )
        _loggers["store"] = create_jsonl_logger(
            "devmind.jsonl.store",
            config.store_log_path,
            level=config.store_level,
            max_bytes=config.max_file_size_bytes,
            backup_count=config.backup_count,
        )


def reset_loggers() -> None:
    """Drop the JSONL loggers so the next use picks up the current LogConfig."""
    with _init_lock:
        for logger in _loggers.values():
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()
        _loggers.clear()


class _LazyLogger:
    """Lazy wrapper that initializes the actual logger on first use."""

    def __init__(self, name: str):
        self._name = name

    def _get_logger(self) -> logging.Logger:
        _ensure_loggers()
        return _loggers[self._name]

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._get_logger().debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._get_logger().info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._get_logger().warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        self._get_logger().error(msg, *args, **kwargs)


# Public logger instances
ai_logger = _LazyLogger("ai")
store_logger = _LazyLogger("store")


__all__ = [
    # Loggers
    "ai_logger",
    "store_logger",
    # Log entries
    "AILogEntry",
    "StoreLogEntry",
    # Utilities
    "now_iso",
    "reset_loggers",
    "setup_console_logging",
    # Config
    "LogConfig",
    "get_config",
    "set_config",
]
