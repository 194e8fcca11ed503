"""
Where DevMind's two JSONL logs go and how big they may grow.

ai.jsonl records every explain/refactor request sent to the provider;
store.jsonl records loads, mutations and failed writes of the snippet
file. Both live in one directory, ~/.devmind/logs unless DEVMIND_LOG_DIR
says otherwise.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

AI_LOG_NAME = "ai.jsonl"
STORE_LOG_NAME = "store.jsonl"


@dataclass
class LogConfig:
    """Settings shared by the AI and snippet-store JSONL logs."""

    log_dir: Path = field(default_factory=lambda: Path.home() / ".devmind" / "logs")

    # Rotation: one live file plus backup_count rotated copies per log
    max_file_size_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5

    ai_level: str = "INFO"
    store_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "LogConfig":
        """
        Build settings from DEVMIND_LOG_DIR, DEVMIND_LOG_LEVEL and
        DEVMIND_LOG_MAX_SIZE_MB. An unparseable size keeps the default.
        """
        config = cls()

        if log_dir := os.environ.get("DEVMIND_LOG_DIR"):
            config.log_dir = Path(log_dir)

        # One level for both logs
        if level := os.environ.get("DEVMIND_LOG_LEVEL"):
            config.ai_level = config.store_level = level

        if max_size := os.environ.get("DEVMIND_LOG_MAX_SIZE_MB"):
            try:
                config.max_file_size_bytes = int(max_size) * 1024 * 1024
            except ValueError:
                pass

        return config

    @property
    def ai_log_path(self) -> Path:
        return self.log_dir / AI_LOG_NAME

    @property
    def store_log_path(self) -> Path:
        return self.log_dir / STORE_LOG_NAME


_config: LogConfig | None = None


def get_config() -> LogConfig:
    """Current log settings, read from the environment on first use."""
    global _config
    if _config is None:
        set_config(LogConfig.from_env())
    return _config


def set_config(config: LogConfig) -> None:
    """Replace the log settings; call reset_loggers() for open loggers to follow."""
    global _config
    config.log_dir.mkdir(parents=True, exist_ok=True)
    _config = config
