"""
DevMind - Configuration Management

Handles loading config.json and environment variables.
Settings are stored in ~/.config/devmind/config.json
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from devmind.exceptions import ConfigError


# Configuration paths
CONFIG_DIR = Path(os.environ.get("DEVMIND_CONFIG_DIR", Path.home() / ".config" / "devmind"))
CONFIG_FILE = CONFIG_DIR / "config.json"
DEFAULT_DATA_FILE = Path.home() / "Documents" / "devmind_data.json"

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"


@dataclass
class DevMindConfig:
    """Main configuration container for DevMind."""

    data_file: str = str(DEFAULT_DATA_FILE)
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    temperature: float = 0.2
    timeout: float = 60.0  # seconds per AI request
    # Whether an empty code body is rejected on save
    require_non_empty_code: bool = True
    # Whether search also matches inside the code body
    search_code: bool = True

    def __post_init__(self) -> None:
        # Expand ~ in path
        self.data_file = str(Path(self.data_file).expanduser())

    @property
    def data_path(self) -> Path:
        """Get the snippet file as a Path object."""
        return Path(self.data_file)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        The API key is deliberately left out; it only comes from the environment.
        """
        return {
            "data_file": self.data_file,
            "base_url": self.base_url,
            "model": self.model,
            "temperature": self.temperature,
            "timeout": self.timeout,
            "require_non_empty_code": self.require_non_empty_code,
            "search_code": self.search_code,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DevMindConfig":
        """Create DevMindConfig from dictionary."""
        return cls(
            data_file=data.get("data_file", str(DEFAULT_DATA_FILE)),
            base_url=data.get("base_url", DEFAULT_BASE_URL),
            model=data.get("model", DEFAULT_MODEL),
            temperature=float(data.get("temperature", 0.2)),
            timeout=float(data.get("timeout", 60.0)),
            require_non_empty_code=_flag(data, "require_non_empty_code", True),
            search_code=_flag(data, "search_code", True),
        )


def _flag(data: dict[str, Any], key: str, default: bool) -> bool:
    """Read a boolean setting; only JSON true/false are accepted."""
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(
            f"Config value '{key}' must be true or false",
            {"value": repr(value)},
        )
    return value


def ensure_config_dir(config_file: Path = CONFIG_FILE) -> None:
    """Ensure configuration directory exists."""
    config_file.parent.mkdir(parents=True, exist_ok=True)


def load_config(config_file: Path | None = None) -> DevMindConfig:
    """
    Load configuration from file and environment.

    Environment variables win over the file.

    Args:
        config_file: Override path to config.json (default: ~/.config/devmind/config.json)

    Returns:
        DevMindConfig with all settings loaded

    Raises:
        ConfigError: If the config file is invalid
    """
    path = config_file or CONFIG_FILE
    config = DevMindConfig()

    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Invalid JSON in {path}",
                {"error": str(e)},
            )
        if not isinstance(data, dict):
            raise ConfigError(
                f"Config file {path} must contain a JSON object",
                {"type": type(data).__name__},
            )
        try:
            config = DevMindConfig.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ConfigError("Invalid value in config file", {"error": str(e)})

    if data_file := os.environ.get("DEVMIND_DATA_FILE"):
        config.data_file = str(Path(data_file).expanduser())
    if base_url := os.environ.get("DEVMIND_BASE_URL"):
        config.base_url = base_url
    if model := os.environ.get("DEVMIND_MODEL"):
        config.model = model
    config.api_key = os.environ.get("DEVMIND_API_KEY") or os.environ.get("OPENAI_API_KEY", "")

    return config


def save_config(config: DevMindConfig, config_file: Path | None = None) -> None:
    """
    Save configuration to file.

    Args:
        config: DevMindConfig to save
        config_file: Override path to config.json
    """
    path = config_file or CONFIG_FILE
    ensure_config_dir(path)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)


def get_api_key(config: DevMindConfig | None = None) -> str:
    """
    Get the AI provider API key.

    Returns:
        API key string

    Raises:
        ConfigError: If key is not set
    """
    key = config.api_key if config else ""
    key = key or os.environ.get("DEVMIND_API_KEY") or os.environ.get("OPENAI_API_KEY", "")
    if not key:
        raise ConfigError(
            "DEVMIND_API_KEY environment variable not set",
            {"hint": "Export DEVMIND_API_KEY=your-key-here (OPENAI_API_KEY also works)"},
        )
    return key
