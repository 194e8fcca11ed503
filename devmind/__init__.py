"""
DevMind - personal code-snippet manager with AI explain/refactor.

Snippets live in one JSON file; AI replies are applied back to the
selection or document they were requested for.
"""

__version__ = "0.6.0"

from devmind.exceptions import (
    AIError,
    ConfigError,
    DevMindError,
    LoadError,
    SaveError,
    StoreError,
    ValidationError,
)

__all__ = [
    "__version__",
    "DevMindError",
    "ConfigError",
    "StoreError",
    "LoadError",
    "SaveError",
    "ValidationError",
    "AIError",
]
