"""
DevMind CLI components.

- display.py: rich rendering of snippets and AI replies
- typer_commands.py: CLI entry points (list, add, edit, explain, refactor, ...)
"""

from devmind.cli.typer_commands import app, run

__all__ = ["app", "run"]
