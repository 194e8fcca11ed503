"""Allow running DevMind with ``python -m devmind``."""

from devmind.cli import run

run()
