"""
Handlers behind DevMind's logs.

The structured AI and store entries go to size-rotated JSONL files;
ordinary module logging (devmind.session, devmind.store, ...) goes to
the terminal through rich when the CLI runs.
"""

import json
import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler


class JSONLRotatingHandler(RotatingFileHandler):
    """
    Size-rotated file of one JSON object per line.

    A message that is itself a JSON object (an entry's .to_json()) is
    stamped with level and logger name; any other message becomes
    {"timestamp", "message"} so every line stays parseable.
    """

    def __init__(
        self,
        filename: str | Path,
        max_bytes: int = 10_000_000,
        backup_count: int = 5,
    ):
        filepath = Path(filename)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        super().__init__(
            str(filepath),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = record.getMessage()
            try:
                data = json.loads(msg)
            except json.JSONDecodeError:
                data = None

            if not isinstance(data, dict):
                data = {
                    "timestamp": datetime.fromtimestamp(record.created).isoformat(),
                    "message": msg,
                }
            data.setdefault("level", record.levelname)
            data.setdefault("logger", record.name)

            if self.shouldRollover(record):
                self.doRollover()
            if self.stream is None:
                self.stream = self._open()
            self.stream.write(json.dumps(data, default=str) + "\n")
            self.flush()

        except Exception:
            self.handleError(record)


def create_jsonl_logger(
    name: str,
    filepath: Path,
    level: str = "INFO",
    max_bytes: int = 10_000_000,
    backup_count: int = 5,
) -> logging.Logger:
    """
    Bind the named logger to a single JSONL file.

    Calling it again for the same name swaps the file handler instead of
    stacking a second one, so tests and reset_loggers() can re-point it.
    The logger does not propagate: JSONL entries never reach the console.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    logger.addHandler(JSONLRotatingHandler(filepath, max_bytes=max_bytes, backup_count=backup_count))
    return logger


def setup_console_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Route devmind.* module loggers to the terminal through rich."""
    root = logging.getLogger("devmind")
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)

    for handler in list(root.handlers):
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=verbose,
        markup=False,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
