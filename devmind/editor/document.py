"""
Editor collaborator interface and a plain-text implementation.

The patch engine only talks to editors through EditorBuffer. TextDocument
is the in-memory buffer used by the CLI and tests; a GUI widget would
implement the same five methods.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass(frozen=True)
class TextRange:
    """Half-open character range [start, end) in a document."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid range [{self.start}, {self.end})")

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def __len__(self) -> int:
        return self.end - self.start


class EditorBuffer(Protocol):
    """What the patch engine needs from an editor."""

    def get_full_text(self) -> str:
        ...

    def get_selection_range(self) -> TextRange | None:
        ...

    def get_text_in_range(self, text_range: TextRange) -> str:
        ...

    def replace_range(self, text_range: TextRange, text: str) -> None:
        ...

    def replace_all(self, text: str) -> None:
        ...


class TextDocument:
    """
    In-memory text buffer with a single selection and a cursor.

    Range replacements are forced-move edits: the cursor ends up after
    the inserted text and the selection is cleared.
    """

    def __init__(self, text: str = "", path: Path | None = None):
        self.text = text
        self.path = path
        self.cursor = 0
        self._selection: TextRange | None = None

    @classmethod
    def from_file(cls, path: Path) -> "TextDocument":
        return cls(path.read_text(encoding="utf-8"), path=path)

    def save(self) -> None:
        if self.path is None:
            raise ValueError("Document has no path")
        self.path.write_text(self.text, encoding="utf-8")

    def select(self, start: int, end: int) -> None:
        """Select [start, end), clamped to the document."""
        length = len(self.text)
        start = max(0, min(start, length))
        end = max(0, min(end, length))
        if end < start:
            start, end = end, start
        self._selection = TextRange(start, end)
        self.cursor = end

    def get_full_text(self) -> str:
        return self.text

    def get_selection_range(self) -> TextRange | None:
        return self._selection

    def get_text_in_range(self, text_range: TextRange) -> str:
        return self.text[text_range.start:text_range.end]

    def replace_range(self, text_range: TextRange, text: str) -> None:
        if text_range.end > len(self.text):
            raise ValueError(f"Range end {text_range.end} beyond document length {len(self.text)}")
        self.text = self.text[:text_range.start] + text + self.text[text_range.end:]
        self.cursor = text_range.start + len(text)
        self._selection = None

    def replace_all(self, text: str) -> None:
        self.text = text
        self.cursor = len(text)
        self._selection = None
