"""
DevMind - Snippet Models

The Snippet entity, tag parsing and the per-record migration applied
when an older snippet file is loaded.
"""

from dataclasses import dataclass, field
from typing import Any

from devmind.exceptions import LoadError

# Languages offered by the editor's picker: (tag, display name)
LANGUAGES: list[tuple[str, str]] = [
    ("javascript", "JavaScript"),
    ("typescript", "TypeScript"),
    ("tsx", "React (TSX)"),
    ("css", "CSS / Tailwind"),
    ("python", "Python"),
    ("sql", "SQL"),
    ("bash", "Terminal / Bash"),
]

DEFAULT_LANGUAGE = "javascript"

# Optional on disk, but must be strings when present
_TEXT_FIELDS = ("title", "code", "language")

_SUFFIX_LANGUAGES = {
    ".js": "javascript",
    ".mjs": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "tsx",
    ".css": "css",
    ".py": "python",
    ".sql": "sql",
    ".sh": "bash",
    ".bash": "bash",
}


def guess_language(filename: str) -> str:
    """Language tag for a file name, by suffix."""
    suffix = filename[filename.rfind("."):].lower() if "." in filename else ""
    return _SUFFIX_LANGUAGES.get(suffix, DEFAULT_LANGUAGE)


def parse_tags(tags_input: str) -> list[str]:
    """
    Split comma-separated tag input into a tag list.

    Segments are trimmed and empty ones dropped. Duplicates are kept
    and order of appearance is preserved.
    """
    if not tags_input:
        return []
    return [tag.strip() for tag in tags_input.split(",") if tag.strip()]


@dataclass
class Snippet:
    """A stored unit of code with title, language tag and free-form tags."""

    id: int
    title: str
    code: str
    language: str = DEFAULT_LANGUAGE
    tags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "code": self.code,
            "language": self.language,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Snippet":
        """Create Snippet from an already migrated dictionary."""
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            code=data.get("code", ""),
            language=data.get("language") or DEFAULT_LANGUAGE,
            tags=list(data.get("tags", [])),
        )

    @property
    def tags_text(self) -> str:
        """Tags joined back into the comma-separated form used for editing."""
        return ", ".join(self.tags)


def migrate_record(record: Any) -> tuple[dict[str, Any], bool]:
    """
    Repair one loaded record so it satisfies the current Snippet shape.

    Records written before tags existed have no "tags" key; those, and
    records whose tags are not a list, get an empty list. Tag entries
    that are not strings or are blank are dropped, the rest trimmed.

    Args:
        record: One element of the loaded JSON array

    Returns:
        Tuple of (migrated record, whether anything was changed)

    Raises:
        LoadError: If the record cannot be a snippet at all
    """
    if not isinstance(record, dict):
        raise LoadError(
            "Snippet record is not an object",
            {"type": type(record).__name__},
        )

    snippet_id = record.get("id")
    # bool is an int subclass but never a valid id
    if not isinstance(snippet_id, int) or isinstance(snippet_id, bool):
        raise LoadError("Snippet record has no integer id", {"id": repr(snippet_id)})

    for key in _TEXT_FIELDS:
        if key in record and not isinstance(record[key], str):
            raise LoadError(
                f"Snippet field '{key}' is not a string",
                {"id": snippet_id, "type": type(record[key]).__name__},
            )

    migrated = dict(record)
    tags = migrated.get("tags")
    if isinstance(tags, list):
        cleaned = [t.strip() for t in tags if isinstance(t, str) and t.strip()]
    else:
        cleaned = []
    changed = cleaned != tags
    migrated["tags"] = cleaned

    return migrated, changed
