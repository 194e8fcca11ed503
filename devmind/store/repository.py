"""
DevMind Snippet Store - persistence and CRUD

Owns the ordered snippet list (newest first) backed by a single JSON file.
Every mutation rewrites the whole file.

Failure policy:
- load() never raises; a missing file is an empty store, a corrupt one is
  a LoadError recorded in last_error with the store left empty
- persist() never raises; a write failure is a SaveError recorded in
  last_error and the in-memory list is kept as is
- create()/update() raise ValidationError for empty required fields
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from pathlib import Path

from devmind.exceptions import LoadError, SaveError, StoreError, ValidationError
from devmind.logging import StoreLogEntry, now_iso, store_logger
from devmind.store.models import DEFAULT_LANGUAGE, Snippet, migrate_record, parse_tags

logger = logging.getLogger(__name__)

# Status messages reported back to the session
STATUS_LOADED = "Data loaded"
STATUS_NEW_FILE = "Ready (new file)"
STATUS_LOAD_FAILED = "Error loading data"


def current_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class SnippetStore:
    """
    In-memory snippet collection persisted to one JSON file.

    Usage:
        store = SnippetStore(Path("~/Documents/devmind_data.json").expanduser())
        store.load()
        store.create("Debounce", "function debounce() {}", "javascript", "utils, timing")
    """

    def __init__(
        self,
        path: Path | str,
        require_non_empty_code: bool = True,
        clock=current_millis,
    ):
        """
        Initialize the store. Nothing is read until load() is called.

        Args:
            path: Snippet file location
            require_non_empty_code: Reject saves whose code is blank
            clock: Callable returning epoch milliseconds, used for new ids
        """
        self.path = Path(path)
        self.require_non_empty_code = require_non_empty_code
        self._clock = clock
        self._snippets: list[Snippet] = []
        self.last_error: StoreError | None = None

    @property
    def snippets(self) -> list[Snippet]:
        """A copy of the current snippet list, newest first."""
        return list(self._snippets)

    def __len__(self) -> int:
        return len(self._snippets)

    def get(self, snippet_id: int) -> Snippet | None:
        """Find a snippet by id."""
        for snippet in self._snippets:
            if snippet.id == snippet_id:
                return snippet
        return None

    # =========================================================================
    # LOAD / PERSIST
    # =========================================================================

    def load(self) -> str:
        """
        Load snippets from disk, migrating older records.

        Returns:
            Status message describing the outcome
        """
        self.last_error = None

        if not self.path.exists():
            self._snippets = []
            logger.info(f"No snippet file at {self.path}, starting empty")
            return STATUS_NEW_FILE

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(raw, list):
                raise LoadError(
                    "Snippet file does not contain a list",
                    {"type": type(raw).__name__},
                )

            migrated_count = 0
            loaded: list[Snippet] = []
            for record in raw:
                migrated, changed = migrate_record(record)
                migrated_count += int(changed)
                loaded.append(Snippet.from_dict(migrated))

        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            return self._fail_load(LoadError(f"Could not read {self.path}", {"error": str(e)}))
        except LoadError as e:
            return self._fail_load(e)

        # Swap in only after every record migrated
        self._snippets = loaded

        if migrated_count:
            logger.info(f"Migrated {migrated_count} snippet record(s) to the current shape")
        store_logger.info(
            StoreLogEntry(
                timestamp=now_iso(),
                operation="load",
                snippet_count=len(loaded),
                path=str(self.path),
                migrated_records=migrated_count,
            ).to_json()
        )
        return STATUS_LOADED

    def _fail_load(self, error: LoadError) -> str:
        self._snippets = []
        self.last_error = error
        logger.error(f"Load error: {error}")
        store_logger.error(
            StoreLogEntry(
                timestamp=now_iso(),
                operation="load",
                path=str(self.path),
                error=str(error)[:500],
                error_type=type(error).__name__,
            ).to_json()
        )
        return STATUS_LOAD_FAILED

    def persist(self, snippets: list[Snippet] | None = None) -> bool:
        """
        Write the full snippet list to disk.

        The file is written to a temporary sibling and renamed over the
        original so a failed write never leaves half a file behind.

        Args:
            snippets: List to write (default: the current in-memory list)

        Returns:
            True if the write succeeded
        """
        if snippets is None:
            snippets = self._snippets
        data = [s.to_dict() for s in snippets]

        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
            tmp_name = None

        except OSError as e:
            self.last_error = SaveError(f"Could not write {self.path}", {"error": str(e)})
            logger.error(f"Save error: {self.last_error}")
            store_logger.error(
                StoreLogEntry(
                    timestamp=now_iso(),
                    operation="persist",
                    snippet_count=len(data),
                    path=str(self.path),
                    error=str(e)[:500],
                    error_type=type(e).__name__,
                ).to_json()
            )
            return False
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass

        self.last_error = None
        return True

    # =========================================================================
    # CRUD
    # =========================================================================

    def _validate(self, title: str, code: str) -> None:
        if not title.strip():
            raise ValidationError("Title cannot be empty", field="title")
        if self.require_non_empty_code and not code.strip():
            raise ValidationError("Code cannot be empty", field="code")

    def _next_id(self) -> int:
        # Two creates in the same millisecond must still get distinct ids
        candidate = self._clock()
        if self._snippets:
            candidate = max(candidate, max(s.id for s in self._snippets) + 1)
        return candidate

    def create(self, title: str, code: str, language: str, tags_input: str = "") -> list[Snippet]:
        """
        Create a snippet and put it first in the list.

        Returns:
            The updated snippet list

        Raises:
            ValidationError: If title (or code, when required) is blank
        """
        self._validate(title, code)

        snippet = Snippet(
            id=self._next_id(),
            title=title.strip(),
            code=code,
            language=language.strip() or DEFAULT_LANGUAGE,
            tags=parse_tags(tags_input),
        )
        self._snippets = [snippet] + self._snippets
        self._log_mutation("create", snippet.id)
        self.persist()
        return self.snippets

    def update(
        self,
        snippet_id: int,
        title: str,
        code: str,
        language: str,
        tags_input: str = "",
    ) -> list[Snippet]:
        """
        Replace a snippet's fields, keeping its id and position.

        An unknown id leaves the store untouched and writes nothing.

        Returns:
            The (possibly) updated snippet list

        Raises:
            ValidationError: If title (or code, when required) is blank
        """
        self._validate(title, code)

        for index, existing in enumerate(self._snippets):
            if existing.id == snippet_id:
                updated = list(self._snippets)
                updated[index] = Snippet(
                    id=existing.id,
                    title=title.strip(),
                    code=code,
                    language=language.strip() or DEFAULT_LANGUAGE,
                    tags=parse_tags(tags_input),
                )
                self._snippets = updated
                self._log_mutation("update", snippet_id)
                self.persist()
                break
        else:
            logger.debug(f"Update ignored, snippet {snippet_id} not found")

        return self.snippets

    def delete(self, snippet_id: int) -> list[Snippet]:
        """
        Remove a snippet if present and persist the result.

        Returns:
            The updated snippet list
        """
        self._snippets = [s for s in self._snippets if s.id != snippet_id]
        self._log_mutation("delete", snippet_id)
        self.persist()
        return self.snippets

    def _log_mutation(self, operation: str, snippet_id: int) -> None:
        store_logger.info(
            StoreLogEntry(
                timestamp=now_iso(),
                operation=operation,
                snippet_id=snippet_id,
                snippet_count=len(self._snippets),
                path=str(self.path),
            ).to_json()
        )
