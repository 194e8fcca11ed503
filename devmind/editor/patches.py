"""
Scope capture and patch application for AI suggestions.

The scope is captured when an AI action starts, not when the reply
arrives. By then the user may have edited the document, so a captured
range is checked against the document length recorded at capture time;
a range that no longer fits is dropped and the whole document replaced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from devmind.editor.document import EditorBuffer, TextRange

logger = logging.getLogger(__name__)

SCOPE_SELECTION = "selection"
SCOPE_DOCUMENT = "document"


@dataclass(frozen=True)
class CapturedScope:
    """Snapshot of what an AI action targets."""

    scope: str  # SCOPE_SELECTION or SCOPE_DOCUMENT
    text: str
    range: TextRange | None = None
    document_length: int = 0


@dataclass
class PatchResult:
    """Outcome of apply_patch()."""

    applied: bool
    target: str | None = None  # SCOPE_SELECTION, SCOPE_DOCUMENT or None
    stale: bool = False  # captured range was dropped


def capture_scope(
    full_text: str,
    selection: TextRange | None = None,
    selection_text: str = "",
) -> CapturedScope:
    """
    Decide what an AI action targets.

    A non-empty selection whose text is not blank wins; otherwise the
    whole document is the target.
    """
    if selection is not None and not selection.is_empty and selection_text.strip():
        return CapturedScope(
            scope=SCOPE_SELECTION,
            text=selection_text,
            range=selection,
            document_length=len(full_text),
        )
    return CapturedScope(scope=SCOPE_DOCUMENT, text=full_text, document_length=len(full_text))


def capture_from_editor(editor: EditorBuffer) -> CapturedScope:
    """Capture the scope from an editor's current text and selection."""
    full_text = editor.get_full_text()
    selection = editor.get_selection_range()
    selection_text = editor.get_text_in_range(selection) if selection is not None else ""
    return capture_scope(full_text, selection, selection_text)


def is_range_valid(scope: CapturedScope, current_text: str) -> bool:
    """Whether a captured range can still be applied to the current document."""
    if scope.range is None:
        return False
    if len(current_text) != scope.document_length:
        return False
    return scope.range.end <= len(current_text)


def apply_patch(editor: EditorBuffer, code: str | None, scope: CapturedScope) -> PatchResult:
    """
    Apply extracted code to the editor.

    Args:
        editor: Target editor
        code: Code extracted from the AI reply (None means nothing to apply)
        scope: Scope captured when the request was made

    Returns:
        PatchResult describing what was replaced
    """
    if code is None:
        return PatchResult(applied=False)

    if scope.range is not None:
        if is_range_valid(scope, editor.get_full_text()):
            editor.replace_range(scope.range, code)
            return PatchResult(applied=True, target=SCOPE_SELECTION)

        logger.warning(
            f"Selection [{scope.range.start}, {scope.range.end}) is stale "
            f"(document changed since the request), replacing the whole document"
        )
        editor.replace_all(code)
        return PatchResult(applied=True, target=SCOPE_DOCUMENT, stale=True)

    editor.replace_all(code)
    return PatchResult(applied=True, target=SCOPE_DOCUMENT)
