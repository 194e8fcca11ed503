"""Editor interface and patch application for AI suggestions."""

from devmind.editor.document import EditorBuffer, TextDocument, TextRange
from devmind.editor.patches import (
    SCOPE_DOCUMENT,
    SCOPE_SELECTION,
    CapturedScope,
    PatchResult,
    apply_patch,
    capture_from_editor,
    capture_scope,
)

__all__ = [
    "EditorBuffer",
    "TextDocument",
    "TextRange",
    "SCOPE_DOCUMENT",
    "SCOPE_SELECTION",
    "CapturedScope",
    "PatchResult",
    "apply_patch",
    "capture_from_editor",
    "capture_scope",
]
