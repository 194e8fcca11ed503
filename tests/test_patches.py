"""Tests for scope capture and patch application."""

import pytest

from devmind.editor.document import TextDocument, TextRange
from devmind.editor.patches import (
    SCOPE_DOCUMENT,
    SCOPE_SELECTION,
    apply_patch,
    capture_from_editor,
    capture_scope,
    is_range_valid,
)

DOC = "0123456789ABCDEFGHIJKLMNOP"


class TestTextRange:
    """Tests for TextRange."""

    def test_invalid_ranges(self):
        """Negative or reversed ranges are rejected."""
        with pytest.raises(ValueError):
            TextRange(-1, 2)
        with pytest.raises(ValueError):
            TextRange(5, 2)

    def test_length(self):
        assert len(TextRange(10, 20)) == 10
        assert TextRange(3, 3).is_empty


class TestTextDocument:
    """Tests for the in-memory editor."""

    def test_select_clamps(self):
        """Selections are clamped and ordered."""
        doc = TextDocument("abc")
        doc.select(10, -5)
        assert doc.get_selection_range() == TextRange(0, 3)

    def test_replace_range_moves_cursor(self):
        """Range replacement is a forced-move edit."""
        doc = TextDocument("hello world")
        doc.select(0, 5)
        doc.replace_range(TextRange(0, 5), "goodbye")
        assert doc.text == "goodbye world"
        assert doc.cursor == 7
        assert doc.get_selection_range() is None

    def test_replace_range_out_of_bounds(self):
        with pytest.raises(ValueError):
            TextDocument("abc").replace_range(TextRange(1, 10), "x")

    def test_file_round_trip(self, tmp_path):
        path = tmp_path / "a.py"
        path.write_text("x = 1\n")
        doc = TextDocument.from_file(path)
        doc.replace_all("x = 2\n")
        doc.save()
        assert path.read_text() == "x = 2\n"


class TestCaptureScope:
    """Tests for capture_scope."""

    def test_selection_scope(self):
        """A non-blank selection is the scope."""
        scope = capture_scope(DOC, TextRange(10, 20), DOC[10:20])
        assert scope.scope == SCOPE_SELECTION
        assert scope.text == "ABCDEFGHIJ"
        assert scope.range == TextRange(10, 20)
        assert scope.document_length == len(DOC)

    def test_no_selection(self):
        """Without a selection the whole document is the scope."""
        scope = capture_scope(DOC)
        assert scope.scope == SCOPE_DOCUMENT
        assert scope.text == DOC
        assert scope.range is None

    def test_empty_selection(self):
        """A collapsed selection (cursor) means whole document."""
        assert capture_scope(DOC, TextRange(4, 4), "").scope == SCOPE_DOCUMENT

    def test_whitespace_selection(self):
        """A whitespace-only selection means whole document."""
        text = "a   b"
        assert capture_scope(text, TextRange(1, 4), "   ").scope == SCOPE_DOCUMENT

    def test_capture_from_editor(self):
        """The editor's selection text is read through the protocol."""
        doc = TextDocument(DOC)
        doc.select(2, 5)
        scope = capture_from_editor(doc)
        assert scope.text == "234"
        assert scope.range == TextRange(2, 5)


class TestApplyPatch:
    """Tests for apply_patch."""

    def test_replace_captured_range(self):
        """Only the captured range is replaced."""
        doc = TextDocument(DOC)
        scope = capture_scope(DOC, TextRange(10, 20), DOC[10:20])

        result = apply_patch(doc, "XY", scope)

        assert result.applied and result.target == SCOPE_SELECTION and not result.stale
        assert doc.text == "0123456789" + "XY" + "KLMNOP"
        assert doc.cursor == 12

    def test_replace_whole_document(self):
        """No range means the whole document is replaced."""
        doc = TextDocument(DOC)
        result = apply_patch(doc, "NEW", capture_scope(DOC))

        assert result.target == SCOPE_DOCUMENT
        assert doc.text == "NEW"

    def test_no_code_is_noop(self):
        """Nothing to apply leaves the document alone."""
        doc = TextDocument(DOC)
        result = apply_patch(doc, None, capture_scope(DOC, TextRange(0, 3), "012"))
        assert not result.applied
        assert doc.text == DOC

    def test_selection_used_at_capture_not_apply_time(self):
        """A selection made after capture does not change the target."""
        doc = TextDocument(DOC)
        doc.select(0, 3)
        scope = capture_from_editor(doc)
        doc.select(20, 26)

        apply_patch(doc, "abc", scope)
        assert doc.text == "abc" + DOC[3:]

    def test_stale_range_falls_back(self):
        """If the document length changed, the whole document is replaced."""
        doc = TextDocument(DOC)
        scope = capture_scope(DOC, TextRange(10, 20), DOC[10:20])
        doc.replace_all(DOC[:5])

        result = apply_patch(doc, "XY", scope)

        assert result.applied and result.stale
        assert result.target == SCOPE_DOCUMENT
        assert doc.text == "XY"

    def test_is_range_valid(self):
        scope = capture_scope(DOC, TextRange(10, 20), DOC[10:20])
        assert is_range_valid(scope, DOC)
        assert not is_range_valid(scope, DOC + "!")
        assert not is_range_valid(capture_scope(DOC), DOC)
