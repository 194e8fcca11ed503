"""
DevMind - Session

Glue between the snippet store, search, the AI client and the patch
engine. One Session owns one SessionContext; front ends call these
methods and read context.current_status() for the status line.

Errors from file I/O and the AI provider never escape: they become the
status line or, for AI actions, the response text of the exchange.
"""

import logging

from devmind.ai.client import MODES, AIClient
from devmind.config import DevMindConfig
from devmind.editor.document import EditorBuffer
from devmind.editor.patches import PatchResult, apply_patch, capture_from_editor
from devmind.exceptions import AIError, SaveError, ValidationError
from devmind.state import AIExchange, AIStatus, SessionContext
from devmind.store.models import DEFAULT_LANGUAGE, Snippet
from devmind.store.repository import SnippetStore
from devmind.store.search import filter_snippets

logger = logging.getLogger(__name__)


class Session:
    """
    Snippet editing session with AI explain/refactor.

    The editor's text is the code field of the snippet form.
    """

    def __init__(
        self,
        store: SnippetStore,
        editor: EditorBuffer,
        ai_client: AIClient | None = None,
        config: DevMindConfig | None = None,
    ):
        self.store = store
        self.editor = editor
        self.ai_client = ai_client
        self.config = config or DevMindConfig()
        self.context = SessionContext()
        self.language = DEFAULT_LANGUAGE

    def start(self) -> str:
        """Load the store and show how it went."""
        status = self.store.load()
        self.context.set_status(status)
        return status

    # =========================================================================
    # SNIPPETS
    # =========================================================================

    def visible_snippets(self, query: str = "") -> list[Snippet]:
        """Snippets matching the search box, newest first."""
        return filter_snippets(self.store.snippets, query, search_code=self.config.search_code)

    def start_editing(self, snippet_id: int) -> Snippet | None:
        """Load a snippet into the form and editor for editing."""
        snippet = self.store.get(snippet_id)
        if snippet is None:
            self.context.set_status("Snippet not found", transient=True)
            return None
        self.context.editing_id = snippet.id
        self.language = snippet.language
        self.editor.replace_all(snippet.code)
        return snippet

    def cancel_editing(self) -> None:
        self.context.editing_id = None

    def save_snippet(
        self,
        title: str,
        code: str | None = None,
        language: str | None = None,
        tags_input: str = "",
    ) -> bool:
        """
        Create a snippet, or update the one being edited.

        Args:
            title: Snippet title
            code: Code body (default: the editor's text)
            language: Language tag (default: the session language)
            tags_input: Comma-separated tags

        Returns:
            True if the snippet was accepted; the form is kept on False
        """
        if code is None:
            code = self.editor.get_full_text()
        if language is None:
            language = self.language

        if self.context.editing_id is not None and self.store.get(self.context.editing_id) is None:
            # Deleted while being edited; the form is kept and a new save creates it
            logger.info(f"Snippet {self.context.editing_id} vanished while being edited")
            self.context.editing_id = None
            self.context.set_status("Snippet not found", transient=True)
            return False

        try:
            if self.context.editing_id is not None:
                self.store.update(self.context.editing_id, title, code, language, tags_input)
            else:
                self.store.create(title, code, language, tags_input)
        except ValidationError as e:
            self.context.set_status(self._validation_message(e), transient=True)
            return False

        if isinstance(self.store.last_error, SaveError):
            self.context.set_status("Failed to save data")
        else:
            self.context.set_status("Saved!", transient=True)

        self.context.editing_id = None
        self.editor.replace_all("")
        return True

    def delete_snippet(self, snippet_id: int) -> None:
        self.store.delete(snippet_id)
        if self.context.editing_id == snippet_id:
            self.context.editing_id = None
        if isinstance(self.store.last_error, SaveError):
            self.context.set_status("Failed to save data")
        else:
            self.context.set_status("Deleted", transient=True)

    def _validation_message(self, error: ValidationError) -> str:
        if self.store.require_non_empty_code:
            return "Title & Code cannot be empty!"
        return f"{error.message}!"

    # =========================================================================
    # AI EXCHANGE
    # =========================================================================

    @property
    def exchange(self) -> AIExchange | None:
        return self.context.exchange

    async def request_ai(self, mode: str, language: str | None = None) -> AIExchange | None:
        """
        Run an explain/refactor action on the editor's selection or document.

        The scope is captured before the request is sent. A new action while
        one is in flight is rejected.

        Args:
            mode: "explain" or "refactor"
            language: Language hint (default: the session language)

        Returns:
            The completed exchange, or None if the action was rejected
        """
        if mode not in MODES:
            raise ValueError(f"Unknown AI mode '{mode}'")

        if not self.context.can_transition_to(AIStatus.IN_FLIGHT):
            logger.info("AI action rejected, another request is in flight")
            self.context.set_status("AI is still working on the previous request", transient=True)
            return None

        if self.ai_client is None:
            self.context.set_status("AI is not configured (set DEVMIND_API_KEY)", transient=True)
            return None

        scope = capture_from_editor(self.editor)
        if not scope.text.strip():
            self.context.set_status("Nothing to send, the editor is empty", transient=True)
            return None

        language = language or self.language
        exchange = AIExchange(mode=mode, scope=scope, request_text=scope.text, language=language)

        # Replaces any previous exchange
        self.context.require_transition(AIStatus.IN_FLIGHT)
        self.context.exchange = exchange
        self.context.set_status(f"AI: {mode} ({scope.scope})...")

        try:
            result = await self.ai_client.ask(mode, scope.text, language, scope=scope.scope)
        except AIError as e:
            exchange.response_text = f"Error: {e.message}"
            exchange.is_error = True
            self.context.set_status("AI request failed", transient=True)
        else:
            exchange.response_text = result.content
            exchange.extracted_code = result.extracted_code
            if mode == "refactor" and result.extracted_code is None:
                self.context.set_status("No code block in AI reply", transient=True)
            else:
                self.context.set_status("AI response ready", transient=True)
        finally:
            # Unexpected errors and cancellation propagate, but never leave the exchange in flight
            if exchange.in_flight:
                exchange.response_text = "Error: AI request did not complete"
                exchange.is_error = True
                self.context.set_status("AI request failed", transient=True)
            self.context.require_transition(AIStatus.RESPONSE_READY)

        return exchange

    def apply_fix(self) -> PatchResult:
        """Apply the extracted code to the scope captured at request time."""
        exchange = self.context.exchange
        if exchange is None or exchange.extracted_code is None or self.context.ai_in_flight:
            return PatchResult(applied=False)

        result = apply_patch(self.editor, exchange.extracted_code, exchange.scope)
        self.context.clear_exchange()
        if result.stale:
            self.context.set_status("Selection changed, replaced whole document", transient=True)
        else:
            self.context.set_status("Fix applied", transient=True)
        return result

    def dismiss(self) -> None:
        """Throw away the AI reply without touching the document."""
        if self.context.ai_in_flight:
            return
        self.context.clear_exchange()
