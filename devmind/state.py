"""
DevMind - Session State Machine

Tracks the pending AI exchange, the snippet being edited and the
status line, and guards the AI status transitions so a second request
can never race a first one into the same exchange.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto

from devmind.editor.patches import CapturedScope

STATUS_READY = "Ready"
STATUS_RESET_SECONDS = 2.0


class AIStatus(Enum):
    """
    Status of the AI exchange.

    State transitions:
    IDLE -> IN_FLIGHT (AI action triggered)
    IN_FLIGHT -> RESPONSE_READY (reply or error text received)
    RESPONSE_READY -> IDLE (applied or dismissed)
    RESPONSE_READY -> IN_FLIGHT (new action replaces the exchange)
    """

    IDLE = auto()  # No exchange
    IN_FLIGHT = auto()  # Waiting for the provider
    RESPONSE_READY = auto()  # Reply shown, may be applied or dismissed


VALID_TRANSITIONS: dict[AIStatus, set[AIStatus]] = {
    AIStatus.IDLE: {AIStatus.IN_FLIGHT},
    AIStatus.IN_FLIGHT: {AIStatus.RESPONSE_READY},
    AIStatus.RESPONSE_READY: {AIStatus.IDLE, AIStatus.IN_FLIGHT},
}


@dataclass
class AIExchange:
    """One explain/refactor round trip."""

    mode: str
    scope: CapturedScope
    request_text: str
    language: str = ""
    response_text: str | None = None
    extracted_code: str | None = None
    is_error: bool = False
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def in_flight(self) -> bool:
        return self.response_text is None


@dataclass
class SessionContext:
    """
    State maintained throughout an editing session.

    Owns the pending AI exchange; nothing else mutates it.
    """

    ai_status: AIStatus = AIStatus.IDLE
    exchange: AIExchange | None = None

    # Snippet being edited in the form, None when creating
    editing_id: int | None = None

    # Status line
    status_message: str = STATUS_READY
    status_expires_at: float | None = None

    last_activity: datetime = field(default_factory=datetime.now)

    def transition_to(self, new_status: AIStatus) -> bool:
        """
        Attempt to transition to a new AI status.

        Returns:
            True if transition was valid and performed, False otherwise
        """
        if new_status in VALID_TRANSITIONS.get(self.ai_status, set()):
            self.ai_status = new_status
            self.last_activity = datetime.now()
            return True
        return False

    def require_transition(self, new_status: AIStatus) -> None:
        """
        Transition to a new AI status, raising if it is not allowed.

        Raises:
            StateTransitionError: If the transition is not valid
        """
        from devmind.exceptions import StateTransitionError

        if not self.transition_to(new_status):
            valid_targets = VALID_TRANSITIONS.get(self.ai_status, set())
            valid_names = ", ".join(s.name for s in valid_targets) or "none"
            raise StateTransitionError(
                f"Invalid AI status transition: {self.ai_status.name} -> {new_status.name}. "
                f"Valid transitions from {self.ai_status.name}: {valid_names}",
                from_state=self.ai_status.name,
                to_state=new_status.name,
            )

    def can_transition_to(self, new_status: AIStatus) -> bool:
        """Check if transition to new_status is valid from the current status."""
        return new_status in VALID_TRANSITIONS.get(self.ai_status, set())

    @property
    def ai_in_flight(self) -> bool:
        return self.ai_status == AIStatus.IN_FLIGHT

    def clear_exchange(self) -> None:
        """Drop the pending exchange and return to IDLE."""
        self.exchange = None
        if self.ai_status == AIStatus.RESPONSE_READY:
            self.require_transition(AIStatus.IDLE)

    def set_status(self, message: str, transient: bool = False, now: float | None = None) -> None:
        """
        Set the status line.

        Transient messages fall back to "Ready" after STATUS_RESET_SECONDS.
        """
        self.status_message = message
        if transient:
            self.status_expires_at = (now if now is not None else time.monotonic()) + STATUS_RESET_SECONDS
        else:
            self.status_expires_at = None
        self.last_activity = datetime.now()

    def current_status(self, now: float | None = None) -> str:
        """Status line text, with expired transient messages reset."""
        if self.status_expires_at is not None:
            if (now if now is not None else time.monotonic()) >= self.status_expires_at:
                self.status_message = STATUS_READY
                self.status_expires_at = None
        return self.status_message
