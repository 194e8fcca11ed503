"""Tests for state module - AI exchange state machine and status line."""

import pytest

from devmind.editor.patches import capture_scope
from devmind.exceptions import StateTransitionError
from devmind.state import (
    STATUS_READY,
    STATUS_RESET_SECONDS,
    VALID_TRANSITIONS,
    AIExchange,
    AIStatus,
    SessionContext,
)


class TestAIStatus:
    """Tests for AIStatus enum and transitions."""

    def test_all_states_have_transitions(self):
        """Every status should have defined transitions."""
        for status in AIStatus:
            assert status in VALID_TRANSITIONS

    def test_in_flight_only_completes(self):
        """An in-flight exchange can only move to RESPONSE_READY."""
        assert VALID_TRANSITIONS[AIStatus.IN_FLIGHT] == {AIStatus.RESPONSE_READY}


class TestAIExchange:
    """Tests for AIExchange dataclass."""

    def test_defaults(self):
        """A new exchange is in flight with no reply."""
        exchange = AIExchange(mode="explain", scope=capture_scope("x"), request_text="x")
        assert exchange.in_flight
        assert exchange.extracted_code is None
        assert not exchange.is_error


class TestSessionContext:
    """Tests for SessionContext."""

    def test_initial_state(self):
        """Context starts IDLE with no exchange."""
        ctx = SessionContext()
        assert ctx.ai_status == AIStatus.IDLE
        assert ctx.exchange is None
        assert ctx.editing_id is None

    def test_round_trip(self):
        """IDLE -> IN_FLIGHT -> RESPONSE_READY -> IDLE."""
        ctx = SessionContext()
        assert ctx.transition_to(AIStatus.IN_FLIGHT)
        assert ctx.ai_in_flight
        assert ctx.transition_to(AIStatus.RESPONSE_READY)
        assert ctx.transition_to(AIStatus.IDLE)

    def test_second_request_while_in_flight(self):
        """IN_FLIGHT -> IN_FLIGHT is not allowed."""
        ctx = SessionContext()
        ctx.transition_to(AIStatus.IN_FLIGHT)
        assert not ctx.can_transition_to(AIStatus.IN_FLIGHT)
        with pytest.raises(StateTransitionError):
            ctx.require_transition(AIStatus.IN_FLIGHT)

    def test_new_request_replaces_response(self):
        """A ready response can be replaced by a new request."""
        ctx = SessionContext()
        ctx.transition_to(AIStatus.IN_FLIGHT)
        ctx.transition_to(AIStatus.RESPONSE_READY)
        assert ctx.transition_to(AIStatus.IN_FLIGHT)

    def test_require_transition_invalid(self):
        """require_transition raises with both states recorded."""
        ctx = SessionContext()
        with pytest.raises(StateTransitionError) as exc_info:
            ctx.require_transition(AIStatus.RESPONSE_READY)
        assert exc_info.value.from_state == "IDLE"
        assert exc_info.value.to_state == "RESPONSE_READY"

    def test_clear_exchange(self):
        """Clearing a ready exchange returns to IDLE."""
        ctx = SessionContext()
        ctx.transition_to(AIStatus.IN_FLIGHT)
        ctx.exchange = AIExchange(mode="explain", scope=capture_scope("x"), request_text="x")
        ctx.transition_to(AIStatus.RESPONSE_READY)

        ctx.clear_exchange()
        assert ctx.exchange is None
        assert ctx.ai_status == AIStatus.IDLE


class TestStatusLine:
    """Tests for status messages."""

    def test_persistent_status(self):
        """Non-transient messages stay."""
        ctx = SessionContext()
        ctx.set_status("Failed to save data", now=0.0)
        assert ctx.current_status(now=1000.0) == "Failed to save data"

    def test_transient_status_resets(self):
        """Transient messages fall back to Ready."""
        ctx = SessionContext()
        ctx.set_status("Saved!", transient=True, now=100.0)
        assert ctx.current_status(now=100.0 + STATUS_RESET_SECONDS / 2) == "Saved!"
        assert ctx.current_status(now=100.0 + STATUS_RESET_SECONDS) == STATUS_READY

    def test_new_status_cancels_reset(self):
        """A later persistent message is not reset."""
        ctx = SessionContext()
        ctx.set_status("Saved!", transient=True, now=0.0)
        ctx.set_status("Error loading data", now=0.5)
        assert ctx.current_status(now=60.0) == "Error loading data"
