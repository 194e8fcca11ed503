"""Tests for exception hierarchy."""

import pytest

from devmind.exceptions import (
    AIError,
    ConfigError,
    DevMindError,
    LoadError,
    MalformedResponseError,
    NetworkError,
    SaveError,
    StateTransitionError,
    StoreError,
    UpstreamError,
    ValidationError,
)


class TestDevMindError:
    """Tests for base DevMindError."""

    def test_basic_error(self):
        """Test basic error creation."""
        err = DevMindError("Something went wrong")
        assert err.message == "Something went wrong"
        assert err.details == {}
        assert str(err) == "Something went wrong"

    def test_error_with_details(self):
        """Test error with details dict."""
        err = DevMindError("Error occurred", {"path": "/tmp/x.json"})
        assert err.details == {"path": "/tmp/x.json"}
        assert "path" in str(err)
        assert "/tmp/x.json" in str(err)


class TestStoreErrors:
    """Tests for snippet store errors."""

    @pytest.mark.parametrize("cls", [LoadError, SaveError])
    def test_io_errors_are_store_errors(self, cls):
        """Load and save errors inherit from StoreError."""
        err = cls("disk trouble")
        assert isinstance(err, StoreError)
        assert isinstance(err, DevMindError)

    def test_validation_error_field(self):
        """ValidationError records which field failed."""
        err = ValidationError("Title cannot be empty", field="title")
        assert isinstance(err, StoreError)
        assert err.field == "title"
        assert err.details["field"] == "title"


class TestAIErrors:
    """Tests for AI provider errors."""

    @pytest.mark.parametrize("cls", [NetworkError, MalformedResponseError])
    def test_ai_errors(self, cls):
        """AI errors inherit from AIError."""
        err = cls("failed")
        assert isinstance(err, AIError)
        assert isinstance(err, DevMindError)

    def test_upstream_error_status(self):
        """UpstreamError carries the HTTP status."""
        err = UpstreamError("Invalid API key", status_code=401)
        assert isinstance(err, AIError)
        assert err.status_code == 401
        assert err.details["status_code"] == 401

    def test_config_error(self):
        """ConfigError is a DevMindError but not an AIError."""
        err = ConfigError("No key")
        assert isinstance(err, DevMindError)
        assert not isinstance(err, AIError)


class TestStateTransitionError:
    """Tests for StateTransitionError."""

    def test_states_recorded(self):
        """Both states are kept on the error."""
        err = StateTransitionError("bad", from_state="IDLE", to_state="RESPONSE_READY")
        assert err.from_state == "IDLE"
        assert err.to_state == "RESPONSE_READY"
        assert err.details == {"from_state": "IDLE", "to_state": "RESPONSE_READY"}
