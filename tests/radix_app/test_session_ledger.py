"""Tests for the session ledger and session registry."""

from datetime import date
from unittest.mock import Mock

import pytest

from radix_app.services.converter_service import ConversionErrorKind
from radix_app.services.history_store import HistoryStore
from radix_app.services.session_ledger import (
    SessionLedger,
    SessionNotFoundError,
    SessionRegistry,
)


class TestSessionLedger:
    """Test cases for SessionLedger."""

    @pytest.fixture
    def ledger(self):
        """Create an empty ledger."""
        return SessionLedger("user-1")

    def test_new_ledger_is_empty(self, ledger):
        """Test a new session starts with no records and no undos."""
        assert ledger.records == ()
        assert ledger.undo_count == 0
        assert len(ledger) == 0

    def test_record_success(self, ledger):
        """Test a successful conversion is appended with its result."""
        record = ledger.record("ff", 16, 2)

        assert record.result == "11111111"
        assert record.error_message == ""
        assert record.error_kind is None
        assert ledger.records == (record,)

    def test_record_failure(self, ledger):
        """Test a failed conversion is appended with its error."""
        record = ledger.record("g", 16, 10)

        assert record.result == ""
        assert record.error_message
        assert record.error_kind == ConversionErrorKind.INVALID_DIGIT
        assert len(ledger) == 1

    def test_records_keep_insertion_order(self, ledger):
        """Test records are returned in the order they were made."""
        ledger.record("1", 10, 2)
        ledger.record("2", 10, 2)
        ledger.record("3", 10, 2)

        assert [record.input_value for record in ledger.records] == ["1", "2", "3"]

    def test_records_returns_copy(self, ledger):
        """Test callers cannot mutate the ledger through its records."""
        ledger.record("1", 10, 2)
        records = ledger.records

        assert isinstance(records, tuple)
        ledger.record("2", 10, 2)
        assert len(records) == 1

    def test_record_uses_session_precision(self):
        """Test the session precision bounds fractional digits."""
        ledger = SessionLedger("user-1", precision=2)
        assert ledger.record("0.1", 3, 10).result == "0.33"
        assert ledger.record("0.1", 3, 10, precision=4).result == "0.3333"

    def test_undo_after_three_records(self, ledger):
        """Test undoing once leaves two records and one undo."""
        ledger.record("1", 10, 2)
        ledger.record("2", 10, 2)
        ledger.record("3", 10, 2)

        assert ledger.undo_last() is True
        assert len(ledger) == 2
        assert ledger.undo_count == 1
        assert [record.input_value for record in ledger.records] == ["1", "2"]

    def test_undo_on_empty_ledger(self, ledger):
        """Test undo on an empty session is a no-op."""
        assert ledger.undo_last() is False
        assert ledger.undo_count == 0

    def test_undo_until_empty(self, ledger):
        """Test undo count only grows for successful undos."""
        ledger.record("1", 10, 2)

        assert ledger.undo_last() is True
        assert ledger.undo_last() is False
        assert ledger.undo_count == 1

    def test_flush_to_history(self, ledger):
        """Test flushing hands records to the store and clears the session."""
        history_store = Mock(spec=HistoryStore)
        history_store.append.return_value = 2
        first = ledger.record("1", 10, 2)
        second = ledger.record("2", 10, 2)
        ledger.record("3", 10, 2)
        ledger.undo_last()

        flushed = ledger.flush_to_history(history_store, date(2025, 8, 26))

        assert flushed == 2
        history_store.append.assert_called_once_with(
            "user-1", date(2025, 8, 26), (first, second), session_id=ledger.session_id
        )
        assert ledger.records == ()
        assert ledger.undo_count == 1


class TestSessionRegistry:
    """Test cases for SessionRegistry."""

    @pytest.fixture
    def registry(self):
        """Create an empty registry."""
        return SessionRegistry(precision=3)

    def test_start_session(self, registry):
        """Test starting a session creates an independent ledger."""
        first = registry.start_session("user-1")
        second = registry.start_session("user-1")

        assert first.session_id != second.session_id
        assert first.precision == 3
        assert registry.active_session_count() == 2

        first.record("1", 10, 2)
        assert len(second) == 0

    def test_get_session(self, registry):
        """Test a session is found by its owner."""
        ledger = registry.start_session("user-1")
        assert registry.get_session(ledger.session_id, "user-1") is ledger

    def test_get_session_other_user(self, registry):
        """Test a session is hidden from other users."""
        ledger = registry.start_session("user-1")
        with pytest.raises(SessionNotFoundError):
            registry.get_session(ledger.session_id, "user-2")

    def test_get_unknown_session(self, registry):
        """Test an unknown session id is not found."""
        other = SessionLedger("user-1")
        with pytest.raises(SessionNotFoundError):
            registry.get_session(other.session_id, "user-1")

    def test_end_session(self, registry):
        """Test ending a session flushes it and removes it from the registry."""
        history_store = Mock(spec=HistoryStore)
        history_store.append.return_value = 1
        ledger = registry.start_session("user-1")
        ledger.record("1", 10, 2)

        ended, flushed = registry.end_session(
            ledger.session_id, "user-1", history_store, date(2025, 8, 26)
        )

        assert ended is ledger
        assert flushed == 1
        history_store.append.assert_called_once()
        assert registry.active_session_count() == 0
        with pytest.raises(SessionNotFoundError):
            registry.get_session(ledger.session_id, "user-1")

    def test_end_session_other_user(self, registry):
        """Test a user cannot end another user's session."""
        history_store = Mock(spec=HistoryStore)
        ledger = registry.start_session("user-1")

        with pytest.raises(SessionNotFoundError):
            registry.end_session(ledger.session_id, "user-2", history_store, date(2025, 8, 26))

        history_store.append.assert_not_called()
        assert registry.active_session_count() == 1
