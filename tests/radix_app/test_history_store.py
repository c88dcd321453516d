"""Tests for the SQLAlchemy backed history store."""

from datetime import date
from unittest.mock import Mock

import pytest
from sqlalchemy import Text
from sqlalchemy.orm import Session, sessionmaker

from radix_app.database import build_engine
from radix_app.models.conversion import ConversionRecord
from radix_app.models.database import Base, ConversionHistory
from radix_app.services.converter_service import ConversionErrorKind
from radix_app.services.history_store import HistoryStore
from radix_app.services.session_ledger import SessionLedger

DAY_ONE = date(2025, 8, 26)
DAY_TWO = date(2025, 8, 27)


@pytest.fixture
def db_session():
    """Create an in-memory database session."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def history_store(db_session):
    """Create a history store on the in-memory database."""
    return HistoryStore(db_session)


@pytest.fixture
def ledger():
    """Create a ledger with one success and one failure."""
    ledger = SessionLedger("user-1")
    ledger.record("ff", 16, 2)
    ledger.record("g", 16, 10)
    return ledger


class TestHistoryStore:
    """Test cases for HistoryStore."""

    def test_append_and_read_bucket(self, history_store, ledger):
        """Test appended records come back in order with their outcomes."""
        appended = history_store.append("user-1", DAY_ONE, ledger.records)

        bucket = history_store.get_bucket("user-1", DAY_ONE)

        assert appended == 2
        assert [record.record_id for record in bucket] == [r.record_id for r in ledger.records]
        assert bucket[0].result == "11111111"
        assert bucket[1].error_kind == ConversionErrorKind.INVALID_DIGIT
        assert bucket[1].error_message == ledger.records[1].error_message

    def test_append_continues_sequence(self, history_store, db_session):
        """Test later appends to the same date go after earlier ones."""
        first = SessionLedger("user-1")
        first.record("1", 10, 2)
        second = SessionLedger("user-1")
        second.record("2", 10, 2)
        second.record("3", 10, 2)

        history_store.append("user-1", DAY_ONE, first.records, session_id=first.session_id)
        history_store.append("user-1", DAY_ONE, second.records, session_id=second.session_id)

        bucket = history_store.get_bucket("user-1", DAY_ONE)
        assert [record.input_value for record in bucket] == ["1", "2", "3"]

        sequences = [
            row.sequence
            for row in db_session.query(ConversionHistory).order_by(ConversionHistory.sequence)
        ]
        assert sequences == [0, 1, 2]

    def test_history_grouped_by_date(self, history_store, ledger):
        """Test history is grouped by date, oldest first."""
        history_store.append("user-1", DAY_TWO, ledger.records[:1])
        history_store.append("user-1", DAY_ONE, ledger.records[1:])

        history = history_store.get_history("user-1")

        assert list(history) == [DAY_ONE, DAY_TWO]
        assert len(history[DAY_ONE]) == 1
        assert len(history[DAY_TWO]) == 1

    def test_history_date_range(self, history_store, ledger):
        """Test start and end dates filter the buckets."""
        history_store.append("user-1", DAY_ONE, ledger.records[:1])
        history_store.append("user-1", DAY_TWO, ledger.records[1:])

        assert list(history_store.get_history("user-1", start_date=DAY_TWO)) == [DAY_TWO]
        assert list(history_store.get_history("user-1", end_date=DAY_ONE)) == [DAY_ONE]

    def test_users_are_isolated(self, history_store, ledger):
        """Test one user's history is not visible to another."""
        history_store.append("user-1", DAY_ONE, ledger.records)

        assert history_store.get_history("user-2") == {}
        assert history_store.get_bucket("user-2", DAY_ONE) == []

    def test_append_nothing(self, history_store):
        """Test appending no records writes nothing."""
        assert history_store.append("user-1", DAY_ONE, []) == 0
        assert history_store.get_history("user-1") == {}

    def test_flush_from_ledger(self, history_store, ledger):
        """Test a ledger flush lands in the store."""
        ledger.flush_to_history(history_store, DAY_ONE)

        assert len(history_store.get_bucket("user-1", DAY_ONE)) == 2
        assert ledger.records == ()

    def test_append_failure_rolls_back(self):
        """Test a failed commit is rolled back and re-raised."""
        db_session = Mock(spec=Session)
        db_session.query.return_value.filter.return_value.scalar.return_value = None
        db_session.commit.side_effect = RuntimeError("disk full")
        store = HistoryStore(db_session)
        record = ConversionRecord(input_value="1", source_base=10, target_base=2, result="1")

        with pytest.raises(RuntimeError):
            store.append("user-1", DAY_ONE, [record])

        db_session.rollback.assert_called_once()

    def test_flush_unsupported_bases(self, history_store):
        """Test attempts with unsupported bases are archived like other failures."""
        ledger = SessionLedger("user-1")
        ledger.record("1", 37, 10)
        ledger.record("1", 10, 2**31 - 1)
        ledger.record("1", -(2**31), 10)

        flushed = ledger.flush_to_history(history_store, DAY_ONE)

        bucket = history_store.get_bucket("user-1", DAY_ONE)
        assert flushed == 3
        assert ledger.records == ()
        assert [record.target_base for record in bucket] == [10, 2**31 - 1, 10]
        assert all(r.error_kind == ConversionErrorKind.BASE_OUT_OF_RANGE for r in bucket)

    def test_unstorable_base_is_not_recorded(self, history_store):
        """Test a base outside the stored range is refused and the session still flushes."""
        ledger = SessionLedger("user-1")
        ledger.record("1", 2, 10)

        with pytest.raises(ValueError):
            ledger.record("1", 10**20, 10)

        assert len(ledger) == 1
        assert ledger.flush_to_history(history_store, DAY_ONE) == 1
        assert ledger.records == ()

    def test_longest_result_round_trips(self, history_store):
        """Test a maximum length base 36 numeral converted to base 2 is stored whole."""
        ledger = SessionLedger("user-1")
        record = ledger.record("z" * 100, 36, 2)
        assert len(record.result) > 512

        ledger.flush_to_history(history_store, DAY_ONE)

        stored = history_store.get_bucket("user-1", DAY_ONE)[0]
        assert stored.result == record.result
        assert stored.input_value == "z" * 100

    def test_numeral_columns_are_unbounded(self):
        """Test numerals and messages use unbounded text columns."""
        columns = ConversionHistory.__table__.c
        for name in ("input_value", "result", "error_message"):
            assert isinstance(columns[name].type, Text)
