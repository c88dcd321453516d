"""Conversion session ledger and the registry of live sessions."""

import threading
from datetime import UTC, date, datetime
from uuid import UUID

import uuid_utils.compat as uuid

from radix_app.logging_config import get_logger
from radix_app.middleware.metrics import (
    ACTIVE_SESSIONS,
    record_number_conversion,
    record_session_undo,
)
from radix_app.models.conversion import ConversionRecord
from radix_app.services.converter_service import DEFAULT_PRECISION, convert_number
from radix_app.services.history_store import HistoryStore

logger = get_logger(__name__)


class SessionNotFoundError(Exception):
    """Raised when a session id is unknown or belongs to another user."""


class SessionLedger:
    """Ordered record of the conversion attempts made in one session.

    Records are only added by :meth:`record` and removed by :meth:`undo_last`
    or :meth:`flush_to_history`; readers get copies.
    """

    def __init__(self, user_id: str, precision: int = DEFAULT_PRECISION):
        self.session_id: UUID = uuid.uuid7()
        self.user_id = user_id
        self.precision = precision
        self.started_at = datetime.now(UTC)
        self._records: list[ConversionRecord] = []
        self._undo_count = 0
        self._logger = logger.bind(session_id=str(self.session_id), user_id=user_id)

    @property
    def records(self) -> tuple[ConversionRecord, ...]:
        return tuple(self._records)

    @property
    def undo_count(self) -> int:
        return self._undo_count

    def __len__(self) -> int:
        return len(self._records)

    def record(
        self, value: str, source_base: int, target_base: int, precision: int | None = None
    ) -> ConversionRecord:
        """Convert a numeral and append the attempt to the session.

        Args:
            value: Numeral in the source base
            source_base: Base of the numeral
            target_base: Base to convert to
            precision: Fractional digits, defaults to the session precision

        Returns:
            The appended record, holding either the result or the error

        Raises:
            ValueError: If a base is too large to be stored in history
        """
        precision = self.precision if precision is None else precision
        outcome = convert_number(value, source_base, target_base, precision)
        conversion = ConversionRecord.from_outcome(value, source_base, target_base, outcome)
        self._records.append(conversion)

        record_number_conversion(source_base, target_base, success=outcome.ok)
        self._logger.info(
            f"Recorded conversion: {value} ({source_base} -> {target_base})",
            success=outcome.ok,
            result=outcome.result,
            error_kind=str(outcome.error_kind) if outcome.error_kind else None,
        )
        return conversion

    def undo_last(self) -> bool:
        """Remove the most recent record.

        Returns:
            True if a record was removed, False if the session was empty
        """
        if not self._records:
            self._logger.info("Undo requested on empty session")
            return False

        removed = self._records.pop()
        self._undo_count += 1
        record_session_undo()
        self._logger.info(
            "Undid last conversion",
            record_id=str(removed.record_id),
            undo_count=self._undo_count,
        )
        return True

    def flush_to_history(self, history_store: HistoryStore, history_date: date) -> int:
        """Append the session's records to a history date bucket and clear them.

        The undo count is left as is.

        Returns:
            Number of records flushed
        """
        flushed = history_store.append(
            self.user_id, history_date, self.records, session_id=self.session_id
        )
        self._records.clear()
        self._logger.info(
            "Flushed session to history",
            flushed_records=flushed,
            history_date=history_date.isoformat(),
        )
        return flushed


class SessionRegistry:
    """Live conversion sessions keyed by session id.

    Each session owns an independent ledger. A session is only visible to
    the user who started it.
    """

    def __init__(self, precision: int = DEFAULT_PRECISION):
        self.precision = precision
        self._sessions: dict[UUID, SessionLedger] = {}
        self._lock = threading.Lock()

    def start_session(self, user_id: str) -> SessionLedger:
        """Start a new, empty session for a user."""
        ledger = SessionLedger(user_id, precision=self.precision)
        with self._lock:
            self._sessions[ledger.session_id] = ledger
            ACTIVE_SESSIONS.set(len(self._sessions))

        logger.info("Session started", session_id=str(ledger.session_id), user_id=user_id)
        return ledger

    def get_session(self, session_id: UUID, user_id: str) -> SessionLedger:
        """Look up a session owned by the user.

        Raises:
            SessionNotFoundError: If no such session exists for this user
        """
        with self._lock:
            ledger = self._sessions.get(session_id)

        if ledger is None or ledger.user_id != user_id:
            raise SessionNotFoundError(f"Session '{session_id}' not found")
        return ledger

    def end_session(
        self,
        session_id: UUID,
        user_id: str,
        history_store: HistoryStore,
        history_date: date,
    ) -> tuple[SessionLedger, int]:
        """Flush a session into history and discard it.

        Returns:
            The ended ledger and the number of records flushed

        Raises:
            SessionNotFoundError: If no such session exists for this user
        """
        ledger = self.get_session(session_id, user_id)
        flushed = ledger.flush_to_history(history_store, history_date)

        with self._lock:
            self._sessions.pop(session_id, None)
            ACTIVE_SESSIONS.set(len(self._sessions))

        logger.info("Session ended", session_id=str(session_id), user_id=user_id)
        return ledger, flushed

    def active_session_count(self) -> int:
        with self._lock:
            return len(self._sessions)
