"""Per-user, per-date archive of completed conversion sessions."""

import threading
from collections.abc import Iterable
from datetime import date
from typing import ClassVar
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from radix_app.logging_config import get_logger
from radix_app.middleware.metrics import record_database_operation
from radix_app.models.conversion import ConversionRecord
from radix_app.models.database import ConversionHistory

logger = get_logger(__name__)


class HistoryStore:
    """Append-only conversion history backed by the ``conversion_history`` table.

    Records are bucketed by user and calendar date and kept in append order
    through a per-bucket sequence number. Appends for the same user are
    serialised, since computing the next sequence and inserting is not atomic.
    """

    _user_locks: ClassVar[dict[str, threading.Lock]] = {}
    _locks_guard: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, db_session: Session):
        """Initialize the history store.

        Args:
            db_session: Database session for data operations
        """
        self.db_session = db_session

    @classmethod
    def _lock_for(cls, user_id: str) -> threading.Lock:
        with cls._locks_guard:
            return cls._user_locks.setdefault(user_id, threading.Lock())

    def append(
        self,
        user_id: str,
        history_date: date,
        records: Iterable[ConversionRecord],
        session_id: UUID | None = None,
    ) -> int:
        """Append records to the user's bucket for a date.

        Args:
            user_id: Owner of the history
            history_date: Date bucket to append to
            records: Records in the order they were performed
            session_id: Session the records came from, if any

        Returns:
            Number of records appended
        """
        records = list(records)
        if not records:
            return 0

        with self._lock_for(user_id):
            last_sequence = (
                self.db_session.query(func.max(ConversionHistory.sequence))
                .filter(
                    ConversionHistory.user_id == user_id,
                    ConversionHistory.conversion_date == history_date,
                )
                .scalar()
            )
            next_sequence = 0 if last_sequence is None else last_sequence + 1

            for offset, record in enumerate(records):
                self.db_session.add(
                    ConversionHistory(
                        record_id=str(record.record_id),
                        user_id=user_id,
                        session_id=str(session_id) if session_id else None,
                        conversion_date=history_date,
                        sequence=next_sequence + offset,
                        input_value=record.input_value,
                        source_base=record.source_base,
                        target_base=record.target_base,
                        result=record.result,
                        error_message=record.error_message,
                        error_kind=str(record.error_kind) if record.error_kind else None,
                        created_at=record.created_at,
                    )
                )

            try:
                self.db_session.commit()
            except Exception:
                self.db_session.rollback()
                record_database_operation(
                    operation="insert", table="conversion_history", success=False
                )
                logger.error(
                    "Failed to append conversion history",
                    user_id=user_id,
                    history_date=history_date.isoformat(),
                    exc_info=True,
                )
                raise

        record_database_operation(operation="insert", table="conversion_history", success=True)
        logger.info(
            f"Appended {len(records)} records to history",
            user_id=user_id,
            history_date=history_date.isoformat(),
            first_sequence=next_sequence,
        )
        return len(records)

    def get_bucket(self, user_id: str, history_date: date) -> list[ConversionRecord]:
        """Return the records for one date in append order."""
        return self.get_history(user_id, history_date, history_date).get(history_date, [])

    def get_history(
        self,
        user_id: str,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> dict[date, list[ConversionRecord]]:
        """Return the user's history grouped by date.

        Args:
            user_id: Owner of the history
            start_date: Earliest date to include (inclusive)
            end_date: Latest date to include (inclusive)

        Returns:
            Mapping of date to records, dates ascending, records in append order
        """
        query = self.db_session.query(ConversionHistory).filter(
            ConversionHistory.user_id == user_id
        )
        if start_date:
            query = query.filter(ConversionHistory.conversion_date >= start_date)
        if end_date:
            query = query.filter(ConversionHistory.conversion_date <= end_date)

        rows = query.order_by(
            ConversionHistory.conversion_date, ConversionHistory.sequence
        ).all()
        record_database_operation(operation="select", table="conversion_history", success=True)

        history: dict[date, list[ConversionRecord]] = {}
        for row in rows:
            history.setdefault(row.conversion_date, []).append(_row_to_record(row))
        return history


def _row_to_record(row: ConversionHistory) -> ConversionRecord:
    return ConversionRecord(
        record_id=UUID(str(row.record_id)),
        input_value=str(row.input_value),
        source_base=int(row.source_base),
        target_base=int(row.target_base),
        result=str(row.result or ""),
        error_message=str(row.error_message or ""),
        error_kind=row.error_kind or None,
        created_at=row.created_at,
    )
