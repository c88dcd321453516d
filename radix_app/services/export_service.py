"""Text and document exports of sessions and history."""

from collections.abc import Iterable, Mapping, Sequence
from datetime import date

from radix_app.models.conversion import ConversionRecord
from radix_app.models.reports import HistoryDay, HistoryDocument


def export_records(records: Iterable[ConversionRecord]) -> str:
    """Render records one export line each."""
    return "".join(f"{record.describe()}\n" for record in records)


def export_history(history: Mapping[date, Sequence[ConversionRecord]]) -> str:
    """Render history as date headed blocks separated by blank lines."""
    blocks = []
    for history_date in sorted(history):
        blocks.append(f"{history_date.isoformat()}\n{export_records(history[history_date])}\n")
    return "".join(blocks)


def build_history_document(
    user_id: str, history: Mapping[date, Sequence[ConversionRecord]]
) -> HistoryDocument:
    """Wrap history in a versioned document."""
    return HistoryDocument(
        user_id=user_id,
        days=[
            HistoryDay(history_date=history_date, records=list(history[history_date]))
            for history_date in sorted(history)
        ],
    )
