"""Statistics over sequences of conversion records."""

from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from datetime import date

from radix_app.models.conversion import ConversionRecord
from radix_app.models.reports import BasePairFrequency, DailyStats, StatsSummary

DEFAULT_TOP_PAIRS = 5


def count_success(records: Iterable[ConversionRecord]) -> int:
    """Count records holding a result."""
    return sum(1 for record in records if record.result)


def count_failure(records: Iterable[ConversionRecord]) -> int:
    """Count records holding an error message."""
    return sum(1 for record in records if record.error_message)


def most_frequent_base(
    records: Iterable[ConversionRecord], *, select_source: bool = True
) -> str | None:
    """Return the most used source (or target) base as a string.

    Ties go to the base encountered first. Returns None for no records.
    """
    frequency = Counter(
        str(record.source_base if select_source else record.target_base) for record in records
    )
    if not frequency:
        return None
    # most_common keeps first-encountered order among equal counts
    base, _ = frequency.most_common(1)[0]
    return base


def top_base_pairs(records: Iterable[ConversionRecord], n: int) -> list[tuple[str, int]]:
    """Return the ``n`` most used ``"source -> target"`` pairs with their counts.

    Pairs are ordered by descending count, ties by first-encountered order.
    """
    if n <= 0:
        return []
    frequency = Counter(record.base_pair for record in records)
    return frequency.most_common(n)


def summarize(
    records: Sequence[ConversionRecord],
    undo_count: int | None = None,
    top_n: int = DEFAULT_TOP_PAIRS,
) -> StatsSummary:
    """Build a full statistics summary for a sequence of records."""
    return StatsSummary(
        total_conversions=len(records),
        successful_conversions=count_success(records),
        failed_conversions=count_failure(records),
        undo_count=undo_count,
        most_used_source_base=most_frequent_base(records, select_source=True),
        most_used_target_base=most_frequent_base(records, select_source=False),
        top_base_pairs=[
            BasePairFrequency(pair=pair, count=count)
            for pair, count in top_base_pairs(records, top_n)
        ],
    )


def summarize_history(
    history: Mapping[date, Sequence[ConversionRecord]],
    top_n: int = DEFAULT_TOP_PAIRS,
) -> list[DailyStats]:
    """Summarize each date of a history, oldest date first."""
    daily = []
    for history_date in sorted(history):
        summary = summarize(history[history_date], top_n=top_n)
        daily.append(DailyStats(history_date=history_date, **summary.model_dump()))
    return daily
