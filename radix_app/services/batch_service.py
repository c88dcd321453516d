"""Batch conversion of 'value,sourceBase,targetBase' lines."""

from collections.abc import Iterable
from dataclasses import dataclass

from radix_app.config import settings
from radix_app.logging_config import get_logger
from radix_app.models.conversion import MAX_BASE_VALUE, MIN_BASE_VALUE
from radix_app.models.reports import BatchLineResult, BatchReport
from radix_app.services.session_ledger import SessionLedger

logger = get_logger(__name__)

FIELD_SEPARATOR = ","


class BatchLineError(Exception):
    """Raised when a batch line cannot be parsed."""


@dataclass(frozen=True)
class BatchLine:
    value: str
    source_base: int
    target_base: int


def parse_batch_line(line: str) -> BatchLine:
    """Parse one batch line.

    Raises:
        BatchLineError: If the line does not hold a value and two integer bases
    """
    fields = [field.strip() for field in line.split(FIELD_SEPARATOR)]
    if len(fields) != 3:
        raise BatchLineError(
            f"Expected 'value,sourceBase,targetBase' but found {len(fields)} field(s)"
        )

    value, source_field, target_field = fields
    if not value:
        raise BatchLineError("Value is missing")
    if len(value) > settings.max_input_length:
        raise BatchLineError(
            f"Value cannot be longer than {settings.max_input_length} characters"
        )

    try:
        source_base = int(source_field)
        target_base = int(target_field)
    except ValueError as e:
        raise BatchLineError(f"Bases must be integers: {e}") from e

    for base in (source_base, target_base):
        if not MIN_BASE_VALUE <= base <= MAX_BASE_VALUE:
            raise BatchLineError(f"Base {base} is too large to be recorded")

    return BatchLine(value=value, source_base=source_base, target_base=target_base)


def run_batch(ledger: SessionLedger, lines: Iterable[str]) -> BatchReport:
    """Convert every batch line into the ledger.

    Blank lines are skipped. A line that cannot be parsed is reported and the
    batch carries on.
    """
    results = []
    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.strip()
        if not line:
            continue

        try:
            batch_line = parse_batch_line(line)
        except BatchLineError as e:
            logger.warning(
                "Skipping malformed batch line",
                line_number=line_number,
                session_id=str(ledger.session_id),
                error=str(e),
            )
            results.append(BatchLineResult(line_number=line_number, line=line, parse_error=str(e)))
            continue

        record = ledger.record(batch_line.value, batch_line.source_base, batch_line.target_base)
        results.append(BatchLineResult(line_number=line_number, line=line, record=record))

    converted = [result.record for result in results if result.record is not None]
    report = BatchReport(
        processed=len(converted),
        succeeded=sum(1 for record in converted if record.succeeded),
        failed=sum(1 for record in converted if not record.succeeded),
        parse_errors=len(results) - len(converted),
        results=results,
    )
    logger.info(
        "Batch processed",
        session_id=str(ledger.session_id),
        processed=report.processed,
        parse_errors=report.parse_errors,
    )
    return report
