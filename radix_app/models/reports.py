"""Pydantic models for sessions, statistics, history and batch reports."""

from datetime import UTC, date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from radix_app.models.conversion import ConversionRecord

HISTORY_FORMAT_VERSION = 1


class BasePairFrequency(BaseModel):
    """How often a source -> target base pair was used."""

    pair: str = Field(..., description="Base pair formatted as 'source -> target'")
    count: int = Field(..., ge=1, description="Number of conversions using the pair")


class StatsSummary(BaseModel):
    """Aggregate statistics over a sequence of conversion records."""

    total_conversions: int = Field(..., ge=0)
    successful_conversions: int = Field(..., ge=0)
    failed_conversions: int = Field(..., ge=0)
    undo_count: int | None = Field(default=None, description="Undo operations (sessions only)")
    most_used_source_base: str | None = Field(default=None)
    most_used_target_base: str | None = Field(default=None)
    top_base_pairs: list[BasePairFrequency] = Field(default_factory=list)


class DailyStats(StatsSummary):
    """Statistics for one calendar date of history."""

    history_date: date = Field(..., description="Date the conversions were performed")


class SessionResponse(BaseModel):
    """State of a conversion session."""

    session_id: UUID
    user_id: str
    started_at: datetime
    precision: int
    undo_count: int = Field(..., ge=0)
    records: list[ConversionRecord] = Field(default_factory=list)


class UndoResponse(BaseModel):
    """Outcome of an undo request."""

    undone: bool = Field(..., description="Whether a record was removed")
    undo_count: int = Field(..., ge=0)
    remaining_records: int = Field(..., ge=0)


class SessionEndResponse(BaseModel):
    """Summary returned when a session is ended and flushed to history."""

    session_id: UUID
    history_date: date
    flushed_records: int = Field(..., ge=0)
    stats: StatsSummary


class HistoryDay(BaseModel):
    """Conversions performed on one date."""

    history_date: date
    records: list[ConversionRecord]


class HistoryDocument(BaseModel):
    """Versioned, portable document of a user's conversion history."""

    format_version: int = Field(default=HISTORY_FORMAT_VERSION)
    user_id: str
    generated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    days: list[HistoryDay] = Field(default_factory=list)


class BatchRequest(BaseModel):
    """Batch of conversions, one 'value,sourceBase,targetBase' per line."""

    content: str = Field(..., description="Newline separated batch lines")


class BatchLineResult(BaseModel):
    """Outcome of one batch line."""

    line_number: int = Field(..., ge=1)
    line: str
    record: ConversionRecord | None = None
    parse_error: str | None = None


class BatchReport(BaseModel):
    """Results of a processed batch."""

    processed: int = Field(..., ge=0, description="Lines converted (successfully or not)")
    succeeded: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    parse_errors: int = Field(..., ge=0)
    results: list[BatchLineResult] = Field(default_factory=list)
