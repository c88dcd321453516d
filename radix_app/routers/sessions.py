"""API routes for conversion sessions."""

from datetime import UTC, datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse

from radix_app.config import settings
from radix_app.dependencies import get_history_store, get_session_registry
from radix_app.middleware.auth import get_user_context
from radix_app.models.conversion import ConversionRecord, ConversionRequest, ErrorResponse
from radix_app.models.reports import (
    BatchReport,
    BatchRequest,
    SessionEndResponse,
    SessionResponse,
    StatsSummary,
    UndoResponse,
)
from radix_app.services.batch_service import run_batch
from radix_app.services.export_service import export_records
from radix_app.services.history_store import HistoryStore
from radix_app.services.session_ledger import (
    SessionLedger,
    SessionNotFoundError,
    SessionRegistry,
)
from radix_app.services.stats_service import summarize

router = APIRouter(prefix="/api/v1/sessions", tags=["sessions"])


def _session_response(ledger: SessionLedger) -> SessionResponse:
    return SessionResponse(
        session_id=ledger.session_id,
        user_id=ledger.user_id,
        started_at=ledger.started_at,
        precision=ledger.precision,
        undo_count=ledger.undo_count,
        records=list(ledger.records),
    )


def _not_found(session_id: UUID, error: SessionNotFoundError) -> HTTPException:
    error_response = ErrorResponse.create(
        code="SESSION_NOT_FOUND",
        message=str(error),
        details={"session_id": str(session_id)},
    )
    return HTTPException(status_code=404, detail=error_response.error)


def get_owned_session(
    session_id: UUID,
    request: Request,
    registry: SessionRegistry = Depends(get_session_registry),
) -> SessionLedger:
    """Resolve a session id to the caller's ledger.

    Raises:
        HTTPException: 404 if the session does not exist for this user
    """
    user_context = get_user_context(request)
    try:
        return registry.get_session(session_id, user_context.user_id)
    except SessionNotFoundError as e:
        raise _not_found(session_id, e) from e


@router.post("", response_model=SessionResponse, status_code=201)
async def start_session(
    request: Request, registry: SessionRegistry = Depends(get_session_registry)
) -> SessionResponse:
    """Start a new conversion session for the authenticated user."""
    user_context = get_user_context(request)
    return _session_response(registry.start_session(user_context.user_id))


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(ledger: SessionLedger = Depends(get_owned_session)) -> SessionResponse:
    """Get the records and undo count of a session."""
    return _session_response(ledger)


@router.post("/{session_id}/conversions", response_model=ConversionRecord, status_code=201)
async def record_conversion(
    conversion_request: ConversionRequest,
    ledger: SessionLedger = Depends(get_owned_session),
) -> ConversionRecord:
    """Convert a numeral and record the attempt in the session.

    Args:
        conversion_request: Numeral, bases and optional precision
        ledger: Session the conversion is recorded in

    Returns:
        The recorded attempt, with either a result or an error message
    """
    return ledger.record(
        conversion_request.value,
        conversion_request.source_base,
        conversion_request.target_base,
        conversion_request.precision,
    )


@router.post("/{session_id}/undo", response_model=UndoResponse)
async def undo_last_conversion(
    ledger: SessionLedger = Depends(get_owned_session),
) -> UndoResponse:
    """Remove the most recent conversion from the session."""
    undone = ledger.undo_last()
    return UndoResponse(undone=undone, undo_count=ledger.undo_count, remaining_records=len(ledger))


@router.post("/{session_id}/batch", response_model=BatchReport)
async def process_batch(
    batch_request: BatchRequest,
    ledger: SessionLedger = Depends(get_owned_session),
) -> BatchReport:
    """Record a batch of 'value,sourceBase,targetBase' lines.

    Malformed lines are reported per line and do not stop the batch.
    """
    return run_batch(ledger, batch_request.content.splitlines())


@router.get("/{session_id}/stats", response_model=StatsSummary)
async def get_session_stats(ledger: SessionLedger = Depends(get_owned_session)) -> StatsSummary:
    """Get statistics for the session's conversions."""
    return summarize(ledger.records, undo_count=ledger.undo_count, top_n=settings.top_pairs_count)


@router.get("/{session_id}/export", response_class=PlainTextResponse)
async def export_session(ledger: SessionLedger = Depends(get_owned_session)) -> str:
    """Export the session's conversions as text, one line per conversion."""
    return export_records(ledger.records)


@router.delete("/{session_id}", response_model=SessionEndResponse)
async def end_session(
    session_id: UUID,
    request: Request,
    registry: SessionRegistry = Depends(get_session_registry),
    history_store: HistoryStore = Depends(get_history_store),
) -> SessionEndResponse:
    """End a session, archiving its conversions under today's date.

    Raises:
        HTTPException: 404 if the session does not exist for this user,
            500 if the history could not be written
    """
    user_context = get_user_context(request)
    history_date = datetime.now(UTC).date()

    try:
        ledger = registry.get_session(session_id, user_context.user_id)
        stats = summarize(
            ledger.records, undo_count=ledger.undo_count, top_n=settings.top_pairs_count
        )
        _, flushed = registry.end_session(
            session_id, user_context.user_id, history_store, history_date
        )
    except SessionNotFoundError as e:
        raise _not_found(session_id, e) from e
    except Exception as e:
        error_response = ErrorResponse.create(
            code="HISTORY_ERROR",
            message="An unexpected error occurred while saving the session",
            details={"error": str(e), "session_id": str(session_id)},
        )
        raise HTTPException(status_code=500, detail=error_response.error) from e

    return SessionEndResponse(
        session_id=session_id,
        history_date=history_date,
        flushed_records=flushed,
        stats=stats,
    )
