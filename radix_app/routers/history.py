"""API routes for archived conversion history."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse

from radix_app.config import settings
from radix_app.dependencies import get_history_store
from radix_app.middleware.auth import get_user_context
from radix_app.models.conversion import ErrorResponse
from radix_app.models.reports import DailyStats, HistoryDocument
from radix_app.services.export_service import build_history_document, export_history
from radix_app.services.history_store import HistoryStore
from radix_app.services.stats_service import summarize_history

router = APIRouter(prefix="/api/v1/history", tags=["history"])


def _validate_range(start_date: date | None, end_date: date | None) -> None:
    if start_date and end_date and start_date > end_date:
        error_response = ErrorResponse.create(
            code="INVALID_DATE_RANGE",
            message="start_date must not be after end_date",
            details={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        )
        raise HTTPException(status_code=400, detail=error_response.error)


@router.get("", response_model=HistoryDocument)
async def get_history(
    request: Request,
    start_date: date | None = Query(None, description="Earliest date to include"),
    end_date: date | None = Query(None, description="Latest date to include"),
    history_store: HistoryStore = Depends(get_history_store),
) -> HistoryDocument:
    """Get the caller's conversion history grouped by date.

    Raises:
        HTTPException: 400 if the date range is inverted
    """
    _validate_range(start_date, end_date)
    user_context = get_user_context(request)
    history = history_store.get_history(user_context.user_id, start_date, end_date)
    return build_history_document(user_context.user_id, history)


@router.get("/stats", response_model=list[DailyStats])
async def get_history_stats(
    request: Request,
    start_date: date | None = Query(None, description="Earliest date to include"),
    end_date: date | None = Query(None, description="Latest date to include"),
    history_store: HistoryStore = Depends(get_history_store),
) -> list[DailyStats]:
    """Get statistics for each date of the caller's history."""
    _validate_range(start_date, end_date)
    user_context = get_user_context(request)
    history = history_store.get_history(user_context.user_id, start_date, end_date)
    return summarize_history(history, top_n=settings.top_pairs_count)


@router.get("/export", response_class=PlainTextResponse)
async def export_history_text(
    request: Request,
    history_store: HistoryStore = Depends(get_history_store),
) -> str:
    """Export the caller's whole history as date headed text blocks."""
    user_context = get_user_context(request)
    return export_history(history_store.get_history(user_context.user_id))
