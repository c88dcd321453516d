"""FastAPI dependencies shared by the routers."""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from radix_app.database import get_db
from radix_app.services.history_store import HistoryStore
from radix_app.services.quiz_service import QuizService
from radix_app.services.session_ledger import SessionRegistry


def get_session_registry(request: Request) -> SessionRegistry:
    """Registry of live sessions, created at application startup."""
    return request.app.state.session_registry


def get_quiz_service(request: Request) -> QuizService:
    return request.app.state.quiz_service


def get_history_store(db: Session = Depends(get_db)) -> HistoryStore:
    return HistoryStore(db)
