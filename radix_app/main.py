"""Main FastAPI application for the radix converter API."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Response

from radix_app.config import settings
from radix_app.database import create_tables, engine
from radix_app.logging_config import get_logger
from radix_app.middleware.auth import AuthenticationMiddleware
from radix_app.middleware.logging import LoggingMiddleware
from radix_app.middleware.metrics import PrometheusMiddleware, get_metrics
from radix_app.routers import conversion, health, history, quiz, sessions
from radix_app.services.quiz_service import QuizService
from radix_app.services.session_ledger import SessionRegistry
from radix_app.tracing_config import configure_tracing, instrument_application

# Structlog is configured automatically when logging_config is imported
logger = get_logger(__name__)

API_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("Starting Radix Converter API application")

    try:
        configure_tracing(service_name="radix-api", enable_console_export=True)
        logger.info("OpenTelemetry tracing configured successfully")
    except Exception:
        logger.error("Failed to configure tracing", exc_info=True)

    try:
        create_tables()
        logger.info("Database tables created successfully")
    except Exception:
        logger.error("Failed to create database tables", exc_info=True)
        raise

    app.state.session_registry = SessionRegistry(precision=settings.default_precision)
    app.state.quiz_service = QuizService(question_count=settings.quiz_question_count)

    logger.info("Radix Converter API application started successfully")
    yield

    active = app.state.session_registry.active_session_count()
    if active:
        logger.warning(f"Shutting down with {active} unsaved sessions", active_sessions=active)
    logger.info("Shutting down Radix Converter API application")


app = FastAPI(
    title="Radix Converter API",
    description="Number base conversion with sessions, undo, history and statistics",
    version=API_VERSION,
    lifespan=lifespan,
)

# Auth first, then logging to capture all requests
app.add_middleware(AuthenticationMiddleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(PrometheusMiddleware)

app.include_router(health.router)
app.include_router(conversion.router)
app.include_router(sessions.router)
app.include_router(history.router)
app.include_router(quiz.router)

try:
    instrument_application(app, engine)
except Exception:
    logger.error("Failed to instrument application", exc_info=True)


@app.get("/api")
async def api_info() -> dict[str, str | dict[str, str]]:
    """API information endpoint."""
    return {
        "message": "Radix Converter API",
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "convert": "/api/v1/convert",
            "sessions": "/api/v1/sessions",
            "history": "/api/v1/history",
            "quiz": "/api/v1/quiz",
            "metrics": "/metrics",
        },
    }


@app.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(content=get_metrics(), media_type="text/plain")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("radix_app.main:app", host=settings.api_host, port=settings.api_port, reload=True)
