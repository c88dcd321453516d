"""Logging middleware for HTTP request/response tracking."""

import time
from collections.abc import Callable

import uuid_utils.compat as uuid
from fastapi import Request, Response
from opentelemetry import trace
from starlette.middleware.base import BaseHTTPMiddleware

from radix_app.logging_config import get_logger

logger = get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log HTTP requests and responses using structlog context binding."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and log details.

        Args:
            request: The incoming request
            call_next: The next middleware/route handler

        Returns:
            The response from downstream handlers
        """
        request_id = str(uuid.uuid7())
        method = request.method
        path = request.url.path

        request_logger = logger.bind(
            request_id=request_id,
            method=method,
            endpoint=path,
            client_ip=self._get_client_ip(request),
        )
        request_logger.info(f"Incoming request: {method} {path}")

        request.state.request_id = request_id
        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception as e:
            request_logger = self._bind_user(request, request_logger)
            request_logger.error(
                f"Request failed: {method} {path} - {e!s}",
                response_time_ms=round((time.time() - start_time) * 1000, 2),
                exc_info=True,
            )
            raise

        request_logger = self._bind_user(request, request_logger)
        request_logger.info(
            f"Request completed: {method} {path} - {response.status_code}",
            status_code=response.status_code,
            response_time_ms=round((time.time() - start_time) * 1000, 2),
        )
        return response

    def _bind_user(self, request: Request, request_logger):
        """Attach the authenticated user to the logger and current span."""
        user_context = getattr(request.state, "user_context", None)
        if not user_context:
            return request_logger

        current_span = trace.get_current_span()
        if current_span.is_recording():
            current_span.set_attribute("user.id", user_context.user_id)
        return request_logger.bind(user_id=user_context.user_id)

    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP address from request."""
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        if request.client:
            return request.client.host

        return "unknown"
