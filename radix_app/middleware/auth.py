"""JWT Authentication middleware for FastAPI."""

from typing import ClassVar

from fastapi import HTTPException, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from radix_app.auth.jwt_auth import (
    AuthenticationError,
    ExpiredTokenError,
    InvalidTokenError,
    MissingTokenError,
    UserContext,
    extract_token_from_header,
    validate_jwt_token,
)


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Middleware to handle JWT authentication for API requests."""

    # Paths that don't require authentication
    EXCLUDED_PATHS: ClassVar[set[str]] = {
        "/",
        "/api",
        "/metrics",
        "/docs",
        "/redoc",
        "/openapi.json",
    }

    async def dispatch(self, request: Request, call_next) -> Response:
        """Process request with JWT authentication.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware or route handler

        Returns:
            HTTP response, 401 if authentication fails
        """
        path = request.url.path.rstrip("/") or "/"
        if path in self.EXCLUDED_PATHS or path.startswith(("/health", "/docs")):
            return await call_next(request)

        try:
            token = extract_token_from_header(request.headers.get("authorization", ""))
            request.state.user_context = validate_jwt_token(token)

        except MissingTokenError:
            return JSONResponse(
                status_code=401, content={"detail": "Missing or invalid Authorization header"}
            )

        except (InvalidTokenError, ExpiredTokenError) as e:
            return JSONResponse(status_code=401, content={"detail": str(e)})

        except AuthenticationError as e:
            return JSONResponse(status_code=401, content={"detail": f"Authentication failed: {e}"})

        return await call_next(request)


def get_user_context(request: Request) -> UserContext:
    """Get user context from request state.

    Raises:
        HTTPException: 401 if no user context found
    """
    if not hasattr(request.state, "user_context"):
        raise HTTPException(status_code=401, detail="No authentication context found")

    return request.state.user_context
