"""JWT authentication utilities and user context management."""

import time
from typing import Any

import jwt
from pydantic import BaseModel, field_validator

from radix_app.config import settings
from radix_app.models.database import USER_ID_MAX_LENGTH


class UserContext(BaseModel):
    """User context extracted from JWT token."""

    user_id: str

    @field_validator("user_id")
    @classmethod
    def validate_user_id(cls, v: str) -> str:
        """Validate that user_id is a non-empty string."""
        if not v or not v.strip():
            msg = "User ID must be a non-empty string"
            raise ValueError(msg)
        if len(v.strip()) > USER_ID_MAX_LENGTH:
            msg = f"User ID cannot be longer than {USER_ID_MAX_LENGTH} characters"
            raise ValueError(msg)
        return v.strip()


class AuthenticationError(Exception):
    """Base authentication error."""


class InvalidTokenError(AuthenticationError):
    """Invalid JWT token error."""


class ExpiredTokenError(AuthenticationError):
    """Expired JWT token error."""


class MissingTokenError(AuthenticationError):
    """Missing JWT token error."""


def validate_jwt_token(token: str) -> UserContext:
    """Validate JWT token and extract user context.

    Args:
        token: JWT token string

    Returns:
        UserContext with user_id

    Raises:
        InvalidTokenError: If token is malformed or has invalid signature
        ExpiredTokenError: If token carries an expiry that has passed
        MissingTokenError: If token is empty or None
    """
    if not token or not token.strip():
        raise MissingTokenError("JWT token is required")

    try:
        payload = jwt.decode(token.strip(), settings.jwt_secret_key, algorithms=["HS256"])
    except jwt.ExpiredSignatureError as e:
        raise ExpiredTokenError("JWT token has expired") from e
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError(f"Invalid JWT token: {e}") from e

    user_id = payload.get("user_id")
    if not user_id:
        raise InvalidTokenError("Token must contain user_id")

    try:
        return UserContext(user_id=user_id)
    except ValueError as e:
        raise InvalidTokenError(f"Invalid token claims: {e}") from e


def generate_jwt_token(user_id: str, expires_in_seconds: int | None = None) -> str:
    """Generate JWT token for testing and development.

    Args:
        user_id: User identifier
        expires_in_seconds: Token expiration time (None for no expiration)

    Returns:
        JWT token string

    Raises:
        ValueError: If user_id is invalid
    """
    if not user_id or not user_id.strip():
        msg = "user_id must be a non-empty string"
        raise ValueError(msg)

    payload: dict[str, Any] = {
        "user_id": user_id.strip(),
        "iat": int(time.time()),
    }
    if expires_in_seconds is not None:
        payload["exp"] = int(time.time()) + expires_in_seconds

    return jwt.encode(payload, settings.jwt_secret_key, algorithm="HS256")


def extract_token_from_header(authorization_header: str) -> str:
    """Extract JWT token from Authorization header.

    Args:
        authorization_header: Authorization header value

    Returns:
        JWT token string

    Raises:
        MissingTokenError: If header is empty or doesn't contain Bearer token
        InvalidTokenError: If header format is invalid
    """
    if not authorization_header or not authorization_header.strip():
        raise MissingTokenError("Authorization header is required")

    header_parts = authorization_header.strip().split()

    if len(header_parts) != 2:
        raise InvalidTokenError("Authorization header must be 'Bearer <token>'")

    scheme, token = header_parts
    if scheme.lower() != "bearer":
        raise InvalidTokenError("Authorization header must use Bearer scheme")

    return token
