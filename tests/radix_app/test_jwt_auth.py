"""Tests for JWT authentication functionality."""

import jwt
import pytest

from radix_app.auth.jwt_auth import (
    ExpiredTokenError,
    InvalidTokenError,
    MissingTokenError,
    extract_token_from_header,
    generate_jwt_token,
    validate_jwt_token,
)
from radix_app.config import settings


class TestJWTTokenValidation:
    """Test JWT token validation."""

    def test_round_trip(self):
        """Test a generated token validates to the same user."""
        token = generate_jwt_token(user_id="test-user")

        assert validate_jwt_token(token).user_id == "test-user"

    def test_user_id_is_stripped(self):
        """Test surrounding whitespace is removed from the user id."""
        token = generate_jwt_token(user_id="  test-user  ")

        assert validate_jwt_token(token).user_id == "test-user"

    @pytest.mark.parametrize("token", ["", "   "])
    def test_missing_token(self, token):
        """Test empty tokens are reported as missing."""
        with pytest.raises(MissingTokenError):
            validate_jwt_token(token)

    def test_malformed_token(self):
        """Test a malformed token is rejected."""
        with pytest.raises(InvalidTokenError, match="Invalid JWT token"):
            validate_jwt_token("invalid.jwt.token")

    def test_wrong_signature(self):
        """Test a token signed with another key is rejected."""
        token = jwt.encode({"user_id": "test-user"}, "another-secret-key-123", algorithm="HS256")

        with pytest.raises(InvalidTokenError):
            validate_jwt_token(token)

    def test_expired_token(self):
        """Test an expired token is rejected."""
        token = generate_jwt_token(user_id="test-user", expires_in_seconds=-10)

        with pytest.raises(ExpiredTokenError):
            validate_jwt_token(token)

    def test_overlong_user_id_claim(self):
        """Test a user id longer than the stored column is rejected."""
        token = jwt.encode({"user_id": "u" * 65}, settings.jwt_secret_key, algorithm="HS256")

        with pytest.raises(InvalidTokenError, match="cannot be longer than 64"):
            validate_jwt_token(token)

    def test_missing_user_id_claim(self):
        """Test a token without a user_id claim is rejected."""
        token = jwt.encode({"sub": "test-user"}, settings.jwt_secret_key, algorithm="HS256")

        with pytest.raises(InvalidTokenError, match="Token must contain user_id"):
            validate_jwt_token(token)


class TestJWTTokenGeneration:
    """Test JWT token generation utilities."""

    def test_generate_token_with_valid_params(self):
        """Test JWT token generation with valid parameters."""
        token = generate_jwt_token(user_id="test-user", expires_in_seconds=None)

        assert isinstance(token, str)
        assert "." in token  # JWT format has dots

        decoded = jwt.decode(token, settings.jwt_secret_key, algorithms=["HS256"])
        assert "exp" not in decoded

    @pytest.mark.parametrize("user_id", ["", "   "])
    def test_generate_token_with_empty_user_id_fails(self, user_id):
        """Test that token generation fails with an empty user_id."""
        with pytest.raises(ValueError, match="user_id must be a non-empty string"):
            generate_jwt_token(user_id=user_id)

    def test_generate_token_with_expiration(self):
        """Test JWT token generation with expiration."""
        token = generate_jwt_token(user_id="test-user", expires_in_seconds=3600)

        decoded = jwt.decode(token, settings.jwt_secret_key, algorithms=["HS256"])
        assert decoded["exp"] > decoded["iat"]


class TestAuthorizationHeader:
    """Test Authorization header parsing."""

    def test_bearer_token(self):
        """Test the token is taken from a Bearer header."""
        assert extract_token_from_header("Bearer abc.def.ghi") == "abc.def.ghi"
        assert extract_token_from_header("bearer abc.def.ghi") == "abc.def.ghi"

    def test_empty_header(self):
        """Test an empty header is reported as missing."""
        with pytest.raises(MissingTokenError):
            extract_token_from_header("")

    def test_wrong_scheme(self):
        """Test a non-Bearer scheme is rejected."""
        with pytest.raises(InvalidTokenError, match="Bearer scheme"):
            extract_token_from_header("Basic abc")

    def test_wrong_part_count(self):
        """Test headers without exactly two parts are rejected."""
        with pytest.raises(InvalidTokenError, match="Bearer <token>"):
            extract_token_from_header("Bearer a b")
