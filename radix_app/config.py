"""Configuration settings for the Radix Converter API."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_PRECISION = 16


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database Configuration (SQLite for local/tests, PostgreSQL via env var for Docker)
    database_url: str = "sqlite:///radix_converter.db"

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # JWT Configuration
    jwt_secret_key: str = "dev-secret-key-change-in-production"

    # Conversion Configuration
    default_precision: int = 5
    max_input_length: int = 100

    # Statistics and quiz
    top_pairs_count: int = 5
    quiz_question_count: int = 5

    @field_validator("api_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port numbers are in valid range."""
        if not 1 <= v <= 65535:
            msg = "Port must be between 1 and 65535"
            raise ValueError(msg)
        return v

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL format."""
        if not v:
            msg = "Database URL cannot be empty"
            raise ValueError(msg)
        return v

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret_key(cls, v: str) -> str:
        """Validate JWT secret key."""
        if not v:
            msg = "JWT secret key cannot be empty"
            raise ValueError(msg)
        if len(v) < 16:
            msg = "JWT secret key must be at least 16 characters long"
            raise ValueError(msg)
        return v

    @field_validator("default_precision")
    @classmethod
    def validate_default_precision(cls, v: int) -> int:
        """Validate fractional precision is within the supported range."""
        if not 0 <= v <= MAX_PRECISION:
            msg = f"Precision must be between 0 and {MAX_PRECISION}"
            raise ValueError(msg)
        return v

    @field_validator("max_input_length", "top_pairs_count", "quiz_question_count")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate counts and limits are positive."""
        if v < 1:
            msg = "Value must be at least 1"
            raise ValueError(msg)
        return v


# Global settings instance
settings = Settings()
