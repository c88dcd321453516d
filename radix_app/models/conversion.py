"""Pydantic models for number base conversion."""

from datetime import UTC, datetime
from uuid import UUID

import uuid_utils.compat as uuid
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from radix_app.config import MAX_PRECISION, settings
from radix_app.services.converter_service import ConversionErrorKind, ConversionOutcome

# Bases are stored in 32-bit INTEGER columns
MIN_BASE_VALUE = -(2**31)
MAX_BASE_VALUE = 2**31 - 1


class ConversionRecord(BaseModel):
    """A single conversion attempt: the input, the bases and its outcome."""

    model_config = ConfigDict(frozen=True)

    record_id: UUID = Field(default_factory=uuid.uuid7, description="Unique record ID")
    input_value: str = Field(..., description="Numeral as entered by the user")
    source_base: int = Field(
        ..., ge=MIN_BASE_VALUE, le=MAX_BASE_VALUE, description="Base of the input numeral"
    )
    target_base: int = Field(
        ...,
        ge=MIN_BASE_VALUE,
        le=MAX_BASE_VALUE,
        description="Base the numeral was converted to",
    )
    result: str = Field(default="", description="Converted numeral, empty on failure")
    error_message: str = Field(default="", description="Failure reason, empty on success")
    error_kind: ConversionErrorKind | None = Field(default=None, description="Failure kind")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When the conversion was requested",
    )

    @model_validator(mode="after")
    def check_single_outcome(self) -> "ConversionRecord":
        """A record holds either a result or an error message."""
        if bool(self.result) == bool(self.error_message):
            msg = "Exactly one of result and error_message must be set"
            raise ValueError(msg)
        return self

    @property
    def succeeded(self) -> bool:
        return bool(self.result)

    @property
    def base_pair(self) -> str:
        return f"{self.source_base} -> {self.target_base}"

    @classmethod
    def from_outcome(
        cls, input_value: str, source_base: int, target_base: int, outcome: ConversionOutcome
    ) -> "ConversionRecord":
        """Build a record from an engine outcome."""
        return cls(
            input_value=input_value,
            source_base=source_base,
            target_base=target_base,
            result=outcome.result,
            error_message=outcome.error_message,
            error_kind=outcome.error_kind,
        )

    def describe(self) -> str:
        """Render the record as a single export line."""
        return (
            f"Value : {self.input_value} - Source Base : {self.source_base} - "
            f"Target Base : {self.target_base} - Result : {self.result or 'No Result'} - "
            f"Error Message - {self.error_message or 'No Error Message'}"
        )


class ConversionRequest(BaseModel):
    """Request model for a number base conversion."""

    value: str = Field(..., min_length=1, description="Numeral to convert")
    source_base: int = Field(
        ...,
        ge=MIN_BASE_VALUE,
        le=MAX_BASE_VALUE,
        description="Base of the input numeral (2-36, others are reported as out of range)",
    )
    target_base: int = Field(
        ...,
        ge=MIN_BASE_VALUE,
        le=MAX_BASE_VALUE,
        description="Base to convert to (2-36, others are reported as out of range)",
    )
    precision: int | None = Field(
        default=None,
        ge=0,
        le=MAX_PRECISION,
        description="Fractional digits to emit (defaults to the configured precision)",
    )

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: str) -> str:
        """Strip surrounding whitespace and bound the numeral length."""
        v = v.strip()
        if not v:
            msg = "Value cannot be blank"
            raise ValueError(msg)
        if len(v) > settings.max_input_length:
            msg = f"Value cannot be longer than {settings.max_input_length} characters"
            raise ValueError(msg)
        return v


class ConversionResponse(BaseModel):
    """Response model for a stateless conversion."""

    conversion_id: UUID = Field(default_factory=uuid.uuid7, description="Unique conversion ID")
    value: str = Field(..., description="Original numeral")
    source_base: int = Field(..., description="Base of the input numeral")
    target_base: int = Field(..., description="Base converted to")
    success: bool = Field(..., description="Whether the conversion succeeded")
    result: str = Field(default="", description="Converted numeral")
    error_message: str = Field(default="", description="Failure reason")
    error_kind: ConversionErrorKind | None = Field(default=None, description="Failure kind")
    precision: int = Field(..., description="Fractional precision used")
    conversion_timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When conversion was performed",
    )


class ErrorResponse(BaseModel):
    """Error response model."""

    error: dict[str, str | dict[str, str]] = Field(..., description="Error details")

    @classmethod
    def create(
        cls,
        code: str,
        message: str,
        details: dict[str, str] | None = None,
    ) -> "ErrorResponse":
        """Create an error response."""
        error_data: dict[str, str | dict[str, str]] = {
            "code": code,
            "message": message,
            "timestamp": datetime.now(UTC).isoformat(),
        }
        if details:
            error_data["details"] = details

        return cls(error=error_data)
