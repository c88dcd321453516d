"""API routes for stateless number base conversion."""

from fastapi import APIRouter

from radix_app.config import settings
from radix_app.middleware.metrics import record_number_conversion
from radix_app.models.conversion import ConversionRequest, ConversionResponse
from radix_app.services.converter_service import convert_number

router = APIRouter(prefix="/api/v1", tags=["conversion"])


@router.post("/convert", response_model=ConversionResponse)
async def convert(conversion_request: ConversionRequest) -> ConversionResponse:
    """Convert a numeral between two bases without recording it in a session.

    Conversion failures (invalid digits, malformed numbers, bases outside
    2-36) are part of a successful response with ``success`` set to false.

    Args:
        conversion_request: Numeral, bases and optional precision

    Returns:
        Conversion response with the result or the failure reason
    """
    precision = (
        settings.default_precision
        if conversion_request.precision is None
        else conversion_request.precision
    )
    outcome = convert_number(
        conversion_request.value,
        conversion_request.source_base,
        conversion_request.target_base,
        precision,
    )
    record_number_conversion(
        conversion_request.source_base, conversion_request.target_base, success=outcome.ok
    )

    return ConversionResponse(
        value=conversion_request.value,
        source_base=conversion_request.source_base,
        target_base=conversion_request.target_base,
        success=outcome.ok,
        result=outcome.result,
        error_message=outcome.error_message,
        error_kind=outcome.error_kind,
        precision=precision,
    )
