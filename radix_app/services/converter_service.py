"""Number base conversion engine.

Converts numeral strings between any two bases in 2..36, covering both
integer and fractional numerals. Fractional digits are produced by greedy
multiplication and truncated at a configurable precision, so results are not
round-trip exact when the fraction does not terminate in the target base.

Malformed user input never raises out of the public conversion functions:
they return a :class:`ConversionOutcome` carrying either the converted value
or a :class:`ConversionError`.
"""

from dataclasses import dataclass
from enum import StrEnum

from radix_app.logging_config import get_logger
from radix_app.tracing_config import add_span_event, get_tracer

logger = get_logger(__name__)
tracer = get_tracer(__name__)

DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
MIN_BASE = 2
MAX_BASE = 36
DEFAULT_PRECISION = 5
RADIX_POINT = "."


class ConversionErrorKind(StrEnum):
    """Kinds of conversion failure surfaced to the user."""

    INVALID_DIGIT = "invalid_digit"
    MALFORMED_NUMBER = "malformed_number"
    BASE_OUT_OF_RANGE = "base_out_of_range"


class ConversionError(Exception):
    """Raised by the low-level helpers when a numeral cannot be converted."""

    def __init__(self, kind: ConversionErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


@dataclass(frozen=True)
class ConversionOutcome:
    """Result of a conversion attempt: a value or an error, never both."""

    result: str = ""
    error: ConversionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_message(self) -> str:
        return self.error.message if self.error else ""

    @property
    def error_kind(self) -> ConversionErrorKind | None:
        return self.error.kind if self.error else None

    @classmethod
    def failure(cls, error: ConversionError) -> "ConversionOutcome":
        return cls(error=error)


def validate_base(base: int) -> None:
    """Ensure a base lies within 2..36.

    Raises:
        ConversionError: If the base is out of range
    """
    if not MIN_BASE <= base <= MAX_BASE:
        raise ConversionError(
            ConversionErrorKind.BASE_OUT_OF_RANGE,
            f"Base {base} is out of range, bases must be between {MIN_BASE} and {MAX_BASE}",
        )


def digit_value(char: str, base: int) -> int:
    """Return the value of a single digit character in the given base.

    Raises:
        ConversionError: If the character is not a valid digit for the base
    """
    value = DIGITS.find(char.lower()) if len(char) == 1 else -1
    if value < 0 or value >= base:
        raise ConversionError(
            ConversionErrorKind.INVALID_DIGIT,
            f"Invalid digit '{char}' for base {base}",
        )
    return value


def to_base(number: int, base: int) -> str:
    """Render an integer in the given base using lowercase digits."""
    validate_base(base)
    if number == 0:
        return "0"

    sign = "-" if number < 0 else ""
    magnitude = abs(number)
    digits = []
    while magnitude:
        magnitude, remainder = divmod(magnitude, base)
        digits.append(DIGITS[remainder])
    return sign + "".join(reversed(digits))


def _split_sign(value: str) -> tuple[str, str]:
    if value[:1] in ("+", "-"):
        return ("-" if value[0] == "-" else ""), value[1:]
    return "", value


def parse_integer(value: str, base: int) -> int:
    """Parse a signed integer numeral in the given base.

    Raises:
        ConversionError: If the numeral is empty or holds an invalid digit
    """
    sign, digits = _split_sign(value)
    if not digits:
        raise ConversionError(
            ConversionErrorKind.INVALID_DIGIT,
            f"'{value}' is not a valid number in base {base}",
        )

    number = 0
    for char in digits:
        number = number * base + digit_value(char, base)
    return -number if sign else number


def is_integer_only(value: str) -> bool:
    """Return True if the numeral has no radix point."""
    return RADIX_POINT not in value


def convert_integer(value: str, source_base: int, target_base: int) -> ConversionOutcome:
    """Convert a signed integer numeral from one base to another.

    Args:
        value: Numeral in the source base, optionally signed
        source_base: Base of the input numeral
        target_base: Base to render the result in

    Returns:
        Outcome with the converted numeral, or the first error found
    """
    try:
        validate_base(source_base)
        validate_base(target_base)
        number = parse_integer(value, source_base)
    except ConversionError as e:
        return ConversionOutcome.failure(e)
    return ConversionOutcome(result=to_base(number, target_base))


def fraction_to_base10(fraction_digits: str, source_base: int) -> float:
    """Convert the digits after a radix point to a base 10 fraction.

    The digit at position ``i`` contributes ``digit / source_base ** (i + 1)``.
    An empty digit string is a zero fraction.

    Raises:
        ConversionError: If a character is not a valid digit for the base
    """
    fraction = 0.0
    for position, char in enumerate(fraction_digits):
        fraction += digit_value(char, source_base) / source_base ** (position + 1)
    return fraction


def base10_fraction_to_target(
    fraction: float, target_base: int, precision: int = DEFAULT_PRECISION
) -> str:
    """Render a base 10 fraction in the target base.

    Emits one digit per multiplication by the target base until the remainder
    is exactly zero or ``precision`` digits have been produced.

    Raises:
        ValueError: If precision is negative
    """
    if precision < 0:
        msg = "Precision cannot be negative"
        raise ValueError(msg)

    digits = []
    while fraction != 0.0 and len(digits) < precision:
        fraction *= target_base
        # A long run of top digits can round the fraction up to 1.0
        digit = min(int(fraction), target_base - 1)
        digits.append(DIGITS[digit])
        fraction -= digit
    return "".join(digits)


def convert_decimal(
    value: str, source_base: int, target_base: int, precision: int = DEFAULT_PRECISION
) -> ConversionOutcome:
    """Convert a numeral with integer and fractional parts.

    Args:
        value: Numeral containing exactly one radix point
        source_base: Base of the input numeral
        target_base: Base to render the result in
        precision: Maximum number of fractional digits in the result

    Returns:
        Outcome with ``integer.fraction`` in the target base, or the first error
    """
    parts = value.split(RADIX_POINT)
    if len(parts) != 2:
        return ConversionOutcome.failure(
            ConversionError(
                ConversionErrorKind.MALFORMED_NUMBER,
                f"'{value}' must contain exactly one radix point",
            )
        )

    integer_part, fraction_part = parts
    integer_outcome = convert_integer(integer_part, source_base, target_base)
    if not integer_outcome.ok:
        return integer_outcome

    try:
        fraction = fraction_to_base10(fraction_part, source_base)
    except ConversionError as e:
        return ConversionOutcome.failure(e)

    integer_digits = integer_outcome.result
    # -0.x keeps its sign even though the integer part renders as 0
    if integer_part.startswith("-") and integer_digits == "0" and fraction != 0.0:
        integer_digits = "-0"

    fraction_digits = base10_fraction_to_target(fraction, target_base, precision)
    return ConversionOutcome(result=f"{integer_digits}{RADIX_POINT}{fraction_digits}")


def convert_number(
    value: str, source_base: int, target_base: int, precision: int = DEFAULT_PRECISION
) -> ConversionOutcome:
    """Convert a numeral, dispatching on whether it has a fractional part.

    Args:
        value: Numeral in the source base
        source_base: Base of the input numeral (2..36)
        target_base: Base to render the result in (2..36)
        precision: Maximum number of fractional digits in the result

    Returns:
        Conversion outcome; malformed input is reported, never raised
    """
    with tracer.start_as_current_span("convert_number") as span:
        span.set_attribute("conversion.source_base", source_base)
        span.set_attribute("conversion.target_base", target_base)

        try:
            validate_base(source_base)
            validate_base(target_base)
        except ConversionError as e:
            outcome = ConversionOutcome.failure(e)
        else:
            if is_integer_only(value):
                outcome = convert_integer(value, source_base, target_base)
            else:
                outcome = convert_decimal(value, source_base, target_base, precision)

        if outcome.ok:
            span.set_attribute("conversion.status", "success")
            add_span_event("conversion_completed", {"result_length": len(outcome.result)})
        else:
            span.set_attribute("conversion.status", "error")
            span.set_attribute("conversion.error.type", str(outcome.error_kind))
            add_span_event(
                "conversion_failed",
                {"error_type": str(outcome.error_kind), "error_message": outcome.error_message},
            )
            logger.debug(
                "Conversion failed",
                value=value,
                source_base=source_base,
                target_base=target_base,
                error_kind=str(outcome.error_kind),
            )

        return outcome
