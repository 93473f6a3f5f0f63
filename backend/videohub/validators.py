"""Request-shape validation and ownership checks."""

import uuid
from decimal import Decimal, InvalidOperation

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from videohub.errors import AuthorizationError, ValidationError

_email_adapter = TypeAdapter(EmailStr)

# Largest value a signed 64-bit SQL integer (OFFSET, LIMIT) can hold
MAX_SQL_INT = 2**63 - 1


def normalize_email(value: str) -> str:
    """Validate an email address and return it lower-cased."""
    try:
        return _email_adapter.validate_python(value.strip()).lower()
    except PydanticValidationError:
        raise ValidationError("Please provide a valid email address")


def is_valid_id(value: str | None) -> bool:
    """Return True when ``value`` is a well-formed record identifier."""
    if not value:
        return False
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def require_id(value: str | None, message: str) -> str:
    if not is_valid_id(value):
        raise ValidationError(message)
    return str(value)


def is_blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


def require_fields(message: str, *values: str | None) -> None:
    """Raise ``ValidationError`` when any value is missing or whitespace only."""
    if any(is_blank(value) for value in values):
        raise ValidationError(message)


def parse_positive_int(
    value: str | int | None,
    default: int,
    message: str,
    maximum: int = MAX_SQL_INT,
) -> int:
    """
    Parse a query-string value as an integer between 1 and ``maximum``.

    Only an absent value falls back to ``default``; empty, non-numeric,
    non-finite, fractional, non-positive and out-of-range values raise
    ``ValidationError``. Integral decimals such as ``"3.0"`` are accepted.
    """
    if value is None:
        return default

    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(message)

    if not number.is_finite() or number < 1 or number > maximum:
        raise ValidationError(message)
    if number != number.to_integral_value():
        raise ValidationError(message)

    return int(number)


def ensure_owner(caller_id: str, owner_id: str, message: str) -> None:
    if str(caller_id) != str(owner_id):
        raise AuthorizationError(message)
