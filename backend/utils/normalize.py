"""
Input Normalization Utilities
=============================

Single source of truth for input normalization.
All parsing of query-string inputs happens here, nowhere else.

Usage:
    from utils.normalize import to_int, to_str, ValidationError
    from api.middleware.error_envelope import validation_error_response

    @analytics_bp.route("/transactions")
    def list_transactions():
        try:
            page = to_int(request.args.get("page"), default=1, minimum=1, field="page")
            search = to_str(request.args.get("search"))
        except ValidationError as e:
            return validation_error_response(e)

        # Now types are guaranteed correct
        return service.list_transactions(page=page, search=search)
"""

import math
from typing import Optional


class ValidationError(ValueError):
    """Raised when input cannot be normalized to expected type."""

    def __init__(self, message: str, field: str = None, received_value=None):
        super().__init__(message)
        self.field = field
        self.received_value = received_value


def to_int(
    value: Optional[str],
    *,
    default: Optional[int] = None,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
    field: str = None
) -> Optional[int]:
    """
    Convert string to int, with explicit None handling and optional bounds.

    Args:
        value: Input string (typically from request.args.get())
        default: Value to return if input is None or empty
        minimum: Smallest accepted value (inclusive)
        maximum: Largest accepted value (inclusive)
        field: Field name for error messages

    Returns:
        Parsed integer or default

    Raises:
        ValidationError: If value cannot be converted to int or is out of bounds
    """
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return default
    if isinstance(value, bool):
        raise ValidationError(
            f"Expected int, got bool: {value!r}",
            field=field,
            received_value=value
        )
    try:
        parsed = int(value.strip() if isinstance(value, str) else value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"Expected int, got {type(value).__name__}: {value!r}",
            field=field,
            received_value=value
        )
    if minimum is not None and parsed < minimum:
        raise ValidationError(
            f"Expected int >= {minimum}, got {parsed}",
            field=field,
            received_value=value
        )
    if maximum is not None and parsed > maximum:
        raise ValidationError(
            f"Expected int <= {maximum}, got {parsed}",
            field=field,
            received_value=value
        )
    return parsed


def to_float(
    value: Optional[str],
    *,
    default: Optional[float] = None,
    field: str = None
) -> Optional[float]:
    """
    Convert string to a finite float, with explicit None handling.

    Raises:
        ValidationError: If value cannot be converted, or is nan/inf
    """
    if value is None or value == "":
        return default
    try:
        parsed = float(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"Expected float, got {type(value).__name__}: {value!r}",
            field=field,
            received_value=value
        )
    if not math.isfinite(parsed):
        raise ValidationError(
            f"Expected finite float, got: {value!r}",
            field=field,
            received_value=value
        )
    return parsed


def to_str(
    value: Optional[str],
    *,
    default: Optional[str] = None,
    strip: bool = True,
) -> Optional[str]:
    """
    Normalize string input, optionally stripping whitespace.

    Whitespace-only input is treated as empty and yields the default.
    """
    if value is None or value == "":
        return default
    result = str(value)
    if strip:
        result = result.strip()
    if result == "":
        return default
    return result
