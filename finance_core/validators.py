"""Validation helpers shared across the ledger, exporter and front ends."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from .exceptions import MissingFieldError, ValidationError

DATE_FORMAT = "%Y-%m-%d"


def _quantize_two_decimals(amount: Decimal) -> Decimal:
    """Round the amount to two decimal places using HALF_UP rounding."""
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def parse_amount(raw: object, field: str = "amount") -> Decimal:
    """Convert raw input to a positive Decimal with exactly two fraction digits."""
    if raw is None:
        raise MissingFieldError(f"{field} is required")
    if isinstance(raw, bool):
        raise ValidationError(f"{field} must be a numeric value")
    if isinstance(raw, str):
        raw = raw.replace(",", "").strip()
    try:
        amount = Decimal(str(raw))
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ValidationError(f"{field} must be a numeric value") from exc

    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    if amount <= 0:
        raise ValidationError(f"{field} must be greater than zero")

    quantized = _quantize_two_decimals(amount)
    if quantized <= 0:
        # Amounts such as 0.001 round down to zero.
        raise ValidationError(f"{field} must be at least 0.01")
    return quantized


def parse_date(raw: str, field: str = "date") -> date:
    """Parse a ``YYYY-MM-DD`` string into a calendar date."""
    text = raw.strip()
    if not text:
        raise MissingFieldError(f"{field} is required")
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError as exc:
        raise ValidationError(f"{field} must use the YYYY-MM-DD format") from exc


def validate_date(value: object, field: str = "date") -> date:
    if value is None:
        raise MissingFieldError(f"{field} is required")
    # datetime subclasses date; a time component is not part of an expense.
    if isinstance(value, datetime):
        raise ValidationError(f"{field} must be a calendar date without a time component")
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_date(value, field)
    raise ValidationError(f"{field} must be a date or a YYYY-MM-DD string")


def normalize_description(value: object, field: str = "description") -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value


def is_future_date(value: date, today: Optional[date] = None) -> bool:
    """Return True when ``value`` lies after ``today``.

    Front ends share this predicate so that every entry path applies the same
    policy: future dates are accepted only after an explicit confirmation.
    """
    return value > (today or date.today())


def format_amount(value: Decimal) -> str:
    return f"{value:,.2f}"
