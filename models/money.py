"""
models/money.py
---------------
Decimal helpers for monetary amounts (two fractional digits).
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from utils.errors import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
# Largest value a NUMERIC(12,2) column holds.
MAX_AMOUNT = Decimal("9999999999.99")


def to_decimal(value, field_name: str = "amount") -> Decimal:
    """
    Convert user or database input to a Decimal rounded to cents.

    Floats go through ``str`` first so 19.99 stays 19.99.

    Raises:
        ValidationError: If the value is not a finite number or does not
            fit the ledger columns (more than MAX_AMOUNT in magnitude).
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number, got {value!r}")
    try:
        raw = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError) as e:
        raise ValidationError(f"{field_name} must be a number, got {value!r}") from e
    if not raw.is_finite():
        raise ValidationError(f"{field_name} must be a finite number, got {value!r}")
    try:
        amount = raw.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ValidationError(f"{field_name} is out of range, got {value!r}") from e
    if abs(amount) > MAX_AMOUNT:
        raise ValidationError(f"{field_name} must not exceed {MAX_AMOUNT}, got {value!r}")
    return amount


def to_amount(value, field_name: str = "amount") -> Decimal:
    """Like `to_decimal`, but the result must be strictly positive."""
    amount = to_decimal(value, field_name)
    if amount <= 0:
        raise ValidationError(f"{field_name} must be positive, got {value!r}")
    return amount


def round_half_up(value: Decimal) -> Decimal:
    """Round an intermediate result (e.g. an average) to cents."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
