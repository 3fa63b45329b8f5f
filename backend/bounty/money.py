"""Parsing for the Numeric(10, 2) money columns."""

from decimal import Decimal, InvalidOperation

from bounty.errors import ValidationError

CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("99999999.99")


def parse_money(value, field: str = "Amount", allow_zero: bool = False) -> Decimal:
    """Coerce to a two-place Decimal, rejecting anything the column can't hold."""
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    if amount < 0 or (amount == 0 and not allow_zero):
        raise ValidationError(f"{field} must be {'zero or more' if allow_zero else 'greater than zero'}")
    if amount != amount.quantize(CENT):
        raise ValidationError(f"{field} can have at most two decimal places")
    if amount > MAX_AMOUNT:
        raise ValidationError(f"{field} cannot exceed {MAX_AMOUNT}")
    return amount.quantize(CENT)
