"""
Common numeric helpers shared by the promotion services.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP


MONEY_PLACES = Decimal('0.01')


def to_decimal(value, default=Decimal('0')):
    """
    Convert a loosely typed value (int, float, str, Decimal) to Decimal.

    Floats go through str() so 0.1 becomes Decimal('0.1') rather than the
    binary expansion. Booleans and unparseable values return ``default``.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return default


def parse_number(value):
    """Return a Decimal if value is numeric, otherwise None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def quantize_money(amount):
    """Round a monetary amount to cents (half up)"""
    return to_decimal(amount).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)
