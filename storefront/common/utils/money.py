from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional


CENT = Decimal("0.01")


def to_decimal(value) -> Optional[Decimal]:
    """Coerce a stored money value (Decimal, float, int or string) to Decimal.

    Returns None when the value is not a finite number.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not d.is_finite():
        return None
    return d


def quantize(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_float(value) -> float:
    d = to_decimal(value)
    return float(quantize(d)) if d is not None else 0.0
