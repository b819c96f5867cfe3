"""
Cent arithmetic helpers.

Amounts cross the service boundary as ``Decimal`` with two decimal places
and are converted to integer cents for every calculation, so splits and
transfers reconcile exactly instead of within a float tolerance.
"""

from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP

CENT = Decimal('0.01')
HUNDRED = Decimal(100)


def to_decimal(value) -> Decimal:
    """
    Coerce a caller-supplied amount to ``Decimal``.

    Floats go through ``str()`` so ``0.1`` becomes ``Decimal('0.1')``
    instead of its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def to_cents(value) -> int:
    """Round an amount half away from zero to whole cents."""
    return int((to_decimal(value) * HUNDRED).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def floor_cents(value) -> int:
    """Truncate an amount toward negative infinity to whole cents."""
    return int((to_decimal(value) * HUNDRED).to_integral_value(rounding=ROUND_FLOOR))


def from_cents(cents: int) -> Decimal:
    """Convert integer cents back to a two-place ``Decimal``."""
    return (Decimal(cents) / HUNDRED).quantize(CENT)


def round2(value) -> Decimal:
    """Round an amount half away from zero to two decimal places."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
