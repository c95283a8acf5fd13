"""Shared rounding primitives for currency amounts.

All amounts are ``Decimal``. Floats are converted through ``str`` so that
``0.1`` becomes ``Decimal("0.1")`` rather than its binary expansion.
"""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Decimal | float | int | str) -> Decimal:
    """Convert a number to Decimal without picking up float noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_to_two(value: Decimal | float | int) -> Decimal:
    """
    Round an amount to 2 decimal places.

    Uses ROUND_HALF_UP, which for Decimal rounds ties away from zero:
    ``2.345 -> 2.35`` and ``-2.345 -> -2.35``.

    Args:
        value: Amount to round

    Returns:
        Amount quantized to cents
    """
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def within_tolerance(value: Decimal, tolerance: Decimal = CENT) -> bool:
    """True if ``value`` is strictly closer to zero than ``tolerance``."""
    return abs(value) < tolerance
