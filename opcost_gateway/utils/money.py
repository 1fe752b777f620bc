"""Cent rounding helpers"""

from decimal import Decimal, ROUND_HALF_UP

WHOLE_CENT = Decimal("1")


def round_cents(value: float | int) -> int:
    """Round a fractional cent amount to whole cents, half away from zero"""
    return int(Decimal(value).quantize(WHOLE_CENT, rounding=ROUND_HALF_UP))


def percent_of(part: float, whole: float) -> float:
    """Percentage of part in whole (0.0 when whole is zero)"""
    if not whole:
        return 0.0
    return part / whole * 100
