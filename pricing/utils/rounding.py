"""
Rounding helpers for token amounts.

Token counts are always rounded down so the campaign never hands out more
tokens than the received USD pays for.
"""

from decimal import ROUND_FLOOR, Decimal


def round_down(value: Decimal, decimals: int) -> Decimal:
    """
    Round value down (towards negative infinity) to given decimal places.

    Formula: floor(value * 10^decimals) / 10^decimals

    Args:
        value: Amount to round
        decimals: Number of decimal places to keep

    Returns:
        Rounded amount with exactly `decimals` fractional digits

    Example:
        >>> round_down(Decimal("1.33339"), 4)
        Decimal('1.3333')
        >>> round_down(Decimal("0.3125"), 2)
        Decimal('0.31')
    """
    if decimals < 0:
        raise ValueError("decimals must be non-negative")

    quantum = Decimal(1).scaleb(-decimals)
    return value.quantize(quantum, rounding=ROUND_FLOOR)
