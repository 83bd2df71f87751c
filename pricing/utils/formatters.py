"""
Formatting utilities for token and USD amounts.

Used for notification payloads and log lines.
"""

import json
from collections.abc import Iterable
from decimal import Decimal
from typing import TYPE_CHECKING

from pricing.utils.rounding import round_down


if TYPE_CHECKING:
    from pricing.core.models import TokenPrice


def format_usd(amount: Decimal) -> Decimal:
    """Round USD amount down to cents."""
    return round_down(amount, 2)


def format_tokens(amount: Decimal, decimals: int = 4) -> Decimal:
    """Round token amount down to display precision."""
    return round_down(amount, decimals)


def price_list_to_json(price_list: Iterable["TokenPrice"]) -> str:
    """
    Serialize price tiers for audit storage.

    Args:
        price_list: Price tiers produced by the pricing engine

    Returns:
        JSON array of {count, price, phase} objects

    Example:
        >>> price_list_to_json([TokenPrice(count=Decimal("1"), price=Decimal("0.75"), phase="PreSale")])
        '[{"count": "1", "price": "0.75", "phase": "PreSale"}]'
    """
    return json.dumps([tier.model_dump(mode="json") for tier in price_list])
