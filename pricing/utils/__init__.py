"""
Utility functions for pricing.

Rounding and formatting helpers.
"""

from pricing.utils.formatters import format_tokens, format_usd, price_list_to_json
from pricing.utils.rounding import round_down

__all__ = [
    "round_down",
    "format_usd",
    "format_tokens",
    "price_list_to_json",
]
