"""
Token sale pricing.

Standalone package converting invested USD into token tiers under the
presale / crowdsale discount schedule.

Example:
    >>> from pricing import PricingEngine, ReferralContext
    >>> from decimal import Decimal
    >>>
    >>> engine = PricingEngine()
    >>> price_list = engine.get_price_list(
    ...     settings, ReferralContext(), tx_created_utc, Decimal("1"), Decimal("0")
    ... )
    >>> print(price_list[0].price, price_list[0].count)
    0.75 1.3333
"""

from pricing.constants import CROWD_SALE_INITIAL_AMOUNT, DEFAULT_SCHEDULE
from pricing.core.engine import PricingEngine, effective_price, total_tokens
from pricing.core.models import (
    CampaignSettings,
    PhaseInfo,
    PricingSchedule,
    ReferralContext,
    TimeDiscountTier,
    TokenPrice,
    TokenPricePhase,
)
from pricing.core.phase_resolver import PhaseResolver
from pricing.utils import format_tokens, format_usd, price_list_to_json, round_down


__version__ = "1.0.0"
__all__ = [
    # Core
    "PricingEngine",
    "PhaseResolver",
    "total_tokens",
    "effective_price",
    # Models
    "CampaignSettings",
    "PhaseInfo",
    "PricingSchedule",
    "ReferralContext",
    "TimeDiscountTier",
    "TokenPrice",
    "TokenPricePhase",
    # Constants
    "DEFAULT_SCHEDULE",
    "CROWD_SALE_INITIAL_AMOUNT",
    # Utils
    "round_down",
    "format_usd",
    "format_tokens",
    "price_list_to_json",
]
