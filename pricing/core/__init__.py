"""
Core pricing models.

Phase resolver and engine are imported from their modules directly
(pricing.core.phase_resolver, pricing.core.engine).
"""

from pricing.core.models import (
    CampaignSettings,
    PhaseInfo,
    PricingSchedule,
    ReferralContext,
    TimeDiscountTier,
    TokenPrice,
    TokenPricePhase,
)

__all__ = [
    "CampaignSettings",
    "PhaseInfo",
    "PricingSchedule",
    "ReferralContext",
    "TimeDiscountTier",
    "TokenPrice",
    "TokenPricePhase",
]
