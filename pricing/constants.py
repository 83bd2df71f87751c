"""
Default pricing schedule.

Single source of truth for discount percentages and phase boundaries.
Deployments that disagree on the numbers pass their own PricingSchedule.
"""

from datetime import timedelta
from decimal import Decimal

from pricing.core.models import PricingSchedule, TimeDiscountTier, TokenPricePhase

# First 20,000,000 crowdsale tokens are sold at the initial discount
CROWD_SALE_INITIAL_AMOUNT = Decimal("20000000")

DEFAULT_SCHEDULE = PricingSchedule(
    pre_sale_discount_percent=Decimal("25"),
    initial_volume_threshold=CROWD_SALE_INITIAL_AMOUNT,
    initial_volume_discount_percent=Decimal("25"),
    time_tiers=(
        TimeDiscountTier(
            boundary=timedelta(days=1),
            discount_percent=Decimal("20"),
            phase=TokenPricePhase.CROWD_SALE_FIRST_DAY,
        ),
        TimeDiscountTier(
            boundary=timedelta(days=7),
            discount_percent=Decimal("15"),
            phase=TokenPricePhase.CROWD_SALE_FIRST_WEEK,
        ),
        TimeDiscountTier(
            boundary=timedelta(days=14),
            discount_percent=Decimal("10"),
            phase=TokenPricePhase.CROWD_SALE_SECOND_WEEK,
            referral_eligible=True,
        ),
        TimeDiscountTier(
            boundary=None,
            discount_percent=Decimal("0"),
            phase=TokenPricePhase.CROWD_SALE_LAST_WEEK,
            referral_eligible=True,
        ),
    ),
)
