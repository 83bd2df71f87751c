"""
Phase resolution for the token sale.

Maps a transaction instant and the amount of tokens already sold to the
active price phase. Pure logic: no database, ORM or app-specific code.
"""

from datetime import datetime
from decimal import Decimal

from pricing.constants import DEFAULT_SCHEDULE
from pricing.core.models import (
    CampaignSettings,
    PhaseInfo,
    PricingSchedule,
    TimeDiscountTier,
    TokenPricePhase,
)


class PhaseResolver:
    """
    Resolves the price phase for a given instant and sold volume.

    Evaluation order:
    1. Outside presale and crowdsale windows -> None
    2. Presale -> flat presale discount
    3. Crowdsale below the initial volume threshold -> initial discount
    4. Crowdsale above the threshold -> discount by elapsed time
    """

    def __init__(
        self,
        settings: CampaignSettings,
        schedule: PricingSchedule = DEFAULT_SCHEDULE,
    ) -> None:
        self.settings = settings
        self.schedule = schedule

    def is_pre_sale(self, tx_created_utc: datetime) -> bool:
        """Check if instant falls into the presale window."""
        return self.settings.pre_sale_start_utc <= tx_created_utc < self.settings.pre_sale_end_utc

    def is_crowd_sale(self, tx_created_utc: datetime) -> bool:
        """Check if instant falls into the crowdsale window."""
        return self.settings.crowd_sale_start_utc <= tx_created_utc < self.settings.crowd_sale_end_utc

    def price_for(self, discount_percent: Decimal) -> Decimal:
        """
        Apply discount to base token price.

        Formula: base_price * (100 - discount_percent) / 100

        Example:
            >>> resolver.price_for(Decimal("25"))  # base price 1.00
            Decimal('0.75')
        """
        return self.settings.token_base_price_usd * (100 - discount_percent) / 100

    def resolve(
        self,
        tx_created_utc: datetime,
        current_total: Decimal,
    ) -> PhaseInfo | None:
        """
        Resolve active phase.

        Args:
            tx_created_utc: Transaction instant
            current_total: Tokens sold before this transaction

        Returns:
            PhaseInfo, or None when the instant is out of campaign dates
        """
        if self.is_pre_sale(tx_created_utc):
            return PhaseInfo(
                phase=TokenPricePhase.PRE_SALE,
                price=self.price_for(self.schedule.pre_sale_discount_percent),
            )

        if not self.is_crowd_sale(tx_created_utc):
            return None

        threshold = self.schedule.initial_volume_threshold
        if current_total < threshold:
            return PhaseInfo(
                phase=TokenPricePhase.CROWD_SALE_INITIAL,
                price=self.price_for(self.schedule.initial_volume_discount_percent),
                volume_threshold=threshold,
            )

        return self.resolve_time_tier(tx_created_utc)

    def resolve_time_tier(self, tx_created_utc: datetime) -> PhaseInfo:
        """
        Resolve crowdsale phase by elapsed time only, ignoring sold volume.

        Args:
            tx_created_utc: Transaction instant

        Returns:
            PhaseInfo of the matching time tier
        """
        tier = self._find_time_tier(tx_created_utc)
        return PhaseInfo(
            phase=tier.phase,
            price=self.price_for(tier.discount_percent),
            referral_eligible=tier.referral_eligible,
        )

    def _find_time_tier(self, tx_created_utc: datetime) -> TimeDiscountTier:
        elapsed = tx_created_utc - self.settings.crowd_sale_start_utc
        for tier in self.schedule.time_tiers:
            if tier.boundary is None or elapsed < tier.boundary:
                return tier

        # Schedule without an open-ended tier: the last one keeps applying
        return self.schedule.time_tiers[-1]
