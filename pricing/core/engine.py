"""
Pure business logic for converting invested USD into token tiers.

This module contains standalone pricing logic without any dependencies on
database, ORM, or app-specific code.
"""

from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal

from pricing.constants import DEFAULT_SCHEDULE
from pricing.core.models import (
    CampaignSettings,
    PhaseInfo,
    PricingSchedule,
    ReferralContext,
    TokenPrice,
    TokenPricePhase,
)
from pricing.core.phase_resolver import PhaseResolver
from pricing.utils.rounding import round_down


class PricingEngine:
    """
    Converts a USD amount into an ordered list of priced token tiers.

    A purchase yields one tier, or two when it crosses the initial volume
    threshold. Token counts are always rounded down.
    """

    def __init__(self, schedule: PricingSchedule = DEFAULT_SCHEDULE) -> None:
        self.schedule = schedule

    def get_price_list(
        self,
        settings: CampaignSettings,
        referral: ReferralContext,
        tx_created_utc: datetime,
        amount_usd: Decimal,
        current_total: Decimal,
    ) -> list[TokenPrice] | None:
        """
        Price a purchase.

        Args:
            settings: Campaign settings snapshot
            referral: Investor referral state
            tx_created_utc: Transaction instant
            amount_usd: Invested amount in USD
            current_total: Tokens sold before this transaction

        Returns:
            Ordered list of tiers (at least one), or None if out of dates

        Example:
            >>> engine.get_price_list(settings, referral, now, Decimal("1"), Decimal("19999999"))
            [TokenPrice(count=Decimal('1'), price=Decimal('0.75'), ...),
             TokenPrice(count=Decimal('0.3125'), price=Decimal('0.80'), ...)]
        """
        resolver = PhaseResolver(settings, self.schedule)
        phase_info = resolver.resolve(tx_created_utc, current_total)
        if phase_info is None:
            return None

        decimals = settings.token_decimals

        if phase_info.referral_eligible:
            referral_phase = self._get_referral_phase(settings, referral, resolver)
            if referral_phase is not None:
                return [self._tier(amount_usd, referral_phase, decimals)]

        if phase_info.volume_threshold is not None and current_total < phase_info.volume_threshold:
            return self._split_at_threshold(
                resolver, phase_info, tx_created_utc, amount_usd, current_total, decimals
            )

        return [self._tier(amount_usd, phase_info, decimals)]

    def _split_at_threshold(
        self,
        resolver: PhaseResolver,
        phase_info: PhaseInfo,
        tx_created_utc: datetime,
        amount_usd: Decimal,
        current_total: Decimal,
        decimals: int,
    ) -> list[TokenPrice]:
        low = self._tier(amount_usd, phase_info, decimals)
        tokens_below = phase_info.volume_threshold - current_total

        if low.count <= tokens_below:
            return [low]

        below = TokenPrice(count=tokens_below, price=phase_info.price, phase=phase_info.phase.value)
        amount_usd_above = amount_usd - tokens_below * phase_info.price
        above = self._tier(amount_usd_above, resolver.resolve_time_tier(tx_created_utc), decimals)

        return [below, above]

    def _get_referral_phase(
        self,
        settings: CampaignSettings,
        referral: ReferralContext,
        resolver: PhaseResolver,
    ) -> PhaseInfo | None:
        """Referral price for the whole purchase, if one applies.

        An applied code wins over the owner discount.
        """
        if not settings.enable_referral_program:
            return None

        if settings.referral_discount is not None and referral.referral_code_applied:
            return PhaseInfo(
                phase=TokenPricePhase.REFERRAL_DISCOUNT,
                price=resolver.price_for(settings.referral_discount),
            )

        if settings.referral_owner_discount is not None and referral.referrals_number > 0:
            return PhaseInfo(
                phase=TokenPricePhase.REFERRAL_OWNER_DISCOUNT,
                price=resolver.price_for(settings.referral_owner_discount),
            )

        return None

    @staticmethod
    def _tier(amount_usd: Decimal, phase_info: PhaseInfo, decimals: int) -> TokenPrice:
        return TokenPrice(
            count=round_down(amount_usd / phase_info.price, decimals),
            price=phase_info.price,
            phase=phase_info.phase.value,
        )


def total_tokens(price_list: Sequence[TokenPrice]) -> Decimal:
    """Sum token counts across tiers."""
    return sum((tier.count for tier in price_list), Decimal("0"))


def effective_price(price_list: Sequence[TokenPrice], amount_usd: Decimal) -> Decimal:
    """
    Effective unit price of a purchase.

    A single tier keeps its own price; several tiers give the USD-weighted
    average amount_usd / total_tokens.
    """
    if len(price_list) == 1:
        return price_list[0].price

    return amount_usd / total_tokens(price_list)
