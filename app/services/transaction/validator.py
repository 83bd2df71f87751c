"""
Transaction business validation.

Decides whether an investment is accepted or must be refunded.
"""

from datetime import datetime
from decimal import Decimal

from app.models.enums import InvestorRefundReason
from pricing import CampaignSettings, PhaseResolver


class TransactionValidator:
    """
    Business rules checked before an investment is priced.

    Rules are evaluated in order, the first failing rule wins.
    """

    def __init__(self, settings: CampaignSettings) -> None:
        """
        Initialize validator.

        Args:
            settings: Campaign settings snapshot
        """
        self.settings = settings
        self.resolver = PhaseResolver(settings)

    def validate(
        self,
        tx_created_utc: datetime,
        sold_tokens: Decimal,
        invested_usd: Decimal,
    ) -> InvestorRefundReason | None:
        """
        Validate investment against campaign state.

        Args:
            tx_created_utc: Transaction instant
            sold_tokens: Tokens sold so far (ledger)
            invested_usd: USD invested so far (ledger)

        Returns:
            Refund reason, or None if the investment is accepted
        """
        is_pre_sale = self.resolver.is_pre_sale(tx_created_utc)
        is_crowd_sale = self.resolver.is_crowd_sale(tx_created_utc)

        if not is_pre_sale and not is_crowd_sale:
            return InvestorRefundReason.OUT_OF_DATES

        if is_pre_sale and sold_tokens >= self.settings.pre_sale_total_tokens_amount:
            return InvestorRefundReason.PRE_SALE_TOKENS_SOLD_OUT

        if is_crowd_sale:
            if sold_tokens >= self.settings.total_tokens_amount:
                return InvestorRefundReason.TOKENS_SOLD_OUT
            if invested_usd >= self.settings.hard_cap_usd:
                return InvestorRefundReason.HARD_CAP_USD_EXCEEDED

        return None
