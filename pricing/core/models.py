"""Pydantic models for pricing."""

from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TokenPricePhase(str, Enum):
    """Price phases a token tier can be sold under."""

    PRE_SALE = "PreSale"
    CROWD_SALE_INITIAL = "CrowdSaleInitial"
    CROWD_SALE_FIRST_DAY = "CrowdSaleFirstDay"
    CROWD_SALE_FIRST_WEEK = "CrowdSaleFirstWeek"
    CROWD_SALE_SECOND_WEEK = "CrowdSaleSecondWeek"
    CROWD_SALE_LAST_WEEK = "CrowdSaleLastWeek"
    REFERRAL_DISCOUNT = "ReferralDiscount"
    REFERRAL_OWNER_DISCOUNT = "ReferralOwnerDiscount"


class CampaignSettings(BaseModel):
    """Snapshot of campaign configuration.

    Read once per processed transaction and never mutated.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    pre_sale_start_utc: datetime = Field(..., description="Presale window start (inclusive)")
    pre_sale_end_utc: datetime = Field(..., description="Presale window end (exclusive)")
    pre_sale_total_tokens_amount: Decimal = Field(..., ge=0, description="Presale token cap")
    crowd_sale_start_utc: datetime = Field(..., description="Crowdsale window start (inclusive)")
    crowd_sale_end_utc: datetime = Field(..., description="Crowdsale window end (exclusive)")
    crowd_sale_total_tokens_amount: Decimal = Field(..., ge=0, description="Crowdsale token cap")
    token_base_price_usd: Decimal = Field(..., gt=0, description="Undiscounted token price")
    token_decimals: int = Field(..., ge=0, le=18, description="Token decimal precision")
    min_invest_amount_usd: Decimal = Field(..., ge=0, description="Minimum investment in USD")
    hard_cap_usd: Decimal = Field(..., ge=0, description="Maximum USD the campaign accepts")
    enable_referral_program: bool = False
    referral_discount: Decimal | None = Field(default=None, ge=0, lt=100)
    referral_owner_discount: Decimal | None = Field(default=None, ge=0, lt=100)
    referral_code_length: int | None = Field(default=None, gt=0)
    kyc_enable_request_sending: bool = False
    kyc_threshold_usd: Decimal | None = Field(default=None, ge=0)

    @property
    def total_tokens_amount(self) -> Decimal:
        """Overall token cap (presale + crowdsale)."""
        return self.pre_sale_total_tokens_amount + self.crowd_sale_total_tokens_amount

    @property
    def kyc_threshold(self) -> Decimal:
        """Cumulative USD that triggers a KYC request."""
        if self.kyc_threshold_usd is None:
            return self.min_invest_amount_usd
        return self.kyc_threshold_usd


class TimeDiscountTier(BaseModel):
    """Crowdsale discount applied until `boundary` has elapsed since crowdsale start.

    A tier with `boundary=None` is open-ended and must come last.
    """

    model_config = ConfigDict(frozen=True)

    boundary: timedelta | None = Field(default=None, description="Elapsed-time upper bound (exclusive)")
    discount_percent: Decimal = Field(..., ge=0, lt=100)
    phase: TokenPricePhase
    referral_eligible: bool = Field(default=False, description="Referral discounts override this tier")


class PricingSchedule(BaseModel):
    """Ordered discount table for presale and crowdsale."""

    model_config = ConfigDict(frozen=True)

    pre_sale_discount_percent: Decimal = Field(..., ge=0, lt=100)
    initial_volume_threshold: Decimal = Field(..., ge=0, description="Tokens sold at the initial discount")
    initial_volume_discount_percent: Decimal = Field(..., ge=0, lt=100)
    time_tiers: tuple[TimeDiscountTier, ...] = Field(..., min_length=1)


class PhaseInfo(BaseModel):
    """Active phase for an instant and sold volume."""

    model_config = ConfigDict(frozen=True)

    phase: TokenPricePhase
    price: Decimal = Field(..., gt=0)
    volume_threshold: Decimal | None = None
    referral_eligible: bool = False


class TokenPrice(BaseModel):
    """One priced slice of a purchase."""

    model_config = ConfigDict(frozen=True)

    count: Decimal = Field(..., ge=0, description="Tokens bought at this price")
    price: Decimal = Field(..., ge=0, description="Unit price in USD")
    phase: str = Field(..., description="Phase label")


class ReferralContext(BaseModel):
    """Investor referral state relevant to pricing."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    referral_code_applied: str | None = None
    referrals_number: int = Field(default=0, ge=0)
