"""
Campaign settings model.

Single-row table with the sale configuration, managed outside this job.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DECIMAL, Boolean, DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class CampaignSettingsRecord(Base):
    """Stored campaign configuration."""

    __tablename__ = "campaign_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)

    # Presale
    pre_sale_start_utc: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    pre_sale_end_utc: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    pre_sale_total_tokens_amount: Mapped[Decimal] = mapped_column(DECIMAL(38, 18), nullable=False)

    # Crowdsale
    crowd_sale_start_utc: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    crowd_sale_end_utc: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    crowd_sale_total_tokens_amount: Mapped[Decimal] = mapped_column(DECIMAL(38, 18), nullable=False)

    # Token
    token_base_price_usd: Mapped[Decimal] = mapped_column(DECIMAL(38, 18), nullable=False)
    token_decimals: Mapped[int] = mapped_column(Integer, nullable=False)

    # Limits
    min_invest_amount_usd: Mapped[Decimal] = mapped_column(DECIMAL(38, 18), nullable=False)
    hard_cap_usd: Mapped[Decimal] = mapped_column(DECIMAL(38, 18), nullable=False)

    # Referral program
    enable_referral_program: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    referral_discount: Mapped[Decimal | None] = mapped_column(DECIMAL(5, 2), nullable=True)
    referral_owner_discount: Mapped[Decimal | None] = mapped_column(DECIMAL(5, 2), nullable=True)
    referral_code_length: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # KYC
    kyc_enable_request_sending: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    kyc_threshold_usd: Mapped[Decimal | None] = mapped_column(DECIMAL(38, 18), nullable=True)

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<CampaignSettingsRecord(pre_sale={self.pre_sale_start_utc}..{self.pre_sale_end_utc}, "
            f"crowd_sale={self.crowd_sale_start_utc}..{self.crowd_sale_end_utc})>"
        )
