"""
Investor model.

Per-investor account with cumulative investment totals.
"""

import uuid
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import DECIMAL, CheckConstraint, DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class Investor(Base):
    """Investor account keyed by email."""

    __tablename__ = "investors"
    __table_args__ = (
        CheckConstraint('amount_usd >= 0', name='check_investor_amount_usd_non_negative'),
        CheckConstraint('amount_token >= 0', name='check_investor_amount_token_non_negative'),
        CheckConstraint('referrals_number >= 0', name='check_investor_referrals_non_negative'),
    )

    # Primary key
    email: Mapped[str] = mapped_column(String(255), primary_key=True)

    # Summary page access
    confirmation_token: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, nullable=True
    )

    # Pay-in addresses (also indexed in investor_attributes)
    pay_in_btc_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    pay_in_eth_address: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Cumulative amounts
    amount_btc: Mapped[Decimal] = mapped_column(
        DECIMAL(38, 18), nullable=False, default=Decimal("0")
    )
    amount_eth: Mapped[Decimal] = mapped_column(
        DECIMAL(38, 18), nullable=False, default=Decimal("0")
    )
    amount_fiat: Mapped[Decimal] = mapped_column(
        DECIMAL(38, 18), nullable=False, default=Decimal("0")
    )
    amount_usd: Mapped[Decimal] = mapped_column(
        DECIMAL(38, 18), nullable=False, default=Decimal("0")
    )
    amount_token: Mapped[Decimal] = mapped_column(
        DECIMAL(38, 18), nullable=False, default=Decimal("0")
    )

    # KYC
    kyc_request_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    kyc_requested_utc: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Referral program
    referral_code: Mapped[str | None] = mapped_column(
        String(32), nullable=True, unique=True
    )
    referral_code_utc: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    referral_code_applied: Mapped[str | None] = mapped_column(String(32), nullable=True)
    referrals_number: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )

    # Timestamps
    updated_utc: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Investor(email={self.email}, amount_usd={self.amount_usd}, "
            f"amount_token={self.amount_token})>"
        )

    @property
    def has_kyc_request(self) -> bool:
        """Check if KYC was already requested."""
        return self.kyc_request_id is not None
