"""
Investor transaction model.

One accepted investment, written exactly once per (email, unique_id).
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import DECIMAL, DateTime, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class InvestorTransaction(Base):
    """Investor transaction - immutable audit of a priced investment."""

    __tablename__ = "investor_transactions"
    __table_args__ = (
        # Idempotency key: a redelivered event can never be stored twice
        UniqueConstraint('email', 'unique_id', name='uq_investor_transaction_email_unique_id'),
        Index('idx_investor_transaction_created', 'created_utc'),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Idempotency key
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    unique_id: Mapped[str] = mapped_column(String(255), nullable=False)

    # Source data
    created_utc: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    currency: Mapped[str] = mapped_column(String(16), nullable=False)
    transaction_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    block_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    pay_in_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    amount: Mapped[Decimal] = mapped_column(DECIMAL(38, 18), nullable=False)
    fee: Mapped[Decimal] = mapped_column(
        DECIMAL(38, 18), nullable=False, default=Decimal("0")
    )

    # Computed data
    amount_usd: Mapped[Decimal] = mapped_column(DECIMAL(38, 18), nullable=False)
    amount_token: Mapped[Decimal] = mapped_column(DECIMAL(38, 18), nullable=False)
    token_price: Mapped[Decimal] = mapped_column(DECIMAL(38, 18), nullable=False)
    token_price_context: Mapped[str] = mapped_column(
        Text, nullable=False, comment="JSON list of price tiers"
    )
    exchange_rate: Mapped[Decimal] = mapped_column(DECIMAL(38, 18), nullable=False)
    exchange_rate_context: Mapped[str] = mapped_column(
        Text, nullable=False, comment="JSON list of source rates"
    )

    processed_utc: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<InvestorTransaction(email={self.email}, unique_id={self.unique_id}, "
            f"amount={self.amount} {self.currency}, amount_token={self.amount_token})>"
        )
