"""
Campaign info model.

Named campaign-wide counters (amount invested per currency, tokens, USD).
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import DECIMAL, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class CampaignInfo(Base):
    """Campaign ledger counter, only ever incremented."""

    __tablename__ = "campaign_info"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[Decimal] = mapped_column(
        DECIMAL(38, 18), nullable=False, default=Decimal("0")
    )
    updated_utc: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<CampaignInfo({self.name}={self.value})>"
