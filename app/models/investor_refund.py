"""
Investor refund model.

Append-only record of rejected investments for manual follow-up.
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class InvestorRefund(Base):
    """Rejected investment awaiting refund."""

    __tablename__ = "investor_refunds"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    reason: Mapped[str] = mapped_column(String(32), nullable=False)
    message_json: Mapped[str] = mapped_column(Text, nullable=False)
    created_utc: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<InvestorRefund(id={self.id}, email={self.email}, reason={self.reason})>"
