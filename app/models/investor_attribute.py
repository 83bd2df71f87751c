"""
Investor attribute model.

Secondary index (attribute type, value) -> investor email.
"""

from sqlalchemy import PrimaryKeyConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class InvestorAttribute(Base):
    """Lookup entry resolving a pay-in address, referral code or KYC id to an email."""

    __tablename__ = "investor_attributes"
    __table_args__ = (
        PrimaryKeyConstraint('attribute_type', 'value', name='pk_investor_attribute'),
    )

    attribute_type: Mapped[str] = mapped_column(String(32), nullable=False)
    value: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    def __repr__(self) -> str:
        """String representation."""
        return f"<InvestorAttribute({self.attribute_type}={self.value} -> {self.email})>"
