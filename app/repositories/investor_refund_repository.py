"""
Investor refund repository.

Data access layer for InvestorRefund model.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import InvestorRefundReason
from app.models.investor_refund import InvestorRefund
from app.repositories.base import BaseRepository


class InvestorRefundRepository(BaseRepository[InvestorRefund]):
    """Investor refund repository (append-only)."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize investor refund repository."""
        super().__init__(InvestorRefund, session)

    async def save(
        self, email: str, reason: InvestorRefundReason, message_json: str
    ) -> InvestorRefund:
        """
        Append refund record.

        Args:
            email: Investor email
            reason: Rejection reason
            message_json: Raw event payload

        Returns:
            Created refund record
        """
        return await self.create(email=email, reason=reason.value, message_json=message_json)
