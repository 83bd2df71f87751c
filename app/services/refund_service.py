"""
Refund service.

Records rejected investments for manual refund.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import InvestorRefundReason
from app.models.investor_refund import InvestorRefund
from app.repositories.investor_refund_repository import InvestorRefundRepository
from app.services.base_service import BaseService


class RefundService(BaseService):
    """Append-only refund records."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize refund service."""
        super().__init__(session)
        self.refund_repo = InvestorRefundRepository(session)

    async def save(
        self, email: str, reason: InvestorRefundReason, message_json: str
    ) -> InvestorRefund:
        """
        Record refund and commit.

        Args:
            email: Investor email
            reason: Rejection reason
            message_json: Raw event payload

        Returns:
            Created refund record
        """
        refund = await self.refund_repo.save(email, reason, message_json)
        await self.commit()

        self.logger.warning(
            f"Investment refund recorded: reason={reason.value}, payload={message_json}"
        )
        return refund
