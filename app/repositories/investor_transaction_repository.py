"""
Investor transaction repository.

Data access layer for InvestorTransaction model.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.investor_transaction import InvestorTransaction
from app.repositories.base import BaseRepository


class InvestorTransactionRepository(BaseRepository[InvestorTransaction]):
    """Investor transaction repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize investor transaction repository."""
        super().__init__(InvestorTransaction, session)

    async def get(self, email: str, unique_id: str) -> InvestorTransaction | None:
        """
        Get transaction by idempotency key.

        Args:
            email: Investor email
            unique_id: Unique transaction id

        Returns:
            InvestorTransaction or None
        """
        return await self.get_by(email=email, unique_id=unique_id)

    async def save(self, transaction: InvestorTransaction) -> InvestorTransaction:
        """
        Insert transaction.

        Raises IntegrityError when (email, unique_id) already exists.

        Args:
            transaction: New transaction

        Returns:
            Saved transaction
        """
        self.session.add(transaction)
        await self.session.flush()
        return transaction
