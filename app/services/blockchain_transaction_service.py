"""
Blockchain transaction service.

Maps deposits on investor pay-in addresses to investment transactions.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.constants import BLOCKCHAIN_EXPLORER_URLS
from app.models.enums import InvestorAttributeType
from app.repositories.investor_attribute_repository import InvestorAttributeRepository
from app.services.base_service import BaseService, log_operation
from app.services.transaction import (
    BlockchainTransactionMessage,
    ProcessingOutcome,
    TransactionMessage,
    TransactionService,
)
from app.utils.security import mask_address, mask_tx_hash


class BlockchainTransactionService(BaseService):
    """Resolves the investor behind a deposit and processes the investment."""

    def __init__(
        self, session: AsyncSession, transaction_service: TransactionService
    ) -> None:
        """
        Initialize blockchain transaction service.

        Args:
            session: Async database session
            transaction_service: Processor the resolved transaction is handed to
        """
        super().__init__(session)
        self.attribute_repo = InvestorAttributeRepository(session)
        self.transaction_service = transaction_service

    @log_operation
    async def process(
        self, message: BlockchainTransactionMessage
    ) -> ProcessingOutcome | None:
        """
        Process deposit.

        Args:
            message: Deposit detected on a pay-in address

        Returns:
            ProcessingOutcome, or None if the address belongs to no investor
        """
        transaction = await self.to_transaction_message(message)
        if transaction is None:
            return None

        return await self.transaction_service.process(transaction)

    async def to_transaction_message(
        self, message: BlockchainTransactionMessage
    ) -> TransactionMessage | None:
        """
        Resolve the investor owning the pay-in address.

        Args:
            message: Deposit detected on a pay-in address

        Returns:
            TransactionMessage of the investor, or None if the address belongs to no investor
        """
        attribute_type = InvestorAttributeType.pay_in_address_for(message.currency_type)
        if attribute_type is None:
            self.logger.warning(
                f"Unsupported blockchain currency {message.currency_type.value}, "
                f"tx={mask_tx_hash(message.transaction_id)}"
            )
            return None

        email = await self.attribute_repo.get_investor_email(
            attribute_type, message.destination_address
        )
        if not email:
            self.logger.debug(
                f"Address {mask_address(message.destination_address)} is not a pay-in "
                f"address of any investor, tx={mask_tx_hash(message.transaction_id)}"
            )
            return None

        return TransactionMessage(
            email=email,
            unique_id=message.transaction_id,
            currency=message.currency_type,
            amount=message.amount,
            fee=message.fee,
            block_id=message.block_id,
            transaction_id=message.transaction_id,
            pay_in_address=message.destination_address,
            created_utc=message.block_timestamp,
            link=message.link or self._explorer_link(message),
        )

    @staticmethod
    def _explorer_link(message: BlockchainTransactionMessage) -> str | None:
        base_url = BLOCKCHAIN_EXPLORER_URLS.get(message.currency_type.value)
        if base_url is None:
            return None

        # Transaction ids may carry an output index suffix: <hash>-<n>
        tx_hash = message.transaction_id.split("-")[0]
        return f"{base_url}/{tx_hash}"
