"""
Blockchain transaction queue task.

Processes deposits detected on investor pay-in addresses.
"""

from typing import Any

import dramatiq
from loguru import logger
from pydantic import ValidationError

from app.config.constants import BLOCKCHAIN_TRANSACTION_QUEUE
from app.services.blockchain_transaction_service import BlockchainTransactionService
from app.services.transaction import BlockchainTransactionMessage
from app.utils.exceptions import InvalidQueuePayloadError, is_transient
from app.utils.security import mask_tx_hash
from jobs.async_runner import run_async
from jobs.utils.processing import process_with_investor_lock, transaction_service_context


@dramatiq.actor(
    queue_name=BLOCKCHAIN_TRANSACTION_QUEUE,
    max_retries=5,
    time_limit=120_000,  # 2 min timeout
    throws=(InvalidQueuePayloadError,),
)
def process_blockchain_transaction(payload: dict[str, Any]) -> str | None:
    """
    Process one blockchain deposit.

    Args:
        payload: BlockchainTransactionMessage in wire format

    Returns:
        Processing outcome value, or None if the address is not an investor's
    """
    try:
        message = BlockchainTransactionMessage.model_validate(payload)
    except ValidationError as e:
        logger.error(f"Invalid blockchain transaction message {payload}: {e}")
        raise InvalidQueuePayloadError(str(e)) from e

    try:
        outcome = run_async(_process_blockchain_transaction_async(message))
    except Exception as e:
        if is_transient(e):
            logger.warning(
                f"Blockchain transaction {mask_tx_hash(message.transaction_id)} "
                f"will be retried: {e}"
            )
        else:
            logger.exception(f"Blockchain transaction processing failed: {e}")
        raise

    return outcome.value if outcome is not None else None


async def _process_blockchain_transaction_async(message: BlockchainTransactionMessage):
    """Async implementation of blockchain transaction processing."""
    async with transaction_service_context() as transaction_service:
        service = BlockchainTransactionService(transaction_service.session, transaction_service)

        transaction = await service.to_transaction_message(message)
        if transaction is None:
            return None

        return await process_with_investor_lock(transaction_service, transaction)
