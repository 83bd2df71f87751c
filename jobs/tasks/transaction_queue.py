"""
Transaction queue task.

Processes investment events published on the transaction queue.
Fatal errors are re-raised so the broker redelivers the message.
"""

from typing import Any

import dramatiq
from loguru import logger
from pydantic import ValidationError

from app.config.constants import TRANSACTION_QUEUE
from app.services.transaction import TransactionMessage
from app.utils.exceptions import InvalidQueuePayloadError, is_transient
from app.utils.security import mask_email
from jobs.async_runner import run_async
from jobs.utils.processing import process_with_investor_lock, transaction_service_context


@dramatiq.actor(
    queue_name=TRANSACTION_QUEUE,
    max_retries=5,
    time_limit=120_000,  # 2 min timeout
    throws=(InvalidQueuePayloadError,),
)
def process_transaction(payload: dict[str, Any]) -> str:
    """
    Process one investment event.

    Args:
        payload: TransactionMessage in wire format

    Returns:
        Processing outcome value
    """
    try:
        message = TransactionMessage.model_validate(payload)
    except ValidationError as e:
        logger.error(f"Invalid transaction message {payload}: {e}")
        raise InvalidQueuePayloadError(str(e)) from e

    try:
        outcome = run_async(_process_transaction_async(message))
    except Exception as e:
        if is_transient(e):
            logger.warning(
                f"Transaction {message.unique_id} of {mask_email(message.email)} "
                f"will be retried: {e}"
            )
        else:
            logger.exception(f"Transaction processing failed: {e}")
        raise

    return outcome.value


async def _process_transaction_async(message: TransactionMessage):
    """Async implementation of transaction processing."""
    async with transaction_service_context() as service:
        return await process_with_investor_lock(service, message)
