"""Shared setup for transaction processing tasks."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import redis.asyncio as redis

from app.config.constants import INVESTOR_LOCK_BLOCKING_TIMEOUT, INVESTOR_LOCK_KEY
from app.config.settings import settings
from app.services.exchange_rate_client import ExchangeRateClient
from app.services.transaction import ProcessingOutcome, TransactionMessage, TransactionService
from app.utils.redis_utils import get_redis_client
from jobs.async_runner import create_local_session


@asynccontextmanager
async def transaction_service_context() -> AsyncIterator[TransactionService]:
    """
    Create TransactionService with task-local session and clients.

    Usage:
        async with transaction_service_context() as service:
            await service.process(message)
    """
    redis_client = get_redis_client()
    exchange_rate_client = ExchangeRateClient()

    try:
        async with create_local_session() as session:
            yield TransactionService(
                session,
                exchange_rate_client,
                redis_client=redis_client,
            )
    finally:
        await exchange_rate_client.close()
        await redis_client.aclose()


def investor_lock(redis_client: redis.Redis, email: str):
    """
    Redis lock serializing processing for one investor.

    Args:
        redis_client: Redis client
        email: Investor email

    Returns:
        Async context manager, raises LockError if not acquired in time
    """
    return redis_client.lock(
        INVESTOR_LOCK_KEY.format(email=email),
        timeout=settings.investor_lock_timeout,
        blocking_timeout=INVESTOR_LOCK_BLOCKING_TIMEOUT,
    )


async def process_with_investor_lock(
    service: TransactionService, message: TransactionMessage
) -> ProcessingOutcome:
    """
    Process transaction while holding the lock of its investor.

    Messages without an email are handed over unlocked, the service rejects them.
    """
    if not message.email:
        return await service.process(message)

    async with investor_lock(service.redis_client, message.email):
        return await service.process(message)
