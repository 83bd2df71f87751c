"""
Exception handling utilities.

Defines categorized exception types for proper error handling.

Processing errors are fatal for the current message: the worker lets them
propagate and the broker redelivers the message. They carry the serialized
message so a failed event can be diagnosed without replaying it.
"""

import asyncio

import aiohttp
from redis.exceptions import RedisError
from sqlalchemy.exc import OperationalError


class SecurityError(Exception):
    """Raised when a security-critical operation fails."""
    pass


class InvalidQueuePayloadError(Exception):
    """Raised when a queue payload can not be parsed; redelivery can not fix it."""


class TransactionProcessingError(Exception):
    """
    Base class for fatal transaction processing errors.

    Attributes:
        message_json: Serialized inbound message
        fault: Human-readable fault description
    """

    def __init__(self, fault: str, message_json: str | None = None) -> None:
        self.fault = fault
        self.message_json = message_json
        super().__init__(fault if message_json is None else f"{fault}. Message: {message_json}")


class InvalidTransactionMessageError(TransactionProcessingError):
    """Raised when a message misses identity fields (email, unique id)."""


class InvestorNotFoundError(TransactionProcessingError):
    """Raised when the investor record does not exist."""


class CampaignSettingsNotFoundError(TransactionProcessingError):
    """Raised when campaign settings are not configured."""


class ExchangeRateNotFoundError(TransactionProcessingError):
    """Raised when the exchange rate service has no rate for the instant."""


class InvalidExchangeRateError(TransactionProcessingError):
    """Raised when the exchange rate is missing, zero or negative."""


# Exception categories based on handling strategy

# Transient infrastructure failures - logged as warnings, message is retried
TRANSIENT_ERRORS = (
    OperationalError,      # Database connectivity
    aiohttp.ClientError,   # Exchange rate service connectivity
    asyncio.TimeoutError,  # External call timeouts
    RedisError,            # Investor lock and latest transactions
)


def is_transient(exc: Exception) -> bool:
    """
    Check if exception is a transient infrastructure failure.

    Args:
        exc: Exception to check

    Returns:
        True if retrying the message may succeed without intervention
    """
    return isinstance(exc, TRANSIENT_ERRORS)
