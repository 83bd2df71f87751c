"""
Transaction processing.

Inbound messages, business validation and the transaction processor.
"""

from app.services.transaction.messages import BlockchainTransactionMessage, TransactionMessage
from app.services.transaction.service import ProcessingOutcome, TransactionService
from app.services.transaction.validator import TransactionValidator

__all__ = [
    "TransactionMessage",
    "BlockchainTransactionMessage",
    "TransactionValidator",
    "TransactionService",
    "ProcessingOutcome",
]
