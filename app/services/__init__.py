"""
Services.

Business logic layer.
"""

# Base Service Infrastructure
from app.services.base_service import (
    BaseService,
    ServiceResult,
    log_operation,
    side_effect,
)

# Transaction Processing
from app.services.blockchain_transaction_service import BlockchainTransactionService
from app.services.refund_service import RefundService
from app.services.transaction import (
    BlockchainTransactionMessage,
    ProcessingOutcome,
    TransactionMessage,
    TransactionService,
    TransactionValidator,
)

# Collaborators
from app.services.exchange_rate_client import AverageRate, ExchangeRateClient
from app.services.kyc_service import KycService
from app.services.notification import NotificationPublishers, QueuePublisher
from app.services.referral_code_service import ReferralCodeService

__all__ = [
    # Base
    "BaseService",
    "ServiceResult",
    "log_operation",
    "side_effect",
    # Transaction Processing
    "TransactionService",
    "TransactionValidator",
    "TransactionMessage",
    "BlockchainTransactionMessage",
    "BlockchainTransactionService",
    "ProcessingOutcome",
    "RefundService",
    # Collaborators
    "AverageRate",
    "ExchangeRateClient",
    "KycService",
    "NotificationPublishers",
    "QueuePublisher",
    "ReferralCodeService",
]
