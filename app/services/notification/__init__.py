"""
Notification services.

Outbound messages and their queue publisher.
"""

from app.services.notification.messages import (
    InvestorKycRequestMessage,
    InvestorNeedMoreInvestmentMessage,
    InvestorNewTransactionMessage,
    QueueMessage,
)
from app.services.notification.publisher import NotificationPublishers, QueuePublisher

__all__ = [
    "QueuePublisher",
    "NotificationPublishers",
    "QueueMessage",
    "InvestorNewTransactionMessage",
    "InvestorKycRequestMessage",
    "InvestorNeedMoreInvestmentMessage",
]
