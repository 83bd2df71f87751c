"""
Queue publisher for outbound notifications.

Enqueues pydantic messages on Dramatiq queues served by the mailing service.
"""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

import dramatiq
from dramatiq import Broker
from loguru import logger

from app.services.notification.messages import (
    InvestorKycRequestMessage,
    InvestorNeedMoreInvestmentMessage,
    InvestorNewTransactionMessage,
    QueueMessage,
)


MessageType = TypeVar("MessageType", bound=QueueMessage)


class QueuePublisher(Generic[MessageType]):
    """
    Publishes messages of one type to its queue.

    Example:
        publisher = QueuePublisher(InvestorKycRequestMessage)
        await publisher.send(InvestorKycRequestMessage(email_to=..., kyc_id=..., kyc_link=...))
    """

    def __init__(
        self,
        message_type: type[MessageType],
        broker: Broker | None = None,
    ) -> None:
        """
        Initialize publisher.

        Args:
            message_type: Message class, defines queue and actor name
            broker: Dramatiq broker (defaults to the global broker)
        """
        self.message_type = message_type
        self._broker = broker

    @property
    def broker(self) -> Broker:
        """Broker used for publishing."""
        if self._broker is None:
            self._broker = dramatiq.get_broker()
        return self._broker

    async def send(self, message: MessageType) -> None:
        """
        Enqueue message.

        Args:
            message: Message to publish
        """
        payload = message.model_dump(mode="json", by_alias=True)
        self.broker.enqueue(
            dramatiq.Message(
                queue_name=self.message_type.queue_name,
                actor_name=self.message_type.actor_name(),
                args=(payload,),
                kwargs={},
                options={},
            )
        )
        logger.debug(f"Message published to {self.message_type.queue_name}: {payload}")


@dataclass
class NotificationPublishers:
    """Publishers used by transaction processing."""

    new_transaction: QueuePublisher[InvestorNewTransactionMessage] = field(
        default_factory=lambda: QueuePublisher(InvestorNewTransactionMessage)
    )
    kyc_request: QueuePublisher[InvestorKycRequestMessage] = field(
        default_factory=lambda: QueuePublisher(InvestorKycRequestMessage)
    )
    need_more_investment: QueuePublisher[InvestorNeedMoreInvestmentMessage] = field(
        default_factory=lambda: QueuePublisher(InvestorNeedMoreInvestmentMessage)
    )
