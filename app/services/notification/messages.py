"""
Outbound notification messages.

Consumed by the mailing service; this job only enqueues them.
"""

from decimal import Decimal
from typing import ClassVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_pascal

from app.config.constants import (
    INVESTOR_KYC_REQUEST_QUEUE,
    INVESTOR_NEED_MORE_INVESTMENT_QUEUE,
    INVESTOR_NEW_TRANSACTION_QUEUE,
)


class QueueMessage(BaseModel):
    """Base class for messages published to a named queue."""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    queue_name: ClassVar[str]

    @classmethod
    def actor_name(cls) -> str:
        """Actor name the consumer registers for this queue."""
        return cls.queue_name.replace("-", "_")


class InvestorNewTransactionMessage(QueueMessage):
    """Purchase confirmation."""

    queue_name: ClassVar[str] = INVESTOR_NEW_TRANSACTION_QUEUE

    email_to: str
    invested_amount_usd: Decimal
    invested_amount_token: Decimal
    transaction_amount: Decimal
    transaction_amount_usd: Decimal
    transaction_amount_token: Decimal
    transaction_fee: Decimal
    transaction_asset: str
    link_to_summary_page: str | None = None
    link_transaction_details: str | None = None
    min_amount: Decimal
    more_investment_required: bool = False
    kyc_required: bool = False
    kyc_link: str | None = None


class InvestorKycRequestMessage(QueueMessage):
    """Request to pass KYC."""

    queue_name: ClassVar[str] = INVESTOR_KYC_REQUEST_QUEUE

    email_to: str
    kyc_id: str
    kyc_link: str


class InvestorNeedMoreInvestmentMessage(QueueMessage):
    """Reminder that the minimum investment is not reached yet."""

    queue_name: ClassVar[str] = INVESTOR_NEED_MORE_INVESTMENT_QUEUE

    email_to: str
    invested_amount_usd: Decimal
    min_amount: Decimal
