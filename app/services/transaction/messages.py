"""
Inbound queue messages.

Field names travel in PascalCase on the wire (EmailTo, UniqueId, ...), as
produced by the payment gateways; Python code uses snake_case.
"""

from datetime import UTC, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_pascal

from app.models.enums import CurrencyType


def _as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC, convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class TransactionMessage(BaseModel):
    """Investment event for one investor."""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    email: str | None = None
    unique_id: str | None = None
    currency: CurrencyType
    amount: Decimal = Field(..., ge=0)
    fee: Decimal = Decimal("0")
    block_id: str | None = None
    transaction_id: str | None = None
    pay_in_address: str | None = None
    created_utc: datetime
    link: str | None = None

    @field_validator('created_utc')
    @classmethod
    def validate_created_utc(cls, v: datetime) -> datetime:
        """Normalize timestamp to UTC."""
        return _as_utc(v)

    def to_json(self) -> str:
        """Serialize message in wire format."""
        return self.model_dump_json(by_alias=True)


class BlockchainTransactionMessage(BaseModel):
    """Raw deposit detected on a pay-in address."""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    currency_type: CurrencyType
    destination_address: str
    transaction_id: str
    block_id: str | None = None
    block_timestamp: datetime
    amount: Decimal = Field(..., ge=0)
    fee: Decimal = Decimal("0")
    link: str | None = None

    @field_validator('block_timestamp')
    @classmethod
    def validate_block_timestamp(cls, v: datetime) -> datetime:
        """Normalize timestamp to UTC."""
        return _as_utc(v)

    def to_json(self) -> str:
        """Serialize message in wire format."""
        return self.model_dump_json(by_alias=True)
