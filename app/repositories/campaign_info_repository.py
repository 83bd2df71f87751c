"""
Campaign info repository.

Data access layer for campaign ledger counters.
"""

from decimal import Decimal, InvalidOperation

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.campaign_info import CampaignInfo
from app.models.enums import CampaignInfoType
from app.repositories.base import BaseRepository


class CampaignInfoRepository(BaseRepository[CampaignInfo]):
    """Campaign info repository with atomic counter increments."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize campaign info repository."""
        super().__init__(CampaignInfo, session)

    async def get_value(self, info_type: CampaignInfoType) -> str | None:
        """
        Get raw counter value.

        Args:
            info_type: Counter name

        Returns:
            Counter value as string or None if never incremented
        """
        stmt = select(CampaignInfo.value).where(CampaignInfo.name == info_type.value)
        result = await self.session.execute(stmt)
        value = result.scalar_one_or_none()
        return None if value is None else str(value)

    async def get_decimal(self, info_type: CampaignInfoType) -> Decimal:
        """
        Get counter value as Decimal.

        Missing or unparseable values count as zero.

        Args:
            info_type: Counter name

        Returns:
            Counter value
        """
        raw = await self.get_value(info_type)
        if raw is None:
            return Decimal("0")

        try:
            return Decimal(raw)
        except InvalidOperation:
            logger.warning(f"Unparseable campaign counter {info_type.value}={raw!r}, using 0")
            return Decimal("0")

    async def increment_value(self, info_type: CampaignInfoType, amount: Decimal) -> None:
        """
        Atomically increment counter.

        Uses INSERT ... ON CONFLICT DO UPDATE SET value = value + amount,
        never read-then-write, so concurrent workers can not lose updates.

        Args:
            info_type: Counter name
            amount: Amount to add
        """
        stmt = insert(CampaignInfo).values(name=info_type.value, value=amount)
        stmt = stmt.on_conflict_do_update(
            index_elements=[CampaignInfo.name],
            set_={
                "value": CampaignInfo.value + stmt.excluded.value,
                "updated_utc": func.now(),
            },
        )
        await self.session.execute(stmt)
        await self.session.flush()
