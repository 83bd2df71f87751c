"""
Campaign settings repository.

Data access layer for CampaignSettingsRecord.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.campaign_settings import CampaignSettingsRecord
from app.repositories.base import BaseRepository
from pricing import CampaignSettings


class CampaignSettingsRepository(BaseRepository[CampaignSettingsRecord]):
    """Campaign settings repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize campaign settings repository."""
        super().__init__(CampaignSettingsRecord, session)

    async def get(self) -> CampaignSettings | None:
        """
        Get current campaign settings snapshot.

        Returns:
            Immutable CampaignSettings or None if not configured
        """
        stmt = select(CampaignSettingsRecord).order_by(CampaignSettingsRecord.id.desc()).limit(1)
        result = await self.session.execute(stmt)
        record = result.scalar_one_or_none()
        if record is None:
            return None

        return CampaignSettings.model_validate(record)
