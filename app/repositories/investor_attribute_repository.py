"""
Investor attribute repository.

Data access layer for the (attribute type, value) -> email index.
"""

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import InvestorAttributeType
from app.models.investor_attribute import InvestorAttribute
from app.repositories.base import BaseRepository


class InvestorAttributeRepository(BaseRepository[InvestorAttribute]):
    """Investor attribute repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize investor attribute repository."""
        super().__init__(InvestorAttribute, session)

    async def get_investor_email(
        self, attribute_type: InvestorAttributeType, value: str
    ) -> str | None:
        """
        Resolve investor email by attribute.

        Args:
            attribute_type: Attribute type
            value: Attribute value (address, code, KYC id)

        Returns:
            Investor email or None
        """
        if not value:
            return None

        stmt = select(InvestorAttribute.email).where(
            InvestorAttribute.attribute_type == attribute_type.value,
            InvestorAttribute.value == value,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def save(
        self, attribute_type: InvestorAttributeType, email: str, value: str
    ) -> None:
        """
        Register attribute for investor.

        Existing entries are overwritten so the index always points to the
        latest owner.

        Args:
            attribute_type: Attribute type
            email: Investor email
            value: Attribute value
        """
        stmt = insert(InvestorAttribute).values(
            attribute_type=attribute_type.value, value=value, email=email
        )
        stmt = stmt.on_conflict_do_update(
            constraint="pk_investor_attribute",
            set_={"email": stmt.excluded.email},
        )
        await self.session.execute(stmt)
        await self.session.flush()
