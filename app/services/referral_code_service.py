"""
Referral code service.

Generates unique referral codes for investors.
"""

import secrets

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.constants import REFERRAL_CODE_ALPHABET, REFERRAL_CODE_MAX_ATTEMPTS
from app.models.enums import InvestorAttributeType
from app.repositories.investor_attribute_repository import InvestorAttributeRepository


class ReferralCodeService:
    """Referral code generator backed by the investor attribute index."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize referral code service.

        Args:
            session: Async database session
        """
        self.attribute_repo = InvestorAttributeRepository(session)

    async def generate(self, length: int) -> str:
        """
        Generate referral code not used by any investor.

        Args:
            length: Code length

        Returns:
            New upper-case alphanumeric code

        Raises:
            ValueError: If length is not positive
            RuntimeError: If no free code is found
        """
        if length <= 0:
            raise ValueError(f"Referral code length must be positive, got {length}")

        for attempt in range(1, REFERRAL_CODE_MAX_ATTEMPTS + 1):
            code = "".join(secrets.choice(REFERRAL_CODE_ALPHABET) for _ in range(length))
            owner = await self.attribute_repo.get_investor_email(
                InvestorAttributeType.REFERRAL_CODE, code
            )
            if owner is None:
                return code

            logger.debug(f"Referral code collision on attempt {attempt}")

        raise RuntimeError(
            f"Failed to generate unique referral code after {REFERRAL_CODE_MAX_ATTEMPTS} attempts"
        )
