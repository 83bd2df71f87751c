"""
Investor repository.

Data access layer for Investor model.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import CurrencyType
from app.models.investor import Investor
from app.repositories.base import BaseRepository


class InvestorRepository(BaseRepository[Investor]):
    """Investor repository with amount and KYC/referral updates."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize investor repository."""
        super().__init__(Investor, session)

    async def get(self, email: str) -> Investor | None:
        """
        Get investor by email.

        Always reads fresh column values, so amounts updated by
        increment_amounts are visible within the same session.

        Args:
            email: Investor email

        Returns:
            Investor or None
        """
        investor = await self.get_by_pk(email)
        if investor is not None:
            await self.session.refresh(investor)
        return investor

    async def increment_amounts(
        self,
        email: str,
        currency: CurrencyType,
        amount: Decimal,
        amount_usd: Decimal,
        amount_token: Decimal,
    ) -> None:
        """
        Add transaction amounts onto investor totals.

        Single UPDATE ... SET x = x + :delta statement.

        Args:
            email: Investor email
            currency: Transaction currency
            amount: Raw amount in transaction currency
            amount_usd: Amount in USD
            amount_token: Purchased tokens
        """
        currency_column = {
            CurrencyType.BITCOIN: Investor.amount_btc,
            CurrencyType.ETHER: Investor.amount_eth,
            CurrencyType.FIAT: Investor.amount_fiat,
        }[currency]

        stmt = (
            update(Investor)
            .where(Investor.email == email)
            .values({
                currency_column: currency_column + amount,
                Investor.amount_usd: Investor.amount_usd + amount_usd,
                Investor.amount_token: Investor.amount_token + amount_token,
                Investor.updated_utc: datetime.now(UTC),
            })
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def save_kyc(self, email: str, kyc_request_id: str) -> bool:
        """
        Store KYC request id unless one is already stored.

        Args:
            email: Investor email
            kyc_request_id: New KYC request id

        Returns:
            True if stored, False if investor already had a KYC request
        """
        now = datetime.now(UTC)
        stmt = (
            update(Investor)
            .where(Investor.email == email, Investor.kyc_request_id.is_(None))
            .values(kyc_request_id=kyc_request_id, kyc_requested_utc=now, updated_utc=now)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def save_referral_code(self, email: str, code: str) -> bool:
        """
        Store owned referral code unless one is already stored.

        Args:
            email: Investor email
            code: Generated referral code

        Returns:
            True if stored, False if investor already had a code
        """
        now = datetime.now(UTC)
        stmt = (
            update(Investor)
            .where(Investor.email == email, Investor.referral_code.is_(None))
            .values(referral_code=code, referral_code_utc=now, updated_utc=now)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def increment_referrals_number(self, email: str) -> None:
        """
        Count one more successful referral for the code owner.

        Args:
            email: Referral code owner email
        """
        stmt = (
            update(Investor)
            .where(Investor.email == email)
            .values(
                referrals_number=Investor.referrals_number + 1,
                updated_utc=datetime.now(UTC),
            )
        )
        await self.session.execute(stmt)
        await self.session.flush()
