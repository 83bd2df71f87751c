"""
Transaction service.

Turns an investment event into a priced, persisted investor transaction,
updates campaign and investor totals and triggers investor notifications.

Processing is idempotent per (email, unique_id): a redelivered event is a
no-op. Fatal errors propagate so the broker redelivers the message;
everything after the transaction is persisted only logs its failures.
"""

import json
import uuid
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

import redis.asyncio as redis
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.constants import LATEST_TRANSACTIONS_KEY, TOKEN_DISPLAY_DECIMALS
from app.config.settings import settings as app_settings
from app.models.enums import CampaignInfoType, CurrencyType, InvestorAttributeType
from app.models.investor import Investor
from app.models.investor_transaction import InvestorTransaction
from app.repositories.campaign_info_repository import CampaignInfoRepository
from app.repositories.campaign_settings_repository import CampaignSettingsRepository
from app.repositories.investor_attribute_repository import InvestorAttributeRepository
from app.repositories.investor_repository import InvestorRepository
from app.repositories.investor_transaction_repository import InvestorTransactionRepository
from app.services.base_service import BaseService, log_operation, side_effect
from app.services.exchange_rate_client import ExchangeRateClient
from app.services.kyc_service import KycService
from app.services.notification import (
    InvestorKycRequestMessage,
    InvestorNeedMoreInvestmentMessage,
    InvestorNewTransactionMessage,
    NotificationPublishers,
)
from app.services.referral_code_service import ReferralCodeService
from app.services.refund_service import RefundService
from app.services.transaction.messages import TransactionMessage
from app.services.transaction.validator import TransactionValidator
from app.utils.exceptions import (
    CampaignSettingsNotFoundError,
    ExchangeRateNotFoundError,
    InvalidExchangeRateError,
    InvalidTransactionMessageError,
    InvestorNotFoundError,
)
from app.utils.security import mask_email
from pricing import (
    CampaignSettings,
    PricingEngine,
    ReferralContext,
    effective_price,
    format_tokens,
    format_usd,
    price_list_to_json,
    total_tokens,
)


class ProcessingOutcome(str, Enum):
    """Result of processing one transaction message."""

    PROCESSED = "processed"
    DUPLICATE = "duplicate"
    REJECTED = "rejected"


@dataclass(frozen=True)
class ProcessedTransaction:
    """
    Values of a stored transaction.

    Every step after the insert works from this copy, so a rollback that
    expires ORM instances does not reach them.
    """
    email: str
    unique_id: str
    currency: CurrencyType
    amount: Decimal
    fee: Decimal
    amount_usd: Decimal
    amount_token: Decimal
    link: str | None = None


class TransactionService(BaseService):
    """
    Investment transaction processor.

    Example:
        service = TransactionService(session, ExchangeRateClient(), redis_client=redis_client)
        outcome = await service.process(message)
    """

    def __init__(
        self,
        session: AsyncSession,
        exchange_rate_client: ExchangeRateClient,
        publishers: NotificationPublishers | None = None,
        redis_client: redis.Redis | None = None,
        kyc_service: KycService | None = None,
        referral_code_service: ReferralCodeService | None = None,
        pricing_engine: PricingEngine | None = None,
        site_summary_page_url: str | None = None,
        latest_transactions_limit: int | None = None,
    ) -> None:
        """
        Initialize transaction service.

        Args:
            session: Async database session
            exchange_rate_client: Exchange rate service client
            publishers: Notification publishers
            redis_client: Redis client for the latest transactions list
            kyc_service: KYC link builder
            referral_code_service: Referral code generator
            pricing_engine: Token pricing engine
            site_summary_page_url: Summary page link with {token} placeholder
            latest_transactions_limit: Size of the latest transactions list
        """
        super().__init__(session)
        self.exchange_rate_client = exchange_rate_client
        self.publishers = publishers or NotificationPublishers()
        self.redis_client = redis_client
        self.kyc_service = kyc_service or KycService()
        self.referral_code_service = referral_code_service or ReferralCodeService(session)
        self.pricing_engine = pricing_engine or PricingEngine()
        self.site_summary_page_url = site_summary_page_url or app_settings.site_summary_page_url
        self.latest_transactions_limit = (
            latest_transactions_limit or app_settings.latest_transactions_limit
        )

        self.settings_repo = CampaignSettingsRepository(session)
        self.info_repo = CampaignInfoRepository(session)
        self.investor_repo = InvestorRepository(session)
        self.transaction_repo = InvestorTransactionRepository(session)
        self.attribute_repo = InvestorAttributeRepository(session)
        self.refund_service = RefundService(session)

    @log_operation
    async def process(self, message: TransactionMessage) -> ProcessingOutcome:
        """
        Process investment event.

        Args:
            message: Inbound transaction message

        Returns:
            ProcessingOutcome

        Raises:
            TransactionProcessingError: On fatal errors, message must be redelivered
        """
        message_json = message.to_json()
        self.logger.debug(f"New transaction: {message_json}")

        if not message.email:
            raise InvalidTransactionMessageError("Email can not be empty", message_json)
        if not message.unique_id:
            raise InvalidTransactionMessageError("UniqueId can not be empty", message_json)

        email = message.email
        existing = await self.transaction_repo.get(email, message.unique_id)
        if existing is not None:
            self.logger.info(
                f"Transaction already processed: email={mask_email(email)}, "
                f"unique_id={message.unique_id}"
            )
            return ProcessingOutcome.DUPLICATE

        investor = await self.investor_repo.get(email)
        if investor is None:
            raise InvestorNotFoundError(
                f"Investor with email {email} was not found", message_json
            )
        referral = ReferralContext.model_validate(investor)

        settings = await self.settings_repo.get()
        if settings is None:
            raise CampaignSettingsNotFoundError("Campaign settings were not found", message_json)

        sold_tokens = await self.info_repo.get_decimal(CampaignInfoType.AMOUNT_INVESTED_TOKEN)
        invested_usd = await self.info_repo.get_decimal(CampaignInfoType.AMOUNT_INVESTED_USD)

        reason = TransactionValidator(settings).validate(
            message.created_utc, sold_tokens, invested_usd
        )
        if reason is not None:
            self.logger.info(
                f"Transaction rejected: email={mask_email(email)}, unique_id={message.unique_id}, "
                f"reason={reason.value}, sold_tokens={sold_tokens}, invested_usd={invested_usd}"
            )
            await self.refund_service.save(email, reason, message_json)
            return ProcessingOutcome.REJECTED

        exchange_rate, exchange_rate_context = await self._get_exchange_rate(
            message, message_json
        )

        processed = await self._save_transaction(
            message, referral, settings, sold_tokens, exchange_rate, exchange_rate_context
        )
        if processed is None:
            return ProcessingOutcome.DUPLICATE

        await self._update_campaign_amounts(processed)
        await self._update_investor_amounts(processed)
        await self._update_latest_transactions(processed)

        await self._issue_referral_code(email, settings)
        await self._register_referral_usage(email, settings)
        kyc_link = await self._request_kyc(email, settings)
        await self._send_confirmation(processed, settings, kyc_link)
        await self._send_need_more_investment(email, settings)

        self.logger.info(
            f"Transaction processed: email={mask_email(email)}, unique_id={processed.unique_id}, "
            f"amount_usd={processed.amount_usd}, amount_token={processed.amount_token}"
        )
        return ProcessingOutcome.PROCESSED

    async def _get_exchange_rate(
        self, message: TransactionMessage, message_json: str
    ) -> tuple[Decimal, list]:
        """Average USD rate and its source rates for the message currency."""
        if message.currency == CurrencyType.FIAT:
            return Decimal("1"), []

        rate = await self.exchange_rate_client.get_average_rate(
            message.currency.asset_pair, message.created_utc
        )
        if rate is None:
            raise ExchangeRateNotFoundError("Exchange rate was not found", message_json)
        if rate.average_rate is None or rate.average_rate <= 0:
            raise InvalidExchangeRateError(
                f"Exchange rate is not valid: {rate.model_dump_json(by_alias=True)}",
                message_json,
            )

        return rate.average_rate, rate.rates

    async def _save_transaction(
        self,
        message: TransactionMessage,
        referral: ReferralContext,
        settings: CampaignSettings,
        sold_tokens: Decimal,
        exchange_rate: Decimal,
        exchange_rate_context: list,
    ) -> ProcessedTransaction | None:
        """
        Price and persist transaction.

        Returns:
            Stored transaction values, or None if a concurrent worker stored it first
        """
        amount_usd = message.amount * exchange_rate
        price_list = self.pricing_engine.get_price_list(
            settings, referral, message.created_utc, amount_usd, sold_tokens
        )
        if not price_list:
            # Validation already rejected out-of-dates transactions
            raise InvalidTransactionMessageError(
                "Transaction is outside of sale phases", message.to_json()
            )

        processed = ProcessedTransaction(
            email=message.email,
            unique_id=message.unique_id,
            currency=message.currency,
            amount=message.amount,
            fee=message.fee,
            amount_usd=amount_usd,
            amount_token=total_tokens(price_list),
            link=message.link,
        )
        tx = InvestorTransaction(
            email=processed.email,
            unique_id=processed.unique_id,
            created_utc=message.created_utc,
            currency=processed.currency.value,
            transaction_id=message.transaction_id,
            block_id=message.block_id,
            pay_in_address=message.pay_in_address,
            amount=processed.amount,
            fee=processed.fee,
            amount_usd=processed.amount_usd,
            amount_token=processed.amount_token,
            token_price=effective_price(price_list, amount_usd),
            token_price_context=price_list_to_json(price_list),
            exchange_rate=exchange_rate,
            exchange_rate_context=json.dumps(exchange_rate_context, default=str),
        )

        try:
            await self.transaction_repo.save(tx)
            await self.commit()
        except IntegrityError:
            await self.rollback()
            if await self.transaction_repo.get(message.email, message.unique_id) is not None:
                self.logger.warning(
                    f"Transaction stored by a concurrent worker: email={mask_email(message.email)}, "
                    f"unique_id={message.unique_id}"
                )
                return None
            raise

        self.logger.debug(f"Transaction saved: {price_list_to_json(price_list)}")
        return processed

    async def _update_campaign_amounts(self, processed: ProcessedTransaction) -> None:
        """Increment campaign ledger counters, each failure is isolated."""
        increments = (
            (CampaignInfoType.for_currency(processed.currency), processed.amount),
            (CampaignInfoType.AMOUNT_INVESTED_TOKEN, processed.amount_token),
            (CampaignInfoType.AMOUNT_INVESTED_USD, processed.amount_usd),
        )

        for info_type, value in increments:
            try:
                async with self.session.begin_nested():
                    await self.info_repo.increment_value(info_type, value)
            except Exception as e:
                self.logger.exception(f"Failed to increment {info_type.value} by {value}: {e}")

        await self.safe_commit(f"campaign amounts update for {processed.unique_id}")

    async def _update_investor_amounts(self, processed: ProcessedTransaction) -> None:
        try:
            async with self.session.begin_nested():
                await self.investor_repo.increment_amounts(
                    processed.email,
                    processed.currency,
                    processed.amount,
                    processed.amount_usd,
                    processed.amount_token,
                )
        except Exception as e:
            self.logger.exception(
                f"Failed to update investor amounts: email={mask_email(processed.email)}, "
                f"unique_id={processed.unique_id}: {e}"
            )
            return

        await self.safe_commit(f"investor amounts update for {processed.unique_id}")

    async def _update_latest_transactions(self, processed: ProcessedTransaction) -> None:
        """Push transaction onto the capped latest transactions list."""
        if self.redis_client is None:
            return

        entry = f"{processed.email}:{processed.unique_id}"
        try:
            async with self.redis_client.pipeline(transaction=True) as pipe:
                pipe.lpush(LATEST_TRANSACTIONS_KEY, entry)
                pipe.ltrim(LATEST_TRANSACTIONS_KEY, 0, self.latest_transactions_limit - 1)
                await pipe.execute()
        except Exception as e:
            self.logger.exception(
                f"Failed to update latest transactions with {processed.unique_id}: {e}"
            )

    async def _load_investor(self, email: str) -> Investor:
        """Current investor state, loaded fresh for each side effect."""
        investor = await self.investor_repo.get(email)
        if investor is None:
            raise InvestorNotFoundError(f"Investor with email {email} was not found")
        return investor

    @side_effect
    async def _issue_referral_code(self, email: str, settings: CampaignSettings) -> str | None:
        """Give the investor an own referral code once minimum investment is reached."""
        if not settings.enable_referral_program:
            return None

        investor = await self._load_investor(email)
        if investor.referral_code or investor.amount_usd < settings.min_invest_amount_usd:
            return None

        if settings.referral_code_length is None:
            raise ValueError("Referral code length is not configured")

        code = await self.referral_code_service.generate(settings.referral_code_length)
        if not await self.investor_repo.save_referral_code(email, code):
            self.logger.info(f"Investor {mask_email(email)} already has a referral code")
            return None

        await self.attribute_repo.save(InvestorAttributeType.REFERRAL_CODE, email, code)

        self.logger.info(f"Referral code issued: email={mask_email(email)}, code={code}")
        return code

    @side_effect
    async def _register_referral_usage(self, email: str, settings: CampaignSettings) -> str | None:
        """Count the investor's first purchase for the owner of the applied code."""
        if not settings.enable_referral_program:
            return None

        investor = await self._load_investor(email)
        code = investor.referral_code_applied
        if not code:
            return None

        if await self.transaction_repo.count(email=email) != 1:
            return None

        owner_email = await self.attribute_repo.get_investor_email(
            InvestorAttributeType.REFERRAL_CODE, code
        )
        if owner_email is None or owner_email == email:
            self.logger.warning(f"Applied referral code {code} has no other owner")
            return None

        await self.investor_repo.increment_referrals_number(owner_email)

        self.logger.info(f"Referral registered: owner={mask_email(owner_email)}, code={code}")
        return owner_email

    async def _request_kyc(self, email: str, settings: CampaignSettings) -> str | None:
        """
        Request KYC once cumulative investment reaches the threshold.

        The KYC id is committed before the request is published.

        Returns:
            KYC link, or None if no request was issued
        """
        saved = await self._save_kyc_request(email, settings)
        if not saved.success or saved.data is None:
            return None

        sent = await self._send_kyc_request(email, saved.data)
        return sent.data if sent.success else None

    @side_effect
    async def _save_kyc_request(self, email: str, settings: CampaignSettings) -> str | None:
        if not settings.kyc_enable_request_sending:
            return None

        investor = await self._load_investor(email)
        if investor.has_kyc_request or investor.amount_usd < settings.kyc_threshold:
            return None

        kyc_id = str(uuid.uuid4())
        if not await self.investor_repo.save_kyc(email, kyc_id):
            self.logger.info(f"KYC already requested for {mask_email(email)}")
            return None

        await self.attribute_repo.save(InvestorAttributeType.KYC_ID, email, kyc_id)
        return kyc_id

    @side_effect
    async def _send_kyc_request(self, email: str, kyc_id: str) -> str:
        kyc_link = self.kyc_service.get_kyc_link(email, kyc_id)
        await self.publishers.kyc_request.send(
            InvestorKycRequestMessage(email_to=email, kyc_id=kyc_id, kyc_link=kyc_link)
        )

        self.logger.info(f"KYC requested: email={mask_email(email)}, kyc_id={kyc_id}")
        return kyc_link

    @side_effect
    async def _send_confirmation(
        self,
        processed: ProcessedTransaction,
        settings: CampaignSettings,
        kyc_link: str | None,
    ) -> InvestorNewTransactionMessage:
        investor = await self._load_investor(processed.email)
        message = InvestorNewTransactionMessage(
            email_to=processed.email,
            invested_amount_usd=format_usd(investor.amount_usd),
            invested_amount_token=format_tokens(investor.amount_token, TOKEN_DISPLAY_DECIMALS),
            transaction_amount=processed.amount,
            transaction_amount_usd=format_usd(processed.amount_usd),
            transaction_amount_token=format_tokens(processed.amount_token, TOKEN_DISPLAY_DECIMALS),
            transaction_fee=processed.fee,
            transaction_asset=processed.currency.asset_name,
            link_to_summary_page=self._summary_page_link(investor),
            link_transaction_details=processed.link,
            min_amount=settings.min_invest_amount_usd,
            more_investment_required=investor.amount_usd < settings.min_invest_amount_usd,
            kyc_required=kyc_link is not None,
            kyc_link=kyc_link,
        )

        await self.publishers.new_transaction.send(message)
        return message

    @side_effect
    async def _send_need_more_investment(
        self, email: str, settings: CampaignSettings
    ) -> InvestorNeedMoreInvestmentMessage | None:
        investor = await self._load_investor(email)
        if investor.amount_usd >= settings.min_invest_amount_usd:
            return None

        message = InvestorNeedMoreInvestmentMessage(
            email_to=email,
            invested_amount_usd=format_usd(investor.amount_usd),
            min_amount=settings.min_invest_amount_usd,
        )
        await self.publishers.need_more_investment.send(message)
        return message

    def _summary_page_link(self, investor: Investor) -> str | None:
        if investor.confirmation_token is None:
            return None
        return self.site_summary_page_url.format(token=investor.confirmation_token)
