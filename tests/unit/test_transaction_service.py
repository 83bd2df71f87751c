"""
Unit tests for TransactionService.

Repositories and collaborators are mocked; tests cover the processing
flow, rejection and fatal paths, and isolation of side effects.
"""

import json
import uuid
from datetime import timedelta
from decimal import Decimal
from unittest.mock import call

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm.exc import UnmappedInstanceError

from app.models.enums import (
    CampaignInfoType,
    CurrencyType,
    InvestorAttributeType,
    InvestorRefundReason,
)
from app.models.investor import Investor
from app.services.exchange_rate_client import AverageRate
from app.services.transaction import ProcessingOutcome, TransactionMessage
from app.utils.exceptions import (
    CampaignSettingsNotFoundError,
    ExchangeRateNotFoundError,
    InvalidExchangeRateError,
    InvalidTransactionMessageError,
    InvestorNotFoundError,
    TransactionProcessingError,
)


def make_message(created_utc, **overrides) -> TransactionMessage:
    """Build transaction message with fiat defaults."""
    data = {
        "email": "investor@example.com",
        "unique_id": "tx-1",
        "currency": CurrencyType.FIAT,
        "amount": Decimal("1000"),
        "created_utc": created_utc,
        "link": "https://bank.test/tx-1",
    }
    data.update(overrides)
    return TransactionMessage(**data)


def saved_transaction(service):
    """Transaction passed to the repository."""
    return service.transaction_repo.save.await_args.args[0]


def make_investor(**overrides) -> Investor:
    """Build investor entity as loaded from the database."""
    data = {
        "email": "investor@example.com",
        "confirmation_token": uuid.UUID("12345678-1234-5678-1234-567812345678"),
        "amount_btc": Decimal("0"),
        "amount_eth": Decimal("0"),
        "amount_fiat": Decimal("0"),
        "amount_usd": Decimal("0"),
        "amount_token": Decimal("0"),
        "kyc_request_id": None,
        "referral_code": None,
        "referral_code_applied": None,
        "referrals_number": 0,
    }
    data.update(overrides)
    return Investor(**data)


def expire(*instances) -> None:
    """Drop loaded state the way an expiring rollback does; attribute reads then fail."""
    for instance in instances:
        instance.__dict__.clear()


class TestProcessFlow:
    """Tests for the accepted transaction path."""

    @pytest.mark.asyncio
    async def test_fiat_transaction_processed(self, transaction_service, crowd_sale_start):
        """Fiat transaction should be priced at rate 1 and persisted."""
        message = make_message(crowd_sale_start + timedelta(hours=1))

        outcome = await transaction_service.process(message)

        assert outcome == ProcessingOutcome.PROCESSED
        tx = saved_transaction(transaction_service)
        assert tx.email == "investor@example.com"
        assert tx.unique_id == "tx-1"
        assert tx.currency == "Fiat"
        assert tx.amount_usd == Decimal("1000")
        assert tx.amount_token == Decimal("1333.3333")
        assert tx.token_price == Decimal("0.75")
        assert tx.exchange_rate == Decimal("1")
        assert json.loads(tx.exchange_rate_context) == []
        assert json.loads(tx.token_price_context) == [
            {"count": "1333.3333", "price": "0.75", "phase": "CrowdSaleInitial"}
        ]
        transaction_service.exchange_rate_client.get_average_rate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ledger_and_account_updated(self, transaction_service, crowd_sale_start):
        """Accepted transaction should increment counters and investor totals."""
        message = make_message(crowd_sale_start + timedelta(hours=1))

        await transaction_service.process(message)

        assert transaction_service.info_repo.increment_value.await_args_list == [
            call(CampaignInfoType.AMOUNT_INVESTED_FIAT, Decimal("1000")),
            call(CampaignInfoType.AMOUNT_INVESTED_TOKEN, Decimal("1333.3333")),
            call(CampaignInfoType.AMOUNT_INVESTED_USD, Decimal("1000")),
        ]
        transaction_service.investor_repo.increment_amounts.assert_awaited_once_with(
            "investor@example.com",
            CurrencyType.FIAT,
            Decimal("1000"),
            Decimal("1000"),
            Decimal("1333.3333"),
        )

    @pytest.mark.asyncio
    async def test_latest_transactions_updated(
        self, transaction_service, mock_redis_client, crowd_sale_start
    ):
        """Accepted transaction should be pushed onto the capped list."""
        message = make_message(crowd_sale_start + timedelta(hours=1))

        await transaction_service.process(message)

        mock_redis_client.pipe.lpush.assert_called_once_with(
            "ico:latest_transactions", "investor@example.com:tx-1"
        )
        mock_redis_client.pipe.ltrim.assert_called_once_with("ico:latest_transactions", 0, 19)

    @pytest.mark.asyncio
    async def test_crypto_transaction_uses_average_rate(
        self, transaction_service, crowd_sale_start
    ):
        """Crypto amount should be converted with the average exchange rate."""
        created_utc = crowd_sale_start + timedelta(hours=1)
        transaction_service.exchange_rate_client.get_average_rate.return_value = AverageRate(
            average_rate=Decimal("5000"),
            rates=[{"Source": "exchange-a", "Rate": 5000}],
        )
        message = make_message(created_utc, currency=CurrencyType.BITCOIN, amount=Decimal("0.2"))

        outcome = await transaction_service.process(message)

        assert outcome == ProcessingOutcome.PROCESSED
        transaction_service.exchange_rate_client.get_average_rate.assert_awaited_once_with(
            "BTCUSD", created_utc
        )
        tx = saved_transaction(transaction_service)
        assert tx.amount_usd == Decimal("1000")
        assert tx.exchange_rate == Decimal("5000")
        assert json.loads(tx.exchange_rate_context) == [{"Source": "exchange-a", "Rate": 5000}]
        assert (
            call(CampaignInfoType.AMOUNT_INVESTED_BTC, Decimal("0.2"))
            in transaction_service.info_repo.increment_value.await_args_list
        )

    @pytest.mark.asyncio
    async def test_split_purchase_effective_price(self, transaction_service, crowd_sale_start):
        """Split purchase should store amount / total tokens as token price."""
        transaction_service.info_repo.get_decimal.side_effect = lambda info_type: {
            CampaignInfoType.AMOUNT_INVESTED_TOKEN: Decimal("19999999"),
            CampaignInfoType.AMOUNT_INVESTED_USD: Decimal("15000000"),
        }[info_type]
        message = make_message(crowd_sale_start + timedelta(hours=1), amount=Decimal("1.00"))

        await transaction_service.process(message)

        tx = saved_transaction(transaction_service)
        assert tx.amount_token == Decimal("1.3125")
        assert tx.token_price == Decimal("1.00") / Decimal("1.3125")
        assert len(json.loads(tx.token_price_context)) == 2


class TestIdempotence:
    """Tests for duplicate handling."""

    @pytest.mark.asyncio
    async def test_duplicate_is_noop(self, transaction_service, crowd_sale_start):
        """Already processed message should not mutate anything."""
        transaction_service.transaction_repo.get.return_value = object()
        message = make_message(crowd_sale_start + timedelta(hours=1))

        outcome = await transaction_service.process(message)

        assert outcome == ProcessingOutcome.DUPLICATE
        transaction_service.transaction_repo.save.assert_not_awaited()
        transaction_service.info_repo.increment_value.assert_not_awaited()
        transaction_service.investor_repo.increment_amounts.assert_not_awaited()
        transaction_service.refund_service.save.assert_not_awaited()
        transaction_service.publishers.new_transaction.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_concurrent_insert_is_duplicate(
        self, transaction_service, mock_session, crowd_sale_start
    ):
        """Losing a concurrent insert should end as duplicate without ledger changes."""
        transaction_service.transaction_repo.get.side_effect = [None, object()]
        transaction_service.transaction_repo.save.side_effect = IntegrityError(
            "INSERT", {}, Exception("duplicate key")
        )
        message = make_message(crowd_sale_start + timedelta(hours=1))

        outcome = await transaction_service.process(message)

        assert outcome == ProcessingOutcome.DUPLICATE
        mock_session.rollback.assert_awaited()
        transaction_service.info_repo.increment_value.assert_not_awaited()
        transaction_service.investor_repo.increment_amounts.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_integrity_error_without_duplicate_propagates(
        self, transaction_service, crowd_sale_start
    ):
        """Other integrity errors should propagate."""
        transaction_service.transaction_repo.get.side_effect = [None, None]
        transaction_service.transaction_repo.save.side_effect = IntegrityError(
            "INSERT", {}, Exception("check constraint")
        )
        message = make_message(crowd_sale_start + timedelta(hours=1))

        with pytest.raises(IntegrityError):
            await transaction_service.process(message)


class TestRejection:
    """Tests for business rejection."""

    @pytest.mark.asyncio
    async def test_out_of_dates_rejected_without_mutation(
        self, transaction_service, crowd_sale_start
    ):
        """Transaction before presale should be refunded with no ledger change."""
        message = make_message(crowd_sale_start - timedelta(days=16))

        outcome = await transaction_service.process(message)

        assert outcome == ProcessingOutcome.REJECTED
        transaction_service.refund_service.save.assert_awaited_once_with(
            "investor@example.com", InvestorRefundReason.OUT_OF_DATES, message.to_json()
        )
        transaction_service.transaction_repo.save.assert_not_awaited()
        transaction_service.info_repo.increment_value.assert_not_awaited()
        transaction_service.investor_repo.increment_amounts.assert_not_awaited()
        transaction_service.publishers.new_transaction.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_hard_cap_rejected(self, transaction_service, crowd_sale_start):
        """Transaction after hard cap should be refunded."""
        transaction_service.info_repo.get_decimal.side_effect = lambda info_type: {
            CampaignInfoType.AMOUNT_INVESTED_TOKEN: Decimal("30000000"),
            CampaignInfoType.AMOUNT_INVESTED_USD: Decimal("50000000"),
        }[info_type]
        message = make_message(crowd_sale_start + timedelta(days=2))

        outcome = await transaction_service.process(message)

        assert outcome == ProcessingOutcome.REJECTED
        reason = transaction_service.refund_service.save.await_args.args[1]
        assert reason == InvestorRefundReason.HARD_CAP_USD_EXCEEDED


class TestFatalErrors:
    """Tests for errors that must redeliver the message."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["email", "unique_id"])
    async def test_missing_identity(self, transaction_service, crowd_sale_start, field):
        """Message without email or unique id should be rejected as invalid."""
        message = make_message(crowd_sale_start, **{field: None})

        with pytest.raises(InvalidTransactionMessageError) as exc_info:
            await transaction_service.process(message)

        assert exc_info.value.message_json == message.to_json()
        transaction_service.transaction_repo.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_investor_not_found(self, transaction_service, crowd_sale_start):
        """Unknown investor should be fatal."""
        transaction_service.investor_repo.get.return_value = None

        with pytest.raises(InvestorNotFoundError):
            await transaction_service.process(make_message(crowd_sale_start))

    @pytest.mark.asyncio
    async def test_campaign_settings_not_found(self, transaction_service, crowd_sale_start):
        """Missing campaign settings should be fatal."""
        transaction_service.settings_repo.get.return_value = None

        with pytest.raises(CampaignSettingsNotFoundError):
            await transaction_service.process(make_message(crowd_sale_start))

    @pytest.mark.asyncio
    async def test_exchange_rate_not_found(self, transaction_service, crowd_sale_start):
        """Missing exchange rate should be fatal and persist nothing."""
        transaction_service.exchange_rate_client.get_average_rate.return_value = None
        message = make_message(crowd_sale_start, currency=CurrencyType.ETHER, amount=Decimal("1"))

        with pytest.raises(ExchangeRateNotFoundError):
            await transaction_service.process(message)

        transaction_service.transaction_repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rate", [Decimal("0"), Decimal("-1"), None])
    async def test_invalid_exchange_rate(self, transaction_service, crowd_sale_start, rate):
        """Missing, zero or negative exchange rate should be fatal."""
        transaction_service.exchange_rate_client.get_average_rate.return_value = AverageRate(
            average_rate=rate
        )
        message = make_message(crowd_sale_start, currency=CurrencyType.ETHER, amount=Decimal("1"))

        with pytest.raises(InvalidExchangeRateError) as exc_info:
            await transaction_service.process(message)

        assert isinstance(exc_info.value, TransactionProcessingError)
        transaction_service.transaction_repo.save.assert_not_awaited()


class TestSideEffectIsolation:
    """Tests that failures after persisting never fail processing."""

    @pytest.mark.asyncio
    async def test_ledger_increment_failure_isolated(self, transaction_service, crowd_sale_start):
        """One failing counter should not stop the other counters."""
        transaction_service.info_repo.increment_value.side_effect = [
            RuntimeError("db down"),
            None,
            None,
        ]

        outcome = await transaction_service.process(make_message(crowd_sale_start))

        assert outcome == ProcessingOutcome.PROCESSED
        assert transaction_service.info_repo.increment_value.await_count == 3
        transaction_service.investor_repo.increment_amounts.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_account_update_failure_isolated(
        self, transaction_service, mock_session, crowd_sale_start
    ):
        """Investor amount update failure should roll back only its savepoint."""
        transaction_service.investor_repo.increment_amounts.side_effect = RuntimeError("db down")

        outcome = await transaction_service.process(make_message(crowd_sale_start))

        assert outcome == ProcessingOutcome.PROCESSED
        mock_session.rollback.assert_not_awaited()
        transaction_service.publishers.new_transaction.send.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_latest_transactions_failure_isolated(
        self, transaction_service, mock_redis_client, crowd_sale_start
    ):
        """Redis failure should not fail processing."""
        mock_redis_client.pipe.execute.side_effect = ConnectionError("redis down")

        outcome = await transaction_service.process(make_message(crowd_sale_start))

        assert outcome == ProcessingOutcome.PROCESSED

    @pytest.mark.asyncio
    async def test_confirmation_failure_isolated(self, transaction_service, investor, crowd_sale_start):
        """Failed confirmation should not stop the reminder."""
        investor.amount_usd = Decimal("100")
        transaction_service.publishers.new_transaction.send.side_effect = RuntimeError("queue down")

        outcome = await transaction_service.process(
            make_message(crowd_sale_start, amount=Decimal("100"))
        )

        assert outcome == ProcessingOutcome.PROCESSED
        transaction_service.publishers.need_more_investment.send.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_side_effect_does_not_break_later_ones(
        self, transaction_service, mock_session, crowd_sale_start
    ):
        """Rolled back savepoint expiring loaded entities should not stop later side effects."""
        loaded = []

        async def load_investor(email):
            investor = make_investor(amount_usd=Decimal("2000"))
            loaded.append(investor)
            return investor

        async def save_attribute(attribute_type, email, value):
            if attribute_type == InvestorAttributeType.REFERRAL_CODE:
                raise RuntimeError("attribute insert failed")

        async def exit_savepoint(exc_type, exc, tb):
            if exc_type is not None:
                expire(*loaded)
            return False

        transaction_service.investor_repo.get.side_effect = load_investor
        transaction_service.attribute_repo.save.side_effect = save_attribute
        mock_session.begin_nested.return_value.__aexit__.side_effect = exit_savepoint
        mock_session.rollback.side_effect = lambda: expire(*loaded)

        outcome = await transaction_service.process(
            make_message(crowd_sale_start, amount=Decimal("2000"))
        )

        assert outcome == ProcessingOutcome.PROCESSED
        with pytest.raises(UnmappedInstanceError):
            loaded[0].amount_usd
        mock_session.rollback.assert_not_awaited()
        transaction_service.publishers.kyc_request.send.assert_awaited_once()
        confirmation = transaction_service.publishers.new_transaction.send.await_args.args[0]
        assert confirmation.invested_amount_usd == Decimal("2000.00")
        assert confirmation.transaction_amount_usd == Decimal("2000.00")
        assert confirmation.kyc_required is True

    @pytest.mark.asyncio
    async def test_failed_commit_does_not_break_later_side_effects(
        self, transaction_service, mock_session, crowd_sale_start
    ):
        """Rollback after a failed side effect commit should not stop the others."""
        loaded = []
        state = {"fail_commit": False}

        async def load_investor(email):
            investor = make_investor(amount_usd=Decimal("2000"))
            loaded.append(investor)
            return investor

        async def save_referral_code(email, code):
            state["fail_commit"] = True
            return True

        async def commit():
            if state["fail_commit"]:
                state["fail_commit"] = False
                raise OperationalError("COMMIT", {}, Exception("connection lost"))

        transaction_service.investor_repo.get.side_effect = load_investor
        transaction_service.investor_repo.save_referral_code.side_effect = save_referral_code
        mock_session.commit.side_effect = commit
        mock_session.rollback.side_effect = lambda: expire(*loaded)

        outcome = await transaction_service.process(
            make_message(crowd_sale_start, amount=Decimal("2000"))
        )

        assert outcome == ProcessingOutcome.PROCESSED
        mock_session.rollback.assert_awaited_once()
        transaction_service.publishers.kyc_request.send.assert_awaited_once()
        transaction_service.publishers.new_transaction.send.assert_awaited_once()


class TestNotifications:
    """Tests for confirmation and reminder messages."""

    @pytest.mark.asyncio
    async def test_confirmation_message(self, transaction_service, investor, crowd_sale_start):
        """Confirmation should carry rounded amounts and links."""
        investor.amount_usd = Decimal("1000")
        investor.amount_token = Decimal("1333.33333")

        await transaction_service.process(make_message(crowd_sale_start))

        message = transaction_service.publishers.new_transaction.send.await_args.args[0]
        assert message.email_to == "investor@example.com"
        assert message.invested_amount_usd == Decimal("1000.00")
        assert message.invested_amount_token == Decimal("1333.3333")
        assert message.transaction_amount == Decimal("1000")
        assert message.transaction_amount_usd == Decimal("1000.00")
        assert message.transaction_amount_token == Decimal("1333.3333")
        assert message.transaction_asset == "USD"
        assert message.link_to_summary_page == (
            "https://ico.test/summary/12345678-1234-5678-1234-567812345678"
        )
        assert message.link_transaction_details == "https://bank.test/tx-1"
        assert message.min_amount == Decimal("1000")
        assert message.more_investment_required is False

    @pytest.mark.asyncio
    async def test_need_more_investment_reminder(
        self, transaction_service, investor, crowd_sale_start
    ):
        """Investor below minimum should get a reminder."""
        investor.amount_usd = Decimal("100")

        await transaction_service.process(make_message(crowd_sale_start, amount=Decimal("100")))

        reminder = transaction_service.publishers.need_more_investment.send.await_args.args[0]
        assert reminder.email_to == "investor@example.com"
        assert reminder.invested_amount_usd == Decimal("100.00")
        assert reminder.min_amount == Decimal("1000")
        confirmation = transaction_service.publishers.new_transaction.send.await_args.args[0]
        assert confirmation.more_investment_required is True

    @pytest.mark.asyncio
    async def test_no_reminder_above_minimum(self, transaction_service, investor, crowd_sale_start):
        """Investor at minimum should not get a reminder."""
        investor.amount_usd = Decimal("1000")

        await transaction_service.process(make_message(crowd_sale_start))

        transaction_service.publishers.need_more_investment.send.assert_not_awaited()


class TestKycRequest:
    """Tests for KYC request issuance."""

    @pytest.mark.asyncio
    async def test_kyc_requested_at_threshold(self, transaction_service, investor, crowd_sale_start):
        """Investor reaching the threshold should get a KYC request."""
        investor.amount_usd = Decimal("1000")

        await transaction_service.process(make_message(crowd_sale_start))

        transaction_service.investor_repo.save_kyc.assert_awaited_once()
        email, kyc_id = transaction_service.investor_repo.save_kyc.await_args.args
        assert email == "investor@example.com"
        transaction_service.attribute_repo.save.assert_any_await(
            InvestorAttributeType.KYC_ID, "investor@example.com", kyc_id
        )
        kyc_message = transaction_service.publishers.kyc_request.send.await_args.args[0]
        assert kyc_message.kyc_id == kyc_id
        assert kyc_message.kyc_link == "https://kyc.test/start?token=abc"
        confirmation = transaction_service.publishers.new_transaction.send.await_args.args[0]
        assert confirmation.kyc_required is True
        assert confirmation.kyc_link == "https://kyc.test/start?token=abc"

    @pytest.mark.asyncio
    async def test_kyc_not_requested_twice(self, transaction_service, investor, crowd_sale_start):
        """Investor with a KYC request should not get another one."""
        investor.amount_usd = Decimal("2000")
        investor.kyc_request_id = "existing-kyc-id"

        await transaction_service.process(make_message(crowd_sale_start))

        transaction_service.investor_repo.save_kyc.assert_not_awaited()
        transaction_service.publishers.kyc_request.send.assert_not_awaited()
        confirmation = transaction_service.publishers.new_transaction.send.await_args.args[0]
        assert confirmation.kyc_required is False

    @pytest.mark.asyncio
    async def test_kyc_lost_conditional_update(
        self, transaction_service, investor, crowd_sale_start
    ):
        """Concurrent KYC request should not publish a second id."""
        investor.amount_usd = Decimal("1000")
        transaction_service.investor_repo.save_kyc.return_value = False

        await transaction_service.process(make_message(crowd_sale_start))

        transaction_service.publishers.kyc_request.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_kyc_below_threshold(self, transaction_service, investor, crowd_sale_start):
        """Investor below threshold should not get a KYC request."""
        investor.amount_usd = Decimal("999.99")

        await transaction_service.process(make_message(crowd_sale_start))

        transaction_service.investor_repo.save_kyc.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_kyc_disabled(
        self, transaction_service, investor, campaign_settings, crowd_sale_start
    ):
        """Disabled KYC sending should not request KYC."""
        investor.amount_usd = Decimal("1000")
        transaction_service.settings_repo.get.return_value = campaign_settings.model_copy(
            update={"kyc_enable_request_sending": False}
        )

        await transaction_service.process(make_message(crowd_sale_start))

        transaction_service.investor_repo.save_kyc.assert_not_awaited()


class TestReferral:
    """Tests for referral code issuance and usage."""

    @pytest.mark.asyncio
    async def test_referral_code_issued(self, transaction_service, investor, crowd_sale_start):
        """Investor reaching minimum should get an own referral code."""
        investor.amount_usd = Decimal("1000")

        await transaction_service.process(make_message(crowd_sale_start))

        transaction_service.referral_code_service.generate.assert_awaited_once_with(6)
        transaction_service.investor_repo.save_referral_code.assert_awaited_once_with(
            "investor@example.com", "ABC234"
        )
        transaction_service.attribute_repo.save.assert_any_await(
            InvestorAttributeType.REFERRAL_CODE, "investor@example.com", "ABC234"
        )

    @pytest.mark.asyncio
    async def test_referral_code_not_reissued(self, transaction_service, investor, crowd_sale_start):
        """Investor with a code should keep it."""
        investor.amount_usd = Decimal("1000")
        investor.referral_code = "OWN123"

        await transaction_service.process(make_message(crowd_sale_start))

        transaction_service.referral_code_service.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_code_length_fails_only_side_effect(
        self, transaction_service, investor, campaign_settings, crowd_sale_start
    ):
        """Missing code length should fail issuance but not processing."""
        investor.amount_usd = Decimal("1000")
        transaction_service.settings_repo.get.return_value = campaign_settings.model_copy(
            update={"referral_code_length": None}
        )

        outcome = await transaction_service.process(make_message(crowd_sale_start))

        assert outcome == ProcessingOutcome.PROCESSED
        transaction_service.referral_code_service.generate.assert_not_awaited()
        transaction_service.publishers.new_transaction.send.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_referral_usage_counted_for_owner(
        self, transaction_service, investor, crowd_sale_start
    ):
        """First purchase with an applied code should count for the owner."""
        investor.referral_code_applied = "OWNER1"
        transaction_service.attribute_repo.get_investor_email.return_value = "owner@example.com"

        await transaction_service.process(make_message(crowd_sale_start, amount=Decimal("100")))

        transaction_service.investor_repo.increment_referrals_number.assert_awaited_once_with(
            "owner@example.com"
        )

    @pytest.mark.asyncio
    async def test_referral_usage_only_on_first_purchase(
        self, transaction_service, investor, crowd_sale_start
    ):
        """Later purchases should not count again."""
        investor.referral_code_applied = "OWNER1"
        transaction_service.attribute_repo.get_investor_email.return_value = "owner@example.com"
        transaction_service.transaction_repo.count.return_value = 2

        await transaction_service.process(make_message(crowd_sale_start, amount=Decimal("100")))

        transaction_service.investor_repo.increment_referrals_number.assert_not_awaited()
