"""
Shared fixtures for unit tests.

This module provides common fixtures used across multiple test modules:
- Investor entity
- Notification publishers
- TransactionService with mocked repositories and collaborators
"""

import uuid
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.models.investor import Investor
from app.services.notification import NotificationPublishers
from app.services.transaction import TransactionService


@pytest.fixture
def investor():
    """
    Create investor entity with default values.

    Default values:
    - email: investor@example.com
    - no investments yet
    - no referral code, no KYC request

    Returns:
        Investor: Transient investor entity
    """
    return Investor(
        email="investor@example.com",
        confirmation_token=uuid.UUID("12345678-1234-5678-1234-567812345678"),
        amount_btc=Decimal("0"),
        amount_eth=Decimal("0"),
        amount_fiat=Decimal("0"),
        amount_usd=Decimal("0"),
        amount_token=Decimal("0"),
        kyc_request_id=None,
        referral_code=None,
        referral_code_applied=None,
        referrals_number=0,
    )


@pytest.fixture
def publishers():
    """
    Mock notification publishers.

    Returns:
        NotificationPublishers: Publishers with AsyncMock send
    """
    return NotificationPublishers(
        new_transaction=AsyncMock(),
        kyc_request=AsyncMock(),
        need_more_investment=AsyncMock(),
    )


@pytest.fixture
def exchange_rate_client():
    """Mock exchange rate client."""
    return AsyncMock()


@pytest.fixture
def transaction_service(
    mock_session,
    mock_redis_client,
    publishers,
    exchange_rate_client,
    campaign_settings,
    investor,
):
    """
    Create TransactionService with mocked repositories.

    Ledger counters start at zero, the message was never processed and
    the investor has no other transactions.

    Returns:
        TransactionService: Service instance for testing
    """
    kyc_service = MagicMock()
    kyc_service.get_kyc_link.return_value = "https://kyc.test/start?token=abc"

    referral_code_service = AsyncMock()
    referral_code_service.generate.return_value = "ABC234"

    service = TransactionService(
        mock_session,
        exchange_rate_client,
        publishers=publishers,
        redis_client=mock_redis_client,
        kyc_service=kyc_service,
        referral_code_service=referral_code_service,
        site_summary_page_url="https://ico.test/summary/{token}",
        latest_transactions_limit=20,
    )

    service.settings_repo = AsyncMock()
    service.settings_repo.get.return_value = campaign_settings

    service.info_repo = AsyncMock()
    service.info_repo.get_decimal.return_value = Decimal("0")

    service.investor_repo = AsyncMock()
    service.investor_repo.get.return_value = investor
    service.investor_repo.save_kyc.return_value = True
    service.investor_repo.save_referral_code.return_value = True

    service.transaction_repo = AsyncMock()
    service.transaction_repo.get.return_value = None
    service.transaction_repo.count.return_value = 1

    service.attribute_repo = AsyncMock()
    service.attribute_repo.get_investor_email.return_value = None

    service.refund_service = AsyncMock()

    return service
