"""
Exchange rate service client.

Fetches average crypto/USD rates from the ICO exchange rate service.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

import aiohttp
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal

from app.config.settings import settings


class AverageRate(BaseModel):
    """Average rate for an asset pair at an instant."""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    asset_pair: str | None = None
    average_rate: Decimal | None = None
    rates: list[dict[str, Any]] = Field(default_factory=list)


class ExchangeRateClient:
    """
    HTTP client for the exchange rate service.

    Example:
        client = ExchangeRateClient()
        rate = await client.get_average_rate("BTCUSD", created_utc)
        await client.close()
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        """
        Initialize client.

        Args:
            base_url: Service base URL (defaults to settings)
            timeout_seconds: Total request timeout (defaults to settings)
        """
        self.base_url = (base_url or settings.ex_rate_service_url).rstrip("/")
        self.timeout = aiohttp.ClientTimeout(
            total=timeout_seconds or settings.ex_rate_timeout_seconds
        )
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def close(self) -> None:
        """Close underlying HTTP session."""
        if self._session is not None and not self._session.closed:
            await self._session.close()

    async def get_average_rate(
        self, asset_pair: str, created_utc: datetime
    ) -> AverageRate | None:
        """
        Get average rate for asset pair at instant.

        Args:
            asset_pair: Asset pair, e.g. BTCUSD
            created_utc: Instant the rate is requested for

        Returns:
            AverageRate or None if the service has no rate

        Raises:
            aiohttp.ClientResponseError: On non-404 HTTP errors
        """
        timestamp = created_utc.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
        url = f"{self.base_url}/api/IcoExRate/average/{asset_pair}/{timestamp}"

        session = await self._get_session()
        async with session.get(url) as response:
            if response.status == 404:
                logger.warning(f"Exchange rate not found: {asset_pair} at {timestamp}")
                return None

            response.raise_for_status()
            data = await response.json()

        return AverageRate.model_validate(data)
