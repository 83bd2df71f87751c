"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.config.constants import (
    DEFAULT_EX_RATE_TIMEOUT_SECONDS,
    DEFAULT_INVESTOR_LOCK_TIMEOUT_SECONDS,
    DEFAULT_LATEST_TRANSACTIONS_LIMIT,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False

    # Redis (for Dramatiq, latest transactions and investor locks)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str | None = None
    redis_db: int = 0

    # Exchange rate service
    ex_rate_service_url: str = Field(
        ..., description="Base URL of the ICO exchange rate service"
    )
    ex_rate_timeout_seconds: float = Field(
        default=DEFAULT_EX_RATE_TIMEOUT_SECONDS, gt=0,
        description="HTTP timeout for exchange rate requests"
    )

    # Links sent to investors
    site_summary_page_url: str = Field(
        ..., description="Investor summary page, {token} is replaced by confirmation token"
    )
    kyc_link_template: str = Field(
        ..., description="KYC provider link, {token} is replaced by encrypted KYC token"
    )

    # Security
    encryption_key: str | None = None

    # Processing
    latest_transactions_limit: int = Field(
        default=DEFAULT_LATEST_TRANSACTIONS_LIMIT, gt=0,
        description="How many latest transactions are kept in Redis"
    )
    investor_lock_timeout: int = Field(
        default=DEFAULT_INVESTOR_LOCK_TIMEOUT_SECONDS, gt=0,
        description="Per-investor processing lock timeout in seconds"
    )

    # Application
    environment: str = "production"
    log_level: str = "INFO"
    log_file: str = "logs/ico_investment.log"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode='after')
    def validate_production(self) -> 'Settings':
        """Validate production-specific requirements."""
        if self.environment == 'production':
            if not self.encryption_key:
                raise ValueError(
                    'ENCRYPTION_KEY is required in production. '
                    'KYC links can not be issued without it.'
                )
            if 'localhost' in self.ex_rate_service_url:
                logger.warning(
                    'EX_RATE_SERVICE_URL points to localhost in production.'
                )
        return self

    @field_validator('site_summary_page_url', 'kyc_link_template')
    @classmethod
    def validate_link_template(cls, v: str) -> str:
        """Validate link template carries the token placeholder."""
        if '{token}' not in v:
            raise ValueError(f'Link template must contain {{token}} placeholder: {v}')
        return v

    @field_validator('ex_rate_service_url')
    @classmethod
    def validate_ex_rate_service_url(cls, v: str) -> str:
        """Validate exchange rate service URL."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('EX_RATE_SERVICE_URL must start with http:// or https://')
        return v.rstrip('/')

    @field_validator('database_url')
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL."""
        if not v.startswith(('postgresql://', 'postgresql+asyncpg://')):
            raise ValueError(
                'DATABASE_URL must start with postgresql:// or postgresql+asyncpg://'
            )
        return v


# Global settings instance
settings = Settings()
