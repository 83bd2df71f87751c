"""
Worker logging.

Configures loguru file sink with rotation and retention policies.
"""

from loguru import logger

from app.config.settings import settings


def setup_logging() -> None:
    """Configure logger with file rotation."""
    logger.add(
        settings.log_file,
        rotation="1 day",
        retention="7 days",
        level=settings.log_level,
        encoding="utf-8",
    )

    logger.info(f"Starting ICO investment worker ({settings.environment})...")
