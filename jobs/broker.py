"""
Dramatiq broker configuration.

Redis-based message broker for the transaction queues.
"""

import dramatiq
from dramatiq.brokers.redis import RedisBroker
from dramatiq.middleware import CurrentMessage, Retries, ShutdownNotifications
from loguru import logger

from app.config.settings import settings
from app.utils.redis_utils import get_redis_url_masked

# Initialize Redis broker with graceful shutdown middleware
redis_broker = RedisBroker(
    host=settings.redis_host,
    port=settings.redis_port,
    password=settings.redis_password if settings.redis_password else None,
    db=settings.redis_db,
)

# ShutdownNotifications: Allows workers to gracefully shutdown
# CurrentMessage: Provides access to current message in actors
# Retries: Exponential backoff, fatal processing errors are redelivered
redis_broker.add_middleware(ShutdownNotifications())
redis_broker.add_middleware(CurrentMessage())
redis_broker.add_middleware(
    Retries(
        max_retries=5,
        min_backoff=1000,  # 1 second
        max_backoff=300000,  # 5 minutes
    )
)

# Set as default broker
dramatiq.set_broker(redis_broker)

# Export broker
broker = redis_broker

logger.info(f"Dramatiq broker initialized: {get_redis_url_masked()}")
