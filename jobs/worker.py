"""
Worker entry point.

Run with: dramatiq jobs.worker
"""

from jobs.broker import broker
from jobs.log_setup import setup_logging

setup_logging()

# Register actors
from jobs.tasks import blockchain_transaction_queue, transaction_queue  # noqa: E402

__all__ = [
    "broker",
    "transaction_queue",
    "blockchain_transaction_queue",
]
