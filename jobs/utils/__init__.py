"""Task utilities."""
from jobs.utils.processing import (
    investor_lock,
    process_with_investor_lock,
    transaction_service_context,
)

__all__ = [
    "investor_lock",
    "process_with_investor_lock",
    "transaction_service_context",
]
