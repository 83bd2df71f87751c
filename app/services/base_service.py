"""
Base service class.

Provides common functionality for all service classes including session management,
logging, and helper decorators.
"""

import functools
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession


# Type variable for generic decorator return types
T = TypeVar("T")


@dataclass
class ServiceResult:
    """
    Standard service result container.

    Used to return structured results from service methods.
    """
    success: bool
    data: Any = None
    error: str | None = None
    error_code: str | None = None


class BaseService:
    """
    Base service class.

    Provides common functionality for all service classes:
    - Session management
    - Logging with bound service context
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize base service.

        Args:
            session: Async database session
        """
        self.session = session
        self.logger = logger.bind(service=self.__class__.__name__)

    async def commit(self) -> None:
        """Commit current transaction."""
        await self.session.commit()

    async def rollback(self) -> None:
        """Rollback current transaction."""
        await self.session.rollback()

    async def safe_commit(self, operation: str) -> bool:
        """
        Commit current transaction, rolling back if the commit fails.

        Args:
            operation: Operation name for the log line

        Returns:
            True if committed
        """
        try:
            await self.commit()
            return True
        except Exception as e:
            self.logger.exception(f"Commit after {operation} failed: {e}")
            try:
                await self.rollback()
            except Exception as rollback_error:
                self.logger.error(f"Rollback after {operation} failed: {rollback_error}")
            return False


def log_operation(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """
    Decorator to log method exit with timing.

    Usage:
        @log_operation
        async def process(self, message):
            ...

    Args:
        func: Async method to wrap

    Returns:
        Wrapped async method
    """
    @functools.wraps(func)
    async def wrapper(self: BaseService, *args: Any, **kwargs: Any) -> T:
        start_time = time.time()

        try:
            result = await func(self, *args, **kwargs)
        except Exception as e:
            self.logger.error(
                f"Failed {func.__name__} in {time.time() - start_time:.3f}s: {e}"
            )
            raise

        self.logger.debug(
            f"Completed {func.__name__} in {time.time() - start_time:.3f}s: {result}"
        )
        return result

    return wrapper


def side_effect(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[ServiceResult]]:
    """
    Decorator to run an operation whose failure must not fail the caller.

    The operation runs inside a savepoint and is committed on success. On
    any exception only the savepoint is rolled back, so work committed
    before it stays intact. The error is logged with traceback and a failed
    ServiceResult is returned.

    Usage:
        @side_effect
        async def _send_confirmation(self, ...):
            ...

    Args:
        func: Async method to wrap

    Returns:
        Wrapped async method returning ServiceResult
    """
    @functools.wraps(func)
    async def wrapper(self: BaseService, *args: Any, **kwargs: Any) -> ServiceResult:
        try:
            async with self.session.begin_nested():
                data = await func(self, *args, **kwargs)
        except Exception as e:
            self.logger.exception(f"{func.__name__} failed: {e}")
            return ServiceResult(success=False, error=str(e), error_code=func.__name__)

        if not await self.safe_commit(func.__name__):
            return ServiceResult(success=False, error="Commit failed", error_code=func.__name__)

        return ServiceResult(success=True, data=data)

    return wrapper
