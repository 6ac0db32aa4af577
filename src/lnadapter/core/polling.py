"""
Retry helper for operations that settle asynchronously.
"""

import asyncio
from typing import Awaitable, Callable, TypeVar

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def max_attempts(interval: float, timeout: float) -> int:
    """
    Number of attempts made within a timeout budget.

    The first attempt is immediate; each retry spends one interval of the
    budget. Division is rounded to micro-precision so that budgets such as
    0.3 / 0.1 yield 3 retries rather than 2.
    """
    if interval <= 0:
        raise ValueError(f"interval must be positive, got {interval}")
    if timeout <= 0:
        return 1
    return int(round(timeout / interval, 6)) + 1


async def wait_for(
    condition: Callable[[], Awaitable[T]],
    interval: float = 3,
    timeout: float = 30,
) -> T:
    """
    Call ``condition`` until it returns without raising.

    Args:
        condition: Coroutine factory to retry
        interval: Seconds to sleep between attempts
        timeout: Total sleep budget in seconds

    Returns:
        The first successful result

    Raises:
        The last exception raised by ``condition`` once the budget is spent
    """
    attempts = max_attempts(interval, timeout)

    for attempt in range(1, attempts + 1):
        try:
            return await condition()
        except Exception as e:
            if attempt >= attempts:
                logger.debug("wait_for_exhausted", attempts=attempts, error=str(e))
                raise
            logger.debug("wait_for_retry", attempt=attempt, error=str(e))
            await asyncio.sleep(interval)

    raise AssertionError("unreachable")
