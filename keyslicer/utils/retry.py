"""Async retry helper."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_async(
    fn: Callable[..., Awaitable[T]],
    *args: Any,
    retries: int = 0,
    delay: float = 0.5,
    backoff: float = 2.0,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    **kwargs: Any,
) -> T:
    """Await ``fn(*args, **kwargs)``, retrying on failure with exponential backoff.

    Args:
        fn: Coroutine function to call
        retries: Extra attempts after the first failure (0 = no retry)
        delay: Seconds to wait before the first retry
        backoff: Multiplier applied to the delay after each retry
        retry_on: Exception types that trigger a retry

    Returns:
        Result of the first successful call

    Raises:
        The last exception once all attempts are used up
    """
    attempt = 0
    wait = delay
    while True:
        try:
            return await fn(*args, **kwargs)
        except retry_on as e:
            if attempt >= retries:
                raise
            attempt += 1
            logger.warning(
                "retry_scheduled",
                extra={
                    "attempt": attempt,
                    "max_retries": retries,
                    "delay": wait,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            if wait > 0:
                await asyncio.sleep(wait)
            wait *= backoff
