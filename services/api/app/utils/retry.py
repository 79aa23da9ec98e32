"""Retry utility with exponential backoff."""

import asyncio
import logging
import random
from typing import Any, Awaitable, Callable, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def with_retry(
    func: Callable[..., Awaitable[T]],
    *args: Any,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    exceptions: tuple[Type[Exception], ...] = (Exception,),
    **kwargs: Any,
) -> T:
    """
    Execute an async function with exponential backoff retry.

    Only exceptions listed in `exceptions` are retried; anything else
    propagates on the first attempt.

    Args:
        func: The async function to execute
        *args: Positional arguments to pass to func
        max_attempts: Maximum number of attempts (default 3)
        base_delay: Initial delay in seconds (default 1.0)
        max_delay: Maximum delay between retries (default 30.0)
        exceptions: Tuple of exception types to catch and retry
        **kwargs: Keyword arguments to pass to func

    Returns:
        The result of the function call

    Raises:
        The last exception if all retries fail
    """
    name = getattr(func, "__name__", repr(func))

    for attempt in range(1, max_attempts + 1):
        try:
            return await func(*args, **kwargs)
        except exceptions as e:
            if attempt == max_attempts:
                logger.error(f"All {max_attempts} attempts failed for {name}: {e}")
                raise

            # Exponential backoff plus 0-25% jitter
            delay = min(base_delay * (2 ** (attempt - 1)), max_delay)
            actual_delay = delay + delay * random.uniform(0, 0.25)

            logger.warning(
                f"Attempt {attempt}/{max_attempts} failed for {name}: {e}. "
                f"Retrying in {actual_delay:.2f}s..."
            )
            await asyncio.sleep(actual_delay)

    raise RuntimeError("Unexpected retry loop exit")
