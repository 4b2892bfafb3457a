"""
Blocking upstream call with retries and exponential backoff, run off the event loop.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 3
DEFAULT_INITIAL_BACKOFF = 0.5


async def call_with_retries(
    fn: Callable[[], Any],
    label: str,
    max_retries: int = DEFAULT_MAX_RETRIES,
    initial_backoff: float = DEFAULT_INITIAL_BACKOFF,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> Tuple[Optional[Any], Optional[str]]:
    """
    Run fn() in a worker thread up to max_retries times.
    Returns (result, None) on success, (None, error_message) after the last failure.
    """
    last_error: Optional[str] = None
    attempts = max(1, max_retries)
    for attempt in range(attempts):
        try:
            return (await asyncio.to_thread(fn), None)
        except Exception as e:
            last_error = f"{type(e).__name__}: {e}"
            logger.warning(
                "UPSTREAM retry attempt=%s/%s call=%s error=%s",
                attempt + 1, attempts, label, last_error,
            )
        if attempt < attempts - 1:
            delay = initial_backoff * (2 ** attempt)
            logger.info("UPSTREAM backoff %.1fs before retry", delay)
            await sleep(delay)
    return (None, last_error)
