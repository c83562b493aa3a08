"""Helpers for running blocking boto3 calls from coroutines."""
import asyncio
from collections.abc import Callable
from typing import Any, Optional, TypeVar

from botocore.exceptions import BotoCoreError, ClientError

T = TypeVar("T")

# Errors a wrapped AWS call can raise besides cancellation.
AWS_ERRORS = (BotoCoreError, ClientError, asyncio.TimeoutError)


async def run_blocking(
    func: Callable[..., T],
    /,
    *args: Any,
    timeout: Optional[float] = None,
    **kwargs: Any,
) -> T:
    """Run ``func`` in a worker thread and await it.

    Args:
        func: Blocking callable, usually a boto3 client method.
        timeout: Seconds to wait before raising ``asyncio.TimeoutError``.
            ``None`` waits indefinitely.

    Returns:
        Whatever ``func`` returns.
    """
    return await asyncio.wait_for(
        asyncio.to_thread(func, *args, **kwargs), timeout,
    )


class Deadline:
    """Overall time budget shared by a sequence of calls."""

    def __init__(self, timeout: Optional[float] = None):
        self._expires: Optional[float] = None
        if timeout is not None:
            self._expires = asyncio.get_running_loop().time() + timeout

    def remaining(self) -> Optional[float]:
        """Seconds left, never negative. ``None`` when unbounded."""
        if self._expires is None:
            return None
        return max(0.0, self._expires - asyncio.get_running_loop().time())
