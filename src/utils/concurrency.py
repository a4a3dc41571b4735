"""Fan-out helpers for the aggregation and matching stages.

Two patterns are exposed:

1. **with_timeout** -- bound a single awaitable by a deadline, turning
   ``asyncio.TimeoutError`` into a :class:`ProviderUnavailableError` that
   names the provider, so a hung source reads like any other failure.

2. **gather_settled** -- a "wait for all, fail none" join over a list of
   awaitables.  Every awaitable runs to completion (or failure); failures
   are logged and replaced by a caller-supplied fallback value so the
   result list stays positionally aligned with the input.

Cancellation is not swallowed: if the enclosing task is cancelled (e.g.
the HTTP client disconnected), ``asyncio.gather`` cancels every child.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, TypeVar

import structlog

from src.utils.errors import ProviderUnavailableError
from src.utils.logging import get_logger

_T = TypeVar("_T")

_logger: structlog.BoundLogger = get_logger(__name__)


async def with_timeout(
    awaitable: Awaitable[_T],
    timeout: float,
    provider_name: str,
) -> _T:
    """Await *awaitable*, raising ProviderUnavailableError after *timeout* seconds."""
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as exc:
        raise ProviderUnavailableError(
            message=f"timed out after {timeout:g}s",
            provider_name=provider_name,
        ) from exc


async def gather_settled(
    coros: list[Awaitable[_T]],
    fallback: Callable[[int, BaseException], _T],
    logger: structlog.BoundLogger | None = None,
    error_msg: str = "fan_out_task_failed",
) -> list[_T]:
    """Run awaitables concurrently and wait for every one of them.

    Parameters
    ----------
    coros:
        Awaitable objects to execute concurrently.
    fallback:
        Called as ``fallback(index, exc)`` for every awaitable that raised;
        its return value takes that awaitable's slot in the result.
    logger:
        Optional structured logger for failure warnings.
    error_msg:
        Log event name used for failures.

    Returns
    -------
    list[_T]
        Results in the same order as the input awaitables.
    """
    if logger is None:
        logger = _logger

    raw_results = await asyncio.gather(*coros, return_exceptions=True)

    settled: list[_T] = []
    for idx, result in enumerate(raw_results):
        if isinstance(result, asyncio.CancelledError):
            raise result
        if isinstance(result, BaseException):
            logger.warning(error_msg, index=idx, error=str(result))
            settled.append(fallback(idx, result))
        else:
            settled.append(result)
    return settled
