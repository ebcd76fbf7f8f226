"""Shared concurrency primitives for the per-turn source fan-out.

Two patterns are exposed:

1. **throttled_gather** -- ``asyncio.gather`` with each awaitable wrapped in
   a semaphore acquire/release, so a burst of turns cannot open more than a
   bounded number of store / search connections at once.

2. **gather_sources** -- the fan-out-then-merge pattern used by the
   inventory resolver: dispatch every named source read concurrently, keep
   successful results, log failures and substitute an empty default for
   each failed source.  A single failing source never fails the turn.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Mapping, TypeVar

import structlog

from localscout.utils.logging import get_logger

_T = TypeVar("_T")

# Upper bound on concurrent source reads across all in-flight turns.
_SOURCE_SEMAPHORE = asyncio.Semaphore(16)

_logger: structlog.BoundLogger = get_logger(__name__)


async def throttled_gather(
    coros: list[Awaitable[_T]],
    semaphore: asyncio.Semaphore | None = None,
    return_exceptions: bool = True,
) -> list[_T | BaseException]:
    """Run awaitables concurrently with semaphore throttling.

    Parameters
    ----------
    coros:
        Awaitable objects to execute concurrently.
    semaphore:
        Optional semaphore for concurrency control.  Defaults to the
        module-level ``_SOURCE_SEMAPHORE``.
    return_exceptions:
        If ``True``, exceptions are returned in the results list rather
        than being raised.  Mirrors ``asyncio.gather`` semantics.

    Returns
    -------
    list[_T | BaseException]
        Results in the same order as the input coroutines.
    """
    if semaphore is None:
        semaphore = _SOURCE_SEMAPHORE

    async def _wrapped(coro: Awaitable[_T]) -> _T:
        async with semaphore:
            return await coro

    tasks = [_wrapped(c) for c in coros]
    return await asyncio.gather(*tasks, return_exceptions=return_exceptions)


async def gather_sources(
    sources: Mapping[str, Awaitable[Any]],
    defaults: Mapping[str, Any] | None = None,
    logger: structlog.BoundLogger | None = None,
    **log_context: Any,
) -> tuple[dict[str, Any], list[str]]:
    """Read every named source concurrently, degrading failures to defaults.

    Parameters
    ----------
    sources:
        Mapping of source name (``"paid"``, ``"semantic"``, ...) to the
        awaitable producing its result.
    defaults:
        Per-source value substituted on failure.  Sources without an entry
        fall back to an empty list.
    logger:
        Optional structured logger for warnings on failures.
    log_context:
        Extra key/values (query, city) attached to failure warnings.

    Returns
    -------
    tuple[dict[str, Any], list[str]]
        The per-source results and the names of the sources that failed.
    """
    if logger is None:
        logger = _logger
    defaults = defaults or {}

    names = list(sources)
    raw_results = await throttled_gather([sources[n] for n in names])

    results: dict[str, Any] = {}
    failed: list[str] = []
    for name, result in zip(names, raw_results):
        if isinstance(result, Exception):
            logger.warning(
                "source_read_failed",
                source=name,
                error=str(result),
                error_type=type(result).__name__,
                **log_context,
            )
            results[name] = defaults.get(name, [])
            failed.append(name)
        elif isinstance(result, BaseException):
            # CancelledError and friends must keep propagating.
            raise result
        else:
            results[name] = result

    return results, failed
