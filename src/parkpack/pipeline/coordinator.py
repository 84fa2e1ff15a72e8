"""
Sequential or parallel dispatch of per-object work.

Objects are independent, so a stage either awaits them one at a time or
launches all of them and joins. Parallelism comes from concurrent child
processes; everything here runs on one event loop.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Iterable, TypeVar

T = TypeVar("T")


async def fan_out(
    items: Iterable[T],
    handler: Callable[[T], Awaitable[object]],
    *,
    parallel: bool,
) -> list[T]:
    """
    Run ``handler`` for every item and wait for all of them.

    In sequential mode the first failure stops the remaining items. In
    parallel mode every handler is launched before any is awaited; the first
    failure propagates once it surfaces, while handlers already running may
    still finish.

    Parameters:
        items: Work items, handled in iteration order
        handler: Coroutine function invoked once per item
        parallel: Launch all handlers at once instead of one by one

    Returns:
        The items that were handled

    Example:
        >>> await fan_out(records, reprocess, parallel=True)
    """
    handled = list(items)
    if parallel:
        await asyncio.gather(*(handler(item) for item in handled))
    else:
        for item in handled:
            await handler(item)
    return handled
