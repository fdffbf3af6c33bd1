# permadeploy/utils/async_utils.py
"""Asynchronous operation utilities"""

import asyncio
import threading
from typing import Any, Callable, Coroutine, List, TypeVar

T = TypeVar('T')


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run async coroutine in sync context

    Args:
        coro: Coroutine to run

    Returns:
        Coroutine result
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        # No running loop, use asyncio.run
        return asyncio.run(coro)

    # Already in async context, run on a fresh loop in a new thread
    result = None
    exception = None

    def run_in_thread():
        nonlocal result, exception
        try:
            result = asyncio.run(coro)
        except BaseException as e:
            exception = e

    thread = threading.Thread(target=run_in_thread)
    thread.start()
    thread.join()

    if exception:
        raise exception
    return result


async def run_in_chunks(items: List[Any],
                        processor: Callable[[Any], Coroutine[Any, Any, Any]],
                        chunk_size: int = 10) -> List[Any]:
    """
    Process items in chunks to limit concurrency

    Results keep the order of `items`. The first exception raised in a
    chunk propagates once the whole chunk has settled, and later chunks
    are not started.

    Args:
        items: Items to process
        processor: Async processor function
        chunk_size: Number of items to process concurrently

    Returns:
        List of results
    """
    results = []
    chunk_size = max(1, chunk_size)

    for i in range(0, len(items), chunk_size):
        chunk = items[i:i + chunk_size]
        chunk_results = await asyncio.gather(
            *[processor(item) for item in chunk],
            return_exceptions=True
        )
        for item_result in chunk_results:
            if isinstance(item_result, BaseException):
                raise item_result
        results.extend(chunk_results)

    return results
