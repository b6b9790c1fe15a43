"""
Fire-and-forget cache writes.

Warming the cache after a create or a cache-miss resolve must not hold up
the response, so the write is scheduled as a task on the running loop and
its result is discarded. Failures are logged for diagnostics only.
"""

import asyncio
import logging
from typing import Set

from .strategies import CacheStrategy

logger = logging.getLogger(__name__)

# Strong references to in-flight writes; the loop only keeps weak ones
_pending: Set[asyncio.Task] = set()


def _on_done(task: asyncio.Task) -> None:
    _pending.discard(task)
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.warning("Background cache write failed: %s", error)
    elif task.result() is False:
        logger.warning("Background cache write was rejected by the backend")


def schedule_cache_write(cache: CacheStrategy, key: str, value: str, ttl: int) -> asyncio.Task:
    """Start cache.set(key, value, ttl) without awaiting it"""
    task = asyncio.get_running_loop().create_task(cache.set(key, value, ttl=ttl))
    _pending.add(task)
    task.add_done_callback(_on_done)
    return task


async def drain_pending_writes() -> None:
    """Wait for every scheduled write to finish (used on shutdown and in tests)"""
    if _pending:
        await asyncio.gather(*list(_pending), return_exceptions=True)
