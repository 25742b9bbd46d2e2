"""
Event loop shared by the Celery sync tasks.

Fetch-and-persist runs are async (httpx, SQLAlchemy async sessions) while
Celery task bodies are sync. Every task in a worker process runs on one
long-lived loop so the async engine's pooled connections stay bound to
the loop that created them.
"""
import asyncio
import logging
from typing import Any, Coroutine, TypeVar

logger = logging.getLogger(__name__)

_loop: asyncio.AbstractEventLoop | None = None

T = TypeVar("T")


def get_event_loop() -> asyncio.AbstractEventLoop:
    """Return the worker's loop, creating it on first use or after cleanup."""
    global _loop

    if _loop is None or _loop.is_closed():
        _loop = asyncio.new_event_loop()
        asyncio.set_event_loop(_loop)
        logger.debug("Created event loop for sync tasks")

    return _loop


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run a fetch-and-persist coroutine to completion from a Celery task.

    Example:
        @celery_app.task
        def fetch_rankings(limit=50):
            return run_async(_fetch_rankings(limit))
    """
    return get_event_loop().run_until_complete(coro)


def cleanup_event_loop() -> None:
    """Cancel leftover tasks and close the loop (worker shutdown)."""
    global _loop

    if _loop is None or _loop.is_closed():
        _loop = None
        return

    try:
        pending = asyncio.all_tasks(_loop)
        for task in pending:
            task.cancel()
        if pending:
            _loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
        _loop.close()
        logger.info("Sync task event loop closed")
    except RuntimeError as e:
        logger.error(f"Error closing sync task event loop: {e}")
    finally:
        _loop = None
