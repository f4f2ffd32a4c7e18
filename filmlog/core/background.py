"""Detached background tasks whose failures never reach the caller."""

import asyncio
from collections.abc import Coroutine
from typing import Any

from filmlog.core.logging import get_logger

logger = get_logger("background")

# Strong references so the event loop does not garbage-collect running tasks.
_tasks: set[asyncio.Task[Any]] = set()


def _on_done(task: asyncio.Task[Any]) -> None:
    _tasks.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(
            "Background task failed",
            exc_info=exc,
            extra={"task_name": task.get_name()},
        )


def spawn(coro: Coroutine[Any, Any, Any], *, name: str | None = None) -> asyncio.Task[Any]:
    """Schedule a coroutine without awaiting it.

    Failures are logged and discarded; they are never retried.

    Args:
        coro: Coroutine to run.
        name: Optional task name used in log output.

    Returns:
        The scheduled task.
    """
    task = asyncio.create_task(coro, name=name)
    _tasks.add(task)
    task.add_done_callback(_on_done)
    return task


async def drain(timeout: float | None = None) -> None:
    """Wait for outstanding background tasks, e.g. during shutdown."""
    if not _tasks:
        return
    await asyncio.wait(list(_tasks), timeout=timeout)


def pending() -> int:
    """Number of background tasks still running."""
    return len(_tasks)
