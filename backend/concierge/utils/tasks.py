# /concierge/utils/tasks.py

import asyncio
import logging
from typing import Coroutine, Any, Set

logger = logging.getLogger(__name__)

# Best-effort work (webhooks, operator alerts) is scheduled here so the
# request that triggered it can return immediately. The event loop only keeps
# weak references to tasks, so we hold them until they finish.
_background_tasks: Set[asyncio.Task] = set()


def fire_and_forget(coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task:
    task = asyncio.create_task(coro, name=name)
    _background_tasks.add(task)
    task.add_done_callback(_on_background_task_done)
    return task


def _on_background_task_done(task: asyncio.Task):
    _background_tasks.discard(task)
    if task.cancelled():
        logger.info(f"Background task '{task.get_name()}' was cancelled.")
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"Background task '{task.get_name()}' failed: {exc}", exc_info=exc)


def pending_background_tasks() -> int:
    return len(_background_tasks)


async def drain_background_tasks(timeout: float = 5.0):
    """Gives in-flight best-effort work a bounded chance to finish on shutdown."""
    if not _background_tasks:
        return
    logger.info(f"Waiting for {len(_background_tasks)} background task(s) to finish...")
    _, still_running = await asyncio.wait(set(_background_tasks), timeout=timeout)
    for task in still_running:
        task.cancel()
