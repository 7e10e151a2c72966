"""Detached (fire-and-forget) task runner.

Post-commit side effects such as badge evaluation run here. The caller gets
control back immediately; a failing task is logged and dropped, never
re-raised and never retried. The runner keeps a strong reference to every
pending task so the event loop cannot garbage-collect it mid-flight.
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)


class DetachedTaskRunner:
    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], *, name: str) -> asyncio.Task[Any]:
        """Schedule coro on the running loop and return immediately."""
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning("Detached task cancelled: %s", task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Detached task failed: %s", task.get_name(), exc_info=exc
            )

    async def drain(self, timeout: float) -> None:
        """Wait up to timeout seconds for pending tasks, then cancel the rest."""
        if not self._tasks:
            return
        pending = set(self._tasks)
        _, still_running = await asyncio.wait(pending, timeout=timeout)
        for task in still_running:
            task.cancel()
        if still_running:
            logger.warning("Cancelled %d detached task(s) on shutdown", len(still_running))
            await asyncio.gather(*still_running, return_exceptions=True)


detached_tasks = DetachedTaskRunner()
