"""Bounded pool of background orchestrations."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable

from .orchestrator import FailureHook

logger = logging.getLogger(__name__)

Handler = Callable[[str], Awaitable[Any]]


class ExecutionSupervisor:
    """Fire-and-forget scheduling with a concurrency cap.

    ``submit`` returns immediately; at most ``max_concurrency`` handlers run at
    once. Anything escaping a handler is logged and passed to the failure hooks.
    """

    def __init__(
        self,
        handler: Handler,
        *,
        max_concurrency: int = 8,
        failure_hooks: Iterable[FailureHook] = (),
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._handler = handler
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._tasks: dict[asyncio.Task, str] = {}
        self._failure_hooks: list[FailureHook] = list(failure_hooks)
        self._closed = False

    def add_failure_hook(self, hook: FailureHook) -> None:
        self._failure_hooks.append(hook)

    @property
    def in_flight(self) -> list[str]:
        return list(self._tasks.values())

    def submit(self, key: str) -> asyncio.Task:
        if self._closed:
            raise RuntimeError("Supervisor is shut down")
        task = asyncio.create_task(self._run(key), name=f"execute-{key[:16]}")
        self._tasks[task] = key
        task.add_done_callback(self._tasks.pop)
        return task

    async def join(self) -> None:
        """Wait for everything submitted so far."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self) -> None:
        self._closed = True
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info("Cancelled %d in-flight orchestrations", len(tasks))

    async def _run(self, key: str) -> None:
        async with self._semaphore:
            try:
                await self._handler(key)
            except asyncio.CancelledError:
                logger.info("Orchestration of %s cancelled", key)
                raise
            except Exception as exc:
                logger.exception("Orchestration of %s escaped its handler", key)
                for hook in self._failure_hooks:
                    try:
                        hook(key, exc)
                    except Exception:
                        logger.exception("Failure hook raised for %s", key)


__all__ = ["ExecutionSupervisor"]
