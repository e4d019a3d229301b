from __future__ import annotations

import asyncio
import inspect
import logging
import time
from typing import Any, Callable, Optional, Sequence

from projectforge.graph import TaskGraph, UnknownTaskError

from .types import RunResult, Severity, Task, TaskEvent, TaskResult, TaskStatus

logger = logging.getLogger(__name__)

Notify = Callable[[TaskEvent], None]


def _error_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class Executor:
    """Runs tasks one at a time, stopping at the first fatal failure."""

    def __init__(
        self,
        tasks: Sequence[Task],
        graph: Optional[TaskGraph] = None,
        *,
        notify: Optional[Notify] = None,
    ):
        self.tasks = {task.title: task for task in tasks}
        self.graph = graph or TaskGraph.from_tasks(tasks)
        self.notify = notify

    def _emit(self, title: str, status: TaskStatus, message: str = "") -> None:
        logger.debug("%s: %s %s", title, status.value, message)
        if self.notify is not None:
            self.notify(TaskEvent(title, status, message))

    async def _run_one(self, task: Task, ctx: Any) -> TaskResult:
        self._emit(task.title, TaskStatus.RUNNING)

        start = time.monotonic()
        try:
            if task.skip is not None and task.skip(ctx):
                self._emit(task.title, TaskStatus.SKIPPED)
                return TaskResult(task.title, TaskStatus.SKIPPED)

            outcome = task.action(ctx)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as exc:
            duration = time.monotonic() - start
            message = _error_message(exc)
            if task.severity is Severity.ADVISORY:
                logger.warning("%s failed (advisory): %s", task.title, message)
                self._emit(task.title, TaskStatus.WARNED, message)
                return TaskResult(task.title, TaskStatus.WARNED, message, duration)

            logger.error("%s failed: %s", task.title, message, exc_info=exc)
            self._emit(task.title, TaskStatus.FAILED, message)
            return TaskResult(task.title, TaskStatus.FAILED, message, duration)

        duration = time.monotonic() - start
        self._emit(task.title, TaskStatus.SUCCEEDED)
        return TaskResult(task.title, TaskStatus.SUCCEEDED, "", duration)

    async def _run(self, order: list[str], ctx: Any) -> RunResult:
        results: dict[str, TaskResult] = {}
        failed: list[str] = []
        skipped: list[str] = []
        cancelled: list[str] = []
        warned: list[str] = []

        for index, title in enumerate(order):
            result = await self._run_one(self.tasks[title], ctx)
            results[title] = result

            if result.status is TaskStatus.SKIPPED:
                skipped.append(title)
            elif result.status is TaskStatus.WARNED:
                warned.append(title)
            elif result.status is TaskStatus.FAILED:
                failed.append(title)
                # Remaining tasks are announced, never evaluated.
                for rest in order[index + 1 :]:
                    note = f"skipped due to failure of '{title}'"
                    self._emit(rest, TaskStatus.CANCELLED, note)
                    results[rest] = TaskResult(rest, TaskStatus.CANCELLED, note)
                    cancelled.append(rest)
                break

        return RunResult(order, results, failed, skipped, cancelled, warned)

    async def arun_all(self, ctx: Any = None) -> RunResult:
        return await self._run(self.graph.topo_order(), ctx)

    async def arun_single(self, title: str, ctx: Any = None) -> RunResult:
        if title not in self.tasks:
            raise UnknownTaskError(title)
        return await self._run([title], ctx)

    async def arun_through(self, title: str, ctx: Any = None) -> RunResult:
        return await self._run(self.graph.subgraph_order(title), ctx)

    def run_all(self, ctx: Any = None) -> RunResult:
        return asyncio.run(self.arun_all(ctx))

    def run_single(self, title: str, ctx: Any = None) -> RunResult:
        return asyncio.run(self.arun_single(title, ctx))

    def run_through(self, title: str, ctx: Any = None) -> RunResult:
        return asyncio.run(self.arun_through(title, ctx))
