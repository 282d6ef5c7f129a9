"""View-state holder bound to one UI context."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Optional, Set

from taskboard.core.exceptions import TaskboardError
from taskboard.core.observable import ObservableState
from taskboard.core.result import Result
from taskboard.schemas.state import SyncState, TaskListState
from taskboard.schemas.task import Task
from taskboard.services.task_service import TaskService

logger = logging.getLogger(__name__)


class TaskBoard:
    """
    Holds the task list and sync state a screen renders.

    Commands are fire-and-forget: each launches the facade call as a
    background task and returns immediately. The caller may await the
    returned task, but normally observes ``task_list`` and ``sync_state``
    instead. ``close()`` cancels the projection and any in-flight command;
    writes that already committed stay committed.
    """

    def __init__(self, service: TaskService):
        self._service = service
        self.task_list: ObservableState[TaskListState] = ObservableState(TaskListState.loading())
        self._jobs: Set[asyncio.Task] = set()
        self._watcher: Optional[asyncio.Task] = None

    @property
    def sync_state(self) -> ObservableState[SyncState]:
        return self._service.sync_state

    def start(self) -> None:
        if self._watcher is None:
            self._watcher = asyncio.create_task(self._watch_tasks())

    async def _watch_tasks(self) -> None:
        try:
            subscription = await self._service.observe_tasks()
        except TaskboardError as e:
            self.task_list.set(TaskListState.error(e.message))
            return

        async with subscription:
            async for tasks in subscription:
                self.task_list.set(TaskListState.from_tasks(tasks))

    def _launch(self, coro: Awaitable[Result]) -> "asyncio.Task[Result]":
        job = asyncio.ensure_future(coro)
        self._jobs.add(job)
        job.add_done_callback(self._job_done)
        return job

    def _job_done(self, job: asyncio.Task) -> None:
        self._jobs.discard(job)
        if job.cancelled():
            return
        error = job.exception()
        if error is not None:
            logger.error("Task board command crashed", exc_info=error)
            return
        result = job.result()
        if not result.ok:
            logger.info(f"Task board command failed: {result.message}")

    @property
    def pending_jobs(self) -> int:
        return len(self._jobs)

    def add_task(self, title: str, description: str = "") -> "asyncio.Task[Result]":
        return self._launch(self._service.add_task(title, description))

    def update_task(self, task: Task) -> "asyncio.Task[Result]":
        return self._launch(self._service.update_task(task))

    def toggle_completion(self, task: Task) -> "asyncio.Task[Result]":
        return self._launch(self._service.toggle_completion(task))

    def delete_task(self, task: Task) -> "asyncio.Task[Result]":
        return self._launch(self._service.delete_task(task))

    def sync(self) -> "asyncio.Task[Result]":
        return self._launch(self._service.sync_tasks())

    async def close(self) -> None:
        pending = list(self._jobs)
        if self._watcher is not None:
            pending.append(self._watcher)
            self._watcher = None
        for job in pending:
            job.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        self._jobs.clear()
        self.task_list.close()
