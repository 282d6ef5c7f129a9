"""Task service facade used by every caller (API, task board, scripts)."""
from __future__ import annotations

import logging
from typing import List, Optional

from taskboard.core.exceptions import TaskboardError, ValidationFailure
from taskboard.core.observable import ObservableState, Subscription
from taskboard.core.result import Result
from taskboard.schemas.state import SyncState
from taskboard.schemas.task import Task
from taskboard.services.task_store import TaskStore
from taskboard.services.task_synchronizer import TaskSynchronizer

logger = logging.getLogger(__name__)


def _failure(action: str, error: TaskboardError) -> Result:
    message = f"Failed to {action}: {error.message}"
    logger.warning(message)
    return Result.error(message, kind=error.kind)


def _require_title(title: Optional[str]) -> None:
    if title is None or not title.strip():
        raise ValidationFailure("Title must not be blank")


class TaskService:
    """Wraps store and synchronizer calls in a uniform ``Result``."""

    def __init__(self, store: TaskStore, synchronizer: TaskSynchronizer):
        self.store = store
        self.synchronizer = synchronizer

    @property
    def sync_state(self) -> ObservableState[SyncState]:
        return self.synchronizer.state

    async def observe_tasks(self) -> Subscription[List[Task]]:
        """Live ordered task list. Raises StorageFailure if the first read fails."""
        return await self.store.observe()

    async def list_tasks(self) -> Result[List[Task]]:
        try:
            return Result.success(await self.store.list_tasks())
        except TaskboardError as e:
            return _failure("list tasks", e)

    async def get_task(self, task_id: int) -> Result[Optional[Task]]:
        try:
            return Result.success(await self.store.get(task_id))
        except TaskboardError as e:
            return _failure("load task", e)

    async def add_task(self, title: str, description: str = "") -> Result[int]:
        """Create a local, incomplete, never-synced task. Payload is the new id."""
        try:
            _require_title(title)
            stored = await self.store.upsert(
                Task(
                    title=title,
                    description=description or "",
                    is_completed=False,
                    synced_with_network=False,
                )
            )
        except ValidationFailure as e:
            return Result.error(e.message, kind=e.kind)
        except TaskboardError as e:
            return _failure("add task", e)
        return Result.success(stored.id)

    async def update_task(self, task: Task) -> Result[Task]:
        """Edit an existing task. Its creation time and sync flag stay as stored."""
        try:
            _require_title(task.title)
            stored = await self.store.update(task)
        except ValidationFailure as e:
            return Result.error(e.message, kind=e.kind)
        except TaskboardError as e:
            return _failure("update task", e)
        if stored is None:
            return Result.error(f"Task {task.id} not found", kind="not_found")
        return Result.success(stored)

    async def toggle_completion(self, task: Task) -> Result[Task]:
        """Flip completion of the stored task; all other fields stay as stored."""
        try:
            stored = await self.store.toggle_completion(task.id)
        except TaskboardError as e:
            return _failure("toggle task", e)
        if stored is None:
            return Result.error(f"Task {task.id} not found", kind="not_found")
        return Result.success(stored)

    async def delete_task(self, task: Task) -> Result[bool]:
        """Delete the task. Succeeds whether or not it still existed."""
        return await self.delete_task_by_id(task.id)

    async def delete_task_by_id(self, task_id: int) -> Result[bool]:
        try:
            return Result.success(await self.store.delete(task_id))
        except TaskboardError as e:
            return _failure("delete task", e)

    async def clear_tasks(self) -> Result[int]:
        try:
            return Result.success(await self.store.clear())
        except TaskboardError as e:
            return _failure("clear tasks", e)

    async def sync_tasks(self) -> Result[int]:
        """Run a sync cycle unless one is already running."""
        if self.synchronizer.is_running:
            logger.info("Sync requested while another cycle is running; ignored")
            return Result.error("Sync already in progress", kind="conflict")
        return await self.synchronizer.run()
