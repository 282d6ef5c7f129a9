"""Sync cycle: pull the remote snapshot and merge it into the task store."""
from __future__ import annotations

import asyncio
import logging
import time
from typing import List, Optional

from taskboard.config import settings
from taskboard.core.exceptions import NetworkFailure, TaskboardError
from taskboard.core.metrics import sync_cycles_total, sync_duration_seconds, synced_tasks_total
from taskboard.core.observable import ObservableState
from taskboard.core.result import Result
from taskboard.integrations.remote import RemoteTaskSource
from taskboard.schemas.state import SyncState, SyncStatus
from taskboard.schemas.task import RemoteTask, Task, utc_now
from taskboard.services.task_store import TaskStore

logger = logging.getLogger(__name__)


class TaskSynchronizer:
    """
    Runs sync cycles and exposes their progress as an observable SyncState.

    State machine::

        IDLE -> SYNCING -> SUCCESS -> (after reset_delay) IDLE
                        -> ERROR   (stays until the next cycle)

    Merge policy is last-write-wins on id: every remote record fully replaces
    the local row with the same id; local rows missing from the snapshot are
    left alone. Only one cycle runs at a time.
    """

    def __init__(
        self,
        store: TaskStore,
        remote: RemoteTaskSource,
        *,
        timeout: Optional[float] = None,
        reset_delay: Optional[float] = None,
    ):
        self._store = store
        self._remote = remote
        self.timeout = settings.SYNC_TIMEOUT_SECONDS if timeout is None else timeout
        self.reset_delay = settings.SYNC_RESET_DELAY_SECONDS if reset_delay is None else reset_delay
        self.state: ObservableState[SyncState] = ObservableState(SyncState.idle())
        self._running = False
        self._reset_task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._running

    @staticmethod
    def to_local(remote_tasks: List[RemoteTask]) -> List[Task]:
        """Map remote records to local tasks: remote id kept, flagged as synced."""
        now = utc_now()
        return [
            Task(
                id=remote_task.id,
                title=remote_task.title,
                description=remote_task.description,
                is_completed=remote_task.is_completed,
                created_at=now,
                synced_with_network=True,
            )
            for remote_task in remote_tasks
        ]

    async def _fetch(self) -> List[RemoteTask]:
        try:
            return await asyncio.wait_for(self._remote.fetch_tasks(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise NetworkFailure(f"Remote fetch timed out after {self.timeout:g}s") from e

    async def run(self) -> Result[int]:
        """Run one sync cycle. The payload is the number of records merged."""
        if self._running:
            return Result.error("Sync already in progress", kind="conflict")

        self._running = True
        self._cancel_reset()
        self.state.set(SyncState.syncing())
        started = time.monotonic()

        try:
            remote_tasks = await self._fetch()
            stored = await self._store.upsert_many(self.to_local(remote_tasks))
        except TaskboardError as e:
            message = f"Sync failed: {e.message}"
            logger.warning(message)
            sync_cycles_total.labels(outcome="error").inc()
            self.state.set(SyncState.error(message))
            return Result.error(message, kind=e.kind)
        except asyncio.CancelledError:
            logger.info("Sync cycle cancelled")
            sync_cycles_total.labels(outcome="cancelled").inc()
            self.state.set(SyncState.idle())
            raise
        finally:
            self._running = False
            sync_duration_seconds.observe(time.monotonic() - started)

        synced_tasks_total.inc(len(stored))
        sync_cycles_total.labels(outcome="success").inc()
        logger.info(f"Sync merged {len(stored)} tasks")
        self.state.set(SyncState.success())
        self._reset_task = asyncio.create_task(self._reset_after_delay())
        return Result.success(len(stored))

    async def _reset_after_delay(self) -> None:
        await asyncio.sleep(self.reset_delay)
        if self.state.value.status == SyncStatus.SUCCESS:
            self.state.set(SyncState.idle())

    def _cancel_reset(self) -> None:
        if self._reset_task is not None and not self._reset_task.done():
            self._reset_task.cancel()
        self._reset_task = None

    def close(self) -> None:
        """Cancel the pending reset timer and end state observations."""
        self._cancel_reset()
        self.state.close()
