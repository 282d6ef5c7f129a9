"""Durable task store with live change notifications."""
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taskboard.core.exceptions import StorageFailure
from taskboard.core.observable import Broadcast, Subscription
from taskboard.crud.task import task as task_crud
from taskboard.schemas.task import Task

logger = logging.getLogger(__name__)


class TaskStore:
    """
    Keyed task collection backed by the ``tasks`` table.

    Writes are serialized by a single lock. After each committed write the
    full ordered task list is re-read and published while the lock is still
    held, so observers receive snapshots in commit order. Reads do not take
    the lock. Database errors surface as ``StorageFailure``; nothing is
    retried here.
    """

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory
        self._write_lock = asyncio.Lock()
        self._changes: Broadcast[List[Task]] = Broadcast()

    @asynccontextmanager
    async def _session(self, action: str) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as db:
            try:
                yield db
            except SQLAlchemyError as e:
                await db.rollback()
                logger.error(f"Task store {action} failed: {e}")
                raise StorageFailure(str(e)) from e

    async def _snapshot(self) -> List[Task]:
        async with self._session("list") as db:
            records = await task_crud.list_ordered(db)
            return [Task.model_validate(record) for record in records]

    async def _publish(self) -> None:
        # Called with the write lock held, after the commit
        if not self._changes.subscriber_count:
            return
        try:
            snapshot = await self._snapshot()
        except StorageFailure as e:
            logger.error(f"Task list refresh after write failed: {e.message}")
            return
        self._changes.publish(snapshot)

    # ---- reads ----

    async def observe(self) -> Subscription[List[Task]]:
        """
        Subscribe to the ordered task list.

        The current snapshot is delivered first, then a fresh snapshot after
        every mutation until the subscription is closed.
        """
        async with self._write_lock:
            snapshot = await self._snapshot()
            return self._changes.subscribe([snapshot])

    async def list_tasks(self) -> List[Task]:
        """One-shot ordered snapshot."""
        return await self._snapshot()

    async def get(self, task_id: int) -> Optional[Task]:
        async with self._session("get") as db:
            record = await task_crud.get(db, task_id)
            return Task.model_validate(record) if record is not None else None

    async def count(self) -> int:
        async with self._session("count") as db:
            return await task_crud.count(db)

    # ---- writes ----

    async def upsert(self, task: Task) -> Task:
        """Insert if the id is new (or unset), otherwise replace the whole record."""
        async with self._write_lock:
            async with self._session("upsert") as db:
                record = await task_crud.upsert(db, task=task)
                stored = Task.model_validate(record)
            logger.debug(f"Upserted task id={stored.id}")
            await self._publish()
            return stored

    async def upsert_many(self, tasks: Iterable[Task]) -> List[Task]:
        """Upsert a batch atomically: either every record is written or none is."""
        batch = list(tasks)
        async with self._write_lock:
            async with self._session("upsert_many") as db:
                records = await task_crud.upsert_many(db, tasks=batch)
                stored = [Task.model_validate(record) for record in records]
            logger.debug(f"Upserted {len(stored)} tasks")
            await self._publish()
            return stored

    async def update(self, task: Task) -> Optional[Task]:
        """Edit title, description and completion of an existing task. Returns None if it does not exist."""
        async with self._write_lock:
            async with self._session("update") as db:
                record = await task_crud.update_fields(db, task=task)
                if record is None:
                    return None
                stored = Task.model_validate(record)
            await self._publish()
            return stored

    async def toggle_completion(self, task_id: int) -> Optional[Task]:
        """Flip ``is_completed`` of the stored task. Returns None if it does not exist."""
        async with self._write_lock:
            async with self._session("toggle") as db:
                record = await task_crud.toggle_completion(db, task_id=task_id)
                if record is None:
                    return None
                stored = Task.model_validate(record)
            await self._publish()
            return stored

    async def delete(self, task_id: int) -> bool:
        """Remove the task. Deleting a missing task is a no-op returning False."""
        async with self._write_lock:
            async with self._session("delete") as db:
                removed = await task_crud.remove(db, id=task_id)
            if not removed:
                logger.debug(f"Delete of missing task id={task_id} ignored")
                return False
            await self._publish()
            return True

    async def clear(self) -> int:
        """Remove all tasks. Returns the number of rows removed."""
        async with self._write_lock:
            async with self._session("clear") as db:
                removed = await task_crud.remove_all(db)
            logger.info(f"Cleared {removed} tasks")
            await self._publish()
            return removed

    def close(self) -> None:
        """End every open observation."""
        self._changes.close()
