"""Task CRUD operations."""
from typing import Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.crud.base import CRUDBase
from taskboard.models.task import TaskRecord
from taskboard.schemas.task import Task, TaskUpdate

# Incomplete first, newest first; id breaks ties between rows written in one batch
TASK_LIST_ORDER = (
    TaskRecord.is_completed.asc(),
    TaskRecord.created_at.desc(),
    TaskRecord.id.desc(),
)


class CRUDTask(CRUDBase[TaskRecord, Task, TaskUpdate]):
    """CRUD operations for TaskRecord."""

    @staticmethod
    def _record_from(task: Task) -> TaskRecord:
        return TaskRecord(
            id=task.id,
            title=task.title,
            description=task.description,
            is_completed=task.is_completed,
            created_at=task.created_at,
            synced_with_network=task.synced_with_network,
        )

    async def list_ordered(self, db: AsyncSession) -> List[TaskRecord]:
        """All tasks in display order."""
        return await self.get_multi(db, order_by=TASK_LIST_ORDER)

    async def upsert(self, db: AsyncSession, *, task: Task) -> TaskRecord:
        """Insert the task, or fully replace the row with the same id."""
        if task.id is None:
            return await self.create(db, obj_in=task.model_dump(exclude={"id"}))

        db_obj = await db.merge(self._record_from(task))
        await db.commit()
        return db_obj

    async def upsert_many(self, db: AsyncSession, *, tasks: Iterable[Task]) -> List[TaskRecord]:
        """Upsert a batch in a single transaction."""
        merged = []
        for task in tasks:
            if task.id is None:
                db_obj = self._record_from(task)
                db.add(db_obj)
            else:
                db_obj = await db.merge(self._record_from(task))
            merged.append(db_obj)
        await db.commit()
        return merged

    async def update_fields(self, db: AsyncSession, *, task: Task) -> Optional[TaskRecord]:
        """Copy the editable fields onto the stored row; created_at is kept."""
        db_obj = await self.get(db, task.id)
        if db_obj is None:
            return None
        db_obj.title = task.title
        db_obj.description = task.description
        db_obj.is_completed = task.is_completed
        await db.commit()
        return db_obj

    async def toggle_completion(self, db: AsyncSession, *, task_id: int) -> Optional[TaskRecord]:
        """Flip is_completed on the stored row, leaving other columns untouched."""
        db_obj = await self.get(db, task_id)
        if db_obj is None:
            return None
        db_obj.is_completed = not db_obj.is_completed
        await db.commit()
        return db_obj


task = CRUDTask(TaskRecord)
