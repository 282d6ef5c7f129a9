"""Transient view-state schemas (never persisted)."""
import enum
from typing import List, Optional
from pydantic import BaseModel

from taskboard.schemas.task import Task


class SyncStatus(str, enum.Enum):
    """Sync cycle progress."""

    IDLE = "IDLE"
    SYNCING = "SYNCING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


class SyncState(BaseModel):
    """Observable sync progress; ``message`` is set only for ERROR."""

    status: SyncStatus = SyncStatus.IDLE
    message: Optional[str] = None

    class Config:
        frozen = True

    @classmethod
    def idle(cls) -> "SyncState":
        return cls(status=SyncStatus.IDLE)

    @classmethod
    def syncing(cls) -> "SyncState":
        return cls(status=SyncStatus.SYNCING)

    @classmethod
    def success(cls) -> "SyncState":
        return cls(status=SyncStatus.SUCCESS)

    @classmethod
    def error(cls, message: str) -> "SyncState":
        return cls(status=SyncStatus.ERROR, message=message)


class TaskListStatus(str, enum.Enum):
    """Task list projection status."""

    LOADING = "LOADING"
    EMPTY = "EMPTY"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


class TaskListState(BaseModel):
    """Projection of the live task list subscription."""

    status: TaskListStatus = TaskListStatus.LOADING
    tasks: List[Task] = []
    message: Optional[str] = None

    class Config:
        frozen = True

    @classmethod
    def loading(cls) -> "TaskListState":
        return cls(status=TaskListStatus.LOADING)

    @classmethod
    def from_tasks(cls, tasks: List[Task]) -> "TaskListState":
        if not tasks:
            return cls(status=TaskListStatus.EMPTY)
        return cls(status=TaskListStatus.SUCCESS, tasks=list(tasks))

    @classmethod
    def error(cls, message: str) -> "TaskListState":
        return cls(status=TaskListStatus.ERROR, message=message)
