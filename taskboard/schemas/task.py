"""Task schemas."""
from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, Field


def utc_now() -> datetime:
    """Current time as naive UTC, the form stored in the tasks table."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TaskBase(BaseModel):
    """Base task schema."""

    title: str
    description: str = ""


class TaskCreate(TaskBase):
    """Task creation schema."""

    pass


class TaskUpdate(BaseModel):
    """Partial task update schema."""

    title: Optional[str] = None
    description: Optional[str] = None
    is_completed: Optional[bool] = None


class Task(TaskBase):
    """A task record as held by the store.

    ``id`` is ``None`` only for a task that has not been inserted yet.
    """

    id: Optional[int] = None
    is_completed: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    synced_with_network: bool = False

    class Config:
        from_attributes = True
        frozen = True


class RemoteTask(BaseModel):
    """Task record as delivered by the remote source."""

    id: int
    title: str
    description: str = ""
    is_completed: bool = False

    class Config:
        frozen = True
