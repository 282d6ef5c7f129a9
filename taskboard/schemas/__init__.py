"""Schema modules."""
from taskboard.schemas.task import Task, TaskCreate, TaskUpdate, RemoteTask
from taskboard.schemas.state import SyncState, SyncStatus, TaskListState, TaskListStatus
