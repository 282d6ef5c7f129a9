"""Remote task source (in-process stub of the upstream task API)."""
import asyncio
import logging
import time
from typing import List, Optional

from taskboard.config import settings
from taskboard.core.exceptions import NetworkFailure
from taskboard.schemas.task import RemoteTask, Task

logger = logging.getLogger(__name__)

# Fixed snapshot served by the stub
STUB_TASKS = (
    RemoteTask(
        id=1,
        title="Update LinkedIn Profile",
        description="Add recent projects and refresh profile summary",
        is_completed=True,
    ),
    RemoteTask(
        id=2,
        title="Apply for Android Developer Role",
        description="Submit application to 3 companies",
        is_completed=False,
    ),
    RemoteTask(
        id=3,
        title="Prepare for Technical Interview",
        description="Revise Kotlin, Coroutines, and Jetpack Compose basics",
        is_completed=False,
    ),
)


class RemoteTaskSource:
    """Stub remote API with artificial latency and switchable failures."""

    def __init__(
        self,
        fetch_delay: Optional[float] = None,
        push_delay: Optional[float] = None,
        failure_message: Optional[str] = None,
    ):
        self.fetch_delay = settings.REMOTE_FETCH_DELAY_SECONDS if fetch_delay is None else fetch_delay
        self.push_delay = settings.REMOTE_PUSH_DELAY_SECONDS if push_delay is None else push_delay
        self.failure_message = failure_message or settings.REMOTE_FAILURE_MESSAGE

    def simulate_failure(self, message: Optional[str]) -> None:
        """Make every subsequent call fail with ``message`` (None restores normal behaviour)."""
        self.failure_message = message

    async def _call(self, method: str, delay: float) -> None:
        started = time.monotonic()
        await asyncio.sleep(delay)
        if self.failure_message:
            logger.warning(f"Remote {method} failed after {time.monotonic() - started:.2f}s: {self.failure_message}")
            raise NetworkFailure(self.failure_message)

    async def fetch_tasks(self) -> List[RemoteTask]:
        """Fetch the remote snapshot."""
        await self._call("fetch_tasks", self.fetch_delay)
        tasks = list(STUB_TASKS)
        logger.info(f"Remote fetch_tasks returned {len(tasks)} tasks")
        return tasks

    async def sync_task(self, task: Task) -> bool:
        """Push a single task upstream. Not used by the sync cycle."""
        await self._call("sync_task", self.push_delay)
        logger.info(f"Remote sync_task accepted task id={task.id}")
        return True
