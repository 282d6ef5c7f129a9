"""Pytest configuration and fixtures."""
import os
from datetime import datetime
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

TEST_DB_PATH = Path("test_taskboard.db")
if TEST_DB_PATH.exists():
    TEST_DB_PATH.unlink()

os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{TEST_DB_PATH}")
os.environ.setdefault("REMOTE_FETCH_DELAY_SECONDS", "0")
os.environ.setdefault("REMOTE_PUSH_DELAY_SECONDS", "0")
os.environ.setdefault("SYNC_RESET_DELAY_SECONDS", "0.2")
os.environ.setdefault("LOG_FORMAT", "text")

from taskboard.main import app  # noqa: E402
from taskboard.database import Base, build_engine, build_session_factory  # noqa: E402
import taskboard.models  # noqa: E402,F401
from taskboard.integrations.remote import RemoteTaskSource  # noqa: E402
from taskboard.schemas.task import Task  # noqa: E402
from taskboard.services.task_board import TaskBoard  # noqa: E402
from taskboard.services.task_service import TaskService  # noqa: E402
from taskboard.services.task_store import TaskStore  # noqa: E402
from taskboard.services.task_synchronizer import TaskSynchronizer  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Fresh in-memory database per test."""
    engine = build_engine(TEST_DATABASE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def store(test_engine):
    task_store = TaskStore(build_session_factory(test_engine))
    yield task_store
    task_store.close()


@pytest.fixture
def remote():
    return RemoteTaskSource(fetch_delay=0.01, push_delay=0, failure_message=None)


@pytest_asyncio.fixture
async def synchronizer(store, remote):
    sync = TaskSynchronizer(store, remote, timeout=1.0, reset_delay=0.1)
    yield sync
    sync.close()


@pytest.fixture
def service(store, synchronizer):
    return TaskService(store, synchronizer)


@pytest_asyncio.fixture
async def board(service):
    task_board = TaskBoard(service)
    yield task_board
    await task_board.close()


@pytest_asyncio.fixture
async def broken_storage(test_engine):
    """Drop the tasks table so every store operation fails."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def make_task():
    """Build a task with explicit id and creation time."""

    def _make(task_id, title=None, *, completed=False, created=None, synced=False, description=""):
        return Task(
            id=task_id,
            title=title or f"Task {task_id}",
            description=description,
            is_completed=completed,
            created_at=created or datetime(2024, 1, 1, 12, 0, 0),
            synced_with_network=synced,
        )

    return _make


@pytest.fixture(scope="function")
def client():
    """Test client running the full application lifespan."""
    with TestClient(app) as test_client:
        test_client.delete("/api/v1/tasks")
        yield test_client
