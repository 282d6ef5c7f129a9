"""Service wiring and FastAPI dependencies."""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import async_sessionmaker
from starlette.requests import HTTPConnection

from taskboard.integrations.remote import RemoteTaskSource
from taskboard.services.task_board import TaskBoard
from taskboard.services.task_service import TaskService
from taskboard.services.task_store import TaskStore
from taskboard.services.task_synchronizer import TaskSynchronizer


@dataclass
class Services:
    """Everything constructed at startup, owned by the application."""

    store: TaskStore
    remote: RemoteTaskSource
    synchronizer: TaskSynchronizer
    service: TaskService
    board: TaskBoard


def build_services(
    session_factory: async_sessionmaker,
    remote: Optional[RemoteTaskSource] = None,
) -> Services:
    """Compose store, remote source, synchronizer, facade and board."""
    store = TaskStore(session_factory)
    remote = remote or RemoteTaskSource()
    synchronizer = TaskSynchronizer(store, remote)
    service = TaskService(store, synchronizer)
    board = TaskBoard(service)
    return Services(
        store=store,
        remote=remote,
        synchronizer=synchronizer,
        service=service,
        board=board,
    )


async def shutdown_services(services: Services) -> None:
    """Cancel in-flight work and end every subscription."""
    await services.board.close()
    services.synchronizer.close()
    services.store.close()


def get_services(connection: HTTPConnection) -> Services:
    return connection.app.state.services


def get_task_service(connection: HTTPConnection) -> TaskService:
    """Dependency returning the task service facade."""
    return get_services(connection).service


def get_task_board(connection: HTTPConnection) -> TaskBoard:
    """Dependency returning the application's task board."""
    return get_services(connection).board
