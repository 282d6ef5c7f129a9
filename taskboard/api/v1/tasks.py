"""Tasks API endpoints."""
from typing import List
from fastapi import APIRouter, Depends, Response, WebSocket, status
from taskboard.core.exceptions import NotFoundError, raise_for_result
from taskboard.dependencies import get_task_board, get_task_service
from taskboard.routing.state_stream import stream_state
from taskboard.schemas.state import TaskListState
from taskboard.schemas.task import Task, TaskCreate, TaskUpdate
from taskboard.services.task_board import TaskBoard
from taskboard.services.task_service import TaskService

router = APIRouter()


async def _load_task(service: TaskService, task_id: int) -> Task:
    result = await service.get_task(task_id)
    raise_for_result(result)
    if result.data is None:
        raise NotFoundError(f"Task {task_id} not found")
    return result.data


@router.get("", response_model=List[Task])
async def list_tasks(service: TaskService = Depends(get_task_service)):
    """List tasks: incomplete first, newest first."""
    result = await service.list_tasks()
    raise_for_result(result)
    return result.data


@router.get("/state", response_model=TaskListState)
async def get_task_list_state(board: TaskBoard = Depends(get_task_board)):
    """Current task list projection."""
    return board.task_list.value


@router.websocket("/ws")
async def stream_task_list(websocket: WebSocket, board: TaskBoard = Depends(get_task_board)):
    """Push the task list projection on every change."""
    await stream_state(websocket, board.task_list)


@router.get("/{task_id}", response_model=Task)
async def get_task(task_id: int, service: TaskService = Depends(get_task_service)):
    """Fetch a task by id."""
    return await _load_task(service, task_id)


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(payload: TaskCreate, service: TaskService = Depends(get_task_service)):
    """Create a local task."""
    result = await service.add_task(payload.title, payload.description)
    raise_for_result(result)
    return await _load_task(service, result.data)


@router.put("/{task_id}", response_model=Task)
async def update_task(
    task_id: int,
    payload: TaskUpdate,
    service: TaskService = Depends(get_task_service),
):
    """Update title, description or completion of a task."""
    existing = await _load_task(service, task_id)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    result = await service.update_task(existing.model_copy(update=changes))
    raise_for_result(result)
    return result.data


@router.post("/{task_id}/toggle", response_model=Task)
async def toggle_task(task_id: int, service: TaskService = Depends(get_task_service)):
    """Flip the completion flag."""
    existing = await _load_task(service, task_id)
    result = await service.toggle_completion(existing)
    raise_for_result(result)
    return result.data


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: int, service: TaskService = Depends(get_task_service)):
    """Delete a task. Deleting an unknown id also succeeds."""
    result = await service.delete_task_by_id(task_id)
    raise_for_result(result)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_tasks(service: TaskService = Depends(get_task_service)):
    """Delete every task."""
    result = await service.clear_tasks()
    raise_for_result(result)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
