"""Sync API endpoints."""
import asyncio
from fastapi import APIRouter, Depends, WebSocket, status
from taskboard.core.exceptions import ConflictError
from taskboard.dependencies import get_task_board
from taskboard.routing.state_stream import stream_state
from taskboard.schemas.state import SyncState, SyncStatus
from taskboard.services.task_board import TaskBoard

router = APIRouter()


@router.post("", response_model=SyncState, status_code=status.HTTP_202_ACCEPTED)
async def trigger_sync(board: TaskBoard = Depends(get_task_board)):
    """Start a sync cycle in the background and return the resulting state."""
    if board.sync_state.value.status == SyncStatus.SYNCING:
        raise ConflictError("Sync already in progress")
    board.sync()
    # Let the cycle start so the response reflects SYNCING
    await asyncio.sleep(0)
    return board.sync_state.value


@router.get("/state", response_model=SyncState)
async def get_sync_state(board: TaskBoard = Depends(get_task_board)):
    """Current sync state."""
    return board.sync_state.value


@router.websocket("/ws")
async def stream_sync_state(websocket: WebSocket, board: TaskBoard = Depends(get_task_board)):
    """Push every sync state transition."""
    await stream_state(websocket, board.sync_state)
