"""Stream an observable state over a WebSocket."""
import logging

import anyio
from fastapi import WebSocket, WebSocketDisconnect
from pydantic import BaseModel

from taskboard.core.observable import ObservableState

logger = logging.getLogger(__name__)


async def _send_updates(websocket: WebSocket, state: ObservableState, scope: anyio.CancelScope) -> None:
    try:
        async with state.subscribe() as subscription:
            async for value in subscription:
                payload = value.model_dump(mode="json") if isinstance(value, BaseModel) else value
                await websocket.send_json(payload)
        # Observation ended server-side (shutdown)
        await websocket.close()
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("State stream failed")
    finally:
        scope.cancel()


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    # Clients only listen; any inbound text is ignored
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


async def stream_state(websocket: WebSocket, state: ObservableState) -> None:
    """Send the current value, then every change, until either side closes."""
    await websocket.accept()
    async with anyio.create_task_group() as group:
        group.start_soon(_send_updates, websocket, state, group.cancel_scope)
        await _wait_for_disconnect(websocket)
        group.cancel_scope.cancel()
