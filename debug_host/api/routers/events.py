"""Session event streaming endpoints."""

from __future__ import annotations

import asyncio
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from debug_host.api.context import AppContext, get_websocket_context
from debug_host.api.streams import ALL_SESSIONS

router = APIRouter(prefix="/debug", tags=["events"])


@router.websocket("/events")
async def all_events(websocket: WebSocket) -> None:
    await _stream(websocket, ALL_SESSIONS)


@router.websocket("/sessions/{session_id}/events")
async def session_events(websocket: WebSocket, session_id: str) -> None:
    await _stream(websocket, session_id)


async def _stream(websocket: WebSocket, channel: str) -> None:
    context: AppContext = get_websocket_context(websocket)
    await websocket.accept()
    queue, _, unsubscribe, history = context.debug_broker.subscribe_with_history(channel)
    for event in history:
        await websocket.send_json(event.to_payload())
    try:
        while True:
            message_task = asyncio.create_task(websocket.receive_json())
            event_task = asyncio.create_task(queue.get())
            done, _ = await asyncio.wait(
                {message_task, event_task}, return_when=asyncio.FIRST_COMPLETED
            )

            if event_task in done:
                queue_event = event_task.result()
                if queue_event is None:
                    message_task.cancel()
                    break
                await websocket.send_json(queue_event.to_payload())
            else:
                event_task.cancel()

            if message_task in done:
                reply = await _handle_message(context, channel, message_task.result())
                await websocket.send_json(reply)
            else:
                message_task.cancel()
    except WebSocketDisconnect:
        pass
    finally:
        unsubscribe()


async def _handle_message(context: AppContext, channel: str, message: Any) -> dict[str, Any]:
    """Route UI commands; only ``{"action": "stop"}`` is understood."""

    if not isinstance(message, dict) or message.get("action") != "stop":
        return {"kind": "error", "payload": {"detail": "unsupported message", "message": message}}
    session_id = message.get("session_id")
    if session_id is None and channel != ALL_SESSIONS:
        session_id = channel
    await context.service.stop(session_id)
    return {"kind": "ack", "payload": {"action": "stop", "session_id": session_id}}


__all__ = ["router"]
