"""WebSocket handler for real-time play with coach hints."""

from __future__ import annotations

import asyncio
import functools
import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from snake_coach.runner import GameRunner
from snake_coach.server.session_manager import SessionManager
from snake_coach.snake import Direction

logger = logging.getLogger(__name__)

ws_router = APIRouter()

# Messages buffered for a slow client; the oldest is discarded past this.
_SEND_QUEUE_SIZE = 256

_DIRECTION_MAP: dict[str, Direction] = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}

_ACTIONS = {
    "start": GameRunner.start,
    "pause": GameRunner.toggle_pause,
    "restart": GameRunner.restart,
}


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.session_manager


def _enqueue(queue: asyncio.Queue, message: dict) -> None:
    """Queue *message*, discarding the oldest one if the client lags."""
    try:
        queue.put_nowait(message)
    except asyncio.QueueFull:
        queue.get_nowait()
        queue.put_nowait(message)
        logger.debug("Send queue full; dropped the oldest message.")


async def _pump(queue: asyncio.Queue, websocket: WebSocket) -> None:
    while True:
        message = await queue.get()
        await websocket.send_text(json.dumps(message, separators=(",", ":")))


def _handle(runner: GameRunner, msg: dict) -> None:
    direction_str = msg.get("direction")
    if isinstance(direction_str, str):
        direction = _DIRECTION_MAP.get(direction_str.lower())
        if direction is not None:
            runner.set_direction(direction)
        return

    action = msg.get("action")
    if isinstance(action, str) and action.lower() in _ACTIONS:
        _ACTIONS[action.lower()](runner)


@ws_router.websocket("/sessions/{session_id}/play")
async def play(websocket: WebSocket, session_id: str) -> None:
    """Send directions and controls, receive frames and hints."""
    manager = _get_manager(websocket)
    session = manager.get_session(session_id)
    if session is None:
        await websocket.close(code=4004, reason="Session not found.")
        return

    await websocket.accept()
    runner = session.runner
    queue: asyncio.Queue = asyncio.Queue(maxsize=_SEND_QUEUE_SIZE)
    listener = functools.partial(_enqueue, queue)
    runner.subscribe(listener)
    logger.info("Player connected to session %s.", session_id)

    # Send initial state snapshot so the client gets immediate feedback.
    queue.put_nowait({"type": "frame", "state": session.engine.get_state()})
    sender = asyncio.create_task(_pump(queue, websocket))

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if not isinstance(msg, dict):
                continue
            _handle(runner, msg)
    except WebSocketDisconnect:
        logger.info("Player disconnected from session %s.", session_id)
    finally:
        runner.unsubscribe(listener)
        sender.cancel()
        await asyncio.gather(sender, return_exceptions=True)
