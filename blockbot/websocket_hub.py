from __future__ import annotations

import asyncio

from fastapi import WebSocket


class ActorWebSocketHub:
    """In-process WebSocket fan-out for actor and active-step changes.

    Contract:
      - register a connection via `connect(websocket)`.
      - push JSON-serializable dicts with `broadcast(payload)` (awaitable) or
        `publish(payload)` (sync; schedules a broadcast on the running loop).

    Broadcasts are delivered in the order they were published: `publish`
    schedules one task per payload and the tasks take the send lock in FIFO
    order.
    """

    def __init__(self) -> None:
        self._conns: set[WebSocket] = set()
        self._lock = asyncio.Lock()
        self._pending: set[asyncio.Task[None]] = set()

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self._conns.add(websocket)

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            self._conns.discard(websocket)

    async def broadcast(self, payload: dict[str, object]) -> None:
        async with self._lock:
            if not self._conns:
                return

            dead: list[WebSocket] = []
            for ws in list(self._conns):
                try:
                    await ws.send_json(payload)
                except Exception:
                    dead.append(ws)

            for ws in dead:
                self._conns.discard(ws)

    def publish(self, payload: dict[str, object]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop (e.g. sync setup code); nobody can be listening yet.
            return
        task = loop.create_task(self.broadcast(payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)


hub = ActorWebSocketHub()
