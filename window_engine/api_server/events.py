from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, Set

from starlette.websockets import WebSocket


class EventHub:
    """Broadcast hub pushing window lifecycle events to WebSocket clients."""

    def __init__(self) -> None:
        self._clients: Set[WebSocket] = set()
        self._lock = asyncio.Lock()

    async def add(self, ws: WebSocket) -> None:
        async with self._lock:
            self._clients.add(ws)

    async def remove(self, ws: WebSocket) -> None:
        async with self._lock:
            self._clients.discard(ws)

    async def client_count(self) -> int:
        async with self._lock:
            return len(self._clients)

    async def emit(self, event: str, data: Dict[str, Any]) -> None:
        payload = json.dumps({"event": event, "data": data})
        async with self._lock:
            targets = list(self._clients)
        # send outside the lock; one dead client must not block the rest
        coros = [c.send_text(payload) for c in targets]
        if coros:
            await asyncio.gather(*coros, return_exceptions=True)
