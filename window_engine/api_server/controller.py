from __future__ import annotations

import asyncio
import json
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..engine.config import EngineConfig, load_config
from ..engine.registry import WindowEngine
from .events import EventHub

logger = logging.getLogger(__name__)


class Controller:
    """Async facade over one WindowEngine.

    All engine calls run under a single lock, so lifecycle operations on an
    id are applied in the order callers issued them. Engine events are
    queued during a call and flushed to the hub and the state-event log
    once the call returns.
    """

    def __init__(self, events: EventHub, config: Optional[EngineConfig] = None) -> None:
        self._config = config or load_config()
        self._events = events
        self._lock = asyncio.Lock()
        self._pending: List[Tuple[str, Dict[str, Any]]] = []
        self._engine = WindowEngine(self._config, listener=self._queue_event)
        self._state_event_log_path = Path(self._config.state_event_log_path)
        self._started_at = time.time()

    @property
    def engine(self) -> WindowEngine:
        return self._engine

    # ----- Query -----
    async def get_state(self) -> Dict[str, Any]:
        async with self._lock:
            state = self._engine.snapshot()
        state["uptime_sec"] = time.time() - self._started_at
        return state

    async def get_window(self, win_id: int) -> Dict[str, Any]:
        async with self._lock:
            record = self._engine.get(win_id)
            if record is None:
                raise KeyError(win_id)
            return record.to_dict()

    async def render_document(self) -> str:
        async with self._lock:
            return self._engine.render_document()

    # ----- Windows -----
    async def create_window(
        self,
        style: str,
        height: float,
        width: float,
        mode: int,
        content: str,
        win_id: int,
        actor: str = "api",
    ) -> Dict[str, Any]:
        async with self._lock:
            try:
                self._engine.create(style, height, width, mode, content, win_id)
                result = self._engine.get(win_id).to_dict()
            finally:
                pending = self._take_pending()
        await self._flush(pending, actor)
        return result

    async def modify_window(
        self,
        style: str,
        height: float,
        width: float,
        mode: int,
        content: str,
        win_id: int,
        actor: str = "api",
    ) -> Dict[str, Any]:
        async with self._lock:
            try:
                self._engine.modify(style, height, width, mode, content, win_id)
                result = self._engine.get(win_id).to_dict()
            finally:
                pending = self._take_pending()
        await self._flush(pending, actor)
        return result

    async def close(self, win_id: int, actor: str = "api") -> None:
        async with self._lock:
            self._engine.close(win_id)
            pending = self._take_pending()
        await self._flush(pending, actor)

    async def activate(self, win_id: int, actor: str = "api") -> Dict[str, Any]:
        async with self._lock:
            try:
                self._engine.activate(win_id)
                result = self._engine.get(win_id).to_dict()
            finally:
                pending = self._take_pending()
        await self._flush(pending, actor)
        return result

    # ----- Pointer -----
    async def pointer_down(self, target: str, x: float, y: float, actor: str = "pointer") -> Optional[int]:
        async with self._lock:
            win_id = self._engine.pointer_down(target, x, y)
            pending = self._take_pending()
        await self._flush(pending, actor)
        return win_id

    async def pointer_move(self, x: float, y: float, actor: str = "pointer") -> Optional[int]:
        async with self._lock:
            win_id = self._engine.pointer_move(x, y)
            pending = self._take_pending()
        await self._flush(pending, actor)
        return win_id

    async def pointer_up(self, x: float, y: float) -> Optional[int]:
        async with self._lock:
            return self._engine.pointer_up(x, y)

    async def click(self, target: str, actor: str = "pointer") -> Optional[str]:
        async with self._lock:
            action = self._engine.click(target)
            pending = self._take_pending()
        await self._flush(pending, actor)
        return action

    # ----- Helpers -----
    def _queue_event(self, event: str, data: Dict[str, Any]) -> None:
        self._pending.append((event, data))

    def _take_pending(self) -> List[Tuple[str, Dict[str, Any]]]:
        pending, self._pending = self._pending, []
        return pending

    async def _flush(self, pending: List[Tuple[str, Dict[str, Any]]], actor: str) -> None:
        for event, data in pending:
            await self._events.emit(event, data)
            # drag moves are too chatty for the audit log
            if event != "window.moved":
                self._append_state_event(event, data, actor)

    def _append_state_event(self, event_type: str, data: Dict[str, Any], actor: str) -> None:
        """Append state events as NDJSON for local-first auditability."""
        entry = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "event": event_type,
            "actor": actor,
            "data": data,
        }
        try:
            self._state_event_log_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._state_event_log_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry, separators=(",", ":")) + "\n")
        except OSError as exc:
            logger.warning("state event log write failed (%s): %s", self._state_event_log_path, exc)
