"""Title-bar drag handling.

Each window owns a WindowDrag state machine. A single PointerDispatcher per
engine routes global pointer move/up events to whichever window currently
holds drag focus.
"""

from __future__ import annotations

import enum
from typing import Optional, Protocol, Tuple


class DragState(str, enum.Enum):
    idle = "idle"
    dragging = "dragging"


class WindowDrag:
    """Relative, cumulative drag tracking for one window."""

    def __init__(self) -> None:
        self.state = DragState.idle
        self._ref: Tuple[float, float] = (0.0, 0.0)

    @property
    def dragging(self) -> bool:
        return self.state is DragState.dragging

    def begin(self, x: float, y: float) -> None:
        self.state = DragState.dragging
        self._ref = (x, y)

    def move(self, x: float, y: float) -> Optional[Tuple[float, float]]:
        """Return the (dx, dy) since the last reference point, or None when idle."""
        if not self.dragging:
            return None
        dx = x - self._ref[0]
        dy = y - self._ref[1]
        self._ref = (x, y)
        return dx, dy

    def end(self) -> None:
        self.state = DragState.idle


class Draggable(Protocol):
    drag: WindowDrag

    def move_by(self, dx: float, dy: float) -> None: ...


class PointerDispatcher:
    """Single drag owner per pointer device."""

    def __init__(self) -> None:
        self._owner: Optional[Draggable] = None

    @property
    def owner(self) -> Optional[Draggable]:
        return self._owner

    def press(self, target: Draggable, x: float, y: float) -> None:
        if self._owner is not None and self._owner is not target:
            self._owner.drag.end()
        self._owner = target
        target.drag.begin(x, y)

    def move(self, x: float, y: float) -> Optional[Draggable]:
        """Apply a pointer move to the owner; returns it when it moved."""
        if self._owner is None:
            return None
        delta = self._owner.drag.move(x, y)
        if delta is None:
            return None
        self._owner.move_by(*delta)
        return self._owner

    def release(self) -> Optional[Draggable]:
        owner = self._owner
        if owner is not None:
            owner.drag.end()
        self._owner = None
        return owner

    def cancel(self, target: Draggable) -> None:
        """Drop drag focus if target holds it, e.g. when its window closes."""
        if self._owner is target:
            self.release()
