from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .drag import WindowDrag
from .geometry import format_px
from .surface import DisplaySurface, Element

MODAL_MODE_THRESHOLD = 4
MINIMIZABLE_MODES = frozenset({2, 3, 5, 6})
MAXIMIZABLE_MODES = frozenset({3, 6})


@dataclass(frozen=True)
class WindowCapabilities:
    modal: bool = False
    minimizable: bool = False
    maximizable: bool = False

    @classmethod
    def from_mode(cls, mode: int) -> "WindowCapabilities":
        # Modes outside 1..6 are passed through: modality still follows the
        # threshold and no optional controls are shown.
        return cls(
            modal=mode >= MODAL_MODE_THRESHOLD,
            minimizable=mode in MINIMIZABLE_MODES,
            maximizable=mode in MAXIMIZABLE_MODES,
        )

    def as_dict(self) -> Dict[str, bool]:
        return {
            "modal": self.modal,
            "minimizable": self.minimizable,
            "maximizable": self.maximizable,
        }


@dataclass(eq=False)
class WindowRecord:
    id: int
    frame: Element
    handle: Element
    capabilities: WindowCapabilities
    mode: int
    title: str
    body: str
    width: float
    height: float
    style: str
    stack_priority: int
    position: Tuple[float, float]
    backdrop: Optional[Element] = None
    drag: WindowDrag = field(default_factory=WindowDrag)

    @property
    def modal(self) -> bool:
        return self.backdrop is not None

    @property
    def backdrop_priority(self) -> Optional[int]:
        if self.backdrop is None:
            return None
        return int(self.backdrop.style["z-index"])

    @property
    def content(self) -> Element:
        """The content area, always the last child of the frame."""
        return self.frame.children[-1]

    def set_stack_priority(self, priority: int) -> None:
        self.stack_priority = priority
        self.frame.style["z-index"] = str(priority)

    def move_by(self, dx: float, dy: float) -> None:
        left, top = self.position
        self.position = (left + dx, top + dy)
        self.frame.style["left"] = format_px(self.position[0])
        self.frame.style["top"] = format_px(self.position[1])

    def teardown(self, surface: DisplaySurface) -> None:
        """Detach every surface this window owns."""
        surface.detach(self.frame)
        if self.backdrop is not None:
            surface.detach(self.backdrop)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "mode": self.mode,
            "capabilities": self.capabilities.as_dict(),
            "rect": {
                "x": self.position[0],
                "y": self.position[1],
                "w": self.width,
                "h": self.height,
            },
            "stack_priority": self.stack_priority,
            "backdrop_priority": self.backdrop_priority,
            "modal": self.modal,
            "dragging": self.drag.dragging,
        }
