from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .config import EngineConfig
from .content import split_content
from .drag import PointerDispatcher
from .errors import DuplicateWindowError, UnknownWindowError
from .geometry import centered_rect, resolve_frame_style
from .models import WindowCapabilities, WindowRecord
from .renderer import HtmlRenderer
from .surface import DisplaySurface, Element, markup_ids

logger = logging.getLogger(__name__)

Listener = Callable[[str, Dict[str, Any]], None]


class WindowEngine:
    """Window registry and stacking engine.

    Owns the id -> window mapping and the stack counter shared by frames and
    backdrops. Every assigned stack priority is strictly greater than all
    priorities assigned before it.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        surface: Optional[DisplaySurface] = None,
        listener: Optional[Listener] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.surface = surface or DisplaySurface((self.config.viewport_width, self.config.viewport_height))
        self.renderer = HtmlRenderer(self.surface)
        self.pointer = PointerDispatcher()
        self._windows: Dict[int, WindowRecord] = {}
        self._stack_counter = self.config.stack_base
        self._listener = listener

    # ----- Query -----
    @property
    def stack_counter(self) -> int:
        return self._stack_counter

    def get(self, window_id: int) -> Optional[WindowRecord]:
        return self._windows.get(window_id)

    def __contains__(self, window_id: object) -> bool:
        return window_id in self._windows

    def __len__(self) -> int:
        return len(self._windows)

    def __iter__(self) -> Iterator[WindowRecord]:
        return iter(list(self._windows.values()))

    def windows_by_priority(self) -> List[WindowRecord]:
        """Live windows ordered back to front."""
        return sorted(self._windows.values(), key=lambda w: w.stack_priority)

    def topmost(self) -> Optional[WindowRecord]:
        ordered = self.windows_by_priority()
        return ordered[-1] if ordered else None

    # ----- Lifecycle -----
    def create(self, style: Optional[str], height: float, width: float, mode: int, content: str, id: int) -> None:
        if id in self._windows:
            logger.warning("create rejected: window %s already exists", id)
            raise DuplicateWindowError(id)

        capabilities, title, body = self._prepare(style, height, width, mode, content)
        self.renderer.ensure_style_sheet()

        # Backdrop first so a modal frame always sits above its own backdrop.
        backdrop_priority = self._next_priority() if capabilities.modal else None
        frame_priority = self._next_priority()
        frame_style, position = resolve_frame_style(
            self.surface.viewport_size(), width, height, frame_priority, style
        )
        rendered = self.renderer.render(
            id,
            title,
            body,
            capabilities,
            frame_style,
            backdrop_priority=backdrop_priority,
        )
        record = WindowRecord(
            id=id,
            frame=rendered.frame,
            handle=rendered.handle,
            backdrop=rendered.backdrop,
            capabilities=capabilities,
            mode=mode,
            title=title,
            body=body,
            width=width,
            height=height,
            style=style or "",
            stack_priority=frame_priority,
            position=position,
        )
        self._windows[id] = record
        logger.debug("window %s created (mode=%s, priority=%s)", id, mode, frame_priority)
        self._notify("window.created", record.to_dict())

    def close(self, id: int) -> None:
        record = self._windows.get(id)
        if record is None:
            return
        self.pointer.cancel(record)
        record.teardown(self.surface)
        del self._windows[id]
        logger.debug("window %s closed", id)
        self._notify("window.closed", {"id": id})

    def modify(self, style: Optional[str], height: float, width: float, mode: int, content: str, id: int) -> None:
        if id not in self._windows:
            logger.warning("modify rejected: window %s does not exist", id)
            raise UnknownWindowError(id)
        # Bad parameters must fail while the old window is still intact.
        self._prepare(style, height, width, mode, content)
        self.close(id)
        self.create(style, height, width, mode, content, id)
        self._notify("window.modified", self._windows[id].to_dict())

    def activate(self, id: int) -> int:
        """Raise a window above everything registered; returns its new priority."""
        record = self._windows.get(id)
        if record is None:
            raise UnknownWindowError(id)
        record.set_stack_priority(self._next_priority())
        self._notify("window.activated", {"id": id, "stack_priority": record.stack_priority})
        return record.stack_priority

    # ----- Pointer input -----
    def pointer_down(self, target: str, x: float, y: float) -> Optional[int]:
        """Dispatch a pointer-down on the element with id ``target``.

        Returns the id of the window the event landed in, if any.
        """
        element, record = self._resolve_target(target)
        if record is None:
            return None
        if any(node is record.handle for node in element.ancestors()):
            self.pointer.press(record, x, y)
        self.activate(record.id)
        return record.id

    def pointer_move(self, x: float, y: float) -> Optional[int]:
        record = self.pointer.move(x, y)
        if record is None:
            return None
        self._notify("window.moved", {"id": record.id, "x": record.position[0], "y": record.position[1]})
        return record.id

    def pointer_up(self, x: float = 0.0, y: float = 0.0) -> Optional[int]:
        record = self.pointer.release()
        return record.id if record is not None else None

    def click(self, target: str) -> Optional[str]:
        """Run the control action under ``target``; returns the action name."""
        element, record = self._resolve_target(target)
        if record is None:
            return None
        for node in element.ancestors():
            if node.action is None:
                continue
            if node.action == "close":
                self.close(record.id)
            # minimize and maximize are rendered but have no behavior
            return node.action
        return None

    # ----- Serialization -----
    def snapshot(self) -> Dict[str, Any]:
        vw, vh = self.surface.viewport_size()
        return {
            "viewport": {"width": vw, "height": vh},
            "stack_counter": self._stack_counter,
            "windows": [w.to_dict() for w in self.windows_by_priority()],
        }

    def render_document(self) -> str:
        return self.surface.to_html()

    # ----- Helpers -----
    def _next_priority(self) -> int:
        priority = self._stack_counter
        self._stack_counter += 1
        return priority

    def _prepare(
        self, style: Optional[str], height: float, width: float, mode: int, content: str
    ) -> Tuple[WindowCapabilities, str, str]:
        """Resolve creation parameters without touching any state."""
        if not isinstance(content, str):
            raise TypeError(f"content must be a string, got {type(content).__name__}")
        if style is not None and not isinstance(style, str):
            raise TypeError(f"style must be a string, got {type(style).__name__}")
        centered_rect(self.surface.viewport_size(), width, height)
        capabilities = WindowCapabilities.from_mode(mode)
        title, body = split_content(content, self.config.default_title)
        return capabilities, title, body

    def _resolve_target(self, target: str) -> Tuple[Optional[Element], Optional[WindowRecord]]:
        """Find the element and window a pointer event lands on.

        Ids inside caller content are looked up in each frame's markup,
        topmost frame first. Windows under a live modal backdrop are
        unreachable.
        """
        element = self.surface.find(target)
        record = self._owner_of(element) if element is not None else None
        if element is None:
            for candidate in reversed(self.windows_by_priority()):
                if target in markup_ids(candidate.content.inner_html or ""):
                    element, record = candidate.content, candidate
                    break
        if record is None or self._blocked_by_modal(record):
            return None, None
        return element, record

    def _blocked_by_modal(self, record: WindowRecord) -> bool:
        modal = None
        for candidate in self._windows.values():
            if candidate.backdrop is None:
                continue
            if modal is None or candidate.backdrop_priority > modal.backdrop_priority:
                modal = candidate
        if modal is None or modal is record:
            return False
        return record.stack_priority < modal.backdrop_priority

    def _owner_of(self, element: Element) -> Optional[WindowRecord]:
        for node in element.ancestors():
            for record in self._windows.values():
                if node is record.frame:
                    return record
        return None

    def _notify(self, event: str, data: Dict[str, Any]) -> None:
        if self._listener is not None:
            self._listener(event, data)
