"""HTML frame construction for windows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from .models import WindowCapabilities
from .surface import DisplaySurface, Element

STYLE_SHEET_ID = "window-engine-styles"

STYLE_SHEET = """
.window-engine-overlay {
    position: fixed;
    top: 0;
    left: 0;
    width: 100%;
    height: 100%;
    background-color: rgba(0, 0, 0, 0.5);
    z-index: 999;
}
.window-engine-window {
    position: fixed;
    background-color: #fff;
    border: 1px solid #ccc;
    box-shadow: 0 4px 8px rgba(0,0,0,0.1);
    border-radius: 5px;
    display: flex;
    flex-direction: column;
    overflow: hidden;
}
.window-engine-titlebar {
    background-color: #f1f1f1;
    padding: 8px;
    cursor: move;
    display: flex;
    justify-content: space-between;
    align-items: center;
    user-select: none;
}
.window-engine-title {
    font-weight: bold;
    color: #333;
}
.window-engine-controls button {
    border: none;
    background: none;
    width: 20px;
    height: 20px;
    margin-left: 5px;
    cursor: pointer;
    font-weight: bold;
    line-height: 20px;
    text-align: center;
}
.window-engine-controls button:hover {
    background-color: #e0e0e0;
}
.window-engine-close-btn:hover {
    background-color: #e81123;
    color: white;
}
.window-engine-content {
    padding: 15px;
    flex-grow: 1;
    overflow: auto;
}
"""

# (action, glyph, tooltip); only "close" is wired to any behavior.
MINIMIZE_BUTTON = ("minimize", "&#8210;", "Minimize")
MAXIMIZE_BUTTON = ("maximize", "&#9633;", "Maximize")
CLOSE_BUTTON = ("close", "&#10005;", "Close")


def frame_element_id(window_id: int) -> str:
    return f"window-engine-{window_id}"


@dataclass
class RenderedWindow:
    frame: Element
    handle: Element
    controls: List[Element]
    backdrop: Optional[Element] = None


class HtmlRenderer:
    """Materializes window frames and backdrops on a display surface."""

    def __init__(self, surface: DisplaySurface) -> None:
        self.surface = surface

    def ensure_style_sheet(self) -> None:
        self.surface.inject_style_sheet(STYLE_SHEET_ID, STYLE_SHEET)

    def render(
        self,
        window_id: int,
        title: str,
        body: str,
        capabilities: WindowCapabilities,
        frame_style: Dict[str, str],
        backdrop_priority: Optional[int] = None,
    ) -> RenderedWindow:
        base_id = frame_element_id(window_id)

        backdrop = None
        if capabilities.modal:
            backdrop = Element(
                "div",
                element_id=f"{base_id}-overlay",
                classes=["window-engine-overlay"],
                style={"z-index": str(backdrop_priority)},
            )

        frame = Element(
            "div",
            element_id=base_id,
            classes=["window-engine-window"],
            style=dict(frame_style),
        )
        handle = frame.append(
            Element("div", element_id=f"{base_id}-titlebar", classes=["window-engine-titlebar"])
        )
        handle.append(Element("span", classes=["window-engine-title"], text=title))
        control_bar = handle.append(Element("div", classes=["window-engine-controls"]))

        specs = []
        if capabilities.minimizable:
            specs.append(MINIMIZE_BUTTON)
        if capabilities.maximizable:
            specs.append(MAXIMIZE_BUTTON)
        specs.append(CLOSE_BUTTON)

        controls = []
        for action, glyph, tooltip in specs:
            button = Element(
                "button",
                element_id=f"{base_id}-{action}",
                attributes={"title": tooltip},
                inner_html=glyph,
                action=action,
            )
            if action == "close":
                button.classes.append("window-engine-close-btn")
            controls.append(control_bar.append(button))

        frame.append(
            Element(
                "div",
                element_id=f"{base_id}-content",
                classes=["window-engine-content"],
                inner_html=body,
            )
        )

        if backdrop is not None:
            self.surface.attach(backdrop)
        self.surface.attach(frame)
        return RenderedWindow(frame=frame, handle=handle, controls=controls, backdrop=backdrop)
