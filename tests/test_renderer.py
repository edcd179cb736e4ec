"""Tests for frame/backdrop markup and the display surface."""

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from window_engine.engine.models import WindowCapabilities
from window_engine.engine.renderer import STYLE_SHEET_ID, HtmlRenderer
from window_engine.engine.surface import DisplaySurface, Element, markup_ids


def _render(mode: int, title: str = "T", body: str = "<b>x</b>"):
    surface = DisplaySurface((800, 600))
    renderer = HtmlRenderer(surface)
    caps = WindowCapabilities.from_mode(mode)
    rendered = renderer.render(
        7,
        title,
        body,
        caps,
        {"left": "1px", "top": "2px", "z-index": "1001"},
        backdrop_priority=1000 if caps.modal else None,
    )
    return surface, rendered


@pytest.mark.parametrize(
    "mode, modal, minimizable, maximizable",
    [
        (1, False, False, False),
        (2, False, True, False),
        (3, False, True, True),
        (4, True, False, False),
        (5, True, True, False),
        (6, True, True, True),
        (0, False, False, False),
        (9, True, False, False),
    ],
)
def test_capabilities_from_mode(mode, modal, minimizable, maximizable) -> None:
    caps = WindowCapabilities.from_mode(mode)
    assert (caps.modal, caps.minimizable, caps.maximizable) == (modal, minimizable, maximizable)


@pytest.mark.parametrize(
    "mode, actions",
    [
        (1, ["close"]),
        (2, ["minimize", "close"]),
        (3, ["minimize", "maximize", "close"]),
        (4, ["close"]),
        (6, ["minimize", "maximize", "close"]),
    ],
)
def test_control_buttons_follow_mode(mode, actions) -> None:
    _, rendered = _render(mode)
    assert [b.action for b in rendered.controls] == actions
    close = rendered.controls[-1]
    assert close.has_class("window-engine-close-btn")
    assert close.attributes["title"] == "Close"


def test_frame_structure_and_attachment() -> None:
    surface, rendered = _render(1, title="Hello")
    frame = rendered.frame
    assert frame.element_id == "window-engine-7"
    assert frame.has_class("window-engine-window")
    assert surface.is_attached(frame)
    assert rendered.handle.has_class("window-engine-titlebar")
    assert rendered.handle.parent is frame
    title = rendered.handle.children[0]
    assert title.text == "Hello"
    content = frame.children[-1]
    assert content.has_class("window-engine-content")
    assert content.inner_html == "<b>x</b>"
    assert rendered.backdrop is None


def test_modal_backdrop_attached_before_frame() -> None:
    surface, rendered = _render(4)
    assert rendered.backdrop is not None
    assert rendered.backdrop.has_class("window-engine-overlay")
    assert rendered.backdrop.style["z-index"] == "1000"
    assert surface.body.children == [rendered.backdrop, rendered.frame]


def test_title_is_escaped_but_body_is_not() -> None:
    surface, _ = _render(1, title="<i>t</i>", body="<em>rich</em>")
    markup = surface.to_html()
    assert "&lt;i&gt;t&lt;/i&gt;" in markup
    assert "<em>rich</em>" in markup


def test_style_sheet_injected_once() -> None:
    surface = DisplaySurface()
    renderer = HtmlRenderer(surface)
    renderer.ensure_style_sheet()
    renderer.ensure_style_sheet()
    assert surface.has_style_sheet(STYLE_SHEET_ID)
    assert surface.to_html().count(f'id="{STYLE_SHEET_ID}"') == 1


def test_surface_detach() -> None:
    surface = DisplaySurface()
    el = Element("div", element_id="x")
    surface.attach(el)
    assert surface.find("x") is el
    surface.detach(el)
    assert surface.find("x") is None
    assert not surface.is_attached(el)
    # detaching twice is harmless
    surface.detach(el)


def test_markup_ids_collects_nested_and_void_elements() -> None:
    assert markup_ids('<div id="a"><input id="b"/><span>t</span></div><br id="c">') == {"a", "b", "c"}
    assert markup_ids("plain text") == set()
