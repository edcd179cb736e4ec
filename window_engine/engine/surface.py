"""In-memory display surface: an element tree standing in for the page."""

from __future__ import annotations

import html
from html.parser import HTMLParser
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set, Tuple

from .geometry import serialize_style

VOID_TAGS = frozenset({"br", "hr", "img", "input", "meta", "link"})


class _IdCollector(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.ids: Set[str] = set()

    def handle_starttag(self, tag, attrs):
        for name, value in attrs:
            if name == "id" and value:
                self.ids.add(value)

    handle_startendtag = handle_starttag


def markup_ids(markup: str) -> Set[str]:
    """Element ids declared anywhere in a raw HTML fragment."""
    collector = _IdCollector()
    collector.feed(markup)
    collector.close()
    return collector.ids


@dataclass(eq=False)
class Element:
    tag: str
    element_id: Optional[str] = None
    classes: List[str] = field(default_factory=list)
    style: Dict[str, str] = field(default_factory=dict)
    attributes: Dict[str, str] = field(default_factory=dict)
    text: str = ""
    inner_html: Optional[str] = None
    action: Optional[str] = None
    children: List["Element"] = field(default_factory=list)
    parent: Optional["Element"] = field(default=None, repr=False)

    def append(self, child: "Element") -> "Element":
        child.parent = self
        self.children.append(child)
        return child

    def remove(self, child: "Element") -> None:
        self.children.remove(child)
        child.parent = None

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def ancestors(self) -> Iterator["Element"]:
        """Yield this element and then each parent up to the root."""
        node: Optional[Element] = self
        while node is not None:
            yield node
            node = node.parent

    def iter(self) -> Iterator["Element"]:
        yield self
        for child in self.children:
            yield from child.iter()

    def find(self, element_id: str) -> Optional["Element"]:
        for node in self.iter():
            if node.element_id == element_id:
                return node
        return None

    def to_html(self) -> str:
        attrs = []
        if self.element_id:
            attrs.append(f'id="{html.escape(self.element_id)}"')
        if self.classes:
            attrs.append(f'class="{html.escape(" ".join(self.classes))}"')
        if self.style:
            attrs.append(f'style="{html.escape(serialize_style(self.style))}"')
        for name, value in self.attributes.items():
            attrs.append(f'{name}="{html.escape(value)}"')
        open_tag = "<" + " ".join([self.tag, *attrs]) + ">"
        if self.tag in VOID_TAGS:
            return open_tag
        if self.inner_html is not None:
            inner = self.inner_html
        else:
            inner = html.escape(self.text) + "".join(c.to_html() for c in self.children)
        return f"{open_tag}{inner}</{self.tag}>"


class DisplaySurface:
    """Attach/detach primitives, viewport size and style sheets for one page."""

    def __init__(self, viewport: Tuple[float, float] = (1280, 720)) -> None:
        self.body = Element("body")
        self._viewport = viewport
        self._style_sheets: Dict[str, str] = {}

    def viewport_size(self) -> Tuple[float, float]:
        return self._viewport

    def set_viewport_size(self, width: float, height: float) -> None:
        self._viewport = (width, height)

    def attach(self, element: Element) -> None:
        self.body.append(element)

    def detach(self, element: Element) -> None:
        if element.parent is not None:
            element.parent.remove(element)

    def is_attached(self, element: Element) -> bool:
        return any(node is self.body for node in element.ancestors())

    def find(self, element_id: str) -> Optional[Element]:
        return self.body.find(element_id)

    def inject_style_sheet(self, sheet_id: str, css: str) -> bool:
        """Add a style sheet once; returns False when it was already present."""
        if sheet_id in self._style_sheets:
            return False
        self._style_sheets[sheet_id] = css
        return True

    def has_style_sheet(self, sheet_id: str) -> bool:
        return sheet_id in self._style_sheets

    def to_html(self, title: str = "Window Engine") -> str:
        sheets = "".join(
            f'<style id="{html.escape(sheet_id)}">{css}</style>'
            for sheet_id, css in self._style_sheets.items()
        )
        return (
            "<!DOCTYPE html>"
            f'<html><head><meta charset="utf-8"><title>{html.escape(title)}</title>{sheets}</head>'
            f"{self.body.to_html()}</html>"
        )
