"""Initial placement and inline style merging for window frames."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Properties the engine owns; caller overrides of these are dropped.
ENGINE_OWNED_PROPERTIES = frozenset({"z-index"})

_LENGTH_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*(px|%)?\s*$", re.IGNORECASE)


@dataclass
class Rect:
    x: float
    y: float
    w: float
    h: float


def centered_rect(viewport: Tuple[float, float], width: float, height: float) -> Rect:
    """Center a width x height box inside the viewport."""
    vw, vh = viewport
    return Rect(x=(vw - width) / 2, y=(vh - height) / 2, w=width, h=height)


def format_px(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value)}px"
    return f"{value}px"


def _split_declarations(style: str) -> List[str]:
    """Split on ';' outside parentheses and quoted strings."""
    chunks = []
    start = 0
    depth = 0
    quote = None
    for i, ch in enumerate(style):
        if quote:
            if ch == "\\":
                continue
            if ch == quote and style[i - 1] != "\\":
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(0, depth - 1)
        elif ch == ";" and depth == 0:
            chunks.append(style[start:i])
            start = i + 1
    chunks.append(style[start:])
    return chunks


def parse_style(style: Optional[str]) -> Dict[str, str]:
    """Parse an inline CSS declaration list into an ordered mapping.

    Later declarations of the same property win, as they do in cssText.
    """
    declarations: Dict[str, str] = {}
    if not style:
        return declarations
    for chunk in _split_declarations(style):
        if ":" not in chunk:
            continue
        name, _, value = chunk.partition(":")
        name = name.strip().lower()
        value = value.strip()
        if not name or not value:
            continue
        declarations.pop(name, None)
        declarations[name] = value
    return declarations


def serialize_style(declarations: Dict[str, str]) -> str:
    return " ".join(f"{name}: {value};" for name, value in declarations.items())


def parse_length(value: str, reference: float) -> Optional[float]:
    """Resolve a px, unitless or percentage length; None when unsupported."""
    match = _LENGTH_RE.match(value)
    if not match:
        return None
    number = float(match.group(1))
    if (match.group(2) or "").lower() == "%":
        return reference * number / 100
    return number


def resolve_frame_style(
    viewport: Tuple[float, float],
    width: float,
    height: float,
    stack_priority: int,
    overrides: Optional[str],
) -> Tuple[Dict[str, str], Tuple[float, float]]:
    """Build the frame's inline style and its effective (left, top) offset.

    Centering is applied first and caller overrides after it, so a caller
    can reposition or restyle the frame freely.
    """
    rect = centered_rect(viewport, width, height)
    declarations = {
        "width": format_px(width),
        "height": format_px(height),
        "left": format_px(rect.x),
        "top": format_px(rect.y),
        "z-index": str(stack_priority),
    }
    for name, value in parse_style(overrides).items():
        if name in ENGINE_OWNED_PROPERTIES:
            logger.info("ignoring style override %s: %s", name, value)
            continue
        declarations[name] = value

    left = parse_length(declarations["left"], viewport[0])
    top = parse_length(declarations["top"], viewport[1])
    position = (
        rect.x if left is None else left,
        rect.y if top is None else top,
    )
    return declarations, position
