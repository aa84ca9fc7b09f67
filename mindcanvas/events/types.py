"""Event vocabulary and raw input records (surface-relative logical pixels)."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..model.node import Node

PRIMARY_BUTTON = 0
SECONDARY_BUTTON = 2


class EventType(str, Enum):
    NODE_CLICK = "node:click"
    NODE_DBLCLICK = "node:dblclick"
    NODE_CONTEXTMENU = "node:contextmenu"
    NODE_MOUSEENTER = "node:mouseenter"
    NODE_MOUSELEAVE = "node:mouseleave"
    NODE_DRAGSTART = "node:dragstart"
    NODE_DRAG = "node:drag"
    NODE_DRAGEND = "node:dragend"
    NODE_COLLAPSE = "node:collapse"
    NODE_EXPAND = "node:expand"
    CANVAS_CLICK = "canvas:click"
    CANVAS_CONTEXTMENU = "canvas:contextmenu"
    CANVAS_PAN = "canvas:pan"
    CANVAS_ZOOM = "canvas:zoom"
    SELECTION_CHANGE = "selection:change"
    SHORTCUT_DELETE = "shortcut:delete"
    SHORTCUT_UNDO = "shortcut:undo"
    SHORTCUT_REDO = "shortcut:redo"
    SHORTCUT_SELECT_ALL = "shortcut:select-all"
    DATA_CHANGE = "data:change"
    RENDER_COMPLETE = "render:complete"


@dataclass
class DiagramEvent:
    type: EventType
    target: Optional[Node] = None
    data: dict[str, Any] = field(default_factory=dict)
    transform: tuple[float, float, float] = (0.0, 0.0, 1.0)
    original: Any = None


@dataclass(frozen=True)
class PointerEvent:
    x: float
    y: float
    button: int = PRIMARY_BUTTON
    ctrl: bool = False
    meta: bool = False
    shift: bool = False
    alt: bool = False


@dataclass(frozen=True)
class WheelEvent:
    x: float
    y: float
    delta_y: float
    ctrl: bool = False
    meta: bool = False


@dataclass(frozen=True)
class KeyEvent:
    key: str
    ctrl: bool = False
    meta: bool = False
    shift: bool = False
    alt: bool = False

    def chord(self) -> str:
        """'Control+Shift+z' style string; single letters are lower-cased."""
        parts = []
        if self.ctrl:
            parts.append("Control")
        if self.meta:
            parts.append("Meta")
        if self.shift:
            parts.append("Shift")
        if self.alt:
            parts.append("Alt")
        parts.append(self.key.lower() if len(self.key) == 1 else self.key)
        return "+".join(parts)
