"""
Event manager: turns raw pointer / wheel / key input into domain events.

Hit tests run against the current layout and the shared Transform. The
tree is fetched from a provider on every call; selection, hover and drag
state are kept as node ids so a replaced tree never leaves stale references.

Pointer states: idle -> dragging a node (primary button on a node) or
panning (secondary button). Movement past the drag threshold turns a
press into a real drag / pan; a press released without one is a click.
"""
from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Optional

from ..model.node import Node, find_node, iter_nodes, iter_visible
from ..model.transform import Transform
from ..render.geometry import contains_point, indicator_center
from .types import (
    PRIMARY_BUTTON,
    SECONDARY_BUTTON,
    DiagramEvent,
    EventType,
    KeyEvent,
    PointerEvent,
    WheelEvent,
)

logger = logging.getLogger(__name__)

Handler = Callable[[DiagramEvent], None]

SHORTCUTS: dict[str, EventType] = {
    "Delete": EventType.SHORTCUT_DELETE,
    "Backspace": EventType.SHORTCUT_DELETE,
    "Control+z": EventType.SHORTCUT_UNDO,
    "Meta+z": EventType.SHORTCUT_UNDO,
    "Control+y": EventType.SHORTCUT_REDO,
    "Control+Shift+z": EventType.SHORTCUT_REDO,
    "Meta+Shift+z": EventType.SHORTCUT_REDO,
    "Control+a": EventType.SHORTCUT_SELECT_ALL,
    "Meta+a": EventType.SHORTCUT_SELECT_ALL,
}

_IDLE, _PRESS, _DRAG_NODE, _PAN = "idle", "press", "drag-node", "pan"


@dataclass(frozen=True)
class InteractionConfig:
    draggable: bool = True
    zoomable: bool = True
    selectable: bool = True
    multi_select: bool = True
    collapsible: bool = True
    min_zoom: float = 0.1
    max_zoom: float = 5.0
    zoom_speed: float = 0.1
    drag_threshold: float = 2.0
    indicator_radius: float = 10.0


class EventManager:
    def __init__(
        self,
        transform: Transform,
        size_provider: Callable[[], tuple[float, float]],
        root_provider: Callable[[], Optional[Node]],
        config: InteractionConfig | None = None,
    ) -> None:
        self.transform = transform
        self.config = config or InteractionConfig()
        self.transform.min_zoom = self.config.min_zoom
        self.transform.max_zoom = self.config.max_zoom
        self._size = size_provider
        self._root = root_provider
        self._listeners: dict[EventType, list[Handler]] = defaultdict(list)

        self._selected: list[str] = []
        self._hovered: Optional[str] = None
        self._mode = _IDLE
        self._drag_id: Optional[str] = None
        self._press = (0.0, 0.0)
        self._last = (0.0, 0.0)
        self._moved = False
        self._suppress_menu = False

    # subscriptions

    def on(self, event_type: EventType | str, handler: Handler) -> None:
        self._listeners[EventType(event_type)].append(handler)

    def off(self, event_type: EventType | str, handler: Handler | None = None) -> None:
        """Remove one handler, or every handler for the type when handler is None."""
        key = EventType(event_type)
        if handler is None:
            self._listeners.pop(key, None)
        elif handler in self._listeners.get(key, []):
            self._listeners[key].remove(handler)

    def emit(self, event_type: EventType | str, target: Optional[Node] = None, original=None, **data) -> DiagramEvent:
        event = DiagramEvent(
            type=EventType(event_type),
            target=target,
            data=data,
            transform=self.transform.as_tuple(),
            original=original,
        )
        for handler in list(self._listeners.get(event.type, [])):
            handler(event)
        return event

    # state accessors

    @property
    def selected_ids(self) -> list[str]:
        return list(self._selected)

    @property
    def hovered_id(self) -> Optional[str]:
        return self._hovered

    @property
    def is_dragging(self) -> bool:
        return self._moved and self._mode in (_DRAG_NODE, _PAN)

    def set_selection(self, ids: list[str], *, emit: bool = True) -> bool:
        """Replace the selection; returns True if it changed."""
        new = list(dict.fromkeys(ids))
        if new == self._selected:
            return False
        self._selected = new
        self._sync_flags()
        if emit:
            self.emit(EventType.SELECTION_CHANGE, selected=list(new))
        return True

    def clear_selection(self, *, emit: bool = True) -> bool:
        return self.set_selection([], emit=emit)

    def reset(self) -> None:
        """Forget selection, hover and any gesture (e.g. after the tree was replaced)."""
        self._selected = []
        self._hovered = None
        self._cancel_gesture()
        self._sync_flags()

    def prune(self) -> None:
        """Drop selected / hovered ids that no longer exist in the tree."""
        root = self._root()
        ids = {n.id for n, _ in iter_nodes(root)} if root else set()
        self._selected = [i for i in self._selected if i in ids]
        if self._hovered not in ids:
            self._hovered = None
        if self._drag_id not in ids:
            self._cancel_gesture()
        self._sync_flags()

    def _sync_flags(self) -> None:
        root = self._root()
        if root is None:
            return
        selected = set(self._selected)
        for node, _ in iter_nodes(root):
            node.selected = node.id in selected
            node.hovered = node.id == self._hovered

    def _cancel_gesture(self) -> None:
        self._mode = _IDLE
        self._drag_id = None
        self._moved = False

    # hit testing

    def to_world(self, x: float, y: float) -> tuple[float, float]:
        w, h = self._size()
        return self.transform.to_world(x, y, w, h)

    def node_at(self, x: float, y: float) -> Optional[Node]:
        """Topmost node whose box contains the surface point (descendants win)."""
        root = self._root()
        if root is None:
            return None
        wx, wy = self.to_world(x, y)
        found = None
        for node, _ in iter_visible(root):
            if contains_point(node, wx, wy):
                found = node
        return found

    def indicator_at(self, x: float, y: float) -> Optional[Node]:
        """Node whose collapse indicator is under the surface point."""
        root = self._root()
        if root is None:
            return None
        wx, wy = self.to_world(x, y)
        found = None
        for node, _ in iter_visible(root):
            if node.children and node.has_geometry:
                cx, cy = indicator_center(node)
                if math.hypot(wx - cx, wy - cy) <= self.config.indicator_radius:
                    found = node
        return found

    # pointer input

    def pointer_down(self, ev: PointerEvent) -> None:
        if self.config.collapsible:
            node = self.indicator_at(ev.x, ev.y)
            if node is not None:
                kind = EventType.NODE_EXPAND if node.collapsed else EventType.NODE_COLLAPSE
                self._cancel_gesture()
                self.emit(kind, node, original=ev)
                return

        self._press = self._last = (ev.x, ev.y)
        self._moved = False
        self._drag_id = None
        if ev.button == SECONDARY_BUTTON:
            self._mode = _PAN
            self._suppress_menu = False
        elif ev.button == PRIMARY_BUTTON:
            node = self.node_at(ev.x, ev.y)
            if node is not None and self.config.draggable:
                self._mode = _DRAG_NODE
                self._drag_id = node.id
            else:
                self._mode = _PRESS
        else:
            self._mode = _IDLE

    def pointer_move(self, ev: PointerEvent) -> None:
        self._update_hover(ev)
        if self._mode == _IDLE:
            return
        if not self._moved:
            px, py = self._press
            if max(abs(ev.x - px), abs(ev.y - py)) <= self.config.drag_threshold:
                return
            self._moved = True
            self._last = self._press
            if self._mode == _DRAG_NODE:
                self.emit(EventType.NODE_DRAGSTART, self._drag_target(), original=ev)
            elif self._mode == _PAN:
                self._suppress_menu = True

        dx, dy = ev.x - self._last[0], ev.y - self._last[1]
        self._last = (ev.x, ev.y)
        if self._mode == _DRAG_NODE:
            node = self._drag_target()
            if node is None or not node.has_geometry:
                self._cancel_gesture()
                return
            node.x += dx / self.transform.scale
            node.y += dy / self.transform.scale
            self.emit(EventType.NODE_DRAG, node, original=ev, dx=dx, dy=dy)
        elif self._mode == _PAN:
            self.transform.pan(dx, dy)
            self.emit(EventType.CANVAS_PAN, original=ev, dx=dx, dy=dy)

    def pointer_up(self, ev: PointerEvent) -> None:
        mode, moved = self._mode, self._moved
        target = self._drag_target()
        self._cancel_gesture()
        if mode == _DRAG_NODE and moved:
            self.emit(EventType.NODE_DRAGEND, target, original=ev)
        elif mode in (_DRAG_NODE, _PRESS) and not moved and ev.button == PRIMARY_BUTTON:
            self._click(ev)

    def pointer_leave(self) -> None:
        if self._hovered is not None:
            self._hovered = None
            self._sync_flags()
        self._cancel_gesture()
        self._suppress_menu = False

    def double_click(self, ev: PointerEvent) -> None:
        node = self.node_at(ev.x, ev.y)
        if node is not None:
            self.emit(EventType.NODE_DBLCLICK, node, original=ev)

    def context_menu(self, ev: PointerEvent) -> None:
        if self._suppress_menu:
            self._suppress_menu = False
            return
        node = self.node_at(ev.x, ev.y)
        if node is not None:
            self.emit(EventType.NODE_CONTEXTMENU, node, original=ev)
        else:
            self.emit(EventType.CANVAS_CONTEXTMENU, original=ev)

    def _drag_target(self) -> Optional[Node]:
        root = self._root()
        if root is None or self._drag_id is None:
            return None
        return find_node(root, self._drag_id)

    def _update_hover(self, ev: PointerEvent) -> None:
        node = self.node_at(ev.x, ev.y)
        new_id = node.id if node else None
        if new_id == self._hovered:
            return
        root = self._root()
        previous = find_node(root, self._hovered) if (root and self._hovered) else None
        self._hovered = new_id
        self._sync_flags()
        if previous is not None:
            self.emit(EventType.NODE_MOUSELEAVE, previous, original=ev)
        if node is not None:
            self.emit(EventType.NODE_MOUSEENTER, node, original=ev)

    def _click(self, ev: PointerEvent) -> None:
        node = self.node_at(ev.x, ev.y)
        if node is None:
            if self.config.selectable:
                self.clear_selection()
            self.emit(EventType.CANVAS_CLICK, original=ev)
            return
        if self.config.selectable:
            additive = self.config.multi_select and (ev.ctrl or ev.meta)
            if additive:
                ids = [i for i in self._selected if i != node.id]
                if node.id not in self._selected:
                    ids.append(node.id)
            else:
                ids = [node.id]
            changed = ids != self._selected
            self._selected = ids
            self._sync_flags()
            self.emit(EventType.NODE_CLICK, node, original=ev)
            if changed:
                self.emit(EventType.SELECTION_CHANGE, selected=list(ids))
        else:
            self.emit(EventType.NODE_CLICK, node, original=ev)

    # wheel / keyboard

    def wheel(self, ev: WheelEvent) -> None:
        if not self.config.zoomable or ev.delta_y == 0:
            return
        speed = self.config.zoom_speed
        factor = 1 - speed if ev.delta_y > 0 else 1 + speed
        before = self.transform.scale
        w, h = self._size()
        after = self.transform.zoom_at(factor, ev.x, ev.y, w, h)
        if after != before:
            self.emit(EventType.CANVAS_ZOOM, original=ev, scale=after)

    def key_down(self, ev: KeyEvent) -> Optional[EventType]:
        """Emit the shortcut intent for a chord; the caller performs it."""
        intent = SHORTCUTS.get(ev.chord())
        if intent is None:
            return None
        if intent == EventType.SHORTCUT_DELETE:
            if not self._selected:
                return None
            self.emit(intent, original=ev, ids=list(self._selected))
        else:
            self.emit(intent, original=ev)
        return intent
