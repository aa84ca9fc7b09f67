"""
MindMap: owns the tree and wires layout, rendering, input, animation,
themes, undo/redo and export together.

Rendering is demand-driven: mutations mark the view dirty and request a
frame from the tick source; the frame renders only if still dirty.
Animation frames write node values and render in the same tick.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Optional, Union

from PIL import Image

from ..animation.engine import AnimationConfig, AnimationEngine
from ..animation.ticker import ManualTickSource, TickSource
from ..errors import ConfigurationError
from ..events.manager import EventManager, Handler, InteractionConfig
from ..events.types import DiagramEvent, EventType
from ..export.exporter import ExportConfig, check_format, export_document, export_to_file
from ..layout.engine import LayoutConfig, LayoutEngine, content_bounds, has_valid_positions
from ..model.node import Node, coerce_tree, find_node, find_parent, generate_id, iter_nodes, iter_visible
from ..model.style import NodeStyle
from ..model.theme import Theme, ThemeRegistry
from ..model.transform import Transform
from ..render.engine import RenderConfig, RenderEngine
from .history import MAX_HISTORY, History

logger = logging.getLogger(__name__)

Target = Union[Image.Image, tuple[int, int]]

_UPDATABLE = ("label", "style", "collapsed", "x", "y", "width", "height", "opacity", "data")


def _make_surface(target: Any, pixel_ratio: float) -> Image.Image:
    if isinstance(target, Image.Image):
        return target
    if (
        isinstance(target, (tuple, list))
        and len(target) == 2
        and all(isinstance(v, int) and not isinstance(v, bool) and v > 0 for v in target)
    ):
        w, h = target
        return Image.new("RGBA", (int(round(w * pixel_ratio)), int(round(h * pixel_ratio))), (0, 0, 0, 0))
    raise ConfigurationError(f"Mount target must be a PIL Image or (width, height), got {target!r}")


class MindMap:
    def __init__(
        self,
        target: Target,
        *,
        data: Node | dict | None = None,
        layout: LayoutConfig | None = None,
        theme: str | Theme = "default",
        render: RenderConfig | None = None,
        interaction: InteractionConfig | None = None,
        animation: AnimationConfig | None = None,
        ticker: TickSource | None = None,
        history_limit: int = MAX_HISTORY,
    ) -> None:
        render = render or RenderConfig()
        surface = _make_surface(target, render.pixel_ratio)

        self.transform = Transform()
        self.themes = ThemeRegistry()
        self.ticker = ticker or ManualTickSource()
        self.layout_engine = LayoutEngine(layout or LayoutConfig())
        self.renderer = RenderEngine(surface, self.transform, render)
        self.events = EventManager(self.transform, lambda: self.renderer.logical_size, lambda: self._root, interaction)
        self.animations = AnimationEngine(self.ticker, animation, on_frame=self._on_animation_frame)
        self.history = History(history_limit)

        self._root: Optional[Node] = None
        self._theme: Theme = self.themes.get("default")
        self._theme_id: str = "default"
        self._dirty = False
        self._frame: Optional[int] = None
        self._drag_before: Optional[Node] = None

        self._bind_events()
        self.set_theme(theme)
        if data is not None:
            self.set_data(data)

    @property
    def surface(self) -> Image.Image:
        return self.renderer.surface

    @property
    def root(self) -> Optional[Node]:
        """The live tree (not a copy); use get_data() for a snapshot."""
        return self._root

    @property
    def needs_render(self) -> bool:
        return self._dirty

    def _bind_events(self) -> None:
        for kind in (
            EventType.NODE_CLICK,
            EventType.NODE_DRAG,
            EventType.NODE_MOUSEENTER,
            EventType.NODE_MOUSELEAVE,
            EventType.CANVAS_CLICK,
            EventType.CANVAS_PAN,
            EventType.CANVAS_ZOOM,
            EventType.SELECTION_CHANGE,
        ):
            self.events.on(kind, lambda e: self.request_render())
        self.events.on(EventType.NODE_COLLAPSE, self._on_toggle)
        self.events.on(EventType.NODE_EXPAND, self._on_toggle)
        self.events.on(EventType.NODE_DRAGSTART, self._on_drag_start)
        self.events.on(EventType.NODE_DRAGEND, self._on_drag_end)
        self.events.on(EventType.SHORTCUT_UNDO, lambda e: self.undo())
        self.events.on(EventType.SHORTCUT_REDO, lambda e: self.redo())
        self.events.on(EventType.SHORTCUT_SELECT_ALL, lambda e: self.select_all())
        self.events.on(EventType.SHORTCUT_DELETE, lambda e: self.delete_selection())

    def _on_toggle(self, event: DiagramEvent) -> None:
        if event.target is not None:
            self.toggle_collapse(event.target.id)

    def _on_drag_start(self, event: DiagramEvent) -> None:
        self._drag_before = self._root.clone() if self._root else None

    def _on_drag_end(self, event: DiagramEvent) -> None:
        if self._drag_before is not None and self._root is not None and event.target is not None:
            self.history.record("move", event.target.id, self._drag_before, self._root)
        self._drag_before = None
        self.request_render()

    # data

    def set_data(self, data: Node | dict, fit: bool = True) -> None:
        """Replace the tree with a deep copy of data; clears history, selection and animations."""
        self.animations.cancel_all()
        self._root = coerce_tree(data)
        self.events.reset()
        self.history.clear()
        self.layout()
        if fit:
            self.fit_view()
        self._emit_change("load", self._root.id)

    def get_data(self) -> Optional[Node]:
        return self._root.clone() if self._root else None

    def find_node(self, node_id: str) -> Optional[Node]:
        return find_node(self._root, node_id) if self._root else None

    def find(self, predicate: Callable[[Node], bool]) -> Optional[Node]:
        if self._root is None:
            return None
        return next((n for n, _ in iter_nodes(self._root) if predicate(n)), None)

    def layout(self) -> None:
        if self._root is not None:
            self.layout_engine.layout(self._root, self._theme)
            self.request_render()

    def _emit_change(self, action: str, node_id: Optional[str]) -> None:
        self.events.emit(EventType.DATA_CHANGE, self.find_node(node_id) if node_id else None,
                         action=action, node_id=node_id)

    def _commit(self, action: str, node_id: Optional[str], before: Node) -> None:
        self.layout()
        self.history.record(action, node_id, before, self._root)
        self.events.prune()
        self._emit_change(action, node_id)

    def add_node(self, parent_id: str, label: str = "New node", node_id: str | None = None,
                 **fields: Any) -> Optional[Node]:
        """Append a child under parent_id; None if the parent is missing or the id is taken."""
        parent = self.find_node(parent_id)
        if parent is None:
            logger.debug("add_node: parent %s not found", parent_id)
            return None
        node_id = node_id or generate_id()
        if self.find_node(node_id) is not None:
            logger.warning("add_node: id %s already exists", node_id)
            return None
        style = fields.pop("style", None)
        if isinstance(style, dict):
            style = NodeStyle.from_dict(style)
        node = Node(id=node_id, label=label, style=style, **fields)
        before = self._root.clone()
        parent.children.append(node)
        self._commit("add", node.id, before)
        if self.animations.config.enabled and node.has_geometry:
            self.animations.animate_enter(node)
        return node

    def remove_node(self, node_id: str) -> bool:
        """Detach a node and its subtree. The root cannot be removed."""
        if self._root is None or node_id == self._root.id:
            return False
        parent = find_parent(self._root, node_id)
        if parent is None:
            logger.debug("remove_node: %s not found", node_id)
            return False
        before = self._root.clone()
        node = next(c for c in parent.children if c.id == node_id)
        for n, _ in iter_nodes(node):
            self.animations.cancel_node_animations(n.id)
        parent.children.remove(node)
        self._commit("remove", node_id, before)
        return True

    def update_node(self, node_id: str, **changes: Any) -> bool:
        unknown = set(changes) - set(_UPDATABLE)
        if unknown:
            raise ValueError(f"Cannot update node fields: {sorted(unknown)}")
        node = self.find_node(node_id)
        if node is None:
            logger.debug("update_node: %s not found", node_id)
            return False
        if isinstance(changes.get("style"), dict):
            changes["style"] = NodeStyle.from_dict(changes["style"])
        before = self._root.clone()
        for name, value in changes.items():
            setattr(node, name, value)
        self._commit("update", node_id, before)
        return True

    def toggle_collapse(self, node_id: str) -> bool:
        """Flip collapsed on a node that has children."""
        node = self.find_node(node_id)
        if node is None or not node.children:
            return False
        before = self._root.clone()
        node.collapsed = not node.collapsed
        self._commit("expand" if not node.collapsed else "collapse", node_id, before)
        return True

    def select_all(self) -> list[str]:
        if self._root is None:
            return []
        ids = [n.id for n, _ in iter_visible(self._root)]
        self.events.set_selection(ids)
        return ids

    def delete_selection(self) -> int:
        """Remove every selected node except the root, as one history step."""
        if self._root is None:
            return 0
        ids = [i for i in self.events.selected_ids if i != self._root.id]
        before = self._root.clone()
        removed = 0
        for node_id in ids:
            parent = find_parent(self._root, node_id)
            if parent is None:
                continue
            node = next(c for c in parent.children if c.id == node_id)
            for n, _ in iter_nodes(node):
                self.animations.cancel_node_animations(n.id)
            parent.children.remove(node)
            removed += 1
        if removed:
            self._commit("remove", ids[0] if len(ids) == 1 else None, before)
        return removed

    # history

    def _restore(self, tree: Optional[Node], action: str) -> bool:
        if tree is None:
            return False
        self.animations.cancel_all()
        self._root = tree
        self.events.prune()
        if has_valid_positions(tree):
            self.request_render()
        else:
            self.layout()
        self._emit_change(action, None)
        return True

    def undo(self) -> bool:
        return self._restore(self.history.undo(), "undo")

    def redo(self) -> bool:
        return self._restore(self.history.redo(), "redo")

    # configuration

    def set_layout(self, config: LayoutConfig | None = None, **changes: Any) -> LayoutConfig:
        new = self.layout_engine.update_config(config, **changes)
        self.layout()
        return new

    def set_theme(self, theme: str | Theme | dict) -> bool:
        if isinstance(theme, str):
            found = self.themes.get(theme)
            if found is None:
                logger.warning("Theme %s not found", theme)
                return False
            self._theme, self._theme_id = found, theme
        elif isinstance(theme, Theme):
            self._theme, self._theme_id = theme, "custom"
        else:
            self._theme, self._theme_id = Theme.from_dict(theme), "custom"
        self.layout()
        self.request_render()
        return True

    def get_theme(self) -> Theme:
        return self._theme

    @property
    def theme_id(self) -> str:
        return self._theme_id

    def register_theme(self, theme_id: str, theme: Theme | dict) -> Theme:
        return self.themes.register(theme_id, theme)

    # view

    def fit_view(self, padding: float = 50) -> bool:
        """Center the content and zoom out (never in past 1.0) so it fits with padding."""
        if self._root is None:
            return False
        bounds = content_bounds(self._root)
        if bounds is None:
            return False
        left, top, right, bottom = bounds
        width, height = self.renderer.logical_size
        cw, ch = max(right - left, 1e-6), max(bottom - top, 1e-6)
        scale = min((width - padding * 2) / cw, (height - padding * 2) / ch, 1.0)
        scale = self.transform.clamp_scale(scale)
        self.transform.scale = scale
        self.transform.offset_x = -(left + right) / 2 * scale
        self.transform.offset_y = -(top + bottom) / 2 * scale
        self.request_render()
        return True

    def zoom(self, factor: float) -> float:
        """Zoom about the surface center, clamped to the zoom range."""
        width, height = self.renderer.logical_size
        scale = self.transform.zoom_at(factor, width / 2, height / 2, width, height)
        self.events.emit(EventType.CANVAS_ZOOM, scale=scale)
        return scale

    def reset_view(self) -> None:
        self.transform.reset()
        self.request_render()

    def resize(self, target: Target) -> None:
        self.renderer.resize(_make_surface(target, self.renderer.config.pixel_ratio))
        self.request_render()

    # rendering

    def request_render(self) -> None:
        self._dirty = True
        if self._frame is None:
            self._frame = self.ticker.request_frame(self._on_frame)

    def _on_frame(self, _ts: float) -> None:
        self._frame = None
        if self._dirty:
            self.render()

    def _on_animation_frame(self) -> None:
        self._dirty = True
        self.render()

    def render(self) -> Image.Image:
        """Draw now, regardless of the dirty flag."""
        self.renderer.render(self._root, self._theme)
        self._dirty = False
        self.events.emit(EventType.RENDER_COMPLETE)
        return self.renderer.surface

    # events

    def on(self, event_type: EventType | str, handler: Handler) -> None:
        self.events.on(event_type, handler)

    def off(self, event_type: EventType | str, handler: Handler | None = None) -> None:
        self.events.off(event_type, handler)

    # export

    def export(self, config: ExportConfig | str) -> Optional[Union[bytes, str]]:
        """Encoded export of the current tree (bytes for images, text otherwise)."""
        if isinstance(config, str):
            config = ExportConfig(format=config)
        check_format(config.format)
        if self._root is None:
            return None
        return export_document(self._root, self._theme, self.renderer, config)

    def export_to_file(self, config: ExportConfig | str, out_path: Path | str) -> Optional[Path]:
        if isinstance(config, str):
            config = ExportConfig(format=config)
        check_format(config.format)
        if self._root is None:
            return None
        return export_to_file(self._root, self._theme, self.renderer, config, out_path)

    def destroy(self) -> None:
        self.animations.cancel_all()
        if self._frame is not None:
            self.ticker.cancel_frame(self._frame)
            self._frame = None
        self._root = None
        self.events.reset()
