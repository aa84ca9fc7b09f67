"""
Layout engine: assigns x/y (node center) and width/height to every node
reachable without crossing a collapsed node.

Strategies: tree-right/left/down/up, org-chart, mindmap, radial, plus a
custom callback. Tree and mindmap share one two-pass scheme: reserve a
perpendicular span per subtree bottom-up, then place siblings top-down,
centered on their parent.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Callable, Optional

from ..model.node import Node, iter_nodes, iter_visible
from ..model.theme import Theme, resolve_node_style
from .measure import MIN_NODE_HEIGHT, MIN_NODE_WIDTH, calculate_node_size

logger = logging.getLogger(__name__)

LAYOUT_TYPES = ("tree-right", "tree-left", "tree-down", "tree-up", "mindmap", "radial", "org-chart")

CustomLayout = Callable[[list[Node], Node], None]


@dataclass(frozen=True)
class LayoutConfig:
    type: str = "mindmap"
    node_spacing: float = 50
    level_spacing: float = 240
    branch_spacing: float = 80
    preserve_position: bool = False
    custom_layout: Optional[CustomLayout] = None
    min_width: float = MIN_NODE_WIDTH
    min_height: float = MIN_NODE_HEIGHT


def content_bounds(root: Node) -> Optional[tuple[float, float, float, float]]:
    """(left, top, right, bottom) over visible nodes that have geometry; None if none do."""
    boxes = [n.bounds() for n, _ in iter_visible(root) if n.has_geometry]
    if not boxes:
        return None
    return (
        min(b[0] for b in boxes),
        min(b[1] for b in boxes),
        max(b[2] for b in boxes),
        max(b[3] for b in boxes),
    )


def has_valid_positions(node: Node) -> bool:
    """True when node and every non-collapsed descendant already has x and y."""
    if node.x is None or node.y is None:
        return False
    return all(has_valid_positions(c) for c in node.visible_children)


class LayoutEngine:
    def __init__(self, config: LayoutConfig | None = None) -> None:
        self._config = config or LayoutConfig()
        self._theme: Optional[Theme] = None
        self._reserved: dict[int, float] = {}

    @property
    def config(self) -> LayoutConfig:
        return self._config

    def update_config(self, config: LayoutConfig | None = None, **changes) -> LayoutConfig:
        """Swap in a new config (replace whole, or change selected fields)."""
        base = config or self._config
        self._config = replace(base, **changes) if changes else base
        return self._config

    def layout(self, root: Node, theme: Theme | None = None) -> None:
        """Mutate geometry of every reachable node in place. Tree structure is untouched."""
        self._theme = theme
        self._reserved = {}
        cfg = self._config

        if cfg.preserve_position and has_valid_positions(root):
            logger.debug("Layout: positions preserved, sizing only")
            self._size_subtree(root, 0)
            return

        if cfg.custom_layout is not None:
            self._size_subtree(root, 0)
            cfg.custom_layout([n for n, _ in iter_nodes(root)], root)
            return

        kind = cfg.type
        if kind not in LAYOUT_TYPES:
            logger.warning("Unknown layout type %r, falling back to tree-right", kind)
            kind = "tree-right"
        logger.debug("Layout: %s", kind)

        if kind == "mindmap":
            self._mindmap(root)
        elif kind == "radial":
            self._radial(root)
        elif kind == "org-chart":
            self._tree(root, "down")
        else:
            self._tree(root, kind.split("-", 1)[1])

    # sizing

    def _size(self, node: Node, depth: int) -> tuple[float, float]:
        style = resolve_node_style(node.style, depth, self._theme)
        w, h = calculate_node_size(node.label, style, self._config.min_width, self._config.min_height)
        node.width, node.height = w, h
        return w, h

    def _size_subtree(self, node: Node, depth: int) -> None:
        self._size(node, depth)
        for child in node.visible_children:
            self._size_subtree(child, depth + 1)

    def _place_root(self, root: Node) -> None:
        self._size(root, 0)
        root.x, root.y = 0.0, 0.0

    # directional tree / mindmap

    def _reserve(self, node: Node, depth: int, horizontal: bool) -> float:
        """Perpendicular span reserved for node's subtree; sizes the subtree as a side effect."""
        key = id(node)
        if key in self._reserved:
            return self._reserved[key]
        w, h = self._size(node, depth)
        own = (h if horizontal else w) + self._config.node_spacing
        span = max(own, self._group_span(node.visible_children, depth + 1, horizontal))
        self._reserved[key] = span
        return span

    def _group_span(self, nodes: list[Node], depth: int, horizontal: bool) -> float:
        if not nodes:
            return 0.0
        spans = [self._reserve(n, depth, horizontal) for n in nodes]
        return sum(spans) + (len(nodes) - 1) * self._config.node_spacing

    def _place_group(
        self,
        nodes: list[Node],
        depth: int,
        center: float,
        level_pos: float,
        sign: int,
        horizontal: bool,
        spread_factor: float,
    ) -> None:
        """
        Center the sibling group on `center` along the perpendicular axis and
        keep its near edge `level_pos` away from the origin along the level
        axis (sign -1 mirrors it). The push grows with the group's widest spread.
        """
        if not nodes:
            return
        spacing = self._config.node_spacing
        spans = [self._reserve(n, depth, horizontal) for n in nodes]
        total = sum(spans) + (len(nodes) - 1) * spacing

        offsets = []
        cursor = center - total / 2
        for span in spans:
            offsets.append(cursor + span / 2)
            cursor += span + spacing

        spread = max(abs(o - center) for o in offsets)
        max_dim = max((n.width if horizontal else n.height) for n in nodes)
        pos = level_pos + max_dim / 2 + math.sqrt(spread) * spread_factor

        for node, offset in zip(nodes, offsets):
            if horizontal:
                node.x, node.y = sign * pos, offset
            else:
                node.x, node.y = offset, sign * pos
            if node.visible_children:
                next_pos = pos + max_dim / 2 + self._config.level_spacing
                self._place_group(node.visible_children, depth + 1, offset, next_pos, sign, horizontal, spread_factor)

    def _tree(self, root: Node, direction: str) -> None:
        horizontal = direction in ("right", "left")
        sign = -1 if direction in ("left", "up") else 1
        self._place_root(root)
        children = root.visible_children
        if not children:
            return
        start = self._config.level_spacing + (root.width if horizontal else root.height) / 2
        self._place_group(children, 1, 0.0, start, sign, horizontal, 3)

    def _mindmap(self, root: Node) -> None:
        self._place_root(root)
        children = root.visible_children
        if not children:
            return
        left = children[0::2]
        right = children[1::2]
        multiplier = 1.5 + min(max(len(left), len(right)) * 0.35, 2.5)
        start = self._config.level_spacing * multiplier + root.width / 2
        self._place_group(right, 1, 0.0, start, 1, True, 4)
        self._place_group(left, 1, 0.0, start, -1, True, 4)

    # radial

    @staticmethod
    def _radial_increment(child_count: int, size: tuple[float, float]) -> float:
        return (120 + max(size)) * (1 + min(child_count * 0.1, 0.8))

    def _radial(self, root: Node) -> None:
        self._place_root(root)
        children = root.visible_children
        if not children:
            return
        k = len(children)
        radius = (150 + max(root.width, root.height) / 2) * (1 + min(k * 0.15, 1.5))
        step = 2 * math.pi / k
        for i, child in enumerate(children):
            angle = i * step - math.pi / 2
            size = self._size(child, 1)
            child.x = math.cos(angle) * radius
            child.y = math.sin(angle) * radius
            if child.visible_children:
                next_radius = radius + self._radial_increment(len(child.visible_children), size)
                self._radial_children(child, angle, next_radius, 2)

    def _radial_children(self, parent: Node, parent_angle: float, radius: float, depth: int) -> None:
        children = parent.visible_children
        count = len(children)
        angle_range = math.pi / max(depth, 2) * (1 + min(count * 0.05, 0.5))
        if count > 1:
            step = angle_range / (count - 1)
            start = parent_angle - angle_range / 2
        else:
            step, start = 0.0, parent_angle
        for i, child in enumerate(children):
            angle = start + i * step
            size = self._size(child, depth)
            child.x = parent.x + math.cos(angle) * radius
            child.y = parent.y + math.sin(angle) * radius
            if child.visible_children:
                next_radius = radius + self._radial_increment(len(child.visible_children), size)
                self._radial_children(child, angle, next_radius, depth + 1)
