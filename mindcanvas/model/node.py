"""
Tree nodes and tree helpers (traverse, find, path, depth, leaves).
"""
from __future__ import annotations

import copy
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional

from .style import NodeStyle


def generate_id() -> str:
    """Unique node id ('node_' + 12 hex chars)."""
    return f"node_{uuid.uuid4().hex[:12]}"


@dataclass(eq=False)
class Node:
    """One labeled tree element. x/y is the center; geometry is None until laid out."""

    id: str
    label: str = ""
    children: list["Node"] = field(default_factory=list)
    style: Optional[NodeStyle] = None
    x: Optional[float] = None
    y: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    collapsed: bool = False
    selected: bool = False
    hovered: bool = False
    opacity: float = 1.0
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Node":
        """Build a tree from its JSON shape ({id, label, children, style, ...})."""
        style = d.get("style")
        return cls(
            id=str(d.get("id") or generate_id()),
            label=str(d.get("label", "")),
            children=[cls.from_dict(c) for c in d.get("children") or []],
            style=NodeStyle.from_dict(style) if style else None,
            x=d.get("x"),
            y=d.get("y"),
            width=d.get("width"),
            height=d.get("height"),
            collapsed=bool(d.get("collapsed", False)),
            selected=bool(d.get("selected", False)),
            opacity=float(d.get("opacity", 1.0)),
            data=dict(d.get("data") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "label": self.label}
        if self.style is not None:
            out["style"] = self.style.to_dict()
        for key in ("x", "y", "width", "height"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        if self.collapsed:
            out["collapsed"] = True
        if self.selected:
            out["selected"] = True
        if self.opacity != 1.0:
            out["opacity"] = self.opacity
        if self.data:
            out["data"] = copy.deepcopy(self.data)
        out["children"] = [c.to_dict() for c in self.children]
        return out

    def clone(self) -> "Node":
        return copy.deepcopy(self)

    @property
    def has_geometry(self) -> bool:
        return None not in (self.x, self.y, self.width, self.height)

    @property
    def visible_children(self) -> list["Node"]:
        return [] if self.collapsed else self.children

    def bounds(self) -> tuple[float, float, float, float]:
        """(left, top, right, bottom) in world units; requires geometry."""
        hw, hh = self.width / 2, self.height / 2
        return (self.x - hw, self.y - hh, self.x + hw, self.y + hh)


def coerce_tree(data: "Node | dict[str, Any]") -> Node:
    """Deep-copied Node tree from a Node or its JSON mapping."""
    if isinstance(data, Node):
        return data.clone()
    return Node.from_dict(copy.deepcopy(data))


def traverse(
    node: Node,
    callback: Callable[[Node, int, Optional[Node]], Optional[bool]],
    level: int = 0,
    parent: Optional[Node] = None,
) -> None:
    """Depth-first pre-order walk; callback returning False prunes the subtree."""
    if callback(node, level, parent) is False:
        return
    for child in node.children:
        traverse(child, callback, level + 1, node)


def iter_nodes(root: Node) -> Iterator[tuple[Node, int]]:
    """All nodes with their depth, pre-order."""
    stack = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        yield node, depth
        for child in reversed(node.children):
            stack.append((child, depth + 1))


def iter_visible(root: Node) -> Iterator[tuple[Node, int]]:
    """Like iter_nodes, but does not descend into collapsed nodes."""
    stack = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        yield node, depth
        for child in reversed(node.visible_children):
            stack.append((child, depth + 1))


def find_node(root: Node, node_id: str) -> Optional[Node]:
    for node, _ in iter_nodes(root):
        if node.id == node_id:
            return node
    return None


def find_parent(root: Node, node_id: str) -> Optional[Node]:
    for node, _ in iter_nodes(root):
        for child in node.children:
            if child.id == node_id:
                return node
    return None


def find_path(root: Node, node_id: str) -> Optional[list[Node]]:
    """Nodes from root to node_id inclusive, or None."""
    path: list[Node] = []

    def search(node: Node) -> bool:
        path.append(node)
        if node.id == node_id:
            return True
        for child in node.children:
            if search(child):
                return True
        path.pop()
        return False

    return path if search(root) else None


def node_depth(root: Node, node_id: str) -> int:
    """Depth of node_id (root is 0); -1 when absent."""
    path = find_path(root, node_id)
    return len(path) - 1 if path else -1


def descendants(node: Node) -> list[Node]:
    return [n for n, depth in iter_nodes(node) if depth > 0]


def leaf_nodes(root: Node) -> list[Node]:
    return [n for n, _ in iter_nodes(root) if not n.children]


def tree_depth(node: Node) -> int:
    if not node.children:
        return 1
    return 1 + max(tree_depth(c) for c in node.children)


def tree_width(node: Node) -> int:
    """Number of leaves under node."""
    if not node.children:
        return 1
    return sum(tree_width(c) for c in node.children)
