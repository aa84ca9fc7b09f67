"""
Text exports: JSON (tree verbatim) and Markdown (depth-indented bullets).
"""
from __future__ import annotations

import json

from ..model.node import Node, iter_nodes


def to_json(root: Node, *, indent: int = 2) -> str:
    return json.dumps(root.to_dict(), indent=indent, ensure_ascii=False)


def to_markdown(root: Node) -> str:
    """One '- label' line per node, indented two spaces per level (collapsed nodes included)."""
    lines = []
    for node, depth in iter_nodes(root):
        label = " ".join((node.label or "").split("\n"))
        lines.append(f"{'  ' * depth}- {label}")
    return "\n".join(lines) + "\n"
