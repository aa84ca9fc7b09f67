"""
Export a node tree to an XMind mind map (py-xmind16), and read one back.
"""
from __future__ import annotations

import itertools
import logging
from pathlib import Path
from typing import Any

from ..model.node import Node, iter_nodes

logger = logging.getLogger(__name__)


def _workbook_class() -> Any:
    try:
        from py_xmind16 import Workbook
    except ImportError as e:
        raise ImportError("py-xmind16 is required for xmind export. Install with: pip install py-xmind16") from e
    return Workbook


def build_xmind(root: Node, out_path: Path | str, *, sheet_title: str = "Mind Map") -> Path:
    """
    Save the tree as a single-sheet .xmind workbook: root node becomes the
    central topic, children become subtopics (collapsed branches included).
    """
    Workbook = _workbook_class()
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    workbook = Workbook()
    sheet = workbook.create_sheet(sheet_title)
    topic = sheet.get_root_topic()
    topic.title = root.label or "(No content)"

    def add_children(parent_topic: Any, node: Node) -> None:
        for child in node.children:
            sub = parent_topic.add_subtopic(child.label or child.id)
            add_children(sub, child)

    add_children(topic, root)
    workbook.save(str(out_path))
    logger.debug("Saved xmind workbook %s", out_path)
    return out_path


def load_xmind(xmind_path: Path | str) -> list[Node]:
    """Read every sheet of an .xmind workbook back into a node tree (ids follow traversal order)."""
    Workbook = _workbook_class()
    workbook = Workbook.load(str(xmind_path))
    counter = itertools.count(1)

    def to_node(topic: Any) -> Node:
        node = Node(id=f"topic_{next(counter)}", label=str(getattr(topic, "title", None) or "").strip())
        node.children = [to_node(st) for st in getattr(topic, "subtopics", []) or []]
        return node

    sheets = (workbook.get_sheet(i) for i in range(workbook.sheet_count))
    return [to_node(sheet.root_topic) for sheet in sheets if sheet.root_topic]


def load_xmind_topic_titles(xmind_path: Path | str) -> list[str]:
    """All topic titles in pre-order, sheet after sheet."""
    return [node.label for tree in load_xmind(xmind_path) for node, _ in iter_nodes(tree)]


def load_xmind_parent_child_pairs(xmind_path: Path | str) -> list[tuple[str, str]]:
    """(parent_title, child_title) for every link in the workbook."""
    return [
        (node.label, child.label)
        for tree in load_xmind(xmind_path)
        for node, _ in iter_nodes(tree)
        for child in node.children
    ]
