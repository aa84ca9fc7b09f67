"""Tests for XMind export of a node tree and relationship validation."""
from __future__ import annotations

from pathlib import Path

from mindcanvas.export import build_xmind, load_xmind, load_xmind_parent_child_pairs, load_xmind_topic_titles
from mindcanvas.model import Node


def test_main_help_shows_formats() -> None:
    """main.py --help lists the export formats, xmind included."""
    import subprocess
    import sys

    result = subprocess.run(
        [sys.executable, "main.py", "--help"],
        cwd=Path(__file__).resolve().parent.parent,
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0
    assert "--format" in result.stdout
    assert "xmind" in result.stdout


def test_build_xmind_creates_file(tmp_path: Path) -> None:
    """build_xmind produces a .xmind file containing every label."""
    root = Node.from_dict({"id": "r", "label": "Root", "children": [
        {"id": "a", "label": "Child A"},
        {"id": "b", "label": "Child B", "children": [{"id": "g", "label": "Grandchild"}]},
    ]})
    out = tmp_path / "project.xmind"
    build_xmind(root, out, sheet_title="Test")
    assert out.is_file()
    titles = load_xmind_topic_titles(out)
    for label in ("Root", "Child A", "Child B", "Grandchild"):
        assert label in titles


def test_xmind_relationship_validation(tmp_path: Path) -> None:
    """Parent-child pairs in the workbook match the tree edges, collapsed branches included."""
    root = Node.from_dict({"id": "r", "label": "Root", "children": [
        {"id": "a", "label": "Child A"},
        {"id": "b", "label": "Child B", "collapsed": True, "children": [{"id": "g", "label": "Grandchild"}]},
    ]})
    out = tmp_path / "rel.xmind"
    build_xmind(root, out)
    pairs = load_xmind_parent_child_pairs(out)
    assert ("Root", "Child A") in pairs
    assert ("Root", "Child B") in pairs
    assert ("Child B", "Grandchild") in pairs
    assert len(pairs) == 3


def test_mindmap_export_xmind_file(mindmap, tmp_path: Path) -> None:
    out = mindmap.export_to_file("xmind", tmp_path / "map.xmind")
    assert out == tmp_path / "map.xmind"
    assert load_xmind_topic_titles(out)[0] == "Root"


def test_load_xmind_rebuilds_the_tree(tmp_path: Path) -> None:
    """Reading the workbook back gives the same shape, with labels and order preserved."""
    root = Node.from_dict({"id": "r", "label": "Root", "children": [
        {"id": "a", "label": "Child A", "children": [{"id": "a1", "label": "Leaf"}]},
        {"id": "b", "label": ""},
    ]})
    trees = load_xmind(build_xmind(root, tmp_path / "shape.xmind"))
    assert len(trees) == 1
    back = trees[0]
    assert back.label == "Root"
    assert [c.label for c in back.children] == ["Child A", "b"]
    assert [c.label for c in back.children[0].children] == ["Leaf"]
    assert back.id == "topic_1"
