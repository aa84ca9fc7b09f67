"""Tests for layout strategies and text measurement."""
from __future__ import annotations

import math
import unittest
from itertools import combinations

import pytest

from mindcanvas.layout import (
    LAYOUT_TYPES,
    MIN_NODE_HEIGHT,
    MIN_NODE_WIDTH,
    LayoutConfig,
    LayoutEngine,
    calculate_node_size,
    content_bounds,
    has_valid_positions,
    measure_text,
    wrap_text,
)
from mindcanvas.model import Node, NodeStyle, ThemeRegistry, find_node, iter_nodes, iter_visible
from mindcanvas.samples import get_sample


def _laid_out(data: dict, **config) -> Node:
    root = Node.from_dict(data)
    LayoutEngine(LayoutConfig(**config)).layout(root, ThemeRegistry().get("default"))
    return root


def _overlap(a: Node, b: Node) -> bool:
    al, at, ar, ab = a.bounds()
    bl, bt, br, bb = b.bounds()
    return al < br and bl < ar and at < bb and bt < ab


@pytest.mark.parametrize("kind", LAYOUT_TYPES)
def test_every_visible_node_gets_geometry(kind: str) -> None:
    """After layout every reachable node has x, y and at least the minimum size."""
    root = _laid_out(get_sample("knowledge"), type=kind)
    for node, _ in iter_visible(root):
        assert node.has_geometry, node.id
        assert node.width >= MIN_NODE_WIDTH
        assert node.height >= MIN_NODE_HEIGHT


@pytest.mark.parametrize("kind", ["tree-right", "tree-left", "tree-down", "tree-up", "org-chart", "mindmap"])
def test_directional_layouts_do_not_overlap(kind: str) -> None:
    """No two node boxes intersect in the directional and mindmap strategies."""
    root = _laid_out(get_sample("knowledge"), type=kind)
    nodes = [n for n, _ in iter_visible(root)]
    for a, b in combinations(nodes, 2):
        assert not _overlap(a, b), (kind, a.id, b.id)


@pytest.mark.parametrize("kind", ["tree-right", "tree-left", "mindmap"])
def test_wide_labels_clear_their_parent(kind: str) -> None:
    """A child much wider than the level spacing still starts past its parent's edge."""
    wide = "a very long label that is far wider than the gap between levels"
    root = _laid_out(
        {"id": "r", "label": "Root", "children": [
            {"id": "c", "label": wide, "children": [{"id": "g", "label": wide + " again"}]},
        ]},
        type=kind,
        level_spacing=20,
    )
    child = root.children[0]
    grandchild = child.children[0]
    for parent, node in ((root, child), (child, grandchild)):
        gap = abs(node.x - parent.x) - (parent.width + node.width) / 2
        assert gap >= 20, (kind, node.id)


def test_two_children_symmetric_about_root(pair_tree) -> None:
    """tree-right: A and B straddle the root and are at least height + spacing apart."""
    root = _laid_out(pair_tree, type="tree-right", node_spacing=50)
    a, b = root.children
    assert a.y - root.y == pytest.approx(root.y - b.y)
    assert abs(a.y - b.y) >= a.height + 50
    assert a.x == b.x
    assert a.x > root.x


def test_tree_directions_place_children_on_their_side(pair_tree) -> None:
    for kind, check in (
        ("tree-right", lambda r, c: c.x > r.x),
        ("tree-left", lambda r, c: c.x < r.x),
        ("tree-down", lambda r, c: c.y > r.y),
        ("tree-up", lambda r, c: c.y < r.y),
        ("org-chart", lambda r, c: c.y > r.y),
    ):
        root = _laid_out(pair_tree, type=kind)
        assert all(check(root, c) for c in root.children), kind


def test_deeper_levels_are_further_out() -> None:
    """Each level sits further from the root than its parent."""
    root = _laid_out(get_sample("knowledge"), type="tree-right")
    for node, _ in iter_visible(root):
        for child in node.visible_children:
            assert child.x > node.x + node.width / 2


def test_mindmap_alternates_sides() -> None:
    """Even-indexed root children go left, odd-indexed go right."""
    root = _laid_out(get_sample("knowledge"), type="mindmap")
    for i, child in enumerate(root.children):
        if i % 2 == 0:
            assert child.x < root.x
        else:
            assert child.x > root.x
    js = find_node(root, "js")
    assert find_node(root, "es6").x < js.x


def test_radial_children_evenly_spaced() -> None:
    """Consecutive root children differ in angle by exactly 2*pi/k."""
    root = _laid_out(get_sample("knowledge"), type="radial")
    k = len(root.children)
    angles = [math.atan2(c.y - root.y, c.x - root.x) for c in root.children]
    radii = [math.hypot(c.x - root.x, c.y - root.y) for c in root.children]
    for a0, a1 in zip(angles, angles[1:]):
        assert (a1 - a0) % (2 * math.pi) == pytest.approx(2 * math.pi / k)
    assert angles[0] == pytest.approx(-math.pi / 2)
    assert max(radii) == pytest.approx(min(radii))


def test_radial_single_child_follows_parent_angle() -> None:
    data = {"id": "r", "label": "R", "children": [
        {"id": "a", "label": "A", "children": [{"id": "a1", "label": "A1"}]},
        {"id": "b", "label": "B"},
    ]}
    root = _laid_out(data, type="radial")
    a, a1 = root.children[0], root.children[0].children[0]
    parent_angle = math.atan2(a.y - root.y, a.x - root.x)
    assert math.atan2(a1.y - a.y, a1.x - a.x) == pytest.approx(parent_angle)


def test_unknown_type_falls_back_to_tree_right(small_tree, caplog) -> None:
    fallback = _laid_out(small_tree, type="spiral")
    expected = _laid_out(small_tree, type="tree-right")
    assert "spiral" in caplog.text
    for (n1, _), (n2, _) in zip(iter_nodes(fallback), iter_nodes(expected)):
        assert (n1.x, n1.y) == (n2.x, n2.y)


def test_collapsed_subtree_is_not_positioned(small_tree) -> None:
    small_tree["children"][1]["collapsed"] = True
    root = _laid_out(small_tree, type="tree-right")
    b1 = find_node(root, "b1")
    assert b1.x is None and b1.width is None
    assert find_node(root, "b").has_geometry


class TestPreservePosition(unittest.TestCase):
    def setUp(self):
        self.root = Node.from_dict(get_sample("project"))
        self.engine = LayoutEngine(LayoutConfig(type="tree-right"))
        self.engine.layout(self.root)

    def _geometry(self):
        return {n.id: (n.x, n.y, n.width, n.height) for n, _ in iter_nodes(self.root)}

    def test_preserve_is_idempotent(self):
        first = self._geometry()
        self.engine.update_config(preserve_position=True)
        self.engine.layout(self.root)
        self.engine.layout(self.root)
        self.assertEqual(self._geometry(), first)

    def test_manual_positions_survive(self):
        task = find_node(self.root, "task1")
        task.x, task.y = 999.0, -999.0
        self.engine.update_config(preserve_position=True)
        self.engine.layout(self.root)
        self.assertEqual((task.x, task.y), (999.0, -999.0))

    def test_missing_position_triggers_full_layout(self):
        first = self._geometry()
        find_node(self.root, "task1").x = None
        self.engine.update_config(preserve_position=True)
        self.engine.layout(self.root)
        self.assertEqual(self._geometry(), first)
        self.assertTrue(has_valid_positions(self.root))

    def test_collapse_then_expand_restores_geometry(self):
        first = self._geometry()
        self.engine.update_config(preserve_position=True)
        phase = find_node(self.root, "phase1")
        phase.collapsed = True
        self.engine.layout(self.root)
        visible = {n.id for n, _ in iter_visible(self.root)}
        self.assertNotIn("task1", visible)
        self.assertEqual(self._geometry()["task1"], first["task1"])
        phase.collapsed = False
        self.engine.layout(self.root)
        self.assertEqual(self._geometry(), first)


def test_update_config_replaces_or_patches() -> None:
    engine = LayoutEngine()
    assert engine.config.type == "mindmap"
    patched = engine.update_config(type="radial", node_spacing=10)
    assert (patched.type, patched.node_spacing, patched.level_spacing) == ("radial", 10, 240)
    whole = engine.update_config(LayoutConfig(type="tree-up"))
    assert whole.node_spacing == 50
    assert engine.config is whole


def test_custom_layout_receives_sized_nodes(small_tree) -> None:
    seen = {}

    def place(nodes, root):
        seen["count"] = len(nodes)
        seen["sized"] = all(n.width is not None for n in nodes if n is root or n in root.children)
        for i, node in enumerate(nodes):
            node.x, node.y = float(i * 10), 0.0

    root = _laid_out(small_tree, custom_layout=place)
    assert seen == {"count": 6, "sized": True}
    assert find_node(root, "c").x == 50.0


def test_content_bounds(pair_tree) -> None:
    assert content_bounds(Node.from_dict(pair_tree)) is None
    root = _laid_out(pair_tree, type="tree-down")
    left, top, right, bottom = content_bounds(root)
    assert top == pytest.approx(root.y - root.height / 2)
    assert bottom == pytest.approx(max(c.y + c.height / 2 for c in root.children))
    assert left < right


def test_measure_text_grows_with_length() -> None:
    assert measure_text("") == 0.0
    short = measure_text("ab", 14)
    assert measure_text("abcdef", 14) > short > 0
    assert measure_text("ab", 28) > short


def test_calculate_node_size_minimums_and_lines() -> None:
    assert calculate_node_size("", NodeStyle(font_size=8, padding=0)) == (MIN_NODE_WIDTH, MIN_NODE_HEIGHT)
    style = NodeStyle(font_size=14, padding=(8, 16))
    one_w, one_h = calculate_node_size("A fairly long label", style)
    two_w, two_h = calculate_node_size("A fairly long label\nsecond", style)
    assert one_h == pytest.approx(14 * 1.5 + 16)
    assert two_h == pytest.approx(one_h + 14 * 1.2)
    assert two_w == pytest.approx(one_w)


class _FixedFont:
    """Ten units per glyph."""

    def getlength(self, text: str) -> float:
        return 10.0 * len(text)


def test_wrap_text_greedy() -> None:
    font = _FixedFont()
    assert wrap_text("abcdef", 25, font) == ["ab", "cd", "ef"]
    assert wrap_text("ab\ncd", 100, font) == ["ab", "cd"]
    assert wrap_text("abc", 5, font) == ["a", "b", "c"]
    assert wrap_text("", 50, font) == [""]
