"""Tests for easing curves, tick sources and the animation engine."""
from __future__ import annotations

import itertools
import logging
import unittest
from unittest.mock import patch

import pytest

from mindcanvas.animation import (
    EASINGS,
    AnimationConfig,
    AnimationEngine,
    AnimationHandle,
    ManualTickSource,
    RealtimeTickSource,
    get_easing,
)
from mindcanvas.model import Node


def _node(**kw) -> Node:
    return Node(id=kw.pop("id", "n"), label="n", x=0.0, y=0.0, width=100.0, height=40.0, **kw)


@pytest.mark.parametrize("name", sorted(EASINGS))
def test_easings_hit_endpoints(name: str) -> None:
    fn = EASINGS[name]
    assert fn(0.0) == pytest.approx(0.0, abs=1e-6)
    assert fn(1.0) == pytest.approx(1.0, abs=1e-6)


def test_get_easing_lookup() -> None:
    assert get_easing("ease-out")(0.5) == pytest.approx(0.75)
    assert get_easing("nonsense")(0.3) == 0.3
    custom = lambda t: t ** 3  # noqa: E731
    assert get_easing(custom) is custom


def test_manual_tick_source_runs_frames_once() -> None:
    ticker = ManualTickSource()
    seen = []
    handle = ticker.request_frame(seen.append)
    ticker.request_frame(lambda ts: ticker.request_frame(seen.append))
    ticker.cancel_frame(handle)
    assert ticker.advance(16) == 1
    assert seen == []
    assert ticker.pending == 1
    ticker.advance(16)
    assert seen == [32]


def test_realtime_tick_source_runs_until_idle() -> None:
    """Frames are paced by sleep and the loop stops once nothing is pending."""
    ticker = RealtimeTickSource(fps=50)
    seen = []
    ticker.request_frame(lambda ts: ticker.request_frame(seen.append))
    with patch("mindcanvas.animation.ticker.time.sleep") as sleep:
        assert ticker.run_until_idle() == 2
    assert sleep.call_count == 2
    sleep.assert_called_with(0.02)
    assert len(seen) == 1 and seen[0] > 0
    assert ticker.pending == 0


def test_realtime_tick_source_gives_up_after_timeout(caplog) -> None:
    ticker = RealtimeTickSource()

    def again(ts):
        ticker.request_frame(again)

    ticker.request_frame(again)
    clock = itertools.count(0.0, 0.5)
    with patch("mindcanvas.animation.ticker.time.sleep"), \
            patch("mindcanvas.animation.ticker.time.monotonic", side_effect=lambda: next(clock)):
        with caplog.at_level(logging.WARNING, logger="mindcanvas.animation.ticker"):
            frames = ticker.run_until_idle(timeout=1.0)
    assert frames == 1
    assert ticker.pending == 1
    assert "still busy" in caplog.text


class TestAnimationEngine(unittest.TestCase):
    def setUp(self):
        self.ticker = ManualTickSource()
        self.frames = []
        self.engine = AnimationEngine(self.ticker, AnimationConfig(duration=100, easing="linear"),
                                      on_frame=lambda: self.frames.append(self.ticker.now()))

    def test_interpolates_and_resolves(self):
        node = _node()
        handle = self.engine.animate(node, {"x": 100.0, "opacity": 0.0})
        self.assertFalse(handle.done)
        self.ticker.advance(50)
        self.assertAlmostEqual(node.x, 50.0)
        self.assertAlmostEqual(node.opacity, 0.5)
        self.ticker.advance(60)
        self.assertEqual(node.x, 100.0)
        self.assertTrue(handle.done)
        self.assertEqual(self.engine.active_count, 0)
        self.assertFalse(self.engine.is_running)
        self.assertEqual(self.frames, [50, 110])

    def test_zero_duration_resolves_on_first_tick(self):
        node = _node()
        handle = self.engine.animate(node, {"opacity": 0.0}, duration=0)
        self.assertEqual(node.opacity, 1.0)
        self.ticker.advance(0)
        self.assertTrue(handle.done)
        self.assertEqual(node.opacity, 0.0)

    def test_delay_holds_start_value(self):
        node = _node()
        handle = self.engine.animate(node, {"x": 100.0}, delay=50)
        self.ticker.advance(25)
        self.assertEqual(node.x, 0.0)
        self.ticker.run_until_idle(step=25)
        self.assertTrue(handle.done)
        self.assertEqual(node.x, 100.0)

    def test_missing_start_value_jumps_to_target(self):
        node = Node(id="bare")
        self.engine.animate(node, {"x": 10.0})
        self.ticker.advance(1)
        self.assertEqual(node.x, 10.0)

    def test_rejects_unknown_fields(self):
        with self.assertRaises(ValueError):
            self.engine.animate(_node(), {"label": 1})

    def test_cancel_leaves_handle_abandoned(self):
        node = _node()
        done = []
        handle = self.engine.animate(node, {"x": 100.0})
        handle.add_done_callback(done.append)
        self.ticker.advance(50)
        self.assertEqual(self.engine.cancel_node_animations("n"), 1)
        self.ticker.run_until_idle()
        self.assertTrue(handle.abandoned)
        self.assertFalse(handle.done)
        self.assertEqual(done, [])
        self.assertAlmostEqual(node.x, 50.0)
        self.assertEqual(self.ticker.pending, 0)

    def test_cancel_all(self):
        handles = [self.engine.animate(_node(id=str(i)), {"y": 5.0}) for i in range(3)]
        self.assertEqual(self.engine.cancel_all(), 3)
        self.assertTrue(all(h.abandoned for h in handles))
        self.assertFalse(self.engine.is_running)

    def test_disabled_applies_immediately(self):
        self.engine.update_config(enabled=False)
        node = _node()
        handle = self.engine.animate(node, {"x": 42.0})
        self.assertTrue(handle.done)
        self.assertEqual(node.x, 42.0)
        self.assertEqual(self.ticker.pending, 0)

    def test_enter_presets(self):
        for kind, field, start in (("fade", "opacity", 0.0), ("scale", "width", 0.0),
                                   ("slide", "x", -100.0), ("bounce", "y", -50.0)):
            node = _node()
            target = getattr(node, field) if field != "opacity" else 1.0
            handle = self.engine.animate_enter(node, kind)
            self.assertEqual(getattr(node, field), start, kind)
            self.ticker.run_until_idle()
            self.assertTrue(handle.done, kind)
            self.assertAlmostEqual(getattr(node, field), target)

    def test_exit_presets(self):
        node = _node()
        self.engine.animate_exit(node, "slide")
        self.ticker.run_until_idle()
        self.assertEqual(node.x, 100.0)
        node = _node()
        self.engine.animate_exit(node, "scale")
        self.ticker.run_until_idle()
        self.assertEqual((node.width, node.height), (0.0, 0.0))

    def test_animate_tree_staggers(self):
        self.engine.update_config(stagger=40)
        root = Node.from_dict({"id": "r", "label": "R", "children": [{"id": "a"}, {"id": "b"}]})
        handle = self.engine.animate_tree(root)
        self.ticker.advance(100)
        self.assertEqual(root.opacity, 1.0)
        self.assertLess(root.children[1].opacity, 1.0)
        self.ticker.run_until_idle()
        self.assertTrue(handle.done)

    def test_animate_move(self):
        node = _node()
        self.engine.animate_move(node, 30.0, -30.0)
        self.ticker.run_until_idle()
        self.assertEqual((node.x, node.y), (30.0, -30.0))


def test_gather_resolves_after_all() -> None:
    a, b = AnimationHandle(), AnimationHandle()
    combined = AnimationHandle.gather([a, b])
    a._resolve()
    assert not combined.done
    b._resolve()
    assert combined.done
    assert AnimationHandle.gather([]).done


def test_gather_abandoned_if_any_abandoned() -> None:
    a, b = AnimationHandle(), AnimationHandle()
    combined = AnimationHandle.gather([a, b])
    a._abandon()
    b._resolve()
    assert combined.abandoned
    assert AnimationHandle.gather([AnimationHandle.resolved(), a]).abandoned


def test_handle_resolves_once() -> None:
    handle = AnimationHandle()
    calls = []
    handle.add_done_callback(calls.append)
    handle._resolve()
    handle._resolve()
    handle._abandon()
    handle.add_done_callback(calls.append)
    assert calls == [handle, handle]
    assert handle.done
