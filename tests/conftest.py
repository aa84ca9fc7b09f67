"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import pytest


@pytest.fixture
def small_tree() -> dict:
    """Root with three children; the middle one has two children of its own."""
    return {
        "id": "root",
        "label": "Root",
        "children": [
            {"id": "a", "label": "Alpha"},
            {"id": "b", "label": "Beta", "children": [
                {"id": "b1", "label": "Beta one"},
                {"id": "b2", "label": "Beta two"},
            ]},
            {"id": "c", "label": "Gamma"},
        ],
    }


@pytest.fixture
def pair_tree() -> dict:
    """Root with two leaf children A and B."""
    return {
        "id": "root",
        "label": "Root",
        "children": [{"id": "A", "label": "A"}, {"id": "B", "label": "B"}],
    }


@pytest.fixture
def ticker():
    from mindcanvas.animation import ManualTickSource

    return ManualTickSource()


@pytest.fixture
def mindmap(small_tree, ticker):
    """Headless MindMap on a small surface, animations off."""
    from mindcanvas import AnimationConfig, MindMap

    return MindMap((400, 300), data=small_tree, ticker=ticker, animation=AnimationConfig(enabled=False))


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch):
    """Avoid loading project .env in tests unless explicitly set."""
    for key in (
        "MINDCANVAS_THEME",
        "MINDCANVAS_LAYOUT",
        "MINDCANVAS_FONT",
        "MINDCANVAS_OUTPUT_DIR",
        "MINDCANVAS_LOG_LEVEL",
        "MINDCANVAS_CANVAS_SIZE",
    ):
        monkeypatch.delenv(key, raising=False)
