"""Tests for mindcanvas.config."""
from __future__ import annotations

import logging
from pathlib import Path

import pytest


def test_get_theme_id_default() -> None:
    """Without MINDCANVAS_THEME, the default theme is used."""
    from mindcanvas.config import get_theme_id

    assert get_theme_id() == "default"


def test_get_theme_id_from_env(monkeypatch) -> None:
    """With MINDCANVAS_THEME set, returns that value."""
    monkeypatch.setenv("MINDCANVAS_THEME", "dark")
    from mindcanvas.config import get_theme_id

    assert get_theme_id() == "dark"


def test_get_layout_type_default_and_env(monkeypatch) -> None:
    """Layout defaults to mindmap and follows MINDCANVAS_LAYOUT."""
    from mindcanvas.config import get_layout_type

    assert get_layout_type() == "mindmap"
    monkeypatch.setenv("MINDCANVAS_LAYOUT", "radial")
    assert get_layout_type() == "radial"


def test_get_font_path_empty_means_search(monkeypatch) -> None:
    """An empty MINDCANVAS_FONT is treated as unset."""
    from mindcanvas.config import get_font_path

    assert get_font_path() is None
    monkeypatch.setenv("MINDCANVAS_FONT", "")
    assert get_font_path() is None
    monkeypatch.setenv("MINDCANVAS_FONT", "/fonts/Custom.ttf")
    assert get_font_path() == "/fonts/Custom.ttf"


def test_get_output_dir_default() -> None:
    """Without MINDCANVAS_OUTPUT_DIR, output dir is <project>/output."""
    from mindcanvas.config import get_output_dir

    assert get_output_dir().name == "output"


def test_get_output_dir_from_env(monkeypatch, tmp_path: Path) -> None:
    """With MINDCANVAS_OUTPUT_DIR set, get_output_dir returns that path."""
    monkeypatch.setenv("MINDCANVAS_OUTPUT_DIR", str(tmp_path / "exports"))
    from mindcanvas.config import get_output_dir

    assert get_output_dir() == tmp_path / "exports"


def test_get_log_level(monkeypatch) -> None:
    """Level names map to logging constants; junk falls back to INFO."""
    from mindcanvas.config import get_log_level

    assert get_log_level() == logging.INFO
    monkeypatch.setenv("MINDCANVAS_LOG_LEVEL", "debug")
    assert get_log_level() == logging.DEBUG
    monkeypatch.setenv("MINDCANVAS_LOG_LEVEL", "LOUD")
    assert get_log_level() == logging.INFO


def test_get_canvas_size(monkeypatch) -> None:
    """Canvas size parses WxH and ignores invalid values."""
    from mindcanvas.config import get_canvas_size

    assert get_canvas_size() == (1280, 800)
    monkeypatch.setenv("MINDCANVAS_CANVAS_SIZE", "640x480")
    assert get_canvas_size() == (640, 480)
    monkeypatch.setenv("MINDCANVAS_CANVAS_SIZE", "wide")
    assert get_canvas_size() == (1280, 800)


@pytest.mark.parametrize("raw", ["100", "0x10", "-5x10", "axb"])
def test_parse_size_rejects(raw: str) -> None:
    """parse_size raises ValueError on malformed or non-positive sizes."""
    from mindcanvas.config import parse_size

    with pytest.raises(ValueError):
        parse_size(raw)


def test_parse_size_accepts_uppercase_x() -> None:
    from mindcanvas.config import parse_size

    assert parse_size("800X600") == (800, 600)
