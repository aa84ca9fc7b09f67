"""
Load .env from project root; expose MINDCANVAS_* settings (theme, layout,
font, output dir, log level, canvas size).
Call load_env() before using in main or other modules.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_THEME = "default"
DEFAULT_LAYOUT = "mindmap"
DEFAULT_CANVAS_SIZE = (1280, 800)


def _project_root() -> Path:
    """Project root (directory containing main.py / mindcanvas/)."""
    p = Path(__file__).resolve()
    # mindcanvas/config/config.py -> two levels up
    for _ in range(3):
        p = p.parent
        if (p / "main.py").is_file() or (p / "pyproject.toml").is_file():
            return p
    return Path.cwd()


def load_env() -> None:
    """Load env vars from project root .env if present."""
    root = _project_root()
    env_file = root / ".env"
    if not env_file.is_file():
        return
    for line in env_file.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        k, _, v = line.partition("=")
        k, v = k.strip(), v.strip().strip("'\"")
        if k and v:
            os.environ.setdefault(k, v)


def get_theme_id() -> str:
    """Theme used when none is given (MINDCANVAS_THEME, default 'default')."""
    load_env()
    return os.environ.get("MINDCANVAS_THEME", DEFAULT_THEME)


def get_layout_type() -> str:
    """Layout strategy used when none is given (MINDCANVAS_LAYOUT)."""
    load_env()
    return os.environ.get("MINDCANVAS_LAYOUT", DEFAULT_LAYOUT)


def get_font_path() -> str | None:
    """Explicit TrueType font for labels (MINDCANVAS_FONT); None means search."""
    load_env()
    return os.environ.get("MINDCANVAS_FONT") or None


def get_output_dir() -> Path:
    """Export root; default <project_root>/output."""
    load_env()
    out = os.environ.get("MINDCANVAS_OUTPUT_DIR")
    if out:
        return Path(out)
    return _project_root() / "output"


def get_log_level() -> int:
    """Logging level name from MINDCANVAS_LOG_LEVEL (default INFO)."""
    load_env()
    name = os.environ.get("MINDCANVAS_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def get_canvas_size() -> tuple[int, int]:
    """Canvas size 'WxH' from MINDCANVAS_CANVAS_SIZE; falls back to 1280x800."""
    load_env()
    raw = os.environ.get("MINDCANVAS_CANVAS_SIZE")
    if not raw:
        return DEFAULT_CANVAS_SIZE
    try:
        return parse_size(raw)
    except ValueError:
        logger.warning("Ignoring invalid MINDCANVAS_CANVAS_SIZE=%r", raw)
        return DEFAULT_CANVAS_SIZE


def parse_size(raw: str) -> tuple[int, int]:
    """Parse 'WxH' into a pair of positive ints."""
    w, sep, h = raw.lower().partition("x")
    if not sep:
        raise ValueError(f"Expected WxH, got {raw!r}")
    width, height = int(w), int(h)
    if width <= 0 or height <= 0:
        raise ValueError(f"Size must be positive, got {raw!r}")
    return width, height
