"""Config: load .env, expose MINDCANVAS_THEME, MINDCANVAS_LAYOUT, MINDCANVAS_FONT, etc."""
from .config import (
    load_env,
    get_theme_id,
    get_layout_type,
    get_font_path,
    get_output_dir,
    get_log_level,
    get_canvas_size,
    parse_size,
)

__all__ = [
    "load_env",
    "get_theme_id",
    "get_layout_type",
    "get_font_path",
    "get_output_dir",
    "get_log_level",
    "get_canvas_size",
    "parse_size",
]
