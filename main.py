#!/usr/bin/env python3
"""
Root entry: load a tree (JSON file or built-in sample) -> layout -> export
(png/jpg/svg/json/markdown/xmind) under the output directory.
"""
from __future__ import annotations

import argparse
import json
import logging
import re
import sys
import time
from pathlib import Path

_ROOT = Path(__file__).resolve().parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from mindcanvas.config import load_env, get_canvas_size, get_layout_type, get_log_level, get_output_dir, get_theme_id, parse_size
from mindcanvas.core import MindMap
from mindcanvas.errors import MindCanvasError
from mindcanvas.export import EXPORT_FORMATS, EXTENSIONS, ExportConfig
from mindcanvas.layout import LAYOUT_TYPES, LayoutConfig
from mindcanvas.model import ThemeRegistry, theme_from_json
from mindcanvas.samples import SAMPLES, get_sample

logger = logging.getLogger(__name__)


def _safe_name(name: str) -> str:
    """Turn a root label into a filesystem-safe file stem."""
    s = re.sub(r'[/\\:*?"<>|]', "", name)
    s = s.strip() or "mindmap"
    s = re.sub(r"\s+", "_", s)
    return s[:200]


def _load_tree(args: argparse.Namespace) -> dict:
    if args.tree:
        path = Path(args.tree)
        if not path.is_file():
            raise FileNotFoundError(f"Tree file not found: {path}")
        return json.loads(path.read_text(encoding="utf-8"))
    return get_sample(args.sample)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Lay out a mind map tree and export it (png, jpg, svg, json, markdown, xmind)."
    )
    parser.add_argument("tree", nargs="?", default=None, help="Tree JSON file ({id, label, children})")
    parser.add_argument(
        "--sample",
        choices=sorted(SAMPLES),
        default="knowledge",
        help="Built-in sample tree used when no TREE file is given",
    )
    parser.add_argument("--layout", choices=LAYOUT_TYPES, default=None, help="Layout strategy (env MINDCANVAS_LAYOUT)")
    parser.add_argument("--theme", default=None, help="Theme id (env MINDCANVAS_THEME)")
    parser.add_argument("--theme-file", default=None, help="Register a theme from a JSON file and use it")
    parser.add_argument("--format", choices=EXPORT_FORMATS, default="png", help="Export format")
    parser.add_argument("--out", default=None, help="Output file (default: output/<root label>.<ext>)")
    parser.add_argument("--scale", type=float, default=2.0, help="Image export density (pixels per unit)")
    parser.add_argument("--padding", type=float, default=50, help="Padding around exported content")
    parser.add_argument("--size", default=None, help="Canvas size WxH (env MINDCANVAS_CANVAS_SIZE)")
    parser.add_argument("--list-themes", action="store_true", help="Print available theme ids and exit")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    load_env()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else get_log_level(),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.list_themes:
        for theme_id in ThemeRegistry().ids():
            print(theme_id)
        return 0

    try:
        size = parse_size(args.size) if args.size else get_canvas_size()
    except ValueError as e:
        logger.error("%s", e)
        return 1

    t0 = time.perf_counter()
    try:
        tree = _load_tree(args)
        mindmap = MindMap(size, layout=LayoutConfig(type=args.layout or get_layout_type()))
        if args.theme_file:
            theme = theme_from_json(Path(args.theme_file).read_text(encoding="utf-8"))
            mindmap.register_theme(theme.name, theme)
            mindmap.set_theme(theme)
        elif not mindmap.set_theme(args.theme or get_theme_id()):
            logger.error("Unknown theme '%s'. Available: %s", args.theme or get_theme_id(), ", ".join(mindmap.themes.ids()))
            return 1
        mindmap.set_data(tree)

        out_path = Path(args.out) if args.out else get_output_dir() / f"{_safe_name(mindmap.root.label)}{EXTENSIONS[args.format]}"
        config = ExportConfig(format=args.format, scale=args.scale, padding=args.padding)
        written = mindmap.export_to_file(config, out_path)
    except (OSError, ValueError, ImportError, MindCanvasError) as e:
        logger.error("%s", e)
        return 1

    logger.info("Exported %s in %.2fs", written, time.perf_counter() - t0)
    return 0


if __name__ == "__main__":
    sys.exit(main())
