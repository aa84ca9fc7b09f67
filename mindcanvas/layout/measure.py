"""
Text measurement with Pillow fonts; node sizing and label wrapping.
Needs Pillow >= 10.1 for sized load_default().
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from ..config import get_font_path
from ..model.style import DEFAULT_NODE_STYLE, NodeStyle

logger = logging.getLogger(__name__)

MIN_NODE_WIDTH = 60
MIN_NODE_HEIGHT = 30
LINE_HEIGHT = 1.2

_FALLBACK_FONTS = {
    False: ["DejaVuSans.ttf", "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
            "/System/Library/Fonts/Supplemental/Arial.ttf", "LiberationSans-Regular.ttf"],
    True: ["DejaVuSans-Bold.ttf", "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
           "/System/Library/Fonts/Supplemental/Arial Bold.ttf", "LiberationSans-Bold.ttf"],
}


def _is_bold(weight: Any) -> bool:
    if weight is None:
        return False
    if isinstance(weight, (int, float)):
        return weight >= 600
    return str(weight).lower() in ("bold", "bolder", "600", "700", "800", "900")


def _family_candidates(family: str, bold: bool) -> list[str]:
    out = []
    for name in (family or "").split(","):
        name = name.strip().strip("'\"")
        if not name or name in ("sans-serif", "serif", "monospace"):
            continue
        out.append(f"{name} Bold.ttf" if bold else f"{name}.ttf")
        out.append(f"{name.replace(' ', '')}-Bold.ttf" if bold else f"{name.replace(' ', '')}.ttf")
    return out + _FALLBACK_FONTS[bold]


@lru_cache(maxsize=128)
def _load_font(size: int, family: str, bold: bool, override: str | None) -> Any:
    from PIL import ImageFont

    candidates = ([override] if override else []) + _family_candidates(family, bold)
    for try_path in candidates:
        try:
            return ImageFont.truetype(try_path, size)
        except (OSError, IOError):
            continue
    logger.debug("No TrueType font for %r, using Pillow default", family)
    return ImageFont.load_default(size=size)


def get_font(font_size: float, font_family: str = "Arial, sans-serif", font_weight: Any = "normal") -> Any:
    """Pillow font for the given CSS-like family/weight at font_size pixels."""
    size = max(1, int(round(font_size)))
    return _load_font(size, font_family or "", _is_bold(font_weight), get_font_path())


def measure_text(
    text: str,
    font_size: float = 14,
    font_family: str = "Arial, sans-serif",
    font_weight: Any = "normal",
) -> float:
    """Advance width of a single line in world units."""
    if not text:
        return 0.0
    return float(get_font(font_size, font_family, font_weight).getlength(text))


def style_font(style: NodeStyle) -> Any:
    style = DEFAULT_NODE_STYLE.merged(style)
    return get_font(style.font_size, style.font_family, style.font_weight)


def calculate_node_size(
    label: str,
    style: NodeStyle,
    min_width: float = MIN_NODE_WIDTH,
    min_height: float = MIN_NODE_HEIGHT,
) -> tuple[float, float]:
    """(width, height) from label extent plus padding, clamped to the minimums."""
    style = DEFAULT_NODE_STYLE.merged(style)
    top, right, bottom, left = style.padding_box
    lines = (label or "").split("\n")
    text_width = max(measure_text(line, style.font_size, style.font_family, style.font_weight) for line in lines)
    text_height = style.font_size * 1.5 + style.font_size * LINE_HEIGHT * (len(lines) - 1)
    return (
        max(text_width + left + right, min_width),
        max(text_height + top + bottom, min_height),
    )


def wrap_text(text: str, max_width: float, font: Any) -> list[str]:
    """
    Greedy per-glyph wrap: extend the line until it would exceed max_width.
    A glyph wider than max_width still gets a line of its own.
    """
    lines: list[str] = []
    for paragraph in (text or "").split("\n"):
        line = ""
        for ch in paragraph:
            candidate = line + ch
            if line and font.getlength(candidate) > max_width:
                lines.append(line)
                line = ch
            else:
                line = candidate
        lines.append(line)
    return lines
