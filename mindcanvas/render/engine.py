"""
Render engine: draws a laid-out tree onto a Pillow surface.

Edges are drawn first, then nodes, both depth-first, skipping anything
below a collapsed node. Line widths are in logical pixels so they stay
constant across zoom levels; shapes and text scale with the view.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from PIL import Image

from ..layout.engine import content_bounds
from ..layout.measure import LINE_HEIGHT, get_font, wrap_text
from ..model.node import Node, iter_visible
from ..model.style import EdgeStyle, NodeStyle
from ..model.theme import Theme, resolve_edge_style, resolve_node_style
from ..model.transform import Transform
from .canvas import Painter, Viewport
from .geometry import (
    INDICATOR_SIZE,
    SELECTION_PADDING,
    arrow_head,
    edge_endpoints,
    edge_path,
    indicator_center,
    node_outline,
)

logger = logging.getLogger(__name__)

SELECTION_COLOR = "#4a90e2"
INDICATOR_COLLAPSED = "#999"
INDICATOR_EXPANDED = "#4a90e2"
SUPERSAMPLE = 2


@dataclass(frozen=True)
class RenderConfig:
    pixel_ratio: float = 1.0
    antialias: bool = True
    background_color: Optional[str] = None


class RenderEngine:
    def __init__(self, surface: Image.Image, transform: Transform | None = None,
                 config: RenderConfig | None = None) -> None:
        self.surface = surface
        self.transform = transform or Transform()
        self.config = config or RenderConfig()
        self._background: Optional[str] = self.config.background_color

    @property
    def logical_size(self) -> tuple[float, float]:
        """Surface size in logical (pre pixel-ratio) pixels."""
        w, h = self.surface.size
        return (w / self.config.pixel_ratio, h / self.config.pixel_ratio)

    def set_background_color(self, color: Optional[str]) -> None:
        self._background = color

    def resize(self, surface: Image.Image) -> None:
        self.surface = surface

    def render(self, root: Optional[Node], theme: Theme | None = None) -> Image.Image:
        """Clear the surface and draw the tree under the current transform."""
        ss = SUPERSAMPLE if self.config.antialias else 1
        density = self.config.pixel_ratio * ss
        lw, lh = self.logical_size
        t = self.transform
        viewport = Viewport(
            origin_x=(lw / 2 + t.offset_x) * density,
            origin_y=(lh / 2 + t.offset_y) * density,
            scale=t.scale * density,
            density=density,
        )
        w, h = self.surface.size
        canvas = Image.new("RGBA", (w * ss, h * ss), (0, 0, 0, 0))
        painter = Painter(canvas, viewport)
        background = self._background if self._background is not None else (theme.background_color if theme else None)
        painter.clear(background)
        if root is not None:
            self._draw_tree(painter, root, theme, decorations=True)
        if ss > 1:
            canvas = canvas.resize((w, h), Image.LANCZOS)
        self.surface.paste(canvas.convert(self.surface.mode) if self.surface.mode != "RGBA" else canvas, (0, 0))
        return self.surface

    def export_image(
        self,
        root: Node,
        theme: Theme | None = None,
        *,
        scale: float = 2.0,
        padding: float = 50,
        background: Optional[str] = None,
    ) -> Image.Image:
        """
        Off-screen RGBA image of the whole visible tree at `scale` device pixels
        per world unit, independent of the live transform. Selection and hover
        decorations are omitted.
        """
        bounds = content_bounds(root)
        if bounds is None:
            bounds = (0.0, 0.0, 0.0, 0.0)
        left, top, right, bottom = bounds
        ss = SUPERSAMPLE if self.config.antialias else 1
        density = scale * ss
        width = max(1, int(round((right - left + 2 * padding) * scale)))
        height = max(1, int(round((bottom - top + 2 * padding) * scale)))
        viewport = Viewport(
            origin_x=(padding - left) * density,
            origin_y=(padding - top) * density,
            scale=density,
            density=density,
        )
        canvas = Image.new("RGBA", (width * ss, height * ss), (0, 0, 0, 0))
        painter = Painter(canvas, viewport)
        painter.clear(background if background is not None else (theme.background_color if theme else "#fff"))
        self._draw_tree(painter, root, theme, decorations=False)
        if ss > 1:
            canvas = canvas.resize((width, height), Image.LANCZOS)
        logger.debug("Exported image %dx%d", width, height)
        return canvas

    # drawing

    def _draw_tree(self, painter: Painter, root: Node, theme: Theme | None, decorations: bool) -> None:
        edge_style = resolve_edge_style(theme)
        for node, _ in iter_visible(root):
            if not node.has_geometry:
                continue
            for child in node.visible_children:
                if child.has_geometry:
                    self._draw_edge(painter, node, child, edge_style)
        for node, depth in iter_visible(root):
            if node.has_geometry and node.width > 0 and node.height > 0:
                style = resolve_node_style(node.style, depth, theme)
                self._draw_node(painter, node, style, decorations)

    def _draw_edge(self, painter: Painter, parent: Node, child: Node, style: EdgeStyle) -> None:
        start, end = edge_endpoints(parent, child)
        path = edge_path(style.curve or "bezier", start, end)
        painter.stroke(path, style.color, style.width or 2, line_style=style.line_style or "solid")
        if style.arrow:
            size = (style.arrow_size or 8) / max(painter.viewport.scale / painter.viewport.density, 1e-6)
            painter.fill_polygon(arrow_head(path, size), style.color)

    def _draw_node(self, painter: Painter, node: Node, style: NodeStyle, decorations: bool) -> None:
        target = painter.layer() if node.opacity < 1.0 else painter
        shape = style.shape or "rounded"
        radius = style.border_radius if style.border_radius is not None else 4
        outline = node_outline(node, shape, radius)

        if decorations and node.selected:
            ring = node_outline(node, shape, radius, SELECTION_PADDING)
            target.stroke(ring, SELECTION_COLOR, 3, closed=True, line_style="dashed")
        if decorations and node.hovered:
            target.shadow(
                outline,
                style.shadow_color,
                style.shadow_blur or 0,
                (style.shadow_offset_x or 0, style.shadow_offset_y or 0),
            )

        target.fill_polygon(outline, style.background_color)
        target.stroke(outline, style.border_color, style.border_width or 0, closed=True,
                      line_style=style.border_style or "solid")
        self._draw_label(target, node, style)
        if node.children:
            self._draw_indicator(target, node)

        if target is not painter:
            painter.composite(target, node.opacity)

    def _draw_label(self, painter: Painter, node: Node, style: NodeStyle) -> None:
        if not node.label:
            return
        px_scale = painter.viewport.scale
        font = get_font(style.font_size * px_scale, style.font_family, style.font_weight)
        lines = wrap_text(node.label, max(1.0, (node.width - 20) * px_scale), font)
        painter.text_lines(lines, (node.x, node.y), font, style.font_size * LINE_HEIGHT, style.color)

    def _draw_indicator(self, painter: Painter, node: Node) -> None:
        cx, cy = indicator_center(node)
        r = INDICATOR_SIZE / 2
        arm = 3
        if node.collapsed:
            painter.circle((cx, cy), r, fill=INDICATOR_COLLAPSED)
            painter.stroke([(cx - arm, cy), (cx + arm, cy)], "#fff", 2)
            painter.stroke([(cx, cy - arm), (cx, cy + arm)], "#fff", 2)
        else:
            painter.circle((cx, cy), r, fill="#fff", outline=INDICATOR_EXPANDED, width=1.5)
            painter.stroke([(cx - arm, cy), (cx + arm, cy)], INDICATOR_EXPANDED, 2)
