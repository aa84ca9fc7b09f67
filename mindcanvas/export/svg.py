"""
Render a laid-out tree to an SVG document, using the same shape, edge and
style resolution as the raster renderer.
"""
from __future__ import annotations

import html
from pathlib import Path
from typing import Optional

from ..layout.engine import content_bounds
from ..layout.measure import LINE_HEIGHT, get_font, wrap_text
from ..model.node import Node, iter_visible
from ..model.style import EdgeStyle, NodeStyle
from ..model.theme import Theme, resolve_edge_style, resolve_node_style
from ..render.geometry import (
    INDICATOR_SIZE,
    Point,
    arrow_head,
    edge_endpoints,
    edge_path,
    indicator_center,
    node_outline,
)

_DASHES = {"dashed": "5 5", "dotted": "2 2"}


def _svg_esc(s: str) -> str:
    return html.escape(str(s), quote=True)


def _fmt(v: float) -> str:
    return f"{v:.2f}".rstrip("0").rstrip(".")


def _points(pts: list[Point]) -> str:
    return " ".join(f"{_fmt(x)},{_fmt(y)}" for x, y in pts)


def _paint(color: Optional[str]) -> str:
    if not color or color.strip().lower() == "transparent":
        return "none"
    return _svg_esc(color)


def _edge_svg(parent: Node, child: Node, style: EdgeStyle) -> str:
    start, end = edge_endpoints(parent, child)
    curve = style.curve or "bezier"
    dash = _DASHES.get(style.line_style or "solid")
    dash_attr = f' stroke-dasharray="{dash}"' if dash else ""
    stroke = f'fill="none" stroke="{_paint(style.color)}" stroke-width="{_fmt(style.width or 2)}"{dash_attr}'
    if curve == "bezier":
        dx = end[0] - start[0]
        d = (f"M{_fmt(start[0])},{_fmt(start[1])} "
             f"C{_fmt(start[0] + dx / 2)},{_fmt(start[1])} {_fmt(end[0] - dx / 2)},{_fmt(end[1])} "
             f"{_fmt(end[0])},{_fmt(end[1])}")
        out = f'<path d="{d}" {stroke}/>'
    else:
        out = f'<polyline points="{_points(edge_path(curve, start, end))}" {stroke}/>'
    if style.arrow:
        head = arrow_head(edge_path(curve, start, end), style.arrow_size or 8)
        out += f'<polygon points="{_points(head)}" fill="{_paint(style.color)}"/>'
    return out


def _node_svg(node: Node, style: NodeStyle) -> str:
    shape = style.shape or "rounded"
    radius = style.border_radius if style.border_radius is not None else 4
    dash = _DASHES.get(style.border_style or "solid")
    paint = (f'fill="{_paint(style.background_color)}" stroke="{_paint(style.border_color)}" '
             f'stroke-width="{_fmt(style.border_width or 0)}"' + (f' stroke-dasharray="{dash}"' if dash else ""))
    x, y, w, h = node.x - node.width / 2, node.y - node.height / 2, node.width, node.height
    if shape in ("rect", "rounded"):
        rx = 0 if shape == "rect" else min(radius, w / 2, h / 2)
        body = f'<rect x="{_fmt(x)}" y="{_fmt(y)}" width="{_fmt(w)}" height="{_fmt(h)}" rx="{_fmt(rx)}" {paint}/>'
    elif shape == "circle":
        body = f'<circle cx="{_fmt(node.x)}" cy="{_fmt(node.y)}" r="{_fmt(min(w, h) / 2)}" {paint}/>'
    elif shape == "ellipse":
        body = f'<ellipse cx="{_fmt(node.x)}" cy="{_fmt(node.y)}" rx="{_fmt(w / 2)}" ry="{_fmt(h / 2)}" {paint}/>'
    else:
        body = f'<polygon points="{_points(node_outline(node, shape, radius))}" {paint}/>'

    parts = [body]
    if node.label:
        font = get_font(style.font_size, style.font_family, style.font_weight)
        lines = wrap_text(node.label, max(1.0, w - 20), font)
        step = style.font_size * LINE_HEIGHT
        top = node.y - step * len(lines) / 2 + step / 2
        for i, line in enumerate(lines):
            parts.append(
                f'<text x="{_fmt(node.x)}" y="{_fmt(top + i * step)}" text-anchor="middle" '
                f'dominant-baseline="central" font-family="{_svg_esc(style.font_family)}" '
                f'font-size="{_fmt(style.font_size)}" font-weight="{_svg_esc(style.font_weight or "normal")}" '
                f'fill="{_paint(style.color)}">{_svg_esc(line)}</text>'
            )
    if node.children:
        cx, cy = indicator_center(node)
        r = INDICATOR_SIZE / 2
        if node.collapsed:
            parts.append(f'<circle cx="{_fmt(cx)}" cy="{_fmt(cy)}" r="{_fmt(r)}" fill="#999"/>')
            parts.append(f'<path d="M{_fmt(cx - 3)},{_fmt(cy)} h6 M{_fmt(cx)},{_fmt(cy - 3)} v6" stroke="#fff" stroke-width="2"/>')
        else:
            parts.append(f'<circle cx="{_fmt(cx)}" cy="{_fmt(cy)}" r="{_fmt(r)}" fill="#fff" stroke="#4a90e2" stroke-width="1.5"/>')
            parts.append(f'<path d="M{_fmt(cx - 3)},{_fmt(cy)} h6" stroke="#4a90e2" stroke-width="2"/>')
    opacity = f' opacity="{_fmt(node.opacity)}"' if node.opacity < 1 else ""
    return f'<g class="node" data-id="{_svg_esc(node.id)}"{opacity}>' + "".join(parts) + "</g>"


def build_svg(root: Node, theme: Theme | None = None, *, padding: float = 50,
              background: Optional[str] = None) -> str:
    """SVG document sized to the visible content plus padding."""
    left, top, right, bottom = content_bounds(root) or (0.0, 0.0, 0.0, 0.0)
    vx, vy = left - padding, top - padding
    vw, vh = right - left + 2 * padding, bottom - top + 2 * padding
    bg = background if background is not None else (theme.background_color if theme else "#fff")
    edge_style = resolve_edge_style(theme)

    edges = []
    for node, _ in iter_visible(root):
        if not node.has_geometry:
            continue
        for child in node.visible_children:
            if child.has_geometry:
                edges.append(_edge_svg(node, child, edge_style))
    nodes = [
        _node_svg(node, resolve_node_style(node.style, depth, theme))
        for node, depth in iter_visible(root)
        if node.has_geometry and node.width > 0 and node.height > 0
    ]
    body_edges = "\n    ".join(edges)
    body_nodes = "\n    ".join(nodes)
    return f'''<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" viewBox="{_fmt(vx)} {_fmt(vy)} {_fmt(vw)} {_fmt(vh)}" width="{_fmt(vw)}" height="{_fmt(vh)}">
  <rect x="{_fmt(vx)}" y="{_fmt(vy)}" width="{_fmt(vw)}" height="{_fmt(vh)}" fill="{_paint(bg)}"/>
  <g id="edges">
    {body_edges}
  </g>
  <g id="nodes">
    {body_nodes}
  </g>
</svg>
'''


def render_to_svg(root: Node, out_path: Path | str, theme: Theme | None = None, **kwargs) -> Path:
    """Write build_svg() output to out_path."""
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(build_svg(root, theme, **kwargs), encoding="utf-8")
    return out_path
