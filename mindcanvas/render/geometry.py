"""
Shape outlines, edge anchors, edge curves and arrowheads as point lists
in world units. Shared by the raster painter, the SVG exporter and hit tests.
"""
from __future__ import annotations

import math
from typing import Iterable

from ..model.node import Node

Point = tuple[float, float]

INDICATOR_OFFSET = 8
INDICATOR_SIZE = 12
SELECTION_PADDING = 4
ARC_SEGMENTS = 8
CURVE_SEGMENTS = 24


def _ellipse_points(cx: float, cy: float, rx: float, ry: float, segments: int = 48) -> list[Point]:
    return [
        (cx + rx * math.cos(2 * math.pi * i / segments), cy + ry * math.sin(2 * math.pi * i / segments))
        for i in range(segments)
    ]


def _quad(p0: Point, p1: Point, p2: Point, segments: int = ARC_SEGMENTS) -> list[Point]:
    out = []
    for i in range(1, segments + 1):
        t = i / segments
        a, b, c = (1 - t) ** 2, 2 * (1 - t) * t, t * t
        out.append((a * p0[0] + b * p1[0] + c * p2[0], a * p0[1] + b * p1[1] + c * p2[1]))
    return out


def _rounded_rect(x: float, y: float, w: float, h: float, r: float) -> list[Point]:
    r = max(0.0, min(r, w / 2, h / 2))
    if r == 0:
        return [(x, y), (x + w, y), (x + w, y + h), (x, y + h)]
    pts: list[Point] = [(x + r, y), (x + w - r, y)]
    pts += _quad((x + w - r, y), (x + w, y), (x + w, y + r))
    pts.append((x + w, y + h - r))
    pts += _quad((x + w, y + h - r), (x + w, y + h), (x + w - r, y + h))
    pts.append((x + r, y + h))
    pts += _quad((x + r, y + h), (x, y + h), (x, y + h - r))
    pts.append((x, y + r))
    pts += _quad((x, y + r), (x, y), (x + r, y))[:-1]
    return pts


def shape_outline(shape: str, cx: float, cy: float, width: float, height: float, radius: float = 4) -> list[Point]:
    """Closed outline (first point not repeated) of a shape centered at (cx, cy)."""
    x, y = cx - width / 2, cy - height / 2
    if shape == "rect":
        return [(x, y), (x + width, y), (x + width, y + height), (x, y + height)]
    if shape == "circle":
        r = min(width, height) / 2
        return _ellipse_points(cx, cy, r, r)
    if shape == "ellipse":
        return _ellipse_points(cx, cy, width / 2, height / 2)
    if shape == "diamond":
        return [(cx, y), (x + width, cy), (cx, y + height), (x, cy)]
    if shape == "hexagon":
        q = width / 4
        return [(x + q, y), (x + width - q, y), (x + width, cy), (x + width - q, y + height), (x + q, y + height), (x, cy)]
    return _rounded_rect(x, y, width, height, radius)


def node_outline(node: Node, shape: str, radius: float, padding: float = 0) -> list[Point]:
    return shape_outline(shape, node.x, node.y, node.width + 2 * padding, node.height + 2 * padding, radius + padding)


def contains_point(node: Node, x: float, y: float) -> bool:
    """Axis-aligned bounding box containment, centered at node x/y."""
    if not node.has_geometry:
        return False
    return abs(x - node.x) <= node.width / 2 and abs(y - node.y) <= node.height / 2


def indicator_center(node: Node) -> Point:
    return (node.x + node.width / 2 + INDICATOR_OFFSET, node.y)


def edge_anchor(node: Node, tx: float, ty: float) -> Point:
    """Point on node's box facing (tx, ty): left/right face if |dx| > |dy|, else top/bottom."""
    dx, dy = tx - node.x, ty - node.y
    if abs(dx) > abs(dy):
        return (node.x + (node.width / 2 if dx > 0 else -node.width / 2), node.y)
    return (node.x, node.y + (node.height / 2 if dy > 0 else -node.height / 2))


def edge_endpoints(parent: Node, child: Node) -> tuple[Point, Point]:
    return edge_anchor(parent, child.x, child.y), edge_anchor(child, parent.x, parent.y)


def _bezier(start: Point, end: Point, segments: int = CURVE_SEGMENTS) -> list[Point]:
    dx = end[0] - start[0]
    c1 = (start[0] + dx / 2, start[1])
    c2 = (end[0] - dx / 2, end[1])
    out = []
    for i in range(segments + 1):
        t = i / segments
        a, b, c, d = (1 - t) ** 3, 3 * (1 - t) ** 2 * t, 3 * (1 - t) * t * t, t ** 3
        out.append((
            a * start[0] + b * c1[0] + c * c2[0] + d * end[0],
            a * start[1] + b * c1[1] + c * c2[1] + d * end[1],
        ))
    return out


def _arc(start: Point, end: Point, segments: int = CURVE_SEGMENTS) -> list[Point]:
    """Circular arc through start, end and a bulge point distance/4 above the midpoint."""
    dx, dy = end[0] - start[0], end[1] - start[1]
    dist = math.hypot(dx, dy)
    mid = (start[0] + dx / 2, start[1] + dy / 2 - dist / 4)
    (ax, ay), (bx, by), (cx, cy) = start, mid, end
    d = 2 * (ax * (by - cy) + bx * (cy - ay) + cx * (ay - by))
    if abs(d) < 1e-9:
        return [start, end]
    ux = ((ax * ax + ay * ay) * (by - cy) + (bx * bx + by * by) * (cy - ay) + (cx * cx + cy * cy) * (ay - by)) / d
    uy = ((ax * ax + ay * ay) * (cx - bx) + (bx * bx + by * by) * (ax - cx) + (cx * cx + cy * cy) * (bx - ax)) / d
    r = math.hypot(ax - ux, ay - uy)
    a0 = math.atan2(ay - uy, ax - ux)
    am = math.atan2(by - uy, bx - ux)
    a1 = math.atan2(cy - uy, cx - ux)
    # sweep from a0 to a1 in the direction that passes through am
    sweep = (a1 - a0) % (2 * math.pi)
    if (am - a0) % (2 * math.pi) > sweep:
        sweep -= 2 * math.pi
    return [
        (ux + r * math.cos(a0 + sweep * i / segments), uy + r * math.sin(a0 + sweep * i / segments))
        for i in range(segments + 1)
    ]


def edge_path(curve: str, start: Point, end: Point) -> list[Point]:
    """Polyline approximating an edge of the given curve kind."""
    if curve == "bezier":
        return _bezier(start, end)
    if curve == "polyline":
        mid_x = (start[0] + end[0]) / 2
        return [start, (mid_x, start[1]), (mid_x, end[1]), end]
    if curve == "arc":
        return _arc(start, end)
    return [start, end]


def arrow_head(path: list[Point], size: float) -> list[Point]:
    """Triangle at the end of path, oriented along the last segment."""
    end = path[-1]
    prev = next((p for p in reversed(path[:-1]) if p != end), path[0])
    angle = math.atan2(end[1] - prev[1], end[0] - prev[0])
    cos, sin = math.cos(angle), math.sin(angle)

    def rot(px: float, py: float) -> Point:
        return (end[0] + px * cos - py * sin, end[1] + px * sin + py * cos)

    return [end, rot(-size, -size / 2), rot(-size, size / 2)]


def dash_segments(points: Iterable[Point], pattern: tuple[float, float]) -> list[list[Point]]:
    """Split a polyline into 'on' pieces of a dash/gap pattern."""
    on_len, off_len = pattern
    pts = list(points)
    pieces: list[list[Point]] = []
    current: list[Point] = []
    drawing, remaining = True, on_len
    for (x0, y0), (x1, y1) in zip(pts, pts[1:]):
        seg = math.hypot(x1 - x0, y1 - y0)
        pos = 0.0
        if drawing and not current:
            current = [(x0, y0)]
        while seg - pos > remaining:
            pos += remaining
            t = pos / seg
            p = (x0 + (x1 - x0) * t, y0 + (y1 - y0) * t)
            if drawing:
                current.append(p)
                pieces.append(current)
                current = []
            else:
                current = [p]
            drawing = not drawing
            remaining = on_len if drawing else off_len
        remaining -= seg - pos
        if drawing:
            current.append((x1, y1))
    if drawing and len(current) > 1:
        pieces.append(current)
    return pieces


def path_bounds(points: Iterable[Point]) -> tuple[float, float, float, float]:
    pts = list(points)
    xs = [p[0] for p in pts]
    ys = [p[1] for p in pts]
    return (min(xs), min(ys), max(xs), max(ys))
