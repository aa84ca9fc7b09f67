"""
Pillow painter: draws world-space geometry onto an RGBA image through a
viewport (world -> device pixels). Handles colors, dashes, per-node
opacity layers and blurred drop shadows.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from PIL import Image, ImageColor, ImageDraw, ImageFilter

from .geometry import Point, dash_segments

RGBA = tuple[int, int, int, int]

_RGBA_FLOAT = re.compile(r"rgba\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*,\s*([\d.]+)\s*\)$")


def parse_color(value: Optional[str]) -> Optional[RGBA]:
    """CSS-like color -> RGBA tuple; None / 'transparent' -> None."""
    if value is None:
        return None
    value = value.strip()
    if not value or value.lower() in ("transparent", "none"):
        return None
    m = _RGBA_FLOAT.match(value.lower())
    if m:
        r, g, b = (int(m.group(i)) for i in (1, 2, 3))
        a = float(m.group(4))
        return (r, g, b, int(round(a * 255)) if a <= 1 else int(a))
    rgb = ImageColor.getrgb(value)
    return rgb if len(rgb) == 4 else (*rgb, 255)


@dataclass(frozen=True)
class Viewport:
    """px = origin + scale * world; density converts logical pixels to device pixels."""

    origin_x: float
    origin_y: float
    scale: float
    density: float = 1.0

    def point(self, x: float, y: float) -> Point:
        return (self.origin_x + self.scale * x, self.origin_y + self.scale * y)

    def points(self, pts: Iterable[Point]) -> list[Point]:
        return [self.point(x, y) for x, y in pts]

    def px(self, logical: float) -> float:
        """Logical screen pixels -> device pixels (independent of zoom)."""
        return logical * self.density


class Painter:
    def __init__(self, image: Image.Image, viewport: Viewport) -> None:
        self.image = image
        self.viewport = viewport
        self.draw = ImageDraw.Draw(image)

    def clear(self, color: Optional[str]) -> None:
        rgba = parse_color(color) or (0, 0, 0, 0)
        self.draw.rectangle([(0, 0), self.image.size], fill=rgba)

    def fill_polygon(self, world_points: list[Point], color: Optional[str]) -> None:
        rgba = parse_color(color)
        if rgba is None or len(world_points) < 3:
            return
        self.draw.polygon(self.viewport.points(world_points), fill=rgba)

    def stroke(
        self,
        world_points: list[Point],
        color: Optional[str],
        width: float,
        *,
        closed: bool = False,
        line_style: str = "solid",
    ) -> None:
        """Stroke a polyline; width and dash lengths are logical pixels, constant under zoom."""
        rgba = parse_color(color)
        if rgba is None or width <= 0 or len(world_points) < 2:
            return
        pts = self.viewport.points(world_points)
        if closed:
            pts = pts + [pts[0]]
        w = max(1, int(round(self.viewport.px(width))))
        if line_style in ("dashed", "dotted"):
            on = 5 if line_style == "dashed" else 2
            pieces = dash_segments(pts, (self.viewport.px(on), self.viewport.px(on)))
        else:
            pieces = [pts]
        for piece in pieces:
            self.draw.line(piece, fill=rgba, width=w, joint="curve")

    def circle(self, center: Point, radius: float, fill: Optional[str] = None, outline: Optional[str] = None,
               width: float = 1) -> None:
        cx, cy = self.viewport.point(*center)
        r = radius * self.viewport.scale
        self.draw.ellipse(
            [(cx - r, cy - r), (cx + r, cy + r)],
            fill=parse_color(fill),
            outline=parse_color(outline),
            width=max(1, int(round(self.viewport.px(width)))),
        )

    def text_lines(self, lines: list[str], center: Point, font: Any, line_height: float, color: Optional[str]) -> None:
        """Center a block of lines on center; line_height in world units."""
        rgba = parse_color(color)
        if rgba is None:
            return
        cx, cy = self.viewport.point(*center)
        step = line_height * self.viewport.scale
        top = cy - step * len(lines) / 2 + step / 2
        for i, line in enumerate(lines):
            if not line:
                continue
            left, upper, right, lower = self.draw.textbbox((0, 0), line, font=font)
            y = top + i * step
            self.draw.text((cx - (right - left) / 2 - left, y - (upper + lower) / 2), line, fill=rgba, font=font)

    def layer(self) -> "Painter":
        """Blank transparent painter the size of this image, same viewport."""
        return Painter(Image.new("RGBA", self.image.size, (0, 0, 0, 0)), self.viewport)

    def composite(self, layer: "Painter", opacity: float = 1.0) -> None:
        img = layer.image
        if opacity < 1.0:
            alpha = img.getchannel("A").point(lambda a: int(a * max(0.0, opacity)))
            img.putalpha(alpha)
        self.image.alpha_composite(img)
        self.draw = ImageDraw.Draw(self.image)

    def shadow(self, world_points: list[Point], color: Optional[str], blur: float, offset: Point) -> None:
        """Blurred silhouette of a polygon, offset by logical pixels."""
        rgba = parse_color(color)
        if rgba is None or len(world_points) < 3:
            return
        layer = Image.new("RGBA", self.image.size, (0, 0, 0, 0))
        dx, dy = self.viewport.px(offset[0]), self.viewport.px(offset[1])
        pts = [(x + dx, y + dy) for x, y in self.viewport.points(world_points)]
        ImageDraw.Draw(layer).polygon(pts, fill=rgba)
        if blur > 0:
            layer = layer.filter(ImageFilter.GaussianBlur(self.viewport.px(blur) / 2))
        self.image.alpha_composite(layer)
        self.draw = ImageDraw.Draw(self.image)
