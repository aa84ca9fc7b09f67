"""
View transform shared by render and event handling.
screen = surface_size / 2 + offset + scale * world
"""
from __future__ import annotations

from dataclasses import dataclass

MIN_ZOOM = 0.1
MAX_ZOOM = 5.0


@dataclass
class Transform:
    offset_x: float = 0.0
    offset_y: float = 0.0
    scale: float = 1.0
    min_zoom: float = MIN_ZOOM
    max_zoom: float = MAX_ZOOM

    def clamp_scale(self, scale: float) -> float:
        return max(self.min_zoom, min(self.max_zoom, scale))

    def to_world(self, sx: float, sy: float, width: float, height: float) -> tuple[float, float]:
        """Surface pixel -> world coordinates for a surface of the given size."""
        return (
            (sx - width / 2 - self.offset_x) / self.scale,
            (sy - height / 2 - self.offset_y) / self.scale,
        )

    def to_screen(self, wx: float, wy: float, width: float, height: float) -> tuple[float, float]:
        return (
            width / 2 + self.offset_x + wx * self.scale,
            height / 2 + self.offset_y + wy * self.scale,
        )

    def zoom_at(self, factor: float, sx: float, sy: float, width: float, height: float) -> float:
        """Multiply scale by factor (clamped), keeping the world point under (sx, sy) fixed."""
        wx, wy = self.to_world(sx, sy, width, height)
        self.scale = self.clamp_scale(self.scale * factor)
        self.offset_x = sx - width / 2 - wx * self.scale
        self.offset_y = sy - height / 2 - wy * self.scale
        return self.scale

    def pan(self, dx: float, dy: float) -> None:
        self.offset_x += dx
        self.offset_y += dy

    def reset(self) -> None:
        self.offset_x = 0.0
        self.offset_y = 0.0
        self.scale = 1.0

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.offset_x, self.offset_y, self.scale)
