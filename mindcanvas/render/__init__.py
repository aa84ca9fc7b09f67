"""Render: Pillow raster painter, shape and edge geometry."""
from .canvas import Painter, Viewport, parse_color
from .engine import RenderConfig, RenderEngine
from .geometry import (
    arrow_head,
    contains_point,
    dash_segments,
    edge_anchor,
    edge_endpoints,
    edge_path,
    indicator_center,
    node_outline,
    shape_outline,
)

__all__ = [
    "Painter",
    "Viewport",
    "parse_color",
    "RenderConfig",
    "RenderEngine",
    "arrow_head",
    "contains_point",
    "dash_segments",
    "edge_anchor",
    "edge_endpoints",
    "edge_path",
    "indicator_center",
    "node_outline",
    "shape_outline",
]
