"""Layout: text measurement and node positioning strategies."""
from .engine import LAYOUT_TYPES, LayoutConfig, LayoutEngine, content_bounds, has_valid_positions
from .measure import (
    MIN_NODE_HEIGHT,
    MIN_NODE_WIDTH,
    calculate_node_size,
    get_font,
    measure_text,
    style_font,
    wrap_text,
)

__all__ = [
    "LAYOUT_TYPES",
    "LayoutConfig",
    "LayoutEngine",
    "content_bounds",
    "has_valid_positions",
    "MIN_NODE_HEIGHT",
    "MIN_NODE_WIDTH",
    "calculate_node_size",
    "get_font",
    "measure_text",
    "style_font",
    "wrap_text",
]
