"""Data model: nodes, styles, themes, view transform."""
from .node import (
    Node,
    coerce_tree,
    descendants,
    find_node,
    find_parent,
    find_path,
    generate_id,
    iter_nodes,
    iter_visible,
    leaf_nodes,
    node_depth,
    traverse,
    tree_depth,
    tree_width,
)
from .style import DEFAULT_EDGE_STYLE, DEFAULT_NODE_STYLE, EdgeStyle, NodeStyle, normalize_padding
from .theme import PRESET_THEMES, Theme, ThemeRegistry, resolve_edge_style, resolve_node_style, theme_from_json
from .transform import Transform

__all__ = [
    "Node",
    "coerce_tree",
    "descendants",
    "find_node",
    "find_parent",
    "find_path",
    "generate_id",
    "iter_nodes",
    "iter_visible",
    "leaf_nodes",
    "node_depth",
    "traverse",
    "tree_depth",
    "tree_width",
    "DEFAULT_EDGE_STYLE",
    "DEFAULT_NODE_STYLE",
    "EdgeStyle",
    "NodeStyle",
    "normalize_padding",
    "PRESET_THEMES",
    "Theme",
    "ThemeRegistry",
    "resolve_edge_style",
    "resolve_node_style",
    "theme_from_json",
    "Transform",
]
