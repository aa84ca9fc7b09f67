"""
Themes: per-depth node styles, edge style, background and palette.
ThemeRegistry holds the preset themes plus anything registered at runtime.
"""
from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from ..errors import ThemeParseError
from .style import DEFAULT_EDGE_STYLE, DEFAULT_NODE_STYLE, EdgeStyle, NodeStyle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Theme:
    name: str
    background_color: str = "#f5f5f5"
    font_family: str = "Arial, sans-serif"
    node_styles: dict[str, NodeStyle] = field(default_factory=dict)
    edge_style: EdgeStyle = field(default_factory=EdgeStyle)
    color_scheme: tuple[str, ...] = ()

    def style_for_depth(self, depth: int) -> Optional[NodeStyle]:
        """Theme style for a depth: 'root' at 0, 'levelN' below, else 'default'."""
        key = "root" if depth == 0 else f"level{depth}"
        return self.node_styles.get(key) or self.node_styles.get("default")

    def color_for_branch(self, index: int) -> Optional[str]:
        if not self.color_scheme:
            return None
        return self.color_scheme[index % len(self.color_scheme)]

    @classmethod
    def from_dict(cls, data: Any) -> "Theme":
        """Parse the JSON theme shape ({name, global, nodeStyles, edgeStyle, colorScheme})."""
        if not isinstance(data, dict):
            raise ThemeParseError(f"Theme must be a mapping, got {type(data).__name__}")
        glob = data.get("global") or {}
        if not isinstance(glob, dict):
            raise ThemeParseError("Theme 'global' must be a mapping")
        raw_styles = data.get("nodeStyles") or {}
        if not isinstance(raw_styles, dict):
            raise ThemeParseError("Theme 'nodeStyles' must be a mapping")
        node_styles = {k: NodeStyle.from_dict(v) for k, v in raw_styles.items() if isinstance(v, dict)}
        return cls(
            name=str(data.get("name", "custom")),
            background_color=glob.get("backgroundColor", "#f5f5f5"),
            font_family=glob.get("fontFamily", "Arial, sans-serif"),
            node_styles=node_styles,
            edge_style=EdgeStyle.from_dict(data.get("edgeStyle")),
            color_scheme=tuple(data.get("colorScheme") or ()),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "global": {"backgroundColor": self.background_color, "fontFamily": self.font_family},
            "nodeStyles": {k: v.to_dict() for k, v in self.node_styles.items()},
            "edgeStyle": self.edge_style.to_dict(),
            "colorScheme": list(self.color_scheme),
        }


def theme_from_json(text: str) -> Theme:
    """Decode a theme from JSON text; raises ThemeParseError on malformed input."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ThemeParseError(f"Invalid theme JSON: {e}") from e
    return Theme.from_dict(data)


def resolve_node_style(node_style: Optional[NodeStyle], depth: int, theme: Optional[Theme]) -> NodeStyle:
    """Effective style: defaults <- theme level style <- node override."""
    if theme is None:
        return DEFAULT_NODE_STYLE.merged(node_style)
    return DEFAULT_NODE_STYLE.merged(
        NodeStyle(font_family=theme.font_family),
        theme.style_for_depth(depth),
        node_style,
    )


def resolve_edge_style(theme: Optional[Theme]) -> EdgeStyle:
    if theme is None:
        return DEFAULT_EDGE_STYLE
    return DEFAULT_EDGE_STYLE.merged(theme.edge_style)


def _deep_merge(target: dict[str, Any], source: dict[str, Any]) -> dict[str, Any]:
    for key, value in source.items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_merge(target[key], value)
        else:
            target[key] = copy.deepcopy(value)
    return target


PRESET_THEMES: dict[str, dict[str, Any]] = {
    "default": {
        "name": "Default",
        "global": {"backgroundColor": "#f5f5f5", "fontFamily": "Arial, sans-serif"},
        "nodeStyles": {
            "root": {"backgroundColor": "#4a90e2", "color": "#fff", "fontSize": 18,
                     "fontWeight": "bold", "borderRadius": 8, "padding": [12, 24]},
            "level1": {"backgroundColor": "#7cb342", "color": "#fff", "fontSize": 16,
                       "borderRadius": 6, "padding": [10, 20]},
            "level2": {"backgroundColor": "#ffa726", "color": "#fff", "fontSize": 14,
                       "borderRadius": 4, "padding": [8, 16]},
            "default": {"backgroundColor": "#fff", "color": "#333", "fontSize": 14,
                        "borderColor": "#ddd", "borderWidth": 1, "borderRadius": 4, "padding": [8, 16]},
        },
        "edgeStyle": {"color": "#999", "width": 2, "curve": "bezier"},
        "colorScheme": ["#4a90e2", "#7cb342", "#ffa726", "#ef5350", "#ab47bc", "#26c6da"],
    },
    "dark": {
        "name": "Dark",
        "global": {"backgroundColor": "#1e1e1e", "fontFamily": "Arial, sans-serif"},
        "nodeStyles": {
            "root": {"backgroundColor": "#0d47a1", "color": "#fff", "fontSize": 18,
                     "fontWeight": "bold", "borderRadius": 8, "padding": [12, 24]},
            "level1": {"backgroundColor": "#1565c0", "color": "#fff", "fontSize": 16,
                       "borderRadius": 6, "padding": [10, 20]},
            "level2": {"backgroundColor": "#1976d2", "color": "#fff", "fontSize": 14,
                       "borderRadius": 4, "padding": [8, 16]},
            "default": {"backgroundColor": "#2d2d2d", "color": "#e0e0e0", "fontSize": 14,
                        "borderColor": "#444", "borderWidth": 1, "borderRadius": 4, "padding": [8, 16]},
        },
        "edgeStyle": {"color": "#666", "width": 2, "curve": "bezier"},
        "colorScheme": ["#0d47a1", "#1565c0", "#1976d2", "#1e88e5", "#2196f3", "#42a5f5"],
    },
    "colorful": {
        "name": "Colorful",
        "global": {"backgroundColor": "#fafafa", "fontFamily": "Arial, sans-serif"},
        "nodeStyles": {
            "root": {"backgroundColor": "#e91e63", "color": "#fff", "fontSize": 18,
                     "fontWeight": "bold", "borderRadius": 20, "padding": [12, 24]},
            "level1": {"backgroundColor": "#9c27b0", "color": "#fff", "fontSize": 16,
                       "borderRadius": 16, "padding": [10, 20]},
            "level2": {"backgroundColor": "#3f51b5", "color": "#fff", "fontSize": 14,
                       "borderRadius": 12, "padding": [8, 16]},
            "default": {"backgroundColor": "#fff", "color": "#333", "fontSize": 14,
                        "borderColor": "#e0e0e0", "borderWidth": 2, "borderRadius": 8, "padding": [8, 16]},
        },
        "edgeStyle": {"color": "#bdbdbd", "width": 3, "curve": "bezier"},
        "colorScheme": ["#e91e63", "#9c27b0", "#3f51b5", "#2196f3", "#00bcd4", "#009688"],
    },
    "minimal": {
        "name": "Minimal",
        "global": {"backgroundColor": "#fff", "fontFamily": "Arial, sans-serif"},
        "nodeStyles": {
            "root": {"backgroundColor": "transparent", "color": "#000", "fontSize": 20, "fontWeight": "bold",
                     "borderColor": "#000", "borderWidth": 2, "borderRadius": 0, "padding": [10, 20]},
            "level1": {"backgroundColor": "transparent", "color": "#333", "fontSize": 16,
                       "borderColor": "#333", "borderWidth": 1, "borderRadius": 0, "padding": [8, 16]},
            "default": {"backgroundColor": "transparent", "color": "#666", "fontSize": 14,
                        "borderColor": "#999", "borderWidth": 1, "borderRadius": 0, "padding": [6, 12]},
        },
        "edgeStyle": {"color": "#000", "width": 1, "curve": "straight"},
        "colorScheme": ["#000", "#333", "#666", "#999", "#bbb", "#ddd"],
    },
}


class ThemeRegistry:
    """Id-keyed theme store preloaded with the preset themes."""

    def __init__(self) -> None:
        self._themes: dict[str, Theme] = {
            theme_id: Theme.from_dict(data) for theme_id, data in PRESET_THEMES.items()
        }

    def register(self, theme_id: str, theme: Theme | dict[str, Any]) -> Theme:
        if not isinstance(theme, Theme):
            theme = Theme.from_dict(theme)
        self._themes[theme_id] = theme
        logger.debug("Registered theme %s", theme_id)
        return theme

    def get(self, theme_id: str) -> Optional[Theme]:
        return self._themes.get(theme_id)

    def remove(self, theme_id: str) -> bool:
        return self._themes.pop(theme_id, None) is not None

    def ids(self) -> list[str]:
        return list(self._themes)

    def extend(self, base_id: str, overrides: dict[str, Any]) -> Theme:
        """New theme = base theme deep-merged with overrides (JSON shape). Not registered."""
        base = self._themes.get(base_id)
        if base is None:
            raise KeyError(f"Theme {base_id} not found")
        return Theme.from_dict(_deep_merge(base.to_dict(), overrides))

    def __contains__(self, theme_id: object) -> bool:
        return theme_id in self._themes
