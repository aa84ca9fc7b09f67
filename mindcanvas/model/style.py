"""
Node and edge style records. Every field is optional; effective styles are
built by an ordered merge: defaults <- theme level <- node override.
"""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Sequence, Union

Padding = Union[float, Sequence[float]]

SHAPES = ("rect", "rounded", "circle", "ellipse", "diamond", "hexagon")
BORDER_STYLES = ("solid", "dashed", "dotted")
CURVES = ("straight", "bezier", "polyline", "arc")

# JSON (camelCase) key -> field name
_NODE_STYLE_KEYS = {
    "backgroundColor": "background_color",
    "borderColor": "border_color",
    "borderWidth": "border_width",
    "borderRadius": "border_radius",
    "borderStyle": "border_style",
    "color": "color",
    "fontSize": "font_size",
    "fontFamily": "font_family",
    "fontWeight": "font_weight",
    "padding": "padding",
    "shape": "shape",
    "shadowColor": "shadow_color",
    "shadowBlur": "shadow_blur",
    "shadowOffsetX": "shadow_offset_x",
    "shadowOffsetY": "shadow_offset_y",
}

_EDGE_STYLE_KEYS = {
    "color": "color",
    "width": "width",
    "style": "line_style",
    "lineStyle": "line_style",
    "curve": "curve",
    "arrow": "arrow",
    "arrowSize": "arrow_size",
}


def normalize_padding(padding: Padding | None) -> tuple[float, float, float, float]:
    """Expand a padding value to (top, right, bottom, left).

    Accepts a single number, [vertical, horizontal] or [top, right, bottom, left].
    """
    if padding is None:
        return (0.0, 0.0, 0.0, 0.0)
    if isinstance(padding, (int, float)):
        p = float(padding)
        return (p, p, p, p)
    values = [float(v) for v in padding]
    if len(values) == 1:
        return (values[0],) * 4
    if len(values) == 2:
        v, h = values
        return (v, h, v, h)
    if len(values) == 3:
        t, h, b = values
        return (t, h, b, h)
    return (values[0], values[1], values[2], values[3])


def _from_mapping(cls: type, keys: dict[str, str], data: dict[str, Any] | None) -> Any:
    if not data:
        return cls()
    names = {f.name for f in fields(cls)}
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        name = keys.get(key, key)
        if name in names and value is not None:
            if name == "padding" and isinstance(value, list):
                value = tuple(value)
            kwargs[name] = value
    return cls(**kwargs)


def _to_mapping(obj: Any, keys: dict[str, str]) -> dict[str, Any]:
    reverse: dict[str, str] = {}
    for key, name in keys.items():
        reverse.setdefault(name, key)
    out: dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if value is None:
            continue
        if isinstance(value, tuple):
            value = list(value)
        out[reverse.get(f.name, f.name)] = value
    return out


def _merge(base: Any, overrides: Sequence[Any]) -> Any:
    result = base
    for override in overrides:
        if override is None:
            continue
        changes = {
            f.name: getattr(override, f.name)
            for f in fields(override)
            if getattr(override, f.name) is not None
        }
        if changes:
            result = replace(result, **changes)
    return result


@dataclass(frozen=True)
class NodeStyle:
    background_color: str | None = None
    border_color: str | None = None
    border_width: float | None = None
    border_radius: float | None = None
    border_style: str | None = None
    color: str | None = None
    font_size: float | None = None
    font_family: str | None = None
    font_weight: str | None = None
    padding: Padding | None = None
    shape: str | None = None
    shadow_color: str | None = None
    shadow_blur: float | None = None
    shadow_offset_x: float | None = None
    shadow_offset_y: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "NodeStyle":
        """Build from a JSON mapping; camelCase and snake_case keys both work."""
        return _from_mapping(cls, _NODE_STYLE_KEYS, data)

    def to_dict(self) -> dict[str, Any]:
        return _to_mapping(self, _NODE_STYLE_KEYS)

    def merged(self, *overrides: "NodeStyle | None") -> "NodeStyle":
        """Return a copy where each non-None field of later overrides wins."""
        return _merge(self, overrides)

    @property
    def padding_box(self) -> tuple[float, float, float, float]:
        return normalize_padding(self.padding)


@dataclass(frozen=True)
class EdgeStyle:
    color: str | None = None
    width: float | None = None
    line_style: str | None = None
    curve: str | None = None
    arrow: bool | None = None
    arrow_size: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "EdgeStyle":
        return _from_mapping(cls, _EDGE_STYLE_KEYS, data)

    def to_dict(self) -> dict[str, Any]:
        return _to_mapping(self, _EDGE_STYLE_KEYS)

    def merged(self, *overrides: "EdgeStyle | None") -> "EdgeStyle":
        return _merge(self, overrides)


DEFAULT_NODE_STYLE = NodeStyle(
    background_color="#fff",
    border_color="#ddd",
    border_width=2,
    border_radius=4,
    border_style="solid",
    color="#333",
    font_size=14,
    font_family="Arial, sans-serif",
    font_weight="normal",
    padding=(8, 16),
    shape="rounded",
    shadow_color="rgba(0,0,0,0.2)",
    shadow_blur=10,
    shadow_offset_x=0,
    shadow_offset_y=2,
)

DEFAULT_EDGE_STYLE = EdgeStyle(
    color="#999",
    width=2,
    line_style="solid",
    curve="bezier",
    arrow=False,
    arrow_size=8,
)
