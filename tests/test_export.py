"""Tests for JSON, Markdown, SVG and raster export."""
from __future__ import annotations

import io
import json
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest
from PIL import Image

from mindcanvas import ExportConfig, UnsupportedFormatError
from mindcanvas.export import EXPORT_FORMATS, EXTENSIONS, build_svg, check_format, render_to_svg, to_json, to_markdown
from mindcanvas.model import Node, ThemeRegistry


def test_markdown_indents_by_depth(mindmap) -> None:
    """One bullet per node, two spaces per level, collapsed branches included."""
    mindmap.toggle_collapse("b")
    assert mindmap.export("markdown") == (
        "- Root\n"
        "  - Alpha\n"
        "  - Beta\n"
        "    - Beta one\n"
        "    - Beta two\n"
        "  - Gamma\n"
    )


def test_markdown_flattens_multiline_labels() -> None:
    root = Node.from_dict({"id": "r", "label": "two\nlines"})
    assert to_markdown(root) == "- two lines\n"


def test_json_export_is_the_tree(mindmap, small_tree) -> None:
    data = json.loads(mindmap.export(ExportConfig(format="json")))
    assert data["id"] == "root"
    assert [c["id"] for c in data["children"]] == ["a", "b", "c"]
    assert "x" in data and "width" in data
    again = Node.from_dict(data)
    assert json.loads(to_json(again)) == data


def test_png_export_decodes(mindmap) -> None:
    data = mindmap.export(ExportConfig(format="png", scale=1.0, padding=10))
    img = Image.open(io.BytesIO(data))
    assert img.format == "PNG"
    assert img.mode == "RGBA"
    assert img.getpixel((1, 1))[:3] == (245, 245, 245)


def test_jpeg_export_uses_background_override(mindmap) -> None:
    data = mindmap.export(ExportConfig(format="jpeg", quality=0.5, background_color="#000000", scale=1.0))
    img = Image.open(io.BytesIO(data))
    assert img.format == "JPEG"
    r, g, b = img.getpixel((2, 2))
    assert max(r, g, b) < 16


def test_export_scale_controls_resolution(mindmap) -> None:
    one = Image.open(io.BytesIO(mindmap.export(ExportConfig(format="png", scale=1.0))))
    two = Image.open(io.BytesIO(mindmap.export(ExportConfig(format="png", scale=2.0))))
    assert two.size[0] == pytest.approx(one.size[0] * 2, abs=2)
    assert two.size[1] == pytest.approx(one.size[1] * 2, abs=2)


def test_export_does_not_touch_live_view(mindmap) -> None:
    before = mindmap.transform.as_tuple()
    mindmap.export("png")
    assert mindmap.transform.as_tuple() == before


def test_svg_export_is_well_formed(mindmap) -> None:
    mindmap.update_node("a", label="Fish & <chips>")
    text = mindmap.export("svg")
    tree = ET.fromstring(text.encode("utf-8"))
    ns = "{http://www.w3.org/2000/svg}"
    assert tree.tag == f"{ns}svg"
    groups = tree.findall(f".//{ns}g[@class='node']")
    assert {g.get("data-id") for g in groups} == {"root", "a", "b", "b1", "b2", "c"}
    labels = [t.text for t in tree.iter(f"{ns}text")]
    assert "Fish & <chips>" in "".join(labels)


def test_svg_shapes_and_edges() -> None:
    root = Node.from_dict({"id": "r", "label": "R", "children": [
        {"id": "c", "label": "C", "style": {"shape": "circle"}},
        {"id": "d", "label": "D", "style": {"shape": "diamond"}},
    ]})
    from mindcanvas.layout import LayoutConfig, LayoutEngine

    theme = ThemeRegistry().extend("default", {"edgeStyle": {"arrow": True, "curve": "polyline"}})
    LayoutEngine(LayoutConfig(type="tree-right")).layout(root, theme)
    svg = build_svg(root, theme)
    assert "<circle" in svg
    assert svg.count("<polyline") == 2
    assert svg.count('fill="#999"/>') >= 2


def test_unknown_format_raises() -> None:
    with pytest.raises(UnsupportedFormatError):
        check_format("tiff")
    assert check_format("PNG") == "png"
    assert set(EXTENSIONS) == set(EXPORT_FORMATS)


def test_xmind_is_file_only(mindmap) -> None:
    with pytest.raises(UnsupportedFormatError):
        mindmap.export("xmind")


@pytest.mark.parametrize("fmt", ["png", "jpg", "json", "markdown", "svg"])
def test_export_to_file_writes(mindmap, tmp_path: Path, fmt: str) -> None:
    out = mindmap.export_to_file(fmt, tmp_path / "nested" / f"map{EXTENSIONS[fmt]}")
    assert out.is_file()
    assert out.stat().st_size > 0


def test_render_to_svg_writes_nested_file(tmp_path: Path) -> None:
    root = Node.from_dict({"id": "r", "label": "Only"})
    theme = ThemeRegistry().get("dark")
    from mindcanvas.layout import LayoutConfig, LayoutEngine

    LayoutEngine(LayoutConfig()).layout(root, theme)
    out = render_to_svg(root, tmp_path / "deep" / "only.svg", theme)
    assert out == tmp_path / "deep" / "only.svg"
    text = out.read_text(encoding="utf-8")
    assert text.startswith("<?xml") or text.lstrip().startswith("<svg")
    assert "Only" in text
    assert f'fill="{theme.background_color}"' in text
