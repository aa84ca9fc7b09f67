"""Export: PNG/JPEG, JSON, Markdown, SVG and XMind."""
from .exporter import EXPORT_FORMATS, EXTENSIONS, ExportConfig, check_format, export_document, export_to_file
from .svg import build_svg, render_to_svg
from .text import to_json, to_markdown
from .xmind import build_xmind, load_xmind, load_xmind_parent_child_pairs, load_xmind_topic_titles

__all__ = [
    "EXPORT_FORMATS",
    "EXTENSIONS",
    "ExportConfig",
    "check_format",
    "export_document",
    "export_to_file",
    "build_svg",
    "render_to_svg",
    "to_json",
    "to_markdown",
    "build_xmind",
    "load_xmind",
    "load_xmind_parent_child_pairs",
    "load_xmind_topic_titles",
]
