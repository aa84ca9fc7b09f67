"""
Export dispatch: ExportConfig -> encoded document (bytes or text) or file.
Unknown formats raise UnsupportedFormatError before anything is produced.
"""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..errors import UnsupportedFormatError
from ..model.node import Node
from ..model.theme import Theme
from ..render.engine import RenderEngine
from .svg import build_svg, render_to_svg
from .text import to_json, to_markdown
from .xmind import build_xmind

logger = logging.getLogger(__name__)

IMAGE_FORMATS = {"png": "PNG", "jpg": "JPEG", "jpeg": "JPEG"}
TEXT_FORMATS = ("json", "markdown", "svg")
FILE_ONLY_FORMATS = ("xmind",)
EXPORT_FORMATS = tuple(IMAGE_FORMATS) + TEXT_FORMATS + FILE_ONLY_FORMATS
EXTENSIONS = {"png": ".png", "jpg": ".jpg", "jpeg": ".jpg", "json": ".json",
              "markdown": ".md", "svg": ".svg", "xmind": ".xmind"}


@dataclass(frozen=True)
class ExportConfig:
    format: str
    quality: float = 1.0
    background_color: Optional[str] = None
    padding: float = 50
    scale: float = 2.0


def check_format(fmt: str) -> str:
    fmt = (fmt or "").lower()
    if fmt not in EXPORT_FORMATS:
        raise UnsupportedFormatError(fmt)
    return fmt


def export_document(root: Node, theme: Theme | None, renderer: RenderEngine,
                    config: ExportConfig) -> Union[bytes, str]:
    """Encoded export: bytes for images, str for text formats."""
    fmt = check_format(config.format)
    if fmt in FILE_ONLY_FORMATS:
        raise UnsupportedFormatError(f"{fmt} (file export only)")
    if fmt == "json":
        return to_json(root)
    if fmt == "markdown":
        return to_markdown(root)
    if fmt == "svg":
        return build_svg(root, theme, padding=config.padding, background=config.background_color)

    image = renderer.export_image(root, theme, scale=config.scale, padding=config.padding,
                                  background=config.background_color)
    buf = io.BytesIO()
    pil_format = IMAGE_FORMATS[fmt]
    if pil_format == "JPEG":
        quality = max(1, min(95, int(round(config.quality * 100))))
        image.convert("RGB").save(buf, pil_format, quality=quality)
    else:
        image.save(buf, pil_format)
    return buf.getvalue()


def export_to_file(root: Node, theme: Theme | None, renderer: RenderEngine,
                   config: ExportConfig, out_path: Path | str) -> Path:
    fmt = check_format(config.format)
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "xmind":
        return build_xmind(root, out_path, sheet_title=root.label or "Mind Map")
    if fmt == "svg":
        render_to_svg(root, out_path, theme, padding=config.padding, background=config.background_color)
        logger.info("Exported %s -> %s", fmt, out_path)
        return out_path
    data = export_document(root, theme, renderer, config)
    if isinstance(data, bytes):
        out_path.write_bytes(data)
    else:
        out_path.write_text(data, encoding="utf-8")
    logger.info("Exported %s -> %s", fmt, out_path)
    return out_path
