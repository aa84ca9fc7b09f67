"""
Exceptions raised by mindcanvas. Lookups by unknown node id are not errors:
mutators return False / None instead.
"""
from __future__ import annotations


class MindCanvasError(Exception):
    """Base class for all mindcanvas errors."""


class ConfigurationError(MindCanvasError):
    """Invalid construction input (e.g. a mount target that is not a surface)."""


class UnsupportedFormatError(MindCanvasError, ValueError):
    """Export requested in a format the exporter does not know."""

    def __init__(self, fmt: str) -> None:
        super().__init__(f"Unsupported export format: {fmt!r}")
        self.format = fmt


class ThemeParseError(MindCanvasError, ValueError):
    """Theme or config JSON that cannot be decoded into a mapping."""
