"""mindcanvas: tree layout, Pillow rendering, interaction and animation for mind maps."""
from .animation import AnimationConfig, AnimationEngine, AnimationHandle, ManualTickSource, RealtimeTickSource
from .core import MindMap
from .errors import ConfigurationError, MindCanvasError, ThemeParseError, UnsupportedFormatError
from .events import EventManager, EventType, InteractionConfig, KeyEvent, PointerEvent, WheelEvent
from .export import ExportConfig
from .layout import LayoutConfig, LayoutEngine
from .model import EdgeStyle, Node, NodeStyle, Theme, ThemeRegistry, Transform
from .render import RenderConfig, RenderEngine

__version__ = "0.1.0"

__all__ = [
    "AnimationConfig",
    "AnimationEngine",
    "AnimationHandle",
    "ManualTickSource",
    "RealtimeTickSource",
    "MindMap",
    "ConfigurationError",
    "MindCanvasError",
    "ThemeParseError",
    "UnsupportedFormatError",
    "EventManager",
    "EventType",
    "InteractionConfig",
    "KeyEvent",
    "PointerEvent",
    "WheelEvent",
    "ExportConfig",
    "LayoutConfig",
    "LayoutEngine",
    "EdgeStyle",
    "Node",
    "NodeStyle",
    "Theme",
    "ThemeRegistry",
    "Transform",
    "RenderConfig",
    "RenderEngine",
]
