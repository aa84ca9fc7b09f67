"""Events: raw input -> hit-tested domain events."""
from .manager import SHORTCUTS, EventManager, InteractionConfig
from .types import (
    PRIMARY_BUTTON,
    SECONDARY_BUTTON,
    DiagramEvent,
    EventType,
    KeyEvent,
    PointerEvent,
    WheelEvent,
)

__all__ = [
    "SHORTCUTS",
    "EventManager",
    "InteractionConfig",
    "PRIMARY_BUTTON",
    "SECONDARY_BUTTON",
    "DiagramEvent",
    "EventType",
    "KeyEvent",
    "PointerEvent",
    "WheelEvent",
]
