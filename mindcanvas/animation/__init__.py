"""Animation: easing curves, tick sources, tweening engine."""
from .easing import EASINGS, get_easing
from .engine import ANIMATABLE, AnimationConfig, AnimationEngine, AnimationHandle
from .ticker import ManualTickSource, RealtimeTickSource, TickSource

__all__ = [
    "EASINGS",
    "get_easing",
    "ANIMATABLE",
    "AnimationConfig",
    "AnimationEngine",
    "AnimationHandle",
    "ManualTickSource",
    "RealtimeTickSource",
    "TickSource",
]
