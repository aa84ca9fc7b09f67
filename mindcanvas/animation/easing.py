"""Easing curves mapping progress in [0, 1] to eased progress."""
from __future__ import annotations

import math
from typing import Callable

Easing = Callable[[float], float]


def linear(t: float) -> float:
    return t


def ease_in(t: float) -> float:
    return t * t


def ease_out(t: float) -> float:
    return t * (2 - t)


def ease_in_out(t: float) -> float:
    return 2 * t * t if t < 0.5 else -1 + (4 - 2 * t) * t


def bounce(t: float) -> float:
    if t < 1 / 2.75:
        return 7.5625 * t * t
    if t < 2 / 2.75:
        t -= 1.5 / 2.75
        return 7.5625 * t * t + 0.75
    if t < 2.5 / 2.75:
        t -= 2.25 / 2.75
        return 7.5625 * t * t + 0.9375
    t -= 2.625 / 2.75
    return 7.5625 * t * t + 0.984375


def elastic(t: float) -> float:
    if t in (0, 1):
        return t
    return -math.pow(2, 10 * (t - 1)) * math.sin((t - 1.1) * 5 * math.pi)


EASINGS: dict[str, Easing] = {
    "linear": linear,
    "ease": ease_in_out,
    "ease-in": ease_in,
    "ease-out": ease_out,
    "ease-in-out": ease_in_out,
    "bounce": bounce,
    "elastic": elastic,
}


def get_easing(name: str | Easing | None) -> Easing:
    """Look up an easing by name (callables pass through); unknown names are linear."""
    if callable(name):
        return name
    return EASINGS.get(name or "linear", linear)
