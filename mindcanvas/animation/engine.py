"""
Animation engine: interpolates numeric node fields (x, y, width, height,
opacity) over time, driven by a shared tick source.

animate() returns an AnimationHandle that resolves once the target values
are written. Cancelled animations leave their handle abandoned; its
callbacks never run.
"""
from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, replace
from typing import Callable, Iterable, Optional

from ..model.node import Node, iter_visible
from .easing import Easing, get_easing
from .ticker import TickSource

logger = logging.getLogger(__name__)

ANIMATABLE = ("x", "y", "width", "height", "opacity")
ENTER_KINDS = ("fade", "scale", "slide", "bounce")
EXIT_KINDS = ("fade", "scale", "slide")


@dataclass(frozen=True)
class AnimationConfig:
    enabled: bool = True
    duration: float = 300
    easing: str = "ease-out"
    node_enter: str = "fade"
    node_exit: str = "fade"
    delay: float = 0
    stagger: float = 0


class AnimationHandle:
    """Single-resolution completion handle: pending -> resolved | abandoned."""

    PENDING, RESOLVED, ABANDONED = "pending", "resolved", "abandoned"

    def __init__(self) -> None:
        self.state = self.PENDING
        self._callbacks: list[Callable[["AnimationHandle"], None]] = []
        self._abandon_callbacks: list[Callable[["AnimationHandle"], None]] = []

    @property
    def done(self) -> bool:
        return self.state == self.RESOLVED

    @property
    def abandoned(self) -> bool:
        return self.state == self.ABANDONED

    def add_done_callback(self, callback: Callable[["AnimationHandle"], None]) -> None:
        if self.state == self.RESOLVED:
            callback(self)
        elif self.state == self.PENDING:
            self._callbacks.append(callback)

    def _resolve(self) -> None:
        if self.state != self.PENDING:
            return
        self.state = self.RESOLVED
        callbacks, self._callbacks = self._callbacks, []
        self._abandon_callbacks = []
        for cb in callbacks:
            cb(self)

    def _abandon(self) -> None:
        if self.state != self.PENDING:
            return
        self.state = self.ABANDONED
        self._callbacks = []
        callbacks, self._abandon_callbacks = self._abandon_callbacks, []
        for cb in callbacks:
            cb(self)

    @classmethod
    def resolved(cls) -> "AnimationHandle":
        handle = cls()
        handle._resolve()
        return handle

    @classmethod
    def gather(cls, handles: Iterable["AnimationHandle"]) -> "AnimationHandle":
        """Resolves when all handles resolve; abandoned if any is abandoned."""
        handles = list(handles)
        combined = cls()
        remaining = [len(handles)]
        if not handles:
            combined._resolve()
            return combined

        def one_done(_: AnimationHandle) -> None:
            remaining[0] -= 1
            if remaining[0] == 0:
                combined._resolve()

        for h in handles:
            if h.abandoned:
                combined._abandon()
                return combined
            h._abandon_callbacks.append(lambda _h: combined._abandon())
            h.add_done_callback(one_done)
        return combined


@dataclass
class _Animation:
    key: str
    node: Node
    start_values: dict[str, float]
    targets: dict[str, float]
    start_time: float
    duration: float
    easing: Easing
    handle: AnimationHandle


class AnimationEngine:
    def __init__(
        self,
        ticker: TickSource,
        config: AnimationConfig | None = None,
        on_frame: Optional[Callable[[], None]] = None,
    ) -> None:
        self.ticker = ticker
        self.config = config or AnimationConfig()
        self.on_frame = on_frame
        self._animations: list[_Animation] = []
        self._frame: Optional[int] = None
        self._seq = itertools.count(1)

    @property
    def active_count(self) -> int:
        return len(self._animations)

    @property
    def is_running(self) -> bool:
        return self._frame is not None

    def update_config(self, **changes) -> AnimationConfig:
        self.config = replace(self.config, **changes)
        return self.config

    def animate(
        self,
        node: Node,
        targets: dict[str, float],
        *,
        duration: float | None = None,
        easing: str | Easing | None = None,
        delay: float | None = None,
    ) -> AnimationHandle:
        """Tween node's numeric fields from their current values to targets."""
        unknown = set(targets) - set(ANIMATABLE)
        if unknown:
            raise ValueError(f"Not animatable: {sorted(unknown)}")
        if not self.config.enabled:
            for name, value in targets.items():
                setattr(node, name, value)
            return AnimationHandle.resolved()

        start_values = {}
        for name, value in targets.items():
            current = getattr(node, name)
            start_values[name] = value if current is None else current
        anim = _Animation(
            key=f"{node.id}:{next(self._seq)}",
            node=node,
            start_values=start_values,
            targets=dict(targets),
            start_time=self.ticker.now() + (self.config.delay if delay is None else delay),
            duration=self.config.duration if duration is None else duration,
            easing=get_easing(easing or self.config.easing),
            handle=AnimationHandle(),
        )
        self._animations.append(anim)
        self._ensure_running()
        return anim.handle

    def _ensure_running(self) -> None:
        if self._frame is None and self._animations:
            self._frame = self.ticker.request_frame(self._tick)

    def _tick(self, now: float) -> None:
        self._frame = None
        finished: list[_Animation] = []
        for anim in list(self._animations):
            elapsed = now - anim.start_time
            if anim.duration <= 0:
                progress = 1.0 if elapsed >= 0 else 0.0
            else:
                progress = min(max(elapsed / anim.duration, 0.0), 1.0)
            eased = anim.easing(progress)
            for name, target in anim.targets.items():
                start = anim.start_values[name]
                value = target if progress >= 1 else start + (target - start) * eased
                setattr(anim.node, name, value)
            if progress >= 1:
                finished.append(anim)

        for anim in finished:
            self._animations.remove(anim)
        if self.on_frame is not None:
            self.on_frame()
        for anim in finished:
            anim.handle._resolve()
        self._ensure_running()

    def cancel_node_animations(self, node_id: str) -> int:
        doomed = [a for a in self._animations if a.node.id == node_id]
        for anim in doomed:
            self._animations.remove(anim)
            anim.handle._abandon()
        if not self._animations:
            self._stop()
        return len(doomed)

    def cancel_all(self) -> int:
        doomed, self._animations = self._animations, []
        for anim in doomed:
            anim.handle._abandon()
        self._stop()
        return len(doomed)

    def _stop(self) -> None:
        if self._frame is not None:
            self.ticker.cancel_frame(self._frame)
            self._frame = None

    # presets

    def animate_enter(self, node: Node, kind: str | None = None, delay: float = 0) -> AnimationHandle:
        kind = kind or self.config.node_enter
        if kind == "fade":
            target = node.opacity or 1.0
            node.opacity = 0.0
            return self.animate(node, {"opacity": target}, delay=delay)
        if not node.has_geometry:
            return AnimationHandle.resolved()
        if kind == "scale":
            w, h = node.width, node.height
            node.width, node.height = 0.0, 0.0
            return self.animate(node, {"width": w, "height": h}, delay=delay, easing="ease-out")
        if kind == "slide":
            x = node.x
            node.x = x - 100
            return self.animate(node, {"x": x}, delay=delay)
        if kind == "bounce":
            y = node.y
            node.y = y - 50
            return self.animate(node, {"y": y}, delay=delay, easing="bounce")
        logger.warning("Unknown enter animation %r", kind)
        return AnimationHandle.resolved()

    def animate_exit(self, node: Node, kind: str | None = None) -> AnimationHandle:
        kind = kind or self.config.node_exit
        if kind == "fade":
            return self.animate(node, {"opacity": 0.0})
        if not node.has_geometry:
            return AnimationHandle.resolved()
        if kind == "scale":
            return self.animate(node, {"width": 0.0, "height": 0.0}, easing="ease-in")
        if kind == "slide":
            return self.animate(node, {"x": node.x + 100})
        logger.warning("Unknown exit animation %r", kind)
        return AnimationHandle.resolved()

    def animate_move(self, node: Node, x: float, y: float) -> AnimationHandle:
        return self.animate(node, {"x": x, "y": y})

    def animate_tree(self, root: Node, kind: str = "enter") -> AnimationHandle:
        """Enter / exit preset over visible nodes, staggered by traversal index."""
        handles = []
        for index, (node, _) in enumerate(iter_visible(root)):
            if kind == "enter":
                handles.append(self.animate_enter(node, delay=index * self.config.stagger))
            else:
                handles.append(self.animate_exit(node))
        return AnimationHandle.gather(handles)
